# apps/interviews/models.py
"""
Interview model for the approval and feedback workflow.

Models:
- Interview: one scheduled interview between a company and a candidate,
  carrying the admin approval, candidate response, session outcome and
  feedback sub-states

Rules:
- overall_status is derived from the sub-states by compute_overall_status()
- At most one active interview per application
- Rows are never deleted by the workflow
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
import uuid

User = settings.AUTH_USER_MODEL

SCORE_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


def compute_overall_status(admin_status, candidate_response, session_outcome=''):
    """
    Derive the overall status from the independent sub-states.

    Admin rejection and pending approval dominate everything else; once
    approved, an operator outcome wins over the candidate's response.
    """
    if admin_status == Interview.ADMIN_PENDING:
        return Interview.STATUS_PENDING_APPROVAL
    if admin_status == Interview.ADMIN_REJECTED:
        return Interview.STATUS_REJECTED
    if session_outcome:
        return session_outcome
    if candidate_response == Interview.RESPONSE_REJECTED:
        return Interview.STATUS_CANCELLED
    if candidate_response == Interview.RESPONSE_ACCEPTED:
        return Interview.STATUS_CONFIRMED
    return Interview.STATUS_SCHEDULED


class InterviewQuerySet(models.QuerySet):

    def active(self):
        return self.filter(overall_status__in=Interview.ACTIVE_STATUSES)

    def for_application(self, application):
        return self.filter(application=application)


class Interview(models.Model):
    """
    Interview with full approval and feedback lifecycle.

    Lifecycle:
        pending_approval -> scheduled (admin approves) | rejected (admin rejects)
        scheduled -> confirmed (candidate accepts) | cancelled (candidate declines)
        confirmed -> completed | no_show (operator outcome)
        scheduled/confirmed -> cancelled (operator cancels)

    Feedback:
        company feedback once completed -> admin approves/rejects it
        candidate feedback once, unmoderated
    """

    STATUS_PENDING_APPROVAL = 'pending_approval'
    STATUS_SCHEDULED = 'scheduled'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_NO_SHOW = 'no_show'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = (
        (STATUS_PENDING_APPROVAL, 'Pending Approval'),
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No-Show'),
        (STATUS_REJECTED, 'Rejected'),
    )

    # Active statuses that block another interview for the same application
    ACTIVE_STATUSES = [STATUS_PENDING_APPROVAL, STATUS_SCHEDULED, STATUS_CONFIRMED]

    ADMIN_PENDING = 'pending'
    ADMIN_APPROVED = 'approved'
    ADMIN_REJECTED = 'rejected'

    ADMIN_STATUS_CHOICES = (
        (ADMIN_PENDING, 'Pending'),
        (ADMIN_APPROVED, 'Approved'),
        (ADMIN_REJECTED, 'Rejected'),
    )

    RESPONSE_PENDING = 'pending'
    RESPONSE_ACCEPTED = 'accepted'
    RESPONSE_REJECTED = 'rejected'

    RESPONSE_CHOICES = (
        (RESPONSE_PENDING, 'Pending'),
        (RESPONSE_ACCEPTED, 'Accepted'),
        (RESPONSE_REJECTED, 'Rejected'),
    )

    OUTCOME_NONE = ''
    OUTCOME_COMPLETED = STATUS_COMPLETED
    OUTCOME_NO_SHOW = STATUS_NO_SHOW
    OUTCOME_CANCELLED = STATUS_CANCELLED

    OUTCOME_CHOICES = (
        (OUTCOME_NONE, 'None'),
        (OUTCOME_COMPLETED, 'Completed'),
        (OUTCOME_NO_SHOW, 'No-Show'),
        (OUTCOME_CANCELLED, 'Cancelled'),
    )

    FEEDBACK_PENDING = 'pending'
    FEEDBACK_APPROVED = 'approved'
    FEEDBACK_REJECTED = 'rejected'

    FEEDBACK_STATUS_CHOICES = (
        (FEEDBACK_PENDING, 'Pending'),
        (FEEDBACK_APPROVED, 'Approved'),
        (FEEDBACK_REJECTED, 'Rejected'),
    )

    MODE_PRESENTIAL = 'presential'
    MODE_ONLINE = 'online'
    MODE_PHONE = 'phone'

    MODE_CHOICES = (
        (MODE_PRESENTIAL, 'In person'),
        (MODE_ONLINE, 'Online'),
        (MODE_PHONE, 'Phone'),
    )

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # ---- Participants ----
    candidate = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='candidate_interviews',
        help_text='Candidate being interviewed'
    )
    company = models.ForeignKey(
        'accounts.Company',
        on_delete=models.PROTECT,
        related_name='interviews'
    )
    job = models.ForeignKey(
        'jobs.Job',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='interviews'
    )
    application = models.ForeignKey(
        'jobs.Application',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='interviews'
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_interviews',
        help_text='Company member who proposed the interview'
    )

    # ---- Details ----
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    scheduled_date = models.DateTimeField(db_index=True)
    duration_minutes = models.PositiveIntegerField(
        default=60,
        validators=[MinValueValidator(15), MaxValueValidator(480)],
        help_text='Interview duration in minutes (15-480)'
    )
    mode = models.CharField(max_length=20, choices=MODE_CHOICES)
    location = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text='Required for in-person interviews'
    )
    meeting_url = models.URLField(
        max_length=500,
        blank=True,
        default='',
        help_text='Required for online interviews'
    )
    interviewer_name = models.CharField(max_length=150, blank=True, default='')
    interviewer_email = models.EmailField(blank=True, default='')
    interviewer_phone = models.CharField(max_length=30, blank=True, default='')
    notes = models.TextField(blank=True, default='')

    # ---- Overall status (derived) ----
    overall_status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING_APPROVAL,
        db_index=True
    )

    # ---- Admin approval ----
    admin_status = models.CharField(
        max_length=20,
        choices=ADMIN_STATUS_CHOICES,
        default=ADMIN_PENDING,
        db_index=True
    )
    admin_comments = models.TextField(blank=True, default='')
    admin_approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    admin_approved_at = models.DateTimeField(null=True, blank=True)

    # ---- Candidate response ----
    candidate_response = models.CharField(
        max_length=20,
        choices=RESPONSE_CHOICES,
        default=RESPONSE_PENDING
    )
    candidate_response_at = models.DateTimeField(null=True, blank=True)
    candidate_comments = models.TextField(blank=True, default='')

    # ---- Session outcome (operator) ----
    session_outcome = models.CharField(
        max_length=20,
        choices=OUTCOME_CHOICES,
        blank=True,
        default=OUTCOME_NONE
    )
    outcome_set_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    outcome_set_at = models.DateTimeField(null=True, blank=True)
    outcome_reason = models.TextField(blank=True, default='')

    # ---- Company feedback ----
    feedback_technical = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    feedback_communication = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    feedback_experience = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    feedback_overall = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    feedback_comments = models.TextField(blank=True, default='')
    feedback_submitted_at = models.DateTimeField(null=True, blank=True)
    feedback_submitted_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    # ---- Feedback moderation ----
    feedback_status = models.CharField(
        max_length=20,
        choices=FEEDBACK_STATUS_CHOICES,
        default=FEEDBACK_PENDING,
        db_index=True
    )
    feedback_approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    feedback_approved_at = models.DateTimeField(null=True, blank=True)
    feedback_admin_comments = models.TextField(blank=True, default='')

    # ---- Candidate feedback ----
    candidate_rating = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    candidate_feedback_comments = models.TextField(blank=True, default='')
    candidate_feedback_at = models.DateTimeField(null=True, blank=True)

    reminder_sent_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InterviewQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['company', 'overall_status'], name='interview_company_status_idx'),
            models.Index(fields=['candidate', 'overall_status'], name='interview_candidate_status_idx'),
            models.Index(fields=['overall_status', 'scheduled_date'], name='interview_status_date_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['application'],
                condition=models.Q(overall_status__in=['pending_approval', 'scheduled', 'confirmed']),
                name='unique_active_interview_per_application'
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.candidate} @ {self.company}) [{self.overall_status}]"

    def clean(self):
        errors = {}
        if self.mode == self.MODE_PRESENTIAL and not self.location.strip():
            errors['location'] = 'Location is required for in-person interviews.'
        if self.mode == self.MODE_ONLINE and not self.meeting_url.strip():
            errors['meeting_url'] = 'Meeting URL is required for online interviews.'
        if errors:
            raise ValidationError(errors)

    @property
    def is_active(self):
        return self.overall_status in self.ACTIVE_STATUSES

    @property
    def company_feedback(self):
        if self.feedback_submitted_at is None:
            return None
        return {
            'technical': self.feedback_technical,
            'communication': self.feedback_communication,
            'experience': self.feedback_experience,
            'overall': self.feedback_overall,
            'comments': self.feedback_comments,
            'submitted_at': self.feedback_submitted_at,
        }

    @property
    def candidate_feedback(self):
        if self.candidate_feedback_at is None:
            return None
        return {
            'rating': self.candidate_rating,
            'comments': self.candidate_feedback_comments,
            'submitted_at': self.candidate_feedback_at,
        }

    def state_snapshot(self):
        """Sub-states reported back when a transition is refused."""
        return {
            'overall_status': self.overall_status,
            'admin_status': self.admin_status,
            'candidate_response': self.candidate_response,
            'session_outcome': self.session_outcome,
            'feedback_status': self.feedback_status,
        }
