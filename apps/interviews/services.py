# apps/interviews/services.py
"""
Business logic services for the interview workflow.

Provides:
- InterviewService: every state transition (create, admin review,
  candidate response, operator outcome, feedback) plus reminders
- InterviewQueryService: filtered, paginated listing for dashboards

Every transition checks its preconditions on a freshly loaded row, then
applies the change with one conditional UPDATE so that two concurrent
requests cannot both succeed. Notifications go out after the update;
a failing notification never undoes a transition.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.notifications.models import NotificationPriority, NotificationType, RecipientType
from apps.notifications.services import NotificationDispatcher, NotificationIntent

from . import directory
from .exceptions import DuplicateActiveInterview, InvalidStateTransition, NotFound, PermissionDenied
from .models import Interview, compute_overall_status

logger = logging.getLogger(__name__)

ADMIN_ACTIONS = ('approve', 'reject')
CANDIDATE_RESPONSES = (Interview.RESPONSE_ACCEPTED, Interview.RESPONSE_REJECTED)
OUTCOMES = (Interview.OUTCOME_COMPLETED, Interview.OUTCOME_NO_SHOW, Interview.OUTCOME_CANCELLED)

# Overall statuses an operator outcome may be recorded from
OUTCOME_ALLOWED_FROM = {
    Interview.OUTCOME_COMPLETED: [Interview.STATUS_CONFIRMED],
    Interview.OUTCOME_NO_SHOW: [Interview.STATUS_CONFIRMED],
    Interview.OUTCOME_CANCELLED: [Interview.STATUS_SCHEDULED, Interview.STATUS_CONFIRMED],
}

OPTIONAL_CREATE_FIELDS = (
    'description',
    'duration_minutes',
    'location',
    'meeting_url',
    'interviewer_name',
    'interviewer_email',
    'interviewer_phone',
    'notes',
)


@dataclass
class InterviewResult:
    """An interview together with the records it refers to."""

    interview: Interview
    candidate: Any
    company: Any
    job: Optional[Any] = None
    application: Optional[Any] = None


def format_interview_date(value):
    return timezone.localtime(value).strftime("%B %d, %Y at %I:%M %p")


def validate_score(field, value):
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError({field: 'Must be an integer between 1 and 5.'})
    return value


class InterviewService:
    """Service class for interview workflow transitions."""

    # ========== CREATE ==========

    @classmethod
    def create_interview(cls, actor, candidate_id, company_id, title, scheduled_date, mode,
                         job_id=None, application_id=None, **details):
        """
        Propose an interview on behalf of a company.

        The interview starts in pending_approval and every platform admin
        is notified.

        Raises:
            PermissionDenied: actor does not belong to the company
            NotFound: candidate, company, job or application missing
            ValidationError: invalid details (mode without location/URL, ...)
            DuplicateActiveInterview: the application already has one
        """
        unknown = set(details) - set(OPTIONAL_CREATE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown interview fields: {', '.join(sorted(unknown))}")

        company = directory.find_company(company_id)
        if not actor.is_member_of(company.pk):
            raise PermissionDenied("Only members of the company can schedule its interviews.")

        candidate = directory.find_user(candidate_id, role=actor.ROLE_CANDIDATE)

        application = None
        job = None
        if application_id is not None:
            application = directory.find_application(application_id)
            if application.candidate_id != candidate.pk:
                raise ValidationError({'application_id': 'Application belongs to a different candidate.'})
            job = application.job
        if job_id is not None:
            requested_job = directory.find_job(job_id)
            if job is not None and requested_job.pk != job.pk:
                raise ValidationError({'job_id': 'Job does not match the application.'})
            job = requested_job
        if job is not None and job.company_id != company.pk:
            raise ValidationError({'job_id': 'Job belongs to a different company.'})

        if scheduled_date <= timezone.now():
            raise ValidationError({'scheduled_date': 'Interview must be scheduled in the future.'})

        interview = Interview(
            candidate=candidate,
            company=company,
            job=job,
            application=application,
            created_by=actor,
            title=title,
            scheduled_date=scheduled_date,
            mode=mode,
            **details,
        )
        interview.full_clean(validate_unique=False, validate_constraints=False)

        if application is not None and Interview.objects.active().for_application(application).exists():
            raise DuplicateActiveInterview(application.pk)

        try:
            with transaction.atomic():
                interview.save(force_insert=True)
        except IntegrityError as exc:
            # lost the race against a concurrent create for the same application
            raise DuplicateActiveInterview(application.pk if application else None) from exc

        logger.info(
            f"[INTERVIEW_CREATED] interview={interview.pk} company={company.pk} "
            f"candidate={candidate.pk} application={application.pk if application else None}"
        )

        cls._notify_admins(
            interview,
            NotificationType.INTERVIEW_PENDING_APPROVAL,
            title="Interview awaiting approval",
            message=(
                f"{company.name} scheduled an interview with {candidate.get_display_name()} "
                f"for {format_interview_date(interview.scheduled_date)}. Review it before it is sent."
            ),
            data={
                'candidate_name': candidate.get_display_name(),
                'company_name': company.name,
                'job_title': job.title if job else None,
                'interview_title': interview.title,
                'interview_date': format_interview_date(interview.scheduled_date),
            },
        )

        return cls._result(interview)

    # ========== ADMIN REVIEW ==========

    @classmethod
    def admin_review(cls, interview_id, admin, action, comments=''):
        """
        Approve or reject a pending interview.

        approve: admin_status approved, overall scheduled; the candidate is
        invited and the company told it was approved.
        reject: admin_status rejected, overall rejected; both are told.
        """
        if action not in ADMIN_ACTIONS:
            raise ValidationError({'action': f"Must be one of {', '.join(ADMIN_ACTIONS)}."})

        interview = cls._load(interview_id)
        cls._require_admin(admin)

        attempted = f"admin_{action}"
        if interview.admin_status != Interview.ADMIN_PENDING:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'interview was already reviewed'
            )

        approved = action == 'approve'
        cls._apply(
            interview,
            attempted,
            expected={'admin_status': Interview.ADMIN_PENDING},
            changes={
                'admin_status': Interview.ADMIN_APPROVED if approved else Interview.ADMIN_REJECTED,
                'admin_comments': comments or '',
                'admin_approved_by': admin,
                'admin_approved_at': timezone.now(),
            },
        )

        company_name = interview.company.name
        candidate_name = interview.candidate.get_display_name()
        interview_date = format_interview_date(interview.scheduled_date)

        if approved:
            cls._notify_candidate(
                interview,
                NotificationType.INTERVIEW_SCHEDULED,
                title="New interview invitation",
                message=f"{company_name} invited you to an interview on {interview_date}.",
                data={
                    'company_name': company_name,
                    'job_title': interview.job.title if interview.job else None,
                    'interview_title': interview.title,
                    'interview_date': interview_date,
                    'duration_minutes': interview.duration_minutes,
                    'mode': interview.get_mode_display(),
                    'location': interview.location,
                    'meeting_url': interview.meeting_url,
                    'interviewer_name': interview.interviewer_name,
                },
                priority=NotificationPriority.HIGH,
            )
            cls._notify_company(
                interview,
                NotificationType.INTERVIEW_APPROVED,
                title="Interview approved",
                message=f"Your interview with {candidate_name} was approved and sent to the candidate.",
                data={
                    'candidate_name': candidate_name,
                    'interview_title': interview.title,
                    'interview_date': interview_date,
                    'admin_comments': interview.admin_comments,
                },
            )
        else:
            reason = interview.admin_comments or "No reason provided"
            cls._notify_candidate(
                interview,
                NotificationType.INTERVIEW_NOT_APPROVED,
                title="Interview not approved",
                message=f"The interview proposed by {company_name} was not approved.",
                data={
                    'company_name': company_name,
                    'interview_title': interview.title,
                    'admin_comments': interview.admin_comments,
                },
            )
            cls._notify_company(
                interview,
                NotificationType.INTERVIEW_REJECTED,
                title="Interview rejected",
                message=f"Your interview with {candidate_name} was rejected. Reason: {reason}",
                data={
                    'candidate_name': candidate_name,
                    'interview_title': interview.title,
                    'admin_comments': interview.admin_comments,
                },
            )

        return cls._result(interview)

    # ========== CANDIDATE RESPONSE ==========

    @classmethod
    def candidate_respond(cls, interview_id, candidate, response, comments=''):
        """
        Accept or decline an approved interview.

        accepted -> confirmed, rejected -> cancelled. The company and every
        admin are told.
        """
        if response not in CANDIDATE_RESPONSES:
            raise ValidationError({'response': f"Must be one of {', '.join(CANDIDATE_RESPONSES)}."})

        interview = cls._load(interview_id)
        if interview.candidate_id != candidate.pk:
            raise PermissionDenied("Only the invited candidate can respond to this interview.")

        attempted = 'accept' if response == Interview.RESPONSE_ACCEPTED else 'decline'
        if interview.admin_status != Interview.ADMIN_APPROVED:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'interview has not been approved'
            )
        if interview.candidate_response != Interview.RESPONSE_PENDING:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'candidate already responded'
            )
        if interview.session_outcome:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'interview was already closed'
            )

        cls._apply(
            interview,
            attempted,
            expected={
                'admin_status': Interview.ADMIN_APPROVED,
                'candidate_response': Interview.RESPONSE_PENDING,
                'session_outcome': Interview.OUTCOME_NONE,
            },
            changes={
                'candidate_response': response,
                'candidate_response_at': timezone.now(),
                'candidate_comments': comments or '',
            },
        )

        candidate_name = candidate.get_display_name()
        verb = 'accepted' if response == Interview.RESPONSE_ACCEPTED else 'declined'
        title = "Interview accepted" if response == Interview.RESPONSE_ACCEPTED else "Interview declined"
        data = {
            'candidate_name': candidate_name,
            'company_name': interview.company.name,
            'interview_title': interview.title,
            'interview_date': format_interview_date(interview.scheduled_date),
            'response': response,
            'candidate_comments': interview.candidate_comments,
        }
        message = f"{candidate_name} {verb} the interview \"{interview.title}\"."

        cls._notify_company(interview, NotificationType.INTERVIEW_RESPONSE, title, message, data)
        cls._notify_admins(interview, NotificationType.INTERVIEW_RESPONSE, title, message, data)

        return cls._result(interview)

    # ========== OPERATOR OUTCOME ==========

    @classmethod
    def record_outcome(cls, interview_id, actor, outcome, reason=''):
        """
        Close an interview as completed, no-show or cancelled.

        completed and no_show need a confirmed interview; cancelled is
        allowed while scheduled or confirmed.
        """
        if outcome not in OUTCOMES:
            raise ValidationError({'outcome': f"Must be one of {', '.join(OUTCOMES)}."})

        interview = cls._load(interview_id)
        if not (actor.is_platform_admin or actor.is_member_of(interview.company_id)):
            raise PermissionDenied("Only admins or company members can record the interview outcome.")

        attempted = f"mark_{outcome}"
        allowed_from = OUTCOME_ALLOWED_FROM[outcome]
        if interview.session_outcome or interview.overall_status not in allowed_from:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted,
                f"requires status {' or '.join(allowed_from)}"
            )

        cls._apply(
            interview,
            attempted,
            expected={
                'session_outcome': Interview.OUTCOME_NONE,
                'overall_status__in': allowed_from,
            },
            changes={
                'session_outcome': outcome,
                'outcome_set_by': actor,
                'outcome_set_at': timezone.now(),
                'outcome_reason': reason or '',
            },
        )

        candidate_name = interview.candidate.get_display_name()
        company_name = interview.company.name
        data = {
            'candidate_name': candidate_name,
            'company_name': company_name,
            'interview_title': interview.title,
            'reason': interview.outcome_reason,
        }

        if outcome == Interview.OUTCOME_COMPLETED:
            cls._notify_company(
                interview,
                NotificationType.INTERVIEW_COMPLETED,
                title="Interview completed",
                message=f"Your interview with {candidate_name} is complete. Please submit your feedback.",
                data=data,
            )
            cls._notify_candidate(
                interview,
                NotificationType.INTERVIEW_COMPLETED,
                title="Interview completed",
                message=f"Your interview with {company_name} is complete.",
                data=data,
            )
        elif outcome == Interview.OUTCOME_NO_SHOW:
            message = f"The interview \"{interview.title}\" was marked as a no-show."
            cls._notify_candidate(interview, NotificationType.INTERVIEW_NO_SHOW, "Interview missed", message, data)
            cls._notify_company(interview, NotificationType.INTERVIEW_NO_SHOW, "Interview missed", message, data)
        else:
            data['interview_date'] = format_interview_date(interview.scheduled_date)
            message = f"The interview \"{interview.title}\" on {data['interview_date']} was cancelled."
            cls._notify_candidate(interview, NotificationType.INTERVIEW_CANCELLED, "Interview cancelled", message, data)
            cls._notify_company(interview, NotificationType.INTERVIEW_CANCELLED, "Interview cancelled", message, data)

        return cls._result(interview)

    # ========== FEEDBACK ==========

    @classmethod
    def submit_company_feedback(cls, interview_id, actor, technical, communication, experience,
                                overall, comments=''):
        """
        Record the company's scores (1-5) for a completed interview.

        Feedback can be submitted once and waits for admin review.
        """
        interview = cls._load(interview_id)
        if not actor.is_member_of(interview.company_id):
            raise PermissionDenied("Only members of the interviewing company can submit feedback.")

        scores = {
            'feedback_technical': validate_score('technical', technical),
            'feedback_communication': validate_score('communication', communication),
            'feedback_experience': validate_score('experience', experience),
            'feedback_overall': validate_score('overall', overall),
        }

        attempted = 'submit_company_feedback'
        if interview.overall_status != Interview.STATUS_COMPLETED:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'interview is not completed'
            )
        if interview.feedback_submitted_at is not None:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'feedback was already submitted'
            )

        cls._apply(
            interview,
            attempted,
            expected={
                'overall_status': Interview.STATUS_COMPLETED,
                'feedback_submitted_at__isnull': True,
            },
            changes={
                **scores,
                'feedback_comments': comments or '',
                'feedback_submitted_at': timezone.now(),
                'feedback_submitted_by': actor,
                'feedback_status': Interview.FEEDBACK_PENDING,
            },
        )

        cls._notify_admins(
            interview,
            NotificationType.FEEDBACK_PENDING,
            title="Feedback awaiting review",
            message=(
                f"{interview.company.name} submitted feedback for "
                f"{interview.candidate.get_display_name()}."
            ),
            data={
                'candidate_name': interview.candidate.get_display_name(),
                'company_name': interview.company.name,
                'interview_title': interview.title,
            },
        )

        return cls._result(interview)

    @classmethod
    def review_feedback(cls, interview_id, admin, action, comments=''):
        """
        Approve or reject the company's feedback. Approved feedback is
        announced to the candidate; rejected feedback is not.
        """
        if action not in ADMIN_ACTIONS:
            raise ValidationError({'action': f"Must be one of {', '.join(ADMIN_ACTIONS)}."})

        interview = cls._load(interview_id)
        cls._require_admin(admin)

        attempted = f"feedback_{action}"
        if interview.feedback_submitted_at is None:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'no company feedback was submitted'
            )
        if interview.feedback_status != Interview.FEEDBACK_PENDING:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'feedback was already reviewed'
            )

        approved = action == 'approve'
        cls._apply(
            interview,
            attempted,
            expected={
                'feedback_submitted_at__isnull': False,
                'feedback_status': Interview.FEEDBACK_PENDING,
            },
            changes={
                'feedback_status': Interview.FEEDBACK_APPROVED if approved else Interview.FEEDBACK_REJECTED,
                'feedback_approved_by': admin,
                'feedback_approved_at': timezone.now(),
                'feedback_admin_comments': comments or '',
            },
        )

        if approved:
            cls._notify_candidate(
                interview,
                NotificationType.FEEDBACK_AVAILABLE,
                title="Interview feedback available",
                message=f"Feedback from your interview with {interview.company.name} is available.",
                data={
                    'company_name': interview.company.name,
                    'interview_title': interview.title,
                },
            )

        return cls._result(interview)

    @classmethod
    def submit_candidate_feedback(cls, interview_id, candidate, rating, comments=''):
        """Record the candidate's rating (1-5) of the interview. Once only."""
        interview = cls._load(interview_id)
        if interview.candidate_id != candidate.pk:
            raise PermissionDenied("Only the interviewed candidate can rate this interview.")

        rating = validate_score('rating', rating)

        attempted = 'submit_candidate_feedback'
        if interview.candidate_feedback_at is not None:
            raise InvalidStateTransition(
                interview.state_snapshot(), attempted, 'feedback was already submitted'
            )

        cls._apply(
            interview,
            attempted,
            expected={'candidate_feedback_at__isnull': True},
            changes={
                'candidate_rating': rating,
                'candidate_feedback_comments': comments or '',
                'candidate_feedback_at': timezone.now(),
            },
        )

        return cls._result(interview)

    # ========== REMINDERS ==========

    @classmethod
    def send_reminder(cls, interview_id, now=None):
        """
        Remind the candidate of a confirmed interview. Sent at most once;
        returns False when another run already sent it.
        """
        now = now or timezone.now()
        interview = cls._load(interview_id)

        updated = Interview.objects.filter(
            pk=interview.pk,
            overall_status=Interview.STATUS_CONFIRMED,
            reminder_sent_at__isnull=True,
        ).update(reminder_sent_at=now, updated_at=now)
        if not updated:
            return False
        interview.reminder_sent_at = now

        hours = int((interview.scheduled_date - now).total_seconds() // 3600)
        time_until = f"{hours} hours" if hours > 1 else "less than two hours"
        interview_date = format_interview_date(interview.scheduled_date)

        cls._notify_candidate(
            interview,
            NotificationType.INTERVIEW_REMINDER,
            title="Upcoming interview",
            message=f"Reminder: your interview with {interview.company.name} is on {interview_date}.",
            data={
                'company_name': interview.company.name,
                'interview_title': interview.title,
                'interview_date': interview_date,
                'time_until': time_until,
                'mode': interview.get_mode_display(),
                'location': interview.location,
                'meeting_url': interview.meeting_url,
            },
            priority=NotificationPriority.HIGH,
        )
        return True

    # ========== HELPERS ==========

    @staticmethod
    def _load(interview_id):
        try:
            interview = (
                Interview.objects
                .select_related('candidate', 'company', 'company__owner', 'job', 'application')
                .filter(pk=interview_id)
                .first()
            )
        except (ValueError, ValidationError):
            interview = None
        if interview is None:
            raise NotFound(f"Interview {interview_id} not found")
        return interview

    @staticmethod
    def _require_admin(user):
        if not user.is_platform_admin:
            raise PermissionDenied("Only platform admins can perform this action.")

    @staticmethod
    def _apply(interview, attempted, expected, changes):
        """
        Compare-and-set ``changes`` onto the row if it still matches
        ``expected``, recomputing overall_status from the new sub-states.
        """
        now = timezone.now()
        overall_status = compute_overall_status(
            changes.get('admin_status', interview.admin_status),
            changes.get('candidate_response', interview.candidate_response),
            changes.get('session_outcome', interview.session_outcome),
        )
        changes = {**changes, 'overall_status': overall_status, 'updated_at': now}

        with transaction.atomic():
            updated = Interview.objects.filter(pk=interview.pk, **expected).update(**changes)

        if not updated:
            current = Interview.objects.filter(pk=interview.pk).first() or interview
            logger.warning(
                f"[TRANSITION_CONFLICT] interview={interview.pk} action={attempted} "
                f"status={current.overall_status}"
            )
            raise InvalidStateTransition(current.state_snapshot(), attempted, 'already processed')

        previous = interview.overall_status
        for field, value in changes.items():
            setattr(interview, field, value)

        logger.info(
            f"[TRANSITION] interview={interview.pk} action={attempted} "
            f"from={previous} to={overall_status}"
        )

    @staticmethod
    def _result(interview):
        return InterviewResult(
            interview=interview,
            candidate=interview.candidate,
            company=interview.company,
            job=interview.job,
            application=interview.application,
        )

    @staticmethod
    def _action_url(audience, interview):
        return f"{settings.FRONTEND_URL}/{audience}/interviews/{interview.pk}"

    @classmethod
    def _notify_candidate(cls, interview, notification_type, title, message, data,
                          priority=NotificationPriority.MEDIUM):
        cls._safe_dispatch(interview, notification_type, lambda: NotificationDispatcher.dispatch(
            NotificationIntent(
                recipient_id=interview.candidate_id,
                recipient_type=RecipientType.USER,
                notification_type=notification_type,
                title=title,
                message=message,
                data=cls._payload(interview, 'candidate', data),
                priority=priority,
            )
        ))

    @classmethod
    def _notify_company(cls, interview, notification_type, title, message, data,
                        priority=NotificationPriority.MEDIUM):
        cls._safe_dispatch(interview, notification_type, lambda: NotificationDispatcher.dispatch(
            NotificationIntent(
                recipient_id=interview.company_id,
                recipient_type=RecipientType.COMPANY,
                notification_type=notification_type,
                title=title,
                message=message,
                data=cls._payload(interview, 'company', data),
                priority=priority,
            )
        ))

    @classmethod
    def _notify_admins(cls, interview, notification_type, title, message, data,
                       priority=NotificationPriority.MEDIUM):
        from django.contrib.auth import get_user_model

        cls._safe_dispatch(interview, notification_type, lambda: NotificationDispatcher.broadcast_to_role(
            get_user_model().ROLE_ADMIN,
            notification_type,
            title,
            message,
            data=cls._payload(interview, 'admin', data),
            priority=priority,
        ))

    @classmethod
    def _payload(cls, interview, audience, data):
        return {
            **data,
            'interview_id': str(interview.pk),
            'action_url': cls._action_url(audience, interview),
        }

    @staticmethod
    def _safe_dispatch(interview, notification_type, send):
        try:
            send()
        except Exception:
            logger.exception(
                f"[NOTIFICATION_ERROR] interview={interview.pk} type={notification_type}"
            )


class InterviewQueryService:
    """Read-only listing of interviews for dashboards."""

    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    FILTER_FIELDS = (
        'candidate_id',
        'company_id',
        'admin_status',
        'overall_status',
        'feedback_status',
    )

    @classmethod
    def list(cls, filters=None, page=1, page_size=DEFAULT_PAGE_SIZE):
        """
        Return ``(items, total)`` for the filters, newest first.

        ``total`` counts every matching interview; ``items`` holds one page.
        """
        queryset = Interview.objects.select_related('candidate', 'company', 'job')
        for key, value in (filters or {}).items():
            if key not in cls.FILTER_FIELDS:
                raise ValidationError({key: 'Unsupported filter.'})
            if value in (None, ''):
                continue
            try:
                queryset = queryset.filter(**{key: value})
            except (TypeError, ValueError):
                raise ValidationError({key: f"Invalid value: {value}"})

        page = max(1, int(page or 1))
        page_size = min(max(1, int(page_size or cls.DEFAULT_PAGE_SIZE)), cls.MAX_PAGE_SIZE)
        offset = (page - 1) * page_size

        total = queryset.count()
        items = list(queryset.order_by('-created_at')[offset:offset + page_size])
        return items, total

    @staticmethod
    def get_for_actor(user, interview_id):
        """Return one interview if ``user`` takes part in it or is an admin."""
        interview = InterviewService._load(interview_id)
        if user.is_platform_admin or interview.candidate_id == user.pk or user.is_member_of(interview.company_id):
            return interview
        raise PermissionDenied("You do not have access to this interview.")

    @classmethod
    def for_actor(cls, user, filters=None, page=1, page_size=DEFAULT_PAGE_SIZE):
        """Like list(), restricted to what ``user`` may see."""
        filters = dict(filters or {})
        if user.is_platform_admin:
            pass
        elif user.role == user.ROLE_COMPANY:
            if user.company_id is None:
                raise PermissionDenied("Company account is not linked to a company.")
            filters['company_id'] = user.company_id
        else:
            filters['candidate_id'] = user.pk
        return cls.list(filters, page=page, page_size=page_size)
