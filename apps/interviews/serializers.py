# apps/interviews/serializers.py
"""
Serializers for the interview workflow API.

Includes:
- InterviewSerializer: Full read serializer with participants and feedback
- InterviewListSerializer: Compact dashboard serializer
- Input serializers, one per workflow action

Input serializers only shape and type-check request bodies; the rules
live in InterviewService.
"""
from rest_framework import serializers

from .models import Interview


class ParticipantSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(source='get_display_name', read_only=True)


class CompanySummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)


class InterviewListSerializer(serializers.ModelSerializer):
    """Compact serializer for interview dashboards."""

    candidate = ParticipantSerializer(read_only=True)
    company = CompanySummarySerializer(read_only=True)
    job_title = serializers.CharField(source='job.title', read_only=True, default=None)

    class Meta:
        model = Interview
        fields = [
            'id',
            'title',
            'candidate',
            'company',
            'job_title',
            'scheduled_date',
            'mode',
            'overall_status',
            'admin_status',
            'candidate_response',
            'feedback_status',
            'created_at',
        ]
        read_only_fields = fields


class InterviewSerializer(serializers.ModelSerializer):
    """
    Full interview serializer.

    Company feedback is shown to the candidate only after an admin has
    approved it.
    """

    candidate = ParticipantSerializer(read_only=True)
    company = CompanySummarySerializer(read_only=True)
    job_title = serializers.CharField(source='job.title', read_only=True, default=None)
    company_feedback = serializers.SerializerMethodField()
    candidate_feedback = serializers.SerializerMethodField()

    class Meta:
        model = Interview
        fields = [
            'id',
            'title',
            'description',
            'candidate',
            'company',
            'job',
            'job_title',
            'application',
            'scheduled_date',
            'duration_minutes',
            'mode',
            'location',
            'meeting_url',
            'interviewer_name',
            'interviewer_email',
            'interviewer_phone',
            'notes',
            'overall_status',
            'admin_status',
            'admin_comments',
            'admin_approved_at',
            'candidate_response',
            'candidate_response_at',
            'candidate_comments',
            'session_outcome',
            'outcome_set_at',
            'outcome_reason',
            'feedback_status',
            'company_feedback',
            'candidate_feedback',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_company_feedback(self, obj):
        feedback = obj.company_feedback
        if feedback is None:
            return None
        request = self.context.get('request')
        user = getattr(request, 'user', None)
        if user is not None and user.is_candidate and obj.feedback_status != Interview.FEEDBACK_APPROVED:
            return None
        return feedback

    def get_candidate_feedback(self, obj):
        return obj.candidate_feedback


class InterviewCreateSerializer(serializers.Serializer):
    """
    Request body for proposing an interview.

    company_id defaults to the company of the requesting member.
    """

    candidate_id = serializers.IntegerField()
    company_id = serializers.IntegerField(required=False)
    job_id = serializers.IntegerField(required=False, allow_null=True)
    application_id = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    scheduled_date = serializers.DateTimeField()
    duration_minutes = serializers.IntegerField(required=False, min_value=15, max_value=480)
    mode = serializers.ChoiceField(choices=Interview.MODE_CHOICES)
    location = serializers.CharField(required=False, allow_blank=True, max_length=255)
    meeting_url = serializers.URLField(required=False, allow_blank=True, max_length=500)
    interviewer_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    interviewer_email = serializers.EmailField(required=False, allow_blank=True)
    interviewer_phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    notes = serializers.CharField(required=False, allow_blank=True)


class ReviewActionSerializer(serializers.Serializer):
    """Admin decision on an interview or on company feedback."""

    action = serializers.ChoiceField(choices=['approve', 'reject'])
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class CandidateResponseSerializer(serializers.Serializer):
    response = serializers.ChoiceField(
        choices=[Interview.RESPONSE_ACCEPTED, Interview.RESPONSE_REJECTED]
    )
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class OutcomeSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(
        choices=[Interview.OUTCOME_COMPLETED, Interview.OUTCOME_NO_SHOW, Interview.OUTCOME_CANCELLED]
    )
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class CompanyFeedbackSerializer(serializers.Serializer):
    """Scores from 1 to 5 for each criterion."""

    technical = serializers.IntegerField(min_value=1, max_value=5)
    communication = serializers.IntegerField(min_value=1, max_value=5)
    experience = serializers.IntegerField(min_value=1, max_value=5)
    overall = serializers.IntegerField(min_value=1, max_value=5)
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class CandidateFeedbackSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comments = serializers.CharField(required=False, allow_blank=True, default='')
