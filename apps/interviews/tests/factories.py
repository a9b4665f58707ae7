# apps/interviews/tests/factories.py
"""
Shared fixtures for interview workflow tests.
"""
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.models import Company
from apps.interviews.models import Interview
from apps.interviews.services import InterviewService
from apps.jobs.models import Application, Job
from apps.notifications.models import Notification

User = get_user_model()


def make_user(email, role=User.ROLE_CANDIDATE, **extra):
    return User.objects.create_user(
        username=email.split('@')[0],
        email=email,
        password='testpass123',
        role=role,
        **extra
    )


class WorkflowFixturesMixin:
    """Admin, company with owner, candidate with an application."""

    def setUp(self):
        self.admin = make_user('admin@example.com', role=User.ROLE_ADMIN)
        self.company_owner = make_user('owner@acme.com', role=User.ROLE_COMPANY)
        self.company = Company.objects.create(
            name='Acme',
            email='jobs@acme.com',
            owner=self.company_owner,
        )
        self.company_owner.company = self.company
        self.company_owner.save(update_fields=['company'])

        self.candidate = make_user('jane@example.com', display_name='Jane Candidate')
        self.outsider = make_user('mallory@example.com')

        self.job = Job.objects.create(company=self.company, title='Backend Engineer')
        self.application = Application.objects.create(job=self.job, candidate=self.candidate)

    def create_interview(self, actor=None, **overrides):
        params = {
            'candidate_id': self.candidate.pk,
            'company_id': self.company.pk,
            'title': 'Technical interview',
            'scheduled_date': timezone.now() + timedelta(days=3),
            'mode': Interview.MODE_ONLINE,
            'meeting_url': 'https://meet.example.com/abc-defg',
            'application_id': self.application.pk,
        }
        params.update(overrides)
        return InterviewService.create_interview(actor or self.company_owner, **params).interview

    def approved_interview(self, **overrides):
        interview = self.create_interview(**overrides)
        return InterviewService.admin_review(interview.pk, self.admin, 'approve').interview

    def confirmed_interview(self, **overrides):
        interview = self.approved_interview(**overrides)
        return InterviewService.candidate_respond(
            interview.pk, self.candidate, Interview.RESPONSE_ACCEPTED
        ).interview

    def completed_interview(self, **overrides):
        interview = self.confirmed_interview(**overrides)
        return InterviewService.record_outcome(
            interview.pk, self.company_owner, Interview.OUTCOME_COMPLETED
        ).interview

    def notification_count(self, user, notification_type=None):
        queryset = Notification.objects.filter(recipient=user)
        if notification_type:
            queryset = queryset.filter(notification_type=notification_type)
        return queryset.count()
