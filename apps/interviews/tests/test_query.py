# apps/interviews/tests/test_query.py
"""
Tests for InterviewQueryService listing and actor scoping.
"""
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from apps.accounts.models import Company
from apps.interviews.exceptions import PermissionDenied
from apps.interviews.models import Interview
from apps.interviews.services import InterviewQueryService, InterviewService
from apps.jobs.models import Job

from .factories import WorkflowFixturesMixin, make_user


class InterviewQueryTestCase(WorkflowFixturesMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.other_candidate = make_user('sam@example.com')

        self.globex_owner = make_user('boss@globex.com', role='company')
        self.globex = Company.objects.create(name='Globex', owner=self.globex_owner)
        self.globex_job = Job.objects.create(company=self.globex, title='Data Engineer')

        self.first = self.create_interview()
        self.second = self.create_interview(
            candidate_id=self.other_candidate.pk, application_id=None, job_id=self.job.pk, title='Second'
        )
        self.third = self.create_interview(
            actor=self.globex_owner,
            company_id=self.globex.pk,
            application_id=None,
            job_id=self.globex_job.pk,
            title='Globex screening',
        )
        InterviewService.admin_review(self.second.pk, self.admin, 'approve')

        # distinct creation times so ordering is deterministic
        now = timezone.now()
        for hours_ago, interview in ((3, self.first), (2, self.second), (1, self.third)):
            Interview.objects.filter(pk=interview.pk).update(created_at=now - timedelta(hours=hours_ago))

    def test_created_interview_is_listed(self):
        items, total = InterviewQueryService.list({'candidate_id': self.candidate.pk})

        self.assertEqual(total, 1)
        self.assertEqual(items[0].pk, self.first.pk)
        self.assertEqual(items[0].title, 'Technical interview')
        self.assertEqual(items[0].overall_status, Interview.STATUS_PENDING_APPROVAL)
        self.assertEqual(items[0].company, self.company)

    def test_newest_first(self):
        items, total = InterviewQueryService.list()

        self.assertEqual(total, 3)
        self.assertEqual([i.pk for i in items], [self.third.pk, self.second.pk, self.first.pk])

    def test_filters_are_combined(self):
        items, total = InterviewQueryService.list({
            'company_id': self.company.pk,
            'admin_status': Interview.ADMIN_PENDING,
        })

        self.assertEqual(total, 1)
        self.assertEqual(items[0].pk, self.first.pk)

        _, total = InterviewQueryService.list({'overall_status': Interview.STATUS_SCHEDULED})
        self.assertEqual(total, 1)

        _, total = InterviewQueryService.list({'feedback_status': Interview.FEEDBACK_APPROVED})
        self.assertEqual(total, 0)

    def test_empty_filter_values_ignored(self):
        _, total = InterviewQueryService.list({'overall_status': '', 'company_id': None})

        self.assertEqual(total, 3)

    def test_pagination(self):
        items, total = InterviewQueryService.list(page=2, page_size=2)

        self.assertEqual(total, 3)
        self.assertEqual([i.pk for i in items], [self.first.pk])

    def test_page_size_is_clamped(self):
        items, total = InterviewQueryService.list(page_size=0)
        self.assertEqual(len(items), 1)
        self.assertEqual(total, 3)

        items, _ = InterviewQueryService.list(page_size=1000)
        self.assertEqual(len(items), 3)

    def test_list_has_no_side_effects(self):
        before = list(Interview.objects.values_list('pk', 'overall_status', 'updated_at'))

        InterviewQueryService.list({'company_id': self.company.pk})

        self.assertEqual(list(Interview.objects.values_list('pk', 'overall_status', 'updated_at')), before)

    def test_unknown_filter_rejected(self):
        with self.assertRaises(ValidationError):
            InterviewQueryService.list({'title': 'Second'})

    def test_malformed_filter_value_rejected(self):
        with self.assertRaises(ValidationError):
            InterviewQueryService.list({'candidate_id': 'abc'})

    def test_candidate_sees_own_interviews(self):
        items, total = InterviewQueryService.for_actor(self.candidate)

        self.assertEqual(total, 1)
        self.assertEqual(items[0].pk, self.first.pk)

    def test_candidate_cannot_widen_scope(self):
        _, total = InterviewQueryService.for_actor(
            self.candidate, {'candidate_id': self.other_candidate.pk}
        )

        self.assertEqual(total, 0)

    def test_company_sees_own_company(self):
        items, total = InterviewQueryService.for_actor(self.company_owner)

        self.assertEqual(total, 2)
        self.assertEqual({i.pk for i in items}, {self.first.pk, self.second.pk})

    def test_admin_sees_everything(self):
        _, total = InterviewQueryService.for_actor(self.admin)

        self.assertEqual(total, 3)

    def test_company_account_without_company(self):
        loose = make_user('loose@example.com', role='company')

        with self.assertRaises(PermissionDenied):
            InterviewQueryService.for_actor(loose)

    def test_get_for_actor(self):
        self.assertEqual(InterviewQueryService.get_for_actor(self.candidate, self.first.pk), self.first)
        self.assertEqual(InterviewQueryService.get_for_actor(self.company_owner, self.first.pk), self.first)
        self.assertEqual(InterviewQueryService.get_for_actor(self.admin, self.third.pk), self.third)

        with self.assertRaises(PermissionDenied):
            InterviewQueryService.get_for_actor(self.outsider, self.first.pk)
        with self.assertRaises(PermissionDenied):
            InterviewQueryService.get_for_actor(self.company_owner, self.third.pk)
