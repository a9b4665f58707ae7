# apps/interviews/tests/test_status.py
"""
Tests for compute_overall_status().

The overall status is a pure function of the three sub-states.
"""
from django.test import SimpleTestCase

from apps.interviews.models import Interview, compute_overall_status


class ComputeOverallStatusTestCase(SimpleTestCase):

    def test_pending_admin_review_dominates(self):
        for response in (Interview.RESPONSE_PENDING, Interview.RESPONSE_ACCEPTED, Interview.RESPONSE_REJECTED):
            self.assertEqual(
                compute_overall_status(Interview.ADMIN_PENDING, response),
                Interview.STATUS_PENDING_APPROVAL,
            )

    def test_admin_rejection_dominates_outcome(self):
        self.assertEqual(
            compute_overall_status(
                Interview.ADMIN_REJECTED, Interview.RESPONSE_ACCEPTED, Interview.OUTCOME_COMPLETED
            ),
            Interview.STATUS_REJECTED,
        )

    def test_approved_without_response_is_scheduled(self):
        self.assertEqual(
            compute_overall_status(Interview.ADMIN_APPROVED, Interview.RESPONSE_PENDING),
            Interview.STATUS_SCHEDULED,
        )

    def test_candidate_accepts(self):
        self.assertEqual(
            compute_overall_status(Interview.ADMIN_APPROVED, Interview.RESPONSE_ACCEPTED),
            Interview.STATUS_CONFIRMED,
        )

    def test_candidate_declines(self):
        self.assertEqual(
            compute_overall_status(Interview.ADMIN_APPROVED, Interview.RESPONSE_REJECTED),
            Interview.STATUS_CANCELLED,
        )

    def test_outcome_overrides_response(self):
        self.assertEqual(
            compute_overall_status(
                Interview.ADMIN_APPROVED, Interview.RESPONSE_ACCEPTED, Interview.OUTCOME_COMPLETED
            ),
            Interview.STATUS_COMPLETED,
        )
        self.assertEqual(
            compute_overall_status(
                Interview.ADMIN_APPROVED, Interview.RESPONSE_ACCEPTED, Interview.OUTCOME_NO_SHOW
            ),
            Interview.STATUS_NO_SHOW,
        )
        self.assertEqual(
            compute_overall_status(
                Interview.ADMIN_APPROVED, Interview.RESPONSE_PENDING, Interview.OUTCOME_CANCELLED
            ),
            Interview.STATUS_CANCELLED,
        )

    def test_active_statuses(self):
        interview = Interview(overall_status=Interview.STATUS_CONFIRMED)
        self.assertTrue(interview.is_active)
        interview.overall_status = Interview.STATUS_REJECTED
        self.assertFalse(interview.is_active)
