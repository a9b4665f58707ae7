# apps/interviews/tasks.py
"""
Celery tasks for interview management.

Tasks:
- send_interview_reminders: reminds candidates of confirmed interviews
  starting within INTERVIEW_REMINDER_LEAD_HOURS

Schedule:
- Runs hourly via Celery Beat (configured in settings.py)
"""

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger('apps.interviews.tasks')


@shared_task(acks_late=True)
def send_interview_reminders():
    """
    Send one reminder per confirmed, upcoming interview.

    Idempotent: an interview whose reminder_sent_at is set is skipped, and
    the service claims the reminder with a conditional update.
    """
    from apps.interviews.models import Interview
    from apps.interviews.services import InterviewService

    now = timezone.now()
    horizon = now + timedelta(hours=settings.INTERVIEW_REMINDER_LEAD_HOURS)

    interview_ids = list(
        Interview.objects.filter(
            overall_status=Interview.STATUS_CONFIRMED,
            reminder_sent_at__isnull=True,
            scheduled_date__gt=now,
            scheduled_date__lte=horizon,
        )
        .order_by('scheduled_date')
        .values_list('id', flat=True)
    )

    logger.info(
        f"[TASK_START] send_interview_reminders "
        f"found={len(interview_ids)} at={now.isoformat()}"
    )

    sent = 0
    errors = 0
    for interview_id in interview_ids:
        try:
            if InterviewService.send_reminder(interview_id, now=now):
                sent += 1
        except Exception as e:
            errors += 1
            logger.error(
                f"[REMINDER_ERROR] interview={interview_id} error={str(e)}",
                exc_info=True
            )

    logger.info(f"[TASK_COMPLETE] send_interview_reminders sent={sent} errors={errors}")

    return {'sent': sent, 'errors': errors}
