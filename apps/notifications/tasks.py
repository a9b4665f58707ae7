# apps/notifications/tasks.py
"""
Celery tasks for notification delivery.

Tasks:
- deliver_notification: queued by the dispatcher once per notification
- process_pending_notifications: channels deferred by quiet hours and
  scheduled notifications that became due
- cleanup_expired_notifications: removes notifications past expires_at

Schedule:
- Periodic tasks run via Celery Beat (configured in settings.py)
"""

import logging
from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task(acks_late=True, ignore_result=True)
def deliver_notification(notification_id):
    """Deliver one notification on its pending channels."""
    from apps.notifications.services import NotificationDispatcher

    NotificationDispatcher.deliver(notification_id)


@shared_task(acks_late=True)
def process_pending_notifications():
    """
    Run delivery for unexpired, due notifications that still have enabled,
    never attempted channels: quiet-hours deferrals and scheduled
    notifications whose time has come.

    Each notification is handled independently; one failing does not stop
    the rest.
    """
    from apps.notifications.models import DeliveryStatus, Notification
    from apps.notifications.services import NotificationDispatcher

    now = timezone.now()
    notification_ids = list(
        Notification.objects
        .unexpired(now)
        .due(now)
        .filter(
            deliveries__enabled=True,
            deliveries__status=DeliveryStatus.PENDING,
            deliveries__attempts=0,
        )
        .values_list('id', flat=True)
        .distinct()
    )

    logger.info(f"[TASK_START] process_pending_notifications found={len(notification_ids)}")

    processed = 0
    errors = 0
    for notification_id in notification_ids:
        try:
            NotificationDispatcher.deliver(notification_id, now=now)
            processed += 1
        except Exception as e:
            errors += 1
            logger.error(
                f"[TASK_ERROR] notification={notification_id} error={str(e)}",
                exc_info=True
            )

    logger.info(
        f"[TASK_COMPLETE] process_pending_notifications "
        f"processed={processed} errors={errors}"
    )
    return {'processed': processed, 'errors': errors}


@shared_task(acks_late=True)
def cleanup_expired_notifications():
    """Delete notifications whose expiry date has passed."""
    from apps.notifications.models import Notification

    _, per_model = Notification.objects.expired().delete()
    deleted = per_model.get(Notification._meta.label, 0)

    logger.info(f"[TASK_COMPLETE] cleanup_expired_notifications deleted={deleted}")
    return {'deleted': deleted}
