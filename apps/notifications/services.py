# apps/notifications/services.py
"""
Notification dispatch for the recruitment platform.

Provides:
- NotificationDispatcher.dispatch: persist a notification and queue delivery
- NotificationDispatcher.deliver: apply preferences and quiet hours, call
  the channel adapters and record every attempt
- Role broadcast and inbox helpers
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import Company

from .channels import EmailChannel, PushChannel, Recipient
from .exceptions import DeliveryFailure, UnknownRecipient
from .models import (
    DeliveryChannel,
    DeliveryStatus,
    Notification,
    NotificationDelivery,
    NotificationPreference,
    NotificationPriority,
    RecipientType,
)
from .payloads import validate_payload

logger = logging.getLogger(__name__)

User = get_user_model()


@dataclass(frozen=True)
class NotificationIntent:
    """What to notify, to whom. ``recipient_id`` is a user or company id."""

    recipient_id: int
    recipient_type: str
    notification_type: str
    title: str
    message: str
    data: dict = field(default_factory=dict)
    priority: str = NotificationPriority.MEDIUM
    # hold email and push until this aware datetime
    scheduled_for: Optional[datetime] = None


def get_preferences(user):
    """Return the user's preferences, creating the defaults on first use."""
    preference, created = NotificationPreference.objects.get_or_create(user=user)
    if created:
        logger.info(f"[PREFERENCES_CREATED] user={user.pk}")
    return preference


def configured_channels():
    known = {value for value, _ in DeliveryChannel.CHOICES}
    return [channel for channel in settings.NOTIFICATION_CHANNELS if channel in known]


class NotificationDispatcher:
    """
    Single entry point for creating and delivering notifications.

    dispatch() runs in the caller's request; deliver() runs in a Celery
    worker once the dispatching transaction has committed.
    """

    email_channel = EmailChannel()
    push_channel = PushChannel()

    # ========== DISPATCH ==========

    @classmethod
    def dispatch(cls, intent):
        """
        Persist ``intent`` as a Notification with one pending delivery per
        configured channel and queue background delivery.

        A notification scheduled for later is not queued here;
        process_pending_notifications picks it up once it is due.

        Raises InvalidNotificationPayload or UnknownRecipient before
        anything is written.
        """
        recipient, company = cls._resolve_recipient(intent.recipient_type, intent.recipient_id)
        data = validate_payload(intent.notification_type, intent.data)

        with transaction.atomic():
            notification = Notification.objects.create(
                recipient=recipient,
                recipient_type=intent.recipient_type,
                company=company,
                notification_type=intent.notification_type,
                title=intent.title,
                message=intent.message,
                priority=intent.priority,
                data=data,
                scheduled_for=intent.scheduled_for,
            )
            NotificationDelivery.objects.bulk_create([
                NotificationDelivery(notification=notification, channel=channel)
                for channel in configured_channels()
            ])

        if notification.is_due():
            from .tasks import deliver_notification
            notification_id = str(notification.id)
            transaction.on_commit(lambda: deliver_notification.delay(notification_id))

        logger.info(
            f"[NOTIFICATION_CREATED] id={notification.id} type={intent.notification_type} "
            f"recipient={intent.recipient_type}:{intent.recipient_id} "
            f"scheduled_for={intent.scheduled_for}"
        )
        return notification

    @classmethod
    def broadcast_to_role(cls, role, notification_type, title, message, data=None,
                          priority=NotificationPriority.MEDIUM):
        """
        Dispatch one notification to every active user with ``role``.

        A recipient that cannot be notified is logged and skipped; the rest
        still get theirs.
        """
        notifications = []
        failed = 0
        for user in cls._users_with_role(role):
            try:
                notifications.append(cls.dispatch(NotificationIntent(
                    recipient_id=user.pk,
                    recipient_type=RecipientType.USER,
                    notification_type=notification_type,
                    title=title,
                    message=message,
                    data=data or {},
                    priority=priority,
                )))
            except Exception as e:
                failed += 1
                logger.error(
                    f"[BROADCAST_ERROR] role={role} user={user.pk} type={notification_type} error={str(e)}",
                    exc_info=True
                )
        logger.info(
            f"[BROADCAST] role={role} type={notification_type} "
            f"recipients={len(notifications)} failed={failed}"
        )
        return notifications

    # ========== DELIVERY ==========

    @classmethod
    def deliver(cls, notification_id, now=None):
        """
        Attempt every pending, enabled channel of the notification.

        Channels switched off in the recipient's preferences are disabled;
        channels inside quiet hours stay pending for a later run unless the
        notification is urgent. Each channel is claimed before its adapter
        is called, so overlapping runs never send the same channel twice.
        Returns the notification, or None if it no longer exists.
        """
        notification = (
            Notification.objects
            .select_related('recipient', 'company')
            .filter(pk=notification_id)
            .first()
        )
        if notification is None:
            logger.warning(f"[DELIVERY_SKIPPED] notification={notification_id} reason=missing")
            return None

        now = now or timezone.now()
        if notification.is_expired(now):
            logger.info(f"[DELIVERY_SKIPPED] notification={notification.id} reason=expired")
            return notification
        if not notification.is_due(now):
            logger.info(
                f"[DELIVERY_SKIPPED] notification={notification.id} reason=scheduled "
                f"scheduled_for={notification.scheduled_for}"
            )
            return notification

        preference = get_preferences(notification.recipient)
        quiet = (
            notification.priority != NotificationPriority.URGENT
            and preference.is_quiet_at(now)
        )

        pending = notification.deliveries.filter(enabled=True, status=DeliveryStatus.PENDING)
        for delivery in pending:
            if not preference.allows(notification.notification_type, delivery.channel):
                delivery.disable()
                logger.info(
                    f"[CHANNEL_DISABLED] notification={notification.id} channel={delivery.channel}"
                )
                continue
            if quiet:
                logger.info(
                    f"[CHANNEL_DEFERRED] notification={notification.id} "
                    f"channel={delivery.channel} reason=quiet_hours"
                )
                continue
            if not delivery.claim(now):
                logger.info(
                    f"[CHANNEL_SKIPPED] notification={notification.id} "
                    f"channel={delivery.channel} reason=claimed_elsewhere"
                )
                continue
            cls._attempt(notification, delivery)

        status = notification.refresh_status()
        logger.info(f"[DELIVERY_COMPLETE] notification={notification.id} status={status}")
        return notification

    @classmethod
    def _attempt(cls, notification, delivery):
        recipient = cls._contact_for(notification)
        args = (
            notification.notification_type,
            recipient,
            notification.data,
            notification.title,
            notification.message,
        )
        try:
            if delivery.channel == DeliveryChannel.EMAIL:
                cls.email_channel.send(*args)
            elif delivery.channel == DeliveryChannel.PUSH:
                result = cls.push_channel.send(*args)
                if result.failed and not result.success:
                    raise DeliveryFailure(
                        delivery.channel,
                        f"all {result.failed} push subscriptions failed",
                    )
            else:
                raise DeliveryFailure(delivery.channel, 'unsupported channel')
        except DeliveryFailure as exc:
            logger.warning(
                f"[DELIVERY_FAILED] notification={notification.id} "
                f"channel={delivery.channel} error={exc.reason}"
            )
            delivery.record_attempt(success=False, error=exc.reason)
            return False
        except Exception as exc:
            logger.exception(
                f"[DELIVERY_FAILED] notification={notification.id} "
                f"channel={delivery.channel} error={exc}"
            )
            delivery.record_attempt(success=False, error=str(exc))
            return False

        delivery.record_attempt(success=True)
        return True

    # ========== INBOX ==========

    @staticmethod
    def mark_as_read(user, notification_id):
        notification = Notification.objects.for_user(user).filter(pk=notification_id).first()
        if notification is None:
            return None
        notification.mark_as_read()
        return notification

    @staticmethod
    def mark_all_as_read(user):
        return Notification.mark_all_as_read(user)

    @staticmethod
    def get_unread_count(user):
        return Notification.get_unread_count(user)

    @staticmethod
    def delete_notification(user, notification_id):
        """Delete one notification from the user's inbox. Returns False if it is not theirs."""
        deleted, _ = Notification.objects.for_user(user).filter(pk=notification_id).delete()
        if deleted:
            logger.info(f"[NOTIFICATION_DELETED] user={user.pk} notification={notification_id}")
        return bool(deleted)

    @staticmethod
    def clear_read(user):
        """Delete every read notification of the user. Returns how many were removed."""
        _, per_model = Notification.objects.for_user(user).filter(is_read=True).delete()
        count = per_model.get(Notification._meta.label, 0)
        logger.info(f"[INBOX_CLEARED] user={user.pk} deleted={count}")
        return count

    # ========== HELPERS ==========

    @staticmethod
    def _resolve_recipient(recipient_type, recipient_id):
        """Return ``(inbox_user, company)`` for the addressed recipient."""
        if recipient_type == RecipientType.USER:
            user = User.objects.filter(pk=recipient_id).first()
            if user is None:
                raise UnknownRecipient(f"User {recipient_id} does not exist")
            return user, None

        if recipient_type == RecipientType.COMPANY:
            company = Company.objects.select_related('owner').filter(pk=recipient_id).first()
            if company is None:
                raise UnknownRecipient(f"Company {recipient_id} does not exist")
            owner = company.owner or company.members.order_by('date_joined').first()
            if owner is None:
                raise UnknownRecipient(f"Company {recipient_id} has no account to notify")
            return owner, company

        raise UnknownRecipient(f"Unknown recipient type: {recipient_type}")

    @staticmethod
    def _contact_for(notification):
        if notification.recipient_type == RecipientType.COMPANY and notification.company_id:
            company = notification.company
            return Recipient(
                user=notification.recipient,
                name=company.name,
                email=company.email or notification.recipient.email,
            )
        user = notification.recipient
        return Recipient(user=user, name=user.get_display_name(), email=user.email)

    @staticmethod
    def _users_with_role(role):
        users = User.objects.filter(is_active=True)
        if role == User.ROLE_ADMIN:
            # staff accounts act as platform admins as well
            return list(users.filter(Q(role=role) | Q(is_staff=True)).order_by('pk'))
        return list(users.filter(role=role).order_by('pk'))
