# apps/notifications/models.py
"""
Notification models for the recruitment platform.

Stores:
- Notification records (the in-app inbox) with a derived delivery status
- One NotificationDelivery row per configured channel
- Per-user channel preferences and quiet hours
- Web Push device subscriptions
"""
import uuid
from datetime import time, timedelta
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class NotificationType:
    INTERVIEW_PENDING_APPROVAL = 'interview_pending_approval'
    INTERVIEW_SCHEDULED = 'interview_scheduled'
    INTERVIEW_NOT_APPROVED = 'interview_not_approved'
    INTERVIEW_APPROVED = 'interview_approved'
    INTERVIEW_REJECTED = 'interview_rejected'
    INTERVIEW_RESPONSE = 'interview_response'
    INTERVIEW_COMPLETED = 'interview_completed'
    INTERVIEW_CANCELLED = 'interview_cancelled'
    INTERVIEW_NO_SHOW = 'interview_no_show'
    INTERVIEW_REMINDER = 'interview_reminder'
    FEEDBACK_PENDING = 'feedback_pending'
    FEEDBACK_AVAILABLE = 'feedback_available'
    NEW_APPLICATION = 'new_application'
    APPLICATION_UPDATE = 'application_update'
    JOB_RECOMMENDATION = 'job_recommendation'
    SYSTEM_ALERT = 'system_alert'
    GENERAL = 'general'

    CHOICES = [
        (INTERVIEW_PENDING_APPROVAL, 'Interview Pending Approval'),
        (INTERVIEW_SCHEDULED, 'Interview Scheduled'),
        (INTERVIEW_NOT_APPROVED, 'Interview Not Approved'),
        (INTERVIEW_APPROVED, 'Interview Approved'),
        (INTERVIEW_REJECTED, 'Interview Rejected'),
        (INTERVIEW_RESPONSE, 'Interview Response'),
        (INTERVIEW_COMPLETED, 'Interview Completed'),
        (INTERVIEW_CANCELLED, 'Interview Cancelled'),
        (INTERVIEW_NO_SHOW, 'Interview No-Show'),
        (INTERVIEW_REMINDER, 'Interview Reminder'),
        (FEEDBACK_PENDING, 'Feedback Pending'),
        (FEEDBACK_AVAILABLE, 'Feedback Available'),
        (NEW_APPLICATION, 'New Application'),
        (APPLICATION_UPDATE, 'Application Update'),
        (JOB_RECOMMENDATION, 'Job Recommendation'),
        (SYSTEM_ALERT, 'System Alert'),
        (GENERAL, 'General'),
    ]

    ALL = [value for value, _ in CHOICES]


class NotificationPriority:
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    URGENT = 'urgent'

    CHOICES = [
        (LOW, 'Low'),
        (MEDIUM, 'Medium'),
        (HIGH, 'High'),
        (URGENT, 'Urgent'),
    ]


class RecipientType:
    USER = 'user'
    COMPANY = 'company'

    CHOICES = [
        (USER, 'User'),
        (COMPANY, 'Company'),
    ]


class DeliveryChannel:
    EMAIL = 'email'
    PUSH = 'push'

    CHOICES = [
        (EMAIL, 'Email'),
        (PUSH, 'Push'),
    ]


class NotificationStatus:
    PENDING = 'pending'
    SENT = 'sent'
    FAILED = 'failed'

    CHOICES = [
        (PENDING, 'Pending'),
        (SENT, 'Sent'),
        (FAILED, 'Failed'),
    ]


class DeliveryStatus:
    PENDING = 'pending'
    # claimed by one delivery run, adapter call in progress
    SENDING = 'sending'
    SENT = 'sent'
    FAILED = 'failed'
    DELIVERED = 'delivered'

    CHOICES = [
        (PENDING, 'Pending'),
        (SENDING, 'Sending'),
        (SENT, 'Sent'),
        (FAILED, 'Failed'),
        (DELIVERED, 'Delivered'),
    ]

    SUCCESSFUL = (SENT, DELIVERED)
    UNFINISHED = (PENDING, SENDING)


def default_expiry():
    return timezone.now() + timedelta(days=settings.NOTIFICATION_EXPIRY_DAYS)


def derive_notification_status(deliveries):
    """
    Derive a notification's status from its channel deliveries.

    ``deliveries`` is an iterable of objects with ``enabled``, ``status``
    and ``attempts``. Disabled channels are ignored.

    - sent: any channel is sent or delivered
    - failed: at least one channel was attempted, every attempted channel
      failed and no enabled channel is still pending or sending
    - pending: everything else, including "nothing attempted yet"
    """
    active = [d for d in deliveries if d.enabled]
    if any(d.status in DeliveryStatus.SUCCESSFUL for d in active):
        return NotificationStatus.SENT

    attempted = [d for d in active if d.attempts > 0]
    still_pending = any(d.status in DeliveryStatus.UNFINISHED for d in active)
    if attempted and not still_pending and all(
        d.status == DeliveryStatus.FAILED for d in attempted
    ):
        return NotificationStatus.FAILED

    return NotificationStatus.PENDING


class NotificationQuerySet(models.QuerySet):

    def for_user(self, user):
        return self.filter(recipient=user)

    def unexpired(self, now=None):
        now = now or timezone.now()
        return self.filter(models.Q(expires_at__isnull=True) | models.Q(expires_at__gt=now))

    def expired(self, now=None):
        now = now or timezone.now()
        return self.filter(expires_at__lte=now)

    def due(self, now=None):
        """Notifications that are not scheduled, or whose scheduled time has come."""
        now = now or timezone.now()
        return self.filter(models.Q(scheduled_for__isnull=True) | models.Q(scheduled_for__lte=now))


class Notification(models.Model):
    """
    A notification addressed to a user or a company.

    The record itself is the in-app channel; email and push delivery is
    tracked per channel in NotificationDelivery. ``status`` is derived from
    those rows and only written by ``refresh_status()``.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    recipient = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text='Account whose inbox holds this notification'
    )

    recipient_type = models.CharField(
        max_length=20,
        choices=RecipientType.CHOICES,
        default=RecipientType.USER
    )

    company = models.ForeignKey(
        'accounts.Company',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications',
        help_text='Addressed company when recipient_type is company'
    )

    notification_type = models.CharField(
        max_length=50,
        choices=NotificationType.CHOICES,
        db_index=True
    )

    title = models.CharField(max_length=200)

    message = models.TextField()

    priority = models.CharField(
        max_length=10,
        choices=NotificationPriority.CHOICES,
        default=NotificationPriority.MEDIUM
    )

    data = models.JSONField(
        default=dict,
        blank=True,
        help_text='Template data, validated per notification type'
    )

    status = models.CharField(
        max_length=10,
        choices=NotificationStatus.CHOICES,
        default=NotificationStatus.PENDING,
        db_index=True
    )

    is_read = models.BooleanField(default=False, db_index=True)

    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        default=default_expiry,
        db_index=True
    )

    # email and push are held back until this time; the inbox record is visible at once
    scheduled_for = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'is_read', '-created_at'], name='notif_recipient_read_idx'),
            models.Index(fields=['recipient', 'notification_type'], name='notif_recipient_type_idx'),
        ]

    def __str__(self):
        return f"{self.notification_type} -> {self.recipient} ({self.created_at})"

    def is_expired(self, now=None):
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or timezone.now())

    def is_due(self, now=None):
        if self.scheduled_for is None:
            return True
        return self.scheduled_for <= (now or timezone.now())

    def mark_as_read(self):
        """Mark notification as read."""
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at', 'updated_at'])

    def refresh_status(self):
        """Recompute ``status`` from the delivery rows and persist it if it changed."""
        status = derive_notification_status(self.deliveries.all())
        if status != self.status:
            self.status = status
            self.save(update_fields=['status', 'updated_at'])
        return status

    @classmethod
    def get_unread_count(cls, user):
        return cls.objects.for_user(user).unexpired().filter(is_read=False).count()

    @classmethod
    def mark_all_as_read(cls, user):
        """Mark all notifications as read for a user."""
        now = timezone.now()
        return cls.objects.filter(
            recipient=user,
            is_read=False
        ).update(
            is_read=True,
            read_at=now,
            updated_at=now
        )


class NotificationDelivery(models.Model):
    """Delivery state of one notification on one channel."""

    notification = models.ForeignKey(
        Notification,
        on_delete=models.CASCADE,
        related_name='deliveries'
    )

    channel = models.CharField(max_length=10, choices=DeliveryChannel.CHOICES)

    # False when the recipient's preferences turned the channel off
    enabled = models.BooleanField(default=True)

    status = models.CharField(
        max_length=10,
        choices=DeliveryStatus.CHOICES,
        default=DeliveryStatus.PENDING,
        db_index=True
    )

    attempts = models.PositiveIntegerField(default=0)

    last_attempt_at = models.DateTimeField(null=True, blank=True)

    error_message = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['channel']
        constraints = [
            models.UniqueConstraint(
                fields=['notification', 'channel'],
                name='unique_delivery_per_channel'
            ),
        ]
        verbose_name_plural = 'Notification deliveries'

    def __str__(self):
        return f"{self.notification_id} [{self.channel}] {self.status}"

    def disable(self):
        self.enabled = False
        self.save(update_fields=['enabled'])

    def claim(self, now=None):
        """
        Move the row from pending to sending and count the attempt.

        Conditional on the row still being enabled and pending, so of two
        concurrent delivery runs only one gets True and calls the adapter.
        """
        now = now or timezone.now()
        claimed = type(self).objects.filter(
            pk=self.pk,
            enabled=True,
            status=DeliveryStatus.PENDING,
        ).update(
            status=DeliveryStatus.SENDING,
            attempts=models.F('attempts') + 1,
            last_attempt_at=now,
        )
        if not claimed:
            return False
        self.refresh_from_db(fields=['status', 'attempts', 'last_attempt_at'])
        return True

    def record_attempt(self, success, error=''):
        """Store the outcome of the attempt counted by ``claim()``."""
        self.status = DeliveryStatus.SENT if success else DeliveryStatus.FAILED
        self.error_message = '' if success else str(error)[:2000]
        self.save(update_fields=['status', 'error_message'])


def default_timezone():
    return settings.TIME_ZONE


def is_in_quiet_hours(current, start, end):
    """
    True when ``current`` falls inside the quiet window [start, end].

    A window with ``start > end`` wraps midnight (22:00-08:00).
    """
    if start <= end:
        return start <= current <= end
    return current >= start or current <= end


class NotificationPreference(models.Model):
    """
    Per-user channel switches, per-type channel matrix and quiet hours.

    ``channels`` maps notification type to ``{channel: bool}``; a missing
    entry means the channel is enabled for that type.
    """

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='notification_preference'
    )

    email_enabled = models.BooleanField(default=True)
    push_enabled = models.BooleanField(default=True)

    channels = models.JSONField(default=dict, blank=True)

    quiet_hours_enabled = models.BooleanField(default=False)
    quiet_hours_start = models.TimeField(default=time(22, 0))
    quiet_hours_end = models.TimeField(default=time(8, 0))
    quiet_hours_timezone = models.CharField(max_length=64, default=default_timezone)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Preferences for {self.user}"

    def allows(self, notification_type, channel):
        if channel == DeliveryChannel.EMAIL and not self.email_enabled:
            return False
        if channel == DeliveryChannel.PUSH and not self.push_enabled:
            return False
        type_settings = (self.channels or {}).get(notification_type) or {}
        return bool(type_settings.get(channel, True))

    def is_quiet_at(self, moment):
        if not self.quiet_hours_enabled:
            return False
        local = moment.astimezone(ZoneInfo(self.quiet_hours_timezone))
        current = local.time().replace(second=0, microsecond=0)
        return is_in_quiet_hours(current, self.quiet_hours_start, self.quiet_hours_end)


class PushSubscriptionQuerySet(models.QuerySet):

    def active_for(self, user):
        return self.filter(user=user, is_active=True)


class PushSubscription(models.Model):
    """A browser's Web Push subscription."""

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='push_subscriptions'
    )

    endpoint = models.URLField(max_length=500, unique=True)
    p256dh = models.CharField(max_length=255)
    auth = models.CharField(max_length=255)
    user_agent = models.CharField(max_length=255, blank=True, default='')

    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)

    objects = PushSubscriptionQuerySet.as_manager()

    def __str__(self):
        return f"{self.user} ({self.endpoint[:40]})"

    def as_subscription_info(self):
        return {
            'endpoint': self.endpoint,
            'keys': {'p256dh': self.p256dh, 'auth': self.auth},
        }

    def deactivate(self):
        self.is_active = False
        self.save(update_fields=['is_active'])

    def touch(self):
        self.last_used_at = timezone.now()
        self.save(update_fields=['last_used_at'])
