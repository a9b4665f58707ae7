# apps/notifications/tests/test_dispatcher.py
"""
Tests for NotificationDispatcher.

Tests cover:
1. dispatch() persistence and delivery on commit
2. Preferences (global switches, per-type matrix)
3. Quiet hours deferral and urgent bypass
4. Adapter failures recorded per channel
5. Company recipients and role broadcast
6. Payload validation
"""
from datetime import timedelta
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from django.utils import timezone

from apps.accounts.models import Company
from apps.notifications.exceptions import DeliveryFailure, InvalidNotificationPayload, UnknownRecipient
from apps.notifications.models import (
    DeliveryStatus,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    RecipientType,
)
from apps.notifications.services import NotificationDispatcher, NotificationIntent, get_preferences

User = get_user_model()


class DispatcherTestMixin:

    def setUp(self):
        self.user = User.objects.create_user(
            username='jane',
            email='jane@example.com',
            password='testpass123',
            display_name='Jane Candidate',
        )

    def intent(self, **overrides):
        params = {
            'recipient_id': self.user.pk,
            'recipient_type': RecipientType.USER,
            'notification_type': NotificationType.GENERAL,
            'title': 'Welcome',
            'message': 'Your account is ready.',
            'data': {'action_url': 'http://localhost:3000/dashboard'},
        }
        params.update(overrides)
        return NotificationIntent(**params)

    def deliveries(self, notification):
        return {d.channel: d for d in notification.deliveries.all()}

    def at(self, hour, minute=0):
        return timezone.now().replace(hour=hour, minute=minute, second=0, microsecond=0)

    def enable_quiet_hours(self, user=None):
        preference = get_preferences(user or self.user)
        preference.quiet_hours_enabled = True
        preference.quiet_hours_timezone = 'UTC'
        preference.save()
        return preference


class DispatchTestCase(DispatcherTestMixin, TestCase):

    def test_dispatch_persists_notification_and_deliveries(self):
        notification = NotificationDispatcher.dispatch(self.intent())

        self.assertEqual(notification.recipient, self.user)
        self.assertEqual(notification.status, NotificationStatus.PENDING)
        self.assertFalse(notification.is_read)
        self.assertIsNotNone(notification.expires_at)

        deliveries = self.deliveries(notification)
        self.assertEqual(set(deliveries), {'email', 'push'})
        for delivery in deliveries.values():
            self.assertTrue(delivery.enabled)
            self.assertEqual(delivery.status, DeliveryStatus.PENDING)
            self.assertEqual(delivery.attempts, 0)

    def test_delivery_waits_for_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            notification = NotificationDispatcher.dispatch(self.intent())
            self.assertEqual(len(mail.outbox), 0)

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['jane@example.com'])

        deliveries = self.deliveries(notification)
        self.assertEqual(deliveries['email'].status, DeliveryStatus.SENT)
        self.assertEqual(deliveries['email'].attempts, 1)
        # no push subscriptions: nothing to send, counted as sent
        self.assertEqual(deliveries['push'].status, DeliveryStatus.SENT)

    def test_unknown_key_rejected_before_write(self):
        with self.assertRaises(InvalidNotificationPayload):
            NotificationDispatcher.dispatch(self.intent(data={'salary': '100k'}))

        self.assertFalse(Notification.objects.exists())

    def test_wrong_value_type_rejected(self):
        with self.assertRaises(InvalidNotificationPayload):
            NotificationDispatcher.dispatch(self.intent(
                notification_type=NotificationType.INTERVIEW_SCHEDULED,
                data={'duration_minutes': '60'},
            ))

    def test_none_values_dropped(self):
        notification = NotificationDispatcher.dispatch(self.intent(
            notification_type=NotificationType.INTERVIEW_SCHEDULED,
            data={'company_name': 'Acme', 'job_title': None, 'duration_minutes': 45},
        ))

        self.assertEqual(notification.data, {'company_name': 'Acme', 'duration_minutes': 45})

    def test_unknown_recipient(self):
        with self.assertRaises(UnknownRecipient):
            NotificationDispatcher.dispatch(self.intent(recipient_id=987654))

        with self.assertRaises(UnknownRecipient):
            NotificationDispatcher.dispatch(self.intent(recipient_type='team'))


class DeliverTestCase(DispatcherTestMixin, TestCase):

    def test_quiet_hours_defer_delivery(self):
        self.enable_quiet_hours()
        notification = NotificationDispatcher.dispatch(self.intent())

        NotificationDispatcher.deliver(notification.id, now=self.at(23, 30))

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.PENDING)
        self.assertEqual(len(mail.outbox), 0)
        for delivery in self.deliveries(notification).values():
            self.assertTrue(delivery.enabled)
            self.assertEqual(delivery.status, DeliveryStatus.PENDING)
            self.assertEqual(delivery.attempts, 0)

    def test_outside_quiet_hours_delivers(self):
        self.enable_quiet_hours()
        notification = NotificationDispatcher.dispatch(self.intent())

        NotificationDispatcher.deliver(notification.id, now=self.at(9, 0))

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)
        self.assertEqual(len(mail.outbox), 1)

    def test_deferred_channels_delivered_later(self):
        self.enable_quiet_hours()
        notification = NotificationDispatcher.dispatch(self.intent())

        NotificationDispatcher.deliver(notification.id, now=self.at(23, 30))
        NotificationDispatcher.deliver(notification.id, now=self.at(9, 0))

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(self.deliveries(notification)['email'].attempts, 1)

    def test_urgent_bypasses_quiet_hours(self):
        self.enable_quiet_hours()
        notification = NotificationDispatcher.dispatch(self.intent(priority=NotificationPriority.URGENT))

        NotificationDispatcher.deliver(notification.id, now=self.at(23, 30))

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)
        self.assertEqual(len(mail.outbox), 1)

    def test_type_disabled_for_channel(self):
        preference = get_preferences(self.user)
        preference.channels = {NotificationType.GENERAL: {'email': False}}
        preference.save()
        notification = NotificationDispatcher.dispatch(self.intent())

        NotificationDispatcher.deliver(notification.id)

        deliveries = self.deliveries(notification)
        self.assertFalse(deliveries['email'].enabled)
        self.assertEqual(deliveries['email'].attempts, 0)
        self.assertEqual(deliveries['push'].status, DeliveryStatus.SENT)
        self.assertEqual(len(mail.outbox), 0)

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)

    def test_all_channels_switched_off(self):
        preference = get_preferences(self.user)
        preference.email_enabled = False
        preference.push_enabled = False
        preference.save()
        notification = NotificationDispatcher.dispatch(self.intent())

        NotificationDispatcher.deliver(notification.id)

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.PENDING)
        self.assertFalse(any(d.enabled for d in self.deliveries(notification).values()))
        # the in-app record is still there
        self.assertEqual(NotificationDispatcher.get_unread_count(self.user), 1)

    def test_expired_notification_not_delivered(self):
        notification = NotificationDispatcher.dispatch(self.intent())
        Notification.objects.filter(pk=notification.pk).update(expires_at=timezone.now() - timedelta(minutes=1))

        NotificationDispatcher.deliver(notification.id)

        self.assertEqual(len(mail.outbox), 0)
        for delivery in self.deliveries(notification).values():
            self.assertEqual(delivery.attempts, 0)

    def test_missing_notification(self):
        notification = NotificationDispatcher.dispatch(self.intent())
        notification_id = notification.id
        notification.delete()

        self.assertIsNone(NotificationDispatcher.deliver(notification_id))

    def test_channel_failure_recorded(self):
        notification = NotificationDispatcher.dispatch(self.intent())

        with patch.object(
            NotificationDispatcher.email_channel, 'send',
            side_effect=DeliveryFailure('email', 'smtp down'),
        ):
            NotificationDispatcher.deliver(notification.id)

        deliveries = self.deliveries(notification)
        self.assertEqual(deliveries['email'].status, DeliveryStatus.FAILED)
        self.assertEqual(deliveries['email'].error_message, 'smtp down')
        self.assertEqual(deliveries['email'].attempts, 1)
        self.assertIsNotNone(deliveries['email'].last_attempt_at)
        # push is unaffected by the email failure
        self.assertEqual(deliveries['push'].status, DeliveryStatus.SENT)

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)

    def test_all_channels_failing(self):
        notification = NotificationDispatcher.dispatch(self.intent())

        with patch.object(NotificationDispatcher.email_channel, 'send', side_effect=RuntimeError('boom')), \
                patch.object(NotificationDispatcher.push_channel, 'send', side_effect=DeliveryFailure('push', 'gone')):
            NotificationDispatcher.deliver(notification.id)

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.FAILED)
        deliveries = self.deliveries(notification)
        self.assertEqual(deliveries['email'].error_message, 'boom')
        self.assertEqual(deliveries['push'].error_message, 'gone')

    def test_failed_channel_not_retried(self):
        notification = NotificationDispatcher.dispatch(self.intent())

        with patch.object(
            NotificationDispatcher.email_channel, 'send',
            side_effect=DeliveryFailure('email', 'smtp down'),
        ):
            NotificationDispatcher.deliver(notification.id)

        NotificationDispatcher.deliver(notification.id)

        self.assertEqual(self.deliveries(notification)['email'].attempts, 1)
        self.assertEqual(len(mail.outbox), 0)

    def test_overlapping_runs_send_each_channel_once(self):
        from apps.notifications.tasks import process_pending_notifications

        notification = NotificationDispatcher.dispatch(self.intent())
        overlapped = []

        def send_while_beat_runs(*args, **kwargs):
            # the periodic task fires while this delivery is still sending
            if not overlapped:
                overlapped.append(process_pending_notifications())
            return True

        with patch.object(NotificationDispatcher.email_channel, 'send', side_effect=send_while_beat_runs) as send:
            NotificationDispatcher.deliver(notification.id)

        self.assertEqual(send.call_count, 1)
        deliveries = self.deliveries(notification)
        self.assertEqual(deliveries['email'].attempts, 1)
        self.assertEqual(deliveries['email'].status, DeliveryStatus.SENT)
        self.assertEqual(deliveries['push'].attempts, 1)

        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)

    def test_claim_is_granted_once(self):
        notification = NotificationDispatcher.dispatch(self.intent())
        first = notification.deliveries.get(channel='email')
        second = notification.deliveries.get(channel='email')

        self.assertTrue(first.claim())
        self.assertFalse(second.claim())

        first.refresh_from_db()
        self.assertEqual(first.status, DeliveryStatus.SENDING)
        self.assertEqual(first.attempts, 1)
        notification.refresh_status()
        self.assertEqual(notification.status, NotificationStatus.PENDING)

    def test_scheduled_notification_held_until_due(self):
        later = timezone.now() + timedelta(hours=2)

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            notification = NotificationDispatcher.dispatch(self.intent(scheduled_for=later))

        self.assertEqual(callbacks, [])
        self.assertEqual(notification.scheduled_for, later)

        NotificationDispatcher.deliver(notification.id)
        self.assertEqual(len(mail.outbox), 0)
        for delivery in self.deliveries(notification).values():
            self.assertEqual(delivery.attempts, 0)

        NotificationDispatcher.deliver(notification.id, now=later + timedelta(minutes=1))

        self.assertEqual(len(mail.outbox), 1)
        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)

    def test_past_schedule_delivers_immediately(self):
        with self.captureOnCommitCallbacks(execute=True):
            notification = NotificationDispatcher.dispatch(
                self.intent(scheduled_for=timezone.now() - timedelta(minutes=5))
            )

        self.assertEqual(len(mail.outbox), 1)
        notification.refresh_from_db()
        self.assertEqual(notification.status, NotificationStatus.SENT)


class RecipientTestCase(DispatcherTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.owner = User.objects.create_user(
            username='owner', email='owner@acme.com', password='testpass123', role='company'
        )
        self.company = Company.objects.create(name='Acme', email='jobs@acme.com', owner=self.owner)

    def test_company_notification_goes_to_owner_inbox_and_company_email(self):
        notification = NotificationDispatcher.dispatch(self.intent(
            recipient_id=self.company.pk,
            recipient_type=RecipientType.COMPANY,
        ))

        self.assertEqual(notification.recipient, self.owner)
        self.assertEqual(notification.company, self.company)

        NotificationDispatcher.deliver(notification.id)

        self.assertEqual(mail.outbox[0].to, ['jobs@acme.com'])
        self.assertIn('Hello Acme', mail.outbox[0].body)

    def test_company_without_email_uses_owner_address(self):
        self.company.email = ''
        self.company.save()
        notification = NotificationDispatcher.dispatch(self.intent(
            recipient_id=self.company.pk,
            recipient_type=RecipientType.COMPANY,
        ))

        NotificationDispatcher.deliver(notification.id)

        self.assertEqual(mail.outbox[0].to, ['owner@acme.com'])

    def test_company_without_owner_uses_first_member(self):
        globex = Company.objects.create(name='Globex')
        member = User.objects.create_user(
            username='member', email='member@globex.com', password='testpass123',
            role='company', company=globex,
        )

        notification = NotificationDispatcher.dispatch(self.intent(
            recipient_id=globex.pk,
            recipient_type=RecipientType.COMPANY,
        ))

        self.assertEqual(notification.recipient, member)

    def test_company_nobody_to_notify(self):
        empty = Company.objects.create(name='Empty')

        with self.assertRaises(UnknownRecipient):
            NotificationDispatcher.dispatch(self.intent(
                recipient_id=empty.pk,
                recipient_type=RecipientType.COMPANY,
            ))

    def test_broadcast_to_admins(self):
        admin = User.objects.create_user(
            username='admin', email='admin@example.com', password='testpass123', role='admin'
        )
        staff = User.objects.create_user(
            username='staff', email='staff@example.com', password='testpass123', is_staff=True
        )
        User.objects.create_user(
            username='gone', email='gone@example.com', password='testpass123', role='admin', is_active=False
        )

        notifications = NotificationDispatcher.broadcast_to_role(
            User.ROLE_ADMIN,
            NotificationType.SYSTEM_ALERT,
            'Queue backlog',
            'Delivery queue is growing.',
            data={'severity': 'warning'},
        )

        self.assertEqual({n.recipient for n in notifications}, {admin, staff})
        self.assertFalse(Notification.objects.filter(recipient=self.user).exists())

    def test_broadcast_continues_past_failing_recipient(self):
        first = User.objects.create_user(
            username='admin1', email='admin1@example.com', password='testpass123', role='admin'
        )
        second = User.objects.create_user(
            username='admin2', email='admin2@example.com', password='testpass123', role='admin'
        )
        dispatch = NotificationDispatcher.dispatch

        def fail_for_first(intent):
            if intent.recipient_id == first.pk:
                raise UnknownRecipient('inbox unavailable')
            return dispatch(intent)

        with patch.object(NotificationDispatcher, 'dispatch', side_effect=fail_for_first) as mocked:
            notifications = NotificationDispatcher.broadcast_to_role(
                User.ROLE_ADMIN, NotificationType.GENERAL, 'Heads up', 'Maintenance tonight'
            )

        self.assertEqual(mocked.call_count, 2)
        self.assertEqual([n.recipient for n in notifications], [second])
        self.assertFalse(Notification.objects.filter(recipient=first).exists())
        self.assertTrue(Notification.objects.filter(recipient=second).exists())

    def test_broadcast_with_no_recipients(self):
        notifications = NotificationDispatcher.broadcast_to_role(
            User.ROLE_ADMIN, NotificationType.GENERAL, 'Hello', 'Nobody here'
        )

        self.assertEqual(notifications, [])


class InboxTestCase(DispatcherTestMixin, TestCase):

    def test_mark_as_read_and_unread_count(self):
        first = NotificationDispatcher.dispatch(self.intent())
        NotificationDispatcher.dispatch(self.intent(title='Second'))
        self.assertEqual(NotificationDispatcher.get_unread_count(self.user), 2)

        NotificationDispatcher.mark_as_read(self.user, first.id)

        first.refresh_from_db()
        self.assertTrue(first.is_read)
        self.assertIsNotNone(first.read_at)
        self.assertEqual(NotificationDispatcher.get_unread_count(self.user), 1)

        self.assertEqual(NotificationDispatcher.mark_all_as_read(self.user), 1)
        self.assertEqual(NotificationDispatcher.get_unread_count(self.user), 0)

    def test_cannot_mark_someone_elses_notification(self):
        other = User.objects.create_user(username='other', email='other@example.com', password='testpass123')
        notification = NotificationDispatcher.dispatch(self.intent())

        self.assertIsNone(NotificationDispatcher.mark_as_read(other, notification.id))

        notification.refresh_from_db()
        self.assertFalse(notification.is_read)

    def test_delete_notification(self):
        other = User.objects.create_user(username='other', email='other@example.com', password='testpass123')
        notification = NotificationDispatcher.dispatch(self.intent())

        self.assertFalse(NotificationDispatcher.delete_notification(other, notification.id))
        self.assertTrue(Notification.objects.filter(pk=notification.pk).exists())

        self.assertTrue(NotificationDispatcher.delete_notification(self.user, notification.id))
        self.assertFalse(Notification.objects.filter(pk=notification.pk).exists())
        self.assertFalse(NotificationDispatcher.delete_notification(self.user, notification.id))

    def test_clear_read_keeps_unread(self):
        other = User.objects.create_user(username='other', email='other@example.com', password='testpass123')
        read = NotificationDispatcher.dispatch(self.intent(title='Read'))
        unread = NotificationDispatcher.dispatch(self.intent(title='Unread'))
        foreign = NotificationDispatcher.dispatch(self.intent(recipient_id=other.pk))
        read.mark_as_read()
        foreign.mark_as_read()

        self.assertEqual(NotificationDispatcher.clear_read(self.user), 1)

        self.assertFalse(Notification.objects.filter(pk=read.pk).exists())
        self.assertTrue(Notification.objects.filter(pk=unread.pk).exists())
        self.assertTrue(Notification.objects.filter(pk=foreign.pk).exists())
