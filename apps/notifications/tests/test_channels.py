# apps/notifications/tests/test_channels.py
"""
Tests for the email and push channel adapters.
"""
import json
import smtplib
from unittest.mock import MagicMock, patch

import requests
from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings
from pywebpush import WebPushException

from apps.notifications.channels import EmailChannel, PushChannel, PushResult, Recipient
from apps.notifications.channels.email import template_for
from apps.notifications.channels.push import build_push_payload
from apps.notifications.exceptions import DeliveryFailure
from apps.notifications.models import NotificationType, PushSubscription

User = get_user_model()


class EmailChannelTestCase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='jane', email='jane@example.com', password='testpass123')
        self.recipient = Recipient(user=self.user, name='Jane', email='jane@example.com')
        self.channel = EmailChannel()

    def test_invitation_email(self):
        data = {
            'company_name': 'Acme',
            'job_title': 'Backend Engineer',
            'interview_date': 'March 10, 2026 at 10:00 AM',
            'meeting_url': 'https://meet.example.com/abc',
            'action_url': 'http://localhost:3000/candidate/interviews/1',
        }

        self.assertTrue(self.channel.send(NotificationType.INTERVIEW_SCHEDULED, self.recipient, data))

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.subject, 'Interview invitation from Acme')
        self.assertEqual(message.to, ['jane@example.com'])
        self.assertIn('Backend Engineer', message.body)
        self.assertNotIn('<p>', message.body)

        html, mimetype = message.alternatives[0]
        self.assertEqual(mimetype, 'text/html')
        self.assertIn('https://meet.example.com/abc', html)
        self.assertIn('http://localhost:3000/candidate/interviews/1', html)

    def test_plain_text_body_from_text_template(self):
        subject, html, text = self.channel.render(
            NotificationType.INTERVIEW_SCHEDULED,
            self.recipient,
            {
                'company_name': "O'Brien & Co",
                'interview_date': 'March 10, 2026 at 10:00 AM',
                'meeting_url': 'https://meet.example.com/abc',
                'action_url': 'http://localhost:3000/candidate/interviews/1',
            },
        )

        self.assertTrue(text.startswith('Hello Jane,'))
        self.assertIn("O'Brien & Co has invited you to an interview.", text)
        self.assertIn('Date: March 10, 2026 at 10:00 AM', text)
        self.assertIn('Meeting link: https://meet.example.com/abc', text)
        self.assertIn('Respond to invitation: http://localhost:3000/candidate/interviews/1', text)
        self.assertNotIn('<', text)
        # the HTML alternative stays escaped
        self.assertIn('O&#x27;Brien &amp; Co', html)

    def test_response_subject(self):
        subject, _, _ = self.channel.render(
            NotificationType.INTERVIEW_RESPONSE,
            self.recipient,
            {'candidate_name': 'Jane', 'response': 'rejected'},
        )

        self.assertEqual(subject, 'Jane declined the interview invitation')

    @override_settings(PLATFORM_NAME='Hiring Hub')
    def test_generic_fallback(self):
        self.assertEqual(template_for(NotificationType.INTERVIEW_NO_SHOW), 'generic')

        self.channel.send(
            NotificationType.INTERVIEW_NO_SHOW, self.recipient, {},
            title='Interview missed', message='The interview was marked as a no-show.',
        )

        self.assertEqual(mail.outbox[0].subject, 'Hiring Hub: Interview missed')
        self.assertIn('marked as a no-show', mail.outbox[0].body)

    def test_missing_address(self):
        with self.assertRaises(DeliveryFailure):
            self.channel.send(NotificationType.GENERAL, self.recipient._replace(email=''), {})

        self.assertEqual(len(mail.outbox), 0)

    def test_smtp_error(self):
        with patch('django.core.mail.EmailMultiAlternatives.send', side_effect=smtplib.SMTPException('rejected')):
            with self.assertRaises(DeliveryFailure) as ctx:
                self.channel.send(NotificationType.GENERAL, self.recipient, {})

        self.assertIn('rejected', ctx.exception.reason)

    def test_timeout(self):
        with patch('django.core.mail.EmailMultiAlternatives.send', side_effect=TimeoutError('timed out')):
            with self.assertRaises(DeliveryFailure):
                self.channel.send(NotificationType.GENERAL, self.recipient, {})


@override_settings(VAPID_PRIVATE_KEY='test-private-key', VAPID_SUBJECT='mailto:ops@example.com')
class PushChannelTestCase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='jane', email='jane@example.com', password='testpass123')
        self.recipient = Recipient(user=self.user, name='Jane', email='jane@example.com')
        self.channel = PushChannel()

    def subscribe(self, endpoint):
        return PushSubscription.objects.create(
            user=self.user,
            endpoint=endpoint,
            p256dh='BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM',
            auth='tBHItJI5svbpez7KI4CCXg',
        )

    def test_no_subscriptions(self):
        with patch('apps.notifications.channels.push.webpush') as webpush:
            result = self.channel.send(NotificationType.GENERAL, self.recipient, {})

        self.assertEqual(result, PushResult(0, 0))
        webpush.assert_not_called()

    def test_fan_out(self):
        first = self.subscribe('https://push.example.com/a')
        self.subscribe('https://push.example.com/b')

        with patch('apps.notifications.channels.push.webpush') as webpush:
            result = self.channel.send(
                NotificationType.INTERVIEW_SCHEDULED,
                self.recipient,
                {'company_name': 'Acme', 'interview_date': 'Monday', 'interview_id': 'abc'},
            )

        self.assertEqual(result, PushResult(2, 0))
        self.assertEqual(webpush.call_count, 2)

        kwargs = webpush.call_args.kwargs
        self.assertEqual(kwargs['vapid_private_key'], 'test-private-key')
        self.assertEqual(kwargs['vapid_claims'], {'sub': 'mailto:ops@example.com'})
        body = json.loads(kwargs['data'])
        self.assertEqual(body['title'], 'Interview invitation')
        self.assertEqual(body['data']['interview_id'], 'abc')
        self.assertEqual([a['action'] for a in body['actions']], ['accept', 'reject'])

        first.refresh_from_db()
        self.assertIsNotNone(first.last_used_at)

    def test_gone_subscription_deactivated(self):
        gone = self.subscribe('https://push.example.com/gone')
        alive = self.subscribe('https://push.example.com/alive')

        def fake_webpush(subscription_info, **kwargs):
            if subscription_info['endpoint'] == gone.endpoint:
                raise WebPushException('Push failed: 410 Gone', response=MagicMock(status_code=410))

        with patch('apps.notifications.channels.push.webpush', side_effect=fake_webpush):
            result = self.channel.send(NotificationType.GENERAL, self.recipient, {})

        self.assertEqual(result, PushResult(1, 1))
        gone.refresh_from_db()
        alive.refresh_from_db()
        self.assertFalse(gone.is_active)
        self.assertTrue(alive.is_active)

        # deactivated subscriptions are not tried again
        with patch('apps.notifications.channels.push.webpush') as webpush:
            self.channel.send(NotificationType.GENERAL, self.recipient, {})
        self.assertEqual(webpush.call_count, 1)

    def test_server_error_keeps_subscription(self):
        subscription = self.subscribe('https://push.example.com/flaky')

        with patch(
            'apps.notifications.channels.push.webpush',
            side_effect=WebPushException('Push failed: 500', response=MagicMock(status_code=500)),
        ):
            result = self.channel.send(NotificationType.GENERAL, self.recipient, {})

        self.assertEqual(result, PushResult(0, 1))
        subscription.refresh_from_db()
        self.assertTrue(subscription.is_active)

    def test_network_timeout(self):
        self.subscribe('https://push.example.com/slow')

        with patch('apps.notifications.channels.push.webpush', side_effect=requests.Timeout('slow')):
            result = self.channel.send(NotificationType.GENERAL, self.recipient, {})

        self.assertEqual(result, PushResult(0, 1))

    def test_payload_templates(self):
        payload = build_push_payload(
            NotificationType.INTERVIEW_RESPONSE,
            {'candidate_name': 'Jane', 'response': 'accepted', 'action_url': '/company/interviews/1'},
        )
        self.assertEqual(payload['title'], 'Interview accepted')
        self.assertEqual(payload['url'], '/company/interviews/1')

        payload = build_push_payload(
            NotificationType.JOB_RECOMMENDATION,
            {'job_title': 'Data Engineer', 'company_name': 'Globex', 'match_percentage': 87},
        )
        self.assertEqual(payload['body'], 'Data Engineer at Globex (87% match)')

        payload = build_push_payload(NotificationType.GENERAL, {}, title='Hi', message='Body')
        self.assertEqual((payload['title'], payload['body'], payload['url']), ('Hi', 'Body', '/'))
