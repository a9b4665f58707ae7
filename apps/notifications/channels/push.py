# apps/notifications/channels/push.py
"""
Web Push channel.

Builds a small JSON payload per notification type and fans it out to
every active subscription of the recipient through pywebpush.
"""
import json
import logging
from collections import namedtuple

from django.conf import settings
from django.utils import timezone
from pywebpush import WebPushException, webpush
import requests

from ..models import DeliveryChannel, NotificationType, PushSubscription

logger = logging.getLogger(__name__)

PushResult = namedtuple('PushResult', ['success', 'failed'])

# Push services answer these when a subscription no longer exists
GONE_STATUS_CODES = (404, 410)

CANDIDATE_INTERVIEWS_URL = '/candidate/interviews'
COMPANY_INTERVIEWS_URL = '/company/interviews'


def build_push_payload(notification_type, data, title='', message=''):
    """Return the push message dict (title, body, url, data, actions)."""
    company = data.get('company_name', 'A company')
    candidate = data.get('candidate_name', 'The candidate')
    job = data.get('job_title', 'a position')
    payload = {
        'title': title,
        'body': message,
        'url': data.get('action_url', '/'),
        'data': {'type': notification_type},
    }

    if notification_type == NotificationType.INTERVIEW_SCHEDULED:
        payload.update(
            title='Interview invitation',
            body=f"{company} invited you to an interview on {data.get('interview_date', 'a date to be confirmed')}",
            url=data.get('action_url', CANDIDATE_INTERVIEWS_URL),
            actions=[
                {'action': 'accept', 'title': 'Accept'},
                {'action': 'reject', 'title': 'Decline'},
            ],
        )
    elif notification_type == NotificationType.INTERVIEW_RESPONSE:
        accepted = data.get('response') == 'accepted'
        payload.update(
            title='Interview accepted' if accepted else 'Interview declined',
            body=f"{candidate} {'accepted' if accepted else 'declined'} the interview invitation",
            url=data.get('action_url', COMPANY_INTERVIEWS_URL),
        )
        payload['data']['response'] = data.get('response', '')
    elif notification_type == NotificationType.FEEDBACK_AVAILABLE:
        payload.update(
            title='Feedback available',
            body=f"Feedback from your interview with {company} is available",
            url=data.get('action_url', CANDIDATE_INTERVIEWS_URL),
        )
    elif notification_type == NotificationType.NEW_APPLICATION:
        payload.update(
            title='New application',
            body=f"{candidate} applied for {job}",
        )
    elif notification_type == NotificationType.APPLICATION_UPDATE:
        payload.update(
            title='Application update',
            body=f"Your application for {job} is now {data.get('status', 'updated')}",
        )
    elif notification_type == NotificationType.JOB_RECOMMENDATION:
        match = data.get('match_percentage')
        suffix = f" ({match}% match)" if match is not None else ''
        payload.update(
            title='New recommendation',
            body=f"{job} at {company}{suffix}",
        )
    elif notification_type == NotificationType.INTERVIEW_REMINDER:
        payload.update(
            title='Interview reminder',
            body=f"Your interview with {company} is in {data.get('time_until', 'less than a day')}",
            url=data.get('action_url', CANDIDATE_INTERVIEWS_URL),
        )

    if data.get('interview_id'):
        payload['data']['interview_id'] = data['interview_id']
    return payload


class PushChannel:
    """Send Web Push messages with VAPID credentials from settings."""

    channel = DeliveryChannel.PUSH

    def send(self, notification_type, recipient, data, title='', message=''):
        """
        Push the notification to every active subscription of ``recipient.user``.

        Returns PushResult(success, failed). A recipient without
        subscriptions yields PushResult(0, 0).
        """
        subscriptions = list(PushSubscription.objects.active_for(recipient.user))
        if not subscriptions:
            logger.debug(f"[PUSH_SKIPPED] user={recipient.user.pk} reason=no_subscriptions")
            return PushResult(0, 0)

        body = json.dumps({
            **build_push_payload(notification_type, data, title, message),
            'timestamp': int(timezone.now().timestamp() * 1000),
        })

        success = failed = 0
        for subscription in subscriptions:
            if self._push(subscription, body):
                success += 1
            else:
                failed += 1

        logger.info(
            f"[PUSH_SENT] type={notification_type} user={recipient.user.pk} "
            f"success={success} failed={failed}"
        )
        return PushResult(success, failed)

    def _push(self, subscription, body):
        try:
            webpush(
                subscription_info=subscription.as_subscription_info(),
                data=body,
                vapid_private_key=settings.VAPID_PRIVATE_KEY,
                vapid_claims={'sub': settings.VAPID_SUBJECT},
                timeout=settings.PUSH_TIMEOUT,
                ttl=settings.PUSH_TTL,
            )
        except WebPushException as exc:
            status_code = getattr(exc.response, 'status_code', None)
            if status_code in GONE_STATUS_CODES:
                subscription.deactivate()
                logger.info(f"[PUSH_SUBSCRIPTION_GONE] subscription={subscription.pk} status={status_code}")
            else:
                logger.warning(f"[PUSH_FAILED] subscription={subscription.pk} error={exc}")
            return False
        except requests.RequestException as exc:
            logger.warning(f"[PUSH_FAILED] subscription={subscription.pk} error={exc}")
            return False

        subscription.touch()
        return True
