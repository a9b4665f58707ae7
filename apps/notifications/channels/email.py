# apps/notifications/channels/email.py
"""
Email channel.

Renders one of a fixed set of templates under
``templates/notifications/email/``: ``<name>.txt`` for the plain-text body
and ``<name>.html`` for the HTML alternative.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string

from ..exceptions import DeliveryFailure
from ..models import DeliveryChannel, NotificationType

logger = logging.getLogger(__name__)

GENERIC_TEMPLATE = 'generic'

TEMPLATE_BY_TYPE = {
    NotificationType.INTERVIEW_SCHEDULED: 'interview_invitation',
    NotificationType.INTERVIEW_RESPONSE: 'interview_response',
    NotificationType.FEEDBACK_AVAILABLE: 'feedback_available',
    NotificationType.NEW_APPLICATION: 'new_application',
    NotificationType.APPLICATION_UPDATE: 'application_update',
    NotificationType.JOB_RECOMMENDATION: 'job_recommendation',
    NotificationType.INTERVIEW_REMINDER: 'interview_reminder',
    NotificationType.FEEDBACK_PENDING: 'feedback_pending',
}


def template_for(notification_type):
    return TEMPLATE_BY_TYPE.get(notification_type, GENERIC_TEMPLATE)


def build_subject(template, data, title):
    platform = settings.PLATFORM_NAME
    company = data.get('company_name', 'a company')
    job = data.get('job_title', 'a position')

    if template == 'interview_invitation':
        return f"Interview invitation from {company}"
    if template == 'interview_response':
        verb = 'accepted' if data.get('response') == 'accepted' else 'declined'
        return f"{data.get('candidate_name', 'The candidate')} {verb} the interview invitation"
    if template == 'feedback_available':
        return f"Feedback from your interview with {company} is available"
    if template == 'new_application':
        return f"New application for {job}"
    if template == 'application_update':
        return f"Update on your application for {job}"
    if template == 'job_recommendation':
        return f"Recommended for you: {job}"
    if template == 'interview_reminder':
        return f"Reminder: interview with {company}"
    if template == 'feedback_pending':
        return "Interview feedback awaiting review"
    return f"{platform}: {title}" if title else platform


class EmailChannel:
    """Render and send notification emails through Django's mail backend."""

    channel = DeliveryChannel.EMAIL

    def render(self, notification_type, recipient, data, title='', message=''):
        """Return ``(subject, html, text)`` for the notification."""
        template = template_for(notification_type)
        context = {
            **data,
            'recipient_name': recipient.name,
            'title': title,
            'message': message,
            'platform_name': settings.PLATFORM_NAME,
            'frontend_url': settings.FRONTEND_URL,
        }
        text = render_to_string(f'notifications/email/{template}.txt', context).strip()
        html = render_to_string(f'notifications/email/{template}.html', context)
        return build_subject(template, data, title), html, text

    def send(self, notification_type, recipient, data, title='', message=''):
        """
        Send the notification email to ``recipient.email``.

        Returns True once the backend accepted the message. Raises
        DeliveryFailure when there is no address or the backend refuses.
        """
        if not recipient.email:
            raise DeliveryFailure(self.channel, 'recipient has no email address')

        subject, html, text = self.render(notification_type, recipient, data, title, message)

        connection = get_connection(timeout=settings.EMAIL_TIMEOUT)
        msg = EmailMultiAlternatives(
            subject,
            text,
            settings.DEFAULT_FROM_EMAIL,
            [recipient.email],
            connection=connection,
        )
        msg.attach_alternative(html, 'text/html')

        try:
            sent = msg.send(fail_silently=False)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryFailure(self.channel, str(exc)) from exc

        if not sent:
            raise DeliveryFailure(self.channel, 'message was not accepted by the mail backend')

        logger.info(f"[EMAIL_SENT] type={notification_type} to={recipient.email}")
        return True
