# apps/notifications/payloads.py
"""
Recognized template data per notification type.

Every notification carries a small ``data`` map that the email and push
templates read. Keys are validated against this table so a template never
receives something it does not understand.
"""
from .exceptions import InvalidNotificationPayload
from .models import NotificationType

TEXT = (str,)
NUMBER = (int, float)

# Accepted on every notification type
COMMON_KEYS = {
    'action_url': TEXT,
    'interview_id': TEXT,
}

TYPE_KEYS = {
    NotificationType.INTERVIEW_PENDING_APPROVAL: {
        'candidate_name': TEXT,
        'company_name': TEXT,
        'job_title': TEXT,
        'interview_title': TEXT,
        'interview_date': TEXT,
    },
    NotificationType.INTERVIEW_SCHEDULED: {
        'company_name': TEXT,
        'job_title': TEXT,
        'interview_title': TEXT,
        'interview_date': TEXT,
        'duration_minutes': NUMBER,
        'mode': TEXT,
        'location': TEXT,
        'meeting_url': TEXT,
        'interviewer_name': TEXT,
    },
    NotificationType.INTERVIEW_NOT_APPROVED: {
        'company_name': TEXT,
        'interview_title': TEXT,
        'admin_comments': TEXT,
    },
    NotificationType.INTERVIEW_APPROVED: {
        'candidate_name': TEXT,
        'interview_title': TEXT,
        'interview_date': TEXT,
        'admin_comments': TEXT,
    },
    NotificationType.INTERVIEW_REJECTED: {
        'candidate_name': TEXT,
        'interview_title': TEXT,
        'admin_comments': TEXT,
    },
    NotificationType.INTERVIEW_RESPONSE: {
        'candidate_name': TEXT,
        'company_name': TEXT,
        'interview_title': TEXT,
        'interview_date': TEXT,
        'response': TEXT,
        'candidate_comments': TEXT,
    },
    NotificationType.INTERVIEW_COMPLETED: {
        'candidate_name': TEXT,
        'company_name': TEXT,
        'interview_title': TEXT,
        'reason': TEXT,
    },
    NotificationType.INTERVIEW_CANCELLED: {
        'candidate_name': TEXT,
        'company_name': TEXT,
        'interview_title': TEXT,
        'interview_date': TEXT,
        'reason': TEXT,
    },
    NotificationType.INTERVIEW_NO_SHOW: {
        'candidate_name': TEXT,
        'company_name': TEXT,
        'interview_title': TEXT,
        'reason': TEXT,
    },
    NotificationType.INTERVIEW_REMINDER: {
        'company_name': TEXT,
        'interview_title': TEXT,
        'interview_date': TEXT,
        'time_until': TEXT,
        'mode': TEXT,
        'location': TEXT,
        'meeting_url': TEXT,
    },
    NotificationType.FEEDBACK_PENDING: {
        'candidate_name': TEXT,
        'company_name': TEXT,
        'interview_title': TEXT,
    },
    NotificationType.FEEDBACK_AVAILABLE: {
        'company_name': TEXT,
        'interview_title': TEXT,
    },
    NotificationType.NEW_APPLICATION: {
        'candidate_name': TEXT,
        'company_name': TEXT,
        'job_title': TEXT,
        'application_id': TEXT,
    },
    NotificationType.APPLICATION_UPDATE: {
        'company_name': TEXT,
        'job_title': TEXT,
        'status': TEXT,
        'application_id': TEXT,
    },
    NotificationType.JOB_RECOMMENDATION: {
        'company_name': TEXT,
        'job_title': TEXT,
        'job_id': TEXT,
        'match_percentage': NUMBER,
    },
    NotificationType.SYSTEM_ALERT: {
        'severity': TEXT,
    },
    NotificationType.GENERAL: {},
}


def allowed_keys(notification_type):
    if notification_type not in TYPE_KEYS:
        raise InvalidNotificationPayload(
            f"Unknown notification type: {notification_type}",
            code='unknown_type',
        )
    return {**COMMON_KEYS, **TYPE_KEYS[notification_type]}


def validate_payload(notification_type, data):
    """
    Return a cleaned copy of ``data`` for ``notification_type``.

    ``None`` values are dropped. Raises InvalidNotificationPayload for
    unknown keys or wrongly typed values.
    """
    allowed = allowed_keys(notification_type)
    cleaned = {}
    errors = {}

    for key, value in (data or {}).items():
        if value is None:
            continue
        if key not in allowed:
            errors[key] = f"'{key}' is not a recognized field for {notification_type}"
            continue
        expected = allowed[key]
        # bool is an int subclass; never accept it as a number
        if isinstance(value, bool) or not isinstance(value, expected):
            errors[key] = f"'{key}' must be of type {expected[0].__name__}"
            continue
        cleaned[key] = value

    if errors:
        raise InvalidNotificationPayload(errors)

    return cleaned
