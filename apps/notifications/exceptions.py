# apps/notifications/exceptions.py
from django.core.exceptions import ValidationError


class DeliveryFailure(Exception):
    """A channel adapter could not hand the notification to its provider."""

    def __init__(self, channel, reason):
        self.channel = channel
        self.reason = reason
        super().__init__(f"{channel} delivery failed: {reason}")


class InvalidNotificationPayload(ValidationError):
    """Notification data carries an unknown key or a value of the wrong type."""


class UnknownRecipient(ValueError):
    """The notification recipient (user or company) could not be resolved."""
