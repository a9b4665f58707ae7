# apps/notifications/channels/__init__.py
"""
Delivery channel adapters.

Adapters only render and hand off; whether a channel should be used at all
is decided by the dispatcher.
"""
from .base import Recipient
from .email import EmailChannel
from .push import PushChannel, PushResult

__all__ = ['Recipient', 'EmailChannel', 'PushChannel', 'PushResult']
