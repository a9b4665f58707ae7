# apps/notifications/__init__.py
"""
Notification system for the recruitment platform.

Provides:
- Notification, delivery, preference and push subscription models
- NotificationDispatcher for persisting and delivering notifications
- Email and web push channel adapters
- REST APIs for the in-app inbox and preferences
"""
