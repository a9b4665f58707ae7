# apps/notifications/urls.py
"""
URL configuration for notifications app.

Endpoints:
- GET  /api/notifications/                    - List notifications
- GET  /api/notifications/{id}/               - Get notification detail
- DELETE /api/notifications/{id}/             - Delete a notification
- DELETE /api/notifications/clear-read/       - Delete all read notifications
- POST /api/notifications/mark-read/          - Mark as read
- GET  /api/notifications/unread-count/       - Get unread count
- GET/PUT /api/notifications/preferences/     - Preferences
- GET/POST/DELETE /api/notifications/push-subscriptions/ - Web Push registration
"""
from django.urls import path
from . import api

app_name = 'notifications'

urlpatterns = [
    path('', api.NotificationListAPI.as_view(), name='notification_list'),

    path('mark-read/', api.NotificationMarkReadAPI.as_view(), name='notification_mark_read'),

    path('clear-read/', api.NotificationClearReadAPI.as_view(), name='notification_clear_read'),

    path('unread-count/', api.NotificationUnreadCountAPI.as_view(), name='notification_unread_count'),

    path('preferences/', api.NotificationPreferenceAPI.as_view(), name='notification_preferences'),

    path('push-subscriptions/', api.PushSubscriptionAPI.as_view(), name='push_subscriptions'),

    path('<uuid:id>/', api.NotificationDetailAPI.as_view(), name='notification_detail'),
]
