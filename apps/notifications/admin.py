# apps/notifications/admin.py
"""
Django admin configuration for Notifications.
"""
from django.contrib import admin
from .models import Notification, NotificationDelivery, NotificationPreference, PushSubscription


class NotificationDeliveryInline(admin.TabularInline):
    model = NotificationDelivery
    extra = 0
    readonly_fields = ['channel', 'enabled', 'status', 'attempts', 'last_attempt_at', 'error_message']
    can_delete = False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin configuration for Notification model."""

    list_display = [
        'id',
        'recipient',
        'recipient_type',
        'notification_type',
        'priority',
        'status',
        'is_read',
        'created_at',
    ]
    list_filter = [
        'notification_type',
        'status',
        'priority',
        'is_read',
        'created_at',
    ]
    search_fields = [
        'recipient__email',
        'recipient__username',
        'title',
        'message',
    ]
    readonly_fields = [
        'id',
        'status',
        'created_at',
        'updated_at',
        'read_at',
    ]
    ordering = ['-created_at']
    inlines = [NotificationDeliveryInline]

    fieldsets = (
        (None, {
            'fields': ('id', 'recipient', 'recipient_type', 'company', 'notification_type', 'priority')
        }),
        ('Content', {
            'fields': ('title', 'message', 'data')
        }),
        ('Status', {
            'fields': ('status', 'is_read', 'read_at', 'scheduled_for', 'expires_at')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(NotificationPreference)
class NotificationPreferenceAdmin(admin.ModelAdmin):
    list_display = ['user', 'email_enabled', 'push_enabled', 'quiet_hours_enabled', 'updated_at']
    search_fields = ['user__email']


@admin.register(PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ['user', 'is_active', 'created_at', 'last_used_at']
    list_filter = ['is_active']
    search_fields = ['user__email', 'endpoint']
