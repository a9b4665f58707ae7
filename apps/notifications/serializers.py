# apps/notifications/serializers.py
"""
Serializers for the notification inbox, preferences and push subscriptions.
"""
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rest_framework import serializers

from .models import (
    DeliveryChannel,
    Notification,
    NotificationDelivery,
    NotificationPreference,
    NotificationType,
    PushSubscription,
)


class NotificationDeliverySerializer(serializers.ModelSerializer):

    class Meta:
        model = NotificationDelivery
        fields = ['channel', 'enabled', 'status', 'attempts', 'last_attempt_at']
        read_only_fields = fields


class NotificationSerializer(serializers.ModelSerializer):
    """
    Full serializer for Notification model, including channel delivery state.
    """

    deliveries = NotificationDeliverySerializer(many=True, read_only=True)

    class Meta:
        model = Notification
        fields = [
            'id',
            'notification_type',
            'recipient_type',
            'company',
            'title',
            'message',
            'priority',
            'data',
            'status',
            'deliveries',
            'is_read',
            'read_at',
            'scheduled_for',
            'created_at',
            'expires_at',
        ]
        read_only_fields = fields


class NotificationListSerializer(serializers.ModelSerializer):
    """
    Compact serializer for notification list view.
    """

    class Meta:
        model = Notification
        fields = [
            'id',
            'notification_type',
            'title',
            'message',
            'priority',
            'data',
            'is_read',
            'created_at',
        ]
        read_only_fields = fields


class NotificationMarkReadSerializer(serializers.Serializer):
    """
    Serializer for marking notifications as read.
    """

    notification_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        help_text='List of notification IDs to mark as read.'
    )

    mark_all = serializers.BooleanField(
        default=False,
        help_text='If true, marks all notifications as read.'
    )


class NotificationPreferenceSerializer(serializers.ModelSerializer):
    """
    Channel switches, per-type matrix and quiet hours of the current user.

    ``channels`` looks like ``{"interview_scheduled": {"email": true, "push": false}}``.
    """

    class Meta:
        model = NotificationPreference
        fields = [
            'email_enabled',
            'push_enabled',
            'channels',
            'quiet_hours_enabled',
            'quiet_hours_start',
            'quiet_hours_end',
            'quiet_hours_timezone',
            'updated_at',
        ]
        read_only_fields = ['updated_at']

    def validate_channels(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Must be an object keyed by notification type.")
        known_channels = {channel for channel, _ in DeliveryChannel.CHOICES}
        for notification_type, channel_settings in value.items():
            if notification_type not in NotificationType.ALL:
                raise serializers.ValidationError(f"Unknown notification type: {notification_type}")
            if not isinstance(channel_settings, dict):
                raise serializers.ValidationError(f"'{notification_type}' must map channels to booleans.")
            for channel, enabled in channel_settings.items():
                if channel not in known_channels or not isinstance(enabled, bool):
                    raise serializers.ValidationError(
                        f"'{notification_type}.{channel}' must be one of "
                        f"{sorted(known_channels)} with a boolean value."
                    )
        return value

    def validate_quiet_hours_timezone(self, value):
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise serializers.ValidationError(f"Unknown timezone: {value}")
        return value


class PushSubscriptionSerializer(serializers.Serializer):
    """
    Browser PushSubscription as produced by ``pushManager.subscribe()``.
    """

    endpoint = serializers.URLField(max_length=500)
    keys = serializers.DictField(child=serializers.CharField(max_length=255))
    user_agent = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_keys(self, value):
        missing = {'p256dh', 'auth'} - set(value)
        if missing:
            raise serializers.ValidationError(f"Missing keys: {', '.join(sorted(missing))}")
        return value

    def save(self, user):
        data = self.validated_data
        subscription, _ = PushSubscription.objects.update_or_create(
            endpoint=data['endpoint'],
            defaults={
                'user': user,
                'p256dh': data['keys']['p256dh'],
                'auth': data['keys']['auth'],
                'user_agent': data.get('user_agent', ''),
                'is_active': True,
            },
        )
        return subscription


class PushSubscriptionDeleteSerializer(serializers.Serializer):
    endpoint = serializers.URLField(max_length=500)
