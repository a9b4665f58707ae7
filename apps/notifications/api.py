# apps/notifications/api.py
"""
Inbox, preference and push registration endpoints.

    GET      /api/notifications/                     inbox page (?is_read=, ?type=, ?limit=, ?offset=)
    GET      /api/notifications/{id}/                one notification with channel state, marks it read
    DELETE   /api/notifications/{id}/
    DELETE   /api/notifications/clear-read/          removes every read notification
    POST     /api/notifications/mark-read/           {"notification_ids": [...]} or {"mark_all": true}
    GET      /api/notifications/unread-count/
    GET/PUT  /api/notifications/preferences/
    GET/POST/DELETE /api/notifications/push-subscriptions/
"""
import logging

from django.conf import settings
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics, status
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.pagination import StandardLimitOffsetPagination

from .models import Notification, NotificationType, PushSubscription
from .serializers import (
    NotificationListSerializer,
    NotificationMarkReadSerializer,
    NotificationPreferenceSerializer,
    NotificationSerializer,
    PushSubscriptionDeleteSerializer,
    PushSubscriptionSerializer,
)
from .services import NotificationDispatcher, get_preferences

logger = logging.getLogger(__name__)

TAGS = ["Notifications"]

inbox_filters = [
    openapi.Parameter('is_read', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
    openapi.Parameter('type', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=NotificationType.ALL),
]


def inbox_for(request):
    """Unexpired notifications of the requesting user, newest first."""
    queryset = Notification.objects.for_user(request.user).unexpired()

    read_flag = request.query_params.get('is_read')
    if read_flag is not None:
        queryset = queryset.filter(is_read=read_flag.lower() == 'true')

    wanted_type = request.query_params.get('type')
    if wanted_type:
        queryset = queryset.filter(notification_type=wanted_type)

    return queryset.order_by('-created_at')


class NotificationListAPI(generics.ListAPIView):
    """Paginated inbox. Expired notifications never show up."""
    serializer_class = NotificationListSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardLimitOffsetPagination

    @swagger_auto_schema(tags=TAGS, operation_summary="Inbox", manual_parameters=inbox_filters)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return inbox_for(self.request)


class NotificationDetailAPI(generics.RetrieveAPIView):
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    lookup_field = 'id'

    @swagger_auto_schema(tags=TAGS, operation_summary="Open Notification")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return Notification.objects.for_user(self.request.user).prefetch_related('deliveries')

    def retrieve(self, request, *args, **kwargs):
        notification = self.get_object()
        # opening a notification counts as reading it
        notification.mark_as_read()
        return Response(self.get_serializer(notification).data)

    @swagger_auto_schema(tags=TAGS, operation_summary="Delete Notification")
    def delete(self, request, id):
        if not NotificationDispatcher.delete_notification(request.user, id):
            raise NotFound('Notification not found.')
        return Response(status=status.HTTP_204_NO_CONTENT)


class NotificationClearReadAPI(APIView):
    """Delete every read notification of the requesting user."""
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(tags=TAGS, operation_summary="Clear Read Notifications")
    def delete(self, request):
        deleted = NotificationDispatcher.clear_read(request.user)
        return Response({'deleted_count': deleted})


class NotificationMarkReadAPI(APIView):
    """
    Mark the listed notifications, or the whole inbox, as read.

    Ids that belong to another user or do not exist are ignored and not
    counted in ``marked_count``.
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Mark Read",
        request_body=NotificationMarkReadSerializer,
    )
    def post(self, request):
        serializer = NotificationMarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data

        if payload.get('mark_all'):
            marked = NotificationDispatcher.mark_all_as_read(request.user)
        else:
            marked = sum(
                1 for notification_id in payload.get('notification_ids', [])
                if NotificationDispatcher.mark_as_read(request.user, notification_id) is not None
            )

        logger.info(f"[INBOX_MARKED_READ] user={request.user.pk} count={marked}")
        return Response({'marked_count': marked})


class NotificationUnreadCountAPI(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(tags=TAGS, operation_summary="Unread Count")
    def get(self, request):
        return Response({'unread_count': NotificationDispatcher.get_unread_count(request.user)})


class NotificationPreferenceAPI(APIView):
    """
    Channel switches, per-type channel matrix and quiet hours of the
    requesting user. PUT accepts any subset of the fields.
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Get Notification Preferences",
        responses={200: NotificationPreferenceSerializer},
    )
    def get(self, request):
        preference = get_preferences(request.user)
        return Response(NotificationPreferenceSerializer(preference).data)

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Update Notification Preferences",
        request_body=NotificationPreferenceSerializer,
        responses={200: NotificationPreferenceSerializer},
    )
    def put(self, request):
        preference = get_preferences(request.user)
        serializer = NotificationPreferenceSerializer(preference, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"[PREFERENCES_UPDATED] user={request.user.pk}")
        return Response(serializer.data)


class PushSubscriptionAPI(APIView):
    """
    Browser push registration.

    GET returns the VAPID public key the browser subscribes with; POST
    stores the resulting subscription; DELETE removes it by endpoint.
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(tags=TAGS, operation_summary="Get VAPID Public Key")
    def get(self, request):
        return Response({'public_key': settings.VAPID_PUBLIC_KEY})

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Register Push Subscription",
        request_body=PushSubscriptionSerializer,
    )
    def post(self, request):
        serializer = PushSubscriptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        subscription = serializer.save(user=request.user)
        logger.info(f"[PUSH_SUBSCRIBED] user={request.user.pk} subscription={subscription.pk}")
        return Response({'id': subscription.pk, 'is_active': True}, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Remove Push Subscription",
        request_body=PushSubscriptionDeleteSerializer,
    )
    def delete(self, request):
        serializer = PushSubscriptionDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        deleted, _ = PushSubscription.objects.filter(
            user=request.user,
            endpoint=serializer.validated_data['endpoint'],
        ).delete()
        return Response(status=status.HTTP_204_NO_CONTENT if deleted else status.HTTP_404_NOT_FOUND)
