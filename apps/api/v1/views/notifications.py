# apps/api/v1/views/notifications.py
"""
Notification inbox of the requesting user.

GET    /notifications/?unread_only=true
GET    /notifications/unread-count/
POST   /notifications/{id}/read/
POST   /notifications/read-all/
DELETE /notifications/{id}/
"""
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.notifications.models import Notification
from apps.notifications.services import mark_all_read, mark_read, unread_count as count_unread
from shared.exceptions import NotFound

from ..serializers import NotificationSerializer


@extend_schema_view(
    list=extend_schema(
        tags=['notifications'],
        summary='List my notifications',
        parameters=[OpenApiParameter('unread_only', bool, description='Only unread notifications')],
    ),
    destroy=extend_schema(tags=['notifications'], summary='Delete a notification'),
)
class NotificationViewSet(mixins.ListModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    serializer_class = NotificationSerializer
    lookup_value_regex = r'[0-9]+'
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Notification.objects.none()
        qs = Notification.objects.filter(recipient=self.request.user).order_by('-created_at', '-id')
        if self.action == 'list' and self.request.query_params.get('unread_only') in ('1', 'true', 'True'):
            qs = qs.filter(is_read=False)
        return qs

    @extend_schema(tags=['notifications'], summary='Number of unread notifications')
    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        return Response({'count': count_unread(request.user)})

    @extend_schema(tags=['notifications'], summary='Mark one notification read', request=None)
    @action(detail=True, methods=['post'])
    def read(self, request, pk=None):
        if not mark_read(request.user, pk):
            raise NotFound(f"Notification {pk} does not exist.")
        return Response({'updated': 1})

    @extend_schema(tags=['notifications'], summary='Mark all notifications read', request=None)
    @action(detail=False, methods=['post'], url_path='read-all')
    def read_all(self, request):
        return Response({'updated': mark_all_read(request.user)})
