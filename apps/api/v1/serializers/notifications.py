# apps/api/v1/serializers/notifications.py
from rest_framework import serializers

from apps.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notification
        fields = [
            'id', 'notification_type', 'title', 'content', 'link',
            'is_read', 'created_at',
        ]
        read_only_fields = fields
