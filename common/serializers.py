from rest_framework import serializers

from common.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    type_display = serializers.CharField(source="get_type_display", read_only=True)

    class Meta:
        model = Notification
        fields = ("id", "title", "message", "type", "type_display", "is_read", "created_at")


class NotificationFilterSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Notification.Type.choices, required=False)
    unread = serializers.BooleanField(required=False)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)
