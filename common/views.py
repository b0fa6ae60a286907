from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.audit import CommonAuditService
from common.models import Notification
from common.serializers import NotificationFilterSerializer, NotificationSerializer


class NotificationsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        description="""
Notifications of the current user.

The response holds the unread counter and the latest notifications, newest first.
`type` narrows the list to one kind (payroll, leave, attendance, system), `unread=true`
hides read ones and `limit` caps the list (default 20, max 100).
The unread counter always covers every notification of the user.

Access: any authenticated user.
""",
        parameters=[
            OpenApiParameter("type", str, required=False, enum=Notification.Type.values),
            OpenApiParameter("unread", bool, required=False),
            OpenApiParameter("limit", int, required=False),
        ],
        responses={200: OpenApiResponse(description="User notifications")},
    )
    def get(self, request):
        query = NotificationFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        qs = Notification.objects.filter(user=request.user).order_by("-created_at")
        unread_count = qs.filter(is_read=False).count()
        if data.get("type"):
            qs = qs.filter(type=data["type"])
        if data.get("unread"):
            qs = qs.filter(is_read=False)

        return Response({
            "unread_count": unread_count,
            "items": NotificationSerializer(qs[: data["limit"]], many=True).data,
        })


class MarkNotificationReadAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk: int):
        notification = get_object_or_404(Notification, pk=pk, user=request.user)
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read"])
            CommonAuditService.log_notifications_marked_read(request, 1)
        return Response(NotificationSerializer(notification).data)


class MarkAllNotificationsReadAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        updated = Notification.objects.filter(user=request.user, is_read=False).update(is_read=True)
        CommonAuditService.log_notifications_marked_read(request, updated)
        return Response({"updated": updated})
