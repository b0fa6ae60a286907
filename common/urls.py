from django.urls import path

from .views import (
    MarkAllNotificationsReadAPIView,
    MarkNotificationReadAPIView,
    NotificationsAPIView,
)

urlpatterns = [
    path("notifications/", NotificationsAPIView.as_view(), name="notification-list"),
    path("notifications/<int:pk>/read/", MarkNotificationReadAPIView.as_view(), name="notification-read"),
    path("notifications/read-all/", MarkAllNotificationsReadAPIView.as_view(), name="notification-read-all"),
]
