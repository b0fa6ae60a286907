from django.conf import settings
from django.db import models


class Notification(models.Model):

    class Type(models.TextChoices):
        SYSTEM = "system", "System"
        PAYROLL = "payroll", "Payroll"
        LEAVE = "leave", "Leave"
        ATTENDANCE = "attendance", "Attendance"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications"
    )

    title = models.CharField(max_length=255)
    message = models.TextField()

    type = models.CharField(
        max_length=50,
        choices=Type.choices,
        default=Type.SYSTEM
    )

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user"], name="notification_user_idx"),
            models.Index(fields=["is_read"], name="notification_is_read_idx"),
            models.Index(fields=["created_at"], name="notification_created_at_idx"),
        ]

    def __str__(self):
        return f"{self.title} ({self.user.username})"
