from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class CommonAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_notifications_marked_read(cls, request, count: int) -> None:
        log_event(
            action=AuditEvents.NOTIFICATIONS_MARKED_READ,
            actor=request.user,
            object_type="notification",
            object_id=str(request.user.id),
            category="user",
            ip_address=cls._ip(request),
            metadata={"count": count},
        )
