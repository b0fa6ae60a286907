from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class AttendanceAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_checked_in(cls, request, attendance) -> None:
        log_event(
            action=AuditEvents.ATTENDANCE_CHECKED_IN,
            actor=request.user,
            object_type="attendance",
            object_id=str(attendance.id),
            category="attendance",
            ip_address=cls._ip(request),
            metadata={"employee_id": attendance.employee_id, "date": attendance.date.isoformat()},
        )

    @classmethod
    def log_checked_out(cls, request, attendance) -> None:
        log_event(
            action=AuditEvents.ATTENDANCE_CHECKED_OUT,
            actor=request.user,
            object_type="attendance",
            object_id=str(attendance.id),
            category="attendance",
            ip_address=cls._ip(request),
            metadata={
                "employee_id": attendance.employee_id,
                "date": attendance.date.isoformat(),
                "working_hours": str(attendance.working_hours),
            },
        )

    @classmethod
    def log_marked(cls, request, attendance, created: bool) -> None:
        log_event(
            action=AuditEvents.ATTENDANCE_MARKED,
            actor=request.user,
            object_type="attendance",
            object_id=str(attendance.id),
            category="attendance",
            ip_address=cls._ip(request),
            metadata={
                "employee_id": attendance.employee_id,
                "date": attendance.date.isoformat(),
                "status": attendance.status,
                "created": created,
            },
        )
