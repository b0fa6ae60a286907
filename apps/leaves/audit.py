from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class LeaveAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def _log(cls, request, action: str, leave, **metadata) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="leave",
            object_id=str(leave.id),
            category="leave",
            ip_address=cls._ip(request),
            metadata={
                "employee_id": leave.employee_id,
                "leave_type": leave.leave_type,
                "status": leave.status,
                "total_days": str(leave.total_days),
                **metadata,
            },
        )

    @classmethod
    def log_applied(cls, request, leave) -> None:
        cls._log(request, AuditEvents.LEAVE_APPLIED, leave)

    @classmethod
    def log_approved(cls, request, leave) -> None:
        cls._log(request, AuditEvents.LEAVE_APPROVED, leave)

    @classmethod
    def log_rejected(cls, request, leave) -> None:
        cls._log(request, AuditEvents.LEAVE_REJECTED, leave, reason=leave.rejection_reason)

    @classmethod
    def log_cancelled(cls, request, leave) -> None:
        cls._log(request, AuditEvents.LEAVE_CANCELLED, leave)

    @classmethod
    def log_allocated(cls, request, balance) -> None:
        log_event(
            action=AuditEvents.LEAVE_ALLOCATED,
            actor=request.user,
            object_type="leave_balance",
            object_id=str(balance.id),
            category="leave",
            ip_address=cls._ip(request),
            metadata={
                "employee_id": balance.employee_id,
                "leave_type": balance.leave_type,
                "year": balance.year,
                "total_days": str(balance.total_days),
            },
        )
