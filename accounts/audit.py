from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class EmployeeAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_employee_created(cls, request, employee) -> None:
        log_event(
            action=AuditEvents.EMPLOYEE_CREATED,
            actor=request.user,
            object_type="employee",
            object_id=str(employee.id),
            category="user",
            ip_address=cls._ip(request),
            metadata={"employee_code": employee.employee_code, "company_id": employee.company_id},
        )

    @classmethod
    def log_employee_updated(cls, request, employee, fields: list[str]) -> None:
        log_event(
            action=AuditEvents.EMPLOYEE_UPDATED,
            actor=request.user,
            object_type="employee",
            object_id=str(employee.id),
            category="user",
            ip_address=cls._ip(request),
            metadata={"fields": sorted(fields)},
        )
