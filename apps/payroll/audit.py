from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class PayrollAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def _log_payslip(cls, request, action: str, payslip) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="payslip",
            object_id=str(payslip.id),
            category="payroll",
            ip_address=cls._ip(request),
            metadata={
                "employee_id": payslip.employee_id,
                "pay_period": payslip.pay_period,
                "status": payslip.status,
            },
        )

    @classmethod
    def log_payslip_generated(cls, request, payslip) -> None:
        cls._log_payslip(request, AuditEvents.PAYSLIP_GENERATED, payslip)

    @classmethod
    def log_payslip_validated(cls, request, payslip) -> None:
        cls._log_payslip(request, AuditEvents.PAYSLIP_VALIDATED, payslip)

    @classmethod
    def log_payslip_cancelled(cls, request, payslip) -> None:
        cls._log_payslip(request, AuditEvents.PAYSLIP_CANCELLED, payslip)

    @classmethod
    def log_payslip_deleted(cls, request, payslip) -> None:
        cls._log_payslip(request, AuditEvents.PAYSLIP_DELETED, payslip)

    @classmethod
    def log_payrun_generated(cls, request, result) -> None:
        log_event(
            action=AuditEvents.PAYRUN_GENERATED,
            actor=request.user,
            object_type="payrun",
            object_id=f"{result.year}-{result.month_index + 1:02d}",
            category="payroll",
            ip_address=cls._ip(request),
            metadata={
                "company_id": request.user.company_id,
                "generated": len(result.succeeded),
                "failed": len(result.failed),
            },
        )

    @classmethod
    def log_salary_structure_updated(cls, request, structure) -> None:
        log_event(
            action=AuditEvents.SALARY_STRUCTURE_UPDATED,
            actor=request.user,
            object_type="salary_structure",
            object_id=str(structure.id),
            category="payroll",
            ip_address=cls._ip(request),
            metadata={
                "employee_id": structure.employee_id,
                "wage": str(structure.wage),
                "components": structure.components.count(),
            },
        )

    @classmethod
    def log_access_denied(cls, request, reason: str) -> None:
        log_event(
            action=AuditEvents.PAYROLL_ACCESS_DENIED,
            actor=request.user if request.user.is_authenticated else None,
            object_type="payroll_api",
            object_id=request.path,
            category="payroll",
            level="warning",
            ip_address=cls._ip(request),
            metadata={"method": request.method, "reason": reason},
        )
