from __future__ import annotations

import logging

from common.models import Notification
from common.periods import month_name
from common.services.notifications import (
    NotificationService,
    send_monthly_salary_slip,
    send_salary_update_notification,
)

from .calculations import BASIC_COMPONENT_NAME, PROFESSIONAL_TAX_LINE, PROVIDENT_FUND_LINE

logger = logging.getLogger(__name__)


def payslip_breakdown(payslip) -> dict:
    """Email-friendly summary of a payslip and its component lines."""
    earnings = {}
    deductions = {}
    for line in payslip.components.all():
        (deductions if line.is_deduction else earnings)[line.name] = line.amount

    basic = earnings.pop(BASIC_COMPONENT_NAME, payslip.basic_wage)
    hra = earnings.pop("HRA", 0)
    provident_fund = deductions.pop(PROVIDENT_FUND_LINE, 0)
    tax = deductions.pop(PROFESSIONAL_TAX_LINE, 0)

    return {
        "basic_salary": basic,
        "hra": hra,
        "other_allowances": sum(earnings.values(), 0),
        "gross_salary": payslip.gross_wage,
        "provident_fund": provident_fund,
        "tax": tax,
        "other_deductions": sum(deductions.values(), 0),
        "total_deductions": payslip.total_deductions,
        "net_salary": payslip.net_wage,
        "working_days": payslip.working_days,
        "present_days": payslip.worked_days - payslip.paid_leave_days,
        "leave_days": payslip.paid_leave_days + payslip.unpaid_leave_days,
    }


def notify_payslip_validated(payslip_id: int) -> None:
    """Post-commit hook; a failure here never reverts the validation."""
    from .models import Payslip

    try:
        payslip = (
            Payslip.objects.select_related("employee", "employee__user")
            .prefetch_related("components")
            .get(id=payslip_id)
        )
        employee = payslip.employee
        month = month_name(payslip.period_start.month - 1)
        send_monthly_salary_slip(
            email=employee.email,
            name=employee.full_name,
            month=month,
            year=payslip.period_start.year,
            breakdown=payslip_breakdown(payslip),
        )
        NotificationService.send(
            employee.user,
            "Payslip available",
            f"Your payslip for {payslip.pay_period} is ready. Net pay: {payslip.net_wage}.",
            type=Notification.Type.PAYROLL,
        )
    except Exception:
        logger.exception("Failed to send payslip notification for payslip=%s", payslip_id)


def notify_salary_structure_updated(structure_id: int) -> None:
    from .models import SalaryStructure

    try:
        structure = (
            SalaryStructure.objects.select_related("employee", "employee__user")
            .prefetch_related("components")
            .get(id=structure_id)
        )
        employee = structure.employee
        send_salary_update_notification(
            email=employee.email,
            name=employee.full_name,
            wage=structure.wage,
            components=[{"name": c.name, "amount": c.amount} for c in structure.components.all()],
        )
        NotificationService.send(
            employee.user,
            "Salary structure updated",
            f"Your monthly wage is now {structure.wage}.",
            type=Notification.Type.PAYROLL,
        )
    except Exception:
        logger.exception("Failed to send salary update notification for structure=%s", structure_id)
