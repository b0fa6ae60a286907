"""Attendance and leave totals for one employee over a pay period."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from apps.attendance.models import Attendance
from apps.leaves.models import Leave, LeaveType

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PeriodAttendance:
    present_days: int
    paid_leave_days: Decimal
    unpaid_leave_days: Decimal
    worked_days: Decimal


def aggregate_period(employee_id: int, period_start: date, period_end: date) -> PeriodAttendance:
    present_days = Attendance.objects.filter(
        employee_id=employee_id,
        date__range=(period_start, period_end),
        status=Attendance.Status.PRESENT,
    ).count()

    # Overlapping leaves count with their full total_days, even when they
    # extend past the period boundaries.
    leaves = Leave.objects.filter(
        employee_id=employee_id,
        status=Leave.Status.APPROVED,
        start_date__lte=period_end,
        end_date__gte=period_start,
    ).values_list("leave_type", "total_days")

    paid_leave_days = ZERO
    unpaid_leave_days = ZERO
    for leave_type, total_days in leaves:
        if leave_type == LeaveType.UNPAID_LEAVE:
            unpaid_leave_days += total_days
        else:
            paid_leave_days += total_days

    return PeriodAttendance(
        present_days=present_days,
        paid_leave_days=paid_leave_days,
        unpaid_leave_days=unpaid_leave_days,
        worked_days=Decimal(present_days) + paid_leave_days,
    )
