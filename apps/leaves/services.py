from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from functools import partial

from django.db import transaction
from django.db.models import F

from apps.attendance.services import AttendanceService
from common.clock import Clock, get_clock
from common.exceptions import IllegalStateTransition
from common.periods import inclusive_day_count, iter_days

from .exceptions import InsufficientLeaveBalance, InvalidLeaveRange, LeaveNotFound
from .models import BALANCE_TRACKED_TYPES, Leave, LeaveBalance, LeaveType
from .notifications import notify_leave_status

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class LeaveService:
    @staticmethod
    def _locked(leave_id: int, *, company_id) -> Leave:
        leave = (
            Leave.objects.select_for_update()
            .select_related("employee")
            .filter(id=leave_id, employee__company_id=company_id)
            .first()
        )
        if leave is None:
            raise LeaveNotFound()
        return leave

    @staticmethod
    def _adjust_balance(leave: Leave, *, year: int, sign: int) -> int:
        delta = leave.total_days * sign
        return LeaveBalance.objects.filter(
            employee_id=leave.employee_id,
            leave_type=leave.leave_type,
            year=year,
        ).update(
            used_days=F("used_days") + delta,
            remaining_days=F("remaining_days") - delta,
        )

    @staticmethod
    def apply(
        *,
        employee,
        leave_type: str,
        start_date: date,
        end_date: date,
        subject: str = "",
        description: str = "",
        clock: Clock | None = None,
    ) -> Leave:
        clock = clock or get_clock()
        if end_date < start_date:
            raise InvalidLeaveRange()

        total_days = Decimal(inclusive_day_count(start_date, end_date))

        if leave_type in BALANCE_TRACKED_TYPES:
            balance = LeaveBalance.objects.filter(
                employee=employee,
                leave_type=leave_type,
                year=clock.today().year,
            ).first()
            available = balance.remaining_days if balance else ZERO
            if balance is None or balance.remaining_days < total_days:
                raise InsufficientLeaveBalance(
                    f"Insufficient {LeaveType(leave_type).label.lower()} balance",
                    available=str(available),
                    required=str(total_days),
                )

        return Leave.objects.create(
            employee=employee,
            leave_type=leave_type,
            subject=subject,
            description=description,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            status=Leave.Status.PENDING,
        )

    @classmethod
    @transaction.atomic
    def approve(cls, *, leave_id: int, company_id, approver, clock: Clock | None = None) -> Leave:
        clock = clock or get_clock()
        leave = cls._locked(leave_id, company_id=company_id)
        if leave.status != Leave.Status.PENDING:
            raise IllegalStateTransition(f"Leave already {leave.status.lower()}", current_state=leave.status)

        leave.status = Leave.Status.APPROVED
        leave.approved_by = approver
        leave.approved_at = clock.now()
        leave.save(update_fields=["status", "approved_by", "approved_at", "updated_at"])

        if leave.is_balance_tracked:
            cls._adjust_balance(leave, year=clock.today().year, sign=1)

        for day in iter_days(leave.start_date, leave.end_date):
            AttendanceService.mark_on_leave(employee=leave.employee, day=day)

        transaction.on_commit(partial(notify_leave_status, leave.id))
        return leave

    @classmethod
    @transaction.atomic
    def reject(cls, *, leave_id: int, company_id, approver, reason: str = "", clock: Clock | None = None) -> Leave:
        clock = clock or get_clock()
        leave = cls._locked(leave_id, company_id=company_id)
        if leave.status != Leave.Status.PENDING:
            raise IllegalStateTransition(f"Leave already {leave.status.lower()}", current_state=leave.status)

        leave.status = Leave.Status.REJECTED
        leave.rejection_reason = reason
        leave.approved_by = approver
        leave.approved_at = clock.now()
        leave.save(update_fields=["status", "rejection_reason", "approved_by", "approved_at", "updated_at"])

        transaction.on_commit(partial(notify_leave_status, leave.id))
        return leave

    @classmethod
    @transaction.atomic
    def cancel(cls, *, leave_id: int, employee, clock: Clock | None = None) -> Leave:
        clock = clock or get_clock()
        leave = cls._locked(leave_id, company_id=employee.company_id)
        if leave.employee_id != employee.id:
            raise LeaveNotFound()

        if leave.status == Leave.Status.CANCELLED:
            raise IllegalStateTransition("Leave is already cancelled", current_state=leave.status)
        if leave.status not in (Leave.Status.PENDING, Leave.Status.APPROVED):
            raise IllegalStateTransition(
                f"Cannot cancel a {leave.status.lower()} leave",
                current_state=leave.status,
            )

        if leave.status == Leave.Status.APPROVED and leave.is_balance_tracked:
            cls._adjust_balance(leave, year=clock.today().year, sign=-1)

        leave.status = Leave.Status.CANCELLED
        leave.save(update_fields=["status", "updated_at"])
        return leave

    @staticmethod
    @transaction.atomic
    def allocate(*, employee, leave_type: str, total_days: Decimal, year: int) -> LeaveBalance:
        balance, created = LeaveBalance.objects.select_for_update().get_or_create(
            employee=employee,
            leave_type=leave_type,
            year=year,
            defaults={
                "total_days": total_days,
                "used_days": ZERO,
                "remaining_days": total_days,
            },
        )
        if not created:
            balance.total_days = total_days
            balance.remaining_days = total_days - balance.used_days
            balance.save(update_fields=["total_days", "remaining_days", "updated_at"])

        logger.info(
            "Allocated %s days of %s for employee=%s year=%s",
            total_days,
            leave_type,
            employee.id,
            year,
        )
        return balance
