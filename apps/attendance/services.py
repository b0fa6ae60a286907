from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db import transaction

from apps.leaves.models import Leave
from common.clock import Clock, get_clock
from common.periods import ZERO_HOURS, working_hours

from .exceptions import AlreadyCheckedIn, NoCheckInToday, NotCheckedIn
from .models import Attendance, AttendanceSession


@dataclass(frozen=True)
class AttendanceStatistics:
    total_days: int
    present_days: int
    absent_days: int
    leave_days: int
    total_working_hours: Decimal

    def as_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "leave_days": self.leave_days,
            "total_working_hours": self.total_working_hours,
        }


class AttendanceService:
    @staticmethod
    @transaction.atomic
    def check_in(*, employee, clock: Clock | None = None) -> Attendance:
        clock = clock or get_clock()
        now = clock.now()

        attendance, _ = Attendance.objects.select_for_update().get_or_create(
            employee=employee,
            date=clock.today(),
            defaults={"status": Attendance.Status.PRESENT},
        )
        if attendance.currently_checked_in:
            raise AlreadyCheckedIn()

        AttendanceSession.objects.create(attendance=attendance, check_in=now)

        attendance.status = Attendance.Status.PRESENT
        attendance.currently_checked_in = True
        if attendance.check_in is None:
            attendance.check_in = now
        attendance.save(update_fields=["status", "currently_checked_in", "check_in", "updated_at"])
        return attendance

    @staticmethod
    @transaction.atomic
    def check_out(*, employee, clock: Clock | None = None) -> Attendance:
        clock = clock or get_clock()
        now = clock.now()

        attendance = (
            Attendance.objects.select_for_update()
            .filter(employee=employee, date=clock.today())
            .first()
        )
        if attendance is None:
            raise NoCheckInToday()
        if not attendance.currently_checked_in:
            raise NotCheckedIn()

        session = attendance.sessions.filter(check_out__isnull=True).order_by("-check_in", "-id").first()
        if session is None:
            raise NotCheckedIn()
        session.check_out = now
        session.save(update_fields=["check_out"])

        total = ZERO_HOURS
        for closed in attendance.sessions.filter(check_out__isnull=False):
            total += working_hours(closed.check_in, closed.check_out)

        attendance.currently_checked_in = False
        attendance.check_out = now
        attendance.working_hours = total
        attendance.save(update_fields=["currently_checked_in", "check_out", "working_hours", "updated_at"])
        return attendance

    @staticmethod
    def mark(*, employee, day: date, status: str, remarks: str = "") -> tuple[Attendance, bool]:
        return Attendance.objects.update_or_create(
            employee=employee,
            date=day,
            defaults={"status": status, "remarks": remarks},
        )

    @staticmethod
    def mark_on_leave(*, employee, day: date) -> Attendance:
        attendance, _ = Attendance.objects.update_or_create(
            employee=employee,
            date=day,
            defaults={"status": Attendance.Status.ON_LEAVE, "currently_checked_in": False},
        )
        return attendance

    @staticmethod
    def statistics(records) -> AttendanceStatistics:
        records = list(records)
        total_hours = sum((Decimal(r.working_hours) for r in records), ZERO_HOURS)
        return AttendanceStatistics(
            total_days=len(records),
            present_days=sum(1 for r in records if r.status == Attendance.Status.PRESENT),
            absent_days=sum(1 for r in records if r.status == Attendance.Status.ABSENT),
            leave_days=sum(1 for r in records if r.status == Attendance.Status.ON_LEAVE),
            total_working_hours=total_hours,
        )

    @staticmethod
    def today_status(*, employee, clock: Clock | None = None) -> dict:
        clock = clock or get_clock()
        today = clock.today()

        attendance = Attendance.objects.filter(employee=employee, date=today).prefetch_related("sessions").first()
        leave = Leave.objects.filter(
            employee=employee,
            status=Leave.Status.APPROVED,
            start_date__lte=today,
            end_date__gte=today,
        ).first()

        if leave is not None:
            status = Attendance.Status.ON_LEAVE
        elif attendance is not None:
            status = Attendance.Status.PRESENT
        else:
            status = Attendance.Status.ABSENT

        checked_in = bool(attendance and attendance.currently_checked_in)
        return {
            "date": today,
            "status": status,
            "attendance": attendance,
            "leave": leave,
            "can_check_in": leave is None and not checked_in,
            "can_check_out": checked_in,
        }
