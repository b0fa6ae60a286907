from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from django.core import mail
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import Role
from apps.attendance.models import Attendance
from common.clock import FixedClock, use_clock
from common.exceptions import IllegalStateTransition
from common.testing import make_company, make_employee, make_user

from .exceptions import InsufficientLeaveBalance, InvalidLeaveRange, LeaveNotFound
from .models import Leave, LeaveBalance, LeaveType
from .services import LeaveService


class LeaveServiceTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.approver = make_user("hr", company=self.company, role_name=Role.Name.HR_OFFICER)
        self.employee = make_employee("E001", company=self.company)
        self.clock = FixedClock(datetime(2025, 10, 1, 10, 0))
        LeaveService.allocate(
            employee=self.employee,
            leave_type=LeaveType.PAID_TIME_OFF,
            total_days=Decimal("10"),
            year=2025,
        )

    def _apply(self, start=date(2025, 10, 6), end=date(2025, 10, 8), leave_type=LeaveType.PAID_TIME_OFF):
        return LeaveService.apply(
            employee=self.employee,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            clock=self.clock,
        )

    def _balance(self):
        return LeaveBalance.objects.get(employee=self.employee, leave_type=LeaveType.PAID_TIME_OFF, year=2025)

    def test_apply_counts_inclusive_days(self):
        leave = self._apply()

        self.assertEqual(leave.status, Leave.Status.PENDING)
        self.assertEqual(leave.total_days, Decimal("3"))

    def test_apply_rejects_reversed_range(self):
        with self.assertRaises(InvalidLeaveRange):
            self._apply(start=date(2025, 10, 8), end=date(2025, 10, 6))

    def test_apply_checks_balance_for_tracked_types(self):
        with self.assertRaises(InsufficientLeaveBalance) as ctx:
            self._apply(start=date(2025, 10, 1), end=date(2025, 10, 11))
        self.assertEqual(ctx.exception.details["available"], "10.00")

        with self.assertRaises(InsufficientLeaveBalance):
            self._apply(leave_type=LeaveType.SICK_LEAVE)

    def test_unpaid_leave_needs_no_balance(self):
        leave = self._apply(start=date(2025, 10, 1), end=date(2025, 10, 20), leave_type=LeaveType.UNPAID_LEAVE)

        self.assertEqual(leave.total_days, Decimal("20"))

    def test_approve_updates_balance_and_marks_attendance(self):
        leave = self._apply()

        with self.captureOnCommitCallbacks(execute=True):
            LeaveService.approve(
                leave_id=leave.id, company_id=self.company.id, approver=self.approver, clock=self.clock
            )

        leave.refresh_from_db()
        self.assertEqual(leave.status, Leave.Status.APPROVED)
        self.assertEqual(leave.approved_by, self.approver)
        self.assertEqual(leave.approved_at, self.clock.now())

        balance = self._balance()
        self.assertEqual(balance.used_days, Decimal("3"))
        self.assertEqual(balance.remaining_days, Decimal("7"))
        self.assertEqual(balance.total_days, balance.used_days + balance.remaining_days)

        statuses = set(
            Attendance.objects.filter(employee=self.employee).values_list("status", flat=True)
        )
        self.assertEqual(statuses, {Attendance.Status.ON_LEAVE})
        self.assertEqual(Attendance.objects.filter(employee=self.employee).count(), 3)
        self.assertEqual(mail.outbox[0].subject, "Leave Request Approved")

    def test_approve_is_atomic_when_attendance_marking_fails(self):
        leave = self._apply()

        with patch(
            "apps.leaves.services.AttendanceService.mark_on_leave",
            side_effect=RuntimeError("db down"),
        ):
            with self.assertRaises(RuntimeError):
                LeaveService.approve(
                    leave_id=leave.id, company_id=self.company.id, approver=self.approver, clock=self.clock
                )

        leave.refresh_from_db()
        self.assertEqual(leave.status, Leave.Status.PENDING)
        self.assertEqual(self._balance().used_days, Decimal("0"))

    def test_reject_stores_reason(self):
        leave = self._apply()

        LeaveService.reject(
            leave_id=leave.id,
            company_id=self.company.id,
            approver=self.approver,
            reason="Release week",
            clock=self.clock,
        )

        leave.refresh_from_db()
        self.assertEqual(leave.status, Leave.Status.REJECTED)
        self.assertEqual(leave.rejection_reason, "Release week")
        self.assertEqual(self._balance().used_days, Decimal("0"))

    def test_review_only_from_pending(self):
        leave = self._apply()
        LeaveService.reject(leave_id=leave.id, company_id=self.company.id, approver=self.approver, clock=self.clock)

        with self.assertRaises(IllegalStateTransition) as ctx:
            LeaveService.approve(
                leave_id=leave.id, company_id=self.company.id, approver=self.approver, clock=self.clock
            )
        self.assertEqual(ctx.exception.current_state, Leave.Status.REJECTED)

    def test_cancel_approved_restores_balance(self):
        leave = self._apply()
        LeaveService.approve(leave_id=leave.id, company_id=self.company.id, approver=self.approver, clock=self.clock)

        LeaveService.cancel(leave_id=leave.id, employee=self.employee, clock=self.clock)

        leave.refresh_from_db()
        self.assertEqual(leave.status, Leave.Status.CANCELLED)
        balance = self._balance()
        self.assertEqual(balance.used_days, Decimal("0"))
        self.assertEqual(balance.remaining_days, Decimal("10"))

    def test_cancel_twice_and_cancel_rejected(self):
        leave = self._apply()
        LeaveService.cancel(leave_id=leave.id, employee=self.employee, clock=self.clock)

        with self.assertRaisesMessage(IllegalStateTransition, "Leave is already cancelled"):
            LeaveService.cancel(leave_id=leave.id, employee=self.employee, clock=self.clock)

        rejected = self._apply(start=date(2025, 10, 13), end=date(2025, 10, 13))
        LeaveService.reject(leave_id=rejected.id, company_id=self.company.id, approver=self.approver)
        with self.assertRaises(IllegalStateTransition):
            LeaveService.cancel(leave_id=rejected.id, employee=self.employee, clock=self.clock)

    def test_only_owner_can_cancel(self):
        leave = self._apply()
        colleague = make_employee("E002", company=self.company)

        with self.assertRaises(LeaveNotFound):
            LeaveService.cancel(leave_id=leave.id, employee=colleague, clock=self.clock)

    def test_other_company_cannot_review(self):
        leave = self._apply()
        other = make_company("Globex")

        with self.assertRaises(LeaveNotFound):
            LeaveService.approve(leave_id=leave.id, company_id=other.id, approver=self.approver)

    def test_reallocation_keeps_balance_invariant(self):
        leave = self._apply()
        LeaveService.approve(leave_id=leave.id, company_id=self.company.id, approver=self.approver, clock=self.clock)

        balance = LeaveService.allocate(
            employee=self.employee,
            leave_type=LeaveType.PAID_TIME_OFF,
            total_days=Decimal("15"),
            year=2025,
        )

        balance.refresh_from_db()
        self.assertEqual(balance.total_days, Decimal("15"))
        self.assertEqual(balance.used_days, Decimal("3"))
        self.assertEqual(balance.remaining_days, Decimal("12"))


class LeaveApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = make_company()
        self.hr = make_user("hr", company=self.company, role_name=Role.Name.HR_OFFICER)
        self.officer = make_user("payroll", company=self.company, role_name=Role.Name.PAYROLL_OFFICER)
        self.user = make_user("asha", company=self.company)
        self.employee = make_employee("E001", company=self.company, user=self.user)
        self.clock = FixedClock(datetime(2025, 10, 1, 10, 0))

    def _allocate(self, total="5"):
        self.client.force_authenticate(self.hr)
        return self.client.post(
            "/api/v1/leaves/allocate/",
            {
                "employee_id": self.employee.id,
                "leave_type": LeaveType.SICK_LEAVE,
                "total_days": total,
                "year": 2025,
            },
            format="json",
        )

    def test_apply_review_and_balance_flow(self):
        self.assertEqual(self._allocate().status_code, 200)

        self.client.force_authenticate(self.user)
        with use_clock(self.clock):
            response = self.client.post(
                "/api/v1/leaves/",
                {"leave_type": LeaveType.SICK_LEAVE, "start_date": "2025-10-02", "end_date": "2025-10-03"},
                format="json",
            )
        self.assertEqual(response.status_code, 201)
        leave_id = response.data["id"]

        self.client.force_authenticate(self.officer)
        with use_clock(self.clock):
            response = self.client.put(f"/api/v1/leaves/{leave_id}/approve/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], Leave.Status.APPROVED)

        self.client.force_authenticate(self.user)
        response = self.client.get(f"/api/v1/leaves/balance/{self.employee.id}/", {"year": 2025})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["balances"][0]["remaining_days"], "3.00")

    def test_apply_over_balance_returns_error_payload(self):
        self._allocate(total="1")

        self.client.force_authenticate(self.user)
        with use_clock(self.clock):
            response = self.client.post(
                "/api/v1/leaves/",
                {"leave_type": LeaveType.SICK_LEAVE, "start_date": "2025-10-02", "end_date": "2025-10-03"},
                format="json",
            )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "insufficient_leave_balance")
        self.assertEqual(response.data["required"], "2")

    def test_employee_cannot_review_or_allocate(self):
        leave = Leave.objects.create(
            employee=self.employee,
            leave_type=LeaveType.UNPAID_LEAVE,
            start_date=date(2025, 10, 2),
            end_date=date(2025, 10, 2),
            total_days=Decimal("1"),
        )
        self.client.force_authenticate(self.user)

        self.assertEqual(self.client.put(f"/api/v1/leaves/{leave.id}/approve/").status_code, 403)
        self.assertEqual(self.client.get("/api/v1/leaves/").status_code, 403)
        response = self.client.post(
            "/api/v1/leaves/allocate/",
            {"employee_id": self.employee.id, "leave_type": LeaveType.SICK_LEAVE, "total_days": "5"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)

    def test_payroll_officer_cannot_allocate(self):
        self.client.force_authenticate(self.officer)

        response = self.client.post(
            "/api/v1/leaves/allocate/",
            {"employee_id": self.employee.id, "leave_type": LeaveType.SICK_LEAVE, "total_days": "5"},
            format="json",
        )

        self.assertEqual(response.status_code, 403)

    def test_my_leaves_lists_own_requests(self):
        Leave.objects.create(
            employee=self.employee,
            leave_type=LeaveType.UNPAID_LEAVE,
            start_date=date(2025, 10, 2),
            end_date=date(2025, 10, 2),
            total_days=Decimal("1"),
        )
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/v1/leaves/my/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["leaves"]), 1)
