from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import Role
from apps.leaves.models import Leave, LeaveType
from common.clock import FixedClock, use_clock
from common.testing import make_company, make_employee, make_user

from .exceptions import AlreadyCheckedIn, NoCheckInToday, NotCheckedIn
from .models import Attendance
from .services import AttendanceService


class AttendanceServiceTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.employee = make_employee("E001", company=self.company)
        self.clock = FixedClock(datetime(2025, 10, 6, 9, 0))

    def test_check_in_creates_present_row_and_session(self):
        attendance = AttendanceService.check_in(employee=self.employee, clock=self.clock)

        self.assertEqual(attendance.date, date(2025, 10, 6))
        self.assertEqual(attendance.status, Attendance.Status.PRESENT)
        self.assertTrue(attendance.currently_checked_in)
        self.assertEqual(attendance.check_in, self.clock.now())
        self.assertEqual(attendance.sessions.count(), 1)

    def test_second_check_in_while_open_is_rejected(self):
        AttendanceService.check_in(employee=self.employee, clock=self.clock)

        with self.assertRaises(AlreadyCheckedIn):
            AttendanceService.check_in(employee=self.employee, clock=self.clock)

    def test_check_out_without_check_in(self):
        with self.assertRaises(NoCheckInToday):
            AttendanceService.check_out(employee=self.employee, clock=self.clock)

    def test_check_out_twice(self):
        AttendanceService.check_in(employee=self.employee, clock=self.clock)
        self.clock.advance(hours=1)
        AttendanceService.check_out(employee=self.employee, clock=self.clock)

        with self.assertRaises(NotCheckedIn):
            AttendanceService.check_out(employee=self.employee, clock=self.clock)

    def test_working_hours_sum_all_sessions_and_first_check_in_is_kept(self):
        first_in = self.clock.now()
        AttendanceService.check_in(employee=self.employee, clock=self.clock)
        self.clock.advance(hours=3, minutes=20)
        AttendanceService.check_out(employee=self.employee, clock=self.clock)

        self.clock.advance(hours=1)
        AttendanceService.check_in(employee=self.employee, clock=self.clock)
        self.clock.advance(hours=4, minutes=10)
        attendance = AttendanceService.check_out(employee=self.employee, clock=self.clock)

        self.assertEqual(attendance.check_in, first_in)
        self.assertEqual(attendance.check_out, self.clock.now())
        self.assertFalse(attendance.currently_checked_in)
        self.assertEqual(attendance.working_hours, Decimal("7.50"))
        self.assertEqual(attendance.sessions.count(), 2)

    def test_mark_upserts_status_and_remarks(self):
        day = date(2025, 10, 7)
        _, created = AttendanceService.mark(employee=self.employee, day=day, status=Attendance.Status.ABSENT)
        attendance, created_again = AttendanceService.mark(
            employee=self.employee, day=day, status=Attendance.Status.HALF_DAY, remarks="Doctor visit"
        )

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(attendance.status, Attendance.Status.HALF_DAY)
        self.assertEqual(attendance.remarks, "Doctor visit")
        self.assertEqual(Attendance.objects.filter(employee=self.employee).count(), 1)

    def test_statistics(self):
        Attendance.objects.create(
            employee=self.employee, date=date(2025, 10, 1), working_hours=Decimal("8.25")
        )
        Attendance.objects.create(employee=self.employee, date=date(2025, 10, 2), status=Attendance.Status.ABSENT)
        Attendance.objects.create(employee=self.employee, date=date(2025, 10, 3), status=Attendance.Status.ON_LEAVE)

        stats = AttendanceService.statistics(Attendance.objects.filter(employee=self.employee))

        self.assertEqual(stats.total_days, 3)
        self.assertEqual(stats.present_days, 1)
        self.assertEqual(stats.absent_days, 1)
        self.assertEqual(stats.leave_days, 1)
        self.assertEqual(stats.total_working_hours, Decimal("8.25"))

    def test_today_status_reports_approved_leave(self):
        Leave.objects.create(
            employee=self.employee,
            leave_type=LeaveType.SICK_LEAVE,
            start_date=date(2025, 10, 6),
            end_date=date(2025, 10, 7),
            total_days=Decimal("2"),
            status=Leave.Status.APPROVED,
        )

        today = AttendanceService.today_status(employee=self.employee, clock=self.clock)

        self.assertEqual(today["status"], Attendance.Status.ON_LEAVE)
        self.assertFalse(today["can_check_in"])
        self.assertFalse(today["can_check_out"])


class AttendanceApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = make_company()
        self.hr = make_user("hr", company=self.company, role_name=Role.Name.HR_OFFICER)
        self.officer = make_user("payroll", company=self.company, role_name=Role.Name.PAYROLL_OFFICER)
        self.user = make_user("asha", company=self.company)
        self.employee = make_employee("E001", company=self.company, user=self.user)
        self.colleague = make_employee("E002", company=self.company, first_name="Ravi")
        self.clock = FixedClock(datetime(2025, 10, 6, 9, 0))

    def test_check_in_and_out_flow(self):
        self.client.force_authenticate(self.user)

        with use_clock(self.clock):
            response = self.client.post("/api/v1/attendance/check-in/")
            self.assertEqual(response.status_code, 201)
            self.assertTrue(response.data["currently_checked_in"])

            response = self.client.post("/api/v1/attendance/check-in/")
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.data["code"], "already_checked_in")

            response = self.client.get("/api/v1/attendance/today/")
            self.assertTrue(response.data["can_check_out"])

            self.clock.advance(hours=8)
            response = self.client.post("/api/v1/attendance/check-out/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["working_hours"], "8.00")

    def test_my_attendance_month_with_statistics(self):
        Attendance.objects.create(employee=self.employee, date=date(2025, 10, 1))
        Attendance.objects.create(employee=self.employee, date=date(2025, 9, 30))
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/v1/attendance/my/", {"year": 2025, "month": 10})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["records"]), 1)
        self.assertEqual(response.data["statistics"]["present_days"], 1)

    def test_company_summary_counts_missing_rows_as_absent(self):
        Attendance.objects.create(employee=self.employee, date=date(2025, 10, 6))
        self.client.force_authenticate(self.officer)

        response = self.client.get("/api/v1/attendance/all/", {"date": "2025-10-06"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["summary"]["total_employees"], 2)
        self.assertEqual(response.data["summary"]["present"], 1)
        self.assertEqual(response.data["summary"]["absent"], 1)

    def test_employee_cannot_view_company_or_colleague(self):
        self.client.force_authenticate(self.user)

        self.assertEqual(self.client.get("/api/v1/attendance/all/").status_code, 403)
        self.assertEqual(self.client.get(f"/api/v1/attendance/employee/{self.colleague.id}/").status_code, 403)
        self.assertEqual(self.client.get(f"/api/v1/attendance/employee/{self.employee.id}/").status_code, 200)

    @patch("apps.attendance.views.AttendanceAuditService.log_marked")
    def test_hr_marks_attendance(self, log_marked):
        self.client.force_authenticate(self.hr)
        payload = {
            "employee_id": self.colleague.id,
            "date": "2025-10-06",
            "status": Attendance.Status.HALF_DAY,
            "remarks": "Left early",
        }

        response = self.client.post("/api/v1/attendance/mark/", payload, format="json")
        self.assertEqual(response.status_code, 201)

        payload["status"] = Attendance.Status.PRESENT
        response = self.client.post("/api/v1/attendance/mark/", payload, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], Attendance.Status.PRESENT)
        self.assertEqual(log_marked.call_count, 2)

    def test_payroll_officer_cannot_mark(self):
        self.client.force_authenticate(self.officer)

        response = self.client.post(
            "/api/v1/attendance/mark/",
            {"employee_id": self.colleague.id, "date": "2025-10-06", "status": Attendance.Status.ABSENT},
            format="json",
        )

        self.assertEqual(response.status_code, 403)

    def test_user_without_employee_profile(self):
        self.client.force_authenticate(self.hr)

        response = self.client.post("/api/v1/attendance/check-in/")

        self.assertEqual(response.status_code, 404)
