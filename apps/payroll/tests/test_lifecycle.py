from datetime import date, datetime
from unittest.mock import patch

from django.core import mail
from django.test import TestCase

from apps.attendance.models import Attendance
from apps.payroll.exceptions import PayslipNotFound
from apps.payroll.lifecycle import PayslipLifecycle
from apps.payroll.models import Payslip
from apps.payroll.notifications import payslip_breakdown
from apps.payroll.services import PayrollService
from common.clock import FixedClock
from common.exceptions import IllegalStateTransition
from common.models import Notification
from common.testing import make_company, make_employee, make_salary_structure, make_user


class PayslipLifecycleTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.user = make_user("asha", company=self.company)
        self.employee = make_employee("E001", company=self.company, user=self.user)
        make_salary_structure(self.employee)
        for day in range(1, 4):
            Attendance.objects.create(employee=self.employee, date=date(2025, 10, day))
        self.payslip = PayrollService.generate_for_month(employee=self.employee, year=2025, month_index=9)
        self.clock = FixedClock(datetime(2025, 11, 1, 9, 30))

    def test_validate_moves_draft_to_done_and_notifies(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            payslip = PayslipLifecycle.validate(self.payslip.id, company_id=self.company.id, clock=self.clock)

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(payslip.status, Payslip.Status.DONE)
        self.assertEqual(payslip.validated_at, self.clock.now())

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "Salary Slip - October 2025")
        self.assertEqual(mail.outbox[0].to, ["e001@example.test"])
        self.assertTrue(
            Notification.objects.filter(user=self.user, type=Notification.Type.PAYROLL).exists()
        )

    def test_validate_twice_is_rejected_and_leaves_payslip_unchanged(self):
        PayslipLifecycle.validate(self.payslip.id, company_id=self.company.id, clock=self.clock)
        stamped = Payslip.objects.get(id=self.payslip.id).validated_at

        self.clock.advance(days=1)
        with self.assertRaises(IllegalStateTransition) as ctx:
            PayslipLifecycle.validate(self.payslip.id, company_id=self.company.id, clock=self.clock)

        self.assertEqual(ctx.exception.message, "Payslip is already done")
        self.assertEqual(ctx.exception.current_state, Payslip.Status.DONE)
        self.assertEqual(Payslip.objects.get(id=self.payslip.id).validated_at, stamped)

    def test_notification_failure_does_not_roll_back_validation(self):
        with patch(
            "apps.payroll.notifications.send_monthly_salary_slip",
            side_effect=RuntimeError("smtp down"),
        ):
            with self.assertLogs("apps.payroll.notifications", level="ERROR"):
                with self.captureOnCommitCallbacks(execute=True):
                    PayslipLifecycle.validate(self.payslip.id, company_id=self.company.id, clock=self.clock)

        self.assertEqual(Payslip.objects.get(id=self.payslip.id).status, Payslip.Status.DONE)

    def test_cancel_draft(self):
        payslip = PayslipLifecycle.cancel(self.payslip.id, company_id=self.company.id, clock=self.clock)

        self.assertEqual(payslip.status, Payslip.Status.CANCELLED)
        self.assertEqual(payslip.cancelled_at, self.clock.now())

    def test_cancel_twice_reports_already_cancelled(self):
        PayslipLifecycle.cancel(self.payslip.id, company_id=self.company.id, clock=self.clock)

        with self.assertRaisesMessage(IllegalStateTransition, "Payslip is already cancelled"):
            PayslipLifecycle.cancel(self.payslip.id, company_id=self.company.id, clock=self.clock)

    def test_cancel_done_payslip_is_rejected(self):
        PayslipLifecycle.validate(self.payslip.id, company_id=self.company.id, clock=self.clock)

        with self.assertRaisesMessage(IllegalStateTransition, "Payslip is already done"):
            PayslipLifecycle.cancel(self.payslip.id, company_id=self.company.id, clock=self.clock)
        self.assertEqual(Payslip.objects.get(id=self.payslip.id).status, Payslip.Status.DONE)

    def test_validate_cancelled_payslip_is_rejected(self):
        PayslipLifecycle.cancel(self.payslip.id, company_id=self.company.id, clock=self.clock)

        with self.assertRaisesMessage(IllegalStateTransition, "Payslip is already cancelled"):
            PayslipLifecycle.validate(self.payslip.id, company_id=self.company.id, clock=self.clock)

    def test_delete_draft_removes_payslip_and_lines(self):
        PayslipLifecycle.delete(self.payslip.id, company_id=self.company.id)

        self.assertFalse(Payslip.objects.filter(id=self.payslip.id).exists())
        self.assertFalse(self.employee.payslips.exists())

    def test_delete_non_draft_is_rejected(self):
        PayslipLifecycle.validate(self.payslip.id, company_id=self.company.id, clock=self.clock)

        with self.assertRaisesMessage(IllegalStateTransition, "Only draft payslips can be deleted"):
            PayslipLifecycle.delete(self.payslip.id, company_id=self.company.id)
        self.assertTrue(Payslip.objects.filter(id=self.payslip.id).exists())

    def test_other_company_sees_not_found(self):
        other = make_company("Globex")

        with self.assertRaises(PayslipNotFound):
            PayslipLifecycle.validate(self.payslip.id, company_id=other.id, clock=self.clock)
        with self.assertRaises(PayslipNotFound):
            PayslipLifecycle.delete(self.payslip.id, company_id=other.id)


class PayslipBreakdownTests(TestCase):
    def test_breakdown_groups_lines_for_the_email(self):
        company = make_company()
        employee = make_employee("E001", company=company)
        make_salary_structure(employee, wage="50000")
        for day in range(1, 28):
            Attendance.objects.create(employee=employee, date=date(2025, 10, day))
        payslip = PayrollService.generate_for_month(employee=employee, year=2025, month_index=9)

        breakdown = payslip_breakdown(payslip)

        self.assertEqual(str(breakdown["basic_salary"]), "25000.00")
        self.assertEqual(str(breakdown["hra"]), "12500.00")
        self.assertEqual(str(breakdown["other_allowances"]), "1600.00")
        self.assertEqual(str(breakdown["gross_salary"]), "39100.00")
        self.assertEqual(str(breakdown["provident_fund"]), "3000.00")
        self.assertEqual(str(breakdown["tax"]), "200.00")
        self.assertEqual(breakdown["working_days"], 27)
        self.assertEqual(breakdown["present_days"], 27)
        self.assertEqual(breakdown["leave_days"], 0)
