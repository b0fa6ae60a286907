from datetime import date, timedelta
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import CommandError, call_command
from django.db import IntegrityError
from django.test import TestCase

from apps.attendance.models import Attendance
from apps.leaves.models import Leave, LeaveType
from apps.payroll.aggregation import aggregate_period
from apps.payroll.exceptions import DuplicatePayslip, MissingSalaryStructure, NoEligibleEmployees
from apps.payroll.models import Payslip, PayslipComponent, SalaryComponent
from apps.payroll.services import PayrollService
from common.testing import make_company, make_employee, make_salary_structure

BASIC_AND_HRA = [
    ("Basic", SalaryComponent.ComputationType.PERCENTAGE_OF_WAGE, "50"),
    ("HRA", SalaryComponent.ComputationType.PERCENTAGE_OF_BASIC, "50"),
]

OCT_START = date(2025, 10, 1)
OCT_END = date(2025, 10, 31)


def mark_present(employee, days: int, start: date = OCT_START):
    for offset in range(days):
        Attendance.objects.create(
            employee=employee,
            date=start + timedelta(days=offset),
            status=Attendance.Status.PRESENT,
        )


def approved_leave(employee, leave_type, start, end, total_days):
    return Leave.objects.create(
        employee=employee,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        total_days=Decimal(total_days),
        status=Leave.Status.APPROVED,
    )


class AggregatePeriodTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.employee = make_employee("E001", company=self.company)

    def test_counts_present_rows_only(self):
        mark_present(self.employee, 3)
        Attendance.objects.create(employee=self.employee, date=date(2025, 10, 10), status=Attendance.Status.ABSENT)
        Attendance.objects.create(employee=self.employee, date=date(2025, 10, 11), status=Attendance.Status.HALF_DAY)
        Attendance.objects.create(employee=self.employee, date=date(2025, 9, 30), status=Attendance.Status.PRESENT)

        totals = aggregate_period(self.employee.id, OCT_START, OCT_END)

        self.assertEqual(totals.present_days, 3)
        self.assertEqual(totals.worked_days, Decimal("3"))

    def test_splits_paid_and_unpaid_leave(self):
        approved_leave(self.employee, LeaveType.SICK_LEAVE, date(2025, 10, 6), date(2025, 10, 7), "2")
        approved_leave(self.employee, LeaveType.UNPAID_LEAVE, date(2025, 10, 13), date(2025, 10, 15), "3")
        Leave.objects.create(
            employee=self.employee,
            leave_type=LeaveType.PAID_TIME_OFF,
            start_date=date(2025, 10, 20),
            end_date=date(2025, 10, 21),
            total_days=Decimal("2"),
            status=Leave.Status.PENDING,
        )

        totals = aggregate_period(self.employee.id, OCT_START, OCT_END)

        self.assertEqual(totals.paid_leave_days, Decimal("2"))
        self.assertEqual(totals.unpaid_leave_days, Decimal("3"))
        self.assertEqual(totals.worked_days, Decimal("2"))

    def test_leave_crossing_period_boundary_counts_in_full(self):
        approved_leave(self.employee, LeaveType.PAID_TIME_OFF, date(2025, 9, 28), date(2025, 10, 3), "6")

        october = aggregate_period(self.employee.id, OCT_START, OCT_END)
        september = aggregate_period(self.employee.id, date(2025, 9, 1), date(2025, 9, 30))

        self.assertEqual(october.paid_leave_days, Decimal("6"))
        self.assertEqual(september.paid_leave_days, Decimal("6"))

    def test_leave_touching_period_edge_is_included(self):
        approved_leave(self.employee, LeaveType.PAID_TIME_OFF, date(2025, 10, 31), date(2025, 11, 2), "3")

        totals = aggregate_period(self.employee.id, OCT_START, OCT_END)

        self.assertEqual(totals.paid_leave_days, Decimal("3"))


class GeneratePayslipTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.employee = make_employee("E001", company=self.company)
        make_salary_structure(self.employee, wage="50000", components=BASIC_AND_HRA)

    def _generate(self, working_days=26):
        return PayrollService.generate_payslip(
            employee=self.employee,
            period_start=OCT_START,
            period_end=OCT_END,
            working_days=working_days,
            pay_period="Oct 2025",
        )

    def _lines(self, payslip):
        return {line.name: line for line in payslip.components.all()}

    def test_full_attendance(self):
        mark_present(self.employee, 26)

        payslip = self._generate()

        self.assertEqual(payslip.status, Payslip.Status.DRAFT)
        self.assertEqual(payslip.worked_days, Decimal("26"))
        self.assertEqual(payslip.basic_wage, Decimal("25000.00"))
        self.assertEqual(payslip.gross_wage, Decimal("37500.00"))
        self.assertEqual(payslip.total_deductions, Decimal("3200.00"))
        self.assertEqual(payslip.net_wage, Decimal("34300.00"))
        self.assertEqual(payslip.employee_cost, payslip.gross_wage)

        lines = self._lines(payslip)
        self.assertEqual(lines["Basic"].amount, Decimal("25000.00"))
        self.assertEqual(lines["HRA"].amount, Decimal("12500.00"))
        self.assertEqual(lines["Provident Fund"].amount, Decimal("3000.00"))
        self.assertEqual(lines["Provident Fund"].rate_percent, Decimal("12.00"))
        self.assertTrue(lines["Provident Fund"].is_deduction)
        self.assertEqual(lines["Professional Tax"].amount, Decimal("200.00"))

    def test_half_month_prorates_earnings_and_keeps_professional_tax(self):
        mark_present(self.employee, 13)

        payslip = self._generate()
        lines = self._lines(payslip)

        self.assertEqual(lines["Basic"].amount, Decimal("12500.00"))
        self.assertEqual(lines["HRA"].amount, Decimal("6250.00"))
        self.assertEqual(payslip.gross_wage, Decimal("18750.00"))
        self.assertEqual(lines["Provident Fund"].amount, Decimal("1500.00"))
        self.assertEqual(lines["Professional Tax"].amount, Decimal("200.00"))
        self.assertEqual(payslip.total_deductions, Decimal("1700.00"))
        self.assertEqual(payslip.net_wage, Decimal("17050.00"))

    def test_paid_leave_counts_as_worked(self):
        mark_present(self.employee, 20, start=date(2025, 10, 6))
        approved_leave(self.employee, LeaveType.PAID_TIME_OFF, date(2025, 9, 29), date(2025, 10, 4), "6")

        payslip = self._generate()

        self.assertEqual(payslip.worked_days, Decimal("26"))
        self.assertEqual(payslip.paid_leave_days, Decimal("6"))
        self.assertEqual(payslip.net_wage, Decimal("34300.00"))

    def test_unpaid_leave_does_not_count_as_worked(self):
        mark_present(self.employee, 13)
        approved_leave(self.employee, LeaveType.UNPAID_LEAVE, date(2025, 10, 20), date(2025, 10, 22), "3")

        payslip = self._generate()

        self.assertEqual(payslip.worked_days, Decimal("13"))
        self.assertEqual(payslip.unpaid_leave_days, Decimal("3"))

    def test_no_attendance_skips_professional_tax(self):
        payslip = self._generate()

        self.assertEqual(payslip.gross_wage, Decimal("0.00"))
        self.assertEqual(payslip.total_deductions, Decimal("0.00"))
        self.assertEqual(payslip.net_wage, Decimal("0.00"))
        self.assertEqual(self._lines(payslip)["Professional Tax"].amount, Decimal("0.00"))

    def test_line_order_puts_deductions_last(self):
        mark_present(self.employee, 26)

        payslip = self._generate()

        names = list(payslip.components.order_by("order").values_list("name", flat=True))
        self.assertEqual(names, ["Basic", "HRA", "Provident Fund", "Professional Tax"])

    def test_second_generation_for_same_period_is_rejected(self):
        mark_present(self.employee, 26)
        self._generate()

        with self.assertRaises(DuplicatePayslip):
            self._generate()

        self.assertEqual(Payslip.objects.filter(employee=self.employee).count(), 1)

    def test_integrity_error_on_insert_is_reported_as_duplicate(self):
        with patch("apps.payroll.services.Payslip.objects.create", side_effect=IntegrityError("unique")):
            with self.assertRaises(DuplicatePayslip):
                self._generate()

        self.assertFalse(PayslipComponent.objects.exists())

    def test_missing_salary_structure(self):
        other = make_employee("E002", company=self.company)

        with self.assertRaises(MissingSalaryStructure):
            PayrollService.generate_payslip(
                employee=other,
                period_start=OCT_START,
                period_end=OCT_END,
                working_days=26,
            )
        self.assertFalse(Payslip.objects.filter(employee=other).exists())

    def test_generate_for_month_uses_calendar_working_days_and_label(self):
        payslip = PayrollService.generate_for_month(employee=self.employee, year=2025, month_index=9)

        self.assertEqual(payslip.period_start, OCT_START)
        self.assertEqual(payslip.period_end, OCT_END)
        self.assertEqual(payslip.working_days, 27)
        self.assertEqual(payslip.pay_period, "Oct 2025")


class PayrunTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.other_company = make_company("Globex")

        self.first = make_employee("E001", company=self.company, first_name="Asha")
        self.second = make_employee("E002", company=self.company, first_name="Ravi")
        self.unstructured = make_employee("E003", company=self.company, first_name="Meera")
        self.outsider = make_employee("G001", company=self.other_company)

        for employee in (self.first, self.second, self.outsider):
            make_salary_structure(employee, components=BASIC_AND_HRA)

    def test_generates_one_payslip_per_structured_employee(self):
        result = PayrollService.generate_payrun(company_id=self.company.id, year=2025, month_index=9)

        self.assertEqual({p.employee_id for p in result.succeeded}, {self.first.id, self.second.id})
        self.assertEqual(result.failed, [])
        self.assertEqual(result.working_days, 27)
        self.assertFalse(Payslip.objects.filter(employee=self.unstructured).exists())
        self.assertFalse(Payslip.objects.filter(employee=self.outsider).exists())

    def test_partial_success_collects_per_employee_errors(self):
        PayrollService.generate_for_month(employee=self.second, year=2025, month_index=9)

        with self.assertLogs("apps.payroll.services", level="WARNING"):
            result = PayrollService.generate_payrun(company_id=self.company.id, year=2025, month_index=9)

        self.assertEqual([p.employee_id for p in result.succeeded], [self.first.id])
        self.assertEqual(len(result.failed), 1)
        failure = result.failed[0]
        self.assertEqual(failure.employee_id, self.second.id)
        self.assertEqual(failure.error_code, "duplicate_payslip")
        self.assertEqual(
            failure.as_dict(),
            {
                "employee_id": self.second.id,
                "name": self.second.full_name,
                "code": "E002",
                "error": "Payslip already exists for this period",
                "error_code": "duplicate_payslip",
            },
        )
        self.assertEqual(Payslip.objects.filter(employee__company=self.company).count(), 2)

    def test_company_without_structures_is_rejected(self):
        empty = make_company("Initech")
        make_employee("I001", company=empty)

        with self.assertRaises(NoEligibleEmployees):
            PayrollService.generate_payrun(company_id=empty.id, year=2025, month_index=9)


class GeneratePayrunCommandTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.employee = make_employee("E001", company=self.company)
        make_salary_structure(self.employee, components=BASIC_AND_HRA)

    def run_command(self, **options):
        out = StringIO()
        defaults = {"company": self.company.id, "year": 2025, "month": 10}
        call_command("generate_payrun", stdout=out, **{**defaults, **options})
        return out.getvalue()

    def test_generates_payslips_and_reports_summary(self):
        output = self.run_command()

        self.assertIn("Payrun for Acme: 1 generated, 0 errors", output)
        payslip = Payslip.objects.get(employee=self.employee)
        self.assertEqual(payslip.period_start, OCT_START)
        self.assertEqual(payslip.status, Payslip.Status.DRAFT)

    def test_second_run_reports_duplicate(self):
        self.run_command()

        with self.assertLogs("apps.payroll.services", level="WARNING"):
            output = self.run_command()

        self.assertIn("E001 Asha Rao: Payslip already exists for this period", output)
        self.assertIn("Payrun for Acme: 0 generated, 1 errors", output)
        self.assertEqual(Payslip.objects.filter(employee=self.employee).count(), 1)

    def test_unknown_company_is_rejected(self):
        with self.assertRaisesMessage(CommandError, "Company 999999 not found"):
            self.run_command(company=999999)

    def test_month_out_of_range_is_rejected(self):
        with self.assertRaisesMessage(CommandError, "month must be between 1 and 12"):
            self.run_command(month=13)

        self.assertFalse(Payslip.objects.exists())

    def test_company_without_structures_is_rejected(self):
        empty = make_company("Initech")
        make_employee("I001", company=empty)

        with self.assertRaisesMessage(CommandError, "No employees with salary structure found"):
            self.run_command(company=empty.id)
