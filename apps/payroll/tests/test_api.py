from datetime import date
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import AuditLog, Role
from apps.attendance.models import Attendance
from apps.payroll.models import Payslip, SalaryStructure
from apps.payroll.services import PayrollService
from common.testing import make_company, make_employee, make_salary_structure, make_user


class PayrollApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = make_company()

        self.officer = make_user("payroll_officer", company=self.company, role_name=Role.Name.PAYROLL_OFFICER)
        self.hr = make_user("hr_officer", company=self.company, role_name=Role.Name.HR_OFFICER)
        self.user = make_user("asha", company=self.company)
        self.other_user = make_user("ravi", company=self.company)

        self.employee = make_employee("E001", company=self.company, user=self.user)
        self.other_employee = make_employee("E002", company=self.company, user=self.other_user, first_name="Ravi")
        make_salary_structure(self.employee)
        make_salary_structure(self.other_employee)

        for day in range(1, 11):
            Attendance.objects.create(employee=self.employee, date=date(2025, 10, day))

    def _payslip(self, employee=None):
        return PayrollService.generate_for_month(employee=employee or self.employee, year=2025, month_index=9)

    def test_payrun_generates_payslips_for_company(self):
        self.client.force_authenticate(self.officer)

        response = self.client.post("/api/v1/payroll/payrun/", {"year": 2025, "month": 10}, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["total"], 2)
        self.assertNotIn("errors", response.data)
        self.assertEqual(response.data["payslips"][0]["pay_period"], "Oct 2025")
        self.assertEqual(Payslip.objects.filter(period_start=date(2025, 10, 1)).count(), 2)
        self.assertTrue(AuditLog.objects.filter(action="payrun_generated", user=self.officer).exists())

    def test_payrun_reports_duplicates_as_errors(self):
        self._payslip(self.other_employee)
        self.client.force_authenticate(self.officer)

        response = self.client.post("/api/v1/payroll/payrun/", {"year": 2025, "month": 10}, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["total"], 1)
        self.assertEqual(len(response.data["errors"]), 1)
        self.assertEqual(response.data["errors"][0]["employee_id"], self.other_employee.id)
        self.assertEqual(response.data["errors"][0]["code"], "E002")

    def test_payrun_rejects_invalid_month(self):
        self.client.force_authenticate(self.officer)

        response = self.client.post("/api/v1/payroll/payrun/", {"year": 2025, "month": 13}, format="json")

        self.assertEqual(response.status_code, 400)

    def test_payrun_is_forbidden_for_employees_and_audited(self):
        self.client.force_authenticate(self.user)

        response = self.client.post("/api/v1/payroll/payrun/", {"year": 2025, "month": 10}, format="json")

        self.assertEqual(response.status_code, 403)
        self.assertTrue(AuditLog.objects.filter(action="payroll_access_denied", user=self.user).exists())

    def test_hr_officer_cannot_manage_payroll(self):
        self.client.force_authenticate(self.hr)

        response = self.client.get("/api/v1/payroll/payslips/")

        self.assertEqual(response.status_code, 403)

    def test_generate_single_payslip(self):
        self.client.force_authenticate(self.officer)

        response = self.client.post(
            "/api/v1/payroll/payslips/generate/",
            {"employee_id": self.employee.id, "year": 2025, "month": 10},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], Payslip.Status.DRAFT)
        self.assertEqual(response.data["working_days"], 27)
        self.assertEqual(len(response.data["components"]), 5)

    def test_generate_duplicate_returns_conflict(self):
        self._payslip()
        self.client.force_authenticate(self.officer)

        response = self.client.post(
            "/api/v1/payroll/payslips/generate/",
            {"employee_id": self.employee.id, "year": 2025, "month": 10},
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "duplicate_payslip")

    def test_generate_without_structure_returns_error(self):
        SalaryStructure.objects.filter(employee=self.employee).delete()
        self.client.force_authenticate(self.officer)

        response = self.client.post(
            "/api/v1/payroll/payslips/generate/",
            {"employee_id": self.employee.id, "year": 2025, "month": 10},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "missing_salary_structure")

    def test_generate_for_other_company_employee_is_not_found(self):
        outsider = make_employee("G001", company=make_company("Globex"))
        make_salary_structure(outsider)
        self.client.force_authenticate(self.officer)

        response = self.client.post(
            "/api/v1/payroll/payslips/generate/",
            {"employee_id": outsider.id, "year": 2025, "month": 10},
            format="json",
        )

        self.assertEqual(response.status_code, 404)

    def test_list_filters_and_statistics(self):
        first = self._payslip()
        self._payslip(self.other_employee)
        PayrollService.generate_for_month(employee=self.employee, year=2025, month_index=10)
        self.client.force_authenticate(self.officer)

        response = self.client.get("/api/v1/payroll/payslips/", {"year": 2025, "month": 10})

        self.assertEqual(response.status_code, 200)
        stats = response.data["statistics"]
        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["draft_count"], 2)
        self.assertEqual(stats["done_count"], 0)
        self.assertEqual(stats["total_net"], first.net_wage)

        response = self.client.get("/api/v1/payroll/payslips/", {"employee_id": self.employee.id})
        self.assertEqual(response.data["statistics"]["total"], 2)

    def test_validate_and_cancel_endpoints(self):
        payslip = self._payslip()
        other = self._payslip(self.other_employee)
        self.client.force_authenticate(self.officer)

        with patch("apps.payroll.lifecycle.notify_payslip_validated"):
            response = self.client.put(f"/api/v1/payroll/payslips/{payslip.id}/validate/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], Payslip.Status.DONE)

        response = self.client.put(f"/api/v1/payroll/payslips/{payslip.id}/cancel/")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["current_state"], Payslip.Status.DONE)

        response = self.client.put(f"/api/v1/payroll/payslips/{other.id}/cancel/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], Payslip.Status.CANCELLED)

    def test_delete_only_draft(self):
        payslip = self._payslip()
        self.client.force_authenticate(self.officer)

        response = self.client.delete(f"/api/v1/payroll/payslips/{payslip.id}/")

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Payslip.objects.filter(id=payslip.id).exists())
        self.assertTrue(AuditLog.objects.filter(action="payslip_deleted").exists())

    def test_employee_sees_only_own_payslips(self):
        own = self._payslip()
        foreign = self._payslip(self.other_employee)
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/v1/payroll/my-payslips/", {"year": 2025})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.data], [own.id])

        self.assertEqual(self.client.get(f"/api/v1/payroll/payslips/{own.id}/").status_code, 200)
        self.assertEqual(self.client.get(f"/api/v1/payroll/payslips/{foreign.id}/").status_code, 403)
        self.assertEqual(self.client.delete(f"/api/v1/payroll/payslips/{own.id}/").status_code, 403)

    def test_salary_structure_read_and_write(self):
        self.client.force_authenticate(self.officer)

        response = self.client.put(
            f"/api/v1/payroll/employees/{self.employee.id}/salary/",
            {
                "wage": "30000",
                "components": [
                    {"name": "Basic", "computation_type": "PERCENTAGE_OF_WAGE", "value": "50"},
                    {"name": "HRA", "computation_type": "PERCENTAGE_OF_BASIC", "value": "50"},
                ],
                "employee": self.other_employee.id,
            },
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["employee"], self.employee.id)
        self.assertEqual(response.data["wage"], "30000.00")
        self.assertEqual([c["amount"] for c in response.data["components"]], ["15000.00", "7500.00"])

        self.client.force_authenticate(self.user)
        self.assertEqual(
            self.client.get(f"/api/v1/payroll/employees/{self.employee.id}/salary/").status_code, 200
        )
        self.assertEqual(
            self.client.get(f"/api/v1/payroll/employees/{self.other_employee.id}/salary/").status_code, 403
        )

    def test_salary_structure_over_wage_is_rejected(self):
        self.client.force_authenticate(self.officer)

        response = self.client.put(
            f"/api/v1/payroll/employees/{self.employee.id}/salary/",
            {
                "wage": "1000",
                "components": [{"name": "Basic", "computation_type": "FIXED_AMOUNT", "value": "1000.01"}],
            },
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "components_exceed_wage")

    def test_unauthenticated_requests_are_rejected(self):
        response = self.client.get("/api/v1/payroll/payslips/")

        self.assertEqual(response.status_code, 401)
