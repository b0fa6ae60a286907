from unittest.mock import patch

from django.contrib.auth.models import AnonymousUser
from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

from common.testing import make_company, make_employee, make_salary_structure, make_user

from .access_policy import AccessPolicy
from .models import AuditLog, Employee, Role, User


class InitRolesCommandTests(TestCase):
    def test_creates_all_roles_with_levels(self):
        call_command("init_roles", verbosity=0)

        levels = dict(Role.objects.values_list("name", "level"))
        self.assertEqual(
            levels,
            {
                Role.Name.ADMIN: Role.Level.ADMIN,
                Role.Name.HR_OFFICER: Role.Level.HR_OFFICER,
                Role.Name.PAYROLL_OFFICER: Role.Level.PAYROLL_OFFICER,
                Role.Name.EMPLOYEE: Role.Level.EMPLOYEE,
            },
        )

    def test_superuser_gets_admin_role(self):
        user = User.objects.create_superuser(username="root", email="root@example.test", password="StrongPass123!")

        self.assertEqual(user.role.name, Role.Name.ADMIN)


class AccessPolicyTests(TestCase):
    def setUp(self):
        self.company = make_company()

    def test_role_gates(self):
        admin = make_user("admin", company=self.company, role_name=Role.Name.ADMIN)
        hr = make_user("hr", company=self.company, role_name=Role.Name.HR_OFFICER)
        officer = make_user("payroll", company=self.company, role_name=Role.Name.PAYROLL_OFFICER)
        employee = make_user("asha", company=self.company)

        self.assertTrue(AccessPolicy.can_manage_employees(admin))
        self.assertTrue(AccessPolicy.can_manage_employees(hr))
        self.assertFalse(AccessPolicy.can_manage_employees(officer))
        self.assertTrue(AccessPolicy.can_view_directory(officer))
        self.assertFalse(AccessPolicy.can_view_directory(employee))

    def test_feature_policies_gate_on_role_sets(self):
        from apps.attendance.policies import AttendancePolicy
        from apps.leaves.policies import LeavePolicy
        from apps.payroll.policies import PayrollPolicy

        hr = make_user("hr", company=self.company, role_name=Role.Name.HR_OFFICER)
        officer = make_user("payroll", company=self.company, role_name=Role.Name.PAYROLL_OFFICER)
        employee = make_user("asha", company=self.company)
        roleless = User(username="norole", company=self.company)

        self.assertFalse(PayrollPolicy.can_manage_payroll(hr))
        self.assertTrue(PayrollPolicy.can_manage_payroll(officer))
        self.assertTrue(LeavePolicy.can_review(officer))
        self.assertFalse(LeavePolicy.can_allocate(officer))
        self.assertTrue(AttendancePolicy.can_mark(hr))
        self.assertFalse(AttendancePolicy.can_view_all(employee))
        self.assertFalse(AccessPolicy.has_any_role(roleless, Role.Name.values))
        self.assertFalse(AccessPolicy.has_any_role(AnonymousUser(), Role.Name.values))

    def test_employee_sees_only_own_profile(self):
        user = make_user("asha", company=self.company)
        own = make_employee("E001", company=self.company, user=user)
        colleague = make_employee("E002", company=self.company)
        outsider = make_employee("G001", company=make_company("Globex"))

        self.assertTrue(AccessPolicy.can_view_employee(user, own))
        self.assertFalse(AccessPolicy.can_view_employee(user, colleague))
        self.assertFalse(AccessPolicy.can_view_employee(user, outsider))


class EmployeeApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = make_company()
        self.hr = make_user("hr", company=self.company, role_name=Role.Name.HR_OFFICER)
        self.officer = make_user("payroll", company=self.company, role_name=Role.Name.PAYROLL_OFFICER)
        self.user = make_user("asha", company=self.company)
        self.employee = make_employee("E001", company=self.company, user=self.user)
        self.colleague = make_employee("E002", company=self.company, first_name="Ravi", last_name="Kumar")
        make_employee("G001", company=make_company("Globex"), first_name="Ravi")

    def test_me_returns_user_and_profile(self):
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/v1/accounts/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["role"], Role.Name.EMPLOYEE)
        self.assertEqual(response.data["employee"]["employee_code"], "E001")

    def test_directory_is_company_scoped_and_searchable(self):
        make_salary_structure(self.employee)
        self.client.force_authenticate(self.officer)

        response = self.client.get("/api/v1/accounts/employees/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)
        flags = {item["employee_code"]: item["has_salary_structure"] for item in response.data}
        self.assertEqual(flags, {"E001": True, "E002": False})

        response = self.client.get("/api/v1/accounts/employees/", {"search": "ravi"})
        self.assertEqual([item["employee_code"] for item in response.data], ["E002"])

    def test_employee_cannot_list_directory(self):
        self.client.force_authenticate(self.user)

        self.assertEqual(self.client.get("/api/v1/accounts/employees/").status_code, 403)
        self.assertEqual(self.client.get(f"/api/v1/accounts/employees/{self.employee.id}/").status_code, 200)
        self.assertEqual(self.client.get(f"/api/v1/accounts/employees/{self.colleague.id}/").status_code, 403)

    def test_hr_creates_employee_in_own_company(self):
        self.client.force_authenticate(self.hr)

        response = self.client.post(
            "/api/v1/accounts/employees/",
            {
                "employee_code": "E003",
                "first_name": "Meera",
                "last_name": "Iyer",
                "email": "meera@example.test",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        created = Employee.objects.get(employee_code="E003")
        self.assertEqual(created.company, self.company)
        self.assertTrue(AuditLog.objects.filter(action="employee_created", user=self.hr).exists())

    def test_duplicate_employee_code_is_rejected(self):
        self.client.force_authenticate(self.hr)

        response = self.client.post(
            "/api/v1/accounts/employees/",
            {"employee_code": "E001", "first_name": "Dup", "last_name": "Code", "email": "dup@example.test"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("employee_code", response.data)

    def test_payroll_officer_cannot_create(self):
        self.client.force_authenticate(self.officer)

        response = self.client.post(
            "/api/v1/accounts/employees/",
            {"employee_code": "E009", "first_name": "No", "last_name": "Access", "email": "no@example.test"},
            format="json",
        )

        self.assertEqual(response.status_code, 403)

    @patch("accounts.views.EmployeeAuditService.log_employee_updated")
    def test_patch_ignores_fields_outside_allow_list(self, log_updated):
        other_company = make_company("Globex Two")
        self.client.force_authenticate(self.hr)

        response = self.client.patch(
            f"/api/v1/accounts/employees/{self.colleague.id}/",
            {"department": "Finance", "employee_code": "HACK", "company": other_company.id},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.colleague.refresh_from_db()
        self.assertEqual(self.colleague.department, "Finance")
        self.assertEqual(self.colleague.employee_code, "E002")
        self.assertEqual(self.colleague.company, self.company)
        log_updated.assert_called_once()
