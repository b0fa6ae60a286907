from __future__ import annotations

from accounts.access_policy import AccessPolicy
from accounts.models import Role


class PayrollPolicy:
    MANAGE_ROLES = {Role.Name.ADMIN, Role.Name.PAYROLL_OFFICER}

    @classmethod
    def can_manage_payroll(cls, user) -> bool:
        return AccessPolicy.has_any_role(user, cls.MANAGE_ROLES)

    @classmethod
    def can_view_employee_payroll(cls, user, employee) -> bool:
        if employee.company_id != AccessPolicy.company_id(user):
            return False
        if cls.can_manage_payroll(user):
            return True
        return employee.user_id is not None and employee.user_id == user.id

    @classmethod
    def can_view_payslip(cls, user, payslip) -> bool:
        return cls.can_view_employee_payroll(user, payslip.employee)
