from __future__ import annotations

from accounts.access_policy import AccessPolicy
from accounts.models import Role


class AttendancePolicy:
    VIEW_ALL_ROLES = {Role.Name.ADMIN, Role.Name.HR_OFFICER, Role.Name.PAYROLL_OFFICER}
    MARK_ROLES = {Role.Name.ADMIN, Role.Name.HR_OFFICER}

    @classmethod
    def can_view_all(cls, actor) -> bool:
        return AccessPolicy.has_any_role(actor, cls.VIEW_ALL_ROLES)

    @classmethod
    def can_mark(cls, actor) -> bool:
        return AccessPolicy.has_any_role(actor, cls.MARK_ROLES)

    @classmethod
    def can_view_employee(cls, actor, employee) -> bool:
        if employee.company_id != AccessPolicy.company_id(actor):
            return False
        if cls.can_view_all(actor):
            return True
        return employee.user_id == actor.id
