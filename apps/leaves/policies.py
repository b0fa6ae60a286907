from __future__ import annotations

from accounts.access_policy import AccessPolicy
from accounts.models import Role


class LeavePolicy:
    REVIEW_ROLES = {Role.Name.ADMIN, Role.Name.HR_OFFICER, Role.Name.PAYROLL_OFFICER}
    ALLOCATE_ROLES = {Role.Name.ADMIN, Role.Name.HR_OFFICER}

    @classmethod
    def can_review(cls, actor) -> bool:
        return AccessPolicy.has_any_role(actor, cls.REVIEW_ROLES)

    @classmethod
    def can_allocate(cls, actor) -> bool:
        return AccessPolicy.has_any_role(actor, cls.ALLOCATE_ROLES)

    @classmethod
    def can_view_leave(cls, actor, leave) -> bool:
        if leave.employee.company_id != AccessPolicy.company_id(actor):
            return False
        if cls.can_review(actor):
            return True
        return leave.employee.user_id == actor.id

    @classmethod
    def can_view_balance(cls, actor, employee) -> bool:
        if employee.company_id != AccessPolicy.company_id(actor):
            return False
        if cls.can_review(actor):
            return True
        return employee.user_id == actor.id
