from __future__ import annotations

from typing import Iterable

from .models import Employee, Role


class AccessPolicy:
    """Centralized role, tenant and object-level access checks."""

    @staticmethod
    def _has_role(user) -> bool:
        return bool(user and user.is_authenticated and getattr(user, "role", None))

    @classmethod
    def has_any_role(cls, user, role_names: Iterable[str]) -> bool:
        if not cls._has_role(user):
            return False
        return user.role.name in set(role_names)

    @staticmethod
    def company_id(user):
        if not user or not user.is_authenticated:
            return None
        return getattr(user, "company_id", None)

    @staticmethod
    def employee_for(user) -> Employee | None:
        if not user or not user.is_authenticated:
            return None
        return Employee.objects.filter(user=user).first()

    @classmethod
    def can_manage_employees(cls, user) -> bool:
        return cls.has_any_role(user, [Role.Name.ADMIN, Role.Name.HR_OFFICER])

    @classmethod
    def can_view_directory(cls, user) -> bool:
        return cls.has_any_role(
            user,
            [Role.Name.ADMIN, Role.Name.HR_OFFICER, Role.Name.PAYROLL_OFFICER],
        )

    @classmethod
    def can_view_employee(cls, user, employee: Employee) -> bool:
        if not cls._has_role(user):
            return False
        if employee.company_id != cls.company_id(user):
            return False
        if cls.can_view_directory(user):
            return True
        return employee.user_id == user.id


def current_employee(user) -> Employee:
    """Employee profile of the caller; raises NotFound when the user has none."""
    from common.exceptions import NotFound

    employee = AccessPolicy.employee_for(user)
    if employee is None:
        raise NotFound("Employee profile not found for the current user.")
    return employee
