from rest_framework.permissions import BasePermission

from .access_policy import AccessPolicy


class IsCompanyMember(BasePermission):
    """Authenticated user attached to a tenant."""

    def has_permission(self, request, view):
        return AccessPolicy.company_id(request.user) is not None


class CanManageEmployees(BasePermission):
    def has_permission(self, request, view):
        return AccessPolicy.can_manage_employees(request.user)


class CanViewDirectory(BasePermission):
    def has_permission(self, request, view):
        return AccessPolicy.can_view_directory(request.user)
