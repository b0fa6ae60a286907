from rest_framework.permissions import BasePermission

from .policies import PayrollPolicy


class IsPayrollManager(BasePermission):
    message = "Payroll access is restricted to payroll managers."

    def has_permission(self, request, view):
        return PayrollPolicy.can_manage_payroll(request.user)
