from django.contrib import admin

from .models import Payslip, PayslipComponent, SalaryComponent, SalaryStructure
from .policies import PayrollPolicy


class PayrollAdminMixin:
    def _can_manage(self, request) -> bool:
        return request.user.is_superuser or PayrollPolicy.can_manage_payroll(request.user)

    def has_module_permission(self, request):
        return self._can_manage(request)

    def has_view_permission(self, request, obj=None):
        return self._can_manage(request)

    def has_add_permission(self, request):
        return self._can_manage(request)

    def has_change_permission(self, request, obj=None):
        return self._can_manage(request)

    def has_delete_permission(self, request, obj=None):
        return self._can_manage(request)


class SalaryComponentInline(admin.TabularInline):
    model = SalaryComponent
    extra = 0
    fields = ("order", "name", "computation_type", "value", "amount")
    readonly_fields = ("amount",)


@admin.register(SalaryStructure)
class SalaryStructureAdmin(PayrollAdminMixin, admin.ModelAdmin):
    list_display = ("employee", "wage", "pf_rate", "professional_tax", "updated_at")
    list_filter = ("employee__company",)
    search_fields = ("employee__first_name", "employee__last_name", "employee__employee_code")
    inlines = [SalaryComponentInline]


class PayslipComponentInline(admin.TabularInline):
    model = PayslipComponent
    extra = 0
    fields = ("order", "name", "rate_percent", "amount", "is_deduction")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Payslip)
class PayslipAdmin(PayrollAdminMixin, admin.ModelAdmin):
    list_display = ("employee", "pay_period", "gross_wage", "total_deductions", "net_wage", "status")
    list_filter = ("status", "employee__company")
    search_fields = ("employee__first_name", "employee__last_name", "employee__employee_code", "pay_period")
    date_hierarchy = "period_start"
    readonly_fields = ("validated_at", "cancelled_at", "created_at", "updated_at")
    inlines = [PayslipComponentInline]
