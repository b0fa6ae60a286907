from django.contrib import admin

from .models import Leave, LeaveBalance


@admin.register(Leave)
class LeaveAdmin(admin.ModelAdmin):
    list_display = ("employee", "leave_type", "start_date", "end_date", "total_days", "status", "approved_by")
    list_filter = ("status", "leave_type", "employee__company")
    search_fields = ("employee__first_name", "employee__last_name", "employee__employee_code", "subject")
    date_hierarchy = "start_date"


@admin.register(LeaveBalance)
class LeaveBalanceAdmin(admin.ModelAdmin):
    list_display = ("employee", "leave_type", "year", "total_days", "used_days", "remaining_days")
    list_filter = ("leave_type", "year")
    search_fields = ("employee__first_name", "employee__last_name", "employee__employee_code")
