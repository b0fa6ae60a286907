from django.contrib import admin

from .models import Attendance, AttendanceSession


class AttendanceSessionInline(admin.TabularInline):
    model = AttendanceSession
    extra = 0
    fields = ("check_in", "check_out")


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("employee", "date", "status", "currently_checked_in", "working_hours")
    list_filter = ("status", "date", "employee__company")
    search_fields = ("employee__first_name", "employee__last_name", "employee__employee_code")
    date_hierarchy = "date"
    inlines = [AttendanceSessionInline]
