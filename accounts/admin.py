from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import AuditLog, Company, Employee, Role, User


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "is_active", "created_at")
    search_fields = ("name", "email")
    list_filter = ("is_active",)


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "level")
    ordering = ("level",)


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ("username", "email", "role", "company", "is_active", "is_staff")
    list_filter = ("role", "company", "is_active", "is_staff")
    search_fields = ("username", "first_name", "last_name", "email", "phone")
    ordering = ("id",)
    fieldsets = DjangoUserAdmin.fieldsets + (
        ("WorkZen", {"fields": ("role", "company", "phone")}),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ("WorkZen", {"fields": ("role", "company")}),
    )


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("id", "employee_code", "first_name", "last_name", "email", "company", "is_active")
    list_filter = ("company", "is_active", "department")
    search_fields = ("employee_code", "first_name", "last_name", "email")
    raw_id_fields = ("user",)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "user", "category", "level", "object_type", "object_id")
    list_filter = ("category", "level")
    search_fields = ("action", "object_type", "object_id")
    readonly_fields = [field.name for field in AuditLog._meta.fields]
