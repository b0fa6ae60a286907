from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from .managers import UserManager


# ================= Tenant =================
class Company(models.Model):
    name = models.CharField("Name", max_length=200)
    email = models.EmailField("Email", blank=True)
    phone = models.CharField("Phone", max_length=50, blank=True)
    address = models.TextField("Address", blank=True)
    is_active = models.BooleanField("Active", default=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Company"
        verbose_name_plural = "Companies"
        ordering = ["name"]

    def __str__(self):
        return self.name


# ================= RBAC =================
class Role(models.Model):
    class Name(models.TextChoices):
        ADMIN = "ADMIN", "Admin"
        HR_OFFICER = "HR_OFFICER", "HR Officer"
        PAYROLL_OFFICER = "PAYROLL_OFFICER", "Payroll Officer"
        EMPLOYEE = "EMPLOYEE", "Employee"

    class Level(models.IntegerChoices):
        EMPLOYEE = 10, "Employee"
        PAYROLL_OFFICER = 20, "Payroll Officer"
        HR_OFFICER = 30, "HR Officer"
        ADMIN = 40, "Admin"

    name = models.CharField("Name", max_length=50, unique=True, choices=Name.choices)
    level = models.PositiveSmallIntegerField(
        "Level",
        choices=Level.choices,
        default=Level.EMPLOYEE,
    )
    description = models.TextField("Description", blank=True)

    class Meta:
        verbose_name = "Role"
        verbose_name_plural = "Roles"

    def __str__(self):
        return self.name


# ================= User =================
class User(AbstractUser):
    role = models.ForeignKey(Role, on_delete=models.PROTECT, verbose_name="System role")
    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
        verbose_name="Company",
    )
    phone = models.CharField("Phone", max_length=50, blank=True)

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"


# ================= Employee directory =================
class Employee(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="employees",
        verbose_name="Company",
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee_profile",
        verbose_name="User account",
    )
    employee_code = models.CharField("Employee code", max_length=50)
    first_name = models.CharField("First name", max_length=150)
    last_name = models.CharField("Last name", max_length=150, blank=True)
    email = models.EmailField("Email")
    phone = models.CharField("Phone", max_length=50, blank=True)
    department = models.CharField("Department", max_length=150, blank=True)
    job_position = models.CharField("Job position", max_length=150, blank=True)
    date_of_joining = models.DateField("Date of joining", null=True, blank=True)

    bank_name = models.CharField("Bank name", max_length=150, blank=True)
    account_number = models.CharField("Account number", max_length=50, blank=True)
    ifsc_code = models.CharField("IFSC code", max_length=20, blank=True)
    pan_number = models.CharField("PAN", max_length=20, blank=True)
    uan_number = models.CharField("UAN", max_length=20, blank=True)

    is_active = models.BooleanField("Active", default=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)
    updated_at = models.DateTimeField("Updated", auto_now=True)

    class Meta:
        verbose_name = "Employee"
        verbose_name_plural = "Employees"
        ordering = ["first_name", "last_name", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "employee_code"],
                name="employee_unique_code_per_company",
            ),
        ]
        indexes = [
            models.Index(fields=["company", "is_active"], name="employee_company_active_idx"),
        ]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"{self.full_name} ({self.employee_code})"


# ================= Audit =================
class AuditLog(models.Model):
    """
    Primary audit storage backend.
    Use apps.audit.log_event as unified entrypoint for new writes.
    """

    class Level(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        CRITICAL = "critical", "Critical"

    class Category(models.TextChoices):
        AUTH = "auth", "Authentication"
        USER = "user", "User management"
        PAYROLL = "payroll", "Payroll"
        LEAVE = "leave", "Leave"
        ATTENDANCE = "attendance", "Attendance"
        SYSTEM = "system", "System"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name="User",
    )

    action = models.CharField("Action", max_length=255)
    object_type = models.CharField("Object type", max_length=100, blank=True)
    object_id = models.CharField("Object ID", max_length=100, blank=True)

    level = models.CharField(
        "Level",
        max_length=20,
        choices=Level.choices,
        default=Level.INFO,
    )

    category = models.CharField(
        "Category",
        max_length=50,
        choices=Category.choices,
        default=Category.SYSTEM,
    )

    ip_address = models.GenericIPAddressField("IP address", null=True, blank=True)
    metadata = models.JSONField("Metadata", default=dict, blank=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Audit log"
        verbose_name_plural = "Audit log"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["level"], name="auditlog_level_idx"),
            models.Index(fields=["category"], name="auditlog_category_idx"),
            models.Index(fields=["created_at"], name="auditlog_created_at_idx"),
            models.Index(fields=["user"], name="auditlog_user_idx"),
        ]

    @classmethod
    def log(
        cls,
        action,
        user=None,
        object_type="",
        object_id="",
        level=Level.INFO,
        category=Category.SYSTEM,
        ip_address=None,
        metadata=None,
    ):
        return cls.objects.create(
            user=user,
            action=action,
            object_type=object_type,
            object_id=object_id,
            level=level,
            category=category,
            ip_address=ip_address,
            metadata=metadata or {},
        )

    def __str__(self):
        return f"[{self.level.upper()}] {self.action}"
