from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class LeaveType(models.TextChoices):
    PAID_TIME_OFF = "PAID_TIME_OFF", "Paid time off"
    SICK_LEAVE = "SICK_LEAVE", "Sick leave"
    UNPAID_LEAVE = "UNPAID_LEAVE", "Unpaid leave"


# Types drawn from a LeaveBalance.
BALANCE_TRACKED_TYPES = (LeaveType.PAID_TIME_OFF, LeaveType.SICK_LEAVE)


class Leave(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"
        CANCELLED = "CANCELLED", "Cancelled"

    employee = models.ForeignKey(
        "accounts.Employee",
        on_delete=models.CASCADE,
        related_name="leaves",
    )
    leave_type = models.CharField(max_length=20, choices=LeaveType.choices)
    subject = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    total_days = models.DecimalField(max_digits=6, decimal_places=2, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="leaves_reviewed",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["employee", "status"], name="leave_employee_status_idx"),
            models.Index(fields=["start_date", "end_date"], name="leave_dates_idx"),
        ]

    @property
    def is_balance_tracked(self) -> bool:
        return self.leave_type in BALANCE_TRACKED_TYPES

    def __str__(self):
        return f"{self.employee_id}:{self.leave_type}:{self.start_date}..{self.end_date}:{self.status}"


class LeaveBalance(models.Model):
    employee = models.ForeignKey(
        "accounts.Employee",
        on_delete=models.CASCADE,
        related_name="leave_balances",
    )
    leave_type = models.CharField(max_length=20, choices=LeaveType.choices)
    year = models.PositiveSmallIntegerField()
    total_days = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    used_days = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    remaining_days = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["year", "leave_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "leave_type", "year"],
                name="leave_balance_unique_employee_type_year",
            ),
        ]

    def __str__(self):
        return f"{self.employee_id}:{self.leave_type}:{self.year} {self.remaining_days}/{self.total_days}"
