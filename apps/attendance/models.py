from django.core.validators import MinValueValidator
from django.db import models


class Attendance(models.Model):
    class Status(models.TextChoices):
        PRESENT = "PRESENT", "Present"
        ABSENT = "ABSENT", "Absent"
        ON_LEAVE = "ON_LEAVE", "On leave"
        HALF_DAY = "HALF_DAY", "Half day"

    employee = models.ForeignKey(
        "accounts.Employee",
        on_delete=models.CASCADE,
        related_name="attendances",
    )
    date = models.DateField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PRESENT)
    currently_checked_in = models.BooleanField(default=False)
    check_in = models.DateTimeField(null=True, blank=True)
    check_out = models.DateTimeField(null=True, blank=True)
    working_hours = models.DecimalField(
        max_digits=5, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "employee_id"]
        indexes = [
            models.Index(fields=["date"], name="attendance_date_idx"),
            models.Index(fields=["status"], name="attendance_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["employee", "date"], name="attendance_unique_employee_date"),
        ]

    def __str__(self):
        return f"{self.employee_id} {self.date} {self.status}"


class AttendanceSession(models.Model):
    attendance = models.ForeignKey(
        Attendance,
        on_delete=models.CASCADE,
        related_name="sessions",
    )
    check_in = models.DateTimeField()
    check_out = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["check_in", "id"]

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    def __str__(self):
        return f"{self.attendance_id} {self.check_in} - {self.check_out or '...'}"
