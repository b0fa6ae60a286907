import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Attendance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PRESENT", "Present"),
                            ("ABSENT", "Absent"),
                            ("ON_LEAVE", "On leave"),
                            ("HALF_DAY", "Half day"),
                        ],
                        default="PRESENT",
                        max_length=20,
                    ),
                ),
                ("currently_checked_in", models.BooleanField(default=False)),
                ("check_in", models.DateTimeField(blank=True, null=True)),
                ("check_out", models.DateTimeField(blank=True, null=True)),
                (
                    "working_hours",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("remarks", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendances",
                        to="accounts.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "employee_id"],
                "indexes": [
                    models.Index(fields=["date"], name="attendance_date_idx"),
                    models.Index(fields=["status"], name="attendance_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("employee", "date"), name="attendance_unique_employee_date")
                ],
            },
        ),
        migrations.CreateModel(
            name="AttendanceSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("check_in", models.DateTimeField()),
                ("check_out", models.DateTimeField(blank=True, null=True)),
                (
                    "attendance",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="attendance.attendance",
                    ),
                ),
            ],
            options={
                "ordering": ["check_in", "id"],
            },
        ),
    ]
