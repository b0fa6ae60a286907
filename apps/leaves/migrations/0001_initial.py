import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


LEAVE_TYPE_CHOICES = [
    ("PAID_TIME_OFF", "Paid time off"),
    ("SICK_LEAVE", "Sick leave"),
    ("UNPAID_LEAVE", "Unpaid leave"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Leave",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("leave_type", models.CharField(choices=LEAVE_TYPE_CHOICES, max_length=20)),
                ("subject", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "total_days",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("APPROVED", "Approved"),
                            ("REJECTED", "Rejected"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="leaves_reviewed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="leaves",
                        to="accounts.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["employee", "status"], name="leave_employee_status_idx"),
                    models.Index(fields=["start_date", "end_date"], name="leave_dates_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="LeaveBalance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("leave_type", models.CharField(choices=LEAVE_TYPE_CHOICES, max_length=20)),
                ("year", models.PositiveSmallIntegerField()),
                ("total_days", models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ("used_days", models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ("remaining_days", models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="leave_balances",
                        to="accounts.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["year", "leave_type"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("employee", "leave_type", "year"),
                        name="leave_balance_unique_employee_type_year",
                    )
                ],
            },
        ),
    ]
