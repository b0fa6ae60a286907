import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import apps.payroll.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SalaryStructure",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "wage",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "pf_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=apps.payroll.models._default_pf_rate,
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "professional_tax",
                    models.DecimalField(
                        decimal_places=2,
                        default=apps.payroll.models._default_professional_tax,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="salary_structure",
                        to="accounts.employee",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="SalaryComponent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                (
                    "computation_type",
                    models.CharField(
                        choices=[
                            ("PERCENTAGE_OF_WAGE", "Percentage of wage"),
                            ("PERCENTAGE_OF_BASIC", "Percentage of basic"),
                            ("FIXED_AMOUNT", "Fixed amount"),
                        ],
                        max_length=30,
                    ),
                ),
                (
                    "value",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("order", models.PositiveIntegerField(default=0)),
                (
                    "structure",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="components",
                        to="payroll.salarystructure",
                    ),
                ),
            ],
            options={
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Payslip",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("pay_period", models.CharField(max_length=20)),
                ("period_start", models.DateField()),
                ("period_end", models.DateField()),
                ("working_days", models.PositiveSmallIntegerField()),
                ("worked_days", models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ("paid_leave_days", models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ("unpaid_leave_days", models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ("basic_wage", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("gross_wage", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("total_deductions", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("net_wage", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("employee_cost", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                (
                    "status",
                    models.CharField(
                        choices=[("DRAFT", "Draft"), ("DONE", "Done"), ("CANCELLED", "Cancelled")],
                        default="DRAFT",
                        max_length=20,
                    ),
                ),
                ("validated_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payslips",
                        to="accounts.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["-period_start", "employee_id"],
                "indexes": [
                    models.Index(fields=["status"], name="payslip_status_idx"),
                    models.Index(fields=["period_start", "period_end"], name="payslip_period_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("employee", "period_start", "period_end"),
                        name="payroll_unique_payslip_employee_period",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="PayslipComponent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("rate_percent", models.DecimalField(decimal_places=2, default=100, max_digits=6)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("is_deduction", models.BooleanField(default=False)),
                ("order", models.PositiveIntegerField(default=0)),
                (
                    "payslip",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="components",
                        to="payroll.payslip",
                    ),
                ),
            ],
            options={
                "ordering": ["order", "id"],
            },
        ),
    ]
