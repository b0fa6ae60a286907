from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


def _default_pf_rate():
    return Decimal(settings.PAYROLL_DEFAULT_PF_RATE)


def _default_professional_tax():
    return Decimal(settings.PAYROLL_DEFAULT_PROFESSIONAL_TAX)


class SalaryStructure(models.Model):
    employee = models.OneToOneField(
        "accounts.Employee",
        on_delete=models.CASCADE,
        related_name="salary_structure",
    )
    wage = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    pf_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=_default_pf_rate, validators=[MinValueValidator(0)]
    )
    professional_tax = models.DecimalField(
        max_digits=10, decimal_places=2, default=_default_professional_tax, validators=[MinValueValidator(0)]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.employee_id}:{self.wage}"


class SalaryComponent(models.Model):
    class ComputationType(models.TextChoices):
        PERCENTAGE_OF_WAGE = "PERCENTAGE_OF_WAGE", "Percentage of wage"
        PERCENTAGE_OF_BASIC = "PERCENTAGE_OF_BASIC", "Percentage of basic"
        FIXED_AMOUNT = "FIXED_AMOUNT", "Fixed amount"

    structure = models.ForeignKey(
        SalaryStructure,
        on_delete=models.CASCADE,
        related_name="components",
    )
    name = models.CharField(max_length=100)
    computation_type = models.CharField(max_length=30, choices=ComputationType.choices)
    value = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self):
        return f"{self.name}:{self.amount}"


class Payslip(models.Model):
    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        DONE = "DONE", "Done"
        CANCELLED = "CANCELLED", "Cancelled"

    employee = models.ForeignKey(
        "accounts.Employee",
        on_delete=models.CASCADE,
        related_name="payslips",
    )
    pay_period = models.CharField(max_length=20)
    period_start = models.DateField()
    period_end = models.DateField()
    working_days = models.PositiveSmallIntegerField()
    worked_days = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    paid_leave_days = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    unpaid_leave_days = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    basic_wage = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    gross_wage = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_deductions = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    net_wage = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    employee_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    validated_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-period_start", "employee_id"]
        indexes = [
            models.Index(fields=["status"], name="payslip_status_idx"),
            models.Index(fields=["period_start", "period_end"], name="payslip_period_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "period_start", "period_end"],
                name="payroll_unique_payslip_employee_period",
            ),
        ]

    def __str__(self):
        return f"{self.employee_id}:{self.pay_period}:{self.status}"


class PayslipComponent(models.Model):
    payslip = models.ForeignKey(
        Payslip,
        on_delete=models.CASCADE,
        related_name="components",
    )
    name = models.CharField(max_length=100)
    rate_percent = models.DecimalField(max_digits=6, decimal_places=2, default=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    is_deduction = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self):
        sign = "-" if self.is_deduction else "+"
        return f"{self.name}:{sign}{self.amount}"
