from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from functools import partial

from django.conf import settings
from django.db import IntegrityError, transaction

from accounts.models import Employee
from common.exceptions import WorkZenError
from common.periods import month_date_range, pay_period_label, working_days_in_month

from .aggregation import aggregate_period
from .calculations import (
    PROFESSIONAL_TAX_LINE,
    PROVIDENT_FUND_LINE,
    ComponentSpec,
    ResolvedComponent,
    ZERO,
    calculate_provident_fund,
    is_basic,
    prorate,
    resolve_all_components,
    round_money,
    validate_components_total,
)
from .exceptions import (
    ComponentsExceedWage,
    DuplicatePayslip,
    EmployeeNotFound,
    MissingSalaryStructure,
    NoEligibleEmployees,
)
from .models import Payslip, PayslipComponent, SalaryComponent, SalaryStructure
from .notifications import notify_salary_structure_updated

logger = logging.getLogger(__name__)

PROVIDENT_FUND_ORDER = 100
PROFESSIONAL_TAX_ORDER = 101


@dataclass(frozen=True)
class PayrunFailure:
    employee_id: int
    name: str
    employee_code: str
    error_code: str
    reason: str

    def as_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "code": self.employee_code,
            "error": self.reason,
            "error_code": self.error_code,
        }


@dataclass(frozen=True)
class PayrunResult:
    year: int
    month_index: int
    working_days: int
    succeeded: list[Payslip] = field(default_factory=list)
    failed: list[PayrunFailure] = field(default_factory=list)


def rest_weekday() -> int:
    return int(getattr(settings, "PAYROLL_WEEKLY_REST_DAY", 6))


class SalaryStructureService:
    @staticmethod
    def resolve(*, wage: Decimal, components: list[dict]) -> list[ResolvedComponent]:
        specs = [
            ComponentSpec(
                name=item["name"],
                computation_type=item["computation_type"],
                value=Decimal(item["value"]),
                order=item.get("order", index),
            )
            for index, item in enumerate(components)
        ]
        resolved = resolve_all_components(specs, wage)
        if not validate_components_total(resolved, wage):
            raise ComponentsExceedWage()
        return resolved

    @classmethod
    def save_structure(
        cls,
        *,
        employee: Employee,
        wage: Decimal,
        components: list[dict],
        pf_rate: Decimal | None = None,
        professional_tax: Decimal | None = None,
    ) -> SalaryStructure:
        resolved = cls.resolve(wage=wage, components=components)

        defaults = {
            "wage": wage,
            "pf_rate": pf_rate if pf_rate is not None else Decimal(settings.PAYROLL_DEFAULT_PF_RATE),
            "professional_tax": (
                professional_tax
                if professional_tax is not None
                else Decimal(settings.PAYROLL_DEFAULT_PROFESSIONAL_TAX)
            ),
        }

        with transaction.atomic():
            structure, _ = SalaryStructure.objects.update_or_create(employee=employee, defaults=defaults)
            structure.components.all().delete()
            SalaryComponent.objects.bulk_create(
                [
                    SalaryComponent(
                        structure=structure,
                        name=item.name,
                        computation_type=item.computation_type,
                        value=item.value,
                        amount=item.amount,
                        order=index,
                    )
                    for index, item in enumerate(resolved)
                ]
            )
            transaction.on_commit(partial(notify_salary_structure_updated, structure.id))

        logger.info("Salary structure saved for employee=%s wage=%s", employee.id, wage)
        return structure


class PayrollService:
    @staticmethod
    def _build_lines(structure: SalaryStructure, working_days: int, worked_days: Decimal):
        resolved = resolve_all_components(structure.components.all(), structure.wage)

        earnings = []
        basic_wage = ZERO
        for item in resolved:
            amount = prorate(item.amount, working_days, worked_days)
            if is_basic(item.name):
                basic_wage = amount
            earnings.append(
                PayslipComponent(
                    name=item.name,
                    rate_percent=Decimal("100"),
                    amount=amount,
                    is_deduction=False,
                    order=item.order,
                )
            )

        gross_wage = round_money(sum((line.amount for line in earnings), ZERO))
        provident_fund = calculate_provident_fund(basic_wage, structure.pf_rate)
        professional_tax = round_money(structure.professional_tax) if worked_days > 0 else ZERO

        deductions = [
            PayslipComponent(
                name=PROVIDENT_FUND_LINE,
                rate_percent=structure.pf_rate,
                amount=provident_fund,
                is_deduction=True,
                order=PROVIDENT_FUND_ORDER,
            ),
            PayslipComponent(
                name=PROFESSIONAL_TAX_LINE,
                rate_percent=Decimal("100"),
                amount=professional_tax,
                is_deduction=True,
                order=PROFESSIONAL_TAX_ORDER,
            ),
        ]
        total_deductions = round_money(provident_fund + professional_tax)
        return earnings + deductions, basic_wage, gross_wage, total_deductions

    @classmethod
    def generate_payslip(
        cls,
        *,
        employee: Employee,
        period_start: date,
        period_end: date,
        working_days: int,
        pay_period: str = "",
    ) -> Payslip:
        structure = SalaryStructure.objects.filter(employee=employee).first()
        if structure is None:
            raise MissingSalaryStructure(employee_id=employee.id)

        if Payslip.objects.filter(employee=employee, period_start=period_start, period_end=period_end).exists():
            raise DuplicatePayslip(employee_id=employee.id)

        totals = aggregate_period(employee.id, period_start, period_end)
        lines, basic_wage, gross_wage, total_deductions = cls._build_lines(
            structure, working_days, totals.worked_days
        )

        try:
            with transaction.atomic():
                payslip = Payslip.objects.create(
                    employee=employee,
                    pay_period=pay_period,
                    period_start=period_start,
                    period_end=period_end,
                    working_days=working_days,
                    worked_days=totals.worked_days,
                    paid_leave_days=totals.paid_leave_days,
                    unpaid_leave_days=totals.unpaid_leave_days,
                    basic_wage=basic_wage,
                    gross_wage=gross_wage,
                    total_deductions=total_deductions,
                    net_wage=round_money(gross_wage - total_deductions),
                    employee_cost=gross_wage,
                    status=Payslip.Status.DRAFT,
                )
                for line in lines:
                    line.payslip = payslip
                PayslipComponent.objects.bulk_create(lines)
        except IntegrityError as exc:
            # Lost a race against a concurrent generation for the same period.
            raise DuplicatePayslip(employee_id=employee.id) from exc

        return payslip

    @classmethod
    def generate_for_month(cls, *, employee: Employee, year: int, month_index: int) -> Payslip:
        period = month_date_range(year, month_index)
        return cls.generate_payslip(
            employee=employee,
            period_start=period.start,
            period_end=period.end,
            working_days=working_days_in_month(year, month_index, rest_weekday=rest_weekday()),
            pay_period=pay_period_label(year, month_index),
        )

    @classmethod
    def generate_for_employee_id(cls, *, company_id, employee_id: int, year: int, month_index: int) -> Payslip:
        employee = Employee.objects.filter(id=employee_id, company_id=company_id).first()
        if employee is None:
            raise EmployeeNotFound()
        return cls.generate_for_month(employee=employee, year=year, month_index=month_index)

    @classmethod
    def generate_payrun(cls, *, company_id, year: int, month_index: int) -> PayrunResult:
        employees = list(
            Employee.objects.filter(company_id=company_id, salary_structure__isnull=False).order_by("id")
        )
        if not employees:
            raise NoEligibleEmployees()

        period = month_date_range(year, month_index)
        working_days = working_days_in_month(year, month_index, rest_weekday=rest_weekday())
        label = pay_period_label(year, month_index)
        result = PayrunResult(year=year, month_index=month_index, working_days=working_days)

        for employee in employees:
            try:
                payslip = cls.generate_payslip(
                    employee=employee,
                    period_start=period.start,
                    period_end=period.end,
                    working_days=working_days,
                    pay_period=label,
                )
            except WorkZenError as exc:
                logger.warning("Payrun %s skipped employee=%s: %s", label, employee.id, exc.message)
                result.failed.append(
                    PayrunFailure(
                        employee_id=employee.id,
                        name=employee.full_name,
                        employee_code=employee.employee_code,
                        error_code=exc.code,
                        reason=exc.message,
                    )
                )
            else:
                result.succeeded.append(payslip)

        logger.info(
            "Payrun %s for company=%s: %s generated, %s failed",
            label,
            company_id,
            len(result.succeeded),
            len(result.failed),
        )
        return result
