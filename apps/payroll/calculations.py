"""
Salary component calculator.

Pure functions over ``Decimal``; nothing here touches the database. Inputs
are any objects exposing ``name``, ``computation_type``, ``value`` and
``order`` (model instances or ``ComponentSpec``).
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

PERCENTAGE_OF_WAGE = "PERCENTAGE_OF_WAGE"
PERCENTAGE_OF_BASIC = "PERCENTAGE_OF_BASIC"
FIXED_AMOUNT = "FIXED_AMOUNT"

BASIC_COMPONENT_NAME = "Basic"
PROVIDENT_FUND_LINE = "Provident Fund"
PROFESSIONAL_TAX_LINE = "Professional Tax"


def round_money(value) -> Decimal:
    """Round half away from zero to 2 decimal places."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ComponentSpec:
    name: str
    computation_type: str
    value: Decimal
    order: int = 0


@dataclass(frozen=True)
class ResolvedComponent:
    name: str
    computation_type: str
    value: Decimal
    order: int
    amount: Decimal


def is_basic(name: str) -> bool:
    return name == BASIC_COMPONENT_NAME


def resolve_component_amount(component, wage, basic_amount=ZERO) -> Decimal:
    value = Decimal(component.value)
    if component.computation_type == PERCENTAGE_OF_WAGE:
        return round_money(Decimal(wage) * value / HUNDRED)
    if component.computation_type == PERCENTAGE_OF_BASIC:
        return round_money(Decimal(basic_amount) * value / HUNDRED)
    if component.computation_type == FIXED_AMOUNT:
        return round_money(value)
    return ZERO


def resolve_all_components(components: Iterable, wage) -> list[ResolvedComponent]:
    """
    Resolve amounts in ``order``.

    The component named exactly "Basic" becomes the base for any
    later PERCENTAGE_OF_BASIC component; one that comes before Basic
    resolves against 0.
    """
    basic_amount = ZERO
    resolved: list[ResolvedComponent] = []

    for component in sorted(components, key=lambda c: c.order):
        amount = resolve_component_amount(component, wage, basic_amount)
        if is_basic(component.name):
            basic_amount = amount
        resolved.append(
            ResolvedComponent(
                name=component.name,
                computation_type=component.computation_type,
                value=Decimal(component.value),
                order=component.order,
                amount=amount,
            )
        )

    return resolved


def components_total(resolved: Iterable[ResolvedComponent]) -> Decimal:
    return round_money(sum((c.amount for c in resolved), ZERO))


def validate_components_total(resolved: Iterable[ResolvedComponent], wage) -> bool:
    return components_total(resolved) <= round_money(wage)


def calculate_provident_fund(basic_wage, pf_rate) -> Decimal:
    return round_money(Decimal(basic_wage) * Decimal(pf_rate) / HUNDRED)


def prorate(full_amount, working_days: int, worked_days) -> Decimal:
    if working_days <= 0:
        raise ValueError("working_days must be positive")
    return round_money(Decimal(full_amount) * Decimal(worked_days) / Decimal(working_days))
