from decimal import Decimal

import pytest

from apps.payroll.calculations import (
    FIXED_AMOUNT,
    PERCENTAGE_OF_BASIC,
    PERCENTAGE_OF_WAGE,
    ComponentSpec,
    calculate_provident_fund,
    components_total,
    is_basic,
    prorate,
    resolve_all_components,
    resolve_component_amount,
    round_money,
    validate_components_total,
)


def component(name, computation_type, value, order=0):
    return ComponentSpec(name=name, computation_type=computation_type, value=Decimal(value), order=order)


def test_round_money_rounds_half_up():
    assert round_money(Decimal("10.005")) == Decimal("10.01")
    assert round_money(Decimal("10.004")) == Decimal("10.00")
    assert round_money(Decimal("-1.005")) == Decimal("-1.01")


def test_resolve_amount_for_each_computation_type():
    wage = Decimal("50000")
    assert resolve_component_amount(component("Basic", PERCENTAGE_OF_WAGE, "50"), wage) == Decimal("25000.00")
    assert resolve_component_amount(
        component("HRA", PERCENTAGE_OF_BASIC, "50"), wage, basic_amount=Decimal("25000")
    ) == Decimal("12500.00")
    assert resolve_component_amount(component("Conveyance", FIXED_AMOUNT, "1600"), wage) == Decimal("1600.00")


def test_unknown_computation_type_resolves_to_zero():
    assert resolve_component_amount(component("Odd", "BONUS", "10"), Decimal("1000")) == Decimal("0.00")


def test_resolve_all_follows_order_not_input_position():
    resolved = resolve_all_components(
        [
            component("HRA", PERCENTAGE_OF_BASIC, "40", order=1),
            component("Basic", PERCENTAGE_OF_WAGE, "50", order=0),
        ],
        Decimal("30000"),
    )

    assert [item.name for item in resolved] == ["Basic", "HRA"]
    assert resolved[1].amount == Decimal("6000.00")


def test_percentage_of_basic_before_basic_resolves_against_zero():
    resolved = resolve_all_components(
        [
            component("HRA", PERCENTAGE_OF_BASIC, "50", order=0),
            component("Basic", PERCENTAGE_OF_WAGE, "50", order=1),
        ],
        Decimal("50000"),
    )

    assert resolved[0].amount == Decimal("0.00")
    assert resolved[1].amount == Decimal("25000.00")


def test_only_exact_basic_name_seeds_basic_amount():
    assert is_basic("Basic")
    assert not is_basic("basic")
    assert not is_basic("Basic Pay")

    resolved = resolve_all_components(
        [
            component("Basic Pay", PERCENTAGE_OF_WAGE, "50", order=0),
            component("HRA", PERCENTAGE_OF_BASIC, "50", order=1),
        ],
        Decimal("50000"),
    )
    assert resolved[1].amount == Decimal("0.00")


def test_components_total_validation():
    resolved = resolve_all_components(
        [
            component("Basic", PERCENTAGE_OF_WAGE, "60", order=0),
            component("HRA", PERCENTAGE_OF_WAGE, "40", order=1),
        ],
        Decimal("10000"),
    )
    assert components_total(resolved) == Decimal("10000.00")
    assert validate_components_total(resolved, Decimal("10000"))

    over = resolved + resolve_all_components([component("Bonus", FIXED_AMOUNT, "0.01")], Decimal("10000"))
    assert not validate_components_total(over, Decimal("10000"))


def test_empty_component_list_is_valid():
    assert components_total([]) == Decimal("0.00")
    assert validate_components_total([], Decimal("0"))


def test_provident_fund_is_rate_of_basic():
    assert calculate_provident_fund(Decimal("25000"), Decimal("12")) == Decimal("3000.00")
    assert calculate_provident_fund(Decimal("12345.67"), Decimal("12")) == Decimal("1481.48")
    assert calculate_provident_fund(Decimal("25000"), Decimal("0")) == Decimal("0.00")


def test_prorate_scales_by_worked_over_working_days():
    assert prorate(Decimal("25000"), 26, 13) == Decimal("12500.00")
    assert prorate(Decimal("1000"), 3, 1) == Decimal("333.33")
    assert prorate(Decimal("1000"), 26, 0) == Decimal("0.00")


def test_prorate_full_attendance_returns_amount_unchanged():
    assert prorate(Decimal("12345.67"), 27, 27) == Decimal("12345.67")


def test_prorate_accepts_fractional_worked_days():
    assert prorate(Decimal("2600"), 26, Decimal("13.5")) == Decimal("1350.00")


@pytest.mark.parametrize("working_days", [0, -1])
def test_prorate_rejects_non_positive_working_days(working_days):
    with pytest.raises(ValueError):
        prorate(Decimal("1000"), working_days, 1)
