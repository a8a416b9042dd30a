"""
Tests for the valuation engine: reference scenarios, structural properties,
validation and recommendations.
"""

import itertools
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from restaurant_valuation import (
    MARKET_MULTIPLES,
    TERMINAL_GROWTH_RATE,
    BusinessModel,
    OwnerDependency,
    Polarity,
    PremisesType,
    Priority,
    ProcessDocumentation,
    ValidationError,
    ValuationInput,
    calculate_valuation,
    default_market_multiple,
)
from restaurant_valuation.models import ValuationResult


def scenario_a(**overrides) -> ValuationInput:
    inputs = ValuationInput(
        monthly_revenue=50000,
        net_margin_percent=15,
        annual_growth_percent=10,
        discount_rate_percent=18,
        business_model="hybrid",
        market_multiple=6,
        extraordinary_expenses=0,
        operating_years=3,
        owner_dependency="partial",
        process_documentation="partial",
        premises_type="leased",
        primary_channel_concentration_percent=0,
    )
    return replace(inputs, **overrides)


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------


def test_scenario_a_baseline():
    result = calculate_valuation(scenario_a(), base_year=2026)

    assert isinstance(result, ValuationResult)
    assert result.annual_revenue == Decimal("600000")
    assert result.annual_profit == Decimal("90000")
    assert result.adjustment_multiplier == Decimal("0.95")
    assert result.multiple_valuation == Decimal("513000")
    assert result.quality_score == Decimal("45")
    assert len(result.adjustment_factors) == 5
    assert result.recommendations == []
    assert result.multiple_range_min == Decimal("4.5")
    assert result.multiple_range_max == Decimal("8")


def test_scenario_b_strong_business():
    inputs = scenario_a(
        owner_dependency=OwnerDependency.LOW,
        process_documentation=ProcessDocumentation.FULL,
        premises_type=PremisesType.OWNED,
        operating_years=6,
        net_margin_percent=18,
    )
    result = calculate_valuation(inputs, base_year=2026)

    impacts = [f.impact for f in result.adjustment_factors]
    assert impacts == [Decimal("0.05"), Decimal("0.10"), Decimal("0.15"), Decimal("0.10"), Decimal("0.15")]
    assert result.adjustment_multiplier == Decimal("1.55")
    assert result.quality_score == Decimal("100")
    assert all(f.polarity is Polarity.POSITIVE for f in result.adjustment_factors)


def test_scenario_c_zero_revenue_fails():
    with pytest.raises(ValidationError, match="non-positive revenue"):
        calculate_valuation(scenario_a(monthly_revenue=0))


def test_scenario_d_channel_concentration():
    inputs = scenario_a(primary_channel_concentration_percent=85, primary_channel_name="iFood")
    result = calculate_valuation(inputs, base_year=2026)

    assert len(result.adjustment_factors) == 6
    concentration = result.adjustment_factors[-1]
    assert concentration.impact == Decimal("-0.10")
    assert concentration.polarity is Polarity.NEGATIVE
    assert "85% of sales come from iFood" in concentration.description
    assert result.adjustment_multiplier == Decimal("0.85")
    assert result.quality_score == Decimal("35")

    assert len(result.recommendations) == 1
    assert result.recommendations[0].priority is Priority.MEDIUM
    assert "iFood" in result.recommendations[0].text


def test_concentration_at_threshold_is_not_penalized():
    result = calculate_valuation(scenario_a(primary_channel_concentration_percent=70))
    assert len(result.adjustment_factors) == 5


def test_missing_concentration_is_not_penalized():
    result = calculate_valuation(scenario_a(primary_channel_concentration_percent=None))
    assert len(result.adjustment_factors) == 5


# ---------------------------------------------------------------------------
# DCF mechanics
# ---------------------------------------------------------------------------


def test_projection_years_and_values():
    result = calculate_valuation(scenario_a(), base_year=2026)

    assert [p.year for p in result.yearly_projections] == [2027, 2028, 2029, 2030, 2031]
    first = result.yearly_projections[0]
    assert first.revenue == Decimal("660000")
    assert first.profit == Decimal("99000")
    assert first.present_value == Decimal("99000") / Decimal("1.18")

    assert result.total_present_value_of_projections == sum(p.present_value for p in result.yearly_projections)


def test_terminal_value_gordon_growth():
    result = calculate_valuation(scenario_a())

    last_year_profit = Decimal("90000") * Decimal("1.1") ** 5
    expected = last_year_profit * (1 + TERMINAL_GROWTH_RATE) / (Decimal("0.18") - TERMINAL_GROWTH_RATE)
    assert result.terminal_value == expected
    assert result.terminal_value_present_value == expected / Decimal("1.18") ** 5


def test_enterprise_value_subtracts_extraordinary_expenses():
    base = calculate_valuation(scenario_a())
    with_debt = calculate_valuation(scenario_a(extraordinary_expenses=100000))

    assert float(base.enterprise_value - with_debt.enterprise_value) == pytest.approx(95000.0)
    assert with_debt.multiple_valuation == base.multiple_valuation
    assert with_debt.dcf_valuation == with_debt.enterprise_value


def test_negative_margin_produces_negative_values():
    result = calculate_valuation(scenario_a(net_margin_percent=-5))
    assert result.multiple_valuation < 0
    assert result.enterprise_value < 0


def test_default_projection_year_is_current_year():
    result = calculate_valuation(scenario_a())
    assert result.yearly_projections[0].year == date.today().year + 1


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def test_multiple_method_scales_with_revenue():
    base = calculate_valuation(scenario_a())
    doubled = calculate_valuation(scenario_a(monthly_revenue=100000))
    assert doubled.multiple_valuation == base.multiple_valuation * 2


def test_same_multiplier_applied_to_both_methods():
    inputs = scenario_a(extraordinary_expenses=25000, owner_dependency="high", premises_type="owned")
    result = calculate_valuation(inputs)

    dcf_base = result.total_present_value_of_projections + result.terminal_value_present_value - Decimal("25000")
    dcf_ratio = result.enterprise_value / dcf_base
    multiple_ratio = result.multiple_valuation / (result.annual_profit * inputs.market_multiple)
    assert float(dcf_ratio) == pytest.approx(float(multiple_ratio), rel=1e-12)
    assert float(dcf_ratio) == pytest.approx(float(result.adjustment_multiplier), rel=1e-12)


def test_average_is_exact_blend():
    result = calculate_valuation(scenario_a(net_margin_percent=12.3, annual_growth_percent=7.5))
    assert result.average_valuation == (result.enterprise_value + result.multiple_valuation) / 2


@pytest.mark.parametrize("growth", [0.5, 10, 35])
def test_projection_revenue_increases_with_growth(growth):
    result = calculate_valuation(scenario_a(annual_growth_percent=growth))
    revenues = [p.revenue for p in result.yearly_projections]
    assert len(revenues) == 5
    assert all(later > earlier for earlier, later in zip(revenues, revenues[1:]))


def test_zero_growth_keeps_revenue_flat():
    result = calculate_valuation(scenario_a(annual_growth_percent=0))
    assert {p.revenue for p in result.yearly_projections} == {Decimal("600000")}


def test_factor_sum_and_score_bounds_across_combinations():
    combos = itertools.product(
        list(OwnerDependency),
        list(ProcessDocumentation),
        list(PremisesType),
        [Decimal("0.5"), Decimal("3"), Decimal("12")],
        [Decimal("-20"), Decimal("12"), Decimal("40")],
        [None, Decimal("95")],
    )
    for owner, docs, premises, years, margin, concentration in combos:
        inputs = scenario_a(
            owner_dependency=owner,
            process_documentation=docs,
            premises_type=premises,
            operating_years=years,
            net_margin_percent=margin,
            primary_channel_concentration_percent=concentration,
        )
        result = calculate_valuation(inputs)

        assert 0 <= result.quality_score <= 100
        assert len(result.adjustment_factors) == (6 if concentration is not None else 5)
        total = sum(f.impact for f in result.adjustment_factors)
        assert total == result.adjustment_multiplier - 1


# ---------------------------------------------------------------------------
# Adjustment factor thresholds
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "years, expected",
    [(0, Decimal("-0.15")), (1.99, Decimal("-0.15")), (2, Decimal("0")), (4.9, Decimal("0")), (5, Decimal("0.10"))],
)
def test_operating_time_thresholds(years, expected):
    result = calculate_valuation(scenario_a(operating_years=years))
    assert result.adjustment_factors[3].impact == expected


@pytest.mark.parametrize(
    "margin, expected",
    [(9.9, Decimal("-0.10")), (10, Decimal("0")), (15, Decimal("0")), (15.1, Decimal("0.15"))],
)
def test_margin_benchmark_thresholds(margin, expected):
    result = calculate_valuation(scenario_a(net_margin_percent=margin))
    assert result.adjustment_factors[4].impact == expected


def test_factor_order_is_stable():
    result = calculate_valuation(scenario_a(primary_channel_concentration_percent=90))
    names = [f.name for f in result.adjustment_factors]
    assert names == [
        "Partial owner dependency",
        "Partially documented processes",
        "Leased premises",
        "Intermediate operating time",
        "Margin within market average",
        "High channel dependency",
    ]


def test_worst_case_score_is_clamped_to_zero():
    inputs = scenario_a(
        owner_dependency="high",
        process_documentation="none",
        premises_type="short_term_lease",
        operating_years=1,
        net_margin_percent=5,
        primary_channel_concentration_percent=85,
    )
    result = calculate_valuation(inputs)

    assert result.adjustment_multiplier == Decimal("0.30")
    assert result.quality_score == 0


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def test_all_recommendations_in_priority_order():
    inputs = scenario_a(
        owner_dependency="high",
        process_documentation="none",
        premises_type="short_term_lease",
        net_margin_percent=5,
        primary_channel_concentration_percent=85,
        primary_channel_name="iFood",
    )
    result = calculate_valuation(inputs)
    recs = result.recommendations

    assert [r.priority for r in recs] == [
        Priority.HIGH,
        Priority.HIGH,
        Priority.MEDIUM,
        Priority.MEDIUM,
        Priority.MEDIUM,
    ]
    average = result.average_valuation
    assert [r.potential_impact for r in recs] == [
        average * Decimal("0.05"),
        average * Decimal("0.15"),
        average * Decimal("0.10"),
        average * Decimal("0.10"),
        average * Decimal("0.10"),
    ]
    assert recs[0].potential_impact_description.startswith("Each 1% of extra margin")
    assert "R$" in recs[1].potential_impact_description
    assert "iFood" in recs[3].text


def test_channel_recommendation_without_name():
    result = calculate_valuation(scenario_a(primary_channel_concentration_percent=99))
    assert "your main sales channel" in result.recommendations[0].text


# ---------------------------------------------------------------------------
# Validation & input normalisation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("rate", [3, 2.5, 0, -1])
def test_discount_rate_must_exceed_terminal_growth(rate):
    with pytest.raises(ValidationError, match="discount rate must exceed terminal growth rate"):
        calculate_valuation(scenario_a(discount_rate_percent=rate))


def test_negative_revenue_fails():
    with pytest.raises(ValidationError):
        calculate_valuation(scenario_a(monthly_revenue=-10))


def test_validation_error_is_a_value_error():
    assert issubclass(ValidationError, ValueError)


def test_float_inputs_normalised_to_decimal():
    inputs = scenario_a(net_margin_percent=0.15 * 100, market_multiple=5.5)
    assert inputs.market_multiple == Decimal("5.5")
    assert isinstance(inputs.net_margin_percent, Decimal)


def test_string_enums_normalised():
    inputs = scenario_a()
    assert inputs.business_model is BusinessModel.HYBRID
    assert inputs.owner_dependency is OwnerDependency.PARTIAL
    assert inputs.process_documentation is ProcessDocumentation.PARTIAL
    assert inputs.premises_type is PremisesType.LEASED


@pytest.mark.parametrize(
    "field, value",
    [
        ("business_model", "food_truck"),
        ("owner_dependency", "sometimes"),
        ("process_documentation", None),
        ("premises_type", "rented"),
    ],
)
def test_invalid_enum_rejected(field, value):
    with pytest.raises(ValidationError, match=field):
        scenario_a(**{field: value})


@pytest.mark.parametrize("value", ["abc", None, float("nan"), float("inf"), True])
def test_non_numeric_rejected(value):
    with pytest.raises(ValidationError, match="monthly_revenue"):
        scenario_a(monthly_revenue=value)


def test_default_market_multiples():
    assert default_market_multiple("delivery") == Decimal("4")
    assert default_market_multiple(BusinessModel.DINING_ROOM) == Decimal("5.5")
    assert default_market_multiple("hybrid") == Decimal("6")
    assert default_market_multiple("franchise") == Decimal("8")
    assert MARKET_MULTIPLES[BusinessModel.FRANCHISE].minimum == Decimal("6")
    assert MARKET_MULTIPLES[BusinessModel.DELIVERY].maximum == Decimal("5")


def test_result_as_dict_flattens_enums():
    data = calculate_valuation(scenario_a(owner_dependency="high")).as_dict()

    assert data["adjustment_factors"][0]["polarity"] == "negative"
    assert data["recommendations"][0]["priority"] == "high"
    assert len(data["yearly_projections"]) == 5
    assert data["dcf_valuation"] == data["enterprise_value"]
