"""
Restaurant Valuation Engine
===========================

This module contains the *pure* restaurant valuation engine:

- No database access
- No HTTP / UI state
- No file reading

It blends two independent estimates of what a restaurant is worth:

- a five-year discounted cash flow (DCF) with a Gordon-growth terminal value
- a market multiple of annual profit, ranged by business model

Both estimates are scaled by one adjustment multiplier derived from
qualitative factors (owner dependency, documented processes, premises,
operating time, margin against the sector benchmark, channel concentration).
The same adjustment total drives a 0-100 quality score.

API surface area (stable):
- `ValuationInput` (everything the calculator form collects)
- `ValuationResult` (estimates, projections, factors, score, recommendations)
- `calculate_valuation(inputs)`
- `MARKET_MULTIPLES` / `default_market_multiple(business_model)`

Arithmetic is done with `Decimal` so chained multiplications do not drift
at the cent level.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .formatting import format_currency

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

PROJECTION_YEARS: int = 5
MONTHS_PER_YEAR: int = 12
TERMINAL_GROWTH_RATE: Decimal = Decimal("0.03")
BASE_QUALITY_SCORE: Decimal = Decimal("50")
CHANNEL_CONCENTRATION_THRESHOLD: Decimal = Decimal("70")

# Sector benchmark for restaurant net margin (percent).
MARGIN_BENCHMARK_LOW: Decimal = Decimal("10")
MARGIN_BENCHMARK_HIGH: Decimal = Decimal("15")

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


class ValidationError(ValueError):
    pass


class BusinessModel(str, Enum):
    DELIVERY = "delivery"
    DINING_ROOM = "dining_room"
    HYBRID = "hybrid"
    FRANCHISE = "franchise"


class OwnerDependency(str, Enum):
    HIGH = "high"
    PARTIAL = "partial"
    LOW = "low"


class ProcessDocumentation(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


class PremisesType(str, Enum):
    OWNED = "owned"
    LEASED = "leased"
    SHORT_TERM_LEASE = "short_term_lease"


class Polarity(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class MultipleRange:
    minimum: Decimal
    maximum: Decimal
    default: Decimal


# Multiples of annual profit observed for comparable restaurant transactions.
MARKET_MULTIPLES: Dict[BusinessModel, MultipleRange] = {
    BusinessModel.DELIVERY: MultipleRange(Decimal("3"), Decimal("5"), Decimal("4")),
    BusinessModel.DINING_ROOM: MultipleRange(Decimal("4"), Decimal("7"), Decimal("5.5")),
    BusinessModel.HYBRID: MultipleRange(Decimal("4.5"), Decimal("8"), Decimal("6")),
    BusinessModel.FRANCHISE: MultipleRange(Decimal("6"), Decimal("10"), Decimal("8")),
}


def to_decimal(value: Number, field_name: str = "value") -> Decimal:
    """
    Normalize ints, floats, strings and Decimals to `Decimal`.

    Floats go through `str()` so that 0.15 becomes Decimal("0.15") rather than
    its binary expansion.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be numeric, got {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be numeric, got {value!r}") from None
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    return result


def _to_enum(enum_cls, value: Any, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{field_name} must be one of {{{allowed}}}, got {value!r}") from None


def default_market_multiple(business_model: Union[BusinessModel, str]) -> Decimal:
    model = _to_enum(BusinessModel, business_model, "business_model")
    return MARKET_MULTIPLES[model].default


@dataclass(frozen=True)
class ValuationInput:
    monthly_revenue: Decimal
    net_margin_percent: Decimal
    annual_growth_percent: Decimal
    discount_rate_percent: Decimal
    business_model: BusinessModel
    market_multiple: Decimal
    extraordinary_expenses: Decimal
    operating_years: Decimal
    owner_dependency: OwnerDependency
    process_documentation: ProcessDocumentation
    premises_type: PremisesType

    # Optional, aggregated by the caller from sales data
    primary_channel_concentration_percent: Optional[Decimal] = None
    primary_channel_name: Optional[str] = None

    def __post_init__(self) -> None:
        for name in (
            "monthly_revenue",
            "net_margin_percent",
            "annual_growth_percent",
            "discount_rate_percent",
            "market_multiple",
            "extraordinary_expenses",
            "operating_years",
        ):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))

        if self.primary_channel_concentration_percent is not None:
            object.__setattr__(
                self,
                "primary_channel_concentration_percent",
                to_decimal(self.primary_channel_concentration_percent, "primary_channel_concentration_percent"),
            )

        object.__setattr__(self, "business_model", _to_enum(BusinessModel, self.business_model, "business_model"))
        object.__setattr__(
            self, "owner_dependency", _to_enum(OwnerDependency, self.owner_dependency, "owner_dependency")
        )
        object.__setattr__(
            self,
            "process_documentation",
            _to_enum(ProcessDocumentation, self.process_documentation, "process_documentation"),
        )
        object.__setattr__(self, "premises_type", _to_enum(PremisesType, self.premises_type, "premises_type"))

    @property
    def has_channel_concentration(self) -> bool:
        return (
            self.primary_channel_concentration_percent is not None
            and self.primary_channel_concentration_percent > CHANNEL_CONCENTRATION_THRESHOLD
        )


@dataclass(frozen=True)
class AdjustmentFactor:
    name: str
    impact: Decimal  # signed fraction, e.g. Decimal("-0.15")
    description: str
    polarity: Polarity


@dataclass(frozen=True)
class YearlyProjection:
    year: int
    revenue: Decimal
    profit: Decimal
    present_value: Decimal


@dataclass(frozen=True)
class Recommendation:
    text: str
    potential_impact_description: str
    priority: Priority
    potential_impact: Decimal


@dataclass(frozen=True)
class ValuationResult:
    dcf_valuation: Decimal
    multiple_valuation: Decimal
    average_valuation: Decimal
    yearly_projections: List[YearlyProjection]  # exactly PROJECTION_YEARS entries
    terminal_value: Decimal
    terminal_value_present_value: Decimal
    total_present_value_of_projections: Decimal
    enterprise_value: Decimal
    multiple_range_min: Decimal
    multiple_range_max: Decimal
    adjustment_factors: List[AdjustmentFactor]
    adjustment_multiplier: Decimal
    quality_score: Decimal
    recommendations: List[Recommendation]

    annual_revenue: Decimal
    annual_profit: Decimal

    def as_dict(self) -> Dict[str, Any]:
        """Plain nested dict with enum members flattened to their values."""
        return asdict(self, dict_factory=_enum_safe_dict)


def _enum_safe_dict(items) -> Dict[str, Any]:
    return {key: (value.value if isinstance(value, Enum) else value) for key, value in items}


def calculate_valuation(inputs: ValuationInput, base_year: Optional[int] = None) -> ValuationResult:
    """
    Value a restaurant from a `ValuationInput`.

    `base_year` is the year the projections start from (year 1 is
    `base_year + 1`); it defaults to the current calendar year and only
    affects the labels of `yearly_projections`.

    Raises `ValidationError` when revenue is not positive or when the discount
    rate does not exceed the terminal growth rate.
    """
    _validate_inputs(inputs)

    if base_year is None:
        base_year = date.today().year

    margin = inputs.net_margin_percent / _HUNDRED
    growth_rate = inputs.annual_growth_percent / _HUNDRED
    discount_rate = inputs.discount_rate_percent / _HUNDRED

    annual_revenue = inputs.monthly_revenue * MONTHS_PER_YEAR
    annual_profit = annual_revenue * margin

    projections = _compute_projections(
        annual_revenue=annual_revenue,
        margin=margin,
        growth_rate=growth_rate,
        discount_rate=discount_rate,
        base_year=base_year,
    )
    total_present_value = sum((p.present_value for p in projections), Decimal("0"))

    terminal_value = _compute_terminal_value(
        annual_profit=annual_profit,
        growth_rate=growth_rate,
        discount_rate=discount_rate,
    )
    terminal_value_present_value = terminal_value / (_ONE + discount_rate) ** PROJECTION_YEARS

    adjustment_factors = _compute_adjustment_factors(inputs)
    total_adjustment = sum((f.impact for f in adjustment_factors), Decimal("0"))
    adjustment_multiplier = _ONE + total_adjustment

    enterprise_value = (
        total_present_value + terminal_value_present_value - inputs.extraordinary_expenses
    ) * adjustment_multiplier
    multiple_valuation = annual_profit * inputs.market_multiple * adjustment_multiplier
    average_valuation = (enterprise_value + multiple_valuation) / 2

    quality_score = _compute_quality_score(total_adjustment)
    multiple_range = MARKET_MULTIPLES[inputs.business_model]

    recommendations = _compute_recommendations(inputs, average_valuation)

    logger.debug(
        f"Valuation computed: model={inputs.business_model.value} dcf={enterprise_value:.2f} "
        f"multiple={multiple_valuation:.2f} adjustment={total_adjustment} score={quality_score}"
    )

    return ValuationResult(
        dcf_valuation=enterprise_value,
        multiple_valuation=multiple_valuation,
        average_valuation=average_valuation,
        yearly_projections=projections,
        terminal_value=terminal_value,
        terminal_value_present_value=terminal_value_present_value,
        total_present_value_of_projections=total_present_value,
        enterprise_value=enterprise_value,
        multiple_range_min=multiple_range.minimum,
        multiple_range_max=multiple_range.maximum,
        adjustment_factors=adjustment_factors,
        adjustment_multiplier=adjustment_multiplier,
        quality_score=quality_score,
        recommendations=recommendations,
        annual_revenue=annual_revenue,
        annual_profit=annual_profit,
    )


def _validate_inputs(inputs: ValuationInput) -> None:
    if inputs.monthly_revenue <= 0:
        raise ValidationError("non-positive revenue: monthly_revenue must be > 0")
    if inputs.discount_rate_percent / _HUNDRED <= TERMINAL_GROWTH_RATE:
        raise ValidationError("discount rate must exceed terminal growth rate")


def _compute_projections(
    *,
    annual_revenue: Decimal,
    margin: Decimal,
    growth_rate: Decimal,
    discount_rate: Decimal,
    base_year: int,
) -> List[YearlyProjection]:
    projections: List[YearlyProjection] = []
    for year in range(1, PROJECTION_YEARS + 1):
        revenue = annual_revenue * (_ONE + growth_rate) ** year
        profit = revenue * margin
        present_value = profit / (_ONE + discount_rate) ** year
        projections.append(
            YearlyProjection(year=base_year + year, revenue=revenue, profit=profit, present_value=present_value)
        )
    return projections


def _compute_terminal_value(*, annual_profit: Decimal, growth_rate: Decimal, discount_rate: Decimal) -> Decimal:
    # Gordon growth on the final projected year's profit.
    last_year_profit = annual_profit * (_ONE + growth_rate) ** PROJECTION_YEARS
    return last_year_profit * (_ONE + TERMINAL_GROWTH_RATE) / (discount_rate - TERMINAL_GROWTH_RATE)


def _compute_adjustment_factors(inputs: ValuationInput) -> List[AdjustmentFactor]:
    factors = [
        _owner_dependency_factor(inputs.owner_dependency),
        _process_documentation_factor(inputs.process_documentation),
        _premises_factor(inputs.premises_type),
        _operating_time_factor(inputs.operating_years),
        _margin_factor(inputs.net_margin_percent),
    ]
    if inputs.has_channel_concentration:
        factors.append(
            _channel_concentration_factor(inputs.primary_channel_concentration_percent, inputs.primary_channel_name)
        )
    return factors


def _owner_dependency_factor(owner_dependency: OwnerDependency) -> AdjustmentFactor:
    if owner_dependency is OwnerDependency.HIGH:
        return AdjustmentFactor(
            name="Owner dependency",
            impact=Decimal("-0.15"),
            description="The business relies heavily on the owner to operate, which lowers its market value.",
            polarity=Polarity.NEGATIVE,
        )
    if owner_dependency is OwnerDependency.PARTIAL:
        return AdjustmentFactor(
            name="Partial owner dependency",
            impact=Decimal("-0.05"),
            description="The business relies partly on the owner, which moderately affects its value.",
            polarity=Polarity.NEGATIVE,
        )
    return AdjustmentFactor(
        name="Operational independence",
        impact=Decimal("0.05"),
        description="The business runs independently of the owner, which raises its market value.",
        polarity=Polarity.POSITIVE,
    )


def _process_documentation_factor(documentation: ProcessDocumentation) -> AdjustmentFactor:
    if documentation is ProcessDocumentation.FULL:
        return AdjustmentFactor(
            name="Well documented processes",
            impact=Decimal("0.10"),
            description="Processes are well documented, easing a handover and reducing risk.",
            polarity=Polarity.POSITIVE,
        )
    if documentation is ProcessDocumentation.PARTIAL:
        return AdjustmentFactor(
            name="Partially documented processes",
            impact=Decimal("0"),
            description="Some processes are documented, but there is room for improvement.",
            polarity=Polarity.NEUTRAL,
        )
    return AdjustmentFactor(
        name="Undocumented processes",
        impact=Decimal("-0.10"),
        description="Processes are not documented, which increases risk and reduces value.",
        polarity=Polarity.NEGATIVE,
    )


def _premises_factor(premises_type: PremisesType) -> AdjustmentFactor:
    if premises_type is PremisesType.OWNED:
        return AdjustmentFactor(
            name="Owned premises",
            impact=Decimal("0.15"),
            description="The premises are owned, adding significant value to the business.",
            polarity=Polarity.POSITIVE,
        )
    if premises_type is PremisesType.LEASED:
        return AdjustmentFactor(
            name="Leased premises",
            impact=Decimal("0"),
            description="The premises are leased, which is neutral for the valuation.",
            polarity=Polarity.NEUTRAL,
        )
    return AdjustmentFactor(
        name="Short-term lease",
        impact=Decimal("-0.10"),
        description="The lease is short term, which puts the business at risk.",
        polarity=Polarity.NEGATIVE,
    )


def _operating_time_factor(operating_years: Decimal) -> AdjustmentFactor:
    if operating_years < 2:
        return AdjustmentFactor(
            name="Recent business",
            impact=Decimal("-0.15"),
            description="The business is less than 2 years old, which means higher risk and uncertainty.",
            polarity=Polarity.NEGATIVE,
        )
    if operating_years >= 5:
        return AdjustmentFactor(
            name="Established business",
            impact=Decimal("0.10"),
            description="The business has operated for 5 years or more, demonstrating stability.",
            polarity=Polarity.POSITIVE,
        )
    return AdjustmentFactor(
        name="Intermediate operating time",
        impact=Decimal("0"),
        description="The business has operated for 2 to 5 years, which is neutral for the valuation.",
        polarity=Polarity.NEUTRAL,
    )


def _margin_factor(net_margin_percent: Decimal) -> AdjustmentFactor:
    if net_margin_percent > MARGIN_BENCHMARK_HIGH:
        return AdjustmentFactor(
            name="Margin above market",
            impact=Decimal("0.15"),
            description="Net margin is above the sector average (10-15%), indicating operational efficiency.",
            polarity=Polarity.POSITIVE,
        )
    if net_margin_percent < MARGIN_BENCHMARK_LOW:
        return AdjustmentFactor(
            name="Margin below market",
            impact=Decimal("-0.10"),
            description="Net margin is below the sector average (10-15%), pointing to possible inefficiencies.",
            polarity=Polarity.NEGATIVE,
        )
    return AdjustmentFactor(
        name="Margin within market average",
        impact=Decimal("0"),
        description="Net margin is within the sector average (10-15%).",
        polarity=Polarity.NEUTRAL,
    )


def _channel_concentration_factor(concentration_percent: Decimal, channel_name: Optional[str]) -> AdjustmentFactor:
    channel = channel_name or "a single channel"
    return AdjustmentFactor(
        name="High channel dependency",
        impact=Decimal("-0.10"),
        description=f"{concentration_percent:.0f}% of sales come from {channel}, creating a dependency risk.",
        polarity=Polarity.NEGATIVE,
    )


def _compute_quality_score(total_adjustment: Decimal) -> Decimal:
    score = BASE_QUALITY_SCORE + total_adjustment * _HUNDRED
    return min(_HUNDRED, max(Decimal("0"), score))


def _compute_recommendations(inputs: ValuationInput, average_valuation: Decimal) -> List[Recommendation]:
    def up_to(fraction: str, text: str, priority: Priority) -> Recommendation:
        amount = average_valuation * Decimal(fraction)
        return Recommendation(
            text=text,
            potential_impact_description=f"Could raise the value by up to {format_currency(amount)}",
            priority=priority,
            potential_impact=amount,
        )

    recommendations: List[Recommendation] = []

    if inputs.net_margin_percent < MARGIN_BENCHMARK_LOW:
        amount = average_valuation * Decimal("0.05")
        recommendations.append(
            Recommendation(
                text="Raise your net margin by reviewing costs and prices",
                potential_impact_description=(
                    f"Each 1% of extra margin can raise the value by roughly {format_currency(amount)}"
                ),
                priority=Priority.HIGH,
                potential_impact=amount,
            )
        )

    if inputs.owner_dependency is OwnerDependency.HIGH:
        recommendations.append(
            up_to("0.15", "Build a team that can run the business without your constant presence", Priority.HIGH)
        )

    if inputs.process_documentation is ProcessDocumentation.NONE:
        recommendations.append(
            up_to("0.10", "Document operating processes and write procedure manuals", Priority.MEDIUM)
        )

    if inputs.has_channel_concentration:
        channel = inputs.primary_channel_name or "your main sales channel"
        recommendations.append(
            up_to("0.10", f"Diversify your sales channels to reduce dependency on {channel}", Priority.MEDIUM)
        )

    if inputs.premises_type is PremisesType.SHORT_TERM_LEASE:
        recommendations.append(up_to("0.10", "Negotiate a longer lease to reduce risk", Priority.MEDIUM))

    return recommendations
