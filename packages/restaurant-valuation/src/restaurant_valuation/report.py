"""
Plain-text valuation report.

The section order mirrors ``ValuationResult`` so the downloaded report and the
computed record can be read side by side.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from .engine import (
    BusinessModel,
    OwnerDependency,
    PremisesType,
    ProcessDocumentation,
    ValuationInput,
    ValuationResult,
)
from .formatting import format_currency

DEFAULT_RESTAURANT_NAME = "Restaurant"

BUSINESS_MODEL_LABELS = {
    BusinessModel.DELIVERY: "Delivery",
    BusinessModel.DINING_ROOM: "Dining room",
    BusinessModel.HYBRID: "Hybrid",
    BusinessModel.FRANCHISE: "Franchise",
}

OWNER_DEPENDENCY_LABELS = {
    OwnerDependency.HIGH: "High",
    OwnerDependency.PARTIAL: "Partial",
    OwnerDependency.LOW: "Low",
}

PROCESS_DOCUMENTATION_LABELS = {
    ProcessDocumentation.FULL: "Yes",
    ProcessDocumentation.PARTIAL: "Partially",
    ProcessDocumentation.NONE: "No",
}

PREMISES_LABELS = {
    PremisesType.OWNED: "Owned",
    PremisesType.LEASED: "Leased",
    PremisesType.SHORT_TERM_LEASE: "Short-term lease",
}

DISCLAIMER = (
    "This report is an estimate based on the data provided and on market assumptions.\n"
    "Consulting a specialist is recommended for a more precise valuation."
)


def _signed_percent(fraction: Decimal) -> str:
    sign = "+" if fraction >= 0 else ""
    return f"{sign}{fraction * 100:.0f}%"


def _multiple(value: Decimal) -> str:
    return f"{value.normalize():f}x"


def report_filename(restaurant_name: Optional[str] = None, report_date: Optional[date] = None) -> str:
    report_date = report_date or date.today()
    return f"Valuation_{restaurant_name or DEFAULT_RESTAURANT_NAME}_{report_date.isoformat()}.txt"


def render_valuation_report(
    inputs: ValuationInput,
    result: ValuationResult,
    restaurant_name: Optional[str] = None,
    report_date: Optional[date] = None,
) -> str:
    report_date = report_date or date.today()

    lines: List[str] = [
        f"VALUATION REPORT - {restaurant_name or DEFAULT_RESTAURANT_NAME}",
        f"Date: {report_date.strftime('%d/%m/%Y')}",
        "",
        "BUSINESS DATA",
        f"Monthly Revenue: {format_currency(inputs.monthly_revenue)}",
        f"Annual Revenue: {format_currency(result.annual_revenue)}",
        f"Net Margin: {inputs.net_margin_percent:.1f}%",
        f"Annual Profit: {format_currency(result.annual_profit)}",
        f"Business Model: {BUSINESS_MODEL_LABELS[inputs.business_model]}",
        f"Operating Time: {inputs.operating_years:.1f} years",
        f"Owner Dependency: {OWNER_DEPENDENCY_LABELS[inputs.owner_dependency]}",
        f"Documented Processes: {PROCESS_DOCUMENTATION_LABELS[inputs.process_documentation]}",
        f"Premises: {PREMISES_LABELS[inputs.premises_type]}",
    ]
    if inputs.primary_channel_name and inputs.primary_channel_concentration_percent is not None:
        lines.append(
            f"Main Sales Channel: {inputs.primary_channel_name} "
            f"({inputs.primary_channel_concentration_percent:.0f}% of revenue)"
        )

    lines += [
        "",
        "ASSUMPTIONS",
        f"Annual Growth Rate: {inputs.annual_growth_percent:.1f}%",
        f"Discount Rate: {inputs.discount_rate_percent:.1f}%",
        f"Market Multiple: {inputs.market_multiple:.1f}x",
        f"Extraordinary Expenses: {format_currency(inputs.extraordinary_expenses)}",
        "",
        "VALUATION RESULT",
        f"Discounted Cash Flow Value (DCF): {format_currency(result.dcf_valuation)}",
        f"Profit Multiple Value: {format_currency(result.multiple_valuation)}",
        f"Average Estimated Value: {format_currency(result.average_valuation)}",
        f"Present Value of Projections: {format_currency(result.total_present_value_of_projections)}",
        f"Adjustment Multiplier: {result.adjustment_multiplier:.2f}",
        f"Quality Score: {result.quality_score:.0f}/100",
        "",
        "ADJUSTMENT FACTORS",
    ]
    lines += [
        f"{factor.name}: {_signed_percent(factor.impact)} - {factor.description}"
        for factor in result.adjustment_factors
    ]

    lines += ["", "YEARLY PROJECTIONS"]
    lines += [
        f"{p.year}: Revenue {format_currency(p.revenue)} | Profit {format_currency(p.profit)} "
        f"| Present Value {format_currency(p.present_value)}"
        for p in result.yearly_projections
    ]
    lines += [
        "",
        f"Terminal Value: {format_currency(result.terminal_value)}",
        f"Present Value of Terminal Value: {format_currency(result.terminal_value_present_value)}",
        "",
        "MARKET MULTIPLE RANGE",
        f"Minimum: {_multiple(result.multiple_range_min)}",
        f"Maximum: {_multiple(result.multiple_range_max)}",
        "",
        "RECOMMENDATIONS TO INCREASE VALUE",
    ]
    if result.recommendations:
        lines += [
            f"- {rec.text} (Potential impact: {rec.potential_impact_description})"
            for rec in result.recommendations
        ]
    else:
        lines.append("- No priority improvements identified")

    lines += ["", "NOTES", DISCLAIMER]
    return "\n".join(lines) + "\n"
