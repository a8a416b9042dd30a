"""
Restaurant Valuation
====================

Pure restaurant valuation engine (DCF + market multiple) with zero external
dependencies.

Public API:
- ``ValuationInput`` / ``ValuationResult``: data contracts
- ``calculate_valuation(inputs)``: main valuation computation
- ``build_valuation_input(data, assumptions)``: canonical input preparation
- ``suggest_business_model(channel, share)``: business model from channel mix
- ``render_valuation_report(inputs, result)``: plain-text report
"""

from restaurant_valuation.engine import (
    MARKET_MULTIPLES,
    PROJECTION_YEARS,
    TERMINAL_GROWTH_RATE,
    AdjustmentFactor,
    BusinessModel,
    MultipleRange,
    OwnerDependency,
    Polarity,
    PremisesType,
    Priority,
    ProcessDocumentation,
    Recommendation,
    ValidationError,
    ValuationInput,
    ValuationResult,
    YearlyProjection,
    calculate_valuation,
    default_market_multiple,
    to_decimal,
)
from restaurant_valuation.formatting import format_currency
from restaurant_valuation.inputs_builder import build_valuation_input, suggest_business_model
from restaurant_valuation.report import render_valuation_report, report_filename

__all__ = [
    "MARKET_MULTIPLES",
    "PROJECTION_YEARS",
    "TERMINAL_GROWTH_RATE",
    "AdjustmentFactor",
    "BusinessModel",
    "MultipleRange",
    "OwnerDependency",
    "Polarity",
    "PremisesType",
    "Priority",
    "ProcessDocumentation",
    "Recommendation",
    "ValidationError",
    "ValuationInput",
    "ValuationResult",
    "YearlyProjection",
    "build_valuation_input",
    "calculate_valuation",
    "default_market_multiple",
    "format_currency",
    "render_valuation_report",
    "report_filename",
    "suggest_business_model",
    "to_decimal",
]
