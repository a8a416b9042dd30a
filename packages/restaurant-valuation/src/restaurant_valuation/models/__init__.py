"""
Convenience re-exports of data models.

All models are defined in ``restaurant_valuation.engine`` and re-exported here
for consumers who prefer ``from restaurant_valuation.models import ValuationInput``.
"""

from restaurant_valuation.engine import (
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
)

__all__ = [
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
]
