"""
Inputs Builder
==============

Canonical logic for preparing a ``ValuationInput`` from a raw data dictionary
(typically the ledger summary returned by a Connector) and a user-supplied
assumptions dictionary.

This module is the **single source of truth** for:
- The calculator's default assumptions (margin, growth, discount rate, ...)
- Suggesting a business model from the sales-channel mix
- Defaulting the market multiple from the business model
- Merging user assumptions with fetched data

The API service, the CLI script and tests all go through
``build_valuation_input()`` so that inputs are prepared identically.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .engine import (
    CHANNEL_CONCENTRATION_THRESHOLD,
    BusinessModel,
    ValuationInput,
    default_market_multiple,
    to_decimal,
)

logger = logging.getLogger(__name__)

# Calculator form defaults.
DEFAULT_NET_MARGIN_PERCENT = 15.0
DEFAULT_ANNUAL_GROWTH_PERCENT = 10.0
DEFAULT_DISCOUNT_RATE_PERCENT = 18.0
DEFAULT_BUSINESS_MODEL = BusinessModel.HYBRID
DEFAULT_EXTRAORDINARY_EXPENSES = 0.0
DEFAULT_OPERATING_YEARS = 2.0
DEFAULT_OWNER_DEPENDENCY = "partial"
DEFAULT_PROCESS_DOCUMENTATION = "partial"
DEFAULT_PREMISES_TYPE = "leased"

_DELIVERY_CHANNEL_MARKERS = ("ifood", "delivery")
_DINING_ROOM_CHANNEL_MARKERS = ("salão", "salao", "dining")


def suggest_business_model(
    channel_name: Optional[str],
    concentration_percent: Any,
) -> BusinessModel:
    """
    Guess the business model from the dominant sales channel.

    Only a channel carrying more than 70% of revenue is decisive; otherwise
    the restaurant is treated as hybrid.
    """
    if not channel_name or concentration_percent is None:
        return DEFAULT_BUSINESS_MODEL
    if to_decimal(concentration_percent, "primary_channel_concentration_percent") <= CHANNEL_CONCENTRATION_THRESHOLD:
        return DEFAULT_BUSINESS_MODEL

    name = channel_name.lower()
    if any(marker in name for marker in _DELIVERY_CHANNEL_MARKERS):
        return BusinessModel.DELIVERY
    if any(marker in name for marker in _DINING_ROOM_CHANNEL_MARKERS):
        return BusinessModel.DINING_ROOM
    return DEFAULT_BUSINESS_MODEL


def build_valuation_input(
    data: Optional[Dict[str, Any]] = None,
    assumptions: Optional[Dict[str, Any]] = None,
) -> ValuationInput:
    """
    Merge aggregated restaurant data with user assumptions and apply defaults.

    Parameters
    ----------
    data : dict, optional
        Aggregated financial data, typically from a Connector's
        ``get_valuation_inputs()`` method.  Recognised keys:
        ``monthly_revenue``, ``net_margin_percent``, ``operating_years``,
        ``primary_channel_name``, ``primary_channel_concentration_percent``.
    assumptions : dict, optional
        User-supplied overrides.  Any key present here (and not ``None``)
        takes precedence over the corresponding value in *data*.

    Returns
    -------
    ValuationInput
        Fully-populated record ready to pass to ``calculate_valuation()``.
    """
    if data is None:
        data = {}
    if assumptions is None:
        assumptions = {}

    # Helper: pick Assumption > Data > Default
    def get_val(key: str, default: Any) -> Any:
        if assumptions.get(key) is not None:
            return assumptions[key]
        if data.get(key) is not None:
            return data[key]
        return default

    channel_name = get_val("primary_channel_name", None)
    concentration = get_val("primary_channel_concentration_percent", None)

    # ------------------------------------------------------------------ #
    # 1. Business model & market multiple
    # ------------------------------------------------------------------ #
    if assumptions.get("business_model") is not None:
        business_model = assumptions["business_model"]
    else:
        business_model = suggest_business_model(channel_name, concentration)
        logger.debug(f"Suggested business model: {business_model.value}")

    # The multiple follows the model unless the user overrides it.
    market_multiple = assumptions.get("market_multiple")
    if market_multiple is None:
        market_multiple = default_market_multiple(business_model)

    # ------------------------------------------------------------------ #
    # 2. Build ValuationInput, every field explicitly mapped
    # ------------------------------------------------------------------ #
    return ValuationInput(
        monthly_revenue=get_val("monthly_revenue", 0.0),
        net_margin_percent=get_val("net_margin_percent", DEFAULT_NET_MARGIN_PERCENT),
        annual_growth_percent=get_val("annual_growth_percent", DEFAULT_ANNUAL_GROWTH_PERCENT),
        discount_rate_percent=get_val("discount_rate_percent", DEFAULT_DISCOUNT_RATE_PERCENT),
        business_model=business_model,
        market_multiple=market_multiple,
        extraordinary_expenses=get_val("extraordinary_expenses", DEFAULT_EXTRAORDINARY_EXPENSES),
        operating_years=get_val("operating_years", DEFAULT_OPERATING_YEARS),
        owner_dependency=get_val("owner_dependency", DEFAULT_OWNER_DEPENDENCY),
        process_documentation=get_val("process_documentation", DEFAULT_PROCESS_DOCUMENTATION),
        premises_type=get_val("premises_type", DEFAULT_PREMISES_TYPE),
        primary_channel_concentration_percent=concentration,
        primary_channel_name=channel_name,
    )
