"""
Valuation Service
=================

Thin orchestration layer: fetch ledger aggregates via a Connector, prepare
inputs via the shared ``build_valuation_input`` builder, run the engine, and
return results.

All input-preparation and computation logic lives in **restaurant_valuation**
so there is exactly one source of truth.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional, Tuple

from restaurant_valuation import (
    ValuationInput,
    ValuationResult,
    build_valuation_input,
    calculate_valuation,
    render_valuation_report,
    report_filename,
)
from restaurant_valuation_api.connectors.base import BaseConnector

logger = logging.getLogger(__name__)


class ValuationService:
    def __init__(self, connector: Optional[BaseConnector] = None):
        self.connector = connector

    def get_financials(
        self,
        restaurant_id: str,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> Dict[str, Any]:
        if self.connector is None:
            raise ValueError("A data source is required to read restaurant financials")
        return self.connector.get_valuation_inputs(restaurant_id, start=start, end=end)

    def calculate_valuation(
        self,
        restaurant_id: Optional[str] = None,
        assumptions: Optional[Dict[str, Any]] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Orchestrates the valuation process.

        1. Fetch aggregated ledger data from the Connector (when a restaurant is given).
        2. Prepare ValuationInput via the shared builder.
        3. Run the engine.
        4. Return results as a dict (API-friendly).
        """
        _, result = self._run(restaurant_id, assumptions, start, end)
        return result.as_dict()

    def calculate_from_assumptions(self, assumptions: Dict[str, Any]) -> Dict[str, Any]:
        """Value a restaurant from manual calculator inputs only, without reading its ledger."""
        return self.calculate_valuation(None, assumptions)

    def render_report(
        self,
        restaurant_id: Optional[str] = None,
        assumptions: Optional[Dict[str, Any]] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        restaurant_name: Optional[str] = None,
    ) -> Tuple[str, str]:
        """Returns ``(filename, report_text)``."""
        inputs, result = self._run(restaurant_id, assumptions, start, end)
        today = date.today()
        name = restaurant_name or restaurant_id
        return report_filename(name, today), render_valuation_report(inputs, result, name, today)

    def _run(
        self,
        restaurant_id: Optional[str],
        assumptions: Optional[Dict[str, Any]],
        start: Optional[str],
        end: Optional[str],
    ) -> Tuple[ValuationInput, ValuationResult]:
        # 1. Fetch aggregated data from Connector
        data: Dict[str, Any] = {}
        if restaurant_id is not None:
            data = self.get_financials(restaurant_id, start=start, end=end)
            logger.info(f"Loaded ledger summary for {restaurant_id}: monthly_revenue={data.get('monthly_revenue')}")

        # 2. Build ValuationInput via canonical builder (single source of truth)
        inputs = build_valuation_input(data, assumptions)

        # 3. Run Engine
        result = calculate_valuation(inputs)
        logger.info(
            f"Valuation for {restaurant_id or 'manual input'}: average={result.average_valuation:.2f} "
            f"score={result.quality_score:.0f}"
        )
        return inputs, result
