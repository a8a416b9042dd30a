"""
API Router: all endpoint definitions for the valuation service.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse

from restaurant_valuation import MARKET_MULTIPLES
from restaurant_valuation_api.api.schemas import MultipleRangeItem, MultipleRangesResponse, ValuationRequest
from restaurant_valuation_api.config import get_settings
from restaurant_valuation_api.connectors import ConnectorFactory
from restaurant_valuation_api.services.valuation import ValuationService
from restaurant_valuation_api.utils.json import sanitize_for_json

logger = logging.getLogger(__name__)
router = APIRouter()


def _build_service(request: ValuationRequest) -> ValuationService:
    if request.restaurant_id is None:
        return ValuationService()
    connector = ConnectorFactory.get_connector(request.source or get_settings().DEFAULT_SOURCE)
    return ValuationService(connector)


def _assumptions(request: ValuationRequest):
    if request.assumptions is None:
        return None
    return request.assumptions.model_dump(exclude_none=True, mode="json")


@router.get(
    "/valuation/multiples",
    summary="Market Multiple Ranges",
    description="Profit multiple range and default for each restaurant business model.",
    response_model=MultipleRangesResponse,
)
def get_multiples():
    return MultipleRangesResponse(
        results=[
            MultipleRangeItem(
                business_model=model,
                minimum=float(multiple_range.minimum),
                maximum=float(multiple_range.maximum),
                default=float(multiple_range.default),
            )
            for model, multiple_range in MARKET_MULTIPLES.items()
        ]
    )


@router.get(
    "/data/financials/{restaurant_id}",
    summary="Get Ledger Summary",
    description="Aggregates the restaurant's sales and expenses into valuation defaults.",
    response_description="Monthly revenue, net margin, main channel and operating time.",
)
def get_financials(
    restaurant_id: str,
    source: Optional[str] = Query(None, description="Data source connector"),
    start: Optional[str] = Query(None, description="Period start (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Period end (YYYY-MM-DD)"),
):
    try:
        connector = ConnectorFactory.get_connector(source or get_settings().DEFAULT_SOURCE)
        data = connector.get_valuation_inputs(restaurant_id, start=start, end=end)
        return sanitize_for_json(data)
    except ValueError as e:
        logger.warning(f"Bad Request for {restaurant_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error fetching financials for {restaurant_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/valuation/calculate",
    summary="Calculate Valuation",
    description="Runs the DCF + market multiple valuation. Inputs come from the ledger and/or assumption overrides.",
    response_description="Both estimates, their blend, projections, adjustment factors, score and recommendations.",
)
def calculate_valuation(request: ValuationRequest):
    try:
        service = _build_service(request)
        result = service.calculate_valuation(request.restaurant_id, _assumptions(request), request.start, request.end)
        return sanitize_for_json(result)
    except ValueError as e:
        logger.warning(f"Bad Request for {request.restaurant_id or 'manual input'}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error valuing {request.restaurant_id or 'manual input'}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/valuation/report",
    summary="Export Valuation Report",
    description="Runs the valuation and returns the plain-text report as a download.",
    response_class=PlainTextResponse,
)
def export_report(request: ValuationRequest):
    try:
        service = _build_service(request)
        filename, text = service.render_report(
            request.restaurant_id,
            _assumptions(request),
            request.start,
            request.end,
            restaurant_name=request.restaurant_name,
        )
    except ValueError as e:
        logger.warning(f"Bad Request for {request.restaurant_id or 'manual input'}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error exporting report for {request.restaurant_id or 'manual input'}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return PlainTextResponse(text, headers={"Content-Disposition": f'attachment; filename="{filename}"'})
