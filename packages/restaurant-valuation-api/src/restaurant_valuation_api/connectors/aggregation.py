"""
Ledger aggregation.

Turns raw sales / expense records into the numbers the valuation form is
pre-filled with: average monthly revenue, net margin, the dominant sales
channel and how long the restaurant has been trading.
"""

import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Mapping, Sequence, Union

import pandas as pd

logger = logging.getLogger(__name__)

SALES_COLUMNS = ("date", "gross_amount", "channel")
EXPENSE_COLUMNS = ("date", "amount", "category")

DEFAULT_OPERATING_YEARS = 2.0
MIN_OPERATING_YEARS = 0.5
DAYS_PER_YEAR = 365

Records = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def to_ledger_frame(records: Records, columns: Sequence[str], kind: str) -> pd.DataFrame:
    """Build a frame with the required columns and a normalized ``date`` column."""
    frame = records.copy() if isinstance(records, pd.DataFrame) else pd.DataFrame.from_records(list(records))
    if frame.empty and len(frame.columns) == 0:
        frame = pd.DataFrame(columns=list(columns))

    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise ValueError(f"{kind} ledger is missing columns: {', '.join(missing)}")

    try:
        frame["date"] = pd.to_datetime(frame["date"]).dt.normalize()
    except (ValueError, TypeError) as e:
        raise ValueError(f"{kind} ledger has invalid dates: {e}") from None
    return frame


def filter_period(frame: pd.DataFrame, start: datetime.date, end: datetime.date) -> pd.DataFrame:
    mask = (frame["date"] >= pd.Timestamp(start)) & (frame["date"] <= pd.Timestamp(end))
    return frame.loc[mask]


def months_in_period(start: datetime.date, end: datetime.date) -> int:
    # Calendar months touched by the period, both ends inclusive.
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def _to_amounts(frame: pd.DataFrame, column: str, kind: str) -> pd.Series:
    try:
        return pd.to_numeric(frame[column])
    except (ValueError, TypeError) as e:
        raise ValueError(f"{kind} ledger has non-numeric {column}: {e}") from None


def _channel_names(frame: pd.DataFrame) -> pd.Series:
    # Blank or missing channels become "" and never count as a named channel.
    return frame["channel"].where(frame["channel"].notna(), "").astype(str).str.strip()


def _round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def summarize_ledger(
    sales: Records,
    expenses: Records,
    start: datetime.date,
    end: datetime.date,
    today: datetime.date,
) -> Dict[str, Any]:
    sales = to_ledger_frame(sales, SALES_COLUMNS, "sales")
    expenses = to_ledger_frame(expenses, EXPENSE_COLUMNS, "expenses")

    if sales.empty:
        logger.warning(f"No sales between {start} and {end}; valuation defaults will be empty")

    sale_amounts = _to_amounts(sales, "gross_amount", "sales")
    total_revenue = float(sale_amounts.sum())
    total_expenses = float(_to_amounts(expenses, "amount", "expenses").sum())
    profit = total_revenue - total_expenses
    margin = (profit / total_revenue) * 100 if total_revenue > 0 else 0.0

    months = months_in_period(start, end)
    monthly_revenue = total_revenue / months if months > 0 else total_revenue

    # Channel revenue in order of first appearance; ties go to the earliest.
    primary_channel = None
    concentration = 0.0
    channels = _channel_names(sales)
    named = channels != ""
    if total_revenue > 0 and named.any():
        by_channel = sale_amounts[named].groupby(channels[named], sort=False).sum()
        primary_channel = str(by_channel.idxmax())
        concentration = float(by_channel.max()) / total_revenue * 100

    operating_years = DEFAULT_OPERATING_YEARS
    if not sales.empty:
        first_sale = sales["date"].min().date()
        operating_years = max((today - first_sale).days / DAYS_PER_YEAR, MIN_OPERATING_YEARS)

    return {
        "monthly_revenue": _round_half_up(monthly_revenue, 0),
        "net_margin_percent": _round_half_up(margin, 1),
        "primary_channel_name": primary_channel,
        "primary_channel_concentration_percent": concentration,
        "operating_years": operating_years,
        "total_revenue": total_revenue,
        "total_expenses": total_expenses,
    }
