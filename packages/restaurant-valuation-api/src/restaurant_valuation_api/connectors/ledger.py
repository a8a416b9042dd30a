import datetime
import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from restaurant_valuation_api.config import get_settings

from .aggregation import EXPENSE_COLUMNS, SALES_COLUMNS, filter_period, to_ledger_frame
from .base import BaseConnector, ConnectorFactory

logger = logging.getLogger(__name__)

SALES_FILE = "sales.csv"
EXPENSES_FILE = "expenses.csv"


class LedgerConnector(BaseConnector):
    """
    Connector over a directory of per-restaurant CSV ledgers.

    Layout::

        <ledger_dir>/<restaurant_id>/sales.csv     date,gross_amount,channel
        <ledger_dir>/<restaurant_id>/expenses.csv  date,amount,category
    """

    def __init__(self, ledger_dir: Optional[str] = None):
        self.ledger_dir = Path(ledger_dir or get_settings().LEDGER_DIR)

    def get_sales(self, restaurant_id: str, start: datetime.date, end: datetime.date) -> pd.DataFrame:
        frame = self._read(restaurant_id, SALES_FILE, SALES_COLUMNS, "sales")
        return filter_period(frame, start, end)

    def get_expenses(self, restaurant_id: str, start: datetime.date, end: datetime.date) -> pd.DataFrame:
        frame = self._read(restaurant_id, EXPENSES_FILE, EXPENSE_COLUMNS, "expenses")
        return filter_period(frame, start, end)

    def _restaurant_dir(self, restaurant_id: str) -> Path:
        if not restaurant_id or restaurant_id in {".", ".."} or Path(restaurant_id).name != restaurant_id:
            raise ValueError(f"Invalid restaurant id '{restaurant_id}'")
        path = self.ledger_dir / restaurant_id
        if not path.is_dir():
            raise ValueError(f"No ledger found for restaurant '{restaurant_id}'")
        return path

    def _read(self, restaurant_id: str, filename: str, columns: Sequence[str], kind: str) -> pd.DataFrame:
        path = self._restaurant_dir(restaurant_id) / filename
        if not path.exists():
            logger.warning(f"{kind} ledger missing for {restaurant_id}: {path}")
            return to_ledger_frame([], columns, kind)

        logger.debug(f"Reading {kind} ledger {path}")
        try:
            raw = pd.read_csv(path)
        except pd.errors.EmptyDataError:
            return to_ledger_frame([], columns, kind)
        return to_ledger_frame(raw, columns, kind)


# Register the connector
ConnectorFactory.register("ledger", LedgerConnector)
