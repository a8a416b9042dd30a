import datetime
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from .aggregation import EXPENSE_COLUMNS, SALES_COLUMNS, filter_period, to_ledger_frame
from .base import BaseConnector, ConnectorFactory


class InMemoryConnector(BaseConnector):
    """Connector over records pushed in by the caller (embedding, tests, demos)."""

    def __init__(self):
        self._sales: Dict[str, List[Mapping[str, Any]]] = defaultdict(list)
        self._expenses: Dict[str, List[Mapping[str, Any]]] = defaultdict(list)

    def add_sales(self, restaurant_id: str, records: Iterable[Mapping[str, Any]]) -> None:
        self._sales[restaurant_id].extend(records)

    def add_expenses(self, restaurant_id: str, records: Iterable[Mapping[str, Any]]) -> None:
        self._expenses[restaurant_id].extend(records)

    def get_sales(self, restaurant_id: str, start: datetime.date, end: datetime.date) -> pd.DataFrame:
        self._check_known(restaurant_id)
        frame = to_ledger_frame(self._sales.get(restaurant_id, []), SALES_COLUMNS, "sales")
        return filter_period(frame, start, end)

    def get_expenses(self, restaurant_id: str, start: datetime.date, end: datetime.date) -> pd.DataFrame:
        self._check_known(restaurant_id)
        frame = to_ledger_frame(self._expenses.get(restaurant_id, []), EXPENSE_COLUMNS, "expenses")
        return filter_period(frame, start, end)

    def _check_known(self, restaurant_id: str) -> None:
        if restaurant_id not in self._sales and restaurant_id not in self._expenses:
            raise ValueError(f"No records for restaurant '{restaurant_id}'")


# Register the connector
ConnectorFactory.register("memory", InMemoryConnector)
