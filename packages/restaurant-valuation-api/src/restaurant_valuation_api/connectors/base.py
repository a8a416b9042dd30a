import datetime
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple, Type, Union

import pandas as pd

from .aggregation import summarize_ledger

DateLike = Union[datetime.date, str, None]


def resolve_period(
    start: DateLike = None,
    end: DateLike = None,
    today: Optional[datetime.date] = None,
) -> Tuple[datetime.date, datetime.date]:
    """
    Turn optional ``YYYY-MM-DD`` strings / dates into a concrete period.

    Defaults to the current month to date: first day of this month -> today.
    """
    today = today or datetime.date.today()

    def parse(value: DateLike, default: datetime.date) -> datetime.date:
        if value is None:
            return default
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        try:
            return datetime.datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from None

    start_date = parse(start, today.replace(day=1))
    end_date = parse(end, today)
    if start_date > end_date:
        raise ValueError(f"Period start {start_date} is after end {end_date}")
    return start_date, end_date


class BaseConnector(ABC):
    """Abstract base class for restaurant data connectors."""

    @abstractmethod
    def get_sales(self, restaurant_id: str, start: datetime.date, end: datetime.date) -> pd.DataFrame:
        """Sales in the period, columns ``date``, ``gross_amount``, ``channel``."""
        pass

    @abstractmethod
    def get_expenses(self, restaurant_id: str, start: datetime.date, end: datetime.date) -> pd.DataFrame:
        """Expenses in the period, columns ``date``, ``amount``, ``category``."""
        pass

    def get_valuation_inputs(
        self,
        restaurant_id: str,
        start: DateLike = None,
        end: DateLike = None,
        today: Optional[datetime.date] = None,
    ) -> Dict[str, Any]:
        """
        Aggregate the restaurant's ledger into valuation defaults.
        Returns a dictionary containing keys like:
        - monthly_revenue
        - net_margin_percent
        - primary_channel_name / primary_channel_concentration_percent
        - operating_years
        """
        today = today or datetime.date.today()
        start_date, end_date = resolve_period(start, end, today)
        sales = self.get_sales(restaurant_id, start_date, end_date)
        expenses = self.get_expenses(restaurant_id, start_date, end_date)
        return summarize_ledger(sales, expenses, start_date, end_date, today)


class ConnectorFactory:
    """Simple factory to manage data connectors (Singleton Pattern)."""

    _connector_classes: Dict[str, Type[BaseConnector]] = {}
    _instances: Dict[str, BaseConnector] = {}

    @classmethod
    def register(cls, name: str, connector_cls: Type[BaseConnector]) -> None:
        cls._connector_classes[name] = connector_cls
        # A re-registered name must not keep serving the old instance.
        cls._instances.pop(name, None)

    @classmethod
    def get_connector(cls, name: str) -> BaseConnector:
        # Check cache first
        if name in cls._instances:
            return cls._instances[name]

        # Create new instance if registered
        connector_cls = cls._connector_classes.get(name)
        if not connector_cls:
            raise ValueError(f"Connector '{name}' not found.")

        instance = connector_cls()
        cls._instances[name] = instance
        return instance
