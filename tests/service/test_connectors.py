"""
Tests for connectors: factory, singleton, base interface, period resolution.
"""

import datetime

import pandas as pd
import pytest

from restaurant_valuation_api.connectors import (
    BaseConnector,
    ConnectorFactory,
    InMemoryConnector,
    LedgerConnector,
    resolve_period,
)

# ---------------------------------------------------------------------------
# BaseConnector interface
# ---------------------------------------------------------------------------


class MockConnector(BaseConnector):
    def get_sales(self, restaurant_id, start, end):
        return pd.DataFrame(
            [
                {"date": "2026-03-02", "gross_amount": 7000.0, "channel": "Salão"},
                {"date": "2026-03-09", "gross_amount": 3000.0, "channel": "iFood"},
            ]
        )

    def get_expenses(self, restaurant_id, start, end):
        return pd.DataFrame([{"date": "2026-03-05", "amount": 8800.0, "category": "Rent"}])


def test_connector_interface():
    """Ensure BaseConnector enforces implementation."""
    with pytest.raises(TypeError):

        class IncompleteConnector(BaseConnector):
            pass

        IncompleteConnector()


def test_factory_registration():
    ConnectorFactory.register("mock", MockConnector)
    connector = ConnectorFactory.get_connector("mock")
    assert isinstance(connector, MockConnector)

    summary = connector.get_valuation_inputs(
        "any", start="2026-03-01", end="2026-03-31", today=datetime.date(2026, 4, 1)
    )
    assert summary["monthly_revenue"] == 10000.0
    assert summary["net_margin_percent"] == 12.0
    assert summary["primary_channel_name"] == "Salão"
    assert summary["primary_channel_concentration_percent"] == pytest.approx(70.0)


def test_factory_invalid_connector():
    with pytest.raises(ValueError, match="Connector 'non_existent' not found."):
        ConnectorFactory.get_connector("non_existent")


def test_reregistration_replaces_cached_instance():
    ConnectorFactory.register("swap", MockConnector)
    first = ConnectorFactory.get_connector("swap")

    ConnectorFactory.register("swap", InMemoryConnector)
    second = ConnectorFactory.get_connector("swap")

    assert first is not second
    assert isinstance(second, InMemoryConnector)


# ---------------------------------------------------------------------------
# Singleton pattern
# ---------------------------------------------------------------------------


class MockStatefulConnector(MockConnector):
    def __init__(self):
        self.call_count = 0

    def get_sales(self, restaurant_id, start, end):
        self.call_count += 1
        return super().get_sales(restaurant_id, start, end)


def test_connector_singleton_pattern():
    ConnectorFactory.register("stateful_mock", MockStatefulConnector)

    conn1 = ConnectorFactory.get_connector("stateful_mock")
    conn1.get_valuation_inputs("cantina")
    assert conn1.call_count == 1

    conn2 = ConnectorFactory.get_connector("stateful_mock")
    assert conn1 is conn2

    conn2.get_valuation_inputs("cantina")
    assert conn1.call_count == 2
    assert conn2.call_count == 2


# ---------------------------------------------------------------------------
# Built-in connectors
# ---------------------------------------------------------------------------


def test_ledger_connector_registered():
    connector = ConnectorFactory.get_connector("ledger")
    assert isinstance(connector, LedgerConnector)


def test_memory_connector_registered():
    connector = ConnectorFactory.get_connector("memory")
    assert isinstance(connector, InMemoryConnector)


# ---------------------------------------------------------------------------
# Period resolution
# ---------------------------------------------------------------------------


def test_resolve_period_defaults_to_month_to_date():
    start, end = resolve_period(today=datetime.date(2026, 10, 19))
    assert start == datetime.date(2026, 10, 1)
    assert end == datetime.date(2026, 10, 19)


def test_resolve_period_parses_strings_and_dates():
    start, end = resolve_period("2026-01-01", datetime.datetime(2026, 3, 31, 18, 30))
    assert start == datetime.date(2026, 1, 1)
    assert end == datetime.date(2026, 3, 31)


def test_resolve_period_rejects_bad_dates():
    with pytest.raises(ValueError, match="Invalid date '01/02/2026'"):
        resolve_period("01/02/2026", "2026-03-31")


def test_resolve_period_rejects_inverted_period():
    with pytest.raises(ValueError, match="is after end"):
        resolve_period("2026-04-01", "2026-03-31")
