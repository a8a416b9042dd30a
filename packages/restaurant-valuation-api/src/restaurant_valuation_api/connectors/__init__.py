from restaurant_valuation_api.connectors.base import BaseConnector, ConnectorFactory, resolve_period
from restaurant_valuation_api.connectors.ledger import LedgerConnector
from restaurant_valuation_api.connectors.memory import InMemoryConnector

__all__ = ["BaseConnector", "ConnectorFactory", "InMemoryConnector", "LedgerConnector", "resolve_period"]
