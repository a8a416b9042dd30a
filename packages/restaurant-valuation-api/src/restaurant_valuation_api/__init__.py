"""REST service and data connectors for the restaurant valuation engine."""
