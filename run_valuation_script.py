import argparse
import json
import logging

from restaurant_valuation_api.config import get_settings
from restaurant_valuation_api.connectors import ConnectorFactory
from restaurant_valuation_api.services.valuation import ValuationService
from restaurant_valuation_api.utils.json import sanitize_for_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Estimate what a restaurant is worth (DCF + market multiple).")
    parser.add_argument("--restaurant", "-r", type=str, default=None, help="Restaurant id to pre-fill from its ledger")
    parser.add_argument("--source", type=str, default=None, help="Data source connector (default: configured source)")
    parser.add_argument("--start", type=str, default=None, help="Ledger period start (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, default=None, help="Ledger period end (YYYY-MM-DD)")

    parser.add_argument("--revenue", type=float, dest="monthly_revenue", help="Average monthly revenue")
    parser.add_argument("--margin", type=float, dest="net_margin_percent", help="Net margin (%%)")
    parser.add_argument("--growth", type=float, dest="annual_growth_percent", help="Annual growth (%%)")
    parser.add_argument("--discount-rate", type=float, dest="discount_rate_percent", help="Discount rate (%%)")
    parser.add_argument(
        "--model", dest="business_model", choices=["delivery", "dining_room", "hybrid", "franchise"]
    )
    parser.add_argument("--multiple", type=float, dest="market_multiple", help="Market multiple of annual profit")
    parser.add_argument("--extraordinary", type=float, dest="extraordinary_expenses", help="One-time deductions")
    parser.add_argument("--years", type=float, dest="operating_years", help="Years in operation")
    parser.add_argument("--owner-dependency", dest="owner_dependency", choices=["high", "partial", "low"])
    parser.add_argument("--processes", dest="process_documentation", choices=["full", "partial", "none"])
    parser.add_argument("--premises", dest="premises_type", choices=["owned", "leased", "short_term_lease"])

    parser.add_argument("--report", action="store_true", help="Print the full text report")
    parser.add_argument("--json", action="store_true", help="Print the full JSON payload")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


ASSUMPTION_KEYS = (
    "monthly_revenue",
    "net_margin_percent",
    "annual_growth_percent",
    "discount_rate_percent",
    "business_model",
    "market_multiple",
    "extraordinary_expenses",
    "operating_years",
    "owner_dependency",
    "process_documentation",
    "premises_type",
)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    assumptions = {key: getattr(args, key) for key in ASSUMPTION_KEYS if getattr(args, key) is not None}

    label = args.restaurant or "manual input"
    try:
        connector = None
        if args.restaurant:
            connector = ConnectorFactory.get_connector(args.source or get_settings().DEFAULT_SOURCE)
        service = ValuationService(connector)

        if args.report:
            _, text = service.render_report(args.restaurant, assumptions, args.start, args.end)
            print(text)
            return 0

        result = service.calculate_valuation(args.restaurant, assumptions, args.start, args.end)
    except ValueError as e:
        print(f"Error calculating valuation for {label}: {e}")
        return 1

    if args.json:
        print(json.dumps(sanitize_for_json(result), indent=2))
        return 0

    print(f"\nValuation Summary ({label}):")
    print(f"DCF Value:        {float(result['dcf_valuation']):,.2f}")
    print(f"Multiple Value:   {float(result['multiple_valuation']):,.2f}")
    print(f"Average Value:    {float(result['average_valuation']):,.2f}")
    print(f"Quality Score:    {float(result['quality_score']):.0f}/100")
    for rec in result["recommendations"]:
        print(f"- [{rec['priority']}] {rec['text']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
