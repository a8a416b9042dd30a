from decimal import Decimal
from typing import Union

CURRENCY_SYMBOL = "R$"


def format_currency(value: Union[Decimal, float, int]) -> str:
    """Brazilian real formatting: ``R$ 1.234.567,89``."""
    grouped = f"{Decimal(str(value)) if isinstance(value, float) else value:,.2f}"
    # Swap US separators for pt-BR ones.
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{CURRENCY_SYMBOL} {localized}"
