"""
Money formatting for notification texts.

Usage:
    from budgethub.utils.money import format_money

    format_money(1500, "CHF")          -> "CHF 1'500.00"
    format_money("99.5", "EUR")        -> "EUR 99.50"
    format_money(-20, "CHF")           -> "CHF -20.00"
"""
from decimal import Decimal

# Swiss grouping: apostrophe as thousands separator
_THOUSANDS_SEPARATOR = "'"


def format_money(amount, currency: str = "CHF", decimals: int = 2) -> str:
    """
    Format an amount with thousands separators and the currency code in front.

    Args:
        amount: int / float / Decimal / str
        currency: ISO currency code
        decimals: digits after the decimal point
    """
    if isinstance(amount, str):
        amount = Decimal(amount)
    fmt = f"{{:,.{decimals}f}}"
    formatted = fmt.format(amount).replace(",", _THOUSANDS_SEPARATOR)
    return f"{currency} {formatted}"
