"""Display formatting for money amounts."""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union


CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}

# Currencies displayed without minor units
ZERO_DECIMAL_CURRENCIES = {"JPY"}


def format_currency(amount: Union[Decimal, int, float], currency: str = "USD") -> str:
    """
    Format an amount the way the summary cards show it.

    >>> format_currency(Decimal("1234.5"))
    '$1,234.50'
    >>> format_currency(-10)
    '-$10.00'

    Unknown currency codes are shown as a prefix, e.g. 'CHF 12.00'.
    """
    code = currency.upper()
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))

    places = Decimal("1") if code in ZERO_DECIMAL_CURRENCIES else Decimal("0.01")

    # Enough precision to hold every integer digit plus the cents
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        value = value.quantize(places, rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""
        digits = f"{abs(value):,}"

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {digits}"
    return f"{sign}{symbol}{digits}"
