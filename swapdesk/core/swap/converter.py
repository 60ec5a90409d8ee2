"""Rate conversion between two catalog quotes."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

from .catalog import PriceCatalog
from .sanitizer import MAX_DECIMALS

# Enough headroom that quantizing to 6 places never overflows the context
_PRECISION = 60


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """Parse a decimal string, returning None for blanks and non-numbers."""
    if not value:
        return None
    try:
        amount = Decimal(value)
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def exchange_rate(sell_symbol: str, buy_symbol: str, catalog: PriceCatalog) -> Optional[Decimal]:
    """Units of ``buy_symbol`` received per unit of ``sell_symbol``."""
    sell_quote = catalog.get(sell_symbol)
    buy_quote = catalog.get(buy_symbol)
    if sell_quote is None or buy_quote is None:
        return None
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return sell_quote.unit_price / buy_quote.unit_price


def convert(
    sell_symbol: str,
    buy_symbol: str,
    sell_amount: str,
    catalog: PriceCatalog,
    *,
    decimals: int = MAX_DECIMALS,
) -> str:
    """Compute the buy amount for ``sell_amount`` of ``sell_symbol``.

    Returns a fixed-point string with exactly ``decimals`` fractional
    digits, or "" when a symbol is unset or unknown to the catalog, or the
    amount is blank or not a number.
    """
    if not sell_symbol or not buy_symbol:
        return ""
    amount = parse_amount(sell_amount)
    if amount is None:
        return ""
    rate = exchange_rate(sell_symbol, buy_symbol, catalog)
    if rate is None:
        return ""

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        try:
            result = (amount * rate).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return ""
    return format(result, "f")
