"""Price catalog: the tradable currencies and their unit prices."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .errors import DataUnavailable
from .models import CurrencyQuote

logger = logging.getLogger(__name__)


def _parse_price(raw: Any) -> Optional[Decimal]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        price = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price <= 0:
        return None
    return price


def quote_from_record(record: Mapping[str, Any]) -> Optional[CurrencyQuote]:
    """Build a quote from a ``{currency, price}`` record, or None if it is unusable."""
    symbol = record.get("currency")
    if not isinstance(symbol, str) or not symbol.strip():
        return None
    price = _parse_price(record.get("price"))
    if price is None:
        return None
    return CurrencyQuote(symbol=symbol.strip(), unit_price=price)


class PriceCatalog:
    """
    Ordered, read-only set of quotes keyed by symbol.

    A catalog is never mutated; a refresh builds a new one and the owner
    swaps the reference.
    """

    def __init__(self, quotes: Iterable[CurrencyQuote] = ()):
        by_symbol: Dict[str, CurrencyQuote] = {}
        for quote in quotes:
            # First listing of a symbol wins
            by_symbol.setdefault(quote.symbol, quote)
        self._quotes: Tuple[CurrencyQuote, ...] = tuple(by_symbol.values())
        self._by_symbol = by_symbol

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "PriceCatalog":
        """Ingest raw price records, dropping entries without a symbol or a positive price."""
        quotes: List[CurrencyQuote] = []
        dropped = 0
        for record in records:
            quote = quote_from_record(record) if isinstance(record, Mapping) else None
            if quote is None:
                dropped += 1
                continue
            quotes.append(quote)
        if dropped:
            logger.debug("Dropped %d unusable price records", dropped)
        return cls(quotes)

    @classmethod
    def empty(cls) -> "PriceCatalog":
        return cls()

    def get(self, symbol: str) -> Optional[CurrencyQuote]:
        # Keys are stored stripped
        if not isinstance(symbol, str) or not symbol.strip():
            return None
        return self._by_symbol.get(symbol.strip())

    def require(self, symbol: str) -> CurrencyQuote:
        """Like get() but raises DataUnavailable for unknown symbols."""
        quote = self.get(symbol)
        if quote is None:
            raise DataUnavailable(symbol)
        return quote

    @property
    def symbols(self) -> List[str]:
        return [quote.symbol for quote in self._quotes]

    def to_records(self) -> List[Dict[str, Any]]:
        return [quote.to_dict() for quote in self._quotes]

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.get(symbol) is not None

    def __iter__(self) -> Iterator[CurrencyQuote]:
        return iter(self._quotes)

    def __len__(self) -> int:
        return len(self._quotes)

    def __bool__(self) -> bool:
        return bool(self._quotes)

    def __repr__(self) -> str:
        return f"PriceCatalog({len(self._quotes)} quotes)"
