"""Sell amount input sanitizing."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

MAX_DECIMALS = 6

_NON_AMOUNT_CHARS = re.compile(r"[^0-9.]")


def sanitize(raw: str, previous: str, *, max_decimals: int = MAX_DECIMALS) -> str:
    """Turn a raw edit of the sell amount into a valid decimal string.

    Anything other than digits and '.' is stripped. Edits that would leave a
    second decimal point, more than ``max_decimals`` fractional digits or a
    negative value are rejected by returning ``previous`` unchanged, so the
    stored amount is always valid.
    """
    cleaned = _NON_AMOUNT_CHARS.sub("", raw or "")

    if cleaned.count(".") > 1:
        return previous

    _, _, fraction = cleaned.partition(".")
    if len(fraction) > max_decimals:
        return previous

    try:
        if Decimal(cleaned) < 0:
            return previous
    except InvalidOperation:
        # "" and "." are valid intermediate edits
        pass

    return cleaned


def is_valid_amount(value: str, *, max_decimals: int = MAX_DECIMALS) -> bool:
    """True when ``value`` would pass through sanitize() unchanged."""
    return sanitize(value, previous="\0", max_decimals=max_decimals) == value
