"""
Swap Form Models

Quotes, the swap intent, the swap state machine's states and the single
context object the form components share.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import uuid4

if TYPE_CHECKING:  # pragma: no cover
    from .catalog import PriceCatalog


@dataclass(frozen=True)
class CurrencyQuote:
    """A currency's symbol and its unit price in the common reference unit."""

    symbol: str
    unit_price: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currency": self.symbol,
            "price": str(self.unit_price),
        }


@dataclass
class SwapIntent:
    """What the user is about to swap.

    Amounts are decimal strings. ``buy_amount`` is derived by the converter
    and never edited directly.
    """

    sell_symbol: str = ""
    buy_symbol: str = ""
    sell_amount: str = ""
    buy_amount: str = ""

    @property
    def has_pair(self) -> bool:
        return bool(self.sell_symbol and self.buy_symbol)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sellSymbol": self.sell_symbol,
            "buySymbol": self.buy_symbol,
            "sellAmount": self.sell_amount,
            "buyAmount": self.buy_amount,
        }


class SwapStatus(str, Enum):
    """States a swap submission can be in."""

    IDLE = "idle"                # Ready for a submit
    SUBMITTING = "submitting"    # Waiting on the execution collaborator
    SUCCEEDED = "succeeded"      # Done, form resets after a delay
    FAILED = "failed"            # Carries a reason, waits for the next submit


@dataclass(frozen=True)
class SwapState:
    """Current swap state. ``reason`` is only set when FAILED."""

    status: SwapStatus = SwapStatus.IDLE
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "SwapState":
        return cls(SwapStatus.IDLE)

    @classmethod
    def failed(cls, reason: str) -> "SwapState":
        return cls(SwapStatus.FAILED, reason)

    @property
    def is_submitting(self) -> bool:
        return self.status == SwapStatus.SUBMITTING


@dataclass
class StateTransition:
    """Record of a state transition."""

    id: str = field(default_factory=lambda: str(uuid4()))
    from_state: SwapStatus = SwapStatus.IDLE
    to_state: SwapStatus = SwapStatus.IDLE
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fromState": self.from_state.value,
            "toState": self.to_state.value,
            "timestamp": self.timestamp.isoformat(),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class SwapOutcome:
    """Result reported by a swap execution collaborator."""

    success: bool
    message: Optional[str] = None
    reference: Optional[str] = None

    @classmethod
    def succeeded(cls, reference: Optional[str] = None) -> "SwapOutcome":
        return cls(success=True, reference=reference)

    @classmethod
    def failed(cls, message: Optional[str] = None) -> "SwapOutcome":
        return cls(success=False, message=message)


@dataclass
class SwapContext:
    """
    Everything the swap form components read and write.

    One instance is owned by a session and handed explicitly to the
    converter, the debounce controller, the orchestrator and the pair-swap
    controller.
    """

    catalog: "PriceCatalog"
    intent: SwapIntent = field(default_factory=SwapIntent)
    state: SwapState = field(default_factory=SwapState.idle)
    state_history: List[StateTransition] = field(default_factory=list)
    price_loading: bool = False

    @property
    def status(self) -> SwapStatus:
        return self.state.status
