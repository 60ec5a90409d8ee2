"""
Swap Form Core

Amount sanitizing, rate conversion, debounced recompute and the state
machines behind submitting a swap and flipping the pair.
"""

from .catalog import PriceCatalog, quote_from_record
from .converter import convert, exchange_rate, parse_amount
from .debounce import DebouncedRecompute
from .errors import (
    DataUnavailable,
    ExecutionFailure,
    InvalidTransitionError,
    PriceSourceError,
    SwapError,
    ValidationError,
)
from .executors import SimulatedSwapExecutor, SwapExecutor
from .models import (
    CurrencyQuote,
    StateTransition,
    SwapContext,
    SwapIntent,
    SwapOutcome,
    SwapState,
    SwapStatus,
)
from .orchestrator import SwapOrchestrator, validate_intent
from .pair import PairSwapController, swap_pair
from .sanitizer import is_valid_amount, sanitize

__all__ = [
    # Catalog
    "PriceCatalog",
    "quote_from_record",
    # Pure functions
    "sanitize",
    "is_valid_amount",
    "convert",
    "exchange_rate",
    "parse_amount",
    "swap_pair",
    "validate_intent",
    # Controllers
    "DebouncedRecompute",
    "SwapOrchestrator",
    "PairSwapController",
    # Execution
    "SwapExecutor",
    "SimulatedSwapExecutor",
    # Models
    "CurrencyQuote",
    "SwapIntent",
    "SwapStatus",
    "SwapState",
    "SwapOutcome",
    "SwapContext",
    "StateTransition",
    # Errors
    "SwapError",
    "ValidationError",
    "ExecutionFailure",
    "DataUnavailable",
    "PriceSourceError",
    "InvalidTransitionError",
]
