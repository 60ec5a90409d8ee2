"""
Swap Errors

Error types raised by the swap form core. Each error records whether the
user can simply try again.
"""

from typing import Optional

from .models import SwapStatus


FILL_ALL_FIELDS = "Please fill in all fields."
INVALID_NUMBER = "Please enter a valid number."
TRANSACTION_FAILED = "Transaction failed. Please try again."
UNEXPECTED_ERROR = "An error occurred. Please try again."


class SwapError(Exception):
    """Base class for swap form errors."""

    recoverable: bool = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SwapError):
    """
    The intent is incomplete or malformed.

    Surfaced immediately and never retried automatically. Blocks entry into
    the submitting state.
    """

    recoverable = False


class ExecutionFailure(SwapError):
    """The execution collaborator reported failure or faulted."""

    def __init__(self, message: str = TRANSACTION_FAILED, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DataUnavailable(SwapError):
    """The catalog is empty or does not list a requested symbol."""

    def __init__(self, symbol: str, message: Optional[str] = None):
        super().__init__(message or f"No price available for '{symbol}'")
        self.symbol = symbol


class PriceSourceError(SwapError):
    """The price source could not be fetched or decoded."""


class InvalidTransitionError(SwapError):
    """Raised when the swap state machine is asked for an illegal move."""

    recoverable = False

    def __init__(
        self,
        from_state: SwapStatus,
        to_state: SwapStatus,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"Invalid transition from {from_state.value} to {to_state.value}"
        )
        self.from_state = from_state
        self.to_state = to_state
