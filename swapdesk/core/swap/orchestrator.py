"""
Swap Orchestrator

Drives a swap submission through submitting, succeeded and failed states,
including the timed reset that follows a successful swap.
"""

import asyncio
import dataclasses
import logging
from typing import Any, Callable, Coroutine, Dict, List, Optional, Set

from .converter import parse_amount
from .errors import (
    FILL_ALL_FIELDS,
    INVALID_NUMBER,
    TRANSACTION_FAILED,
    UNEXPECTED_ERROR,
    ExecutionFailure,
    InvalidTransitionError,
    ValidationError,
)
from .executors import SwapExecutor
from .models import StateTransition, SwapContext, SwapIntent, SwapState, SwapStatus


TransitionCallback = Callable[[StateTransition, SwapContext], Coroutine[Any, Any, None]]


def validate_intent(intent: SwapIntent) -> None:
    """Raise ValidationError unless the intent can be submitted."""
    if not intent.sell_symbol or not intent.buy_symbol or not intent.sell_amount:
        raise ValidationError(FILL_ALL_FIELDS)
    if parse_amount(intent.sell_amount) is None:
        raise ValidationError(INVALID_NUMBER)


class SwapOrchestrator:
    """
    State machine for submitting a swap.

    Features:
    - Validates transitions against allowed transition map
    - Rejects a submit while one is already in flight
    - Always leaves SUBMITTING, whatever the executor does
    - Resets the form a fixed delay after success
    """

    TRANSITIONS: Dict[SwapStatus, Set[SwapStatus]] = {
        SwapStatus.IDLE: {
            SwapStatus.SUBMITTING,
            SwapStatus.FAILED,      # Validation error
        },
        SwapStatus.SUBMITTING: {
            SwapStatus.SUCCEEDED,
            SwapStatus.FAILED,
        },
        SwapStatus.SUCCEEDED: {
            SwapStatus.IDLE,        # Automatic reset
            SwapStatus.SUBMITTING,  # Submitted again before the reset
            SwapStatus.FAILED,
        },
        SwapStatus.FAILED: {
            SwapStatus.SUBMITTING,  # Retry
            SwapStatus.FAILED,      # Another validation error
        },
    }

    def __init__(
        self,
        context: SwapContext,
        executor: SwapExecutor,
        reset_delay: float,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            context: The swap context to manage
            executor: Collaborator that performs the swap
            reset_delay: Seconds to stay in SUCCEEDED before clearing the form
            logger: Optional logger
        """
        self.context = context
        self.reset_delay = reset_delay
        self.logger = logger or logging.getLogger(__name__)
        self._executor = executor
        self._transition_callbacks: List[TransitionCallback] = []
        self._reset_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def current_state(self) -> SwapStatus:
        return self.context.status

    @property
    def is_submitting(self) -> bool:
        return self.context.state.is_submitting

    @property
    def reset_pending(self) -> bool:
        return self._reset_task is not None and not self._reset_task.done()

    def can_transition_to(self, to_state: SwapStatus) -> bool:
        return to_state in self.TRANSITIONS.get(self.current_state, set())

    def get_allowed_transitions(self) -> Set[SwapStatus]:
        return self.TRANSITIONS.get(self.current_state, set())

    def register_transition_callback(self, callback: TransitionCallback) -> None:
        """Register a callback to be called on any transition."""
        self._transition_callbacks.append(callback)

    async def transition_to(self, to_state: SwapStatus, reason: Optional[str] = None) -> StateTransition:
        """
        Move to ``to_state``.

        Raises:
            InvalidTransitionError: If transition is not allowed
        """
        from_state = self.current_state
        if not self.can_transition_to(to_state):
            raise InvalidTransitionError(
                from_state=from_state,
                to_state=to_state,
                message=f"Invalid transition from {from_state.value} to {to_state.value}. "
                        f"Allowed: {sorted(s.value for s in self.get_allowed_transitions())}",
            )

        if from_state == SwapStatus.SUCCEEDED and to_state != SwapStatus.IDLE:
            self._cancel_reset()

        transition = StateTransition(from_state=from_state, to_state=to_state, reason=reason)
        self.context.state = SwapState(
            status=to_state,
            reason=reason if to_state == SwapStatus.FAILED else None,
        )
        self.context.state_history.append(transition)

        self.logger.info(
            f"Swap {from_state.value} -> {to_state.value}"
            f"{f' ({reason})' if reason else ''}"
        )

        for callback in self._transition_callbacks:
            try:
                await callback(transition, self.context)
            except Exception as e:
                self.logger.error(f"Transition callback error: {e}")

        return transition

    async def fail(self, reason: str) -> StateTransition:
        return await self.transition_to(SwapStatus.FAILED, reason=reason)

    async def submit(self) -> SwapState:
        """
        Submit the current intent.

        Validation failures move straight to FAILED without entering
        SUBMITTING. Otherwise the executor is awaited and the machine ends
        in SUCCEEDED or FAILED.

        Raises:
            InvalidTransitionError: If a submit is already in flight
        """
        if self.is_submitting:
            raise InvalidTransitionError(
                from_state=self.current_state,
                to_state=SwapStatus.SUBMITTING,
                message="A swap is already being submitted",
            )

        try:
            validate_intent(self.context.intent)
        except ValidationError as e:
            await self.fail(e.message)
            return self.context.state

        intent = dataclasses.replace(self.context.intent)
        await self.transition_to(
            SwapStatus.SUBMITTING,
            reason=f"{intent.sell_amount} {intent.sell_symbol} -> {intent.buy_symbol}",
        )

        try:
            outcome = await self._executor.execute(intent)
            if not outcome.success:
                raise ExecutionFailure(TRANSACTION_FAILED)
        except ExecutionFailure as e:
            self.logger.warning(f"Swap execution failed: {e.message}")
            await self.fail(e.message)
        except Exception as e:
            self.logger.error(f"Swap execution raised: {e}", exc_info=True)
            await self.fail(UNEXPECTED_ERROR)
        else:
            await self.transition_to(SwapStatus.SUCCEEDED, reason=outcome.reference)
            self._schedule_reset()
        finally:
            # Cancellation is the only way to get here still submitting
            if self.is_submitting:
                await self.fail(UNEXPECTED_ERROR)

        return self.context.state

    async def close(self) -> None:
        """Cancel the pending reset; a submit that finishes later schedules none."""
        self._closed = True
        task = self._reset_task
        self._cancel_reset()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _schedule_reset(self) -> None:
        self._cancel_reset()
        if self._closed:
            self.logger.debug("Orchestrator closed; skipping form reset")
            return
        self._reset_task = asyncio.create_task(self._reset_after_delay())

    def _cancel_reset(self) -> None:
        if self._reset_task and not self._reset_task.done():
            self._reset_task.cancel()
        self._reset_task = None

    async def _reset_after_delay(self) -> None:
        await asyncio.sleep(self.reset_delay)
        if self.current_state != SwapStatus.SUCCEEDED:
            return
        self.context.intent.sell_amount = ""
        self.context.intent.buy_amount = ""
        await self.transition_to(SwapStatus.IDLE, reason="Form reset after successful swap")
