"""
Swap Session

Owns the swap context and routes every user action through the sanitizer,
the debounced recompute, the orchestrator and the pair-swap controller.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Optional

from ..config import settings
from ..providers.base import PriceProvider
from ..providers.switcheo import SwitcheoPriceProvider
from .swap import (
    DebouncedRecompute,
    PairSwapController,
    PriceCatalog,
    PriceSourceError,
    SimulatedSwapExecutor,
    StateTransition,
    SwapContext,
    SwapExecutor,
    SwapIntent,
    SwapOrchestrator,
    SwapState,
    SwapStatus,
    convert,
    sanitize,
)

SUCCESS_BANNER = "Swap completed successfully!"


class SwapSession:
    """
    One user's swap form.

    Use as an async context manager: entering loads the price list once,
    leaving cancels every pending timer so nothing touches the intent after
    teardown.
    """

    def __init__(
        self,
        *,
        price_provider: Optional[PriceProvider] = None,
        executor: Optional[SwapExecutor] = None,
        debounce_delay: Optional[float] = None,
        reset_delay: Optional[float] = None,
        pair_latency: Optional[float] = None,
        max_decimals: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.max_decimals = settings.amount_max_decimals if max_decimals is None else max_decimals
        self.context = SwapContext(catalog=PriceCatalog.empty())

        self._price_provider = price_provider or SwitcheoPriceProvider()
        self._recompute = DebouncedRecompute(
            self.context,
            delay=settings.debounce_seconds if debounce_delay is None else debounce_delay,
            converter=partial(convert, decimals=self.max_decimals),
        )
        self._orchestrator = SwapOrchestrator(
            self.context,
            executor or SimulatedSwapExecutor(),
            reset_delay=settings.success_reset_seconds if reset_delay is None else reset_delay,
        )
        self._orchestrator.register_transition_callback(self._on_transition)
        self._pair = PairSwapController(
            latency=settings.pair_swap_latency_seconds if pair_latency is None else pair_latency,
        )
        self._submit_task: Optional[asyncio.Task] = None
        self._closed = False

    async def __aenter__(self) -> "SwapSession":
        await self.load_prices()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # =========================================================================
    # Catalog
    # =========================================================================

    @property
    def catalog(self) -> PriceCatalog:
        return self.context.catalog

    async def load_prices(self) -> PriceCatalog:
        """Fetch the price list and replace the catalog.

        A failed fetch is logged and leaves the current catalog in place.
        """
        try:
            records = await self._price_provider.fetch_prices()
        except PriceSourceError as e:
            self.logger.error(f"Error fetching token prices: {e.message}")
            return self.context.catalog

        catalog = PriceCatalog.from_records(records)
        self.logger.info(f"Loaded {len(catalog)} of {len(records)} price records")
        self.replace_catalog(catalog)
        return catalog

    def replace_catalog(self, catalog: PriceCatalog) -> None:
        self.context.catalog = catalog
        self._inputs_changed()

    # =========================================================================
    # User input
    # =========================================================================

    @property
    def intent(self) -> SwapIntent:
        return self.context.intent

    @property
    def sell_amount(self) -> str:
        return self.context.intent.sell_amount

    @property
    def buy_amount(self) -> str:
        return self.context.intent.buy_amount

    def select_sell(self, symbol: str) -> None:
        if symbol == self.context.intent.sell_symbol:
            return
        self.context.intent.sell_symbol = symbol
        self._inputs_changed()

    def select_buy(self, symbol: str) -> None:
        if symbol == self.context.intent.buy_symbol:
            return
        self.context.intent.buy_symbol = symbol
        self._inputs_changed()

    def edit_sell_amount(self, raw: str) -> str:
        """Apply a raw edit to the sell amount and return the stored value."""
        intent = self.context.intent
        if self.sell_input_locked:
            self.logger.debug("Sell amount is locked while submitting")
            return intent.sell_amount

        value = sanitize(raw, intent.sell_amount, max_decimals=self.max_decimals)
        if value != intent.sell_amount:
            intent.sell_amount = value
            self._inputs_changed()
        return intent.sell_amount

    async def submit(self) -> SwapState:
        if self._closed:
            self.logger.warning("Ignoring submit on a closed session")
            return self.context.state
        if self._submitting:
            self.logger.warning("Ignoring submit while a swap is in flight")
            return self.context.state

        task = asyncio.create_task(self._orchestrator.submit())
        self._submit_task = task
        try:
            return await task
        except asyncio.CancelledError:
            # close() abandoned the swap; the orchestrator already moved to FAILED
            if self._closed and task.cancelled():
                return self.context.state
            raise
        finally:
            if self._submit_task is task:
                self._submit_task = None

    async def swap_pair(self) -> bool:
        """Flip sell and buy. Returns True when the flip was applied."""
        if not self.swap_pair_enabled:
            return False

        flipped = await self._pair.run(self.context.intent)
        if flipped is None:
            return False
        if self._submitting:
            self.logger.warning("Discarding pair swap that landed during a submit")
            return False

        self.context.intent = flipped
        self._inputs_changed()
        return True

    # =========================================================================
    # Presentation state
    # =========================================================================

    @property
    def state(self) -> SwapState:
        return self.context.state

    @property
    def status(self) -> SwapStatus:
        return self.context.status

    @property
    def error(self) -> Optional[str]:
        return self.context.state.reason

    @property
    def price_loading(self) -> bool:
        return self.context.price_loading or self._pair.busy

    @property
    def _submitting(self) -> bool:
        # Also true in the tick between scheduling a submit and it reaching SUBMITTING
        task = self._submit_task
        return self._orchestrator.is_submitting or (task is not None and not task.done())

    @property
    def sell_input_locked(self) -> bool:
        return self._submitting

    @property
    def submit_enabled(self) -> bool:
        intent = self.context.intent
        return (
            intent.has_pair
            and bool(intent.sell_amount)
            and not self._submitting
            and not self._pair.busy
        )

    @property
    def swap_pair_enabled(self) -> bool:
        return self.context.intent.has_pair and not self._submitting

    @property
    def submit_label(self) -> str:
        intent = self.context.intent
        if self._submitting:
            return "Swapping..."
        if not intent.has_pair:
            return "Select tokens"
        if not intent.sell_amount:
            return "Enter amount"
        return "Get started"

    @property
    def banner(self) -> Optional[str]:
        if self.status == SwapStatus.SUCCEEDED:
            return SUCCESS_BANNER
        if self.status == SwapStatus.FAILED:
            return self.error
        return None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        """Cancel every pending timer and in-flight swap, then release the price provider."""
        self._closed = True
        self._pair.close()
        await self._orchestrator.close()

        task = self._submit_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._recompute.close()
        await self._price_provider.close()

    def _inputs_changed(self) -> None:
        intent = self.context.intent
        if intent.has_pair and intent.sell_amount:
            self._recompute.schedule()
        else:
            # Nothing to convert; clear the stale buy amount right away
            self._recompute.cancel()
            intent.buy_amount = ""

    async def _on_transition(self, transition: StateTransition, context: SwapContext) -> None:
        if transition.from_state == SwapStatus.SUCCEEDED and transition.to_state == SwapStatus.IDLE:
            # Amounts were just cleared by the reset
            self._recompute.cancel()
