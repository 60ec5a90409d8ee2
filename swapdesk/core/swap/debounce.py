"""
Debounced Recompute

Recomputes the buy amount once the sell/buy selection and sell amount have
stopped changing for a quiet period.
"""

import asyncio
import logging
from typing import Callable, Optional

from .catalog import PriceCatalog
from .converter import convert
from .models import SwapContext

# Same signature as converter.convert
Converter = Callable[[str, str, str, PriceCatalog], str]


class DebouncedRecompute:
    """
    Single-flight debounce around the rate converter.

    Every call to ``schedule()`` raises the context's price-loading flag and
    (re)starts one timer; only the last timer of a burst runs the converter,
    against the intent as it is when the timer fires.
    """

    def __init__(
        self,
        context: SwapContext,
        delay: float,
        converter: Converter = convert,
        logger: Optional[logging.Logger] = None,
    ):
        self.context = context
        self.delay = delay
        self._converter = converter
        self.logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self) -> None:
        """Restart the timer. Must be called from inside the event loop.

        Does nothing once close() has been called.
        """
        if self._closed:
            return
        self._cancel_task()
        self.context.price_loading = True
        self._task = asyncio.create_task(self._fire_after_delay())

    def cancel(self) -> None:
        """Drop any pending recompute and lower the loading flag."""
        self._cancel_task()
        self.context.price_loading = False

    def recompute_now(self) -> str:
        """Run the converter immediately, bypassing the timer."""
        intent = self.context.intent
        intent.buy_amount = self._converter(
            intent.sell_symbol,
            intent.buy_symbol,
            intent.sell_amount,
            self.context.catalog,
        )
        return intent.buy_amount

    async def close(self) -> None:
        self._closed = True
        task = self._task
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _cancel_task(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _fire_after_delay(self) -> None:
        await asyncio.sleep(self.delay)
        try:
            buy_amount = self.recompute_now()
            self.logger.debug(
                "Recomputed %s %s -> %s %s",
                self.context.intent.sell_amount,
                self.context.intent.sell_symbol,
                buy_amount or "-",
                self.context.intent.buy_symbol,
            )
        except Exception as e:
            self.logger.error(f"Buy amount recompute failed: {e}")
            self.context.intent.buy_amount = ""
        finally:
            self.context.price_loading = False
