"""Flip the sell/buy pair."""

import asyncio
import dataclasses
import logging
from typing import Optional

from .models import SwapIntent


def swap_pair(intent: SwapIntent) -> SwapIntent:
    """Exchange the two currencies.

    The derived buy amount becomes the new sell amount; the new buy amount is
    left blank for the next recompute.
    """
    return dataclasses.replace(
        intent,
        sell_symbol=intent.buy_symbol,
        buy_symbol=intent.sell_symbol,
        sell_amount=intent.buy_amount,
        buy_amount="",
    )


class PairSwapController:
    """Runs swap_pair() behind a short latency with a busy flag."""

    def __init__(self, latency: float, logger: Optional[logging.Logger] = None):
        self.latency = latency
        self.logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, intent: SwapIntent) -> Optional[SwapIntent]:
        """Return the flipped intent, or None when there was nothing to do.

        The intent is captured now; edits made during the latency are
        overwritten by the caller applying the result. A call made while a
        flip is already running, or after close(), is ignored.
        """
        if self._closed or not intent.has_pair:
            return None
        if self.busy:
            self.logger.debug("Pair swap already in progress; ignoring")
            return None

        snapshot = dataclasses.replace(intent)
        self._task = asyncio.create_task(asyncio.sleep(self.latency))
        try:
            await self._task
        except asyncio.CancelledError:
            if self._closed:
                return None
            raise
        finally:
            self._task = None

        if self._closed:
            return None
        return swap_pair(snapshot)

    def close(self) -> None:
        """Abandon any flip in progress; later calls to run() do nothing."""
        self._closed = True
        if self._task and not self._task.done():
            self._task.cancel()
