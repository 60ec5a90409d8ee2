"""
Tests for the debounced buy amount recompute
"""

import asyncio
from typing import List

import pytest

from swapdesk.core.swap import DebouncedRecompute, PriceCatalog, SwapContext, SwapIntent, convert


DELAY = 0.05


@pytest.fixture
def context() -> SwapContext:
    catalog = PriceCatalog.from_records([
        {"currency": "USD", "price": 1.0},
        {"currency": "ETH", "price": 3000.0},
    ])
    return SwapContext(catalog=catalog, intent=SwapIntent(sell_symbol="USD", buy_symbol="ETH"))


class RecordingConverter:
    """Wraps convert() and remembers the amounts it was called with."""

    def __init__(self):
        self.amounts: List[str] = []

    def __call__(self, sell, buy, amount, catalog):
        self.amounts.append(amount)
        return convert(sell, buy, amount, catalog)


class TestDebouncedRecompute:
    """Tests for DebouncedRecompute."""

    @pytest.mark.asyncio
    async def test_rapid_edits_convert_once_with_last_value(self, context):
        """Edits "1", "12", "123" inside the window give one conversion of "123"."""
        converter = RecordingConverter()
        debounce = DebouncedRecompute(context, delay=DELAY, converter=converter)

        for value in ("1", "12", "123"):
            context.intent.sell_amount = value
            debounce.schedule()

        assert context.price_loading is True
        assert debounce.pending is True

        await asyncio.sleep(DELAY * 3)

        assert converter.amounts == ["123"]
        assert context.intent.buy_amount == "0.041000"
        assert context.price_loading is False
        assert debounce.pending is False

    @pytest.mark.asyncio
    async def test_restart_pushes_the_timer_back(self, context):
        converter = RecordingConverter()
        debounce = DebouncedRecompute(context, delay=DELAY, converter=converter)

        context.intent.sell_amount = "1"
        debounce.schedule()
        await asyncio.sleep(DELAY * 0.6)

        context.intent.sell_amount = "2"
        debounce.schedule()
        await asyncio.sleep(DELAY * 0.6)
        assert converter.amounts == []

        await asyncio.sleep(DELAY * 2)
        assert converter.amounts == ["2"]

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_recompute(self, context):
        converter = RecordingConverter()
        debounce = DebouncedRecompute(context, delay=DELAY, converter=converter)

        context.intent.sell_amount = "5"
        debounce.schedule()
        debounce.cancel()

        assert context.price_loading is False
        await asyncio.sleep(DELAY * 2)
        assert converter.amounts == []
        assert context.intent.buy_amount == ""

    @pytest.mark.asyncio
    async def test_close_prevents_stale_update(self, context):
        converter = RecordingConverter()
        debounce = DebouncedRecompute(context, delay=DELAY, converter=converter)

        context.intent.sell_amount = "5"
        debounce.schedule()
        await debounce.close()
        await asyncio.sleep(DELAY * 2)

        assert converter.amounts == []
        assert context.price_loading is False

    @pytest.mark.asyncio
    async def test_converter_error_clears_buy_amount(self, context):
        def broken(*args):
            raise RuntimeError("boom")

        debounce = DebouncedRecompute(context, delay=0, converter=broken)
        context.intent.sell_amount = "5"
        context.intent.buy_amount = "stale"
        debounce.schedule()
        await asyncio.sleep(0.02)

        assert context.intent.buy_amount == ""
        assert context.price_loading is False

    def test_recompute_now(self, context):
        debounce = DebouncedRecompute(context, delay=DELAY)
        context.intent.sell_amount = "3000"
        assert debounce.recompute_now() == "1.000000"
        assert context.intent.buy_amount == "1.000000"

    @pytest.mark.asyncio
    async def test_schedule_after_close_does_nothing(self, context):
        converter = RecordingConverter()
        debounce = DebouncedRecompute(context, delay=0, converter=converter)
        await debounce.close()

        context.intent.sell_amount = "3000"
        debounce.schedule()
        await asyncio.sleep(0.02)

        assert debounce.pending is False
        assert context.price_loading is False
        assert converter.amounts == []
