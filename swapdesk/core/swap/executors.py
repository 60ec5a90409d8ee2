"""Swap execution collaborators."""

from __future__ import annotations

import asyncio
import random
from typing import Optional, Protocol
from uuid import uuid4

from ...config import settings
from .models import SwapIntent, SwapOutcome


class SwapExecutor(Protocol):
    async def execute(self, intent: SwapIntent) -> SwapOutcome: ...


class SimulatedSwapExecutor:
    """Stand-in for real settlement: waits, then succeeds with a fixed probability."""

    name = "simulated"

    def __init__(
        self,
        success_rate: Optional[float] = None,
        latency: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        self.success_rate = settings.swap_success_rate if success_rate is None else success_rate
        self.latency = settings.swap_latency_seconds if latency is None else latency
        if not 0 <= self.success_rate <= 1:
            raise ValueError("success_rate must be between 0 and 1")
        self._rng = rng or random.Random()

    async def execute(self, intent: SwapIntent) -> SwapOutcome:
        await asyncio.sleep(self.latency)
        if self._rng.random() < self.success_rate:
            return SwapOutcome.succeeded(reference=f"sim-{uuid4().hex[:12]}")
        return SwapOutcome.failed("Simulated execution failure")
