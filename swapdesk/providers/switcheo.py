import httpx
from typing import Any, Dict, List, Optional
from ..config import settings
from ..core.swap.errors import PriceSourceError
from .base import PriceProvider


class SwitcheoPriceProvider(PriceProvider):
    """Price list served as a flat JSON array of {currency, date, price} records"""

    name = "switcheo"

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        timeout_s: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.price_source_url
        self.timeout_s = timeout_s or settings.request_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout_s)

    async def ready(self) -> bool:
        return bool(self.url)

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {
                "status": "unavailable",
                "reason": "No price source configured"
            }

        try:
            async with self._client() as client:
                response = await client.get(self.url)
                response.raise_for_status()
                return {"status": "healthy", "latency_ms": int(response.elapsed.total_seconds() * 1000)}
        except Exception as e:
            return {"status": "error", "reason": str(e)}

    async def fetch_prices(self) -> List[Dict[str, Any]]:
        """Fetch the price list; raises PriceSourceError on transport or shape problems"""
        try:
            async with self._client() as client:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise PriceSourceError(f"Failed to fetch prices from {self.url}: {e}") from e
        except ValueError as e:
            raise PriceSourceError(f"Price source returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise PriceSourceError(f"Expected a JSON array from {self.url}, got {type(data).__name__}")

        return [record for record in data if isinstance(record, dict)]
