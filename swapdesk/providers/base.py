from abc import ABC, abstractmethod
from typing import Any, Dict, List


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class PriceProvider(Provider):
    """Provider for the tradable currency price list"""

    @abstractmethod
    async def fetch_prices(self) -> List[Dict[str, Any]]:
        """Get the raw price list as {currency, price} records"""
        pass

    async def close(self) -> None:
        """Release any held connections"""
        return None
