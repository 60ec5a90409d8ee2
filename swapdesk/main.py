import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import health, prices, swap
from .config import settings
from .core.swap import PriceCatalog, PriceSourceError, SimulatedSwapExecutor, SwapExecutor
from .logging_config import setup_logging
from .middleware.logging_middleware import RequestLoggingMiddleware
from .providers.base import PriceProvider
from .providers.switcheo import SwitcheoPriceProvider

logger = logging.getLogger(__name__)


def create_app(
    price_provider: Optional[PriceProvider] = None,
    executor: Optional[SwapExecutor] = None,
) -> FastAPI:
    """Application factory.

    Tests pass their own price provider and executor; the defaults fetch the
    configured price list and simulate execution.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The catalog is fetched once per process and refreshed only on request
        try:
            records = await app.state.price_provider.fetch_prices()
            app.state.catalog = PriceCatalog.from_records(records)
            logger.info(f"Loaded {len(app.state.catalog)} currencies")
        except PriceSourceError as e:
            logger.error(f"Error fetching token prices: {e.message}")
        yield
        await app.state.price_provider.close()

    app = FastAPI(
        title="SwapDesk API",
        description="Currency swap form backend: live quotes and simulated swaps",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.price_provider = price_provider or SwitcheoPriceProvider()
    app.state.executor = executor or SimulatedSwapExecutor()
    app.state.catalog = PriceCatalog.empty()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router, tags=["Health"])
    app.include_router(prices.router, tags=["Prices"])
    app.include_router(swap.router, tags=["Swap"])

    @app.get("/")
    async def root():
        """Root endpoint with basic info"""
        return {
            "name": "SwapDesk API",
            "version": "0.1.0",
            "currencies": len(app.state.catalog),
            "docs": "/docs",
            "health": "/healthz",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    setup_logging()
    uvicorn.run(
        "swapdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
