from fastapi import APIRouter, Request
from typing import Dict, Any

router = APIRouter()


@router.get("/healthz")
async def health_check(request: Request) -> Dict[str, Any]:
    """Health check endpoint that verifies the price source and the loaded catalog"""

    price_provider = request.app.state.price_provider
    catalog = request.app.state.catalog

    provider_status = {price_provider.name: await price_provider.health_check()}

    source_healthy = all(
        status["status"] == "healthy"
        for status in provider_status.values()
    )

    return {
        "status": "healthy" if source_healthy and len(catalog) > 0 else "degraded",
        "providers": provider_status,
        "catalog_size": len(catalog),
    }
