import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from typing import List

from ..core.swap import PriceCatalog, PriceSourceError


router = APIRouter(prefix="/prices")
logger = logging.getLogger(__name__)


class PriceEntry(BaseModel):
    currency: str = Field(description="Currency symbol")
    price: str = Field(description="Unit price in the common reference unit, as a decimal string")


class PriceListResponse(BaseModel):
    count: int
    prices: List[PriceEntry]


def _to_response(catalog: PriceCatalog) -> PriceListResponse:
    return PriceListResponse(
        count=len(catalog),
        prices=[PriceEntry(**record) for record in catalog.to_records()],
    )


@router.get("")
async def get_prices(request: Request) -> PriceListResponse:
    return _to_response(request.app.state.catalog)


@router.post("/refresh")
async def refresh_prices(request: Request) -> PriceListResponse:
    """Re-fetch the price list and replace the catalog wholesale."""
    try:
        records = await request.app.state.price_provider.fetch_prices()
    except PriceSourceError as e:
        logger.error(f"Price refresh failed: {e.message}")
        raise HTTPException(status_code=503, detail=e.message)

    catalog = PriceCatalog.from_records(records)
    request.app.state.catalog = catalog
    return _to_response(catalog)
