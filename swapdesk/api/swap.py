from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from ..config import settings
from ..core.swap import (
    DataUnavailable,
    PriceCatalog,
    SwapContext,
    SwapIntent,
    SwapOrchestrator,
    SwapStatus,
    convert,
    exchange_rate,
    is_valid_amount,
)


router = APIRouter(prefix="/swap")


class SwapRequest(BaseModel):
    sell: str = Field(min_length=1, description="Symbol of the currency being sold")
    buy: str = Field(min_length=1, description="Symbol of the currency being bought")
    amount: str = Field(description="Sell amount as a decimal string")


class SwapQuoteResponse(BaseModel):
    sell: str
    buy: str
    amount: str
    rate: str
    buy_amount: str


class SwapExecuteResponse(BaseModel):
    status: str
    reason: Optional[str] = None
    reference: Optional[str] = None
    sell: str
    buy: str
    amount: str
    buy_amount: str
    transitions: List[Dict[str, Any]] = []


def _checked_intent(req: SwapRequest, catalog: PriceCatalog) -> SwapIntent:
    if not req.amount or not is_valid_amount(req.amount, max_decimals=settings.amount_max_decimals):
        raise HTTPException(
            status_code=422,
            detail=f"Amount must be a non-negative decimal with at most {settings.amount_max_decimals} decimals",
        )
    try:
        catalog.require(req.sell)
        catalog.require(req.buy)
    except DataUnavailable as e:
        raise HTTPException(status_code=404, detail=e.message)
    return SwapIntent(sell_symbol=req.sell, buy_symbol=req.buy, sell_amount=req.amount)


@router.post("/quote")
async def post_swap_quote(req: SwapRequest, request: Request) -> SwapQuoteResponse:
    catalog: PriceCatalog = request.app.state.catalog
    intent = _checked_intent(req, catalog)
    buy_amount = convert(
        intent.sell_symbol, intent.buy_symbol, intent.sell_amount, catalog,
        decimals=settings.amount_max_decimals,
    )
    if not buy_amount:
        raise HTTPException(status_code=422, detail="Amount is not a number")
    rate = exchange_rate(intent.sell_symbol, intent.buy_symbol, catalog)
    return SwapQuoteResponse(
        sell=intent.sell_symbol,
        buy=intent.buy_symbol,
        amount=intent.sell_amount,
        rate=format(rate, "f"),
        buy_amount=buy_amount,
    )


@router.post("/execute")
async def post_swap_execute(req: SwapRequest, request: Request) -> SwapExecuteResponse:
    """Run one submit through the orchestrator and report where it ended."""
    catalog: PriceCatalog = request.app.state.catalog
    intent = _checked_intent(req, catalog)
    intent.buy_amount = convert(
        intent.sell_symbol, intent.buy_symbol, intent.sell_amount, catalog,
        decimals=settings.amount_max_decimals,
    )

    context = SwapContext(catalog=catalog, intent=intent)
    orchestrator = SwapOrchestrator(
        context,
        request.app.state.executor,
        reset_delay=settings.success_reset_seconds,
    )
    try:
        state = await orchestrator.submit()
    finally:
        # No form to reset behind an HTTP call
        await orchestrator.close()

    reference = None
    if state.status == SwapStatus.SUCCEEDED:
        reference = context.state_history[-1].reason

    return SwapExecuteResponse(
        status=state.status.value,
        reason=state.reason,
        reference=reference,
        sell=intent.sell_symbol,
        buy=intent.buy_symbol,
        amount=intent.sell_amount,
        buy_amount=intent.buy_amount,
        transitions=[t.to_dict() for t in context.state_history],
    )
