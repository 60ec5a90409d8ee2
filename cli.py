#!/usr/bin/env python3
"""Simple CLI for trying the swap form locally"""

import argparse
import asyncio

from swapdesk.config import settings
from swapdesk.core.session import SwapSession
from swapdesk.core.swap import PriceCatalog, PriceSourceError, SwapStatus, convert, exchange_rate
from swapdesk.logging_config import setup_logging
from swapdesk.providers.switcheo import SwitcheoPriceProvider


async def _load_catalog() -> PriceCatalog:
    provider = SwitcheoPriceProvider()
    try:
        records = await provider.fetch_prices()
    finally:
        await provider.close()
    return PriceCatalog.from_records(records)


async def cli_prices():
    """Print the current price list"""
    print(f"🔄 Fetching prices from {settings.price_source_url}...")
    catalog = await _load_catalog()

    print(f"\n{len(catalog)} currencies")
    print("-" * 40)
    for quote in sorted(catalog, key=lambda q: q.symbol):
        print(f"{quote.symbol:<12} {quote.unit_price:>24,f}")


async def cli_quote(sell: str, buy: str, amount: str):
    """Print what `amount` of `sell` buys"""
    catalog = await _load_catalog()
    buy_amount = convert(sell, buy, amount, catalog, decimals=settings.amount_max_decimals)
    if not buy_amount:
        missing = [s for s in (sell, buy) if s not in catalog]
        if missing:
            print(f"❌ No price for: {', '.join(missing)}")
        else:
            print(f"❌ Not a number: {amount}")
        return

    rate = exchange_rate(sell, buy, catalog)
    print(f"{amount} {sell} = {buy_amount} {buy}")
    print(f"Rate: 1 {sell} = {rate:f} {buy}")


async def cli_swap(sell: str, buy: str, amount: str, flip: bool = False):
    """Drive a full swap session: select, type, optionally flip, submit, wait for reset"""
    async with SwapSession() as session:
        if not session.catalog:
            print("❌ No prices available")
            return

        session.select_sell(sell)
        session.select_buy(buy)
        for i in range(1, len(amount) + 1):
            session.edit_sell_amount(amount[:i])

        await asyncio.sleep(settings.debounce_seconds + 0.05)
        print(f"💱 {session.sell_amount} {sell} → {session.buy_amount or '?'} {buy}")

        if flip:
            await session.swap_pair()
            await asyncio.sleep(settings.debounce_seconds + 0.05)
            print(f"🔁 Flipped: {session.sell_amount} {session.intent.sell_symbol} → "
                  f"{session.buy_amount or '?'} {session.intent.buy_symbol}")

        print("⏳ Swapping...")
        state = await session.submit()

        if state.status == SwapStatus.SUCCEEDED:
            print(f"✅ {session.banner}")
            await asyncio.sleep(settings.success_reset_seconds + 0.05)
            print(f"Form reset: status={session.status.value}, sell='{session.sell_amount}', buy='{session.buy_amount}'")
        else:
            print(f"❌ {session.banner}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SwapDesk CLI")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("prices", help="List tradable currencies and prices")

    quote_parser = subparsers.add_parser("quote", help="Convert an amount between two currencies")
    quote_parser.add_argument("sell", help="Currency to sell")
    quote_parser.add_argument("buy", help="Currency to buy")
    quote_parser.add_argument("amount", help="Amount of the sell currency")

    swap_parser = subparsers.add_parser("swap", help="Run a simulated swap")
    swap_parser.add_argument("sell", help="Currency to sell")
    swap_parser.add_argument("buy", help="Currency to buy")
    swap_parser.add_argument("amount", help="Amount of the sell currency")
    swap_parser.add_argument("--flip", action="store_true", help="Flip the pair before submitting")

    subparsers.add_parser("serve", help="Run the HTTP API")

    return parser


async def main(args: argparse.Namespace):
    command = args.command.lower()

    try:
        if command == "prices":
            await cli_prices()

        elif command == "quote":
            await cli_quote(args.sell, args.buy, args.amount)

        elif command == "swap":
            await cli_swap(args.sell, args.buy, args.amount, flip=args.flip)

    except PriceSourceError as e:
        print(f"❌ Error: {e.message}")


def run():
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)

    if args.command == "serve":
        import uvicorn
        uvicorn.run("swapdesk.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
        return

    asyncio.run(main(args))


if __name__ == "__main__":
    run()
