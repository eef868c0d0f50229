#!/usr/bin/env python3
"""
Seed stock_daily with a synthetic random walk

Usage:
    python scripts/generate_stock_data.py --symbol VNM --years 5 --batch-size 100

The symbol must already exist in stock_info. Existing (symbol, date) rows
are overwritten.
"""
import argparse
import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

load_dotenv()

from hc_stock.database.config import AsyncSessionLocal, check_connection  # noqa: E402
from hc_stock.services.exceptions import ServiceError  # noqa: E402
from hc_stock.services.stock_generator import generate_daily_rows, seed_daily_rows  # noqa: E402
from hc_stock.utils.logger import get_logger  # noqa: E402

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate random-walk daily prices for one symbol")
    parser.add_argument("--symbol", default="VNM", help="Ticker present in stock_info")
    parser.add_argument("--years", type=int, default=5, help="History length ending today")
    parser.add_argument("--batch-size", type=int, default=100, help="Rows per commit")
    parser.add_argument("--initial-price", type=float, default=80000)
    parser.add_argument("--volatility", type=float, default=0.02)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible walk")
    return parser.parse_args(argv)


async def main(args: argparse.Namespace) -> int:
    end = date.today()
    start = end - timedelta(days=365 * args.years)
    symbol = args.symbol.strip().upper()

    rows = generate_daily_rows(
        symbol,
        start,
        end,
        initial_price=args.initial_price,
        volatility=args.volatility,
        seed=args.seed,
    )
    logger.info(f"Generated {len(rows)} rows for {symbol} ({start} to {end})")

    await check_connection()
    async with AsyncSessionLocal() as db:
        try:
            total = await seed_daily_rows(db, rows, batch_size=args.batch_size)
        except ServiceError as e:
            logger.error(e.message)
            return 1

    logger.info(f"Data generation complete: {total} rows written")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(parse_args())))
