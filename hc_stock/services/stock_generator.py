"""
Synthetic daily price data (random walk) for seeding stock_daily.

Each weekday opens at the previous close and moves by a uniform random
percentage in [-volatility, volatility]. High and low extend the candle
body by up to 1%.
"""

from datetime import date
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.services.exceptions import InvalidInputError
from hc_stock.services.financial_service import StockDailyService
from hc_stock.utils.logger import get_logger

logger = get_logger(__name__)

SHARES_OUTSTANDING = 1_000_000_000
VOLUME_RANGE = (500_000, 1_500_000)


def generate_daily_rows(
    symbol: str,
    start: date,
    end: date,
    initial_price: float = 80000,
    volatility: float = 0.02,
    seed: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    One row per weekday in [start, end].

    Args:
        symbol: ticker the rows belong to
        initial_price: open of the first day
        volatility: maximum absolute daily change as a fraction
        seed: makes the walk reproducible

    Returns:
        stock_daily dicts: symbol, date, open, high, low, close, volume,
        close_price, return_value (%), kldd, von_hoa
    """
    if start > end:
        raise ValueError("start must not be after end")
    if volatility < 0:
        raise ValueError("volatility must be >= 0")

    days = pd.bdate_range(start=start, end=end)
    rng = np.random.default_rng(seed)
    changes = rng.uniform(-volatility, volatility, size=len(days))
    high_ext = rng.uniform(0, 0.01, size=len(days))
    low_ext = rng.uniform(0, 0.01, size=len(days))
    volumes = rng.integers(*VOLUME_RANGE, size=len(days))

    rows = []
    previous_close = int(round(initial_price))
    for i, day in enumerate(days):
        open_ = previous_close
        close = int(round(open_ * (1 + changes[i])))
        high = int(round(max(open_, close) * (1 + high_ext[i])))
        low = int(round(min(open_, close) * (1 - low_ext[i])))
        volume = int(volumes[i])

        rows.append({
            "symbol": symbol,
            "date": day.date(),
            "open": float(open_),
            "high": float(high),
            "low": float(low),
            "close": float(close),
            "volume": volume,
            "close_price": float(close),
            "return_value": float(changes[i] * 100),
            "kldd": volume,
            "von_hoa": float(close) * SHARES_OUTSTANDING,
        })
        previous_close = close

    return rows


async def seed_daily_rows(
    db: AsyncSession,
    rows: List[Dict[str, Any]],
    batch_size: int = 100,
) -> int:
    """
    Upsert generated rows into stock_daily, committing once per batch.

    Raises:
        InvalidInputError: a row's symbol is not in stock_info
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    service = StockDailyService()
    symbols = {r["symbol"] for r in rows}
    missing = symbols - await service.existing_symbols(db, symbols)
    if missing:
        raise InvalidInputError(f"Symbol không tồn tại trong hệ thống: {', '.join(sorted(missing))}")

    total = 0
    for offset in range(0, len(rows), batch_size):
        batch = rows[offset:offset + batch_size]
        total += await service.upsert_rows(db, batch)
        logger.info(f"Inserted {total}/{len(rows)} stock_daily rows")

    return total
