from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import date_range
from hc_stock.database.config import get_db
from hc_stock.services.chart_service import ChartService

router = APIRouter(prefix="/charts", tags=["charts"])
service = ChartService()


@router.get("/{symbol}/price")
async def price_chart(
    symbol: str,
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Candlestick points, band/trend/FQ lines, QV1 histogram and the visible
    range. Without startDate/endDate every stored row is used.
    """
    start = end = None
    if startDate or endDate:
        start, end = await date_range(startDate, endDate)
    return await service.price(db, symbol, start, end)


@router.get("/{symbol}/{kind}")
async def financial_chart(
    symbol: str,
    kind: Literal["metrics", "assets", "eps", "pe"],
    db: AsyncSession = Depends(get_db),
):
    """Quarter labels with one dataset per series; missing values plot as 0"""
    return await service.financial(db, symbol, kind)
