"""
OHLC price rows with the derived indicators (bands, trend Q, FQ, QV1).
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import date_range, get_current_user, path_date, read_csv_upload
from hc_stock.api.schemas.stocks import DeleteIdsRequest, StockPriceCreate, StockPriceUpdate
from hc_stock.database.config import get_db
from hc_stock.services.stock_info_service import StockInfoService
from hc_stock.services.stock_service import StockService

router = APIRouter(prefix="/stocks", tags=["stocks"])
service = StockService()
stock_info = StockInfoService()

_KEYS = {"symbol", "date"}


@router.get("")
async def list_stocks(
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    rows, pagination = await service.list(db, page, limit)
    return {"data": [r.to_dict() for r in rows], "pagination": pagination.to_dict()}


@router.get("/symbols")
async def available_symbols(db: AsyncSession = Depends(get_db)):
    rows = await stock_info.list_all(db)
    return [{"symbol": r.symbol, "name": r.name} for r in rows]


@router.get("/search", dependencies=[Depends(get_current_user)])
async def search_stocks(
    q: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Ranked match on symbol then company name"""
    if not q:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Vui lòng cung cấp tham số tìm kiếm q")
    results = await stock_info.search_ranked(db, q, limit)
    return {
        "query": q,
        "results": results,
        "count": len(results),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/symbol/{symbol}")
async def stocks_by_symbol(symbol: str, db: AsyncSession = Depends(get_db)):
    return [r.to_dict() for r in await service.find_by_symbol(db, symbol)]


@router.get("/date/{day}", dependencies=[Depends(get_current_user)])
async def stocks_by_date(day: str, db: AsyncSession = Depends(get_db)):
    return [r.to_dict() for r in await service.find_by_date(db, path_date(day))]


@router.get("/range")
async def stocks_by_range(
    dates: Tuple = Depends(date_range),
    symbol: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    start, end = dates
    return [r.to_dict() for r in await service.find_by_range(db, start, end, symbol)]


@router.get("/id-range/{row_id}", dependencies=[Depends(get_current_user)])
async def stocks_by_id_range(row_id: int, dates: Tuple = Depends(date_range), db: AsyncSession = Depends(get_db)):
    """Rows of the same symbol as row `row_id` within the range, oldest first"""
    start, end = dates
    return [r.to_dict() for r in await service.find_by_id_and_range(db, row_id, start, end)]


@router.post("/import", dependencies=[Depends(get_current_user)])
async def import_stocks(data: bytes = Depends(read_csv_upload), db: AsyncSession = Depends(get_db)):
    """CSV with DD/MM/YYYY dates and Vietnamese number formatting"""
    return await service.import_csv(db, data)


@router.get("/{row_id}", dependencies=[Depends(get_current_user)])
async def get_stock(row_id: int, db: AsyncSession = Depends(get_db)):
    return (await service.get(db, row_id)).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(get_current_user)])
async def create_stock(body: StockPriceCreate, db: AsyncSession = Depends(get_db)):
    values = body.model_dump(exclude=_KEYS)
    return (await service.create(db, body.symbol, body.date, values)).to_dict()


@router.put("/{row_id}", dependencies=[Depends(get_current_user)])
async def update_stock(row_id: int, body: StockPriceUpdate, db: AsyncSession = Depends(get_db)):
    values = body.model_dump(exclude_unset=True, exclude=_KEYS)
    return (await service.update(db, row_id, values, body.symbol, body.date)).to_dict()


@router.delete("/{row_id}", dependencies=[Depends(get_current_user)])
async def delete_stock(row_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete(db, row_id)
    return {"message": "Xóa dữ liệu stock thành công"}


@router.delete("", dependencies=[Depends(get_current_user)])
async def delete_stocks(body: DeleteIdsRequest, db: AsyncSession = Depends(get_db)):
    deleted = await service.delete_many_by_ids(db, body.ids)
    return {"message": f"Đã xóa {deleted} mục dữ liệu stock thành công", "deletedCount": deleted}
