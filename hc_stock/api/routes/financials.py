"""
Financial series routes

The five series share one route layout, built by make_series_router():

    GET    /                  paginated list
    GET    /symbol/{symbol}   rows of one symbol, newest first
    GET    /date/{date}       rows of one date
    GET    /range             ?startDate&endDate[&symbol]
    GET    /id/{id}
    GET    /{symbol}/{date}
    POST   /                  admin
    PUT    /{id}              admin
    DELETE /{id}              admin
    DELETE /                  admin, {"items": [{symbol, date}]} or {"ids": [...]}
    POST   /import            admin, CSV upload

Lookups that find nothing answer 404.
"""

from typing import List, Optional, Tuple, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import date_range, get_current_user, path_date, read_csv_upload, require_admin
from hc_stock.api.schemas import stocks as schemas
from hc_stock.database.config import get_db
from hc_stock.services.exceptions import NotFoundError
from hc_stock.services.financial_service import (
    FinancialSeriesService,
    StockAssetsService,
    StockDailyService,
    StockEPSService,
    StockMetricsService,
    StockPEService,
)

_KEYS = {"symbol", "date"}


def _non_empty(rows: List, message: str) -> List[dict]:
    if not rows:
        raise NotFoundError(message)
    return [r.to_dict() for r in rows]


def make_series_router(
    prefix: str,
    service: FinancialSeriesService,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    delete_by_ids: bool = False,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])
    label = service.label

    @router.get("", dependencies=[Depends(get_current_user)])
    async def list_rows(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=1000),
        db: AsyncSession = Depends(get_db),
    ):
        rows, pagination = await service.list(db, page, limit)
        return {"data": [r.to_dict() for r in rows], "pagination": pagination.to_dict()}

    @router.get("/symbol/{symbol}", dependencies=[Depends(get_current_user)])
    async def rows_by_symbol(symbol: str, db: AsyncSession = Depends(get_db)):
        rows = await service.find_by_symbol(db, symbol)
        return _non_empty(rows, f"Không tìm thấy dữ liệu {label} cho symbol này")

    @router.get("/date/{day}", dependencies=[Depends(get_current_user)])
    async def rows_by_date(day: str, db: AsyncSession = Depends(get_db)):
        rows = await service.find_by_date(db, path_date(day))
        return _non_empty(rows, f"Không tìm thấy dữ liệu {label} cho ngày này")

    @router.get("/range", dependencies=[Depends(get_current_user)])
    async def rows_by_range(
        dates: Tuple = Depends(date_range),
        symbol: Optional[str] = Query(None),
        db: AsyncSession = Depends(get_db),
    ):
        start, end = dates
        rows = await service.find_by_range(db, start, end, symbol)
        return _non_empty(rows, f"Không tìm thấy dữ liệu {label} trong khoảng thời gian này")

    @router.post("/import", dependencies=[Depends(require_admin)])
    async def import_rows(data: bytes = Depends(read_csv_upload), db: AsyncSession = Depends(get_db)):
        return await service.import_csv(db, data)

    @router.get("/id/{row_id}", dependencies=[Depends(get_current_user)])
    async def get_row(row_id: int, db: AsyncSession = Depends(get_db)):
        return (await service.get(db, row_id)).to_dict()

    @router.get("/{symbol}/{day}", dependencies=[Depends(get_current_user)])
    async def get_row_by_symbol_date(symbol: str, day: str, db: AsyncSession = Depends(get_db)):
        return (await service.get_one(db, symbol, path_date(day))).to_dict()

    @router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
    async def create_row(body: create_schema, db: AsyncSession = Depends(get_db)):  # type: ignore[valid-type]
        values = body.model_dump(exclude=_KEYS)
        return (await service.create(db, body.symbol, body.date, values)).to_dict()

    @router.put("/{row_id}", dependencies=[Depends(require_admin)])
    async def update_row(row_id: int, body: update_schema, db: AsyncSession = Depends(get_db)):  # type: ignore[valid-type]
        values = body.model_dump(exclude_unset=True, exclude=_KEYS)
        return (await service.update(db, row_id, values, body.symbol, body.date)).to_dict()

    @router.delete("/{row_id}", dependencies=[Depends(require_admin)])
    async def delete_row(row_id: int, db: AsyncSession = Depends(get_db)):
        await service.delete(db, row_id)
        return {"message": f"Xóa {label} thành công"}

    if delete_by_ids:
        @router.delete("", dependencies=[Depends(require_admin)])
        async def delete_rows(body: schemas.DeleteIdsRequest, db: AsyncSession = Depends(get_db)):
            deleted = await service.delete_many_by_ids(db, body.ids)
            if not deleted:
                raise NotFoundError(f"Không có dữ liệu {label} nào được tìm thấy với các ID đã cung cấp")
            return {"message": f"Đã xóa thành công {deleted} bản ghi {label}", "deletedCount": deleted}
    else:
        @router.delete("", dependencies=[Depends(require_admin)])
        async def delete_rows(body: schemas.DeleteItemsRequest, db: AsyncSession = Depends(get_db)):
            deleted = await service.delete_many_by_items(db, [(i.symbol, i.date) for i in body.items])
            return {"message": f"Đã xóa {deleted} mục thành công", "deletedCount": deleted}

    return router


stock_daily = make_series_router(
    "/stock-daily", StockDailyService(), schemas.StockDailyCreate, schemas.StockDailyUpdate, delete_by_ids=True
)
stock_assets = make_series_router(
    "/stock-assets", StockAssetsService(), schemas.StockAssetsCreate, schemas.StockAssetsUpdate
)
stock_metrics = make_series_router(
    "/stock-metrics", StockMetricsService(), schemas.StockMetricsCreate, schemas.StockMetricsUpdate
)
stock_eps = make_series_router(
    "/stock-eps", StockEPSService(), schemas.StockEPSCreate, schemas.StockEPSUpdate
)
stock_pe = make_series_router(
    "/stock-pe", StockPEService(), schemas.StockPECreate, schemas.StockPEUpdate
)

routers = [stock_daily, stock_assets, stock_metrics, stock_eps, stock_pe]
