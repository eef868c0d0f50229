from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import get_current_user, read_csv_upload, require_admin
from hc_stock.api.schemas.stocks import StockInfoIn
from hc_stock.database.config import get_db
from hc_stock.services.stock_info_service import SORTABLE_COLUMNS, StockInfoService

router = APIRouter(prefix="/stock-info", tags=["stock-info"], dependencies=[Depends(get_current_user)])
service = StockInfoService()


@router.get("")
async def list_stock_info(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=1000),
    search: Optional[str] = Query(None),
    sortBy: str = Query("symbol"),
    sortOrder: str = Query("asc"),
    db: AsyncSession = Depends(get_db),
):
    sort_by = sortBy if sortBy in SORTABLE_COLUMNS else "symbol"
    sort_order = "desc" if sortOrder.lower() == "desc" else "asc"
    rows, pagination = await service.list(db, page, limit, search, sort_by, sort_order)
    return {
        "data": [r.to_dict() for r in rows],
        "pagination": pagination.to_dict(),
        "search": search or None,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }


@router.post("/import-csv", dependencies=[Depends(require_admin)])
async def import_stock_info(data: bytes = Depends(read_csv_upload), db: AsyncSession = Depends(get_db)):
    """CSV columns: symbol, name, description"""
    return await service.import_csv(db, data)


@router.get("/id/{info_id}")
async def get_stock_info(info_id: int, db: AsyncSession = Depends(get_db)):
    return (await service.get(db, info_id)).to_dict()


@router.get("/{symbol}")
async def get_stock_info_by_symbol(symbol: str, db: AsyncSession = Depends(get_db)):
    return (await service.get_by_symbol(db, symbol)).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_stock_info(body: StockInfoIn, db: AsyncSession = Depends(get_db)):
    return (await service.create(db, body.symbol, body.name, body.description)).to_dict()


@router.put("/{info_id}", dependencies=[Depends(require_admin)])
async def update_stock_info(info_id: int, body: StockInfoIn, db: AsyncSession = Depends(get_db)):
    return (await service.update(db, info_id, body.symbol, body.name, body.description)).to_dict()


@router.delete("/{info_id}", dependencies=[Depends(require_admin)])
async def delete_stock_info(info_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete(db, info_id)
    return {"message": "Xóa thông tin cổ phiếu thành công"}
