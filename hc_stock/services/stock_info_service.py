from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.models.stock import StockInfo
from hc_stock.services.exceptions import ConflictError, InvalidInputError, NotFoundError
from hc_stock.utils.csv_import import read_csv_rows
from hc_stock.utils.logger import get_logger
from hc_stock.utils.pagination import Pagination

logger = get_logger(__name__)

SORTABLE_COLUMNS = {
    "id": StockInfo.id,
    "symbol": StockInfo.symbol,
    "name": StockInfo.name,
}

MATCH_TYPES = {1: "exact", 2: "startsWith", 3: "contains", 4: "nameMatch"}


class StockInfoService:
    """Company master data keyed by ticker symbol"""

    async def list(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sort_by: str = "symbol",
        sort_order: str = "asc",
    ) -> Tuple[List[StockInfo], Pagination]:
        """
        Paginated listing; unknown sort columns fall back to symbol.
        """
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(StockInfo.symbol.ilike(pattern), StockInfo.name.ilike(pattern)))

        column = SORTABLE_COLUMNS.get(sort_by, StockInfo.symbol)
        order = column.desc() if sort_order == "desc" else column.asc()

        total = (await db.execute(select(func.count(StockInfo.id)).where(*conditions))).scalar_one()
        pagination = Pagination(page=page, limit=limit, total=total)

        result = await db.execute(
            select(StockInfo).where(*conditions).order_by(order).offset(pagination.offset).limit(limit)
        )
        return list(result.scalars().all()), pagination

    async def list_all(self, db: AsyncSession) -> List[StockInfo]:
        result = await db.execute(select(StockInfo).order_by(StockInfo.symbol))
        return list(result.scalars().all())

    async def search_ranked(self, db: AsyncSession, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Rank matches: exact symbol, symbol prefix, symbol substring, then name
        substring. Ties are broken by symbol.
        """
        term = query.strip().lower()
        if not term:
            return []

        symbol = func.lower(StockInfo.symbol)
        name = func.lower(StockInfo.name)
        priority = case(
            (symbol == term, 1),
            (symbol.like(f"{term}%"), 2),
            (symbol.like(f"%{term}%"), 3),
            (name.like(f"%{term}%"), 4),
            else_=5,
        ).label("priority")

        result = await db.execute(
            select(StockInfo.symbol, StockInfo.name, priority)
            .where(or_(symbol.like(f"%{term}%"), name.like(f"%{term}%")))
            .order_by(priority, StockInfo.symbol)
            .limit(limit)
        )
        return [
            {"symbol": row.symbol, "name": row.name, "matchType": MATCH_TYPES[row.priority]}
            for row in result.all()
        ]

    async def get(self, db: AsyncSession, info_id: int) -> StockInfo:
        info = await db.get(StockInfo, info_id)
        if info is None:
            raise NotFoundError("Không tìm thấy thông tin cổ phiếu")
        return info

    async def find_by_symbol(self, db: AsyncSession, symbol: str) -> Optional[StockInfo]:
        result = await db.execute(select(StockInfo).where(StockInfo.symbol == symbol.strip().upper()))
        return result.scalar_one_or_none()

    async def get_by_symbol(self, db: AsyncSession, symbol: str) -> StockInfo:
        info = await self.find_by_symbol(db, symbol)
        if info is None:
            raise NotFoundError("Không tìm thấy thông tin cổ phiếu")
        return info

    async def create(self, db: AsyncSession, symbol: str, name: str, description: Optional[str] = None) -> StockInfo:
        symbol = symbol.strip().upper()
        if await self.find_by_symbol(db, symbol):
            raise ConflictError(f"Mã chứng khoán {symbol} đã tồn tại")

        info = StockInfo(symbol=symbol, name=name.strip(), description=description or None)
        db.add(info)
        await db.commit()
        await db.refresh(info)

        logger.info(f"Created stock info {symbol}")
        return info

    async def update(
        self,
        db: AsyncSession,
        info_id: int,
        symbol: str,
        name: str,
        description: Optional[str] = None,
    ) -> StockInfo:
        info = await self.get(db, info_id)
        symbol = symbol.strip().upper()
        if symbol != info.symbol and await self.find_by_symbol(db, symbol):
            raise ConflictError(f"Mã chứng khoán {symbol} đã tồn tại")

        info.symbol = symbol
        info.name = name.strip()
        info.description = description or None
        await db.commit()
        await db.refresh(info)
        return info

    async def delete(self, db: AsyncSession, info_id: int) -> None:
        info = await self.get(db, info_id)
        await db.delete(info)
        await db.commit()
        logger.info(f"Deleted stock info {info.symbol}")

    async def import_csv(self, db: AsyncSession, data: bytes) -> Dict[str, Any]:
        """
        Insert companies from a symbol,name,description CSV.

        Rows without symbol or name, and symbols that already exist, are
        reported in `errors`; the rest are inserted.
        """
        rows = read_csv_rows(data)
        if not rows:
            raise InvalidInputError("File CSV không có dữ liệu")

        errors: List[Dict[str, Any]] = []
        seen = set()
        success = 0

        for index, row in enumerate(rows, start=1):
            symbol = row.get("symbol", "").upper()
            name = row.get("name", "")
            if not symbol or not name:
                errors.append({"row": index, "error": "Symbol và Name là bắt buộc", "data": row})
                continue
            if symbol in seen or await self.find_by_symbol(db, symbol):
                errors.append({"row": index, "symbol": symbol, "error": "Symbol đã tồn tại"})
                continue

            seen.add(symbol)
            db.add(StockInfo(symbol=symbol, name=name, description=row.get("description") or None))
            success += 1

        await db.commit()
        logger.info(f"Stock info import: {success}/{len(rows)} rows inserted")
        return {
            "message": "Import thành công",
            "totalCount": len(rows),
            "successCount": success,
            "errorCount": len(errors),
            "errors": errors,
        }
