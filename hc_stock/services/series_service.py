"""
Shared CRUD for per-symbol, per-date stock tables.

StockPrice and the financial series (daily, assets, metrics, EPS, P/E) all
hold one row per (symbol, date) referencing stock_info. This base class
covers lookups, writes and upserts; subclasses pick the model and the
wording of their messages.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.types import Integer

from hc_stock.models.stock import StockInfo
from hc_stock.services.exceptions import ConflictError, InvalidInputError, NotFoundError
from hc_stock.utils.logger import get_logger
from hc_stock.utils.pagination import Pagination
from hc_stock.utils.parsing import parse_date, safe_float

logger = get_logger(__name__)

_BOOKKEEPING_COLUMNS = {"id", "symbol", "date", "created_at", "updated_at"}


class SeriesService:
    """
    Generic service over a SymbolDateMixin model.

    Subclasses set `model` and `label` (used in messages, e.g. "stock_assets").
    """

    model: Type[Any]
    label: str = "dữ liệu"

    @classmethod
    def value_fields(cls) -> List[str]:
        return [c.name for c in cls.model.__table__.columns if c.name not in _BOOKKEEPING_COLUMNS]

    @classmethod
    def coerce_values(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Keep known value columns; integers for integer columns, floats otherwise"""
        columns = cls.model.__table__.columns
        coerced = {}
        for name in cls.value_fields():
            if name not in values:
                continue
            number = safe_float(values[name])
            if number is not None and isinstance(columns[name].type, Integer):
                number = int(round(number))
            coerced[name] = number
        return coerced

    def _not_found(self, detail: str = "") -> NotFoundError:
        suffix = f" {detail}" if detail else ""
        return NotFoundError(f"Không tìm thấy dữ liệu {self.label}{suffix}")

    def _ordered(self, query):
        return query.order_by(self.model.date.desc(), self.model.symbol)

    async def _all(self, db: AsyncSession, query) -> List[Any]:
        result = await db.execute(query)
        return list(result.unique().scalars().all())

    # Reads

    async def list(self, db: AsyncSession, page: int = 1, limit: int = 10) -> Tuple[List[Any], Pagination]:
        total = (await db.execute(select(func.count(self.model.id)))).scalar_one()
        pagination = Pagination(page=page, limit=limit, total=total)
        rows = await self._all(
            db, self._ordered(select(self.model)).offset(pagination.offset).limit(pagination.limit)
        )
        return rows, pagination

    async def get(self, db: AsyncSession, row_id: int) -> Any:
        row = await db.get(self.model, row_id)
        if row is None:
            raise self._not_found()
        return row

    async def find_by_symbol(self, db: AsyncSession, symbol: str) -> List[Any]:
        query = select(self.model).where(self.model.symbol == symbol.strip().upper())
        return await self._all(db, query.order_by(self.model.date.desc()))

    async def find_by_date(self, db: AsyncSession, day: date) -> List[Any]:
        query = select(self.model).where(self.model.date == day)
        return await self._all(db, query.order_by(self.model.symbol))

    async def find_by_range(
        self,
        db: AsyncSession,
        start: date,
        end: date,
        symbol: Optional[str] = None,
        ascending: bool = False,
    ) -> List[Any]:
        if start > end:
            raise InvalidInputError("startDate phải trước hoặc bằng endDate")
        query = select(self.model).where(self.model.date.between(start, end))
        if symbol:
            query = query.where(self.model.symbol == symbol.strip().upper())
        if ascending:
            return await self._all(db, query.order_by(self.model.date.asc(), self.model.symbol))
        return await self._all(db, self._ordered(query))

    async def find_one(self, db: AsyncSession, symbol: str, day: date) -> Optional[Any]:
        result = await db.execute(
            select(self.model).where(self.model.symbol == symbol.strip().upper(), self.model.date == day)
        )
        return result.unique().scalar_one_or_none()

    async def get_one(self, db: AsyncSession, symbol: str, day: date) -> Any:
        row = await self.find_one(db, symbol, day)
        if row is None:
            raise self._not_found()
        return row

    # Writes

    async def symbol_exists(self, db: AsyncSession, symbol: str) -> bool:
        result = await db.execute(select(StockInfo.id).where(StockInfo.symbol == symbol))
        return result.first() is not None

    async def existing_symbols(self, db: AsyncSession, symbols: Iterable[str]) -> set:
        wanted = set(symbols)
        if not wanted:
            return set()
        result = await db.execute(select(StockInfo.symbol).where(StockInfo.symbol.in_(wanted)))
        return set(result.scalars().all())

    async def create(self, db: AsyncSession, symbol: str, day: date, values: Dict[str, Any]) -> Any:
        """
        Raises:
            InvalidInputError: symbol not in stock_info
            ConflictError: a row for (symbol, date) already exists
        """
        symbol = symbol.strip().upper()
        if not await self.symbol_exists(db, symbol):
            raise InvalidInputError("Symbol không tồn tại trong hệ thống")
        if await self.find_one(db, symbol, day):
            raise ConflictError(f"Dữ liệu {self.label} cho symbol và ngày này đã tồn tại")

        row = self.model(symbol=symbol, date=day, **self.coerce_values(values))
        db.add(row)
        await db.commit()
        await db.refresh(row)

        logger.info(f"Created {self.label} {symbol} {day}")
        return row

    async def update(
        self,
        db: AsyncSession,
        row_id: int,
        values: Dict[str, Any],
        symbol: Optional[str] = None,
        day: Optional[date] = None,
    ) -> Any:
        """Update value columns, and optionally move the row to another (symbol, date)"""
        row = await self.get(db, row_id)

        new_symbol = symbol.strip().upper() if symbol else row.symbol
        new_date = day or row.date
        if (new_symbol, new_date) != (row.symbol, row.date):
            if not await self.symbol_exists(db, new_symbol):
                raise InvalidInputError("Symbol không tồn tại trong hệ thống")
            clash = await self.find_one(db, new_symbol, new_date)
            if clash is not None and clash.id != row.id:
                raise ConflictError(f"Dữ liệu {self.label} cho symbol và ngày này đã tồn tại")
            row.symbol = new_symbol
            row.date = new_date

        columns = self.model.__table__.columns
        for name, value in self.coerce_values(values).items():
            if value is None and not columns[name].nullable:
                continue
            setattr(row, name, value)

        await db.commit()
        await db.refresh(row)
        return row

    async def delete(self, db: AsyncSession, row_id: int) -> None:
        row = await self.get(db, row_id)
        await db.delete(row)
        await db.commit()
        logger.info(f"Deleted {self.label} {row_id}")

    async def delete_many_by_ids(self, db: AsyncSession, ids: Sequence[int]) -> int:
        if not ids:
            raise InvalidInputError("Vui lòng cung cấp danh sách các mục cần xóa")
        result = await db.execute(delete(self.model).where(self.model.id.in_(list(ids))))
        await db.commit()
        logger.info(f"Deleted {result.rowcount} {self.label} rows by id")
        return result.rowcount

    async def delete_many_by_items(self, db: AsyncSession, items: Sequence[Tuple[str, date]]) -> int:
        """Delete rows matching any of the given (symbol, date) pairs"""
        if not items:
            raise InvalidInputError("Danh sách items không hợp lệ")
        conditions = [
            and_(self.model.symbol == symbol.strip().upper(), self.model.date == day)
            for symbol, day in items
        ]
        result = await db.execute(delete(self.model).where(or_(*conditions)))
        await db.commit()
        logger.info(f"Deleted {result.rowcount} {self.label} rows by symbol/date")
        return result.rowcount

    async def upsert_rows(self, db: AsyncSession, rows: Sequence[Dict[str, Any]], commit: bool = True) -> int:
        """
        Insert or update rows keyed on (symbol, date).

        Each row needs "symbol" and "date"; other keys are value columns.
        Rows repeated within the batch collapse onto the last occurrence.
        """
        pending: Dict[Tuple[str, date], Any] = {}
        for data in rows:
            key = (data["symbol"], data["date"])
            values = self.coerce_values(data)

            row = pending.get(key)
            if row is None:
                row = await self.find_one(db, *key)
            if row is None:
                row = self.model(symbol=key[0], date=key[1])
                db.add(row)
            for name, value in values.items():
                setattr(row, name, value)
            pending[key] = row

        if commit:
            await db.commit()
        return len(pending)

    @staticmethod
    def parse_day(value: Any) -> date:
        try:
            return parse_date(value)
        except ValueError as e:
            raise InvalidInputError(str(e)) from None
