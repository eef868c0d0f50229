from datetime import date
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.models.stock import StockPrice
from hc_stock.services.exceptions import InvalidInputError
from hc_stock.services.series_service import SeriesService
from hc_stock.utils.csv_import import read_csv_rows
from hc_stock.utils.logger import get_logger
from hc_stock.utils.parsing import parse_vn_date, parse_vn_number

logger = get_logger(__name__)


class StockService(SeriesService):
    """OHLC prices with the derived indicators (bands, trend Q, FQ, QV1)"""

    model = StockPrice
    label = "stock"

    async def find_by_id_and_range(self, db: AsyncSession, row_id: int, start: date, end: date) -> List[StockPrice]:
        """
        Rows for the symbol of row `row_id` within [start, end], oldest first.

        Raises:
            NotFoundError: no row with that id
        """
        anchor = await db.get(StockPrice, row_id)
        if anchor is None:
            raise self._not_found("với ID cung cấp")
        return await self.find_by_range(db, start, end, symbol=anchor.symbol, ascending=True)

    async def import_csv(self, db: AsyncSession, data: bytes) -> Dict[str, Any]:
        """
        Import a spreadsheet export: DD/MM/YYYY dates and Vietnamese numbers.

        Rows with unknown symbols or bad dates are reported and skipped;
        valid rows are upserted on (symbol, date).

        Raises:
            InvalidInputError: no valid row in the file
        """
        rows = read_csv_rows(data)
        known = await self.existing_symbols(db, {r.get("symbol", "").upper() for r in rows})

        valid: List[Dict[str, Any]] = []
        errors: List[Dict[str, Any]] = []
        for index, raw in enumerate(rows, start=1):
            symbol = raw.get("symbol", "").upper()
            if not symbol or symbol not in known:
                errors.append({"row": index, "message": f"Symbol '{raw.get('symbol', '')}' không tồn tại trong hệ thống"})
                continue
            if not raw.get("date"):
                errors.append({"row": index, "message": "Ngày không hợp lệ"})
                continue
            try:
                day = parse_vn_date(raw["date"])
            except ValueError as e:
                errors.append({"row": index, "message": str(e)})
                continue

            record: Dict[str, Any] = {"symbol": symbol, "date": day}
            for field in self.value_fields():
                if field in raw:
                    record[field] = parse_vn_number(raw[field])
            valid.append(record)

        if not valid:
            logger.warning(f"Stock CSV import rejected: {len(errors)} invalid rows")
            raise InvalidInputError("Không có dữ liệu hợp lệ để import", extra={"errors": errors})

        imported = await self.upsert_rows(db, valid)
        logger.info(f"Stock CSV import: {imported} rows upserted, {len(errors)} rows skipped")
        return {
            "message": f"Đã import {imported} mục dữ liệu stock thành công",
            "importedCount": imported,
            "errors": errors,
        }
