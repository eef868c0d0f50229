"""
Financial series services: one SeriesService per table.

CSV imports here are all-or-nothing on symbols: if any symbol is missing
from stock_info nothing is written. Numbers use '.' as decimal mark and
dates may be ISO or DD/MM/YYYY.
"""

from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.models.financials import StockAssets, StockDaily, StockEPS, StockMetrics, StockPE
from hc_stock.services.exceptions import InvalidInputError
from hc_stock.services.series_service import SeriesService
from hc_stock.utils.csv_import import read_csv_rows, require_columns
from hc_stock.utils.logger import get_logger
from hc_stock.utils.parsing import parse_date, parse_plain_number

logger = get_logger(__name__)


class FinancialSeriesService(SeriesService):
    required_fields: tuple = ()

    async def import_csv(self, db: AsyncSession, data: bytes) -> Dict[str, Any]:
        """
        Raises:
            InvalidInputError: empty file, missing columns, bad rows or unknown symbols
        """
        rows = read_csv_rows(data)
        if not rows:
            raise InvalidInputError("File CSV không có dữ liệu hợp lệ")
        require_columns(rows, ["symbol", "date", *self.required_fields])

        records: List[Dict[str, Any]] = []
        errors: List[str] = []
        for index, raw in enumerate(rows, start=1):
            symbol = raw.get("symbol", "").upper()
            if not symbol:
                errors.append(f"Dòng {index}: thiếu symbol")
                continue
            try:
                day = parse_date(raw.get("date"))
            except ValueError as e:
                errors.append(f"Dòng {index}: {e}")
                continue

            record: Dict[str, Any] = {"symbol": symbol, "date": day}
            for field in self.value_fields():
                if field in raw:
                    record[field] = parse_plain_number(raw[field])
            missing = [f for f in self.required_fields if record.get(f) is None]
            if missing:
                errors.append(f"Dòng {index}: thiếu dữ liệu bắt buộc ({', '.join(missing)})")
                continue
            records.append(record)

        if errors:
            logger.warning(f"{self.label} CSV import rejected: {len(errors)} invalid rows")
            raise InvalidInputError("File CSV có dòng không hợp lệ", extra={"errors": errors})

        symbols = sorted({r["symbol"] for r in records})
        known = await self.existing_symbols(db, symbols)
        invalid = [s for s in symbols if s not in known]
        if invalid:
            logger.warning(f"{self.label} CSV import rejected: unknown symbols {invalid}")
            raise InvalidInputError(
                "Một số symbol không tồn tại trong hệ thống",
                extra={"invalidSymbols": invalid},
            )

        imported = await self.upsert_rows(db, records)
        logger.info(f"{self.label} CSV import: {imported} rows upserted")
        return {"message": f"Đã import {imported} mục thành công", "importedCount": imported}


class StockDailyService(FinancialSeriesService):
    model = StockDaily
    label = "stock_daily"
    required_fields = ("close_price",)


class StockAssetsService(FinancialSeriesService):
    model = StockAssets
    label = "stock_assets"


class StockMetricsService(FinancialSeriesService):
    model = StockMetrics
    label = "stock_metrics"


class StockEPSService(FinancialSeriesService):
    model = StockEPS
    label = "stock_eps"


class StockPEService(FinancialSeriesService):
    model = StockPE
    label = "stock_pe"
