"""
Chart data shaping.

Price charts (candlestick + indicator lines + QV1 histogram) drop points
whose value is missing or not finite. Financial bar/line charts keep every
period and plot missing values as 0.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.services.financial_service import (
    StockAssetsService,
    StockEPSService,
    StockMetricsService,
    StockPEService,
)
from hc_stock.services.stock_info_service import StockInfoService
from hc_stock.services.stock_service import StockService
from hc_stock.utils.parsing import parse_date, safe_float

UP_COLOR = "#26a69a"
DOWN_COLOR = "#ef5350"

PRICE_LINES: List[Tuple[str, str]] = [
    ("band_dow", "#ef5350"),
    ("band_up", "#26a69a"),
    ("trend_q", "#2196F3"),
    ("fq", "#FF9800"),
]

# (field, label, colour) per financial chart
FINANCIAL_CHARTS: Dict[str, List[Tuple[str, str, str]]] = {
    "metrics": [
        ("roa", "ROA", "#26a69a"),
        ("roe", "ROE", "#42a5f5"),
        ("tb_roa_nganh", "TB ROA Ngành", "#ef5350"),
        ("tb_roe_nganh", "TB ROE Ngành", "#ff9800"),
    ],
    "assets": [
        ("tts", "TTS", "#26a69a"),
        ("vcsh", "VCSH", "#42a5f5"),
        ("tb_tts_nganh", "TB TTS Ngành", "#ef5350"),
    ],
    "eps": [
        ("eps", "EPS", "#26a69a"),
        ("eps_nganh", "EPS Ngành", "#ef5350"),
    ],
    "pe": [
        ("pe", "P/E", "#42a5f5"),
        ("pe_nganh", "P/E Ngành", "#ff9800"),
    ],
}


def _get(row: Any, field: str) -> Any:
    if isinstance(row, dict):
        return row.get(field)
    return getattr(row, field, None)


def chart_time(value: Any) -> str:
    """YYYY-MM-DD"""
    return parse_date(value).isoformat()


def quarter_label(value: Any) -> str:
    day = parse_date(value)
    return f"Q{(day.month - 1) // 3 + 1}/{day.year}"


def sort_by_date(rows: Sequence[Any]) -> List[Any]:
    return sorted(rows, key=lambda r: parse_date(_get(r, "date")))


def candlestick_points(rows: Sequence[Any]) -> List[Dict[str, Any]]:
    points = []
    for row in sort_by_date(rows):
        ohlc = [safe_float(_get(row, f)) for f in ("open", "high", "low", "close")]
        if any(v is None for v in ohlc):
            continue
        open_, high, low, close = ohlc
        points.append({"time": chart_time(_get(row, "date")), "open": open_, "high": high, "low": low, "close": close})
    return points


def line_points(rows: Sequence[Any], field: str) -> List[Dict[str, Any]]:
    points = []
    for row in sort_by_date(rows):
        value = safe_float(_get(row, field))
        if value is None:
            continue
        points.append({"time": chart_time(_get(row, "date")), "value": value})
    return points


def histogram_points(rows: Sequence[Any], field: str = "qv1") -> List[Dict[str, Any]]:
    """Bars coloured green above zero, red otherwise"""
    points = []
    for row in sort_by_date(rows):
        value = safe_float(_get(row, field))
        if value is None:
            continue
        points.append({
            "time": chart_time(_get(row, "date")),
            "value": value,
            "color": UP_COLOR if value > 0 else DOWN_COLOR,
        })
    return points


def visible_range(rows: Sequence[Any]) -> Optional[Dict[str, str]]:
    """First and last candle dates; rows without a full OHLC set are not drawn"""
    candles = candlestick_points(rows)
    if not candles:
        return None
    return {"from": candles[0]["time"], "to": candles[-1]["time"]}


def price_chart(rows: Sequence[Any]) -> Dict[str, Any]:
    return {
        "candlestick": candlestick_points(rows),
        "lines": [
            {"field": field, "color": color, "data": line_points(rows, field)}
            for field, color in PRICE_LINES
        ],
        "histogram": histogram_points(rows, "qv1"),
        "visibleRange": visible_range(rows),
    }


def financial_chart(rows: Sequence[Any], series: Sequence[Tuple[str, str, str]]) -> Dict[str, Any]:
    ordered = sort_by_date(rows)
    return {
        "labels": [quarter_label(_get(r, "date")) for r in ordered],
        "datasets": [
            {
                "label": label,
                "field": field,
                "color": color,
                "data": [safe_float(_get(r, field)) or 0.0 for r in ordered],
            }
            for field, label, color in series
        ],
    }


class ChartService:
    """Loads a symbol's rows and shapes them for the chart widgets"""

    def __init__(self):
        self.stock_info = StockInfoService()
        self.prices = StockService()
        self.series = {
            "metrics": StockMetricsService(),
            "assets": StockAssetsService(),
            "eps": StockEPSService(),
            "pe": StockPEService(),
        }

    async def price(
        self,
        db: AsyncSession,
        symbol: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, Any]:
        info = await self.stock_info.get_by_symbol(db, symbol)
        if start and end:
            rows = await self.prices.find_by_range(db, start, end, symbol=info.symbol)
        else:
            rows = await self.prices.find_by_symbol(db, info.symbol)
        return {"symbol": info.symbol, "name": info.name, **price_chart(rows)}

    async def financial(self, db: AsyncSession, symbol: str, kind: str) -> Dict[str, Any]:
        info = await self.stock_info.get_by_symbol(db, symbol)
        rows = await self.series[kind].find_by_symbol(db, info.symbol)
        return {"symbol": info.symbol, "name": info.name, **financial_chart(rows, FINANCIAL_CHARTS[kind])}
