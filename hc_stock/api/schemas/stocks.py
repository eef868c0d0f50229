"""
Request bodies for stock_info, stocks and the financial series.

Numeric fields are optional; values are stored as sent.
"""

from datetime import date as Date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class StockInfoIn(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator("symbol", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Trường này là bắt buộc")
        return v


class SymbolDateIn(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)
    date: Date


class SymbolDateUpdate(BaseModel):
    symbol: Optional[str] = Field(None, min_length=1, max_length=20)
    date: Optional[Date] = None


class StockPriceFields(BaseModel):
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    band_dow: Optional[float] = None
    band_up: Optional[float] = None
    trend_q: Optional[float] = None
    fq: Optional[float] = None
    qv1: Optional[int] = None


class StockPriceCreate(SymbolDateIn, StockPriceFields):
    pass


class StockPriceUpdate(SymbolDateUpdate, StockPriceFields):
    pass


class StockDailyFields(BaseModel):
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    volume: Optional[int] = None
    return_value: Optional[float] = None
    kldd: Optional[int] = None
    von_hoa: Optional[float] = None
    pe: Optional[float] = None
    roa: Optional[float] = None
    roe: Optional[float] = None
    eps: Optional[float] = None


class StockDailyCreate(SymbolDateIn, StockDailyFields):
    close_price: float


class StockDailyUpdate(SymbolDateUpdate, StockDailyFields):
    close_price: Optional[float] = None


class StockAssetsFields(BaseModel):
    tts: Optional[float] = None
    vcsh: Optional[float] = None
    tb_tts_nganh: Optional[float] = None


class StockAssetsCreate(SymbolDateIn, StockAssetsFields):
    pass


class StockAssetsUpdate(SymbolDateUpdate, StockAssetsFields):
    pass


class StockMetricsFields(BaseModel):
    roa: Optional[float] = None
    roe: Optional[float] = None
    tb_roa_nganh: Optional[float] = None
    tb_roe_nganh: Optional[float] = None


class StockMetricsCreate(SymbolDateIn, StockMetricsFields):
    pass


class StockMetricsUpdate(SymbolDateUpdate, StockMetricsFields):
    pass


class StockEPSFields(BaseModel):
    eps: Optional[float] = None
    eps_nganh: Optional[float] = None


class StockEPSCreate(SymbolDateIn, StockEPSFields):
    pass


class StockEPSUpdate(SymbolDateUpdate, StockEPSFields):
    pass


class StockPEFields(BaseModel):
    pe: Optional[float] = None
    pe_nganh: Optional[float] = None


class StockPECreate(SymbolDateIn, StockPEFields):
    pass


class StockPEUpdate(SymbolDateUpdate, StockPEFields):
    pass


class DeleteIdsRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)


class SymbolDateItem(BaseModel):
    symbol: str
    date: Date


class DeleteItemsRequest(BaseModel):
    items: List[SymbolDateItem] = Field(..., min_length=1)
