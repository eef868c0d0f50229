"""
Stock ORM Models

- StockInfo: listed company master data (symbol, name)
- StockPrice: daily OHLC with the derived indicators plotted on price charts
  (band_dow/band_up channel, trend_q, fq, qv1)
"""

from sqlalchemy import BigInteger, Column, Float, Integer, String, Text

from hc_stock.database.config import Base
from hc_stock.models.mixins import SerializerMixin, SymbolDateMixin


class StockInfo(SerializerMixin, Base):
    __tablename__ = "stock_info"

    id = Column(Integer, primary_key=True, index=True)
    symbol = Column(String(20), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<StockInfo {self.symbol} {self.name}>"


class StockPrice(SymbolDateMixin, Base):
    __tablename__ = "stocks"

    # OHLC data
    open = Column(Float, nullable=True)
    high = Column(Float, nullable=True)
    low = Column(Float, nullable=True)
    close = Column(Float, nullable=True)

    # Indicators (computed upstream, stored as delivered)
    band_dow = Column(Float, nullable=True)
    band_up = Column(Float, nullable=True)
    trend_q = Column(Float, nullable=True)
    fq = Column(Float, nullable=True)
    qv1 = Column(BigInteger, nullable=True)
