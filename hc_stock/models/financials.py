"""
Financial series ORM Models

Every table holds one row per (symbol, date):
- StockDaily: daily close snapshot with valuation ratios (also the target of
  the synthetic data generator)
- StockAssets: total assets (tts), owner equity (vcsh), industry average assets
- StockMetrics: ROA / ROE and their industry averages
- StockEPS: EPS and industry EPS
- StockPE: P/E and industry P/E
"""

from sqlalchemy import BigInteger, Column, Float

from hc_stock.database.config import Base
from hc_stock.models.mixins import SymbolDateMixin


class StockDaily(SymbolDateMixin, Base):
    __tablename__ = "stock_daily"

    # OHLCV
    open = Column(Float, nullable=True)
    high = Column(Float, nullable=True)
    low = Column(Float, nullable=True)
    close = Column(Float, nullable=True)
    volume = Column(BigInteger, nullable=True)

    close_price = Column(Float, nullable=False)
    return_value = Column(Float, nullable=True)  # daily change (%)
    kldd = Column(BigInteger, nullable=True)  # matched volume
    von_hoa = Column(Float, nullable=True)  # market capitalisation

    pe = Column(Float, nullable=True)
    roa = Column(Float, nullable=True)
    roe = Column(Float, nullable=True)
    eps = Column(Float, nullable=True)


class StockAssets(SymbolDateMixin, Base):
    __tablename__ = "stock_assets"

    tts = Column(Float, nullable=True)  # total assets
    vcsh = Column(Float, nullable=True)  # owner equity
    tb_tts_nganh = Column(Float, nullable=True)  # industry average total assets


class StockMetrics(SymbolDateMixin, Base):
    __tablename__ = "stock_metrics"

    roa = Column(Float, nullable=True)
    roe = Column(Float, nullable=True)
    tb_roa_nganh = Column(Float, nullable=True)
    tb_roe_nganh = Column(Float, nullable=True)


class StockEPS(SymbolDateMixin, Base):
    __tablename__ = "stock_eps"

    eps = Column(Float, nullable=True)
    eps_nganh = Column(Float, nullable=True)


class StockPE(SymbolDateMixin, Base):
    __tablename__ = "stock_pe"

    pe = Column(Float, nullable=True)
    pe_nganh = Column(Float, nullable=True)
