"""
SQLAlchemy ORM Models

- User, Category, Post, Media: content management
- StockInfo, StockPrice: company master data and OHLC with indicators
- StockDaily, StockAssets, StockMetrics, StockEPS, StockPE: financial series
"""

from hc_stock.models.user import User, ROLES
from hc_stock.models.category import Category
from hc_stock.models.post import Post
from hc_stock.models.media import Media
from hc_stock.models.stock import StockInfo, StockPrice
from hc_stock.models.financials import StockDaily, StockAssets, StockMetrics, StockEPS, StockPE

__all__ = [
    "User",
    "ROLES",
    "Category",
    "Post",
    "Media",
    "StockInfo",
    "StockPrice",
    "StockDaily",
    "StockAssets",
    "StockMetrics",
    "StockEPS",
    "StockPE",
]
