from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.services.financial_service import (
    StockAssetsService,
    StockDailyService,
    StockEPSService,
    StockMetricsService,
    StockPEService,
)
from hc_stock.services.stock_info_service import StockInfoService


class ProfileService:
    """Everything known about one symbol, for the company page"""

    def __init__(self):
        self.stock_info = StockInfoService()
        self.sections = {
            "stockDaily": StockDailyService(),
            "stockEPS": StockEPSService(),
            "stockAssets": StockAssetsService(),
            "stockMetrics": StockMetricsService(),
            "stockPE": StockPEService(),
        }

    async def get_profile(self, db: AsyncSession, symbol: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: symbol not in stock_info
        """
        info = await self.stock_info.get_by_symbol(db, symbol)
        profile: Dict[str, Any] = {"stockInfo": info.to_dict()}
        for key, service in self.sections.items():
            rows = await service.find_by_symbol(db, info.symbol)
            profile[key] = [row.to_dict() for row in rows]
        return profile
