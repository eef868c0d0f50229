from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.database.config import get_db
from hc_stock.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])
service = ProfileService()


@router.get("/{symbol}")
async def get_profile(symbol: str, db: AsyncSession = Depends(get_db)):
    """Company info plus every financial series for the symbol"""
    return await service.get_profile(db, symbol)
