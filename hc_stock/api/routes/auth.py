from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import CurrentUser, get_current_user
from hc_stock.api.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from hc_stock.database.config import get_db
from hc_stock.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
service = UserService()


@router.post("/register", response_model=TokenResponse)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a regular user account and log it in"""
    token = await service.register(db, body.username, body.email, body.password)
    return {"token": token}


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    token = await service.login(db, body.email, body.password)
    return {"token": token}


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Current user, without the password hash"""
    return await service.get(db, user.id)
