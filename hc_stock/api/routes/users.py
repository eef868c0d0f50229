from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import require_admin
from hc_stock.api.schemas.auth import MessageResponse, PasswordUpdate, UserResponse, UserUpdate
from hc_stock.database.config import get_db
from hc_stock.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])
service = UserService()


@router.get("", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await service.list(db)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await service.get(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, body: UserUpdate, db: AsyncSession = Depends(get_db)):
    return await service.update(db, user_id, body.username, body.email, body.role)


@router.put("/{user_id}/password", response_model=MessageResponse)
async def update_password(user_id: int, body: PasswordUpdate, db: AsyncSession = Depends(get_db)):
    await service.update_password(db, user_id, body.password)
    return {"message": "Cập nhật mật khẩu thành công"}


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete(db, user_id)
    return {"message": "Xóa người dùng thành công"}
