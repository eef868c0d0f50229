from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import require_admin
from hc_stock.api.schemas.auth import MessageResponse
from hc_stock.api.schemas.categories import CategoryIn, CategoryResponse
from hc_stock.database.config import get_db
from hc_stock.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])
service = CategoryService()


@router.get("", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await service.list(db)


@router.get("/slug/{slug}", response_model=CategoryResponse)
async def get_category_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    return await service.get_by_slug(db, slug)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await service.get(db, category_id)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_category(body: CategoryIn, db: AsyncSession = Depends(get_db)):
    return await service.create(db, body.name, body.description, body.slug)


@router.put("/{category_id}", response_model=CategoryResponse, dependencies=[Depends(require_admin)])
async def update_category(category_id: int, body: CategoryIn, db: AsyncSession = Depends(get_db)):
    return await service.update(db, category_id, body.name, body.description, body.slug)


@router.delete("/{category_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete(db, category_id)
    return {"message": "Xóa danh mục thành công"}
