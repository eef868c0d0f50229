from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.models.category import Category
from hc_stock.models.post import Post
from hc_stock.services.exceptions import ConflictError, InvalidInputError, NotFoundError
from hc_stock.utils.logger import get_logger
from hc_stock.utils.slug import slugify

logger = get_logger(__name__)


class CategoryService:
    """Blog categories; slugs are derived from the name when not supplied"""

    async def list(self, db: AsyncSession) -> List[Category]:
        result = await db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, category_id: int) -> Category:
        category = await db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Không tìm thấy danh mục")
        return category

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Category:
        result = await db.execute(select(Category).where(Category.slug == slug))
        category = result.scalar_one_or_none()
        if category is None:
            raise NotFoundError("Không tìm thấy danh mục")
        return category

    async def _ensure_slug_free(self, db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> None:
        query = select(Category.id).where(Category.slug == slug)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        if (await db.execute(query)).first():
            raise ConflictError("Slug danh mục đã tồn tại")

    @staticmethod
    def _resolve_slug(name: str, slug: Optional[str]) -> str:
        final = slugify(slug) if slug else slugify(name)
        if not final:
            raise InvalidInputError("Không thể tạo slug từ tên danh mục")
        return final

    async def create(
        self,
        db: AsyncSession,
        name: str,
        description: str,
        slug: Optional[str] = None,
    ) -> Category:
        final_slug = self._resolve_slug(name, slug)
        await self._ensure_slug_free(db, final_slug)

        category = Category(name=name, description=description, slug=final_slug)
        db.add(category)
        await db.commit()
        await db.refresh(category)

        logger.info(f"Created category {category.id} ({final_slug})")
        return category

    async def update(
        self,
        db: AsyncSession,
        category_id: int,
        name: str,
        description: str,
        slug: Optional[str] = None,
    ) -> Category:
        category = await self.get(db, category_id)
        final_slug = self._resolve_slug(name, slug)
        await self._ensure_slug_free(db, final_slug, exclude_id=category_id)

        category.name = name
        category.description = description
        category.slug = final_slug
        await db.commit()
        await db.refresh(category)
        return category

    async def delete(self, db: AsyncSession, category_id: int) -> None:
        category = await self.get(db, category_id)
        in_use = await db.execute(select(Post.id).where(Post.category_id == category_id).limit(1))
        if in_use.first():
            raise ConflictError("Danh mục đang có bài viết, không thể xóa")
        await db.delete(category)
        await db.commit()
        logger.info(f"Deleted category {category_id}")
