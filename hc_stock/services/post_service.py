from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.models.category import Category
from hc_stock.models.post import Post
from hc_stock.services import storage
from hc_stock.services.exceptions import ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError
from hc_stock.services.storage import IncomingFile
from hc_stock.utils.logger import get_logger
from hc_stock.utils.pagination import Pagination
from hc_stock.utils.slug import slugify

logger = get_logger(__name__)

THUMBNAIL_DIR = "posts"


class PostService:
    """Blog posts with optional thumbnail (uploaded file or media library URL)"""

    @staticmethod
    def _newest_first(query):
        return query.order_by(Post.created_at.desc(), Post.id.desc())

    async def list(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> Tuple[List[Post], Pagination]:
        """
        Paginated posts, newest first.

        Args:
            search: substring matched against title or content
            category_id: restrict to one category
        """
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(Post.title.ilike(pattern), Post.content.ilike(pattern)))
        if category_id:
            conditions.append(Post.category_id == category_id)

        total = (await db.execute(select(func.count(Post.id)).where(*conditions))).scalar_one()
        pagination = Pagination(page=page, limit=limit, total=total)

        result = await db.execute(
            self._newest_first(select(Post).where(*conditions))
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return list(result.unique().scalars().all()), pagination

    async def get(self, db: AsyncSession, post_id: int) -> Post:
        post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Không tìm thấy bài viết")
        return post

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Post:
        result = await db.execute(select(Post).where(Post.slug == slug))
        post = result.unique().scalar_one_or_none()
        if post is None:
            raise NotFoundError("Không tìm thấy bài viết")
        return post

    async def list_by_category(self, db: AsyncSession, category_id: int) -> List[Post]:
        if await db.get(Category, category_id) is None:
            raise NotFoundError("Không tìm thấy danh mục")
        result = await db.execute(self._newest_first(select(Post).where(Post.category_id == category_id)))
        return list(result.unique().scalars().all())

    async def list_by_category_slug(self, db: AsyncSession, category_slug: str) -> List[Post]:
        result = await db.execute(
            self._newest_first(select(Post).join(Post.category).where(Category.slug == category_slug))
        )
        return list(result.unique().scalars().all())

    async def list_by_user(self, db: AsyncSession, user_id: int) -> List[Post]:
        result = await db.execute(self._newest_first(select(Post).where(Post.user_id == user_id)))
        return list(result.unique().scalars().all())

    async def _ensure_category(self, db: AsyncSession, category_id: int) -> None:
        if await db.get(Category, category_id) is None:
            raise InvalidInputError("Danh mục không tồn tại")

    async def _slug_taken(self, db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Post.id).where(Post.slug == slug)
        if exclude_id is not None:
            query = query.where(Post.id != exclude_id)
        return (await db.execute(query)).first() is not None

    async def _resolve_slug(
        self,
        db: AsyncSession,
        title: str,
        slug: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> str:
        """
        An explicit slug must be free; a slug generated from the title gets
        a numeric suffix until it is.
        """
        if slug:
            final = slugify(slug)
            if not final:
                raise InvalidInputError("Slug không hợp lệ")
            if await self._slug_taken(db, final, exclude_id):
                raise ConflictError("Slug bài viết đã tồn tại")
            return final

        base = slugify(title)
        if not base:
            raise InvalidInputError("Không thể tạo slug từ tiêu đề")
        final, n = base, 2
        while await self._slug_taken(db, final, exclude_id):
            final = f"{base}-{n}"
            n += 1
        return final

    @staticmethod
    def _owns_thumbnail(path: Optional[str]) -> bool:
        """Only uploads stored under /uploads/posts belong to posts; media library files do not"""
        return bool(path) and path.startswith(f"{storage.PUBLIC_PREFIX}/{THUMBNAIL_DIR}/")

    def _discard_thumbnail(self, path: Optional[str]) -> None:
        if self._owns_thumbnail(path):
            storage.delete_file(path)

    @staticmethod
    def _check_owner(post: Post, actor_id: int, is_admin: bool, action: str) -> None:
        if post.user_id != actor_id and not is_admin:
            raise PermissionDeniedError(f"Không có quyền {action} bài viết này")

    async def create(
        self,
        db: AsyncSession,
        user_id: int,
        title: str,
        content: str,
        category_id: int,
        slug: Optional[str] = None,
        thumbnail_file: Optional[IncomingFile] = None,
        thumbnail_url: Optional[str] = None,
        thumbnail_alt: str = "",
    ) -> Post:
        await self._ensure_category(db, category_id)
        final_slug = await self._resolve_slug(db, title, slug)

        saved = None
        thumbnail = thumbnail_url or None
        if thumbnail_file is not None:
            saved = thumbnail = storage.save_image(THUMBNAIL_DIR, thumbnail_file).public_path

        post = Post(
            title=title,
            content=content,
            category_id=category_id,
            slug=final_slug,
            thumbnail=thumbnail,
            thumbnail_alt=thumbnail_alt or "",
            user_id=user_id,
        )
        db.add(post)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            storage.delete_file(saved)
            raise
        await db.refresh(post)

        logger.info(f"User {user_id} created post {post.id} ({final_slug})")
        return post

    async def update(
        self,
        db: AsyncSession,
        post_id: int,
        actor_id: int,
        is_admin: bool,
        title: str,
        content: str,
        category_id: int,
        slug: Optional[str] = None,
        thumbnail_file: Optional[IncomingFile] = None,
        thumbnail_url: Optional[str] = None,
        thumbnail_alt: Optional[str] = None,
        remove_thumbnail: bool = False,
    ) -> Post:
        """
        Update a post; only its author or an admin may do so.

        Thumbnail precedence: new file, then thumbnail_url, then remove_thumbnail.
        A replaced or removed uploaded thumbnail is deleted from disk once the
        change is committed; media library files are never touched.
        """
        post = await self.get(db, post_id)
        self._check_owner(post, actor_id, is_admin, "chỉnh sửa")
        await self._ensure_category(db, category_id)

        final_slug = post.slug
        if slug and slugify(slug) != post.slug:
            final_slug = await self._resolve_slug(db, title, slug, exclude_id=post.id)

        old_thumbnail = post.thumbnail
        saved = None
        if thumbnail_file is not None:
            saved = post.thumbnail = storage.save_image(THUMBNAIL_DIR, thumbnail_file).public_path
        elif thumbnail_url:
            post.thumbnail = thumbnail_url
        elif remove_thumbnail:
            post.thumbnail = None

        post.title = title
        post.content = content
        post.category_id = category_id
        post.slug = final_slug
        if thumbnail_alt is not None:
            post.thumbnail_alt = thumbnail_alt
        new_thumbnail = post.thumbnail

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            storage.delete_file(saved)
            raise

        if new_thumbnail != old_thumbnail:
            self._discard_thumbnail(old_thumbnail)
        await db.refresh(post)
        return post

    async def delete(self, db: AsyncSession, post_id: int, actor_id: int, is_admin: bool) -> None:
        post = await self.get(db, post_id)
        self._check_owner(post, actor_id, is_admin, "xóa")

        thumbnail = post.thumbnail
        await db.delete(post)
        await db.commit()
        self._discard_thumbnail(thumbnail)
        logger.info(f"User {actor_id} deleted post {post_id}")
