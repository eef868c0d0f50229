from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.models.media import Media
from hc_stock.services import storage
from hc_stock.services.exceptions import NotFoundError, PermissionDeniedError
from hc_stock.services.storage import IncomingFile
from hc_stock.utils.logger import get_logger

logger = get_logger(__name__)

MEDIA_DIR = "media"


class MediaService:
    """Media library: uploaded images with alt text, title and caption"""

    @staticmethod
    def _newest_first(query):
        return query.order_by(Media.created_at.desc(), Media.id.desc())

    async def list(self, db: AsyncSession, limit: int = 50, offset: int = 0) -> Tuple[List[Media], int]:
        total = (await db.execute(select(func.count(Media.id)))).scalar_one()
        result = await db.execute(self._newest_first(select(Media)).offset(offset).limit(limit))
        return list(result.scalars().all()), total

    async def list_images(self, db: AsyncSession, limit: int = 20, offset: int = 0) -> Tuple[List[Media], int]:
        is_image = Media.mimetype.like("image/%")
        total = (await db.execute(select(func.count(Media.id)).where(is_image))).scalar_one()
        result = await db.execute(
            self._newest_first(select(Media).where(is_image)).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def search(self, db: AsyncSession, query: str, limit: int = 20) -> List[Media]:
        """Substring match on filename, title or alt text"""
        pattern = f"%{query}%"
        result = await db.execute(
            self._newest_first(
                select(Media).where(
                    or_(
                        Media.filename.ilike(pattern),
                        Media.title.ilike(pattern),
                        Media.alt_text.ilike(pattern),
                    )
                )
            ).limit(limit)
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, media_id: int) -> Media:
        media = await db.get(Media, media_id)
        if media is None:
            raise NotFoundError("Không tìm thấy tệp")
        return media

    async def upload(
        self,
        db: AsyncSession,
        user_id: int,
        upload: IncomingFile,
        alt_text: str = "",
        title: str = "",
        caption: str = "",
    ) -> Media:
        """
        Store an image and record it; title defaults to the original filename.

        Raises:
            InvalidInputError: unsupported type or too large
        """
        stored = storage.save_image(MEDIA_DIR, upload)

        media = Media(
            filename=stored.filename,
            filepath=stored.public_path,
            mimetype=stored.mimetype,
            size=stored.size,
            alt_text=alt_text or "",
            title=title or stored.original_name,
            caption=caption or "",
            user_id=user_id,
        )
        db.add(media)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            storage.delete_file(stored.public_path)
            raise
        await db.refresh(media)

        logger.info(f"User {user_id} uploaded media {media.id} ({stored.filename})")
        return media

    @staticmethod
    def _check_owner(media: Media, actor_id: int, is_admin: bool, action: str) -> None:
        if media.user_id != actor_id and not is_admin:
            raise PermissionDeniedError(f"Không có quyền {action} tệp này")

    async def update(
        self,
        db: AsyncSession,
        media_id: int,
        actor_id: int,
        is_admin: bool,
        alt_text: Optional[str] = None,
        title: Optional[str] = None,
        caption: Optional[str] = None,
    ) -> Media:
        """Empty or missing fields keep their current value"""
        media = await self.get(db, media_id)
        self._check_owner(media, actor_id, is_admin, "cập nhật")

        if alt_text:
            media.alt_text = alt_text
        if title:
            media.title = title
        if caption:
            media.caption = caption

        await db.commit()
        await db.refresh(media)
        return media

    async def delete(self, db: AsyncSession, media_id: int, actor_id: int, is_admin: bool) -> None:
        media = await self.get(db, media_id)
        self._check_owner(media, actor_id, is_admin, "xóa")

        filepath = media.filepath
        await db.delete(media)
        await db.commit()
        storage.delete_file(filepath)
        logger.info(f"User {actor_id} deleted media {media_id}")


def editor_upload_result(media: Media) -> Dict[str, Any]:
    return {
        "location": storage.public_url(media.filepath),
        "id": media.id,
        "title": media.title,
        "alt": media.alt_text,
    }


def editor_list_item(media: Media) -> Dict[str, Any]:
    url = storage.public_url(media.filepath)
    return {
        "value": str(media.id),
        "title": media.title or media.filename,
        "url": url,
        "alt": media.alt_text or "",
        "thumbnail": url,
        "createdAt": media.created_at.isoformat() if media.created_at else None,
    }


def editor_selection(media: Media) -> Dict[str, Any]:
    return {
        "location": storage.public_url(media.filepath),
        "id": media.id,
        "title": media.title or media.filename,
        "alt": media.alt_text or "",
        "caption": media.caption or "",
    }
