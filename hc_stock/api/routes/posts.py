from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import CurrentUser, get_current_user, read_image_upload
from hc_stock.database.config import get_db
from hc_stock.services.exceptions import InvalidInputError
from hc_stock.services.post_service import PostService
from hc_stock.services.storage import IncomingFile

router = APIRouter(prefix="/posts", tags=["posts"])
service = PostService()


def _required(value: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(f"{label} là bắt buộc")
    return value


async def _thumbnail(upload: Optional[UploadFile]) -> Optional[IncomingFile]:
    if upload is None or not upload.filename:
        return None
    return await read_image_upload(upload)


@router.get("")
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    category_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Newest posts first, with pagination metadata"""
    posts, pagination = await service.list(db, page, limit, search, category_id)
    return {"data": [p.to_dict() for p in posts], "pagination": pagination.to_dict()}


@router.get("/user/me")
async def my_posts(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return [p.to_dict() for p in await service.list_by_user(db, user.id)]


@router.get("/slug/{slug}")
async def get_post_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    return (await service.get_by_slug(db, slug)).to_dict()


@router.get("/category/slug/{category_slug}")
async def posts_by_category_slug(category_slug: str, db: AsyncSession = Depends(get_db)):
    return [p.to_dict() for p in await service.list_by_category_slug(db, category_slug)]


@router.get("/category/{category_id}")
async def posts_by_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return [p.to_dict() for p in await service.list_by_category(db, category_id)]


@router.get("/{post_id}")
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return (await service.get(db, post_id)).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    title: str = Form(...),
    content: str = Form(...),
    category_id: int = Form(...),
    slug: Optional[str] = Form(None),
    thumbnail_url: Optional[str] = Form(None),
    thumbnail_alt: str = Form(""),
    thumbnail: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await service.create(
        db,
        user_id=user.id,
        title=_required(title, "Tiêu đề"),
        content=_required(content, "Nội dung"),
        category_id=category_id,
        slug=slug,
        thumbnail_file=await _thumbnail(thumbnail),
        thumbnail_url=thumbnail_url,
        thumbnail_alt=thumbnail_alt,
    )
    return post.to_dict()


@router.put("/{post_id}")
async def update_post(
    post_id: int,
    title: str = Form(...),
    content: str = Form(...),
    category_id: int = Form(...),
    slug: Optional[str] = Form(None),
    thumbnail_url: Optional[str] = Form(None),
    thumbnail_alt: Optional[str] = Form(None),
    remove_thumbnail: bool = Form(False),
    thumbnail: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Author or admin only"""
    post = await service.update(
        db,
        post_id,
        actor_id=user.id,
        is_admin=user.is_admin,
        title=_required(title, "Tiêu đề"),
        content=_required(content, "Nội dung"),
        category_id=category_id,
        slug=slug,
        thumbnail_file=await _thumbnail(thumbnail),
        thumbnail_url=thumbnail_url,
        thumbnail_alt=thumbnail_alt,
        remove_thumbnail=remove_thumbnail,
    )
    return post.to_dict()


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await service.delete(db, post_id, actor_id=user.id, is_admin=user.is_admin)
    return {"message": "Xóa bài viết thành công"}
