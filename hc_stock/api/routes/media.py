"""
Media library routes.

The /editor endpoints serve the rich-text editor's image picker and answer
errors as {"error": {"message", "code"}} instead of {"detail"}.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.api.deps import CurrentUser, get_current_user, read_image_upload
from hc_stock.api.schemas.media import MediaUpdate
from hc_stock.database.config import get_db
from hc_stock.services.exceptions import ServiceError
from hc_stock.services.media_service import (
    MediaService,
    editor_list_item,
    editor_selection,
    editor_upload_result,
)

router = APIRouter(prefix="/media", tags=["media"])
service = MediaService()

_EDITOR_CODES = {400: "invalid_file", 404: "not_found"}


def editor_error(message: str, code: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"message": message, "code": code}})


def _editor_service_error(e: ServiceError) -> JSONResponse:
    return editor_error(e.message, _EDITOR_CODES.get(e.status_code, "server_error"), e.status_code)


@router.get("")
async def list_media(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    media, total = await service.list(db, limit, offset)
    return {"media": [m.to_dict() for m in media], "total": total}


@router.get("/search")
async def search_media(
    q: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    _: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not q:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Thiếu từ khóa tìm kiếm")
    return [m.to_dict() for m in await service.search(db, q, limit)]


@router.post("/editor")
async def editor_upload(
    file: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if file is None or not file.filename:
        return editor_error("Không có tệp nào được tải lên", "no_file", status.HTTP_400_BAD_REQUEST)
    try:
        media = await service.upload(db, user.id, await read_image_upload(file))
    except ServiceError as e:
        return _editor_service_error(e)
    return editor_upload_result(media)


@router.get("/editor/images")
async def editor_images(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = Query(None),
    _: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Images only; a search ignores offset and reports the match count as total"""
    if search:
        items = [m for m in await service.search(db, search, limit) if m.is_image]
        total = len(items)
    else:
        items, total = await service.list_images(db, limit, offset)
    return {"items": [editor_list_item(m) for m in items], "total": total}


@router.get("/editor/select/{media_id}")
async def editor_select(
    media_id: int,
    _: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        media = await service.get(db, media_id)
    except ServiceError as e:
        return _editor_service_error(e)
    return editor_selection(media)


@router.get("/{media_id}")
async def get_media(
    media_id: int,
    _: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return (await service.get(db, media_id)).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: Optional[UploadFile] = File(None),
    alt_text: str = Form(""),
    title: str = Form(""),
    caption: str = Form(""),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Không có tệp nào được tải lên")
    media = await service.upload(db, user.id, await read_image_upload(file), alt_text, title, caption)
    return media.to_dict()


@router.put("/{media_id}")
async def update_media(
    media_id: int,
    body: MediaUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Owner or admin only"""
    media = await service.update(db, media_id, user.id, user.is_admin, body.alt_text, body.title, body.caption)
    return {"message": "Cập nhật tệp thành công", "media": media.to_dict()}


@router.delete("/{media_id}")
async def delete_media(
    media_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await service.delete(db, media_id, user.id, user.is_admin)
    return {"message": "Xóa tệp thành công"}
