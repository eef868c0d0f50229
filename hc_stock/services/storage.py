"""
Local file storage for uploaded images.

Files live under settings.upload_dir and are served by the API under
/uploads, so a stored file's public path is "/uploads/<subdir>/<name>".
"""

import secrets
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

from hc_stock.config.settings import settings
from hc_stock.services.exceptions import InvalidInputError
from hc_stock.utils.logger import get_logger

logger = get_logger(__name__)

PUBLIC_PREFIX = "/uploads"

IMAGE_TYPES = {
    "image/jpeg": {".jpg", ".jpeg"},
    "image/png": {".png"},
    "image/gif": {".gif"},
    "image/webp": {".webp"},
}
IMAGE_EXTENSIONS = {ext for exts in IMAGE_TYPES.values() for ext in exts}


@dataclass
class IncomingFile:
    """Upload as received from a multipart form"""

    filename: str
    content_type: Optional[str]
    data: bytes


@dataclass
class StoredFile:
    filename: str
    public_path: str
    mimetype: str
    size: int
    original_name: str


def is_local_path(path: Optional[str]) -> bool:
    """True for paths we stored ourselves (not absolute http(s) URLs)"""
    return bool(path) and path.startswith(PUBLIC_PREFIX + "/")


def unique_filename(original_name: str, prefix: str = "") -> str:
    """<prefix><epoch ms>-<random><ext>, keeping the original extension"""
    ext = PurePosixPath(original_name or "").suffix.lower()
    stamp = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{prefix}{stamp}{ext}"


def resolve_public_path(public_path: str) -> Path:
    """Map "/uploads/x/y.png" to the file on disk, refusing paths outside upload_dir"""
    relative = PurePosixPath(public_path).relative_to(PUBLIC_PREFIX)
    root = Path(settings.upload_dir).resolve()
    target = (root / relative).resolve()
    if root not in target.parents:
        raise InvalidInputError("Đường dẫn tệp không hợp lệ")
    return target


def validate_image(original_name: str, content_type: Optional[str], size: int) -> None:
    """
    Raises:
        InvalidInputError: not a jpeg/png/gif/webp image, or larger than the upload limit
    """
    ext = PurePosixPath(original_name or "").suffix.lower()
    if content_type not in IMAGE_TYPES or ext not in IMAGE_EXTENSIONS:
        raise InvalidInputError("Chỉ chấp nhận file hình ảnh!")
    if size > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise InvalidInputError(f"File quá lớn. Kích thước tối đa là {limit_mb}MB.")


def save_image(subdir: str, upload: IncomingFile) -> StoredFile:
    """Validate and write an uploaded image under upload_dir/<subdir>"""
    original_name, content_type, data = upload.filename, upload.content_type, upload.data
    validate_image(original_name, content_type, len(data))

    directory = Path(settings.upload_dir) / subdir
    directory.mkdir(parents=True, exist_ok=True)

    filename = unique_filename(original_name)
    (directory / filename).write_bytes(data)
    logger.info(f"Stored upload {subdir}/{filename} ({len(data)} bytes)")

    return StoredFile(
        filename=filename,
        public_path=f"{PUBLIC_PREFIX}/{subdir}/{filename}",
        mimetype=content_type or "application/octet-stream",
        size=len(data),
        original_name=original_name,
    )


def delete_file(public_path: Optional[str]) -> bool:
    """Remove a locally stored file; remote URLs and missing files are ignored"""
    if not is_local_path(public_path):
        return False
    try:
        target = resolve_public_path(public_path)
    except (InvalidInputError, ValueError):
        logger.warning(f"Refusing to delete {public_path}")
        return False
    if target.is_file():
        target.unlink()
        logger.info(f"Deleted file {public_path}")
        return True
    return False


def public_url(public_path: str) -> str:
    """Absolute URL for editors that need one"""
    if public_path.startswith(("http://", "https://")):
        return public_path
    return settings.public_base_url.rstrip("/") + public_path
