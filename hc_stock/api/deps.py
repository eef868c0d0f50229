"""
Request dependencies: authentication, date query parameters and uploads

Clients send the JWT in the `x-auth-token` header.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from fastapi import Depends, File, Header, HTTPException, Query, UploadFile, status

from hc_stock.config.settings import settings
from hc_stock.services.auth_service import decode_access_token
from hc_stock.services.exceptions import AuthenticationError
from hc_stock.services.storage import IncomingFile
from hc_stock.utils.parsing import parse_date

CSV_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}


@dataclass
class CurrentUser:
    """Identity carried by the token"""
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


async def get_current_user(x_auth_token: Optional[str] = Header(None, alias="x-auth-token")) -> CurrentUser:
    """
    Raises:
        HTTPException 401 if the token is missing, invalid or expired
    """
    if not x_auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Không có token, quyền truy cập bị từ chối",
        )

    try:
        claim = decode_access_token(x_auth_token)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from None

    return CurrentUser(id=int(claim["id"]), role=claim.get("role", "user"))


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Quyền truy cập bị từ chối, yêu cầu quyền admin",
        )
    return user


def _parse_query_date(value: str, name: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{name} không hợp lệ") from None


async def date_range(
    startDate: Optional[str] = Query(None, description="YYYY-MM-DD or DD/MM/YYYY"),
    endDate: Optional[str] = Query(None, description="YYYY-MM-DD or DD/MM/YYYY"),
) -> Tuple[date, date]:
    """Required startDate/endDate query pair"""
    if not startDate or not endDate:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vui lòng cung cấp startDate và endDate",
        )
    return _parse_query_date(startDate, "startDate"), _parse_query_date(endDate, "endDate")


def path_date(value: str) -> date:
    return _parse_query_date(value, "Ngày")


async def read_image_upload(upload: UploadFile) -> IncomingFile:
    return IncomingFile(filename=upload.filename or "", content_type=upload.content_type, data=await upload.read())


async def read_csv_upload(file: Optional[UploadFile] = File(None)) -> bytes:
    """CSV body of a multipart `file` field"""
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Vui lòng tải lên file CSV")
    if file.content_type not in CSV_TYPES and not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Chỉ chấp nhận file CSV")

    data = await file.read()
    if len(data) > settings.max_csv_bytes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File CSV quá lớn")
    return data
