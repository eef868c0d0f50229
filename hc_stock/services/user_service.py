from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hc_stock.models.user import User
from hc_stock.services.auth_service import create_access_token, hash_password, verify_password
from hc_stock.services.exceptions import ConflictError, InvalidInputError, NotFoundError
from hc_stock.utils.logger import get_logger

logger = get_logger(__name__)


class UserService:
    """Registration, login and admin user management"""

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("Không tìm thấy người dùng")
        return user

    async def list(self, db: AsyncSession) -> List[User]:
        result = await db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def register(self, db: AsyncSession, username: str, email: str, password: str) -> str:
        """
        Create a regular user and return a session token.

        Raises:
            ConflictError: email or username already taken
        """
        if await self.find_by_email(db, email):
            raise ConflictError("Email đã được sử dụng")
        if await self.find_by_username(db, username):
            raise ConflictError("Tên đăng nhập đã được sử dụng")

        user = User(username=username, email=email, password=hash_password(password), role="user")
        db.add(user)
        await db.commit()
        await db.refresh(user)

        logger.info(f"Registered user {user.id} ({username})")
        return create_access_token(user.id, user.role)

    async def login(self, db: AsyncSession, email: str, password: str) -> str:
        user = await self.find_by_email(db, email)
        if user is None or not verify_password(password, user.password):
            logger.warning(f"Failed login for {email}")
            raise InvalidInputError("Thông tin đăng nhập không hợp lệ")

        return create_access_token(user.id, user.role)

    async def update(
        self,
        db: AsyncSession,
        user_id: int,
        username: str,
        email: str,
        role: str,
    ) -> User:
        user = await self.get(db, user_id)

        if email != user.email and await self.find_by_email(db, email):
            raise ConflictError("Email đã được sử dụng")
        if username != user.username and await self.find_by_username(db, username):
            raise ConflictError("Tên đăng nhập đã được sử dụng")

        user.username = username
        user.email = email
        user.role = role
        await db.commit()
        await db.refresh(user)
        return user

    async def update_password(self, db: AsyncSession, user_id: int, password: str) -> None:
        user = await self.get(db, user_id)
        user.password = hash_password(password)
        await db.commit()
        logger.info(f"Password changed for user {user_id}")

    async def delete(self, db: AsyncSession, user_id: int) -> None:
        user = await self.get(db, user_id)
        await db.delete(user)
        await db.commit()
        logger.info(f"Deleted user {user_id}")
