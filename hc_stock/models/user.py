from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from hc_stock.database.config import Base
from hc_stock.models.mixins import SerializerMixin

ROLES = ("admin", "user")


class User(SerializerMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(10), nullable=False, default="user")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self):
        data = super().to_dict()
        data.pop("password", None)
        return data

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"
