from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hc_stock.database.config import Base
from hc_stock.models.mixins import SerializerMixin


class Post(SerializerMixin, Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)

    # Either a local path under /uploads/posts/ or a media library URL
    thumbnail = Column(String(500), nullable=True)
    thumbnail_alt = Column(String(255), nullable=False, default="")

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User", lazy="joined")
    category = relationship("Category", lazy="joined")

    def to_dict(self):
        data = super().to_dict()
        data["username"] = self.author.username if self.author else None
        data["category_name"] = self.category.name if self.category else None
        data["category_slug"] = self.category.slug if self.category else None
        return data

    def __repr__(self):
        return f"<Post {self.slug}>"
