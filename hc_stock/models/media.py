from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from hc_stock.database.config import Base
from hc_stock.models.mixins import SerializerMixin


class Media(SerializerMixin, Base):
    """Uploaded file in the media library"""

    __tablename__ = "media"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=False)
    filepath = Column(String(500), nullable=False)  # public path, e.g. /uploads/media/<name>
    mimetype = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)

    alt_text = Column(String(255), nullable=False, default="")
    title = Column(String(255), nullable=False, default="")
    caption = Column(String(500), nullable=False, default="")

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    @property
    def is_image(self) -> bool:
        return (self.mimetype or "").startswith("image/")

    def __repr__(self):
        return f"<Media {self.filename}>"
