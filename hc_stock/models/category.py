from sqlalchemy import Column, Integer, String, Text

from hc_stock.database.config import Base
from hc_stock.models.mixins import SerializerMixin


class Category(SerializerMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Category {self.slug}>"
