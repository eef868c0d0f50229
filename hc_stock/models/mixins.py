from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class SerializerMixin:
    """Column-driven to_dict() for API responses."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            column.name: _jsonable(getattr(self, column.key))
            for column in self.__table__.columns  # type: ignore[attr-defined]
        }


class SymbolDateMixin(SerializerMixin):
    """
    Shared columns for per-symbol, per-date stock tables.

    One row per (symbol, date); symbol references stock_info so every row
    can be shown with the company name.
    """

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @declared_attr
    def symbol(cls):
        return Column(
            String(20),
            ForeignKey("stock_info.symbol", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def company(cls):
        return relationship("StockInfo", lazy="joined", viewonly=True)

    @declared_attr
    def __table_args__(cls):
        return (UniqueConstraint('symbol', 'date', name=f'uq_{cls.__tablename__}_symbol_date'),)

    @property
    def stock_name(self):
        return self.company.name if self.company is not None else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["stock_name"] = self.stock_name
        return data

    def __repr__(self):
        return f"<{type(self).__name__} {self.symbol} {self.date}>"
