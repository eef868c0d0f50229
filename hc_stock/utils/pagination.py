import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Pagination:
    """Page window over a result set of `total` items."""

    page: int
    limit: int
    total: int

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self) -> dict:
        """Shape used by list endpoints"""
        return {
            "currentPage": self.page,
            "totalPages": self.total_pages,
            "totalItems": self.total,
            "limit": self.limit,
            "hasPrevious": self.has_previous,
            "hasNext": self.has_next,
        }
