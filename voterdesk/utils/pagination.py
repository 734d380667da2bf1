import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)

    def meta(self, total: int) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages(total),
        }


def clamp_page(page: int | None, limit: int | None, default_limit: int, max_limit: int) -> Page:
    """Oversized limits are cut to max_limit rather than rejected."""
    page = max(page or 1, 1)
    limit = min(max(limit or default_limit, 1), max_limit)
    return Page(page=page, limit=limit)
