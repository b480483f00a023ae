"""Page arithmetic for the book listings. Pure functions, no Flask or database access."""

from dataclasses import dataclass
from math import ceil
from typing import Optional

PAGE_SIZE = 6  # books per listing page, fixed


def parse_page(raw) -> int:
    """Turn a page number from the URL into a positive int.

    Missing, non-numeric, zero and negative values all mean page 1.
    """
    if raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    return page if page >= 1 else 1


def page_offset(page: int, page_size: int = PAGE_SIZE) -> int:
    return (page - 1) * page_size


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    if total <= 0:
        return 0
    return ceil(total / page_size)


@dataclass(frozen=True)
class PageBounds:
    page: int
    offset: int
    limit: int
    page_count: int

    @property
    def valid(self) -> bool:
        # An empty library still has a page 1
        return self.page <= self.page_count or (self.page_count == 0 and self.page == 1)

    @property
    def pages(self):
        return list(range(self.page_count))


def paginate(page: int, total: int, page_size: Optional[int] = None) -> PageBounds:
    size = page_size or PAGE_SIZE
    return PageBounds(
        page=page,
        offset=page_offset(page, size),
        limit=size,
        page_count=page_count(total, size),
    )
