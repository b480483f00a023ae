"""
Listing stage shared by the paginated book views.

``fetch_page`` works out the page bounds, asks the store for one page of
books and rejects pages past the end. ``paginated`` wraps a view so the
resulting ``PaginatedResult`` is handed to it as the ``result`` argument.
"""

import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import List, Optional

from flask import request

from .errors import PageNotFound
from .models import Book
from .pagination import PAGE_SIZE, paginate, parse_page
from .search import normalize_query, search_predicate
from .store import BookStore

logger = logging.getLogger(__name__)


@dataclass
class PaginatedResult:
    books: List[Book]
    total: int
    page: int
    page_size: int = PAGE_SIZE
    page_count: int = 0
    query: Optional[str] = None
    pages: List[int] = field(default_factory=list)

    @property
    def empty(self):
        return self.total == 0


def fetch_page(store, page, query=None, page_size=PAGE_SIZE):
    """Load one page of books, optionally filtered by a search query.

    Raises PageNotFound when ``page`` lies past the last page. Page 1 of an
    empty result is not an error.
    """
    predicate = search_predicate(query) if query is not None else None
    total = store.count(predicate)
    bounds = paginate(page, total, page_size)
    # Bounds are checked before the row query runs
    if not bounds.valid:
        logger.debug("page %s out of range (%s pages, query=%r)", page, bounds.page_count, query)
        raise PageNotFound()
    rows = store.find(predicate, bounds.offset, bounds.limit)
    return PaginatedResult(
        books=list(rows),
        total=total,
        page=page,
        page_size=page_size,
        page_count=bounds.page_count,
        query=query,
        pages=bounds.pages,
    )


def paginated(page_arg=None, searchable=False):
    """View decorator running fetch_page before the view.

    ``page_arg`` names the URL segment holding the page number. Search views
    read ``page`` and ``query`` from the query string instead.
    """
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if searchable:
                page = parse_page(request.args.get("page"))
                query = normalize_query(request.args.get("query"))
            else:
                page = parse_page(kwargs.pop(page_arg, None) if page_arg else None)
                query = None
            result = fetch_page(BookStore(), page, query)
            return view(*args, result=result, **kwargs)
        return wrapped
    return decorator
