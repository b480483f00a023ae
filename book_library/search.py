"""Builds the filter used by the book search page."""

from sqlalchemy import String, cast, or_

from .models import Book

# Columns searched, in display order. year is matched as text.
SEARCH_COLUMNS = ("title", "author", "genre", "year")


def normalize_query(query):
    return (query or "").strip()


def search_predicate(query):
    """Match books where any searched column contains ``query``, ignoring case.

    An empty query matches every book, and a number like "19" matches any
    year containing those digits. LIKE wildcards in the query are not escaped.
    """
    pattern = f"%{normalize_query(query)}%"
    clauses = []
    for name in SEARCH_COLUMNS:
        column = getattr(Book, name)
        if name == "year":
            column = cast(column, String)
        clauses.append(column.ilike(pattern))
    return or_(*clauses)
