import logging
from html import unescape

import bleach
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from .errors import NotFound, StoreFault, ValidationFailure
from .models import Book, db
from .pagination import PAGE_SIZE

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "title": "Please provide a value for \"Title\"",
    "author": "Please provide a value for \"Author\"",
}

YEAR_MIN, YEAR_MAX = -9999, 9999
YEAR_RANGE_MESSAGE = f"Year must be between {YEAR_MIN} and {YEAR_MAX}"


def clean_text(value):
    if value is None:
        return None
    # Plain text only: drop markup, keep entities like "&" readable
    return unescape(bleach.clean(str(value), tags=[], strip=True)).strip()


def clean_fields(fields):
    """Keep the editable columns only and normalise their values."""
    cleaned = {}
    for name in Book.EDITABLE:
        if name not in fields:
            continue
        value = fields[name]
        if name == "year":
            cleaned[name] = None if value in ("", None) else value
        elif name == "genre":
            cleaned[name] = clean_text(value) or None
        else:
            cleaned[name] = clean_text(value)
    return cleaned


def validate_fields(values):
    errors = {}
    for name, message in REQUIRED_FIELDS.items():
        if not values.get(name):
            errors.setdefault(name, []).append(message)
    year = values.get("year")
    if year is not None and not isinstance(year, int):
        try:
            values["year"] = int(year)
        except (TypeError, ValueError):
            errors.setdefault("year", []).append("Year must be a whole number")
    year = values.get("year")
    if isinstance(year, int) and not YEAR_MIN <= year <= YEAR_MAX:
        errors.setdefault("year", []).append(YEAR_RANGE_MESSAGE)
    if errors:
        raise ValidationFailure(errors)


class BookStore:
    """Data access for the books table. One instance per request is fine, it holds no state."""

    def __init__(self, session=None):
        self.session = session or db.session

    def count(self, predicate=None):
        query = select(func.count(Book.id))
        if predicate is not None:
            query = query.where(predicate)
        try:
            return self.session.execute(query).scalar_one()
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StoreFault() from err

    def find(self, predicate=None, offset=0, limit=PAGE_SIZE):
        query = select(Book).order_by(Book.id).offset(offset).limit(limit)
        if predicate is not None:
            query = query.where(predicate)
        try:
            return self.session.execute(query).scalars().all()
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StoreFault() from err

    def count_and_find(self, predicate=None, offset=0, limit=PAGE_SIZE):
        return self.find(predicate, offset, limit), self.count(predicate)

    def find_by_id(self, book_id):
        try:
            return self.session.get(Book, book_id)
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StoreFault() from err

    def get_or_raise(self, book_id):
        book = self.find_by_id(book_id)
        if book is None:
            raise NotFound()
        return book

    def create(self, fields):
        values = clean_fields(fields)
        validate_fields(values)
        book = Book(**values)
        self._commit(book)
        logger.info("Created book %s %r", book.id, book.title)
        return book

    def update(self, book_id, fields):
        book = self.get_or_raise(book_id)
        values = clean_fields(fields)
        # Fields left out keep their stored values
        merged = {name: getattr(book, name) for name in Book.EDITABLE}
        merged.update(values)
        validate_fields(merged)
        for name in values:
            setattr(book, name, merged[name])
        self._commit(book)
        logger.info("Updated book %s", book.id)
        return book

    def delete(self, book_id):
        book = self.get_or_raise(book_id)
        try:
            self.session.delete(book)
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StoreFault() from err
        logger.info("Deleted book %s", book_id)

    def _commit(self, book):
        try:
            self.session.add(book)
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StoreFault() from err
