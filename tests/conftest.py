import pytest

from book_library import create_app
from book_library.config import TestingConfig
from book_library.models import db
from book_library.store import BookStore


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return BookStore()


@pytest.fixture
def add_books(store):
    """Factory adding ``count`` numbered books, returning them in id order."""
    def _add(count, **overrides):
        created = []
        for i in range(1, count + 1):
            fields = {
                "title": f"Book {i:02d}",
                "author": f"Author {i:02d}",
                "genre": "Fiction",
                "year": 2000 + i,
            }
            fields.update(overrides)
            created.append(store.create(fields))
        return created
    return _add