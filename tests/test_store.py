import pytest
from sqlalchemy.exc import OperationalError

from book_library.errors import NotFound, StoreFault, ValidationFailure
from book_library.models import Book, db


def test_create_assigns_id(store):
    book = store.create({"title": "Dune", "author": "Herbert"})
    assert book.id is not None
    assert store.find_by_id(book.id).title == "Dune"
    assert book.genre is None
    assert book.year is None


def test_create_requires_title_and_author(store):
    with pytest.raises(ValidationFailure) as exc_info:
        store.create({"title": "   ", "author": "", "genre": "Sci-Fi"})
    assert set(exc_info.value.fields) == {"title", "author"}
    assert store.count() == 0


def test_create_strips_markup(store):
    book = store.create({"title": "<b>Dune</b>", "author": "Frank <i>Herbert</i>"})
    assert book.title == "Dune"
    assert book.author == "Frank Herbert"


def test_create_keeps_ampersand(store):
    book = store.create({"title": "Pride & Prejudice", "author": "Jane Austen"})
    assert book.title == "Pride & Prejudice"


def test_year_coerced_from_text(store):
    book = store.create({"title": "Dune", "author": "Herbert", "year": "1965"})
    assert book.year == 1965


def test_bad_year_is_a_validation_failure(store):
    with pytest.raises(ValidationFailure) as exc_info:
        store.create({"title": "Dune", "author": "Herbert", "year": "soon"})
    assert list(exc_info.value.fields) == ["year"]


def test_empty_genre_stored_as_null(store):
    book = store.create({"title": "Dune", "author": "Herbert", "genre": "  "})
    assert book.genre is None


def test_update_overwrites_given_fields(store):
    book = store.create({"title": "Dune", "author": "Herbert", "genre": "Sci-Fi"})
    store.update(book.id, {"title": "Dune Messiah", "year": 1969})
    updated = store.find_by_id(book.id)
    assert updated.title == "Dune Messiah"
    assert updated.author == "Herbert"
    assert updated.genre == "Sci-Fi"
    assert updated.year == 1969


def test_update_rejects_empty_author_and_keeps_record(store):
    book = store.create({"title": "Dune", "author": "Herbert"})
    with pytest.raises(ValidationFailure):
        store.update(book.id, {"author": ""})
    assert store.find_by_id(book.id).author == "Herbert"


def test_update_missing_book(store):
    with pytest.raises(NotFound):
        store.update(999, {"title": "Ghost", "author": "Nobody"})


def test_delete(store):
    book = store.create({"title": "Dune", "author": "Herbert"})
    store.delete(book.id)
    assert store.find_by_id(book.id) is None
    with pytest.raises(NotFound):
        store.delete(book.id)


def test_get_or_raise(store):
    with pytest.raises(NotFound):
        store.get_or_raise(42)


def test_count_and_find_pages_in_id_order(add_books, store):
    add_books(13)
    rows, total = store.count_and_find(offset=12, limit=6)
    assert total == 13
    assert [book.title for book in rows] == ["Book 13"]

    rows, _ = store.count_and_find(offset=0, limit=6)
    assert [book.title for book in rows] == [f"Book {i:02d}" for i in range(1, 7)]


def test_query_failure_becomes_store_fault(store, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db.session, "execute", broken)
    with pytest.raises(StoreFault) as exc_info:
        store.count_and_find()
    assert exc_info.value.status == 500
    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.parametrize("year", [10000, -10000, 99999999999999999999, "99999999999999999999"])
def test_year_out_of_range_is_a_validation_failure(store, year):
    with pytest.raises(ValidationFailure) as exc_info:
        store.create({"title": "Dune", "author": "Herbert", "year": year})
    assert exc_info.value.fields == {"year": ["Year must be between -9999 and 9999"]}
    assert store.count() == 0


def test_update_rejects_year_out_of_range(store):
    book = store.create({"title": "Dune", "author": "Herbert", "year": 1965})
    with pytest.raises(ValidationFailure):
        store.update(book.id, {"year": 99999999999999999999})
    assert store.find_by_id(book.id).year == 1965


def test_count_and_find_filtered(add_books, store):
    add_books(3)
    store.create({"title": "Dune", "author": "Herbert"})
    assert store.count(Book.title == "Dune") == 1
    rows, total = store.count_and_find(Book.author.like("Author%"), offset=1, limit=6)
    assert total == 3
    assert [book.title for book in rows] == ["Book 02", "Book 03"]
