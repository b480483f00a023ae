from flask import Blueprint, flash, redirect, render_template, url_for

from .errors import ValidationFailure
from .forms import BookForm
from .listing import paginated
from .store import BookStore

LIBRARY_TITLE = "The Book Library"

main = Blueprint("main", __name__)
books = Blueprint("books", __name__, url_prefix="/books")


@main.route("/")
def home():
    return redirect(url_for("books.index"))


@main.route("/error")
def server_error():
    # Lets the generic error page be checked by hand
    raise RuntimeError("Deliberate server error")


def render_listing(template, result, title, **context):
    return render_template(template, books=result.books, title=title, pages=result.pages,
                           result=result, **context)


def render_book_form(template, form, book, failure=None, title=None):
    return render_template(template, form=form, book=book, title=title,
                           errors=failure.messages if failure else [],
                           field_errors=failure.fields if failure else {})


# ----- Listings -----
@books.route("")
@paginated()
def index(result):
    return render_listing("books/index.html", result, LIBRARY_TITLE)


@books.route("/page/<page_number>")
@paginated("page_number")
def page(result):
    return render_listing("books/index.html", result, LIBRARY_TITLE)


@books.route("/search")
@paginated(searchable=True)
def search(result):
    # No matches at all goes back to the library; a page past the end was already a 404
    if result.empty:
        flash(f'No books found for "{result.query}"', "info")
        return redirect(url_for("books.index"))
    return render_listing("books/search.html", result, "Search Results", search_query=result.query)


# ----- Create -----
@books.route("/new")
def new_book():
    return render_book_form("books/new-book.html", BookForm(), book={}, title="New Book")


@books.route("", methods=["POST"])
def create_book():
    form = BookForm()
    try:
        form.check()
        book = BookStore().create(form.book_fields())
    except ValidationFailure as failure:
        return render_book_form("books/new-book.html", form, form.book_fields(), failure, "New Book")
    flash("Book created", "success")
    return redirect(url_for("books.detail", book_id=book.id))


# ----- Read -----
@books.route("/<int:book_id>")
def detail(book_id):
    book = BookStore().get_or_raise(book_id)
    return render_template("books/book-detail.html", book=book, title=book.title)


# ----- Update -----
@books.route("/<int:book_id>/edit")
def edit_book(book_id):
    book = BookStore().get_or_raise(book_id)
    return render_book_form("books/update-book.html", BookForm(obj=book), book, title="Edit Book")


@books.route("/<int:book_id>/edit", methods=["POST"])
def update_book(book_id):
    store = BookStore()
    store.get_or_raise(book_id)
    form = BookForm()
    try:
        form.check()
        book = store.update(book_id, form.book_fields())
    except ValidationFailure as failure:
        # Unsaved values, but keep the id so the form posts back to the same book
        unsaved = dict(form.book_fields(), id=book_id)
        return render_book_form("books/update-book.html", form, unsaved, failure, "Edit Book")
    flash("Book updated", "success")
    return redirect(url_for("books.detail", book_id=book.id))


# ----- Delete -----
@books.route("/<int:book_id>/delete")
def confirm_delete(book_id):
    book = BookStore().get_or_raise(book_id)
    return render_template("books/delete-book.html", book=book, title="Delete Book")


@books.route("/<int:book_id>/delete", methods=["POST"])
def delete_book(book_id):
    BookStore().delete(book_id)
    flash("Book deleted", "success")
    return redirect(url_for("books.index"))
