"""
Book Library: a server-rendered Flask catalog of books.

- Paginated listing (6 books per page) and search across title, author, genre, year
- Create / edit / delete with server-side validation and CSRF-protected forms
- Not-found and server-error pages for anything that goes wrong

Run:
    pip install -e .
    flask --app book_library init-db --seed
    flask --app book_library run --debug
"""

import logging
import time

import click
from flask import Flask, g, request
from flask_wtf import CSRFProtect
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import Config
from .errors import register_error_handlers
from .models import Book, db
from .store import BookStore

csrf = CSRFProtect()

SAMPLE_BOOKS = [
    {"title": "A Brief History of Time", "author": "Stephen Hawking", "genre": "Non Fiction", "year": 1988},
    {"title": "Armada", "author": "Ernest Cline", "genre": "Science Fiction", "year": 2015},
    {"title": "Emma", "author": "Jane Austen", "genre": "Classic", "year": 1815},
    {"title": "Frankenstein", "author": "Mary Shelley", "genre": "Horror", "year": 1818},
    {"title": "Harry Potter and the Philosopher's Stone", "author": "J.K. Rowling", "genre": "Fantasy", "year": 1997},
    {"title": "Harry Potter and the Chamber of Secrets", "author": "J.K. Rowling", "genre": "Fantasy", "year": 1998},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "genre": "Classic", "year": 1813},
    {"title": "Ready Player One", "author": "Ernest Cline", "genre": "Science Fiction", "year": 2011},
    {"title": "The Martian", "author": "Andy Weir", "genre": "Science Fiction", "year": 2014},
    {"title": "The Universe in a Nutshell", "author": "Stephen Hawking", "genre": "Non Fiction", "year": 2001},
    {"title": "The Hobbit", "author": "J. R. R. Tolkien", "genre": "Fantasy", "year": 1937},
    {"title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction", "year": 1965},
    {"title": "Foundation", "author": "Isaac Asimov", "genre": "Science Fiction", "year": 1951},
]


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.logger.setLevel(level)
    logging.getLogger(__name__).setLevel(level)


def register_request_log(app):
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.pop("request_started", None)
        elapsed = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        app.logger.info("%s %s %s %.1f ms", request.method, request.full_path.rstrip("?"),
                        response.status_code, elapsed)
        return response


def check_database(app):
    with app.app_context():
        try:
            db.session.execute(text("SELECT 1"))
            app.logger.info("Connection has been established successfully.")
        except SQLAlchemyError as err:
            app.logger.error("Unable to connect to the database: %s", err)
        finally:
            db.session.remove()


def seed_books(store):
    """Add the sample library if the books table is empty. Returns the number added."""
    if store.count():
        return 0
    for fields in SAMPLE_BOOKS:
        store.create(fields)
    return len(SAMPLE_BOOKS)


def register_commands(app):
    @app.cli.command("init-db")
    @click.option("--seed", is_flag=True, help="Also load the sample books.")
    def init_db_command(seed):
        """Create the books table."""
        db.create_all()
        click.echo("Initialized the database.")
        if seed:
            click.echo(f"Added {seed_books(BookStore())} sample books.")

    @app.cli.command("seed")
    def seed_command():
        """Load the sample books into an empty library."""
        added = seed_books(BookStore())
        if added:
            click.echo(f"Added {added} sample books.")
        else:
            click.echo("Library already has books, nothing added.")


def create_app(config=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if isinstance(config, dict):
        app.config.update(config)
    elif config is not None:
        app.config.from_object(config)

    configure_logging(app)
    db.init_app(app)
    csrf.init_app(app)

    from .views import books, main
    app.register_blueprint(main)
    app.register_blueprint(books)

    register_error_handlers(app)
    register_request_log(app)
    register_commands(app)

    if not app.testing:
        check_database(app)
    return app


__all__ = ["Book", "BookStore", "create_app", "db", "seed_books"]
