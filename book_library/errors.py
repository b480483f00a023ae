"""
Error kinds raised by the library and the terminal handlers that render them.

Every failure a request can end with is one of:

- ``NotFound``          missing record (``PageNotFound`` for an out-of-range page)
- ``RouteNotFound``     no handler matched the path
- ``ValidationFailure`` submitted fields were rejected, carries per-field messages
- ``StoreFault``        the database could not be reached or the query failed

Anything else is an unexpected error and is reported as a 500.
"""

from dataclasses import dataclass

from flask import render_template
from werkzeug.exceptions import HTTPException

GENERIC_MESSAGE = "Oops there was an error on the server."
NOT_FOUND_MESSAGE = "The page you've requested was not found!"


class CatalogError(Exception):
    status = 500
    message = GENERIC_MESSAGE

    def __init__(self, message=None, status=None):
        if message:
            self.message = message
        if status:
            self.status = status
        super().__init__(self.message)


class NotFound(CatalogError):
    status = 404
    message = "Book not found"


class PageNotFound(NotFound):
    message = "Page not found"


class RouteNotFound(NotFound):
    message = NOT_FOUND_MESSAGE


class ValidationFailure(CatalogError):
    status = 400
    message = "Please fix the errors in the form"

    def __init__(self, fields, message=None):
        # fields: {field name: [messages]}
        self.fields = {name: list(msgs) for name, msgs in fields.items() if msgs}
        super().__init__(message)

    @property
    def messages(self):
        return [msg for msgs in self.fields.values() for msg in msgs]

    def merge(self, other):
        for name, msgs in other.fields.items():
            existing = self.fields.setdefault(name, [])
            for msg in msgs:
                if msg not in existing:
                    existing.append(msg)
        return self


class StoreFault(CatalogError):
    status = 500
    message = GENERIC_MESSAGE


@dataclass(frozen=True)
class ErrorInfo:
    status: int
    message: str

    @property
    def not_found(self):
        return self.status == 404


def normalize(error):
    """Map any raised value to the status and message shown to the user."""
    if isinstance(error, ValidationFailure):
        return ErrorInfo(error.status, error.message)
    if isinstance(error, NotFound):
        return ErrorInfo(404, error.message)
    if isinstance(error, StoreFault):
        return ErrorInfo(error.status, error.message)
    if isinstance(error, CatalogError):
        return ErrorInfo(error.status or 500, error.message or GENERIC_MESSAGE)
    if isinstance(error, HTTPException):
        if error.code == 404:
            return normalize(RouteNotFound())
        return ErrorInfo(error.code or 500, error.description or GENERIC_MESSAGE)
    status = getattr(error, "status", None)
    if isinstance(status, int) and 400 <= status < 600:
        return ErrorInfo(status, str(error) or GENERIC_MESSAGE)
    return ErrorInfo(500, GENERIC_MESSAGE)


def render_error(info):
    if info.not_found:
        return render_template("page-not-found.html", error=info, title="Page Not Found"), 404
    return render_template("error.html", error=info, title="Server Error"), info.status


def register_error_handlers(app):
    @app.errorhandler(CatalogError)
    def handle_catalog_error(error):
        info = normalize(error)
        if info.status >= 500:
            app.logger.error("%s %s", info.status, info.message, exc_info=error)
        else:
            app.logger.info("%s %s", info.status, info.message)
        return render_error(info)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        info = normalize(error)
        app.logger.info("%s %s", info.status, info.message)
        return render_error(info)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        info = normalize(error)
        app.logger.error("%s %s", info.status, info.message, exc_info=error)
        return render_error(info)
