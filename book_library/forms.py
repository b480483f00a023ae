from flask_wtf import FlaskForm
from wtforms import IntegerField, StringField, SubmitField
from wtforms.validators import Length, NumberRange, Optional

from .errors import ValidationFailure
from .store import YEAR_MAX, YEAR_MIN, YEAR_RANGE_MESSAGE, clean_fields, validate_fields


def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


class BookForm(FlaskForm):
    # title/author are required by BookStore, check() reports both sets of errors together
    title = StringField("Title", filters=[strip_filter], validators=[Length(max=250)])
    author = StringField("Author", filters=[strip_filter], validators=[Length(max=200)])
    genre = StringField("Genre", filters=[strip_filter], validators=[Optional(), Length(max=120)])
    year = IntegerField("Year", validators=[
        Optional(), NumberRange(min=YEAR_MIN, max=YEAR_MAX, message=YEAR_RANGE_MESSAGE),
    ])
    submit = SubmitField("Submit")

    def book_fields(self):
        return {
            "title": self.title.data or "",
            "author": self.author.data or "",
            "genre": self.genre.data,
            "year": self.year.data,
        }

    def check(self):
        """Validate the submission, raising ValidationFailure with every field error found."""
        failure = None
        if not self.validate_on_submit():
            failure = ValidationFailure(self.errors)
        try:
            validate_fields(clean_fields(self.book_fields()))
        except ValidationFailure as rejected:
            failure = rejected if failure is None else rejected.merge(failure)
        if failure is not None:
            raise failure
