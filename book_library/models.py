from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class Book(db.Model):
    __tablename__ = "books"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False, index=True)
    author = db.Column(db.String(200), nullable=False, index=True)
    genre = db.Column(db.String(120), nullable=True)
    year = db.Column(db.Integer, nullable=True)

    # Columns a caller may write through create/update
    EDITABLE = ("title", "author", "genre", "year")

    def __repr__(self):
        return f"<Book {self.id} {self.title!r}>"
