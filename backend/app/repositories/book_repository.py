"""Storage accessor for the `books` table."""

from app.models.book import Book
from app.repositories.base import SQLAlchemyRepository


class BookRepository(SQLAlchemyRepository[Book]):
    """CRUD access to Book rows; all behaviour comes from SQLAlchemyRepository."""

    model = Book
