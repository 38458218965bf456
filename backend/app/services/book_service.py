"""
Books API - Book Service
==========================

What:  The five book operations (list, get, create, update, delete).
How:   Each operation is a short delegation to the storage accessor given to
       the constructor; a missing id raises NotFoundError.
Who:   Constructed per request by the routes (see routes/books.py) and
       directly in unit tests with a mocked repository.

Operation Table:
    list_books()            find_all
    get_book(id)            find_by_id          → NotFoundError if absent
    create_book(payload)    save (id unset)
    update_book(id, body)   exists_by_id, save  → NotFoundError if absent
    delete_book(id)         exists_by_id, delete_by_id → NotFoundError if absent
"""

import logging
from typing import List

from app.exceptions import NotFoundError
from app.models.book import Book
from app.repositories.base import CrudRepository
from app.schemas.book import BookPayload, BookResponse

logger = logging.getLogger(__name__)


class BookService:
    """
    Orchestrates book operations over a CrudRepository.

    Stateless apart from the repository it wraps. No field validation is
    performed: title and author are persisted exactly as received.
    """

    def __init__(self, repository: CrudRepository[Book, int]):
        self.repository = repository

    async def list_books(self) -> List[BookResponse]:
        books = await self.repository.find_all()
        return [BookResponse.model_validate(book) for book in books]

    async def get_book(self, book_id: int) -> BookResponse:
        """
        Retrieve a single book by id.

        Raises:
            NotFoundError: No book with that id.
        """
        book = await self.repository.find_by_id(book_id)
        if book is None:
            raise NotFoundError(resource="book", resource_id=str(book_id))
        return BookResponse.model_validate(book)

    async def create_book(self, payload: BookPayload) -> BookResponse:
        """Insert a new book; the database assigns the id."""
        book = await self.repository.save(Book(title=payload.title, author=payload.author))
        logger.info("Book %s created", book.id)
        return BookResponse.model_validate(book)

    async def update_book(self, book_id: int, payload: BookPayload) -> BookResponse:
        """
        Replace title and author of an existing book.

        The id always comes from the path, never from the body.

        Raises:
            NotFoundError: No book with that id.
        """
        if not await self.repository.exists_by_id(book_id):
            raise NotFoundError(resource="book", resource_id=str(book_id))

        book = await self.repository.save(
            Book(id=book_id, title=payload.title, author=payload.author)
        )
        logger.info("Book %s updated", book_id)
        return BookResponse.model_validate(book)

    async def delete_book(self, book_id: int) -> None:
        """
        Raises:
            NotFoundError: No book with that id.
        """
        if not await self.repository.exists_by_id(book_id):
            raise NotFoundError(resource="book", resource_id=str(book_id))

        await self.repository.delete_by_id(book_id)
        logger.info("Book %s deleted", book_id)
