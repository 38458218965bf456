"""
Books API - Route Dependencies
================================

What:  FastAPI dependencies that build the per-request object chain
       (session → BookRepository → BookService) and guard request bodies.
Who:   Injected into route handlers via Depends().
"""

from email.message import Message
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import UnsupportedMediaTypeError
from app.repositories.book_repository import BookRepository
from app.services.book_service import BookService


def get_book_repository(db: AsyncSession = Depends(get_db_session)) -> BookRepository:
    return BookRepository(db)


def get_book_service(
    repository: BookRepository = Depends(get_book_repository),
) -> BookService:
    return BookService(repository)


def is_json_content_type(content_type: Optional[str]) -> bool:
    """
    True for application/json and application/*+json, parameters ignored.

    >>> is_json_content_type("application/json; charset=utf-8")
    True
    >>> is_json_content_type("text/plain")
    False
    """
    if not content_type:
        return False
    message = Message()
    message["content-type"] = content_type
    if message.get_content_maintype() != "application":
        return False
    subtype = message.get_content_subtype()
    return subtype == "json" or subtype.endswith("+json")


async def require_json_content_type(request: Request) -> None:
    """
    Reject body-bearing requests that are not declared as JSON.

    Raises:
        UnsupportedMediaTypeError: Content-Type missing or not JSON (→ 415).
    """
    content_type = request.headers.get("content-type")
    if not is_json_content_type(content_type):
        raise UnsupportedMediaTypeError(content_type=content_type)
