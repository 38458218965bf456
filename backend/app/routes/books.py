"""
Books API - Book Route Handlers
=================================

What:  The five REST endpoints of the `/books` resource.
How:   Path and body are parsed by FastAPI/Pydantic, the work is delegated to
       BookService, and the result is serialized through BookResponse.
Who:   Any HTTP client.

Route Inventory:
    GET    /books          → 200 list
    GET    /books/{id}     → 200 object
    POST   /books          → 201 object with assigned id
    PUT    /books/{id}     → 200 object
    DELETE /books/{id}     → 204 empty body

Missing ids raise NotFoundError; its status code is decided by the global
handler in main.py (500 unless configured otherwise).
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Response

from app.dependencies import get_book_service, require_json_content_type
from app.schemas.book import BookPayload, BookResponse, ErrorResponse
from app.services.book_service import BookService

router = APIRouter(prefix="/books", tags=["Books"])

# Ids are signed 64-bit; anything outside that range is a malformed path (400)
BookIdPath = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]

NOT_FOUND_RESPONSES = {
    404: {"description": "Book not found (when configured for 404)", "model": ErrorResponse},
    500: {"description": "Book not found, or server error", "model": ErrorResponse},
}

BODY_RESPONSES = {
    400: {"description": "Malformed JSON body", "model": ErrorResponse},
    415: {"description": "Content-Type is not application/json", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[BookResponse],
    summary="List all books",
)
async def list_books(service: BookService = Depends(get_book_service)) -> List[BookResponse]:
    return await service.list_books()


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses=NOT_FOUND_RESPONSES,
    summary="Get a book by ID",
)
async def get_book(
    book_id: BookIdPath,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    return await service.get_book(book_id)


@router.post(
    "",
    status_code=201,
    response_model=BookResponse,
    responses=BODY_RESPONSES,
    dependencies=[Depends(require_json_content_type)],
    summary="Create a book",
    description="Creates a book. Any `id` in the body is ignored; the database assigns one.",
)
async def create_book(
    payload: BookPayload,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    return await service.create_book(payload)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={**BODY_RESPONSES, **NOT_FOUND_RESPONSES},
    dependencies=[Depends(require_json_content_type)],
    summary="Replace a book",
    description="Overwrites title and author. The id is always taken from the path.",
)
async def update_book(
    book_id: BookIdPath,
    payload: BookPayload,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    return await service.update_book(book_id, payload)


@router.delete(
    "/{book_id}",
    status_code=204,
    response_class=Response,
    responses=NOT_FOUND_RESPONSES,
    summary="Delete a book",
)
async def delete_book(
    book_id: BookIdPath,
    service: BookService = Depends(get_book_service),
) -> Response:
    await service.delete_book(book_id)
    return Response(status_code=204)
