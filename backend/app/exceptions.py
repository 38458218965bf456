"""
Books API - Custom Exception Hierarchy
========================================

What:  Application-specific exceptions and their HTTP status mapping.
How:   Every exception carries a message, an optional context dict and an
       `ErrorKind`. `status_code_for()` is the single place where a kind is
       turned into an HTTP status; the global handlers in main.py use it.
Who:   Raised by BookService and by request guards; caught by global handlers.

Exception Hierarchy:
    BooksApiError (base)
    ├── NotFoundError               → settings.not_found_status_code (500 by default)
    ├── BadRequestError             → 400 Bad Request
    └── UnsupportedMediaTypeError   → 415 Unsupported Media Type
"""

import enum
from typing import Any, Dict, Optional

from app.config import settings


class ErrorKind(str, enum.Enum):
    """Kinds of failure the API reports. The value is the response error code."""

    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"


ERROR_STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: 415,
}


def status_code_for(kind: ErrorKind) -> int:
    """
    Map an error kind to its HTTP status code.

    NOT_FOUND is read from settings on each call so it can be switched
    between the historical 500 and REST-style 404 without code changes.
    """
    if kind is ErrorKind.NOT_FOUND:
        return settings.not_found_status_code
    return ERROR_STATUS_CODES[kind]


class BooksApiError(Exception):
    """
    Base exception for all Books API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned to the client)
        kind:     ErrorKind used for the status code and the "error" field
    """

    kind: ErrorKind = ErrorKind.BAD_REQUEST

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status_code_for(self.kind)


class NotFoundError(BooksApiError):
    """
    Raised when a requested resource does not exist.

    When:    GET, PUT or DELETE /books/{id} with an id that has no row.
    HTTP:    settings.not_found_status_code (500 unless configured to 404)
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class BadRequestError(BooksApiError):
    """
    Raised when the request body or path cannot be decoded.

    When:    Invalid JSON, missing/non-string fields, non-integer or
             out-of-range ids. Built from RequestValidationError in main.py.
    HTTP:    400 Bad Request
    """

    kind = ErrorKind.BAD_REQUEST

    def __init__(
        self,
        message: str = "Malformed request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnsupportedMediaTypeError(BooksApiError):
    """
    Raised when a body-bearing request is not declared as JSON.

    HTTP:    415 Unsupported Media Type
    """

    kind = ErrorKind.UNSUPPORTED_MEDIA_TYPE

    def __init__(
        self,
        content_type: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if content_type:
            message = f"Content-Type '{content_type}' is not supported. Use application/json"
        else:
            message = "Missing Content-Type header. Use application/json"
        ctx = context or {}
        ctx["content_type"] = content_type
        super().__init__(message=message, context=ctx)
