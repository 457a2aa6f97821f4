"""
Domain Exceptions

Every failure a service can report is one of these exceptions. Services
raise them; the handlers registered in main.py turn them into JSON
responses of the form:

    {"error": "not_found", "detail": "Book not found."}

Taxonomy:
- ValidationError  → 400 (missing/malformed input, unavailable book,
                          duplicate active borrowing)
- NotFoundError    → 404 (unknown id, no matching record)
- EmptyResultError → 404 (a listing that requires at least one row is empty)
- ConflictError    → 409 (duplicate isbn/email, record still referenced)
- InternalError    → 500 (storage or file I/O failure)
"""

from fastapi import status


class LibraryError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "detail": self.detail}


class ValidationError(LibraryError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "bad_request"


class DuplicateBorrowingError(ValidationError):
    """The borrower already has an active borrowing of this book."""

    error = "duplicate_borrowing"


class BookUnavailableError(ValidationError):
    """No copies left to check out."""

    error = "book_unavailable"


class NotFoundError(LibraryError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class EmptyResultError(NotFoundError):
    """
    A listing or export found nothing to return.

    Kept apart from NotFoundError so clients can tell "nothing matched"
    from "the thing you referenced does not exist".
    """

    error = "no_results"


class ConflictError(LibraryError):
    status_code = status.HTTP_409_CONFLICT
    error = "conflict"


class InternalError(LibraryError):
    pass
