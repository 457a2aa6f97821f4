"""
Books Router

Inventory endpoints:
- GET    /book/all               list books (rate limited)
- GET    /book/search            search by title/author/isbn (rate limited)
- POST   /book/add               add a book
- PATCH  /book/update/{bookId}   partial update
- DELETE /book/delete/{bookId}   delete a book
"""

from fastapi import APIRouter, Query, Request, status

from library_api.config import get_settings
from library_api.dependencies import DbSession, Pagination
from library_api.schemas import (
    BookCreate,
    BookListResponse,
    BookMessageResponse,
    BookResponse,
    BookUpdate,
    ErrorResponse,
)
from library_api.services import books as book_service
from library_api.services.pagination import Page
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/book",
    tags=["Books"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)


def to_list_response(page: Page) -> BookListResponse:
    return BookListResponse(
        books=[BookResponse.model_validate(book) for book in page.items],
        pagination=page.page_info("total_books"),
    )


@router.get(
    "/all",
    response_model=BookListResponse,
    summary="List all books",
)
@limiter.limit(settings.rate_limit_book_listing)
def get_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
) -> BookListResponse:
    """
    List all books with pagination.

    Returns the page of books plus
    {currentPage, pageSize, totalPages, totalBooks}.
    """
    page = book_service.get_books(db, pagination.page, pagination.page_size)
    return to_list_response(page)


@router.get(
    "/search",
    response_model=BookListResponse,
    summary="Search books",
    description="Case-insensitive partial match on title, author and ISBN. Filters are AND-combined.",
)
@limiter.limit(settings.rate_limit_book_listing)
def search_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    title: str | None = Query(default=None, max_length=500, examples=["ring"]),
    author: str | None = Query(default=None, max_length=255, examples=["tolkien"]),
    isbn: str | None = Query(default=None, max_length=20, examples=["978"]),
) -> BookListResponse:
    """
    Search books.

    Examples:
        GET /book/search?title=ring
        GET /book/search?author=orwell&page=2&pageSize=5
    """
    page = book_service.search_books(
        db,
        title=title,
        author=author,
        isbn=isbn,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return to_list_response(page)


@router.post(
    "/add",
    response_model=BookMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    responses={409: {"model": ErrorResponse, "description": "ISBN already exists"}},
)
def add_book(book_data: BookCreate, db: DbSession) -> BookMessageResponse:
    """Add a new book. Every field is required; the ISBN must be new."""
    book = book_service.add_book(db, book_data)
    return BookMessageResponse(
        message="Book added successfully.",
        book=BookResponse.model_validate(book),
    )


@router.patch(
    "/update/{book_id}",
    response_model=BookMessageResponse,
    summary="Update a book",
    responses={409: {"model": ErrorResponse, "description": "ISBN already exists"}},
)
def update_book(
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
) -> BookMessageResponse:
    """Update only the supplied fields of a book."""
    book = book_service.update_book(db, book_id, book_data)
    return BookMessageResponse(
        message="Book updated successfully.",
        book=BookResponse.model_validate(book),
    )


@router.delete(
    "/delete/{book_id}",
    response_model=BookMessageResponse,
    summary="Delete a book",
    responses={409: {"model": ErrorResponse, "description": "Book has borrowings"}},
)
def delete_book(book_id: int, db: DbSession) -> BookMessageResponse:
    """Delete a book and return the removed record."""
    book = book_service.delete_book(db, book_id)
    return BookMessageResponse(
        message="Book deleted successfully.",
        book=BookResponse.model_validate(book),
    )
