"""
Book Inventory Service

Operations on the books table. Quantity changes caused by checkout and
return live in borrowings.py; this module only handles direct edits.
"""

import logging

from sqlalchemy import exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from library_api.exceptions import ConflictError, NotFoundError
from library_api.models import Book, Borrowing
from library_api.schemas import BookCreate, BookUpdate
from library_api.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

DUPLICATE_ISBN_MESSAGE = "A book with this ISBN already exists."


def get_book_or_404(db: Session, book_id: int) -> Book:
    """
    Get a book by ID.

    Raises:
        NotFoundError: If no book has this id
    """
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError("Book not found.")
    return book


def _isbn_taken(db: Session, isbn: str, exclude_id: int | None = None) -> bool:
    stmt = select(Book.id).where(Book.isbn == isbn)
    if exclude_id is not None:
        stmt = stmt.where(Book.id != exclude_id)
    return db.execute(select(exists(stmt))).scalar()


def _commit_or_conflict(db: Session, message: str) -> None:
    """Commit, turning a unique-constraint race into a ConflictError."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity error on commit: {exc.orig}")
        raise ConflictError(message) from exc


def add_book(db: Session, data: BookCreate) -> Book:
    """
    Add a new book to the inventory.

    Raises:
        ConflictError: If the ISBN is already registered
    """
    if _isbn_taken(db, data.isbn):
        raise ConflictError(DUPLICATE_ISBN_MESSAGE)

    book = Book(**data.model_dump())
    db.add(book)
    _commit_or_conflict(db, DUPLICATE_ISBN_MESSAGE)
    db.refresh(book)

    logger.info(f"Book added: id={book.id} isbn={book.isbn}")
    return book


def get_books(db: Session, page: int = 1, page_size: int = 10) -> Page[Book]:
    """List all books, oldest first."""
    return paginate(db, select(Book), page, page_size, Book.id)


def search_books(
    db: Session,
    *,
    title: str | None = None,
    author: str | None = None,
    isbn: str | None = None,
    page: int = 1,
    page_size: int = 10,
) -> Page[Book]:
    """
    Search books with AND-combined filters.

    Each filter is a case-insensitive substring match. Filters that are
    None or empty are ignored, so with no filters this is get_books().
    "%" and "_" in a filter match themselves, not any characters.

    Examples:
        search_books(db, title="ring")                  # "The Lord of the Rings"
        search_books(db, author="orwell", isbn="978")   # both must match
    """
    stmt = select(Book)

    if title:
        stmt = stmt.where(func.lower(Book.title).contains(title.lower(), autoescape=True))
    if author:
        stmt = stmt.where(func.lower(Book.author).contains(author.lower(), autoescape=True))
    if isbn:
        stmt = stmt.where(func.lower(Book.isbn).contains(isbn.lower(), autoescape=True))

    return paginate(db, stmt, page, page_size, Book.id)


def update_book(db: Session, book_id: int, data: BookUpdate) -> Book:
    """
    Apply a partial update.

    Only the supplied fields change. An ISBN change is checked against
    the other books.

    Raises:
        NotFoundError: If the book does not exist
        ConflictError: If the new ISBN belongs to another book
    """
    book = get_book_or_404(db, book_id)
    changes = data.changes()

    if "isbn" in changes and _isbn_taken(db, changes["isbn"], exclude_id=book_id):
        raise ConflictError(DUPLICATE_ISBN_MESSAGE)

    for field, value in changes.items():
        setattr(book, field, value)

    _commit_or_conflict(db, DUPLICATE_ISBN_MESSAGE)
    db.refresh(book)

    logger.info(f"Book updated: id={book.id} fields={sorted(changes)}")
    return book


def delete_book(db: Session, book_id: int) -> Book:
    """
    Delete a book and return the removed record.

    Raises:
        NotFoundError: If the book does not exist
        ConflictError: If any borrowing (active or returned) references it
    """
    book = get_book_or_404(db, book_id)

    referenced = db.execute(
        select(exists().where(Borrowing.book_id == book_id))
    ).scalar()
    if referenced:
        raise ConflictError("Book has borrowing records and cannot be deleted.")

    db.delete(book)
    _commit_or_conflict(db, "Book has borrowing records and cannot be deleted.")

    logger.info(f"Book deleted: id={book_id}")
    return book
