"""
Borrowing Workflow Service

Checkout and return of books, and the borrowing listings.

Borrowing State Machine
=======================
    checkout ──► Active (returned_date NULL) ──return──► Returned (terminal)

Concurrency
===========
Each workflow is one transaction, committed once at the end:

- The book row is read with SELECT ... FOR UPDATE (a no-op on SQLite),
  so concurrent checkouts/returns of the same book queue up on PostgreSQL.
- Quantity changes are conditional UPDATEs
  (available_quantity = available_quantity - 1 WHERE available_quantity > 0),
  so two checkouts of the last copy can never both succeed.
- The partial unique index uq_borrowings_active_pair rejects a second
  active borrowing of the same (book, borrower) pair even if both requests
  passed the existence check.
- Returns mark the borrowing with WHERE returned_date IS NULL, so a
  borrowing is returned at most once.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from library_api.exceptions import (
    BookUnavailableError,
    DuplicateBorrowingError,
    EmptyResultError,
    NotFoundError,
    ValidationError,
)
from library_api.models import Book, Borrowing
from library_api.services.borrowers import (
    get_borrower_by_email_or_404,
    get_borrower_or_404,
)
from library_api.services.pagination import Page, paginate
from library_api.utils.dates import utc_now

logger = logging.getLogger(__name__)

# Loan period: due date = checkout date + 14 days
LOAN_PERIOD_DAYS = 14

DUPLICATE_BORROWING_MESSAGE = "The borrower already borrowed this book."
UNAVAILABLE_MESSAGE = "Book is not available for checkout."
NO_ACTIVE_BORROWING_MESSAGE = (
    "No active borrowing for this book and borrower, cannot return book."
)


@dataclass
class WorkflowResult:
    """Outcome of a checkout or return."""

    borrowing: Borrowing
    updated_quantity: int


# =============================================================================
# Helper Functions
# =============================================================================
def _get_book_for_update(db: Session, book_id: int) -> Book:
    """
    Load a book and lock its row for the rest of the transaction.

    Raises:
        NotFoundError: If the book does not exist
    """
    book = db.execute(
        select(Book).where(Book.id == book_id).with_for_update()
    ).scalar_one_or_none()
    if book is None:
        raise NotFoundError("Book not found.")
    return book


def _active_borrowing_stmt(book_id: int, borrower_id: int):
    return select(Borrowing).where(
        Borrowing.book_id == book_id,
        Borrowing.borrower_id == borrower_id,
        Borrowing.returned_date.is_(None),
    )


def _adjust_quantity(db: Session, book_id: int, delta: int) -> bool:
    """
    Atomically add delta to a book's available quantity.

    A decrement only applies while copies remain, so the quantity never
    goes below zero. Returns False when no row was updated.
    """
    stmt = (
        update(Book)
        .where(Book.id == book_id)
        .values(available_quantity=Book.available_quantity + delta)
        .execution_options(synchronize_session=False)
    )
    if delta < 0:
        stmt = stmt.where(Book.available_quantity >= -delta)
    return db.execute(stmt).rowcount == 1


# =============================================================================
# Workflow
# =============================================================================
def checkout_book(
    db: Session,
    book_id: int,
    borrower_id: int,
    *,
    now: datetime | None = None,
) -> WorkflowResult:
    """
    Check a book out to a borrower.

    Order of checks:
    1. Borrower exists (404)
    2. Book exists (404)
    3. No active borrowing for this pair (400)
    4. At least one copy available (400)

    On success a Borrowing is created with due_date = now + 14 days and the
    book's available quantity drops by one.

    Args:
        db: Database session
        book_id: Book to check out
        borrower_id: Borrower taking the book
        now: Checkout time, defaults to the current UTC time

    Returns:
        WorkflowResult with the new borrowing and the updated quantity

    Raises:
        NotFoundError: If the borrower or book does not exist
        DuplicateBorrowingError: If the pair already has an active borrowing
        BookUnavailableError: If no copies are left
    """
    if not book_id or not borrower_id:
        raise ValidationError("bookId and borrowerId are required.")

    get_borrower_or_404(db, borrower_id)
    book = _get_book_for_update(db, book_id)

    already_borrowed = db.execute(
        select(exists(_active_borrowing_stmt(book_id, borrower_id)))
    ).scalar()
    if already_borrowed:
        raise DuplicateBorrowingError(DUPLICATE_BORROWING_MESSAGE)

    if book.available_quantity <= 0:
        raise BookUnavailableError(UNAVAILABLE_MESSAGE)

    if not _adjust_quantity(db, book_id, -1):
        # Another transaction took the last copy after our read
        raise BookUnavailableError(UNAVAILABLE_MESSAGE)

    checkout_date = now or utc_now()
    borrowing = Borrowing(
        book_id=book_id,
        borrower_id=borrower_id,
        checkout_date=checkout_date,
        due_date=checkout_date + timedelta(days=LOAN_PERIOD_DAYS),
    )
    db.add(borrowing)

    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(
            f"Concurrent checkout rejected: book={book_id} borrower={borrower_id}"
        )
        raise DuplicateBorrowingError(DUPLICATE_BORROWING_MESSAGE) from exc

    db.commit()
    db.refresh(book)
    db.refresh(borrowing)

    logger.info(
        f"Checkout: borrowing={borrowing.id} book={book_id} "
        f"borrower={borrower_id} remaining={book.available_quantity}"
    )
    return WorkflowResult(borrowing=borrowing, updated_quantity=book.available_quantity)


def return_book(
    db: Session,
    book_id: int,
    *,
    borrower_id: int | None = None,
    borrower_email: str | None = None,
    now: datetime | None = None,
) -> WorkflowResult:
    """
    Return a checked-out book.

    The borrower is identified by id or by email. Marks the active
    borrowing as returned and puts the copy back on the shelf.

    Raises:
        ValidationError: If neither or both borrower identifiers are given
        NotFoundError: If the borrower, the book, or an active borrowing
            for the pair does not exist
    """
    if (borrower_id is None) == (borrower_email is None):
        raise ValidationError("Provide exactly one of borrowerId or borrowerEmail.")

    if borrower_id is not None:
        borrower = get_borrower_or_404(db, borrower_id)
    else:
        borrower = get_borrower_by_email_or_404(db, borrower_email)

    book = _get_book_for_update(db, book_id)

    borrowing = db.execute(
        _active_borrowing_stmt(book_id, borrower.id)
    ).scalar_one_or_none()
    if borrowing is None:
        raise NotFoundError(NO_ACTIVE_BORROWING_MESSAGE)

    marked = db.execute(
        update(Borrowing)
        .where(Borrowing.id == borrowing.id, Borrowing.returned_date.is_(None))
        .values(returned_date=now or utc_now())
        .execution_options(synchronize_session=False)
    ).rowcount
    if marked != 1:
        raise NotFoundError(NO_ACTIVE_BORROWING_MESSAGE)

    _adjust_quantity(db, book_id, +1)

    db.commit()
    db.refresh(book)
    db.refresh(borrowing)

    logger.info(
        f"Return: borrowing={borrowing.id} book={book_id} "
        f"borrower={borrower.id} available={book.available_quantity}"
    )
    return WorkflowResult(borrowing=borrowing, updated_quantity=book.available_quantity)


# =============================================================================
# Listings
# =============================================================================
def get_active_borrowings(
    db: Session, page: int = 1, page_size: int = 10
) -> Page[Borrowing]:
    """All active borrowings with book and borrower loaded."""
    stmt = select(Borrowing).where(Borrowing.returned_date.is_(None))
    return paginate(
        db,
        stmt,
        page,
        page_size,
        Borrowing.checkout_date,
        Borrowing.id,
        options=(selectinload(Borrowing.book), selectinload(Borrowing.borrower)),
    )


def get_user_borrowings(
    db: Session, borrower_id: int, page: int = 1, page_size: int = 10
) -> Page[Borrowing]:
    """
    Books a borrower currently has out.

    Raises:
        NotFoundError: If the borrower does not exist
        EmptyResultError: If the borrower has no active borrowings
    """
    get_borrower_or_404(db, borrower_id)

    stmt = select(Borrowing).where(
        Borrowing.borrower_id == borrower_id,
        Borrowing.returned_date.is_(None),
    )
    result = paginate(
        db,
        stmt,
        page,
        page_size,
        Borrowing.due_date,
        Borrowing.id,
        options=(selectinload(Borrowing.book),),
    )
    if result.total == 0:
        raise EmptyResultError("You are currently not borrowing any book.")
    return result


def get_overdue_books(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    *,
    now: datetime | None = None,
) -> Page[Borrowing]:
    """
    Active borrowings whose due date has passed, most overdue first.

    Raises:
        EmptyResultError: If nothing is overdue
    """
    stmt = select(Borrowing).where(
        Borrowing.due_date < (now or utc_now()),
        Borrowing.returned_date.is_(None),
    )
    result = paginate(
        db,
        stmt,
        page,
        page_size,
        Borrowing.due_date,
        Borrowing.id,
        options=(selectinload(Borrowing.book), selectinload(Borrowing.borrower)),
    )
    if result.total == 0:
        raise EmptyResultError("No overdue books found.")
    return result

