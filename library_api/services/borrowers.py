"""
Borrower Registry Service
"""

import logging

from sqlalchemy import exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from library_api.exceptions import ConflictError, NotFoundError
from library_api.models import Borrower, Borrowing
from library_api.schemas import BorrowerCreate, BorrowerUpdate
from library_api.services.pagination import Page, paginate
from library_api.utils.dates import utc_now

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A borrower with this email is already registered."


def get_borrower_or_404(db: Session, borrower_id: int) -> Borrower:
    """
    Get a borrower by ID.

    Raises:
        NotFoundError: If no borrower has this id
    """
    borrower = db.get(Borrower, borrower_id)
    if borrower is None:
        raise NotFoundError("Borrower not found.")
    return borrower


def get_borrower_by_email_or_404(db: Session, email: str) -> Borrower:
    """
    Get a borrower by email address (case-insensitive).

    Raises:
        NotFoundError: If no borrower has this email
    """
    borrower = db.execute(
        select(Borrower).where(func.lower(Borrower.email) == email.lower())
    ).scalar_one_or_none()
    if borrower is None:
        raise NotFoundError("Borrower not found.")
    return borrower


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    stmt = select(Borrower.id).where(func.lower(Borrower.email) == email.lower())
    if exclude_id is not None:
        stmt = stmt.where(Borrower.id != exclude_id)
    return db.execute(select(exists(stmt))).scalar()


def _commit_or_conflict(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity error on commit: {exc.orig}")
        raise ConflictError(message) from exc


def register_borrower(db: Session, data: BorrowerCreate) -> Borrower:
    """
    Register a new borrower with registered_date set to now.

    Raises:
        ConflictError: If the email is already registered
    """
    if _email_taken(db, data.email):
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    borrower = Borrower(
        name=data.name,
        email=data.email,
        registered_date=utc_now(),
    )
    db.add(borrower)
    _commit_or_conflict(db, DUPLICATE_EMAIL_MESSAGE)
    db.refresh(borrower)

    logger.info(f"Borrower registered: id={borrower.id}")
    return borrower


def get_borrowers(db: Session, page: int = 1, page_size: int = 10) -> Page[Borrower]:
    return paginate(db, select(Borrower), page, page_size, Borrower.id)


def update_borrower(db: Session, borrower_id: int, data: BorrowerUpdate) -> Borrower:
    """
    Merge the supplied fields over the stored borrower.

    Raises:
        NotFoundError: If the borrower does not exist
        ConflictError: If the new email belongs to another borrower
    """
    borrower = get_borrower_or_404(db, borrower_id)
    changes = data.changes()

    if "email" in changes and _email_taken(db, changes["email"], exclude_id=borrower_id):
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    for field, value in changes.items():
        setattr(borrower, field, value)

    _commit_or_conflict(db, DUPLICATE_EMAIL_MESSAGE)
    db.refresh(borrower)

    logger.info(f"Borrower updated: id={borrower.id} fields={sorted(changes)}")
    return borrower


def delete_borrower(db: Session, borrower_id: int) -> Borrower:
    """
    Delete a borrower and return the removed record.

    Raises:
        NotFoundError: If the borrower does not exist
        ConflictError: If any borrowing references the borrower
    """
    borrower = get_borrower_or_404(db, borrower_id)

    referenced = db.execute(
        select(exists().where(Borrowing.borrower_id == borrower_id))
    ).scalar()
    if referenced:
        raise ConflictError("Borrower has borrowing records and cannot be deleted.")

    db.delete(borrower)
    _commit_or_conflict(db, "Borrower has borrowing records and cannot be deleted.")

    logger.info(f"Borrower deleted: id={borrower_id}")
    return borrower
