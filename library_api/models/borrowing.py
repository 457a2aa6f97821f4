"""
Borrowing Model

One checkout of one book by one borrower.

State is carried by returned_date:
- NULL  → Active (the book is out)
- set   → Returned (terminal, never changes again)

A partial unique index allows at most one Active borrowing per
(book, borrower) pair. Returned rows are not constrained, so the same
borrower can check the same book out again after returning it.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book
    from library_api.models.borrower import Borrower


class Borrowing(Base):
    """
    Borrowing model.

    Table: borrowings

    Fields:
    - checkout_date: When the book left the shelf
    - due_date: checkout_date + the loan period (14 days)
    - returned_date: When it came back, NULL while active

    Indexes:
    - uq_borrowings_active_pair: unique (book_id, borrower_id) WHERE returned_date IS NULL
    - due_date: used by the overdue listing
    - checkout_date: used by the analytics date-range exports
    """

    __tablename__ = "borrowings"
    __table_args__ = (
        Index(
            "uq_borrowings_active_pair",
            "book_id",
            "borrower_id",
            unique=True,
            postgresql_where=text("returned_date IS NULL"),
            sqlite_where=text("returned_date IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id"),
        index=True,
        nullable=False,
    )

    borrower_id: Mapped[int] = mapped_column(
        ForeignKey("borrowers.id"),
        index=True,
        nullable=False,
    )

    checkout_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        index=True,
        nullable=False,
    )

    due_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        index=True,
        nullable=False,
    )

    returned_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    book: Mapped["Book"] = relationship("Book", back_populates="borrowings")
    borrower: Mapped["Borrower"] = relationship("Borrower", back_populates="borrowings")

    @property
    def is_active(self) -> bool:
        return self.returned_date is None

    def __repr__(self) -> str:
        return (
            f"Borrowing(id={self.id}, book_id={self.book_id}, "
            f"borrower_id={self.borrower_id}, returned={not self.is_active})"
        )
