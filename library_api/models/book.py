"""
Book Model

The inventory side of the library. Each row is a title on the shelf with a
count of copies that can still be checked out.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.borrowing import Borrowing


class Book(Base):
    """
    Book model representing titles in the library.

    Table: books

    Fields:
    - title, author: Free text, searched case-insensitively
    - isbn: Unique across all books (format is not enforced)
    - available_quantity: Copies on the shelf; never negative
    - shelf_location: Where to find the book, e.g. "A3-12"

    available_quantity is decremented by checkout and incremented by return.
    The CHECK constraint backs up the conditional UPDATE used by checkout.

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            isbn="9780451524935",
            available_quantity=3,
            shelf_location="A1",
        )
    """

    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint(
            "available_quantity >= 0",
            name="ck_books_available_quantity_non_negative",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name as printed on the book"
    )

    isbn: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
        comment="International Standard Book Number"
    )

    available_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Copies currently available for checkout"
    )

    shelf_location: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Physical shelf location"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # No cascade: a book with borrowing history cannot be deleted.
    borrowings: Mapped[list["Borrowing"]] = relationship(
        "Borrowing",
        back_populates="book",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
