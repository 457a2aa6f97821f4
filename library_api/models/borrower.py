"""
Borrower Model

A registered library member.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.borrowing import Borrowing


class Borrower(Base):
    """
    Borrower model.

    Table: borrowers

    Indexes:
    - email: Unique; a person registers once per address

    registered_date is set by the service at registration time and can be
    corrected later through the update endpoint.
    """

    __tablename__ = "borrowers"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Borrower's full name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Contact email, unique per borrower"
    )

    registered_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the borrower registered"
    )

    borrowings: Mapped[list["Borrowing"]] = relationship(
        "Borrowing",
        back_populates="borrower",
    )

    def __repr__(self) -> str:
        return f"Borrower(id={self.id}, email='{self.email}')"
