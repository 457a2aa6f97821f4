"""
SQLAlchemy Models Package

This package contains all database models for the Library API.

Model Relationships:
- Book <-> Borrowing: One-to-Many (a book can be borrowed many times)
- Borrower <-> Borrowing: One-to-Many (a borrower can hold many borrowings)

Borrowings reference books and borrowers by id only; deleting either side
is refused while borrowings still point at it.

Import all models here to:
1. Make them available as: from library_api.models import Book, Borrower, Borrowing
2. Register them on Base.metadata before create_all()
"""

from library_api.models.book import Book
from library_api.models.borrower import Borrower
from library_api.models.borrowing import Borrowing

__all__ = [
    "Book",
    "Borrower",
    "Borrowing",
]
