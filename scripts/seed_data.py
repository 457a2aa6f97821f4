#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py

    # Drop and recreate every table first (after a model change)
    python scripts/seed_data.py --reset

This script:
1. Connects to the database using the application settings
2. Clears existing data (optional)
3. Creates sample books and borrowers
4. Checks a few books out, including one that is already overdue
"""

import argparse
import sys
from datetime import timedelta
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from library_api.database import SessionLocal, create_tables, drop_tables
from library_api.models import Book, Borrower, Borrowing
from library_api.services.borrowings import checkout_book
from library_api.utils.dates import utc_now


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Borrowing))
    db.execute(delete(Book))
    db.execute(delete(Borrower))
    db.commit()
    print("Data cleared.")


def create_books(db: Session) -> list[Book]:
    """Create sample books."""
    print("Creating books...")
    books_data = [
        ("1984", "George Orwell", "9780451524935", 4, "A1-01"),
        ("Animal Farm", "George Orwell", "9780451526342", 2, "A1-02"),
        ("Pride and Prejudice", "Jane Austen", "9780141439518", 3, "B2-07"),
        ("The Old Man and the Sea", "Ernest Hemingway", "9780684801223", 1, "C3-11"),
        ("Murder on the Orient Express", "Agatha Christie", "9780062693662", 2, "D1-04"),
        ("Foundation", "Isaac Asimov", "9780553293357", 3, "E4-02"),
        ("The Hobbit", "J.R.R. Tolkien", "9780547928227", 5, "F2-09"),
    ]

    books = [
        Book(
            title=title,
            author=author,
            isbn=isbn,
            available_quantity=quantity,
            shelf_location=shelf,
        )
        for title, author, isbn, quantity, shelf in books_data
    ]
    db.add_all(books)
    db.commit()
    for book in books:
        db.refresh(book)

    print(f"Created {len(books)} books.")
    return books


def create_borrowers(db: Session) -> list[Borrower]:
    """Create sample borrowers."""
    print("Creating borrowers...")
    now = utc_now()
    borrowers = [
        Borrower(name="Ada Lovelace", email="ada@example.com", registered_date=now),
        Borrower(name="Alan Turing", email="alan@example.com", registered_date=now),
        Borrower(name="Grace Hopper", email="grace@example.com", registered_date=now),
    ]
    db.add_all(borrowers)
    db.commit()
    for borrower in borrowers:
        db.refresh(borrower)

    print(f"Created {len(borrowers)} borrowers.")
    return borrowers


def create_borrowings(db: Session, books: list[Book], borrowers: list[Borrower]) -> int:
    """Check out a few books through the real workflow."""
    print("Creating borrowings...")
    now = utc_now()
    checkouts = [
        (books[0], borrowers[0], now),
        (books[2], borrowers[1], now - timedelta(days=3)),
        # Checked out 20 days ago, so already past the 14-day loan period
        (books[3], borrowers[2], now - timedelta(days=20)),
    ]
    for book, borrower, when in checkouts:
        checkout_book(db, book.id, borrower.id, now=when)

    print(f"Created {len(checkouts)} borrowings.")
    return len(checkouts)


def seed_database(clear_existing: bool = True, reset_schema: bool = False) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
        reset_schema: If True, drops and recreates all tables first.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    if reset_schema:
        print("Dropping all tables...")
        drop_tables()
    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        books = create_books(db)
        borrowers = create_borrowers(db)
        borrowing_count = create_borrowings(db, books, borrowers)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Books: {len(books)}")
        print(f"  - Borrowers: {len(borrowers)}")
        print(f"  - Borrowings: {borrowing_count}")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the library database with sample data"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables before seeding"
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing rows instead of clearing them"
    )

    args = parser.parse_args()

    seed_database(clear_existing=not args.keep, reset_schema=args.reset)


if __name__ == "__main__":
    main()
