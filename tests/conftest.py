"""
pytest Fixtures for Library API Tests

Fixtures:
- engine (session scope): SQLite in-memory engine with all tables
- db_session (function scope): session inside a transaction that is rolled
  back after each test, so tests never see each other's data
- client: TestClient with get_db overridden to use db_session
- sample data: books, borrowers and a borrowing factory
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# Set environment variables BEFORE importing the app: the application
# engine points at SQLite instead of PostgreSQL and rate limiting is off.
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import Callable, Generator
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_api.config import get_settings
from library_api.database import Base, get_db
from library_api.main import app
from library_api.models import Book, Borrower, Borrowing
from library_api.services.borrowings import LOAN_PERIOD_DAYS
from library_api.utils.dates import utc_now


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the single connection alive for the whole session;
    without it the in-memory database would vanish between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session joins an outer transaction that is rolled back afterwards,
    so commits made by the services stay invisible to other tests.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client that uses the test database session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def export_dir(tmp_path, monkeypatch):
    """Write CSV exports into a per-test directory."""
    monkeypatch.setattr(get_settings(), "export_dir", str(tmp_path))
    return tmp_path


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """A book with two copies on the shelf."""
    book = Book(
        title="1984",
        author="George Orwell",
        isbn="9780451524935",
        available_quantity=2,
        shelf_location="A1-01",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def single_copy_book(db_session: Session) -> Book:
    """A book with exactly one copy left."""
    book = Book(
        title="The Old Man and the Sea",
        author="Ernest Hemingway",
        isbn="111",
        available_quantity=1,
        shelf_location="C3-11",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session) -> list[Book]:
    """Twelve books for pagination testing."""
    books = [
        Book(
            title=f"Test Book {i + 1}",
            author="Jane Austen" if i % 2 == 0 else "Isaac Asimov",
            isbn=f"97800000000{i:02d}",
            available_quantity=i,
            shelf_location=f"S{i}",
        )
        for i in range(12)
    ]
    db_session.add_all(books)
    db_session.commit()
    for book in books:
        db_session.refresh(book)
    return books


@pytest.fixture
def sample_borrower(db_session: Session) -> Borrower:
    borrower = Borrower(
        name="Ada Lovelace",
        email="ada@example.com",
        registered_date=utc_now(),
    )
    db_session.add(borrower)
    db_session.commit()
    db_session.refresh(borrower)
    return borrower


@pytest.fixture
def second_borrower(db_session: Session) -> Borrower:
    borrower = Borrower(
        name="Alan Turing",
        email="alan@example.com",
        registered_date=utc_now(),
    )
    db_session.add(borrower)
    db_session.commit()
    db_session.refresh(borrower)
    return borrower


@pytest.fixture
def make_borrowing(db_session: Session) -> Callable[..., Borrowing]:
    """
    Factory inserting a borrowing row directly.

    Book quantities are not touched; use the checkout endpoint when the
    quantity matters.
    """

    def _make(
        book: Book,
        borrower: Borrower,
        checkout_date: datetime,
        returned_date: datetime | None = None,
    ) -> Borrowing:
        borrowing = Borrowing(
            book_id=book.id,
            borrower_id=borrower.id,
            checkout_date=checkout_date,
            due_date=checkout_date + timedelta(days=LOAN_PERIOD_DAYS),
            returned_date=returned_date,
        )
        db_session.add(borrowing)
        db_session.commit()
        db_session.refresh(borrowing)
        return borrowing

    return _make
