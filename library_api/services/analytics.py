"""
Analytics Export Service

Borrowing reports as CSV downloads.

Reports:
- Borrowing report: borrowings checked out in a caller-supplied date range
- Last month: every borrowing checked out in the previous calendar month
- Last month overdue: previous-month borrowings still out past their due date

Each report is a query, a projection to flat rows with fixed column
headings, and a CSV file written to the export directory. The router wraps
the file in a TemporaryFileResponse, which deletes it after sending.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from library_api.config import get_settings
from library_api.exceptions import EmptyResultError, ValidationError
from library_api.models import Borrowing
from library_api.utils.dates import (
    end_of_day,
    format_date,
    previous_month_range,
    start_of_day,
    utc_now,
)
from library_api.utils.export import write_csv_file

logger = logging.getLogger(__name__)

NOT_RETURNED = "Not Returned"

BORROWING_COLUMNS = (
    "Book Title",
    "Borrower Name",
    "Borrower Email",
    "Checkout Date",
    "Due Date",
    "Returned Date",
)

# Every row is unreturned, so the Returned Date column is left out
OVERDUE_COLUMNS = BORROWING_COLUMNS[:-1]

BORROWING_REPORT_FILENAME = "borrowings-report.csv"
LAST_MONTH_FILENAME = "all-borrowings-last-month.csv"
OVERDUE_LAST_MONTH_FILENAME = "overdue-borrowings-report.csv"


@dataclass
class ExportFile:
    """A generated report: where it was written and the download name."""

    path: str
    filename: str
    row_count: int


# =============================================================================
# Projection
# =============================================================================
def borrowing_to_row(borrowing: Borrowing) -> dict[str, str]:
    """
    Flatten a borrowing (with book and borrower loaded) into a report row.

    Dates are YYYY-MM-DD; an active borrowing shows "Not Returned".
    """
    return {
        "Book Title": borrowing.book.title,
        "Borrower Name": borrowing.borrower.name,
        "Borrower Email": borrowing.borrower.email,
        "Checkout Date": format_date(borrowing.checkout_date),
        "Due Date": format_date(borrowing.due_date),
        "Returned Date": format_date(borrowing.returned_date) or NOT_RETURNED,
    }


def overdue_to_row(borrowing: Borrowing) -> dict[str, str]:
    row = borrowing_to_row(borrowing)
    del row["Returned Date"]
    return row


# =============================================================================
# Queries
# =============================================================================
def _borrowings_checked_out_between(
    db: Session,
    start: datetime,
    end: datetime,
    *extra_criteria,
) -> Sequence[Borrowing]:
    stmt = (
        select(Borrowing)
        .where(
            Borrowing.checkout_date >= start,
            Borrowing.checkout_date <= end,
            *extra_criteria,
        )
        .options(selectinload(Borrowing.book), selectinload(Borrowing.borrower))
        .order_by(Borrowing.checkout_date, Borrowing.id)
    )
    return db.execute(stmt).scalars().all()


def _write_report(
    rows: list[dict[str, str]],
    headings: Sequence[str],
    filename: str,
) -> ExportFile:
    settings = get_settings()
    path = write_csv_file(
        rows=rows,
        headings=headings,
        directory=settings.export_dir,
        prefix=filename.removesuffix(".csv") + "-",
    )
    logger.info(f"Export generated: {filename} ({len(rows)} rows)")
    return ExportFile(path=path, filename=filename, row_count=len(rows))


# =============================================================================
# Reports
# =============================================================================
def export_borrowing_report(
    db: Session,
    start_date: date | None,
    end_date: date | None,
) -> ExportFile:
    """
    Borrowings checked out between two dates, both days inclusive.

    Raises:
        ValidationError: If a date is missing or the range is reversed
        EmptyResultError: If no borrowing falls in the range
    """
    if start_date is None or end_date is None:
        raise ValidationError("startDate and endDate are required.")
    if start_date > end_date:
        raise ValidationError("startDate must not be after endDate.")

    borrowings = _borrowings_checked_out_between(
        db, start_of_day(start_date), end_of_day(end_date)
    )
    if not borrowings:
        raise EmptyResultError("No borrowings found for the specified date range.")

    return _write_report(
        [borrowing_to_row(b) for b in borrowings],
        BORROWING_COLUMNS,
        BORROWING_REPORT_FILENAME,
    )


def export_borrowings_last_month(
    db: Session,
    *,
    today: date | None = None,
) -> ExportFile:
    """
    Every borrowing checked out during the previous calendar month.

    Raises:
        EmptyResultError: If there were none
    """
    start, end = previous_month_range(today or utc_now().date())

    borrowings = _borrowings_checked_out_between(db, start, end)
    if not borrowings:
        raise EmptyResultError("No borrowings found for the last month.")

    return _write_report(
        [borrowing_to_row(b) for b in borrowings],
        BORROWING_COLUMNS,
        LAST_MONTH_FILENAME,
    )


def export_overdue_last_month(
    db: Session,
    *,
    now: datetime | None = None,
) -> ExportFile:
    """
    Borrowings checked out last month that are still out and past due.

    Raises:
        EmptyResultError: If there were none
    """
    now = now or utc_now()
    start, end = previous_month_range(now.date())

    borrowings = _borrowings_checked_out_between(
        db,
        start,
        end,
        Borrowing.returned_date.is_(None),
        Borrowing.due_date < now,
    )
    if not borrowings:
        raise EmptyResultError("No overdue borrowings found for the last month.")

    return _write_report(
        [overdue_to_row(b) for b in borrowings],
        OVERDUE_COLUMNS,
        OVERDUE_LAST_MONTH_FILENAME,
    )
