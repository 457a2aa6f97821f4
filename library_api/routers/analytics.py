"""
Analytics Router

CSV downloads:
- GET /analytics/borrowing-report?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD
- GET /analytics/last-month-borrowing
- GET /analytics/last-month-overdue

Each endpoint answers with a CSV attachment on success, carrying the number
of data rows in an X-Row-Count header, or a JSON error (400/404) otherwise.
The temporary file behind the download is removed once the response has
been sent.
"""

from datetime import date

from fastapi import APIRouter, Query

from library_api.dependencies import DbSession
from library_api.schemas import ErrorResponse
from library_api.services import analytics as analytics_service
from library_api.services.analytics import ExportFile
from library_api.utils.export import CSV_MEDIA_TYPE, TemporaryFileResponse

ROW_COUNT_HEADER = "X-Row-Count"

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    responses={
        200: {"content": {CSV_MEDIA_TYPE: {}}, "description": "CSV file download"},
        404: {"model": ErrorResponse, "description": "No borrowings to report"},
    },
)


def to_download(export: ExportFile) -> TemporaryFileResponse:
    return TemporaryFileResponse(
        export.path,
        filename=export.filename,
        headers={ROW_COUNT_HEADER: str(export.row_count)},
    )


@router.get(
    "/borrowing-report",
    summary="Borrowings in a date range",
    responses={400: {"model": ErrorResponse, "description": "Missing or invalid dates"}},
)
def export_borrowing_report(
    db: DbSession,
    start_date: date | None = Query(default=None, alias="startDate", examples=["2026-09-01"]),
    end_date: date | None = Query(default=None, alias="endDate", examples=["2026-09-30"]),
) -> TemporaryFileResponse:
    """Borrowings whose checkout date falls in [startDate, endDate], inclusive."""
    export = analytics_service.export_borrowing_report(db, start_date, end_date)
    return to_download(export)


@router.get(
    "/last-month-borrowing",
    summary="Borrowings of the previous month",
)
def export_borrowings_last_month(db: DbSession) -> TemporaryFileResponse:
    export = analytics_service.export_borrowings_last_month(db)
    return to_download(export)


@router.get(
    "/last-month-overdue",
    summary="Overdue borrowings of the previous month",
)
def export_overdue_last_month(db: DbSession) -> TemporaryFileResponse:
    export = analytics_service.export_overdue_last_month(db)
    return to_download(export)
