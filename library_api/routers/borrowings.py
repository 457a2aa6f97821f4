"""
Borrowings Router

Checkout/return workflow and borrowing listings:
- GET  /borrowing/active     all active borrowings
- GET  /borrowing/my         active borrowings of one borrower (?borrowerId=)
- GET  /borrowing/overdue    active borrowings past their due date
- POST /borrowing/checkout   check a book out
- POST /borrowing/return     return a book (borrower by id or email)
"""

from fastapi import APIRouter, Query, status

from library_api.dependencies import DbSession, Pagination
from library_api.schemas import (
    ActiveBorrowingListResponse,
    BorrowingResponse,
    BorrowingWithBook,
    BorrowingWithDetails,
    BorrowingWorkflowResponse,
    CheckoutRequest,
    ErrorResponse,
    OverdueBorrowingListResponse,
    ReturnRequest,
    UserBorrowingListResponse,
)
from library_api.services import borrowings as borrowing_service
from library_api.services.borrowings import WorkflowResult

router = APIRouter(
    prefix="/borrowing",
    tags=["Borrowings"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or request rejected"},
        404: {"model": ErrorResponse, "description": "Record not found or nothing to list"},
    },
)


def to_workflow_response(message: str, result: WorkflowResult) -> BorrowingWorkflowResponse:
    return BorrowingWorkflowResponse(
        message=message,
        borrowing=BorrowingResponse.model_validate(result.borrowing),
        updated_quantity=result.updated_quantity,
    )


@router.get(
    "/active",
    response_model=ActiveBorrowingListResponse,
    summary="List active borrowings",
)
def get_active_borrowings(
    db: DbSession,
    pagination: Pagination,
) -> ActiveBorrowingListResponse:
    """Every borrowing that has not been returned, with book and borrower details."""
    page = borrowing_service.get_active_borrowings(db, pagination.page, pagination.page_size)
    return ActiveBorrowingListResponse(
        active_borrowings=[BorrowingWithDetails.model_validate(b) for b in page.items],
        pagination=page.page_info("total_active_borrowings"),
    )


@router.get(
    "/my",
    response_model=UserBorrowingListResponse,
    summary="List a borrower's current books",
)
def get_user_borrowings(
    db: DbSession,
    pagination: Pagination,
    borrower_id: int = Query(..., ge=1, alias="borrowerId"),
) -> UserBorrowingListResponse:
    """
    Books the borrower currently has out.

    Responds 404 with error "no_results" when the borrower has nothing out.
    """
    page = borrowing_service.get_user_borrowings(
        db, borrower_id, pagination.page, pagination.page_size
    )
    return UserBorrowingListResponse(
        borrowed_books=[BorrowingWithBook.model_validate(b) for b in page.items],
        pagination=page.page_info("total_borrowed_books"),
    )


@router.get(
    "/overdue",
    response_model=OverdueBorrowingListResponse,
    summary="List overdue borrowings",
)
def get_overdue_books(
    db: DbSession,
    pagination: Pagination,
) -> OverdueBorrowingListResponse:
    """
    Active borrowings whose due date has passed.

    Responds 404 with error "no_results" when nothing is overdue.
    """
    page = borrowing_service.get_overdue_books(db, pagination.page, pagination.page_size)
    return OverdueBorrowingListResponse(
        overdue_books=[BorrowingWithDetails.model_validate(b) for b in page.items],
        pagination=page.page_info("total_overdue_books"),
    )


@router.post(
    "/checkout",
    response_model=BorrowingWorkflowResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check out a book",
)
def checkout_book(request_data: CheckoutRequest, db: DbSession) -> BorrowingWorkflowResponse:
    """
    Check a book out to a borrower for 14 days.

    Rejected with 400 when the borrower already has this book out or no
    copies are available.
    """
    result = borrowing_service.checkout_book(
        db, request_data.book_id, request_data.borrower_id
    )
    return to_workflow_response("Book checked out successfully.", result)


@router.post(
    "/return",
    response_model=BorrowingWorkflowResponse,
    summary="Return a book",
)
def return_book(request_data: ReturnRequest, db: DbSession) -> BorrowingWorkflowResponse:
    """
    Return a book.

    Body: {"bookId": 1, "borrowerId": 7} or {"bookId": 1, "borrowerEmail": "..."}
    """
    result = borrowing_service.return_book(
        db,
        request_data.book_id,
        borrower_id=request_data.borrower_id,
        borrower_email=request_data.borrower_email,
    )
    return to_workflow_response("Book returned successfully.", result)
