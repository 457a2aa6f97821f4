"""
Borrowers Router

Registry endpoints:
- GET    /borrower/all                   list borrowers
- POST   /borrower/register              register a borrower
- PATCH  /borrower/update/{borrowerId}   partial update
- DELETE /borrower/delete/{borrowerId}   delete a borrower
"""

from fastapi import APIRouter, status

from library_api.dependencies import DbSession, Pagination
from library_api.schemas import (
    BorrowerCreate,
    BorrowerListResponse,
    BorrowerMessageResponse,
    BorrowerResponse,
    BorrowerUpdate,
    ErrorResponse,
)
from library_api.services import borrowers as borrower_service

router = APIRouter(
    prefix="/borrower",
    tags=["Borrowers"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        404: {"model": ErrorResponse, "description": "Borrower not found"},
    },
)


@router.get(
    "/all",
    response_model=BorrowerListResponse,
    summary="List all borrowers",
)
def get_borrowers(db: DbSession, pagination: Pagination) -> BorrowerListResponse:
    page = borrower_service.get_borrowers(db, pagination.page, pagination.page_size)
    return BorrowerListResponse(
        borrowers=[BorrowerResponse.model_validate(b) for b in page.items],
        pagination=page.page_info("total_borrowers"),
    )


@router.post(
    "/register",
    response_model=BorrowerMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a borrower",
    responses={409: {"model": ErrorResponse, "description": "Email already registered"}},
)
def register_borrower(
    borrower_data: BorrowerCreate,
    db: DbSession,
) -> BorrowerMessageResponse:
    """Register a borrower. The email must be well-formed and not yet registered."""
    borrower = borrower_service.register_borrower(db, borrower_data)
    return BorrowerMessageResponse(
        message="Borrower registered successfully.",
        borrower=BorrowerResponse.model_validate(borrower),
    )


@router.patch(
    "/update/{borrower_id}",
    response_model=BorrowerMessageResponse,
    summary="Update a borrower",
    responses={409: {"model": ErrorResponse, "description": "Email already registered"}},
)
def update_borrower(
    borrower_id: int,
    borrower_data: BorrowerUpdate,
    db: DbSession,
) -> BorrowerMessageResponse:
    borrower = borrower_service.update_borrower(db, borrower_id, borrower_data)
    return BorrowerMessageResponse(
        message="Borrower updated successfully.",
        borrower=BorrowerResponse.model_validate(borrower),
    )


@router.delete(
    "/delete/{borrower_id}",
    response_model=BorrowerMessageResponse,
    summary="Delete a borrower",
    responses={409: {"model": ErrorResponse, "description": "Borrower has borrowings"}},
)
def delete_borrower(borrower_id: int, db: DbSession) -> BorrowerMessageResponse:
    borrower = borrower_service.delete_borrower(db, borrower_id)
    return BorrowerMessageResponse(
        message="Borrower deleted successfully.",
        borrower=BorrowerResponse.model_validate(borrower),
    )
