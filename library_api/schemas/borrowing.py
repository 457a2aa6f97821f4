"""
Borrowing Pydantic Schemas

Covers the checkout/return request bodies and the three borrowing
listings (active, per borrower, overdue).
"""

from datetime import datetime

from pydantic import EmailStr, Field, model_validator

from library_api.schemas.book import BookResponse
from library_api.schemas.borrower import BorrowerResponse
from library_api.schemas.common import CamelModel, PageInfo


# =============================================================================
# Requests
# =============================================================================
class CheckoutRequest(CamelModel):
    """
    Body of POST /borrowing/checkout.

    Example:
    {"bookId": 1, "borrowerId": 7}
    """

    book_id: int = Field(..., ge=1, description="Book to check out")
    borrower_id: int = Field(..., ge=1, description="Borrower taking the book")


class ReturnRequest(CamelModel):
    """
    Body of POST /borrowing/return.

    The borrower is identified either by id or by email; exactly one of
    the two must be given.

    Examples:
    {"bookId": 1, "borrowerId": 7}
    {"bookId": 1, "borrowerEmail": "ada@example.com"}
    """

    book_id: int = Field(..., ge=1, description="Book being returned")
    borrower_id: int | None = Field(default=None, ge=1)
    borrower_email: EmailStr | None = None

    @model_validator(mode="after")
    def require_one_borrower_identifier(self) -> "ReturnRequest":
        if (self.borrower_id is None) == (self.borrower_email is None):
            raise ValueError("Provide exactly one of borrowerId or borrowerEmail.")
        return self


# =============================================================================
# Responses
# =============================================================================
class BorrowingResponse(CamelModel):
    """A borrowing record without embedded details."""

    id: int
    book_id: int
    borrower_id: int
    checkout_date: datetime
    due_date: datetime
    returned_date: datetime | None = None


class BorrowingWithBook(BorrowingResponse):
    book: BookResponse


class BorrowingWithDetails(BorrowingResponse):
    book: BookResponse
    borrower: BorrowerResponse


class BorrowingWorkflowResponse(CamelModel):
    """
    Result of a checkout or a return.

    updatedQuantity is the book's availableQuantity after the operation.
    """

    message: str
    borrowing: BorrowingResponse
    updated_quantity: int


class ActiveBorrowingPageInfo(PageInfo):
    total_active_borrowings: int


class ActiveBorrowingListResponse(CamelModel):
    message: str = "Current active borrowings"
    active_borrowings: list[BorrowingWithDetails]
    pagination: ActiveBorrowingPageInfo


class UserBorrowingPageInfo(PageInfo):
    total_borrowed_books: int


class UserBorrowingListResponse(CamelModel):
    message: str = "Borrowed books"
    borrowed_books: list[BorrowingWithBook]
    pagination: UserBorrowingPageInfo


class OverduePageInfo(PageInfo):
    total_overdue_books: int


class OverdueBorrowingListResponse(CamelModel):
    message: str = "Overdue books"
    overdue_books: list[BorrowingWithDetails]
    pagination: OverduePageInfo
