"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schemas are kept apart from the SQLAlchemy models so the API controls
exactly what is exposed and which rules apply to create vs update.

JSON field names are camelCase (availableQuantity, shelfLocation,
registeredDate, ...) while Python attributes stay snake_case; see
common.CamelModel. Requests may use either spelling.

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional, at least one required)
- XxxResponse: Fields returned in API responses
- XxxListResponse: A page of records plus pagination metadata
"""

from library_api.schemas.book import (
    BookBase,
    BookCreate,
    BookListResponse,
    BookMessageResponse,
    BookPageInfo,
    BookResponse,
    BookUpdate,
)
from library_api.schemas.borrower import (
    BorrowerCreate,
    BorrowerListResponse,
    BorrowerMessageResponse,
    BorrowerPageInfo,
    BorrowerResponse,
    BorrowerUpdate,
)
from library_api.schemas.borrowing import (
    ActiveBorrowingListResponse,
    BorrowingResponse,
    BorrowingWithBook,
    BorrowingWithDetails,
    BorrowingWorkflowResponse,
    CheckoutRequest,
    OverdueBorrowingListResponse,
    ReturnRequest,
    UserBorrowingListResponse,
)
from library_api.schemas.common import CamelModel, ErrorResponse, PageInfo

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    "PageInfo",
    # Book
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "BookMessageResponse",
    "BookListResponse",
    "BookPageInfo",
    # Borrower
    "BorrowerCreate",
    "BorrowerUpdate",
    "BorrowerResponse",
    "BorrowerMessageResponse",
    "BorrowerListResponse",
    "BorrowerPageInfo",
    # Borrowing
    "CheckoutRequest",
    "ReturnRequest",
    "BorrowingResponse",
    "BorrowingWithBook",
    "BorrowingWithDetails",
    "BorrowingWorkflowResponse",
    "ActiveBorrowingListResponse",
    "UserBorrowingListResponse",
    "OverdueBorrowingListResponse",
]
