"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

- DbSession: the per-request SQLAlchemy session. Routers hand it to the
  service functions explicitly; services never reach for a global.
- Pagination: page / pageSize query parameters shared by every listing.
"""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from library_api.database import get_db

# Instead of writing:
#   def get_books(db: Session = Depends(get_db)):
# routes write:
#   def get_books(db: DbSession):
DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - pageSize: How many items per page (max 100)

    Usage:
        GET /book/all?page=2&pageSize=5
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2],
        ),
        page_size: int = Query(
            default=10,
            ge=1,
            le=100,
            alias="pageSize",
            description="Number of items per page (max 100)",
            examples=[10, 25],
        ),
    ) -> None:
        self.page = page
        self.page_size = page_size


Pagination = Annotated[PaginationParams, Depends()]
