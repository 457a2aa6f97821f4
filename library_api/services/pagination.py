"""
Pagination helper shared by every listing.
"""

import math
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus the numbers needed for pagination metadata."""

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total > 0 else 0

    def page_info(self, total_field: str) -> dict[str, Any]:
        """
        Pagination metadata keyed by attribute name.

        total_field names the resource-specific total, e.g. "total_books".
        """
        return {
            "current_page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            total_field: self.total,
        }


def paginate(
    db: Session,
    stmt: Select,
    page: int,
    page_size: int,
    *order_by: Any,
    options: tuple = (),
) -> Page:
    """
    Run a counted, paginated query.

    The count is taken over the filtered statement before loader options
    and ordering are applied.

    Args:
        db: Database session
        stmt: select() of a single entity with filters applied
        page: 1-indexed page number
        page_size: Rows per page
        order_by: Ordering for a stable slice
        options: Loader options (selectinload/joinedload) for the page query

    Returns:
        Page with the rows of the requested slice
    """
    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = db.execute(count_stmt).scalar() or 0

    page_stmt = (
        stmt.options(*options)
        .order_by(*order_by)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    items = list(db.execute(page_stmt).scalars().all())

    return Page(items=items, total=total, page=page, page_size=page_size)
