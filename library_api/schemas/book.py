"""
Book Pydantic Schemas

Handles:
- Required fields on create
- Partial updates (at least one field)
- Non-negative available quantity
- Pagination for list responses
"""

from pydantic import Field, field_validator, model_validator

from library_api.schemas.common import CamelModel, PageInfo


def _strip_required(v: str) -> str:
    if not v.strip():
        raise ValueError("Value cannot be empty or whitespace")
    return v.strip()


class BookBase(CamelModel):
    """
    Base schema with shared book fields.

    availableQuantity accepts numeric strings ("3") the way a form post
    would send them; anything non-numeric or negative is rejected.
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell"],
    )

    isbn: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="ISBN, unique across all books",
        examples=["9780451524935"],
    )

    available_quantity: int = Field(
        ...,
        ge=0,
        description="Copies available for checkout",
        examples=[3],
    )

    shelf_location: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Physical shelf location",
        examples=["A1-04"],
    )

    @field_validator("title", "author", "isbn", "shelf_location")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only strings and normalize surrounding spaces."""
        return _strip_required(v)


class BookCreate(BookBase):
    """
    Schema for adding a book.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "isbn": "9780451524935",
        "availableQuantity": 3,
        "shelfLocation": "A1-04"
    }
    """

    pass


class BookUpdate(CamelModel):
    """
    Schema for PATCH /book/update/{bookId}.

    Every field is optional, but at least one must be supplied. Fields that
    are left out (or sent as null) keep their current value.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    isbn: str | None = Field(default=None, min_length=1, max_length=20)
    available_quantity: int | None = Field(default=None, ge=0)
    shelf_location: str | None = Field(default=None, min_length=1, max_length=100)

    @field_validator("title", "author", "isbn", "shelf_location")
    @classmethod
    def must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v)

    @model_validator(mode="after")
    def require_at_least_one_field(self) -> "BookUpdate":
        if not self.changes():
            raise ValueError("No fields were provided to update.")
        return self

    def changes(self) -> dict:
        """Supplied, non-null fields keyed by attribute name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class BookResponse(CamelModel):
    """Book as returned by the API."""

    id: int
    title: str
    author: str
    isbn: str
    available_quantity: int
    shelf_location: str


class BookMessageResponse(CamelModel):
    """Response for add, update and delete."""

    message: str
    book: BookResponse


class BookPageInfo(PageInfo):
    total_books: int


class BookListResponse(CamelModel):
    """
    Paginated list of books.

    Example:
    {
        "books": [...],
        "pagination": {"currentPage": 2, "pageSize": 5, "totalPages": 3, "totalBooks": 12}
    }
    """

    books: list[BookResponse]
    pagination: BookPageInfo
