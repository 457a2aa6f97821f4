"""
Borrower Pydantic Schemas

Email addresses are validated with EmailStr (email-validator), which
rejects anything that is not a name@domain.tld shape.
"""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator, model_validator

from library_api.schemas.common import CamelModel, PageInfo


class BorrowerCreate(CamelModel):
    """
    Schema for POST /borrower/register.

    Example request body:
    {
        "name": "Ada Lovelace",
        "email": "ada@example.com"
    }
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Borrower's full name",
        examples=["Ada Lovelace"],
    )

    email: EmailStr = Field(
        ...,
        description="Contact email, must be unique",
        examples=["ada@example.com"],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class BorrowerUpdate(CamelModel):
    """
    Schema for PATCH /borrower/update/{borrowerId}.

    Supplied fields are merged over the stored record. registeredDate can
    be corrected here; it is otherwise set once at registration.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    registered_date: datetime | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip() if v else v

    @model_validator(mode="after")
    def require_at_least_one_field(self) -> "BorrowerUpdate":
        if not self.changes():
            raise ValueError("No fields were provided to update.")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class BorrowerResponse(CamelModel):
    """Borrower as returned by the API."""

    id: int
    name: str
    email: str
    registered_date: datetime


class BorrowerMessageResponse(CamelModel):
    """Response for register, update and delete."""

    message: str
    borrower: BorrowerResponse


class BorrowerPageInfo(PageInfo):
    total_borrowers: int


class BorrowerListResponse(CamelModel):
    borrowers: list[BorrowerResponse]
    pagination: BorrowerPageInfo
