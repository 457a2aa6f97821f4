"""
Shared schema building blocks.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model with camelCase JSON names.

    - alias_generator=to_camel: available_quantity <-> "availableQuantity"
    - populate_by_name=True: snake_case keys are accepted in requests too
    - from_attributes=True: build responses straight from ORM objects

    FastAPI serializes response models by alias, so clients always see
    camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageInfo(CamelModel):
    """
    Pagination metadata shared by every listing.

    Subclasses add the total under a resource-specific name
    (totalBooks, totalBorrowers, ...).
    """

    current_page: int = Field(..., description="Current page number (1-indexed)")
    page_size: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="ceil(total / pageSize)")


class ErrorResponse(BaseModel):
    """Body of every error response, used for OpenAPI documentation."""

    error: str = Field(..., examples=["not_found"])
    detail: str | list = Field(..., examples=["Book not found."])
