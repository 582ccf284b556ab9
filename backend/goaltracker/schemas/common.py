"""Shared response envelopes."""

from typing import Any, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

SortDirection = Literal["asc", "desc"]


class Paginated(BaseModel, Generic[T]):
    """One page of results plus the total row count."""

    data: List[T] = Field(..., description="Items on this page")
    page: int = Field(..., ge=1, description="1-based page number")
    limit: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Total number of matching items")


class ErrorDetail(BaseModel):
    """Error payload."""

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error envelope returned by every endpoint."""

    error: ErrorDetail
