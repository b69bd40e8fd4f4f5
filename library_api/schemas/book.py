"""Request/response schemas for books and the approval workflow."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from library_api.schemas.common import CamelModel

ApprovalStatus = Literal["pending", "approved", "rejected"]


class BookIn(CamelModel):
    """Create/update payload. Approval fields are never accepted from clients."""

    title: str = Field(..., min_length=1, max_length=512)
    author: str = Field(..., min_length=1, max_length=255)
    isbn: str = Field(..., alias="ISBN", min_length=1, max_length=64)
    category: str = Field(..., min_length=1, max_length=255)
    availability: bool = True


class UserSummary(CamelModel):
    """Requester/reviewer reference expanded for display."""

    id: int
    name: str
    email: str


class BookOut(CamelModel):
    id: int
    title: str
    author: str
    isbn: str = Field(..., alias="ISBN")
    category: str
    availability: bool
    approval_status: ApprovalStatus
    requested_by: UserSummary | None = None
    reviewed_by: UserSummary | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BookResponse(CamelModel):
    success: bool = True
    data: BookOut
    message: str | None = None


class BooksListResponse(CamelModel):
    success: bool = True
    count: int
    data: list[BookOut]
