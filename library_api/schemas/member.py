"""Request/response schemas for member records."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from library_api.schemas.common import CamelModel, EmailAddress, RecordId, RoleName


class MemberIn(CamelModel):
    """
    Create/update payload. ``borrowedBooks`` holds book ids only; expanded
    book objects are rejected.
    """

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailAddress
    membership_id: str = Field(..., min_length=1, max_length=64)
    role: RoleName = "Member"
    borrowed_books: list[RecordId] = Field(default_factory=list)

    @field_validator("borrowed_books", mode="before")
    @classmethod
    def reject_expanded_books(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("Borrowed books must be an array")
        for item in value:
            if isinstance(item, (dict, list)):
                raise ValueError("Borrowed books must be book ids, not objects")
            if isinstance(item, bool):
                raise ValueError("Borrowed books must be book ids")
        return value


class BookProjection(CamelModel):
    """Partial book shown inside a member record; availability only on detail reads."""

    id: int
    title: str
    author: str
    isbn: str = Field(..., alias="ISBN")
    availability: bool | None = None


class MemberOut(CamelModel):
    id: int
    name: str
    email: str
    membership_id: str
    role: RoleName
    borrowed_books: list[BookProjection] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MemberResponse(CamelModel):
    success: bool = True
    data: MemberOut


class MembersListResponse(CamelModel):
    success: bool = True
    count: int
    data: list[MemberOut]
