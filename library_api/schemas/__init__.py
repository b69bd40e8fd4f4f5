"""Pydantic request/response schemas."""

from library_api.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    RoleUpdateRequest,
    UserOut,
    UserResponse,
    UsersListResponse,
)
from library_api.schemas.book import (
    ApprovalStatus,
    BookIn,
    BookOut,
    BookResponse,
    BooksListResponse,
    UserSummary,
)
from library_api.schemas.common import MessageResponse, RoleName
from library_api.schemas.health import HealthResponse
from library_api.schemas.member import (
    BookProjection,
    MemberIn,
    MemberOut,
    MemberResponse,
    MembersListResponse,
)

__all__ = [
    "ApprovalStatus",
    "AuthResponse",
    "BookIn",
    "BookOut",
    "BookProjection",
    "BookResponse",
    "BooksListResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MemberIn",
    "MemberOut",
    "MemberResponse",
    "MembersListResponse",
    "MessageResponse",
    "ProfileResponse",
    "RegisterRequest",
    "RoleName",
    "RoleUpdateRequest",
    "UserOut",
    "UserResponse",
    "UserSummary",
    "UsersListResponse",
]
