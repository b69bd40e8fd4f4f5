"""Request/response schemas for auth and user-management endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from library_api.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from library_api.schemas.common import CamelModel, EmailAddress, RoleName


class RegisterRequest(CamelModel):
    """Public registration payload; role defaults to Member."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailAddress
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: RoleName | None = None


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: EmailAddress
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class RoleUpdateRequest(BaseModel):
    """Body of PUT /auth/users/{id}/role."""

    role: RoleName


class UserOut(CamelModel):
    """Public view of a user; never includes the password hash."""

    id: int
    name: str
    email: str
    role: RoleName
    created_at: datetime | None = None


class CurrentUser(UserOut):
    """Authenticated principal, re-read from the database on every request."""

    @property
    def is_admin(self) -> bool:
        return self.role == "Admin"


class AuthResponse(BaseModel):
    """Returned by register and login."""

    success: bool = True
    token: str
    user: UserOut


class ProfileResponse(BaseModel):
    """Returned by GET /auth/profile."""

    success: bool = True
    user: UserOut


class UserResponse(BaseModel):
    success: bool = True
    data: UserOut


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    success: bool = True
    count: int
    data: list[UserOut]
