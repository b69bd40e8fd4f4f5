"""Auth routes and the access-control dependencies (get_current_user, require_roles, require_admin)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from library_api.api.v1.params import parse_id
from library_api.core.database import get_db
from library_api.core.errors import AuthenticationError, AuthorizationError
from library_api.core.security import create_access_token, decode_access_token
from library_api.models.user import ROLE_ADMIN, User
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
from library_api.schemas.common import MessageResponse
from library_api.services import users as user_service

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the current user.

    The user (and so the role) is re-read from the database on every request;
    the token only carries the id.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token provided")
    user_id = decode_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return CurrentUser.model_validate(user)


def require_roles(*roles: str) -> Callable[..., CurrentUser]:
    """Dependency factory: allow only principals whose role is in ``roles``. Raises 403 otherwise."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in roles:
            raise AuthorizationError(
                f"User role '{current_user.role}' is not authorized to access this route"
            )
        return current_user

    return dependency


require_admin = require_roles(ROLE_ADMIN)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create an account (role defaults to Member) and return a token for it."""
    user = user_service.register_user(db, body.name, body.email, body.password, body.role)
    return AuthResponse(
        token=create_access_token(user.id),
        user=UserOut.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = user_service.authenticate(db, body.email, body.password)
    return AuthResponse(
        token=create_access_token(user.id),
        user=UserOut.model_validate(user),
    )


@router.get("/profile", response_model=ProfileResponse)
def profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ProfileResponse:
    return ProfileResponse(user=UserOut.model_validate(current_user.model_dump()))


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users, newest first (admin only)."""
    users = [UserOut.model_validate(u) for u in user_service.list_users(db)]
    return UsersListResponse(count=len(users), data=users)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    user = user_service.get_user(db, parse_id(user_id, "User"))
    return UserResponse(data=UserOut.model_validate(user))


@router.put("/users/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: str,
    body: RoleUpdateRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Promote or demote a user (admin only; not allowed on yourself)."""
    user = user_service.update_user_role(
        db, parse_id(user_id, "User"), body.role, acting_user_id=admin.id
    )
    return UserResponse(data=UserOut.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    user_service.delete_user(db, parse_id(user_id, "User"), acting_user_id=admin.id)
    return MessageResponse(message="User deleted successfully")
