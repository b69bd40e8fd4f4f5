"""Credential store: registration, password verification and admin user management."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from library_api.core.errors import (
    AuthenticationError,
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
)
from library_api.core.security import hash_password, verify_password
from library_api.models.user import ROLE_MEMBER, ROLES, User

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User already exists with this email"


def register_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str | None = None,
) -> User:
    """Create a user with a bcrypt-hashed password. Role defaults to Member."""
    email = email.strip().lower()
    role = role or ROLE_MEMBER
    if role not in ROLES:
        raise ValidationError("Role must be either Admin or Member")
    if db.query(User).filter(User.email == email).first() is not None:
        raise DuplicateKeyError("email", DUPLICATE_EMAIL_MESSAGE)

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateKeyError("email", DUPLICATE_EMAIL_MESSAGE) from e
    db.refresh(user)
    logger.info("Registered user id=%s role=%s", user.id, user.role)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials; raise AuthenticationError otherwise."""
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    return user


def update_user_role(db: Session, user_id: int, role: str, acting_user_id: int) -> User:
    """Change a user's role. Admins cannot change their own role."""
    if role not in ROLES:
        raise ValidationError('Role must be either "Admin" or "Member"')
    user = get_user(db, user_id)
    if user.id == acting_user_id:
        raise ValidationError("You cannot change your own role")
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("User id=%s role set to %s by user id=%s", user.id, role, acting_user_id)
    return user


def delete_user(db: Session, user_id: int, acting_user_id: int) -> None:
    """Delete a user. Admins cannot delete their own account."""
    user = get_user(db, user_id)
    if user.id == acting_user_id:
        raise ValidationError("You cannot delete your own account")
    db.delete(user)
    db.commit()
    logger.info("User id=%s deleted by user id=%s", user_id, acting_user_id)
