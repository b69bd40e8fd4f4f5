"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, Integer, String

from library_api.models.base import Base, TimestampMixin

ROLE_ADMIN = "Admin"
ROLE_MEMBER = "Member"
ROLES = (ROLE_ADMIN, ROLE_MEMBER)


class User(TimestampMixin, Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'Admin' or 'Member'. Email is stored lower-cased.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_MEMBER)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
