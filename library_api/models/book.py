"""ORM model for catalog books and their approval state."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from library_api.models.base import Base, TimestampMixin

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
APPROVAL_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


class Book(TimestampMixin, Base):
    """
    A catalog entry. New books start ``pending`` and become visible to members
    once an admin approves them; ``approved`` and ``rejected`` are terminal.
    """

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(512), nullable=False)
    author = Column(String(255), nullable=False)
    isbn = Column(String(64), nullable=False, unique=True, index=True)
    category = Column(String(255), nullable=False)
    availability = Column(Boolean, nullable=False, default=True)
    approval_status = Column(
        String(16),
        nullable=False,
        default=STATUS_PENDING,
        index=True,
    )
    requested_by_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_by_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    requested_by = relationship("User", foreign_keys=[requested_by_id], lazy="joined")
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id], lazy="joined")
