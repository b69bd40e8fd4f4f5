"""ORM models for library members and their ordered borrowed-book references."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from library_api.models.base import Base, TimestampMixin
from library_api.models.user import ROLE_MEMBER


class Member(TimestampMixin, Base):
    """
    Member record managed by admins. Independent of ``User``: the role here is
    member metadata, not an access-control role.
    """

    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    membership_id = Column(String(64), nullable=False, unique=True, index=True)
    role = Column(String(32), nullable=False, default=ROLE_MEMBER)

    borrowed = relationship(
        "MemberBorrowedBook",
        order_by="MemberBorrowedBook.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def borrowed_book_ids(self) -> list[int]:
        return [entry.book_id for entry in self.borrowed]


class MemberBorrowedBook(Base):
    """
    One entry of a member's borrowed-books sequence.

    book_id has no foreign key: deleting a book leaves the id in place.
    """

    __tablename__ = "member_borrowed_books"

    member_id = Column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position = Column(Integer, primary_key=True)
    book_id = Column(Integer, nullable=False, index=True)
