"""SQLAlchemy ORM models."""

from library_api.models.base import Base
from library_api.models.book import Book
from library_api.models.member import Member, MemberBorrowedBook
from library_api.models.user import User

__all__ = ["Base", "Book", "Member", "MemberBorrowedBook", "User"]
