"""Member repository: CRUD plus the read-path expansion of borrowed-book ids."""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from library_api.core.errors import (
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
    duplicate_field_from_integrity_error,
)
from library_api.models.book import Book
from library_api.models.member import Member, MemberBorrowedBook

if TYPE_CHECKING:
    from library_api.schemas.member import MemberIn

logger = logging.getLogger(__name__)

# Fields of a book copied into a member's borrowedBooks on read.
LIST_PROJECTION = ("id", "title", "author", "isbn")
DETAIL_PROJECTION = LIST_PROJECTION + ("availability",)


def _duplicate(field: str) -> DuplicateKeyError:
    return DuplicateKeyError(field, f"Member with this {field} already exists")


def _ensure_unique(db: Session, email: str | None, membership_id: str | None, exclude_id: int | None) -> None:
    checks = (("email", Member.email, email), ("membershipId", Member.membership_id, membership_id))
    for field, column, value in checks:
        if value is None:
            continue
        query = db.query(Member.id).filter(column == value)
        if exclude_id is not None:
            query = query.filter(Member.id != exclude_id)
        if query.first() is not None:
            raise _duplicate(field)


def _validate_book_ids(db: Session, book_ids: list[int]) -> None:
    """Every borrowed id must reference an existing book at write time."""
    if not book_ids:
        return
    found = {row.id for row in db.query(Book.id).filter(Book.id.in_(set(book_ids)))}
    missing = [book_id for book_id in book_ids if book_id not in found]
    if missing:
        raise ValidationError(
            "Validation Error",
            errors=[f"borrowedBooks: book {book_id} does not exist" for book_id in missing],
        )


def _set_borrowed(member: Member, book_ids: list[int]) -> None:
    member.borrowed = [
        MemberBorrowedBook(position=position, book_id=book_id)
        for position, book_id in enumerate(book_ids)
    ]


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise _duplicate(duplicate_field_from_integrity_error(e, default="email")) from e


def create_member(db: Session, data: "MemberIn") -> Member:
    _ensure_unique(db, data.email, data.membership_id, exclude_id=None)
    _validate_book_ids(db, data.borrowed_books)
    member = Member(
        name=data.name,
        email=data.email,
        membership_id=data.membership_id,
        role=data.role,
    )
    _set_borrowed(member, data.borrowed_books)
    db.add(member)
    _commit(db)
    db.refresh(member)
    logger.info("Member id=%s created", member.id)
    return member


def list_members(db: Session) -> list[Member]:
    return db.query(Member).order_by(Member.created_at.desc(), Member.id.desc()).all()


def get_member(db: Session, member_id: int) -> Member:
    member = db.get(Member, member_id)
    if member is None:
        raise NotFoundError("Member")
    return member


def update_member(db: Session, member_id: int, data: "MemberIn") -> Member:
    """Apply the fields present in the payload; omitted optional fields keep their value."""
    member = get_member(db, member_id)
    changes = data.model_dump(exclude_unset=True)
    _ensure_unique(db, changes.get("email"), changes.get("membership_id"), exclude_id=member.id)
    if "borrowed_books" in changes:
        _validate_book_ids(db, data.borrowed_books)
        # flush the removals before inserting rows with the same (member_id, position)
        member.borrowed = []
        db.flush()
        _set_borrowed(member, data.borrowed_books)
    for field in ("name", "email", "membership_id", "role"):
        if field in changes:
            setattr(member, field, changes[field])
    _commit(db)
    db.refresh(member)
    return member


def delete_member(db: Session, member_id: int) -> None:
    """Delete a member and its borrowed-book entries; referenced books are untouched."""
    member = get_member(db, member_id)
    db.delete(member)
    db.commit()
    logger.info("Member id=%s deleted", member_id)


def expand_borrowed_books(
    db: Session,
    members: Iterable[Member],
    fields: tuple[str, ...] = LIST_PROJECTION,
) -> list[dict[str, Any]]:
    """
    Build member payloads with borrowed ids replaced by partial book projections.

    Ids whose book no longer exists are skipped in the output; the stored ids
    are not modified.
    """
    members = list(members)
    wanted = {book_id for m in members for book_id in m.borrowed_book_ids}
    books: dict[int, Book] = {}
    if wanted:
        books = {b.id: b for b in db.query(Book).filter(Book.id.in_(wanted))}

    payloads = []
    for member in members:
        projections = [
            {field: getattr(books[book_id], field) for field in fields}
            for book_id in member.borrowed_book_ids
            if book_id in books
        ]
        payloads.append(
            {
                "id": member.id,
                "name": member.name,
                "email": member.email,
                "membership_id": member.membership_id,
                "role": member.role,
                "borrowed_books": projections,
                "created_at": member.created_at,
                "updated_at": member.updated_at,
            }
        )
    return payloads
