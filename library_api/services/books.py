"""Book repository: role-filtered reads and admin writes over the ``books`` table."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from library_api.core.errors import AuthorizationError, DuplicateKeyError, NotFoundError
from library_api.models.book import STATUS_APPROVED, STATUS_PENDING, Book

if TYPE_CHECKING:
    from library_api.schemas.auth import CurrentUser
    from library_api.schemas.book import BookIn

logger = logging.getLogger(__name__)

DUPLICATE_ISBN_MESSAGE = "Book with this ISBN already exists"


def _newest_first(query):
    return query.order_by(Book.created_at.desc(), Book.id.desc())


def _ensure_isbn_free(db: Session, isbn: str, exclude_id: int | None = None) -> None:
    query = db.query(Book.id).filter(Book.isbn == isbn)
    if exclude_id is not None:
        query = query.filter(Book.id != exclude_id)
    if query.first() is not None:
        raise DuplicateKeyError("ISBN", DUPLICATE_ISBN_MESSAGE)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateKeyError("ISBN", DUPLICATE_ISBN_MESSAGE) from e


def create_book(db: Session, data: "BookIn", requested_by: "CurrentUser") -> Book:
    """Submit a book for review. Always starts pending, whoever the caller is."""
    _ensure_isbn_free(db, data.isbn)
    book = Book(
        title=data.title,
        author=data.author,
        isbn=data.isbn,
        category=data.category,
        availability=data.availability,
        approval_status=STATUS_PENDING,
        requested_by_id=requested_by.id,
    )
    db.add(book)
    _commit(db)
    db.refresh(book)
    logger.info("Book id=%s submitted by user id=%s", book.id, requested_by.id)
    return book


def list_books(db: Session, principal: "CurrentUser") -> list[Book]:
    """Admins see every status; everyone else sees approved books only."""
    query = db.query(Book)
    if not principal.is_admin:
        query = query.filter(Book.approval_status == STATUS_APPROVED)
    return _newest_first(query).all()


def list_pending_books(db: Session) -> list[Book]:
    return _newest_first(db.query(Book).filter(Book.approval_status == STATUS_PENDING)).all()


def find_book(db: Session, book_id: int) -> Book:
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError("Book")
    return book


def get_book(db: Session, book_id: int, principal: "CurrentUser") -> Book:
    """Fetch one book, applying the same visibility rule as ``list_books``."""
    book = find_book(db, book_id)
    if not principal.is_admin and book.approval_status != STATUS_APPROVED:
        raise AuthorizationError("You are not authorized to view this book")
    return book


def update_book(db: Session, book_id: int, data: "BookIn") -> Book:
    """Admin edit. No approval-status guard; approval fields are left as they are."""
    book = find_book(db, book_id)
    if data.isbn != book.isbn:
        _ensure_isbn_free(db, data.isbn, exclude_id=book.id)
    book.title = data.title
    book.author = data.author
    book.isbn = data.isbn
    book.category = data.category
    book.availability = data.availability
    _commit(db)
    db.refresh(book)
    return book


def delete_book(db: Session, book_id: int) -> None:
    """
    Delete a book. Member borrowed-book entries that reference it are left as
    they are; member reads skip ids that no longer resolve.
    """
    book = find_book(db, book_id)
    db.delete(book)
    db.commit()
    logger.info("Book id=%s deleted", book_id)
