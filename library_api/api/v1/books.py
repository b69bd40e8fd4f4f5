"""Book catalog routes: role-filtered reads, submissions, admin edits and the approval workflow."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from library_api.api.v1.auth import get_current_user, require_admin
from library_api.api.v1.params import parse_id
from library_api.core.database import get_db
from library_api.schemas.auth import CurrentUser
from library_api.schemas.book import BookIn, BookOut, BookResponse, BooksListResponse
from library_api.schemas.common import MessageResponse
from library_api.services import approval
from library_api.services import books as book_service

router = APIRouter()


def _list_response(books) -> BooksListResponse:
    data = [BookOut.model_validate(b) for b in books]
    return BooksListResponse(count=len(data), data=data)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def create_book(
    body: BookIn,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> BookResponse:
    """Submit a book. It is stored as pending until an admin approves or rejects it."""
    book = book_service.create_book(db, body, requested_by=current_user)
    return BookResponse(
        data=BookOut.model_validate(book),
        message="Book submitted for approval",
    )


@router.get("", response_model=BooksListResponse)
def list_books(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> BooksListResponse:
    """Admins see every book; other users only approved ones."""
    return _list_response(book_service.list_books(db, current_user))


@router.get("/pending", response_model=BooksListResponse)
def list_pending_books(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> BooksListResponse:
    return _list_response(book_service.list_pending_books(db))


@router.get("/{book_id}", response_model=BookResponse)
def get_book(
    book_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> BookResponse:
    book = book_service.get_book(db, parse_id(book_id, "Book"), current_user)
    return BookResponse(data=BookOut.model_validate(book))


@router.put("/{book_id}/approve", response_model=BookResponse)
def approve_book(
    book_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> BookResponse:
    book = approval.approve_book(db, parse_id(book_id, "Book"), reviewer_id=admin.id)
    return BookResponse(data=BookOut.model_validate(book), message="Book approved successfully")


@router.put("/{book_id}/reject", response_model=BookResponse)
def reject_book(
    book_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> BookResponse:
    book = approval.reject_book(db, parse_id(book_id, "Book"), reviewer_id=admin.id)
    return BookResponse(data=BookOut.model_validate(book), message="Book rejected")


@router.put("/{book_id}", response_model=BookResponse)
def update_book(
    book_id: str,
    body: BookIn,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> BookResponse:
    book = book_service.update_book(db, parse_id(book_id, "Book"), body)
    return BookResponse(data=BookOut.model_validate(book))


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    book_service.delete_book(db, parse_id(book_id, "Book"))
    return MessageResponse(message="Book deleted successfully")
