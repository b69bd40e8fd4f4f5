"""Book approval workflow: pending -> approved | pending -> rejected.

A decision is a single conditional UPDATE guarded on ``approval_status =
'pending'``. When two reviewers race on the same book exactly one UPDATE
matches a row; the other sees zero rows and gets "already decided".
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.orm import Session

from library_api.core.errors import InvalidStateError, NotFoundError
from library_api.models.book import (
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    Book,
)

logger = logging.getLogger(__name__)


def _decide(db: Session, book_id: int, reviewer_id: int, decision: str) -> Book:
    now = datetime.now(timezone.utc)
    result = db.execute(
        update(Book)
        .where(Book.id == book_id, Book.approval_status == STATUS_PENDING)
        .values(
            approval_status=decision,
            reviewed_by_id=reviewer_id,
            reviewed_at=now,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()

    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError("Book")
    if result.rowcount == 0:
        raise InvalidStateError(f"Book has already been {book.approval_status}")
    logger.info("Book id=%s %s by user id=%s", book_id, decision, reviewer_id)
    return book


def approve_book(db: Session, book_id: int, reviewer_id: int) -> Book:
    """Approve a pending book, recording the reviewer and time."""
    return _decide(db, book_id, reviewer_id, STATUS_APPROVED)


def reject_book(db: Session, book_id: int, reviewer_id: int) -> Book:
    """Reject a pending book, recording the reviewer and time."""
    return _decide(db, book_id, reviewer_id, STATUS_REJECTED)
