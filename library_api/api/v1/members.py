"""Member routes: reads for any authenticated user, writes for admins."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from library_api.api.v1.auth import get_current_user, require_admin
from library_api.api.v1.params import parse_id
from library_api.core.database import get_db
from library_api.schemas.auth import CurrentUser
from library_api.schemas.common import MessageResponse
from library_api.schemas.member import (
    MemberIn,
    MemberOut,
    MemberResponse,
    MembersListResponse,
)
from library_api.services import members as member_service
from library_api.services.members import DETAIL_PROJECTION, LIST_PROJECTION

router = APIRouter()


def _member_out(db: Session, member, fields=LIST_PROJECTION) -> MemberOut:
    (payload,) = member_service.expand_borrowed_books(db, [member], fields)
    return MemberOut.model_validate(payload)


@router.post(
    "",
    response_model=MemberResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_member(
    body: MemberIn,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MemberResponse:
    member = member_service.create_member(db, body)
    return MemberResponse(data=_member_out(db, member))


@router.get("", response_model=MembersListResponse, response_model_exclude_none=True)
def list_members(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MembersListResponse:
    payloads = member_service.expand_borrowed_books(db, member_service.list_members(db))
    data = [MemberOut.model_validate(p) for p in payloads]
    return MembersListResponse(count=len(data), data=data)


@router.get("/{member_id}", response_model=MemberResponse, response_model_exclude_none=True)
def get_member(
    member_id: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MemberResponse:
    member = member_service.get_member(db, parse_id(member_id, "Member"))
    return MemberResponse(data=_member_out(db, member, DETAIL_PROJECTION))


@router.put("/{member_id}", response_model=MemberResponse, response_model_exclude_none=True)
def update_member(
    member_id: str,
    body: MemberIn,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MemberResponse:
    member = member_service.update_member(db, parse_id(member_id, "Member"), body)
    return MemberResponse(data=_member_out(db, member))


@router.delete("/{member_id}", response_model=MessageResponse)
def delete_member(
    member_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    member_service.delete_member(db, parse_id(member_id, "Member"))
    return MessageResponse(message="Member deleted successfully")
