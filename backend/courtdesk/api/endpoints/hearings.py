"""
api/endpoints/hearings.py

Endpoints:
  GET    /api/hearings                 hearings visible to the caller
  POST   /api/hearings                 schedule a hearing (judge)
  GET    /api/hearings/{hearing_id}    one hearing
  PUT    /api/hearings/{hearing_id}    change status or lawyers (owning judge)
  DELETE /api/hearings/{hearing_id}    delete (owning judge or staff)

Writes notify the affected users; see services/hearing_service.py.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from courtdesk.api.deps import get_current_user, get_dispatcher, require_roles
from courtdesk.db import schemas
from courtdesk.db.database import get_db
from courtdesk.db.models import User, UserRole
from courtdesk.services import hearing_service
from courtdesk.services.notification_service import NotificationDispatcher
from courtdesk.utils.helpers import store_errors

router = APIRouter()


@router.get("", response_model=schemas.Envelope[List[schemas.HearingOut]])
def list_hearings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to fetch hearings"):
        hearings = hearing_service.list_hearings(db, current_user)
        data = [schemas.HearingOut.model_validate(h) for h in hearings]
    return {"success": True, "data": data}


@router.post(
    "",
    response_model=schemas.Envelope[schemas.HearingOut],
    status_code=status.HTTP_201_CREATED,
)
def create_hearing(
    hearing_in: schemas.HearingCreate,
    current_user: User = Depends(require_roles(UserRole.judge)),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    with store_errors(db, "Failed to create hearing"):
        hearing = hearing_service.create_hearing(db, dispatcher, current_user, hearing_in)
        data = schemas.HearingOut.model_validate(hearing)
    return {"success": True, "data": data}


@router.get("/{hearing_id}", response_model=schemas.Envelope[schemas.HearingOut])
def get_hearing(
    hearing_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to fetch hearing"):
        hearing = hearing_service.get_hearing(db, current_user, hearing_id)
        data = schemas.HearingOut.model_validate(hearing)
    return {"success": True, "data": data}


@router.put("/{hearing_id}", response_model=schemas.Envelope[schemas.HearingOut])
def update_hearing(
    hearing_id: str,
    update: schemas.HearingUpdate,
    current_user: User = Depends(require_roles(UserRole.judge)),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    with store_errors(db, "Failed to update hearing"):
        hearing = hearing_service.update_hearing(db, dispatcher, current_user, hearing_id, update)
        data = schemas.HearingOut.model_validate(hearing)
    return {"success": True, "data": data}


@router.delete("/{hearing_id}", response_model=schemas.Envelope[None])
def delete_hearing(
    hearing_id: str,
    current_user: User = Depends(require_roles(UserRole.judge, UserRole.staff)),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    with store_errors(db, "Failed to delete hearing"):
        hearing_service.delete_hearing(db, dispatcher, current_user, hearing_id)
    return {"success": True, "message": "Hearing deleted successfully"}
