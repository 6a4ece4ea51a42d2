"""
api/endpoints/cases.py

Endpoints:
  GET  /api/cases                       list cases visible to the caller
  POST /api/cases                       create a case (staff)
  GET  /api/cases/{case_id}             case with its hearings
  PUT  /api/cases/{case_id}             change case status (staff)
  POST /api/cases/{case_id}/documents   attach a document reference
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from courtdesk.api.deps import get_current_user, require_roles
from courtdesk.db import schemas
from courtdesk.db.database import get_db
from courtdesk.db.models import User, UserRole
from courtdesk.services import case_service
from courtdesk.utils.helpers import store_errors

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=schemas.Envelope[List[schemas.CaseOut]])
def list_cases(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to fetch cases"):
        cases = case_service.list_cases(db, current_user)
        data = [schemas.CaseOut.model_validate(c) for c in cases]
    return {"success": True, "data": data}


@router.post(
    "",
    response_model=schemas.Envelope[schemas.CaseOut],
    status_code=status.HTTP_201_CREATED,
)
def create_case(
    case_in: schemas.CaseCreate,
    current_user: User = Depends(require_roles(UserRole.staff)),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to create case"):
        case = case_service.create_case(db, case_in)
        data = schemas.CaseOut.model_validate(case)
    return {"success": True, "data": data}


@router.get("/{case_id}", response_model=schemas.Envelope[schemas.CaseDetailOut])
def get_case(
    case_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to fetch case"):
        case, hearings = case_service.get_case_with_hearings(db, case_id)
        data = schemas.CaseDetailOut.model_validate(case).model_copy(
            update={"hearings": [schemas.HearingOut.model_validate(h) for h in hearings]}
        )
    return {"success": True, "data": data}


@router.put("/{case_id}", response_model=schemas.Envelope[schemas.CaseOut])
def update_case_status(
    case_id: str,
    update: schemas.CaseStatusUpdate,
    current_user: User = Depends(require_roles(UserRole.staff)),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to update case"):
        case = case_service.update_status(db, case_id, update.status)
        data = schemas.CaseOut.model_validate(case)
    return {"success": True, "data": data, "message": f"Case status updated to {update.status.value}"}


@router.post("/{case_id}/documents", response_model=schemas.Envelope[schemas.CaseOut])
def add_document(
    case_id: str,
    document: schemas.DocumentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to add document"):
        case = case_service.add_document(db, case_id, document.name, document.url)
        data = schemas.CaseOut.model_validate(case)
    logger.info("Document %r attached to case %s by %s", document.name, case_id, current_user.id)
    return {"success": True, "data": data}
