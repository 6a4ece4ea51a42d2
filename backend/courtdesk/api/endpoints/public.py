"""
Unauthenticated, redacted case views.

Party contacts and document URLs never leave through these routes.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courtdesk.db import schemas
from courtdesk.db.database import get_db
from courtdesk.services import case_service
from courtdesk.utils.helpers import store_errors

router = APIRouter()


@router.get("/cases", response_model=schemas.Envelope[List[schemas.PublicCaseSummary]])
def list_public_cases(db: Session = Depends(get_db)):
    with store_errors(db, "Failed to fetch cases"):
        cases = case_service.list_public_cases(db)
        data = [schemas.PublicCaseSummary.model_validate(c) for c in cases]
    return {"success": True, "data": data}


@router.get("/cases/{case_id}", response_model=schemas.Envelope[schemas.PublicCaseDetail])
def get_public_case(case_id: str, db: Session = Depends(get_db)):
    with store_errors(db, "Failed to fetch case"):
        case, hearings = case_service.get_case_with_hearings(db, case_id)
        data = schemas.PublicCaseDetail(
            case_id=case.id,
            title=case.title,
            description=case.description,
            status=case.status,
            priority=case.priority,
            parties=[schemas.PublicPartyOut.model_validate(p) for p in case.parties or []],
            created_at=case.created_at,
            updated_at=case.updated_at,
            hearings=[schemas.PublicHearingOut.model_validate(h) for h in hearings],
        )
    return {"success": True, "data": data}
