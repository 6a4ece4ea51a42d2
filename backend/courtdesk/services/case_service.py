"""
services/case_service.py

Case store queries and writes. Endpoints in api/endpoints/cases.py and
api/endpoints/public.py call into here.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from courtdesk.db.models import Case, CaseDocument, CaseStatus, Hearing, User, UserRole
from courtdesk.db.schemas import CaseCreate
from courtdesk.utils.exceptions import CaseNotFoundError

logger = logging.getLogger(__name__)

PUBLIC_CASE_LIMIT = 50


def list_cases(db: Session, actor: User) -> List[Case]:
    """
    Staff see every case. Judges and lawyers see every case that is not
    completed. Newest first.
    """
    query = db.query(Case).options(selectinload(Case.documents))
    if actor.role != UserRole.staff:
        query = query.filter(Case.status != CaseStatus.completed)
    return query.order_by(Case.created_at.desc()).all()


def get_case(db: Session, case_id: str) -> Optional[Case]:
    return db.query(Case).filter(Case.id == case_id).first()


def get_case_with_hearings(db: Session, case_id: str) -> tuple[Case, List[Hearing]]:
    case = get_case(db, case_id)
    if not case:
        raise CaseNotFoundError()

    hearings = (
        db.query(Hearing)
        .options(selectinload(Hearing.lawyers))
        .filter(Hearing.case_id == case.id)
        .order_by(Hearing.date.asc(), Hearing.start_time.asc())
        .all()
    )
    return case, hearings


def create_case(db: Session, payload: CaseCreate) -> Case:
    case = Case(
        title=payload.title,
        description=payload.description or "",
        priority=payload.priority,
        status=CaseStatus.pending,
        parties=[p.model_dump(exclude_none=True) for p in payload.parties],
    )
    db.add(case)
    db.commit()
    db.refresh(case)
    logger.info("Case created: %s (%s)", case.id, case.title)
    return case


def update_status(db: Session, case_id: str, status: CaseStatus) -> Case:
    case = get_case(db, case_id)
    if not case:
        raise CaseNotFoundError()

    case.status = status
    db.commit()
    db.refresh(case)
    logger.info("Case %s status -> %s", case.id, status.value)
    return case


def add_document(db: Session, case_id: str, name: str, url: str) -> Case:
    """Append a document reference. Existing documents are never touched."""
    case = get_case(db, case_id)
    if not case:
        raise CaseNotFoundError()

    case.documents.append(CaseDocument(name=name, url=url))
    db.commit()
    db.refresh(case)
    return case


def list_public_cases(db: Session, limit: int = PUBLIC_CASE_LIMIT) -> List[Case]:
    return db.query(Case).order_by(Case.created_at.desc()).limit(limit).all()
