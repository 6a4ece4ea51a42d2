"""
services/hearing_service.py

Hearing scheduling: create, update, delete, read and list hearings, and fan
out the resulting notifications.

Writes follow one pattern: the hearing change and its Notification rows go
into the same session and are committed together; live delivery happens only
after the commit succeeds. Case title, judge name and lawyer names are
snapshotted onto the hearing at write time.

No overlap or availability check is made when scheduling.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session, selectinload

from courtdesk.db.models import (
    Case,
    Hearing,
    HearingLawyer,
    Notification,
    NotificationType,
    User,
    UserRole,
)
from courtdesk.db.schemas import HearingCreate, HearingUpdate
from courtdesk.services.notification_service import NotificationDispatcher
from courtdesk.utils.exceptions import (
    CaseNotFoundError,
    HearingNotFoundError,
    PermissionDenied,
    ValidationFailed,
)
from courtdesk.utils.helpers import format_display_date
from courtdesk.utils.validators import find_duplicates

logger = logging.getLogger(__name__)

HEARING_LIST_LIMIT = 50

LAWYERS_NOT_FOUND = "One or more lawyers not found"
NO_FIELDS_TO_UPDATE = "No valid fields to update"


# ============================================================================
# Helpers
# ============================================================================

def _resolve_lawyers(db: Session, lawyer_ids: Sequence[str]) -> List[User]:
    """
    Resolve every id to a lawyer user, preserving the requested order.
    All-or-nothing: one unknown, non-lawyer or repeated id fails the call.
    """
    if find_duplicates(lawyer_ids):
        raise ValidationFailed(LAWYERS_NOT_FOUND)
    if not lawyer_ids:
        return []

    found = (
        db.query(User)
        .filter(User.id.in_(list(lawyer_ids)), User.role == UserRole.lawyer)
        .all()
    )
    by_id = {u.id: u for u in found}
    if len(by_id) != len(lawyer_ids):
        raise ValidationFailed(LAWYERS_NOT_FOUND)
    return [by_id[lawyer_id] for lawyer_id in lawyer_ids]


def _assignments(lawyers: Sequence[User]) -> List[HearingLawyer]:
    return [
        HearingLawyer(lawyer_id=lawyer.id, lawyer_name=lawyer.name, position=i)
        for i, lawyer in enumerate(lawyers)
    ]


def _load(db: Session, hearing_id: str) -> Optional[Hearing]:
    return (
        db.query(Hearing)
        .options(selectinload(Hearing.lawyers))
        .filter(Hearing.id == hearing_id)
        .first()
    )


def can_view(actor: User, hearing: Hearing) -> bool:
    if actor.role == UserRole.staff:
        return True
    if actor.role == UserRole.judge:
        return hearing.judge_id == actor.id
    return actor.id in hearing.lawyer_ids


# ============================================================================
# Operations
# ============================================================================

def create_hearing(
    db: Session,
    dispatcher: NotificationDispatcher,
    judge: User,
    payload: HearingCreate,
) -> Hearing:
    case = db.query(Case).filter(Case.id == payload.case_id).first()
    if not case:
        raise CaseNotFoundError()

    lawyers = _resolve_lawyers(db, payload.lawyer_ids)

    hearing = Hearing(
        case_id=case.id,
        case_title=case.title,
        date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        judge_id=judge.id,
        judge_name=judge.name,
    )
    hearing.lawyers = _assignments(lawyers)
    db.add(hearing)
    db.flush()

    message = (
        f"You've been assigned to hearing for case: {case.title} "
        f"on {format_display_date(hearing.date)} "
        f"from {hearing.start_time} to {hearing.end_time}"
    )
    pending: List[Notification] = [
        dispatcher.persist(
            db,
            user_id=lawyer.id,
            title="New Hearing Assignment",
            message=message,
            type=NotificationType.hearing,
            related_id=hearing.id,
        )
        for lawyer in lawyers
    ]

    db.commit()
    db.refresh(hearing)
    logger.info(
        "Hearing %s scheduled for case %s by judge %s (%d lawyers)",
        hearing.id, case.id, judge.id, len(lawyers),
    )

    dispatcher.deliver(pending)
    return hearing


def update_hearing(
    db: Session,
    dispatcher: NotificationDispatcher,
    judge: User,
    hearing_id: str,
    payload: HearingUpdate,
) -> Hearing:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailed(NO_FIELDS_TO_UPDATE)

    hearing = _load(db, hearing_id)
    if not hearing:
        raise HearingNotFoundError()
    if hearing.judge_id != judge.id:
        raise PermissionDenied("Not authorized to update this hearing")

    # Resolve before touching the row so a bad id leaves it as it was
    lawyers = None
    if "lawyer_ids" in changes:
        lawyers = _resolve_lawyers(db, changes["lawyer_ids"])

    if "status" in changes:
        hearing.status = changes["status"]
    if lawyers is not None:
        hearing.lawyers.clear()
        db.flush()
        hearing.lawyers.extend(_assignments(lawyers))

    db.flush()

    recipients = [hearing.judge_id] + [
        lawyer_id for lawyer_id in hearing.lawyer_ids if lawyer_id != hearing.judge_id
    ]
    pending = [
        dispatcher.persist(
            db,
            user_id=user_id,
            title="Hearing Updated",
            message=f"Hearing for case {hearing.case_title} has been updated",
            type=NotificationType.hearing,
            related_id=hearing.id,
        )
        for user_id in recipients
    ]

    db.commit()
    db.refresh(hearing)
    logger.info("Hearing %s updated by judge %s: %s", hearing.id, judge.id, sorted(changes))

    dispatcher.deliver(pending)
    return hearing


def delete_hearing(
    db: Session,
    dispatcher: NotificationDispatcher,
    actor: User,
    hearing_id: str,
) -> None:
    hearing = _load(db, hearing_id)
    if not hearing:
        raise HearingNotFoundError()

    is_owner = actor.role == UserRole.judge and hearing.judge_id == actor.id
    if not (is_owner or actor.role == UserRole.staff):
        raise PermissionDenied("Not authorized to delete this hearing")

    notification = dispatcher.persist(
        db,
        user_id=hearing.judge_id,
        title="Hearing Deleted",
        message=(
            f"Hearing for case {hearing.case_title} "
            f"on {format_display_date(hearing.date)} was deleted"
        ),
        type=NotificationType.hearing,
        related_id=hearing.id,
    )
    db.delete(hearing)
    db.commit()
    logger.info("Hearing %s deleted by %s %s", hearing_id, actor.role.value, actor.id)

    dispatcher.deliver([notification])


def get_hearing(db: Session, actor: User, hearing_id: str) -> Hearing:
    hearing = _load(db, hearing_id)
    if not hearing:
        raise HearingNotFoundError()
    if not can_view(actor, hearing):
        raise PermissionDenied("Not authorized to view this hearing")
    return hearing


def list_hearings(db: Session, actor: User, limit: int = HEARING_LIST_LIMIT) -> List[Hearing]:
    """Judge: own hearings. Lawyer: assigned hearings. Staff: all."""
    query = db.query(Hearing).options(selectinload(Hearing.lawyers))

    if actor.role == UserRole.judge:
        query = query.filter(Hearing.judge_id == actor.id)
    elif actor.role == UserRole.lawyer:
        query = query.filter(
            Hearing.lawyers.any(HearingLawyer.lawyer_id == actor.id)
        )

    return (
        query.order_by(Hearing.date.asc(), Hearing.start_time.asc())
        .limit(limit)
        .all()
    )
