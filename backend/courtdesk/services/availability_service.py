"""
services/availability_service.py

Per-user, per-date time slot grids. Saving a date that already has a grid
replaces its slot list.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from courtdesk.db.models import Availability, User
from courtdesk.db.schemas import TimeSlot

logger = logging.getLogger(__name__)

AVAILABILITY_LIST_LIMIT = 30


def list_for_user(db: Session, user: User, limit: int = AVAILABILITY_LIST_LIMIT) -> List[Availability]:
    return (
        db.query(Availability)
        .filter(Availability.user_id == user.id)
        .order_by(Availability.date.asc())
        .limit(limit)
        .all()
    )


def _find(db: Session, user: User, day: date) -> Optional[Availability]:
    return (
        db.query(Availability)
        .filter(Availability.user_id == user.id, Availability.date == day)
        .first()
    )


def upsert(db: Session, user: User, day: date, slots: Sequence[TimeSlot]) -> Availability:
    time_slots = [s.model_dump(mode="json", by_alias=True) for s in slots]

    record = _find(db, user, day)
    if record:
        record.time_slots = time_slots
    else:
        record = Availability(
            user_id=user.id,
            user_role=user.role,
            date=day,
            time_slots=time_slots,
        )
        db.add(record)

    try:
        db.commit()
    except IntegrityError:
        # a concurrent save created the grid first; overwrite it
        db.rollback()
        record = _find(db, user, day)
        record.time_slots = time_slots
        db.commit()
    db.refresh(record)
    logger.debug("Availability for %s on %s: %d slots", user.id, day, len(time_slots))
    return record
