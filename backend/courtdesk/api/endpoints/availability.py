from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courtdesk.api.deps import get_current_user
from courtdesk.db import schemas
from courtdesk.db.database import get_db
from courtdesk.db.models import User
from courtdesk.services import availability_service
from courtdesk.utils.helpers import store_errors

router = APIRouter()


@router.get("", response_model=schemas.Envelope[List[schemas.AvailabilityOut]])
def list_availability(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Caller's availability grids, earliest date first"""
    with store_errors(db, "Failed to fetch availability"):
        records = availability_service.list_for_user(db, current_user)
        data = [schemas.AvailabilityOut.model_validate(r) for r in records]
    return {"success": True, "data": data}


@router.post("", response_model=schemas.Envelope[schemas.AvailabilityOut])
def save_availability(
    availability_in: schemas.AvailabilityUpsert,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create or replace the caller's slots for one date"""
    with store_errors(db, "Failed to update availability"):
        record = availability_service.upsert(
            db, current_user, availability_in.date, availability_in.time_slots
        )
        data = schemas.AvailabilityOut.model_validate(record)
    return {"success": True, "data": data}
