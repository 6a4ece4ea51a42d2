from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courtdesk.api.deps import require_roles
from courtdesk.db import schemas
from courtdesk.db.database import get_db
from courtdesk.db.models import User, UserRole
from courtdesk.utils.helpers import store_errors

router = APIRouter()


@router.get("", response_model=schemas.Envelope[List[schemas.LawyerOut]])
def list_lawyers(
    current_user: User = Depends(require_roles(UserRole.judge)),
    db: Session = Depends(get_db),
):
    """Lawyer directory used when assigning hearings"""
    with store_errors(db, "Failed to fetch lawyers"):
        lawyers = db.query(User).filter(User.role == UserRole.lawyer).order_by(User.name).all()
        data = [schemas.LawyerOut.model_validate(u) for u in lawyers]
    return {"success": True, "data": data}
