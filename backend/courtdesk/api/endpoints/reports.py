from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courtdesk.api.deps import get_settings_dep, require_roles
from courtdesk.core.config import Settings
from courtdesk.db import schemas
from courtdesk.db.database import get_db
from courtdesk.db.models import User, UserRole
from courtdesk.services import report_service
from courtdesk.utils.helpers import store_errors

router = APIRouter()


@router.get("", response_model=schemas.Envelope[List[schemas.ReportOut]])
def list_reports(
    current_user: User = Depends(require_roles(UserRole.staff)),
    db: Session = Depends(get_db),
):
    """Latest 10 generated reports"""
    with store_errors(db, "Failed to fetch reports"):
        reports = report_service.list_reports(db)
        data = [schemas.ReportOut.model_validate(r) for r in reports]
    return {"success": True, "data": data}


@router.post("", response_model=schemas.Envelope[schemas.ReportOut])
def generate_report(
    report_in: schemas.ReportCreate,
    current_user: User = Depends(require_roles(UserRole.staff)),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    with store_errors(db, "Failed to generate report"):
        report = report_service.generate_report(
            db,
            report_in.type,
            report_in.period,
            start=report_in.start_date,
            end=report_in.end_date,
            tz=settings.report_tz,
        )
        data = schemas.ReportOut.model_validate(report)
    return {"success": True, "data": data}
