"""
services/report_service.py

Read-only aggregation over cases and hearings for a time window. Every
generated report is stored with the window it was computed for and is never
recomputed.

Windows are calendar periods in the configured report timezone, converted to
naive UTC to match the stored timestamps. All report types filter rows on
their created_at.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from courtdesk.db.models import (
    Case,
    Hearing,
    HearingStatus,
    Report,
    ReportPeriod,
    ReportType,
)
from courtdesk.utils.exceptions import ValidationFailed

logger = logging.getLogger(__name__)

REPORT_LIST_LIMIT = 10

CUSTOM_RANGE_REQUIRED = "Custom period requires startDate and endDate"


# ============================================================================
# Window resolution
# ============================================================================

def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _day_end(day_start: datetime) -> datetime:
    return day_start + timedelta(days=1) - timedelta(microseconds=1)


def resolve_window(
    period: ReportPeriod | str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> Tuple[datetime, datetime]:
    """
    Return the inclusive (start, end) window for ``period`` as naive UTC.

    daily   -> today 00:00 .. 23:59:59.999999
    weekly  -> the week containing now, starting Sunday
    monthly -> the calendar month containing now
    yearly  -> the calendar year containing now
    custom  -> start and end as given (both required; aware values are
               converted to UTC, naive values are taken as UTC)
    """
    period = ReportPeriod(period)

    if period == ReportPeriod.custom:
        if start is None or end is None:
            raise ValidationFailed(CUSTOM_RANGE_REQUIRED)
        start, end = _to_naive_utc(start), _to_naive_utc(end)
        if start > end:
            raise ValidationFailed("startDate must not be after endDate")
        return start, end

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local_now = now.astimezone(tz)
    today = datetime.combine(local_now.date(), time.min, tzinfo=tz)

    if period == ReportPeriod.daily:
        window_start = today
        window_end = _day_end(today)
    elif period == ReportPeriod.weekly:
        # Monday is 0, so Sunday-based offset is (weekday + 1) % 7
        window_start = today - timedelta(days=(local_now.weekday() + 1) % 7)
        window_end = _day_end(window_start + timedelta(days=6))
    elif period == ReportPeriod.monthly:
        window_start = today.replace(day=1)
        if window_start.month == 12:
            next_month = window_start.replace(year=window_start.year + 1, month=1)
        else:
            next_month = window_start.replace(month=window_start.month + 1)
        window_end = next_month - timedelta(microseconds=1)
    else:
        window_start = today.replace(month=1, day=1)
        window_end = window_start.replace(year=window_start.year + 1) - timedelta(microseconds=1)

    return _to_naive_utc(window_start), _to_naive_utc(window_end)


# ============================================================================
# Aggregations
# ============================================================================

def case_progress(db: Session, start: datetime, end: datetime) -> Dict[str, int]:
    rows = (
        db.query(Case.status, func.count(Case.id))
        .filter(Case.created_at >= start, Case.created_at <= end)
        .group_by(Case.status)
        .all()
    )
    return {status.value: count for status, count in rows}


def judge_performance(db: Session, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    """Completed hearings per judge, busiest first."""
    rows = (
        db.query(Hearing.judge_id, Hearing.judge_name, func.count(Hearing.id))
        .filter(
            Hearing.status == HearingStatus.completed,
            Hearing.created_at >= start,
            Hearing.created_at <= end,
        )
        .group_by(Hearing.judge_id, Hearing.judge_name)
        .all()
    )
    result = [
        {"judgeId": judge_id, "judgeName": judge_name, "count": count}
        for judge_id, judge_name, count in rows
    ]
    result.sort(key=lambda r: (-r["count"], r["judgeName"]))
    return result


def resource_utilization(db: Session, start: datetime, end: datetime) -> Dict[str, int]:
    """Hearing count per start time slot ("HH:MM")."""
    rows = (
        db.query(Hearing.start_time, func.count(Hearing.id))
        .filter(Hearing.created_at >= start, Hearing.created_at <= end)
        .group_by(Hearing.start_time)
        .order_by(Hearing.start_time)
        .all()
    )
    return {start_time: count for start_time, count in rows}


AGGREGATORS = {
    ReportType.case_progress: case_progress,
    ReportType.judge_performance: judge_performance,
    ReportType.resource_utilization: resource_utilization,
}


# ============================================================================
# Reports
# ============================================================================

def generate_report(
    db: Session,
    report_type: ReportType | str,
    period: ReportPeriod | str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
    now: Optional[datetime] = None,
) -> Report:
    report_type = ReportType(report_type)
    period = ReportPeriod(period)
    window_start, window_end = resolve_window(period, start, end, now=now, tz=tz)

    data = AGGREGATORS[report_type](db, window_start, window_end)

    report = Report(
        type=report_type,
        period=period,
        start_date=window_start,
        end_date=window_end,
        data=data,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(
        "Report %s generated: %s/%s %s..%s",
        report.id, report_type.value, period.value, window_start, window_end,
    )
    return report


def list_reports(db: Session, limit: int = REPORT_LIST_LIMIT) -> List[Report]:
    return db.query(Report).order_by(Report.created_at.desc()).limit(limit).all()
