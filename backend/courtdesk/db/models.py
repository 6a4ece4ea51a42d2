"""
SQLAlchemy ORM Models
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    TIMESTAMP,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy import Index

from courtdesk.db.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _uuid() -> str:
    return str(uuid.uuid4())


# ============================================================================
# Enums
# ============================================================================

class UserRole(str, enum.Enum):
    """User roles"""
    judge = "judge"
    lawyer = "lawyer"
    staff = "staff"

class CaseStatus(str, enum.Enum):
    """Case status enum"""
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    dismissed = "dismissed"

class CasePriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"

class HearingStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"
    postponed = "postponed"

class NotificationType(str, enum.Enum):
    hearing = "hearing"
    case = "case"
    general = "general"

class SlotStatus(str, enum.Enum):
    available = "available"
    unavailable = "unavailable"
    booked = "booked"

class ReportType(str, enum.Enum):
    case_progress = "case_progress"
    judge_performance = "judge_performance"
    resource_utilization = "resource_utilization"

class ReportPeriod(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"
    custom = "custom"


# ============================================================================
# Models
# ============================================================================

class User(Base):
    """Registered staff member, judge or lawyer"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)

    # Authentication
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    role = Column(SQLEnum(UserRole), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), nullable=True)

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    availabilities = relationship("Availability", back_populates="user", cascade="all, delete-orphan")


class Case(Base):
    """Legal case model"""
    __tablename__ = "cases"

    id = Column(String(36), primary_key=True, default=_uuid)

    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(SQLEnum(CaseStatus), nullable=False, default=CaseStatus.pending)
    priority = Column(SQLEnum(CasePriority), nullable=False, default=CasePriority.medium)

    # Ordered list of {"name", "role", "contact"}
    parties = Column(JSONType, nullable=False, default=list)

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    documents = relationship(
        "CaseDocument",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="CaseDocument.uploaded_at",
    )
    hearings = relationship("Hearing", back_populates="case", cascade="all, delete-orphan")


class CaseDocument(Base):
    """Document reference attached to a case. Append-only."""
    __tablename__ = "case_documents"

    id = Column(String(36), primary_key=True, default=_uuid)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    url = Column(Text, nullable=False)
    uploaded_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    case = relationship("Case", back_populates="documents")


class Hearing(Base):
    """
    A scheduled session for one case before one judge.

    caseTitle, judgeName and the lawyer names are snapshots taken when the
    hearing (or its lawyer list) was written; they are not joined live.
    """
    __tablename__ = "hearings"

    id = Column(String(36), primary_key=True, default=_uuid)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    case_title = Column(String(500), nullable=False)

    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    judge_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    judge_name = Column(String(255), nullable=False)

    status = Column(SQLEnum(HearingStatus), nullable=False, default=HearingStatus.scheduled)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    case = relationship("Case", back_populates="hearings")
    lawyers = relationship(
        "HearingLawyer",
        back_populates="hearing",
        cascade="all, delete-orphan",
        order_by="HearingLawyer.position",
    )

    __table_args__ = (
        Index("ix_hearings_judge_date", "judge_id", "date", "start_time"),
    )

    @property
    def lawyer_ids(self) -> list[str]:
        return [a.lawyer_id for a in self.lawyers]

    @property
    def lawyer_names(self) -> list[str]:
        return [a.lawyer_name for a in self.lawyers]


class HearingLawyer(Base):
    """
    Junction table: lawyer assigned to a hearing, in assignment order.
    """
    __tablename__ = "hearing_lawyers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    hearing_id = Column(String(36), ForeignKey("hearings.id", ondelete="CASCADE"), nullable=False, index=True)
    lawyer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    lawyer_name = Column(String(255), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    hearing = relationship("Hearing", back_populates="lawyers")

    __table_args__ = (
        UniqueConstraint("hearing_id", "lawyer_id", name="uq_hearing_lawyers_hearing_lawyer"),
    )


class Notification(Base):
    """Notification addressed to a single user"""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(SQLEnum(NotificationType), nullable=False, default=NotificationType.general)
    related_id = Column(String(36), nullable=True, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )


class Availability(Base):
    """Per-user time slot grid for one calendar date"""
    __tablename__ = "availabilities"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_role = Column(SQLEnum(UserRole), nullable=False)
    date = Column(Date, nullable=False)
    # List of {"startTime", "endTime", "status"}
    time_slots = Column(JSONType, nullable=False, default=list)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="availabilities")

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_availabilities_user_date"),
    )


class Report(Base):
    """Generated aggregate report. Never recomputed."""
    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=_uuid)
    type = Column(SQLEnum(ReportType), nullable=False)
    period = Column(SQLEnum(ReportPeriod), nullable=False)
    start_date = Column(TIMESTAMP, nullable=True)
    end_date = Column(TIMESTAMP, nullable=True)
    data = Column(JSONType, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, index=True)
