"""
Pydantic validation schemas

Wire format is camelCase; Python attributes stay snake_case.
Entity ids are exposed under entity-specific keys (caseId, hearingId, ...).
"""
from datetime import date as date_type, datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from courtdesk.db.models import (
    CasePriority,
    CaseStatus,
    HearingStatus,
    NotificationType,
    ReportPeriod,
    ReportType,
    SlotStatus,
    UserRole,
)
from courtdesk.utils.validators import validate_hhmm

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class Envelope(BaseModel, Generic[T]):
    """Every JSON response: {success, data?, message?}"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


# ============================================================================
# User Schemas
# ============================================================================

class UserRegister(RequestModel):
    """Registration schema"""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=32)


class UserLogin(RequestModel):
    """Login schema"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    user_id: str = Field(validation_alias=AliasChoices("id", "userId"), serialization_alias="userId")
    username: str
    role: UserRole
    name: str
    email: str
    phone: Optional[str] = None
    created_at: datetime


class LawyerOut(CamelModel):
    user_id: str = Field(validation_alias=AliasChoices("id", "userId"), serialization_alias="userId")
    name: str
    email: str
    phone: Optional[str] = None


class AuthPayload(CamelModel):
    token: str
    user: UserOut


# ============================================================================
# Case Schemas
# ============================================================================

class PartyIn(RequestModel):
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    contact: Optional[str] = None


class CaseCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = ""
    priority: CasePriority = CasePriority.medium
    parties: List[PartyIn] = Field(..., min_length=1)


class CaseStatusUpdate(RequestModel):
    status: CaseStatus


class DocumentCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1)


class PartyOut(CamelModel):
    name: str
    role: str
    contact: Optional[str] = None


class DocumentOut(CamelModel):
    name: str
    url: str
    uploaded_at: datetime


class CaseOut(CamelModel):
    case_id: str = Field(validation_alias=AliasChoices("id", "caseId"), serialization_alias="caseId")
    title: str
    description: str
    status: CaseStatus
    priority: CasePriority
    parties: List[PartyOut] = []
    documents: List[DocumentOut] = []
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Hearing Schemas
# ============================================================================

class HearingCreate(RequestModel):
    case_id: str = Field(..., min_length=1)
    date: date_type
    start_time: str
    end_time: str
    lawyer_ids: List[str]

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v: str) -> str:
        return validate_hhmm(v)


class HearingUpdate(RequestModel):
    status: Optional[HearingStatus] = None
    lawyer_ids: Optional[List[str]] = None


class HearingOut(CamelModel):
    hearing_id: str = Field(validation_alias=AliasChoices("id", "hearingId"), serialization_alias="hearingId")
    case_id: str
    case_title: str
    date: date_type
    start_time: str
    end_time: str
    judge_id: str
    judge_name: str
    lawyer_ids: List[str] = []
    lawyer_names: List[str] = []
    status: HearingStatus
    created_at: datetime
    updated_at: datetime


class CaseDetailOut(CaseOut):
    hearings: List[HearingOut] = []


# ============================================================================
# Public (redacted) Schemas
# ============================================================================

class PublicCaseSummary(CamelModel):
    case_id: str = Field(validation_alias=AliasChoices("id", "caseId"), serialization_alias="caseId")
    title: str
    status: CaseStatus
    priority: CasePriority
    created_at: datetime


class PublicPartyOut(CamelModel):
    name: str
    role: str


class PublicHearingOut(CamelModel):
    hearing_id: str = Field(validation_alias=AliasChoices("id", "hearingId"), serialization_alias="hearingId")
    case_title: str
    date: date_type
    start_time: str
    end_time: str
    judge_name: str
    lawyer_names: List[str] = []
    status: HearingStatus


class PublicCaseDetail(CamelModel):
    case_id: str = Field(validation_alias=AliasChoices("id", "caseId"), serialization_alias="caseId")
    title: str
    description: str
    status: CaseStatus
    priority: CasePriority
    parties: List[PublicPartyOut] = []
    created_at: datetime
    updated_at: datetime
    hearings: List[PublicHearingOut] = []


# ============================================================================
# Notification Schemas
# ============================================================================

class NotificationOut(CamelModel):
    notification_id: str = Field(validation_alias=AliasChoices("id", "notificationId"), serialization_alias="notificationId")
    user_id: str
    title: str
    message: str
    type: NotificationType
    related_id: Optional[str] = None
    is_read: bool
    created_at: datetime


# ============================================================================
# Availability Schemas
# ============================================================================

class TimeSlot(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )

    start_time: str
    end_time: str
    status: SlotStatus = SlotStatus.available

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v: str) -> str:
        return validate_hhmm(v)


class AvailabilityUpsert(RequestModel):
    date: date_type
    time_slots: List[TimeSlot]


class AvailabilityOut(CamelModel):
    availability_id: str = Field(validation_alias=AliasChoices("id", "availabilityId"), serialization_alias="availabilityId")
    user_id: str
    user_role: UserRole
    date: date_type
    time_slots: List[TimeSlot] = []
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Report Schemas
# ============================================================================

class ReportCreate(RequestModel):
    type: ReportType
    period: ReportPeriod
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ReportOut(CamelModel):
    report_id: str = Field(validation_alias=AliasChoices("id", "reportId"), serialization_alias="reportId")
    type: ReportType
    period: ReportPeriod
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    data: Any = None
    created_at: datetime
