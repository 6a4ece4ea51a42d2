from datetime import date, datetime

import pytest
from pydantic import ValidationError

from courtdesk.db.schemas import AvailabilityUpsert, HearingCreate, TimeSlot
from courtdesk.utils.helpers import format_display_date
from courtdesk.utils.validators import find_duplicates, normalize_email, validate_hhmm

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("value", ["00:00", "09:30", "23:59"])
def test_valid_times(value):
    assert validate_hhmm(value) == value


@pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "12-30", "", "noon"])
def test_invalid_times(value):
    with pytest.raises(ValueError, match="Invalid time format"):
        validate_hhmm(value)


def test_hearing_schema_rejects_bad_time():
    with pytest.raises(ValidationError):
        HearingCreate(caseId="c-1", date="2025-03-05", startTime="9am", endTime="10:00", lawyerIds=[])


def test_time_slot_status_defaults_to_available():
    slot = TimeSlot(startTime="09:00", endTime="10:00")
    assert slot.status.value == "available"


def test_availability_slot_times_are_validated():
    with pytest.raises(ValidationError):
        AvailabilityUpsert(date="2025-03-05", timeSlots=[{"startTime": "25:00", "endTime": "26:00"}])


def test_normalize_email():
    assert normalize_email("  Clerk@Court.ORG ") == "clerk@court.org"
    assert normalize_email(None) == ""


def test_find_duplicates_keeps_first_seen_order():
    assert find_duplicates(["a", "b", "a", "c", "b", "a"]) == ["a", "b"]
    assert find_duplicates(["a", "b"]) == []


def test_format_display_date():
    assert format_display_date(date(2025, 3, 5)) == "Mar 5, 2025"
    assert format_display_date(datetime(2024, 12, 25, 10, 0)) == "Dec 25, 2024"
    assert format_display_date(None) == ""
