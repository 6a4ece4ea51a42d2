"""
Utility helper functions
"""
from contextlib import contextmanager
from datetime import date, datetime
import logging
from typing import Iterator, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from courtdesk.utils.exceptions import InternalError

logger = logging.getLogger(__name__)


def format_display_date(value: Optional[Union[date, datetime]]) -> str:
    """Format a date for notification text, e.g. "Mar 5, 2025"."""
    if not value:
        return ""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


@contextmanager
def store_errors(db: Session, message: str) -> Iterator[None]:
    """
    Map database failures inside the block to a 500 with a route-specific
    message. HTTPExceptions raised inside pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError:
        db.rollback()
        logger.exception(message)
        raise InternalError(message)
