"""
services/notification_service.py

Notification dispatch in two explicit phases:

  1. persist()  adds the Notification row to the caller's session. The row
                is the source of truth; the caller commits it together with
                whatever write caused it.
  2. deliver()  after commit, pushes each row to the recipient's live room.
                Best effort: no acknowledgement, no retry, and a failure here
                never undoes phase 1.

notify() runs both phases for a single standalone notification.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from courtdesk.db.models import Notification, NotificationType
from courtdesk.db.schemas import NotificationOut
from courtdesk.services.notification_hub import NotificationHub

logger = logging.getLogger(__name__)

NOTIFICATION_EVENT = "notification"


def notification_payload(notification: Notification) -> dict:
    """JSON-ready camelCase representation pushed over the live channel."""
    return NotificationOut.model_validate(notification).model_dump(mode="json", by_alias=True)


class NotificationDispatcher:

    def __init__(self, hub: NotificationHub):
        self.hub = hub

    # ------------------------------------------------------------------
    # Phase 1
    # ------------------------------------------------------------------

    def persist(
        self,
        db: Session,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.general,
        related_id: Optional[str] = None,
    ) -> Notification:
        if not user_id or not title or not message:
            raise ValueError("Missing required notification fields")

        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=NotificationType(type),
            related_id=related_id,
            is_read=False,
        )
        db.add(notification)
        db.flush()
        return notification

    # ------------------------------------------------------------------
    # Phase 2
    # ------------------------------------------------------------------

    def deliver(self, notifications: Iterable[Notification]) -> int:
        """
        Publish committed notifications. Returns how many live connections
        were reached in total (0 when every recipient is offline).
        """
        reached = 0
        for notification in notifications:
            try:
                reached += self.hub.publish(
                    notification.user_id,
                    {"event": NOTIFICATION_EVENT, "data": notification_payload(notification)},
                )
            except Exception:
                logger.exception(
                    "Live delivery failed for notification %s (user %s)",
                    notification.id, notification.user_id,
                )
        return reached

    def notify(
        self,
        db: Session,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.general,
        related_id: Optional[str] = None,
    ) -> Notification:
        notification = self.persist(db, user_id, title, message, type, related_id)
        db.commit()
        db.refresh(notification)
        self.deliver([notification])
        return notification

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def list_for_user(db: Session, user_id: str, limit: int = 20) -> List[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def mark_read(db: Session, user_id: str, notification_id: str) -> Optional[Notification]:
        """
        Flip isRead to true. Idempotent; returns None when the notification
        does not exist or belongs to someone else.
        """
        notification = (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if notification is None:
            return None
        if not notification.is_read:
            notification.is_read = True
            db.commit()
            db.refresh(notification)
        return notification
