"""
Notification inbox and Server-Sent Events stream

Events on /stream:
- notification: a newly persisted notification for the caller
- ping: keepalive (sent by sse-starlette)
"""
import asyncio
import json
import logging
from typing import AsyncIterator, Awaitable, Callable, List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sse_starlette.sse import EventSourceResponse

from courtdesk.api.deps import get_current_user, get_notification_hub, get_settings_dep
from courtdesk.core.config import Settings
from courtdesk.db import schemas
from courtdesk.db.database import get_db
from courtdesk.db.models import User
from courtdesk.services.notification_hub import NotificationHub, Subscription
from courtdesk.services.notification_service import NotificationDispatcher
from courtdesk.utils.exceptions import NotFound
from courtdesk.utils.helpers import store_errors

logger = logging.getLogger(__name__)

router = APIRouter()

# how often the stream wakes up to notice a disconnected client
STREAM_POLL_SECONDS = 1.0


@router.get("", response_model=schemas.Envelope[List[schemas.NotificationOut]])
def list_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Latest 20 notifications, newest first"""
    with store_errors(db, "Failed to fetch notifications"):
        notifications = NotificationDispatcher.list_for_user(db, current_user.id)
        data = [schemas.NotificationOut.model_validate(n) for n in notifications]
    return {"success": True, "data": data}


@router.put("/{notification_id}/read", response_model=schemas.Envelope[schemas.NotificationOut])
def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with store_errors(db, "Failed to update notification"):
        notification = NotificationDispatcher.mark_read(db, current_user.id, notification_id)
        if notification is None:
            raise NotFound("Notification not found")
        data = schemas.NotificationOut.model_validate(notification)
    return {"success": True, "data": data}


async def notification_events(
    hub: NotificationHub,
    sub: Subscription,
    is_disconnected: Callable[[], Awaitable[bool]],
    poll_seconds: float = STREAM_POLL_SECONDS,
) -> AsyncIterator[dict]:
    """
    Relay hub payloads for one subscription as SSE events until the client
    goes away. Always leaves the room on exit.
    """
    try:
        while True:
            if await is_disconnected():
                break
            try:
                payload = await sub.get(timeout=poll_seconds)
            except asyncio.TimeoutError:
                continue
            yield {"event": payload["event"], "data": json.dumps(payload["data"])}
    finally:
        hub.unsubscribe(sub)
        logger.info("SSE stream ended for user %s", sub.user_id)


@router.get("/stream")
async def stream_notifications(
    request: Request,
    current_user: User = Depends(get_current_user),
    hub: NotificationHub = Depends(get_notification_hub),
    settings: Settings = Depends(get_settings_dep),
):
    """Subscribe to the caller's notifications via Server-Sent Events"""
    sub = hub.subscribe(current_user.id)
    return EventSourceResponse(
        notification_events(hub, sub, request.is_disconnected),
        ping=max(1, int(settings.WS_PING_INTERVAL_SECONDS)),
    )
