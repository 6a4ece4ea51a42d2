"""
Live notification channel over WebSocket

Protocol (JSON text frames):
  client -> {"type": "join", "token": "<jwt>"}     must be the first frame
  server -> {"type": "joined", "userId": "..."}
  server -> {"type": "notification", "data": {...}}
  server -> {"type": "ping"}                       after an idle interval
  client -> {"type": "ping"}  answered with {"type": "pong"}
  client -> {"type": "leave"} closes the connection

A missing, malformed or unauthenticated join closes with 1008.
"""
import asyncio
import json
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool
from starlette.websockets import WebSocketState

from courtdesk.api.deps import resolve_token_user
from courtdesk.services.notification_hub import NotificationHub, Subscription

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_join(websocket: WebSocket, timeout: float) -> str:
    """Wait for the join frame and return its token."""
    raw = await asyncio.wait_for(websocket.receive_text(), timeout=timeout)
    message = json.loads(raw)
    if not isinstance(message, dict) or message.get("type") != "join":
        raise ValueError("first frame must be a join")
    token = message.get("token")
    if not isinstance(token, str) or not token:
        raise ValueError("join without token")
    return token


def _authenticate(database, token: str, settings) -> str:
    db = database.session()
    try:
        return resolve_token_user(token, db, settings).id
    finally:
        db.close()


async def _pump_outgoing(websocket: WebSocket, sub: Subscription, ping_interval: float) -> None:
    while True:
        try:
            payload = await sub.get(timeout=ping_interval)
        except asyncio.TimeoutError:
            await websocket.send_json({"type": "ping"})
            continue
        await websocket.send_json({"type": payload["event"], "data": payload["data"]})


async def _pump_incoming(websocket: WebSocket) -> None:
    while True:
        try:
            message = json.loads(await websocket.receive_text())
        except json.JSONDecodeError:
            continue
        kind = message.get("type") if isinstance(message, dict) else None
        if kind == "ping":
            await websocket.send_json({"type": "pong"})
        elif kind == "leave":
            return


@router.websocket("/notifications")
async def notifications_socket(websocket: WebSocket):
    await websocket.accept()
    state = websocket.app.state
    settings = state.settings
    hub: NotificationHub = state.notification_hub

    try:
        token = await _read_join(websocket, settings.WS_PING_TIMEOUT_SECONDS)
    except WebSocketDisconnect:
        return
    except (asyncio.TimeoutError, ValueError) as e:
        logger.info(f"WebSocket join rejected: {str(e) or 'timeout'}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        user_id = await run_in_threadpool(_authenticate, state.db, token, settings)
    except HTTPException as e:
        logger.info(f"WebSocket join rejected: {e.detail}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    sub = hub.subscribe(user_id)
    tasks = []
    try:
        await websocket.send_json({"type": "joined", "userId": user_id})
        tasks = [
            asyncio.create_task(_pump_incoming(websocket)),
            asyncio.create_task(_pump_outgoing(websocket, sub, settings.WS_PING_INTERVAL_SECONDS)),
        ]
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.error(f"WebSocket error for user {user_id}: {exc!r}")
    except WebSocketDisconnect:
        pass
    finally:
        hub.unsubscribe(sub)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    if websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close()
