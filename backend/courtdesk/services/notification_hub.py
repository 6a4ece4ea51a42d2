"""
services/notification_hub.py

In-memory registry of live notification subscribers, keyed by user id
("rooms"). One hub is constructed per application and stored on
``app.state.notification_hub``.

Each subscription is an asyncio.Queue bound to the event loop that created
it. ``publish`` may be called from any thread; it hands the payload to the
owning loop with ``call_soon_threadsafe`` and never waits for the consumer.

Delivery is best effort: nobody listening means nothing is delivered, and a
subscriber whose queue is full loses the event. The persisted Notification
row is what clients reconcile against.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Subscription:
    user_id: str
    queue: asyncio.Queue
    loop: asyncio.AbstractEventLoop
    dropped: int = field(default=0)

    def offer(self, payload: Any) -> None:
        """Runs on the subscription's own loop."""
        try:
            self.queue.put_nowait(payload)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Notification dropped for user %s: queue full (%d dropped so far)",
                self.user_id, self.dropped,
            )

    async def get(self, timeout: Optional[float] = None) -> Any:
        if timeout is None:
            return await self.queue.get()
        return await asyncio.wait_for(self.queue.get(), timeout=timeout)


class NotificationHub:
    """user_id -> set of live subscriptions"""

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._rooms: Dict[str, Set[Subscription]] = {}
        self._lock = threading.Lock()
        self._closed = False

    @staticmethod
    def room_name(user_id: str) -> str:
        return f"user:{user_id}"

    def subscribe(self, user_id: str) -> Subscription:
        """Join ``user_id``'s room. Must be called from inside a running loop."""
        sub = Subscription(
            user_id=user_id,
            queue=asyncio.Queue(maxsize=self._queue_size),
            loop=asyncio.get_running_loop(),
        )
        with self._lock:
            self._rooms.setdefault(user_id, set()).add(sub)
        logger.info("User %s joined %s", user_id, self.room_name(user_id))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            room = self._rooms.get(sub.user_id)
            if room is None:
                return
            room.discard(sub)
            if not room:
                del self._rooms[sub.user_id]
        logger.info("User %s left %s", sub.user_id, self.room_name(sub.user_id))

    def connection_count(self, user_id: Optional[str] = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._rooms.get(user_id, ()))
            return sum(len(room) for room in self._rooms.values())

    def publish(self, user_id: str, payload: Any) -> int:
        """
        Push ``payload`` to every live subscription of ``user_id``.

        Returns the number of subscriptions the payload was handed to; 0 when
        the user is offline or the hub is closed.
        """
        if self._closed:
            return 0
        with self._lock:
            subs = list(self._rooms.get(user_id, ()))

        handed = 0
        for sub in subs:
            if sub.loop.is_closed():
                self.unsubscribe(sub)
                continue
            try:
                sub.loop.call_soon_threadsafe(sub.offer, payload)
                handed += 1
            except RuntimeError:
                # loop shut down between the check and the call
                self.unsubscribe(sub)
        return handed

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._rooms.clear()
