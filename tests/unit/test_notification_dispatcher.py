"""NotificationDispatcher against a real (in-memory) database and hub."""

import asyncio
import json

import pytest

from courtdesk.api.endpoints.notifications import notification_events
from courtdesk.db.database import Database
from courtdesk.db.models import Notification, User, UserRole
from courtdesk.services.notification_hub import NotificationHub
from courtdesk.services.notification_service import NotificationDispatcher

pytestmark = pytest.mark.unit


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def user(session):
    u = User(
        username="atticus",
        password_hash="x",
        role=UserRole.lawyer,
        name="Atticus Finch",
        email="atticus@courtdesk.org",
    )
    session.add(u)
    session.commit()
    return u


@pytest.mark.parametrize("field", ["user_id", "title", "message"])
def test_persist_requires_user_title_and_message(session, user, field):
    dispatcher = NotificationDispatcher(NotificationHub())
    kwargs = {"user_id": user.id, "title": "Hi", "message": "Hello"}
    kwargs[field] = ""
    with pytest.raises(ValueError):
        dispatcher.persist(session, **kwargs)


def test_offline_notification_is_still_stored(session, user):
    dispatcher = NotificationDispatcher(NotificationHub())
    n = dispatcher.notify(session, user.id, "Hearing Updated", "Hearing for case X has been updated", "hearing")

    assert n.is_read is False
    assert dispatcher.deliver([n]) == 0
    assert [x.id for x in dispatcher.list_for_user(session, user.id)] == [n.id]


def test_list_for_user_is_newest_first_and_capped(session, user):
    dispatcher = NotificationDispatcher(NotificationHub())
    for i in range(25):
        dispatcher.persist(session, user.id, f"Title {i}", f"Message {i}")
    session.commit()

    listed = dispatcher.list_for_user(session, user.id)
    assert len(listed) == 20
    assert all(a.created_at >= b.created_at for a, b in zip(listed, listed[1:]))


def test_mark_read_is_idempotent_and_owner_scoped(session, user):
    dispatcher = NotificationDispatcher(NotificationHub())
    n = dispatcher.notify(session, user.id, "Title", "Message")

    assert dispatcher.mark_read(session, "someone-else", n.id) is None
    assert dispatcher.mark_read(session, user.id, n.id).is_read is True
    assert dispatcher.mark_read(session, user.id, n.id).is_read is True
    assert dispatcher.mark_read(session, user.id, "missing") is None


def test_delivery_failure_does_not_undo_persistence(session, user):
    class BrokenHub(NotificationHub):
        def publish(self, user_id, payload):
            raise RuntimeError("socket layer down")

    dispatcher = NotificationDispatcher(BrokenHub())
    n = dispatcher.notify(session, user.id, "Title", "Message")

    assert session.query(Notification).filter(Notification.id == n.id).count() == 1


def test_live_subscriber_receives_camelcase_payload(session, user):
    async def scenario():
        hub = NotificationHub()
        sub = hub.subscribe(user.id)
        dispatcher = NotificationDispatcher(hub)
        n = dispatcher.notify(session, user.id, "New Hearing Assignment", "Assigned", "hearing", "h-1")

        payload = await sub.get(timeout=1)
        assert payload["event"] == "notification"
        assert payload["data"]["notificationId"] == n.id
        assert payload["data"]["userId"] == user.id
        assert payload["data"]["relatedId"] == "h-1"
        assert payload["data"]["isRead"] is False

    asyncio.run(scenario())


def test_sse_stream_relays_notifications_and_leaves_room(session, user):
    async def never_disconnected():
        return False

    async def scenario():
        hub = NotificationHub()
        sub = hub.subscribe(user.id)
        NotificationDispatcher(hub).notify(session, user.id, "Title", "Message")

        events = notification_events(hub, sub, never_disconnected, poll_seconds=0.05)
        event = await events.__anext__()
        assert event["event"] == "notification"
        assert json.loads(event["data"])["title"] == "Title"

        await events.aclose()
        assert hub.connection_count(user.id) == 0

    asyncio.run(scenario())


def test_sse_stream_stops_when_client_disconnects(user):
    async def disconnected():
        return True

    async def scenario():
        hub = NotificationHub()
        sub = hub.subscribe(user.id)
        events = [e async for e in notification_events(hub, sub, disconnected)]
        assert events == []
        assert hub.connection_count() == 0

    asyncio.run(scenario())
