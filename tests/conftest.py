"""Pytest configuration and fixtures."""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from socketio import exceptions as socketio_exceptions

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from support_console.channel import SocketIOChannel  # noqa: E402
from support_console.config import ConsoleConfig  # noqa: E402
from support_console.models import (  # noqa: E402
    Conversation,
    ConversationStatus,
    Message,
    OutboundEvent,
)


def make_message(
    id: int,
    conversation_id: int | None = 42,
    sender_type: str = "admin",
    sender_id: int = 0,
    content: str | None = "hello",
    image_url: str | None = None,
    created_at: datetime | None = None,
) -> Message:
    """Build a confirmed message the way the chat server would push it."""
    return Message(
        id=id,
        sender_id=sender_id,
        sender_type=sender_type,
        content=content,
        image_url=image_url,
        created_at=created_at or datetime.now(timezone.utc),
        conversation_id=conversation_id,
    )


def make_conversation(
    id: int,
    unread_count: int = 0,
    status: str = "OPEN",
    email: str | None = None,
) -> Conversation:
    return Conversation.model_validate(
        {
            "id": id,
            "userId": id * 10,
            "status": status,
            "lastMessageAt": "2024-01-01T12:00:00.000Z",
            "unreadCount": unread_count,
            "user": {"id": id * 10, "email": email or f"user{id}@example.com"},
            "messages": [
                {"id": 1, "content": "hi", "imageUrl": None, "senderType": "user"}
            ],
            "_count": {"messages": 1},
        }
    )


class FakeSocketIOClient:
    """Stands in for socketio.AsyncClient, including its callback ordering.

    As in python-socketio, the namespace is up and the connect handler has
    finished before `connected` turns True.
    """

    def __init__(self):
        self.handlers: dict = {}
        self.namespaces: dict[str, str] = {}
        self.connected = False
        self.emitted: list[tuple[OutboundEvent, dict]] = []
        self.connect_urls: list[str] = []
        self.fail_connect = False
        self.fail_emit = False
        self.disconnected = False

    def on(self, event, handler=None):
        self.handlers[event] = handler

    async def connect(self, url, **kwargs):
        self.connect_urls.append(url)
        if self.fail_connect:
            raise socketio_exceptions.ConnectionError("refused")
        await self.handshake()

    async def handshake(self):
        self.namespaces["/"] = "sid"
        await self.handlers["connect"]()
        self.connected = True

    async def disconnect(self):
        self.namespaces.clear()
        self.connected = False
        self.disconnected = True

    async def emit(self, event, data=None):
        if "/" not in self.namespaces:
            raise socketio_exceptions.BadNamespaceError("/ is not a connected namespace.")
        if self.fail_emit:
            raise socketio_exceptions.SocketIOError("emit failed")
        self.emitted.append((OutboundEvent(event), data))

    async def drop(self, reason="transport close"):
        self.namespaces.clear()
        self.connected = False
        await self.handlers["disconnect"](reason)


class FakeChannel(SocketIOChannel):
    """SocketIOChannel over FakeSocketIOClient, with test helpers."""

    def __init__(self, event_bus):
        self.sio = FakeSocketIOClient()
        super().__init__(event_bus, client=self.sio)

    @property
    def emitted(self) -> list[tuple[OutboundEvent, dict]]:
        return self.sio.emitted

    @property
    def connect_urls(self) -> list[str]:
        return self.sio.connect_urls

    @property
    def disconnected(self) -> bool:
        return self.sio.disconnected

    @property
    def fail_connect(self) -> bool:
        return self.sio.fail_connect

    @fail_connect.setter
    def fail_connect(self, value: bool) -> None:
        self.sio.fail_connect = value

    @property
    def fail_emit(self) -> bool:
        return self.sio.fail_emit

    @fail_emit.setter
    def fail_emit(self, value: bool) -> None:
        self.sio.fail_emit = value

    async def drop(self) -> None:
        """Simulate a transport drop."""
        await self.sio.drop()

    async def reconnect(self) -> None:
        """Simulate socket.io's automatic reconnection."""
        await self.sio.handshake()

    def payloads(self, event: OutboundEvent) -> list[dict]:
        return [payload for name, payload in self.emitted if name is event]


class FakeChatApi:
    """In-memory chat API; gates let tests control response ordering."""

    def __init__(self):
        self.conversations: dict[ConversationStatus, list[Conversation]] = {
            status: [] for status in ConversationStatus
        }
        self.messages: dict[int, list[Message]] = {}
        self.conversation_calls: list[ConversationStatus] = []
        self.message_calls: list[int] = []
        self.uploads: list[tuple[str, bytes, str]] = []
        self.conversation_gates: dict[ConversationStatus, asyncio.Event] = {}
        self.message_gates: dict[int, asyncio.Event] = {}
        self.conversation_error: Exception | None = None

    async def list_conversations(self, status):
        self.conversation_calls.append(status)
        gate = self.conversation_gates.get(status)
        if gate:
            await gate.wait()
        if self.conversation_error:
            raise self.conversation_error
        return list(self.conversations[status])

    async def list_messages(self, conversation_id, limit=50):
        self.message_calls.append(conversation_id)
        gate = self.message_gates.get(conversation_id)
        if gate:
            await gate.wait()
        return list(self.messages.get(conversation_id, []))

    async def upload_image(self, filename, content, content_type):
        self.uploads.append((filename, content, content_type))
        return f"/uploads/chat/{filename}"


@pytest.fixture
def config():
    """Console config with fast timers."""
    return ConsoleConfig(
        socket_url="http://chat.test",
        api_base_url="http://api.test",
        main_app_url="http://app.test",
        refresh_interval=0.05,
        scroll_delay=0.0,
    )


@pytest.fixture
def event_bus():
    from support_console.event_bus import EventBus

    return EventBus()


@pytest.fixture
def fake_channel(event_bus):
    return FakeChannel(event_bus)


@pytest.fixture
def fake_api():
    return FakeChatApi()


@pytest.fixture
def notifier():
    from support_console.notifier import ConsoleNotifier

    return ConsoleNotifier()


@pytest_asyncio.fixture
async def session(event_bus, fake_channel, fake_api, notifier, config):
    """Session wired to the fakes, not yet connected."""
    from support_console.session import ConversationSessionManager

    manager = ConversationSessionManager(
        channel=fake_channel,
        api_client=fake_api,
        notifier=notifier,
        config=config,
    )
    event_bus.subscribe_all(manager.handle_event)
    yield manager
    await manager.stop()


@pytest_asyncio.fixture
async def connected_session(session):
    """Session with the push channel up."""
    await session.connect()
    return session
