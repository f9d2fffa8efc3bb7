"""Push-channel event models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from .chat import Message, SenderType


class EventKind(str, Enum):
    """Inbound push-channel events."""

    CONNECTED = "connect"
    DISCONNECTED = "disconnect"
    NEW_MESSAGE = "new-message"
    ADMIN_NOTIFICATION = "admin-notification"
    ERROR = "error"


class OutboundEvent(str, Enum):
    """Events the console emits."""

    JOIN_CONVERSATION = "join-conversation"
    SEND_MESSAGE = "send-message"


@dataclass(frozen=True)
class Connected:
    kind: ClassVar[EventKind] = EventKind.CONNECTED


@dataclass(frozen=True)
class Disconnected:
    reason: str | None = None
    kind: ClassVar[EventKind] = EventKind.DISCONNECTED


@dataclass(frozen=True)
class NewMessageReceived:
    message: Message
    kind: ClassVar[EventKind] = EventKind.NEW_MESSAGE


@dataclass(frozen=True)
class AdminNotification:
    payload: dict = field(default_factory=dict)
    kind: ClassVar[EventKind] = EventKind.ADMIN_NOTIFICATION


@dataclass(frozen=True)
class ChannelErrorReceived:
    message: str
    kind: ClassVar[EventKind] = EventKind.ERROR


InboundEvent = Union[
    Connected,
    Disconnected,
    NewMessageReceived,
    AdminNotification,
    ChannelErrorReceived,
]


@dataclass(frozen=True)
class JoinConversation:
    """Room membership request."""

    conversation_id: int

    def to_payload(self) -> dict:
        return {"conversationId": self.conversation_id, "isAdmin": True}


@dataclass(frozen=True)
class SendMessage:
    """Outbound admin message; exactly one of content / image_url is set."""

    conversation_id: int
    sender_id: int
    content: str | None = None
    image_url: str | None = None

    def to_payload(self) -> dict:
        return {
            "conversationId": self.conversation_id,
            "senderId": self.sender_id,
            "senderType": SenderType.ADMIN.value,
            "content": self.content,
            "imageUrl": self.image_url,
        }
