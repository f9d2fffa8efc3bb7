"""Session state models."""

from dataclasses import dataclass, field
from enum import Enum

from .chat import Conversation, ConversationStatus, Message


class ConnectionState(str, Enum):
    """Push-channel connection state."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class SessionState:
    """Live state of one admin console session."""

    selected_conversation_id: int | None = None
    messages: list[Message] = field(default_factory=list)  # chronological
    connection: ConnectionState = ConnectionState.DISCONNECTED
    unread_total: int = 0
    status_filter: ConversationStatus = ConversationStatus.OPEN
    conversations: list[Conversation] = field(default_factory=list)
