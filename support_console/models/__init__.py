"""Core data models for the support console."""

from .chat import (
    PROVISIONAL_ID_FLOOR,
    Conversation,
    ConversationStatus,
    ConversationUser,
    Message,
    MessagePreview,
    SenderType,
    is_provisional,
    make_provisional_message,
    new_provisional_id,
)
from .events import (
    AdminNotification,
    ChannelErrorReceived,
    Connected,
    Disconnected,
    EventKind,
    InboundEvent,
    JoinConversation,
    NewMessageReceived,
    OutboundEvent,
    SendMessage,
)
from .session import ConnectionState, SessionState

__all__ = [
    # Chat
    "PROVISIONAL_ID_FLOOR",
    "Conversation",
    "ConversationStatus",
    "ConversationUser",
    "Message",
    "MessagePreview",
    "SenderType",
    "is_provisional",
    "make_provisional_message",
    "new_provisional_id",
    # Events
    "AdminNotification",
    "ChannelErrorReceived",
    "Connected",
    "Disconnected",
    "EventKind",
    "InboundEvent",
    "JoinConversation",
    "NewMessageReceived",
    "OutboundEvent",
    "SendMessage",
    # Session
    "ConnectionState",
    "SessionState",
]
