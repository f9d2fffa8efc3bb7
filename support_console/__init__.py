"""Support console core module."""

from .app import Application, IApplication
from .api_client import ChatApiClient, IChatApi
from .channel import IPushChannel, SocketIOChannel
from .config import ConsoleConfig
from .errors import (
    ApiError,
    ChannelError,
    ConsoleError,
    InvalidInputError,
    MalformedResponseError,
    SessionNotReadyError,
    TransportError,
)
from .event_bus import EventBus, IEventBus
from .models import (
    ConnectionState,
    Conversation,
    ConversationStatus,
    Message,
    SenderType,
    SessionState,
)
from .notifier import ConsoleNotifier, INotifier
from .session import ConversationSessionManager, ISessionManager, ReconcileOutcome

__all__ = [
    # Application
    "Application",
    "IApplication",
    "ConsoleConfig",
    # Models
    "ConnectionState",
    "Conversation",
    "ConversationStatus",
    "Message",
    "SenderType",
    "SessionState",
    # Errors
    "ApiError",
    "ChannelError",
    "ConsoleError",
    "InvalidInputError",
    "MalformedResponseError",
    "SessionNotReadyError",
    "TransportError",
    # Components
    "ChatApiClient",
    "IChatApi",
    "IPushChannel",
    "SocketIOChannel",
    "EventBus",
    "IEventBus",
    "ConsoleNotifier",
    "INotifier",
    "ConversationSessionManager",
    "ISessionManager",
    "ReconcileOutcome",
]
