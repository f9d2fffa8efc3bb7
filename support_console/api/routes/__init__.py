"""API routes."""

from .conversations import create_conversations_router
from .messages import create_messages_router
from .status import create_status_router

__all__ = [
    "create_conversations_router",
    "create_messages_router",
    "create_status_router",
]
