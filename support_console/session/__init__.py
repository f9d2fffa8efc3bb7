"""Conversation session module."""

from .manager import ConversationSessionManager, ISessionManager
from .reconcile import (
    DEFAULT_TOLERANCE,
    ReconcileOutcome,
    find_provisional_match,
    payload_matches,
    reconcile,
)

__all__ = [
    "ConversationSessionManager",
    "ISessionManager",
    "DEFAULT_TOLERANCE",
    "ReconcileOutcome",
    "find_provisional_match",
    "payload_matches",
    "reconcile",
]
