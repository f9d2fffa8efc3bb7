"""Matching optimistic messages against their server-confirmed echoes.

The server does not echo a client correlation id, so a provisional message is
paired with its confirmation heuristically: same sender, same payload, and
creation times within a small tolerance window.
"""

from datetime import timedelta
from enum import Enum

from ..models import Message, is_provisional

DEFAULT_TOLERANCE = timedelta(seconds=5)


class ReconcileOutcome(str, Enum):
    """What happened to an incoming confirmed message."""

    DUPLICATE = "duplicate"
    REPLACED = "replaced"
    APPENDED = "appended"


def payload_matches(provisional: Message, confirmed: Message) -> bool:
    """Equal non-empty text, or equal non-empty image URL."""
    if confirmed.content and provisional.content == confirmed.content:
        return True
    if confirmed.image_url and provisional.image_url == confirmed.image_url:
        return True
    return False


def find_provisional_match(
    messages: list[Message],
    incoming: Message,
    tolerance: timedelta = DEFAULT_TOLERANCE,
) -> int | None:
    """Index of the provisional entry `incoming` confirms, if any."""
    for index, candidate in enumerate(messages):
        if not is_provisional(candidate.id):
            continue
        if candidate.sender_type != incoming.sender_type:
            continue
        if candidate.sender_id != incoming.sender_id:
            continue
        if not payload_matches(candidate, incoming):
            continue
        if abs(candidate.created_at - incoming.created_at) < tolerance:
            return index
    return None


def reconcile(
    messages: list[Message],
    incoming: Message,
    tolerance: timedelta = DEFAULT_TOLERANCE,
) -> tuple[list[Message], ReconcileOutcome]:
    """Apply a confirmed message to the thread without mutating `messages`."""
    if any(m.id == incoming.id for m in messages):
        return messages, ReconcileOutcome.DUPLICATE

    index = find_provisional_match(messages, incoming, tolerance)
    if index is not None:
        updated = list(messages)
        updated[index] = incoming
        return updated, ReconcileOutcome.REPLACED

    return [*messages, incoming], ReconcileOutcome.APPENDED
