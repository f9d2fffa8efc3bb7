"""Conversation and message wire models."""

import time
from datetime import datetime, timezone
from enum import Enum

from pydantic import AliasPath, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Server ids are small sequential integers; provisional ids are ms timestamps.
PROVISIONAL_ID_FLOOR = 1_000_000_000_000

_last_provisional_id = 0


class SenderType(str, Enum):
    """Who wrote a message."""

    USER = "user"
    ADMIN = "admin"


class ConversationStatus(str, Enum):
    """Conversation lifecycle status, plus ALL for list filtering."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    ALL = "ALL"


class ChatModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Message(ChatModel):
    """A single chat message, confirmed or provisional."""

    id: int
    sender_id: int
    sender_type: SenderType
    content: str | None = None
    image_url: str | None = None
    created_at: datetime
    is_read: bool = False
    conversation_id: int | None = None

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _require_payload(self) -> "Message":
        if not self.content and not self.image_url:
            raise ValueError("message must carry content or an image URL")
        return self

    @property
    def provisional(self) -> bool:
        return is_provisional(self.id)


class MessagePreview(ChatModel):
    """Latest-message preview embedded in a conversation."""

    id: int
    content: str | None = None
    image_url: str | None = None
    sender_type: SenderType | None = None


class ConversationUser(ChatModel):
    id: int
    email: str


class Conversation(ChatModel):
    """Read-only cached copy of a conversation."""

    id: int
    user_id: int
    status: ConversationStatus
    last_message_at: datetime | None = None
    unread_count: int = 0
    user: ConversationUser
    messages: list[MessagePreview] = Field(default_factory=list)
    message_count: int = Field(
        default=0, validation_alias=AliasPath("_count", "messages")
    )

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("unread_count", mode="before")
    @classmethod
    def _default_unread(cls, value):
        return 0 if value is None else value

    def preview_text(self) -> str:
        """Text shown under the conversation in the list."""
        if not self.messages:
            return ""
        latest = self.messages[0]
        if latest.content:
            return latest.content
        return "Image" if latest.image_url else ""


def new_provisional_id() -> int:
    """Millisecond timestamp id, strictly increasing within the process."""
    global _last_provisional_id
    candidate = int(time.time() * 1000)
    _last_provisional_id = max(candidate, _last_provisional_id + 1)
    return _last_provisional_id


def is_provisional(message_id: int) -> bool:
    """True for locally generated ids awaiting server confirmation."""
    return message_id > PROVISIONAL_ID_FLOOR


def make_provisional_message(
    sender_id: int,
    content: str | None = None,
    image_url: str | None = None,
) -> Message:
    """Build the optimistic admin message shown before the server echo."""
    return Message(
        id=new_provisional_id(),
        sender_id=sender_id,
        sender_type=SenderType.ADMIN,
        content=content,
        image_url=image_url,
        created_at=datetime.now(timezone.utc),
        is_read=False,
    )
