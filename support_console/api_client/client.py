"""HTTP client for the chat REST API."""

from typing import Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from ..errors import InvalidInputError, MalformedResponseError
from ..logging_config import get_logger
from ..models import Conversation, ConversationStatus, Message
from .responses import fetch_json

logger = get_logger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MB

_conversation_list = TypeAdapter(list[Conversation])
_message_list = TypeAdapter(list[Message])


class IChatApi(Protocol):
    """Request/response access to conversations, messages and uploads."""

    async def list_conversations(
        self, status: ConversationStatus
    ) -> list[Conversation]:
        """List conversations filtered by status."""
        ...

    async def list_messages(
        self, conversation_id: int, limit: int = 50
    ) -> list[Message]:
        """List the most recent messages of a conversation, oldest first."""
        ...

    async def upload_image(
        self, filename: str, content: bytes, content_type: str
    ) -> str:
        """Upload an image attachment and return its URL."""
        ...


def validate_image(filename: str, content: bytes, content_type: str | None) -> None:
    """Reject non-images and oversized files before they hit the network."""
    if not content_type or not content_type.startswith("image/"):
        raise InvalidInputError("Please select an image file")
    if len(content) > MAX_IMAGE_BYTES:
        raise InvalidInputError("Image size must be less than 5MB")
    if not filename:
        raise InvalidInputError("Image file name is required")


class ChatApiClient:
    """httpx-backed chat API client."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url or "", timeout=timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def list_conversations(
        self, status: ConversationStatus
    ) -> list[Conversation]:
        data = await fetch_json(
            self._client,
            "GET",
            "/api/chat/conversations",
            params={"status": status.value},
        )
        try:
            return _conversation_list.validate_python(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid conversation list: {e}") from e

    async def list_messages(
        self, conversation_id: int, limit: int = 50
    ) -> list[Message]:
        data = await fetch_json(
            self._client,
            "GET",
            "/api/chat/messages",
            params={"conversationId": conversation_id, "limit": limit},
        )
        try:
            return _message_list.validate_python(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid message list: {e}") from e

    async def upload_image(
        self, filename: str, content: bytes, content_type: str
    ) -> str:
        validate_image(filename, content, content_type)

        data = await fetch_json(
            self._client,
            "POST",
            "/api/chat/upload-image",
            files={"image": (filename, content, content_type)},
        )
        image_url = data.get("imageUrl") if isinstance(data, dict) else None
        if not image_url:
            raise MalformedResponseError("Upload response has no imageUrl")

        logger.info("Uploaded image %s -> %s", filename, image_url)
        return image_url
