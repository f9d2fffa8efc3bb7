"""Message thread API routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, File, UploadFile

from ...app import Application
from ...config import resolve_image_url
from ...errors import ConsoleError
from ...models import Message
from ..errors import to_http_error


class SendMessageRequest(BaseModel):
    """Request model for sending a text message."""

    content: str


class MessageResponse(BaseModel):
    """Response model for a message in the active thread."""

    id: int
    sender_id: int
    sender_type: str
    content: str | None
    image_url: str | None
    created_at: datetime
    is_read: bool
    provisional: bool


def to_message_response(message: Message, main_app_url: str) -> dict:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "sender_type": message.sender_type.value,
        "content": message.content,
        "image_url": (
            resolve_image_url(message.image_url, main_app_url)
            if message.image_url
            else None
        ),
        "created_at": message.created_at,
        "is_read": message.is_read,
        "provisional": message.provisional,
    }


def create_messages_router(app: Application) -> APIRouter:
    """Create messages router."""
    router = APIRouter(prefix="/api/console", tags=["messages"])

    @router.get("/messages", response_model=list[MessageResponse])
    async def get_messages() -> list[dict]:
        """Messages of the active conversation, oldest first."""
        return [
            to_message_response(m, app.config.main_app_url)
            for m in app.session.messages
        ]

    @router.post("/messages", response_model=MessageResponse)
    async def send_message(request: SendMessageRequest) -> dict:
        """Send a text message to the active conversation."""
        try:
            message = await app.session.send_message(content=request.content)
        except ConsoleError as e:
            raise to_http_error(e)
        return to_message_response(message, app.config.main_app_url)

    @router.post("/images", response_model=MessageResponse)
    async def send_image(image: UploadFile = File(...)) -> dict:
        """Upload an image and send it to the active conversation."""
        content = await image.read()
        try:
            message = await app.session.send_image(
                filename=image.filename or "",
                content=content,
                content_type=image.content_type,
            )
        except ConsoleError as e:
            raise to_http_error(e)
        return to_message_response(message, app.config.main_app_url)

    return router
