"""Conversation list API routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Query

from ...app import Application
from ...models import ConversationStatus
from .messages import MessageResponse, to_message_response


class ConversationResponse(BaseModel):
    """Response model for a conversation list entry."""

    id: int
    user_id: int
    user_email: str
    status: str
    last_message_at: datetime | None
    unread_count: int
    message_count: int
    preview: str


def create_conversations_router(app: Application) -> APIRouter:
    """Create conversations router."""
    router = APIRouter(prefix="/api/console", tags=["conversations"])

    @router.get("/conversations", response_model=list[ConversationResponse])
    async def list_conversations(
        status: ConversationStatus | None = Query(
            None, description="OPEN, CLOSED or ALL; switches the current filter"
        ),
    ) -> list[dict]:
        """Reload and return the cached conversation list."""
        await app.session.load_conversations(status)
        return [
            {
                "id": c.id,
                "user_id": c.user_id,
                "user_email": c.user.email,
                "status": c.status.value,
                "last_message_at": c.last_message_at,
                "unread_count": c.unread_count,
                "message_count": c.message_count,
                "preview": c.preview_text(),
            }
            for c in app.session.conversations
        ]

    @router.post(
        "/conversations/{conversation_id}/select",
        response_model=list[MessageResponse],
    )
    async def select_conversation(conversation_id: int) -> list[dict]:
        """Make a conversation active and return its messages."""
        if conversation_id <= 0:
            raise HTTPException(status_code=400, detail="Invalid conversation id")
        messages = await app.session.select_conversation(conversation_id)
        return [to_message_response(m, app.config.main_app_url) for m in messages]

    return router
