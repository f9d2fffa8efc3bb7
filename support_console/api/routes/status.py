"""Session status and error API routes."""

from pydantic import BaseModel
from fastapi import APIRouter

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for session status."""

    connection: str
    selected_conversation_id: int | None
    status_filter: str
    unread_total: int
    badge: str


class ErrorsResponse(BaseModel):
    """Pending push-channel errors."""

    errors: list[str]


def create_status_router(app: Application) -> APIRouter:
    """Create status router."""
    router = APIRouter(prefix="/api/console", tags=["status"])

    @router.get("/status", response_model=StatusResponse)
    async def get_status() -> dict:
        state = app.session.state
        return {
            "connection": state.connection.value,
            "selected_conversation_id": state.selected_conversation_id,
            "status_filter": state.status_filter.value,
            "unread_total": state.unread_total,
            "badge": app.notifier.badge,
        }

    @router.get("/errors", response_model=ErrorsResponse)
    async def get_errors() -> dict:
        return {"errors": list(app.notifier.errors)}

    @router.delete("/errors", response_model=ErrorsResponse)
    async def dismiss_errors() -> dict:
        """Dismiss pending errors, returning the ones dismissed."""
        return {"errors": app.notifier.dismiss_errors()}

    return router
