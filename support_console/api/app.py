"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .routes import (
    create_conversations_router,
    create_messages_router,
    create_status_router,
)


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application around one console Application."""
    application = application or Application()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Support Console API",
        description="Admin support chat console",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    # Enable CORS
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:4321", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.include_router(create_conversations_router(application))
    fastapi_app.include_router(create_messages_router(application))
    fastapi_app.include_router(create_status_router(application))

    return fastapi_app
