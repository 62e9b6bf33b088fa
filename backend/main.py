"""
Chat Relay - Main Application Entry Point

REST API for chats and messages plus the realtime presence and fan-out layer.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting Chat Relay in {settings.ENVIRONMENT} mode...")

    from app.infrastructure.local.database import init_db

    await init_db()

    from app.services.background_scheduler import (
        start_background_scheduler,
        stop_background_scheduler,
    )

    await start_background_scheduler(app.state.realtime_hub)

    yield

    # Shutdown
    logger.info("Shutting down Chat Relay...")
    await stop_background_scheduler()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Chat Relay",
        description="Realtime messaging backend: REST chats/messages with presence and live fan-out",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    from app.api.deps import get_chat_repository
    from app.services.realtime_hub import RealtimeHub

    # One hub per application; handlers reach it through app.state
    app.state.realtime_hub = RealtimeHub(
        chat_repo=get_chat_repository(),
        outbox_limit=settings.REALTIME_OUTBOX_MAX_FRAMES,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from app.api import chats, messages, realtime

    app.include_router(chats.router, prefix="/api", tags=["chats"])
    app.include_router(messages.router, prefix="/api", tags=["messages"])
    app.include_router(realtime.router, prefix="/api/realtime", tags=["realtime"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        hub = app.state.realtime_hub
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0",
            "sessions": hub.session_count(),
            "online_users": len(hub.registry.list_online()),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
