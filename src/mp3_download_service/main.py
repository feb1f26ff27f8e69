from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from sqlalchemy import text
from starlette.middleware.sessions import SessionMiddleware
from mp3_download_service.app.controllers import (
    auth_controller,
    download_controller,
    history_controller,
)
from mp3_download_service.app.utils.identity_events import (
    identity_events,
    log_identity_change,
)
from mp3_download_service.app.utils.logging import configure_logging
from mp3_download_service.app.utils.settings import LOG_LEVEL, SECRET_KEY
from mp3_download_service.infrastructure.database.session import (
    async_session_factory,
)

configure_logging(LOG_LEVEL)
logger = structlog.get_logger(__name__)


async def check_db_connection() -> None:
    """Test database connection on startup using an async session."""
    logger.info("Testing database connection...")
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
        logger.info("Database connection successful.")
    except Exception as e:
        logger.error("Failed to connect to the database", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the database and watch identity changes for the app's lifetime."""
    await check_db_connection()
    unsubscribe = identity_events.subscribe(log_identity_change)
    try:
        yield
    finally:
        unsubscribe()


# OpenAPI Generation is handled automatically by FastAPI.
app = FastAPI(
    title="MP3 Download Service",
    description="Lets an authenticated user turn YouTube videos into MP3 downloads.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY)

app.include_router(auth_controller.router, prefix="/api/auth", tags=["Auth"])
app.include_router(
    download_controller.router, prefix="/api/downloads", tags=["Downloads"]
)
app.include_router(history_controller.router, prefix="/api/history", tags=["History"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
