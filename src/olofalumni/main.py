"""FastAPI application entry point."""

import logging
import sys
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from olofalumni import __version__
from olofalumni.api import (
    auth_router,
    conversations_router,
    feedback_router,
    files_router,
    gallery_router,
    notifications_router,
    posts_router,
    reports_router,
    settings_router,
    users_router,
    ws_router,
)
from olofalumni.settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(settings_router)
app.include_router(posts_router)
app.include_router(gallery_router)
app.include_router(conversations_router)
app.include_router(notifications_router)
app.include_router(feedback_router)
app.include_router(reports_router)
app.include_router(files_router)
app.include_router(ws_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": f"{settings.app_name} API", "status": "ok"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/health")
async def api_health() -> dict[str, str]:
    """Health check with server time."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
