"""HTTP and WebSocket routes."""

from olofalumni.api.auth import router as auth_router
from olofalumni.api.conversations import router as conversations_router
from olofalumni.api.feedback import feedback_router, reports_router
from olofalumni.api.files import router as files_router
from olofalumni.api.gallery import router as gallery_router
from olofalumni.api.notifications import router as notifications_router
from olofalumni.api.posts import router as posts_router
from olofalumni.api.users import settings_router, users_router
from olofalumni.api.ws import router as ws_router

__all__ = [
    "auth_router",
    "conversations_router",
    "feedback_router",
    "files_router",
    "gallery_router",
    "notifications_router",
    "posts_router",
    "reports_router",
    "settings_router",
    "users_router",
    "ws_router",
]
