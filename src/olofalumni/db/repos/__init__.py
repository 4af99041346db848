"""Repository classes for database access."""

from olofalumni.db.repos.base import BaseRepo
from olofalumni.db.repos.conversation import ConversationRepo, other_participant_id
from olofalumni.db.repos.feedback import FeedbackRepo, ReportRepo
from olofalumni.db.repos.gallery import GalleryRepo
from olofalumni.db.repos.notification import NotificationRepo
from olofalumni.db.repos.post import CommentRepo, PostRepo
from olofalumni.db.repos.user import UserRepo

__all__ = [
    "BaseRepo",
    "CommentRepo",
    "ConversationRepo",
    "FeedbackRepo",
    "GalleryRepo",
    "NotificationRepo",
    "PostRepo",
    "ReportRepo",
    "UserRepo",
    "other_participant_id",
]
