"""API contracts: enums and response views."""

from olofalumni.contracts.enums import (
    FeedbackType,
    Gender,
    NotificationType,
    ReactionType,
    ReportReason,
    ReportStatus,
)
from olofalumni.contracts.models import (
    CommentOut,
    ConversationOut,
    FeedbackOut,
    MessageOut,
    NotificationOut,
    PhotoOut,
    PostOut,
    ReportOut,
    UserPublic,
    UserSelf,
    UserSummary,
    conversation_view,
    public_user_view,
    self_user_view,
)

__all__ = [
    "CommentOut",
    "ConversationOut",
    "FeedbackOut",
    "FeedbackType",
    "Gender",
    "MessageOut",
    "NotificationOut",
    "NotificationType",
    "PhotoOut",
    "PostOut",
    "ReactionType",
    "ReportOut",
    "ReportReason",
    "ReportStatus",
    "UserPublic",
    "UserSelf",
    "UserSummary",
    "conversation_view",
    "public_user_view",
    "self_user_view",
]
