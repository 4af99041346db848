"""Enumerations shared by the API and the data layer."""

from enum import Enum


class Gender(str, Enum):
    """Gender options offered at registration."""

    MALE = "male"
    FEMALE = "female"
    LGBTQ = "lgbtq"
    PREFER_NOT_TO_SAY = "prefer-not-to-say"
    OTHER = "other"


class NotificationType(str, Enum):
    """Community actions that broadcast a notification."""

    USER_REGISTERED = "user_registered"
    NEW_POST = "new_post"
    NEW_PHOTO = "new_photo"
    NEW_FEEDBACK = "new_feedback"
    USER_REPORTED = "user_reported"


class ReactionType(str, Enum):
    """Reactions a user can leave on a post."""

    LIKE = "like"
    LOVE = "love"
    LAUGH = "laugh"
    CELEBRATE = "celebrate"
    SUPPORT = "support"


class FeedbackType(str, Enum):
    """Feedback categories."""

    SUGGESTION = "suggestion"
    BUG = "bug"
    COMPLIMENT = "compliment"
    OTHER = "other"


class ReportReason(str, Enum):
    """Fixed reasons for reporting a user."""

    INAPPROPRIATE_CONTENT = "Inappropriate content"
    HARASSMENT = "Harassment or bullying"
    SPAM = "Spam or fake account"
    HATE_SPEECH = "Hate speech"
    IMPERSONATION = "Impersonation"
    OTHER = "Other"


class ReportStatus(str, Enum):
    """Moderation status of a report."""

    OPEN = "open"
    REVIEWED = "reviewed"
    DISMISSED = "dismissed"
