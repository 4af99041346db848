"""Pydantic v2 response models.

Repository rows are plain dicts that may carry private columns (password
hash, verification codes); every view model ignores unknown keys so those
never leak into a response.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator


class ViewModel(BaseModel):
    """Base model for API views built from repository rows."""

    model_config = {"extra": "ignore", "frozen": False}


class UserSummary(ViewModel):
    """Author/participant summary embedded in other resources."""

    id: str
    name: str
    profile_picture: str | None = None
    year_of_completion: int | None = None
    stream_clan: str | None = None


class UserPublic(ViewModel):
    """Alumni record as seen by other members."""

    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    profile_picture: str | None = None
    cover_photo: str | None = None
    bio: str | None = None
    year_of_completion: int
    stream_clan: str
    created_at: datetime | None = None


class UserSelf(UserPublic):
    """The current user's own record, including private settings."""

    email: str
    gender: str
    hide_email: bool = False
    hide_phone: bool = False
    is_verified: bool = False


class CommentOut(ViewModel):
    """Comment with its author."""

    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime
    user: UserSummary | None = None


class PostOut(ViewModel):
    """Feed entry."""

    id: str
    user_id: str
    content: str
    file_url: str | None = None
    file_type: str | None = None
    created_at: datetime
    user: UserSummary | None = None
    comments: list[CommentOut] = Field(default_factory=list)
    reactions: dict[str, int] = Field(default_factory=dict)
    reaction_count: int = 0

    @model_validator(mode="after")
    def count_reactions(self) -> "PostOut":
        self.reaction_count = sum(self.reactions.values())
        return self


class PhotoOut(ViewModel):
    """Gallery photo."""

    id: str
    user_id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    caption: str | None = None
    created_at: datetime
    url: str = ""
    user: UserSummary | None = None

    @model_validator(mode="after")
    def build_url(self) -> "PhotoOut":
        if not self.url:
            self.url = f"/uploads/gallery/{self.filename}"
        return self


class MessageOut(ViewModel):
    """Direct message."""

    id: str
    conversation_id: str
    sender_id: str
    content: str | None = None
    file_url: str | None = None
    file_type: str | None = None
    created_at: datetime
    sender: UserSummary | None = None


class ConversationOut(ViewModel):
    """Conversation with both participants and the latest message."""

    id: str
    participant1_id: str
    participant2_id: str
    last_message_at: datetime | None = None
    created_at: datetime | None = None
    participant1: UserSummary | None = None
    participant2: UserSummary | None = None
    other_participant: UserSummary | None = None
    last_message: MessageOut | None = None


class RelatedUser(ViewModel):
    """User a notification refers to."""

    id: str
    name: str
    profile_picture: str | None = None


class NotificationOut(ViewModel):
    """Notification entry."""

    id: str
    type: str
    title: str
    message: str
    is_read: bool
    created_at: datetime
    related_user_id: str | None = None
    related_user: RelatedUser | None = None


class FeedbackOut(ViewModel):
    """Feedback entry."""

    id: str
    user_id: str
    type: str
    subject: str
    message: str
    rating: int | None = None
    likes: int = 0
    created_at: datetime
    user: UserSummary | None = None


class ReportOut(ViewModel):
    """Report as seen by its reporter."""

    id: str
    reporter_id: str
    reported_user_id: str
    reason: str
    description: str
    status: str
    created_at: datetime


def public_user_view(row: dict[str, Any], viewer_id: str | None = None) -> UserPublic:
    """Render a user row for ``viewer_id``, honouring the privacy flags."""
    view = UserPublic.model_validate(row)
    if row.get("id") != viewer_id:
        if row.get("hide_email"):
            view.email = None
        if row.get("hide_phone"):
            view.phone = None
    return view


def self_user_view(row: dict[str, Any]) -> UserSelf:
    """Render the current user's own row."""
    return UserSelf.model_validate(row)


def conversation_view(row: dict[str, Any], viewer_id: str) -> ConversationOut:
    """Render a conversation row with ``other_participant`` set for the viewer."""
    view = ConversationOut.model_validate(row)
    if view.participant1 and view.participant1.id != viewer_id:
        view.other_participant = view.participant1
    else:
        view.other_participant = view.participant2
    return view
