"""Initial alumni community schema.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(36)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    # A) users
    op.create_table(
        "users",
        sa.Column("id", ID, primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("gender", sa.String(50), nullable=False),
        sa.Column("year_of_completion", sa.Integer(), nullable=False),
        sa.Column("stream_clan", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("profile_picture", sa.Text(), nullable=True),
        sa.Column("cover_photo", sa.Text(), nullable=True),
        sa.Column("hide_email", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("hide_phone", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_code", sa.String(6), nullable=True),
        sa.Column("verification_expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("reset_code", sa.String(6), nullable=True),
        sa.Column("reset_expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_year_of_completion", "users", ["year_of_completion"])

    # B) posts, reactions, comments
    op.create_table(
        "posts",
        sa.Column("id", ID, primary_key=True),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=True),
        sa.Column("file_type", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    op.create_table(
        "post_reactions",
        sa.Column("post_id", ID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reaction", sa.String(20), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("post_id", "user_id", name="pk_post_reactions"),
    )

    op.create_table(
        "comments",
        sa.Column("id", ID, primary_key=True),
        sa.Column("post_id", ID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])

    # C) gallery
    op.create_table(
        "gallery",
        sa.Column("id", ID, primary_key=True),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        _created_at(),
    )

    # D) notifications
    op.create_table(
        "notifications",
        sa.Column("id", ID, primary_key=True),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("related_user_id", ID, nullable=True),
        _created_at(),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    # E) conversations and messages
    op.create_table(
        "conversations",
        sa.Column("id", ID, primary_key=True),
        sa.Column("participant1_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("participant2_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("last_message_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        _created_at(),
    )
    op.create_index("ix_conversations_participants", "conversations", ["participant1_id", "participant2_id"])

    op.create_table(
        "messages",
        sa.Column("id", ID, primary_key=True),
        sa.Column("conversation_id", ID, sa.ForeignKey("conversations.id"), nullable=False),
        sa.Column("sender_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("file_url", sa.Text(), nullable=True),
        sa.Column("file_type", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])

    # F) feedback and reports
    op.create_table(
        "feedback",
        sa.Column("id", ID, primary_key=True),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("subject", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        _created_at(),
        sa.CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_feedback_rating"),
    )

    op.create_table(
        "feedback_likes",
        sa.Column("feedback_id", ID, sa.ForeignKey("feedback.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("feedback_id", "user_id", name="pk_feedback_likes"),
    )

    op.create_table(
        "reports",
        sa.Column("id", ID, primary_key=True),
        sa.Column("reporter_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reported_user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reason", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="open"),
        _created_at(),
    )
    op.create_index("ix_reports_reporter_id", "reports", ["reporter_id"])


def downgrade() -> None:
    op.drop_table("reports")
    op.drop_table("feedback_likes")
    op.drop_table("feedback")
    op.drop_table("messages")
    op.drop_table("conversations")
    op.drop_table("notifications")
    op.drop_table("gallery")
    op.drop_table("comments")
    op.drop_table("post_reactions")
    op.drop_table("posts")
    op.drop_table("users")
