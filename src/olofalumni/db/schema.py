"""Table definitions shared by the repositories and the initial migration."""

import sqlalchemy as sa

from olofalumni.db.engine import get_async_engine

ID_LENGTH = 36

metadata = sa.MetaData()


def _id_column(name: str = "id", *args, **kwargs) -> sa.Column:
    return sa.Column(name, sa.String(ID_LENGTH), *args, **kwargs)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


users = sa.Table(
    "users",
    metadata,
    _id_column(primary_key=True),
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
    sa.Column("hide_email", sa.Boolean(), nullable=False, default=False),
    sa.Column("hide_phone", sa.Boolean(), nullable=False, default=False),
    sa.Column("is_verified", sa.Boolean(), nullable=False, default=False),
    sa.Column("verification_code", sa.String(6), nullable=True),
    sa.Column("verification_expires_at", sa.DateTime(timezone=True), nullable=True),
    sa.Column("reset_code", sa.String(6), nullable=True),
    sa.Column("reset_expires_at", sa.DateTime(timezone=True), nullable=True),
    _created_at(),
    sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
)

posts = sa.Table(
    "posts",
    metadata,
    _id_column(primary_key=True),
    _id_column("user_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("content", sa.Text(), nullable=False),
    sa.Column("file_url", sa.Text(), nullable=True),
    sa.Column("file_type", sa.String(100), nullable=True),
    _created_at(),
    sa.Index("ix_posts_created_at", "created_at"),
)

post_reactions = sa.Table(
    "post_reactions",
    metadata,
    _id_column("post_id", sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    _id_column("user_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("reaction", sa.String(20), nullable=False),
    _created_at(),
    sa.PrimaryKeyConstraint("post_id", "user_id", name="pk_post_reactions"),
)

comments = sa.Table(
    "comments",
    metadata,
    _id_column(primary_key=True),
    _id_column("post_id", sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    _id_column("user_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("content", sa.Text(), nullable=False),
    _created_at(),
    sa.Index("ix_comments_post_id", "post_id"),
)

gallery = sa.Table(
    "gallery",
    metadata,
    _id_column(primary_key=True),
    _id_column("user_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("filename", sa.String(255), nullable=False),
    sa.Column("original_name", sa.String(255), nullable=False),
    sa.Column("mime_type", sa.String(100), nullable=False),
    sa.Column("size", sa.Integer(), nullable=False),
    sa.Column("caption", sa.Text(), nullable=True),
    _created_at(),
)

notifications = sa.Table(
    "notifications",
    metadata,
    _id_column(primary_key=True),
    _id_column("user_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("type", sa.String(50), nullable=False),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("message", sa.Text(), nullable=False),
    sa.Column("is_read", sa.Boolean(), nullable=False, default=False),
    _id_column("related_user_id", nullable=True),
    _created_at(),
    sa.Index("ix_notifications_user_id", "user_id"),
)

conversations = sa.Table(
    "conversations",
    metadata,
    _id_column(primary_key=True),
    _id_column("participant1_id", sa.ForeignKey("users.id"), nullable=False),
    _id_column("participant2_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=False),
    _created_at(),
)

messages = sa.Table(
    "messages",
    metadata,
    _id_column(primary_key=True),
    _id_column("conversation_id", sa.ForeignKey("conversations.id"), nullable=False),
    _id_column("sender_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("content", sa.Text(), nullable=True),
    sa.Column("file_url", sa.Text(), nullable=True),
    sa.Column("file_type", sa.String(100), nullable=True),
    _created_at(),
    sa.Index("ix_messages_conversation_id", "conversation_id"),
)

feedback = sa.Table(
    "feedback",
    metadata,
    _id_column(primary_key=True),
    _id_column("user_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("type", sa.String(20), nullable=False),
    sa.Column("subject", sa.Text(), nullable=False),
    sa.Column("message", sa.Text(), nullable=False),
    sa.Column("rating", sa.Integer(), nullable=True),
    _created_at(),
    sa.CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_feedback_rating"),
)

feedback_likes = sa.Table(
    "feedback_likes",
    metadata,
    _id_column("feedback_id", sa.ForeignKey("feedback.id", ondelete="CASCADE"), nullable=False),
    _id_column("user_id", sa.ForeignKey("users.id"), nullable=False),
    _created_at(),
    sa.PrimaryKeyConstraint("feedback_id", "user_id", name="pk_feedback_likes"),
)

reports = sa.Table(
    "reports",
    metadata,
    _id_column(primary_key=True),
    _id_column("reporter_id", sa.ForeignKey("users.id"), nullable=False),
    _id_column("reported_user_id", sa.ForeignKey("users.id"), nullable=False),
    sa.Column("reason", sa.String(100), nullable=False),
    sa.Column("description", sa.Text(), nullable=False),
    sa.Column("status", sa.String(20), nullable=False, default="open"),
    _created_at(),
)


async def init_db() -> None:
    """Create all tables that do not exist yet (local runs and tests)."""
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
