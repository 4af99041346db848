"""Integration tests for repository layer."""

import pytest

from olofalumni.core.security import code_expiry, hash_password
from olofalumni.db.repos import (
    CommentRepo,
    ConversationRepo,
    FeedbackRepo,
    PostRepo,
    UserRepo,
    other_participant_id,
)
from olofalumni.db.repos.base import split_user_summary
from olofalumni.db.schema import gallery, messages, posts
from olofalumni.db.session import db_session
from olofalumni.db.types import PaginationParams


async def create_user(repo: UserRepo, name: str, email: str) -> dict:
    return await repo.create_user(
        name=name,
        email=email,
        password_hash=hash_password("secret123"),
        gender="male",
        year_of_completion=2012,
        stream_clan="Science",
        verification_code="123456",
        verification_expires_at=code_expiry(),
    )


@pytest.mark.asyncio
async def test_create_and_get_user(db):
    """Test creating and retrieving a user."""
    async with db_session() as session:
        repo = UserRepo(session)
        user = await create_user(repo, "Ada Obi", "Ada@Example.com")
        await session.commit()

        assert user["email"] == "ada@example.com"
        assert user["is_verified"] is False
        assert user["hide_email"] is False
        assert await repo.get_by_email("ADA@example.com") == user
        assert await repo.get_by_id(user["id"]) == user


@pytest.mark.asyncio
async def test_update_user_rejects_unknown_fields(db):
    async with db_session() as session:
        repo = UserRepo(session)
        user = await create_user(repo, "Ada Obi", "ada@example.com")

        with pytest.raises(ValueError):
            await repo.update_user(user["id"], {"is_verified": True})

        updated = await repo.update_user(user["id"], {"bio": "Engineer in Lagos"})
        assert updated["bio"] == "Engineer in Lagos"
        assert await repo.update_user("missing", {"bio": "x"}) is None


@pytest.mark.asyncio
async def test_verification_code_is_single_use(db):
    async with db_session() as session:
        repo = UserRepo(session)
        await create_user(repo, "Ada Obi", "ada@example.com")

        assert not await repo.verify_user("ada@example.com", "654321")
        assert await repo.verify_user("ada@example.com", "123456")
        assert not await repo.verify_user("ada@example.com", "123456")

        user = await repo.get_by_email("ada@example.com")
        assert user["is_verified"] is True
        assert user["verification_code"] is None


@pytest.mark.asyncio
async def test_list_verified_excludes_unverified(db):
    async with db_session() as session:
        repo = UserRepo(session)
        await create_user(repo, "Ada Obi", "ada@example.com")
        await create_user(repo, "Bola Ade", "bola@example.com")
        await repo.verify_user("bola@example.com", "123456")

        assert [u["name"] for u in await repo.list_verified()] == ["Bola Ade"]
        assert await repo.email_taken_by_other("bola@example.com", "someone-else")


@pytest.mark.asyncio
async def test_conversation_pair_is_unordered(db):
    async with db_session() as session:
        users = UserRepo(session)
        ada = await create_user(users, "Ada Obi", "ada@example.com")
        bola = await create_user(users, "Bola Ade", "bola@example.com")
        repo = ConversationRepo(session)

        conversation, created = await repo.get_or_create(ada["id"], bola["id"])
        again, created_again = await repo.get_or_create(bola["id"], ada["id"])

        assert created is True
        assert created_again is False
        assert again["id"] == conversation["id"]
        assert other_participant_id(conversation, ada["id"]) == bola["id"]
        assert other_participant_id(conversation, bola["id"]) == ada["id"]

        detail = await repo.get_detail(conversation["id"])
        assert detail["participant1"]["name"] == "Ada Obi"
        assert detail["last_message"] is None

        message = await repo.add_message(conversation["id"], bola["id"], content="Hi")
        assert message["sender"]["name"] == "Bola Ade"
        assert (await repo.get_detail(conversation["id"]))["last_message"]["id"] == message["id"]
        assert await repo.get_for_participant(conversation["id"], "stranger") is None


@pytest.mark.asyncio
async def test_delete_post_removes_comments_and_reactions(db):
    async with db_session() as session:
        ada = await create_user(UserRepo(session), "Ada Obi", "ada@example.com")
        posts = PostRepo(session)
        post = await posts.create_post(ada["id"], "Hello")
        await CommentRepo(session).create_comment(post["id"], ada["id"], "First")
        assert await posts.toggle_reaction(post["id"], ada["id"], "like") is True

        assert not await posts.delete_post(post["id"], "someone-else")
        assert await posts.delete_post(post["id"], ada["id"])
        assert await posts.get_by_id(post["id"]) is None
        assert await CommentRepo(session).list_for_posts([post["id"]]) == {}
        assert await posts.reaction_counts_for([post["id"]]) == {}


@pytest.mark.asyncio
async def test_feedback_likes_counted(db):
    async with db_session() as session:
        ada = await create_user(UserRepo(session), "Ada Obi", "ada@example.com")
        repo = FeedbackRepo(session)
        entry = await repo.create_feedback(ada["id"], "compliment", "Great site", "Lovely to reconnect with everyone")

        assert await repo.toggle_like(entry["id"], ada["id"]) == (True, 1)
        listed = await repo.list_feedback(PaginationParams(limit=10))
        assert listed[0]["likes"] == 1
        assert listed[0]["user"]["name"] == "Ada Obi"
        assert await repo.toggle_like(entry["id"], ada["id"]) == (False, 0)

        assert await repo.update(entry["id"], {"subject": "edited"}) is False
        assert (await repo.get_by_id(entry["id"]))["subject"] == "Great site"


def test_split_user_summary() -> None:
    row = {"id": "p1", "content": "x", "user__id": "u1", "user__name": "Ada"}
    assert split_user_summary(row) == {"id": "p1", "content": "x", "user": {"id": "u1", "name": "Ada"}}

    orphan = {"id": "p2", "user__id": None, "user__name": None}
    assert split_user_summary(orphan) == {"id": "p2", "user": None}


def test_pagination_params_validation() -> None:
    with pytest.raises(ValueError):
        PaginationParams(limit=0)
    with pytest.raises(ValueError):
        PaginationParams(limit=10, offset=-1)
    with pytest.raises(ValueError):
        PaginationParams(limit=101)


def test_owner_columns_reference_users() -> None:
    for column in (posts.c.user_id, gallery.c.user_id, messages.c.sender_id):
        assert [fk.target_fullname for fk in column.foreign_keys] == ["users.id"]
        assert column.type.length == 36
