#!/usr/bin/env python3
"""Seed a local database with a few verified alumni and some community activity.

Usage:
    python scripts/demo_run.py

Requires:
    - DATABASE_URL_ASYNC pointing at a reachable database (SQLite works)
"""

import asyncio
import logging
import sys

from olofalumni.contracts.enums import NotificationType
from olofalumni.core.security import code_expiry, create_access_token, generate_verification_code, hash_password
from olofalumni.db.repos import CommentRepo, ConversationRepo, PostRepo, UserRepo
from olofalumni.db.schema import init_db
from olofalumni.db.session import db_session
from olofalumni.services.notifications import notify_all
from olofalumni.settings import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "alumni123"

DEMO_ALUMNI = [
    ("Ada Obi", "female", 2012, "Science"),
    ("Bola Ade", "male", 2012, "Arts"),
    ("Chidi Eze", "male", 2015, "Commercial"),
]


async def seed_alumni() -> list[dict]:
    """Create verified demo alumni, skipping any that already exist."""
    members = []
    async with db_session() as session:
        repo = UserRepo(session)
        for name, gender, year, clan in DEMO_ALUMNI:
            email = f"{name.split()[0].lower()}@demo.olof.example"
            user = await repo.get_by_email(email)
            if user is None:
                code = generate_verification_code()
                await repo.create_user(
                    name=name,
                    email=email,
                    password_hash=hash_password(DEMO_PASSWORD),
                    gender=gender,
                    year_of_completion=year,
                    stream_clan=clan,
                    verification_code=code,
                    verification_expires_at=code_expiry(),
                )
                await repo.verify_user(email, code)
                user = await repo.get_by_email(email)
                logger.info(f"Seeded {name} <{email}>")
            members.append(user)
        await session.commit()
    return members


async def seed_activity(members: list[dict]) -> None:
    """A post with a comment and reaction, plus one conversation."""
    ada, bola = members[0], members[1]
    async with db_session(commit=True) as session:
        posts = PostRepo(session)
        post = await posts.create_post(ada["id"], "Reunion planning starts this weekend. Who is in?")
        await CommentRepo(session).create_comment(post["id"], bola["id"], "Count me in!")
        await posts.toggle_reaction(post["id"], bola["id"], "love")

        conversations = ConversationRepo(session)
        conversation, _ = await conversations.get_or_create(ada["id"], bola["id"])
        await conversations.add_message(conversation["id"], ada["id"], content="Long time! How have you been?")

    await notify_all(
        NotificationType.NEW_POST,
        "New Post Shared",
        f"{ada['name']} shared a new post",
        related_user_id=ada["id"],
    )


async def main() -> int:
    settings = get_settings()
    logger.info(f"Seeding {settings.database_url_async}")

    await init_db()
    members = await seed_alumni()
    await seed_activity(members)

    print("\n" + "=" * 60)
    print("DEMO ALUMNI")
    print("=" * 60)
    for member in members:
        token = create_access_token(member["id"], member["email"])
        print(f"{member['name']:<12} {member['email']:<28} {token[:24]}...")
    print(f"Password:    {DEMO_PASSWORD}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
