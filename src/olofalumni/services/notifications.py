"""Community notification broadcast."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from olofalumni.contracts.enums import NotificationType
from olofalumni.db.repos import NotificationRepo
from olofalumni.db.session import db_session

logger = logging.getLogger(__name__)


async def notify_all(
    notification_type: NotificationType,
    title: str,
    message: str,
    related_user_id: str | None = None,
) -> int:
    """Give every member except ``related_user_id`` an unread notification.

    Runs in its own session so a failure never affects the action that
    triggered it; errors are logged and reported as zero recipients.
    """
    try:
        async with db_session() as session:
            count = await NotificationRepo(session).broadcast(
                notification_type.value,
                title,
                message,
                related_user_id,
            )
            await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Create notification error ({notification_type.value}): {e}")
        return 0

    logger.info(f"Broadcast {notification_type.value} notification to {count} users")
    return count
