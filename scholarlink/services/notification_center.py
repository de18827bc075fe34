"""
Notification Center

Append-only inbox keyed by recipient email. Records are never deleted;
only the read flag changes.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scholarlink.database import session_scope
from scholarlink.models.enums import NotificationType
from scholarlink.models.notification import Notification
from scholarlink.services.exceptions import NotFound

logger = logging.getLogger(__name__)


def _recipient(email: str) -> str:
    return (email or "").strip().lower()


class NotificationCenter:
    """Records lifecycle events per recipient and tracks read state"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def notify(
        self,
        type: NotificationType,
        recipient_email: str,
        title: str,
        message: str,
        related_session_id: Optional[UUID] = None,
        db: Optional[AsyncSession] = None,
    ) -> Notification:
        """Append a notification; never rejects input"""
        notification = Notification(
            type=NotificationType(type),
            recipient_email=_recipient(recipient_email),
            title=title,
            message=message,
            related_session_id=related_session_id,
            is_read=False,
        )
        async with session_scope(self.session_factory, db) as session:
            session.add(notification)
            await session.flush()

        logger.info(f"Notification added: {title} for {notification.recipient_email}")
        return notification

    async def list_for(
        self,
        recipient_email: str,
        newest_first: bool = True,
        unread_only: bool = False,
        db: Optional[AsyncSession] = None,
    ) -> List[Notification]:
        query = select(Notification).where(Notification.recipient_email == _recipient(recipient_email))
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        if newest_first:
            query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        else:
            query = query.order_by(Notification.created_at.asc(), Notification.id.asc())

        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def unread_for(
        self, recipient_email: str, newest_first: bool = True, db: Optional[AsyncSession] = None
    ) -> List[Notification]:
        return await self.list_for(recipient_email, newest_first=newest_first, unread_only=True, db=db)

    async def unread_count(self, recipient_email: str, db: Optional[AsyncSession] = None) -> int:
        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                select(func.count(Notification.id)).where(
                    Notification.recipient_email == _recipient(recipient_email),
                    Notification.is_read.is_(False),
                )
            )
            return result.scalar_one()

    async def get(self, notification_id: UUID, db: Optional[AsyncSession] = None) -> Notification:
        async with session_scope(self.session_factory, db) as session:
            notification = await session.get(Notification, notification_id)
        if notification is None:
            raise NotFound(f"Notification {notification_id} not found")
        return notification

    async def mark_read(self, notification_id: UUID, db: Optional[AsyncSession] = None) -> Notification:
        """Idempotent: marking an already-read notification is a no-op"""
        async with session_scope(self.session_factory, db) as session:
            notification = await session.get(Notification, notification_id)
            if notification is None:
                raise NotFound(f"Notification {notification_id} not found")
            if not notification.is_read:
                notification.is_read = True
                await session.flush()
        return notification

    async def mark_all_read_for(self, recipient_email: str, db: Optional[AsyncSession] = None) -> int:
        """
        Mark every unread notification of a recipient as read.

        Returns:
            Number of notifications that changed (0 on a repeated call)
        """
        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                update(Notification)
                .where(
                    Notification.recipient_email == _recipient(recipient_email),
                    Notification.is_read.is_(False),
                )
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            changed = result.rowcount or 0

        if changed:
            logger.info(f"Marked {changed} notifications read for {_recipient(recipient_email)}")
        return changed

    async def has_notification(
        self,
        recipient_email: str,
        related_session_id: UUID,
        type: NotificationType,
        db: Optional[AsyncSession] = None,
    ) -> bool:
        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                select(Notification.id)
                .where(
                    Notification.recipient_email == _recipient(recipient_email),
                    Notification.related_session_id == related_session_id,
                    Notification.type == NotificationType(type),
                )
                .limit(1)
            )
            return result.first() is not None
