"""Per-user notification log."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.events import NOTIFICATIONS_UPDATED, EventBus, event_bus

from .models import Notification, NotificationCreateInput
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NotificationService:
    repository: NotificationRepository
    events: EventBus = event_bus

    @classmethod
    def with_session(cls, session: AsyncSession, events: Optional[EventBus] = None) -> "NotificationService":
        from fiilar.infrastructure.database.repositories.notification_repository import SqlNotificationRepository

        return cls(SqlNotificationRepository(session), events=events or event_bus)

    async def add_notification(self, payload: NotificationCreateInput) -> Notification:
        notification = await self.repository.add(payload)
        logger.debug("Notification %s queued for %s", notification.id, notification.user_id)
        await self.events.publish(
            NOTIFICATIONS_UPDATED,
            {"user_id": notification.user_id, "notification": asdict(notification)},
        )
        return notification

    async def get_notification(self, notification_id: str) -> Notification | None:
        return await self.repository.get(notification_id)

    async def get_notifications(self, user_id: str) -> list[Notification]:
        return list(await self.repository.list_for_user(user_id))

    async def get_unread_count(self, user_id: str) -> int:
        return await self.repository.count_unread(user_id)

    async def mark_as_read(self, notification_id: str) -> Notification | None:
        notification = await self.repository.mark_read(notification_id)
        if notification is not None:
            await self.events.publish(NOTIFICATIONS_UPDATED, {"user_id": notification.user_id})
        return notification

    async def mark_all_as_read(self, user_id: str) -> int:
        updated = await self.repository.mark_all_read(user_id)
        if updated:
            await self.events.publish(NOTIFICATIONS_UPDATED, {"user_id": user_id})
        return updated

    async def clear_all(self, user_id: str) -> int:
        removed = await self.repository.delete_for_user(user_id)
        logger.info("Cleared %d notifications for %s", removed, user_id)
        await self.events.publish(NOTIFICATIONS_UPDATED, {"user_id": user_id})
        return removed
