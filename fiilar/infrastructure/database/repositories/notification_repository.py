"""SQLAlchemy repository for notifications."""

from __future__ import annotations

import json
import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.timeutils import as_utc
from fiilar.db.models import Notification as NotificationModel
from fiilar.modules.notifications.models import Notification, NotificationCreateInput

logger = logging.getLogger(__name__)


class SqlNotificationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, payload: NotificationCreateInput) -> Notification:
        model = NotificationModel(
            user_id=payload.user_id,
            type=payload.type,
            title=payload.title,
            message=payload.message,
            severity=payload.severity,
            read=False,
            action_required=payload.action_required,
            meta=json.dumps(payload.metadata, ensure_ascii=False, default=str) if payload.metadata else None,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def get(self, notification_id: str) -> Notification | None:
        model = await self._session.get(NotificationModel, notification_id)
        return self._to_domain(model) if model else None

    async def list_for_user(self, user_id: str) -> list[Notification]:
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_unread(self, user_id: str) -> int:
        stmt = select(func.count(NotificationModel.id)).where(
            NotificationModel.user_id == user_id,
            NotificationModel.read.is_(False),
        )
        return int((await self._session.execute(stmt)).scalar_one())

    async def mark_read(self, notification_id: str) -> Notification | None:
        model = await self._session.get(NotificationModel, notification_id)
        if model is None:
            return None
        model.read = True
        await self._session.flush()
        return self._to_domain(model)

    async def mark_all_read(self, user_id: str) -> int:
        stmt = (
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.read.is_(False))
            .values(read=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def delete_for_user(self, user_id: str) -> int:
        stmt = delete(NotificationModel).where(NotificationModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    def _to_domain(model: NotificationModel) -> Notification:
        metadata: dict = {}
        if model.meta:
            try:
                metadata = json.loads(model.meta)
            except json.JSONDecodeError:
                logger.warning("Unreadable metadata on notification %s", model.id)
                metadata = {}
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            message=model.message,
            severity=model.severity,
            read=bool(model.read),
            action_required=bool(model.action_required),
            metadata=metadata,
            created_at=as_utc(model.created_at),
        )
