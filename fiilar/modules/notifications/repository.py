"""Repository protocol for notifications."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Notification, NotificationCreateInput


class NotificationRepository(Protocol):
    async def add(self, payload: NotificationCreateInput) -> Notification:
        ...

    async def get(self, notification_id: str) -> Notification | None:
        ...

    async def list_for_user(self, user_id: str) -> Sequence[Notification]:
        ...

    async def count_unread(self, user_id: str) -> int:
        ...

    async def mark_read(self, notification_id: str) -> Notification | None:
        ...

    async def mark_all_read(self, user_id: str) -> int:
        ...

    async def delete_for_user(self, user_id: str) -> int:
        ...
