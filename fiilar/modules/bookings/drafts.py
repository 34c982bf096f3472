"""Resumable booking drafts, one per user and listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.config import get_settings
from fiilar.core.events import DRAFTS_UPDATED, EventBus, event_bus
from fiilar.core.timeutils import utcnow

from .models import BookingDraft
from .repository import DraftRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DraftService:
    repository: DraftRepository
    expiry_days: int = 7
    max_per_user: int = 10
    clock: Callable[[], datetime] = utcnow
    events: EventBus = event_bus

    @classmethod
    def with_session(cls, session: AsyncSession, events: Optional[EventBus] = None) -> "DraftService":
        from fiilar.infrastructure.database.repositories.draft_repository import SqlDraftRepository

        settings = get_settings()
        return cls(
            SqlDraftRepository(session),
            expiry_days=settings.drafts.expiry_days,
            max_per_user=settings.drafts.max_per_user,
            events=events or event_bus,
        )

    def is_expired(self, draft: BookingDraft) -> bool:
        return self.clock() > draft.saved_at + timedelta(days=self.expiry_days)

    async def save_draft(
        self,
        user_id: str,
        listing_id: str,
        details: dict[str, Any],
        listing_title: str | None = None,
    ) -> BookingDraft:
        draft = await self.repository.upsert(
            user_id=user_id,
            listing_id=listing_id,
            details=details,
            listing_title=listing_title,
            saved_at=self.clock(),
        )
        await self._cleanup(user_id)
        await self.events.publish(DRAFTS_UPDATED, {"user_id": user_id, "listing_id": listing_id})
        return draft

    async def get_draft(self, user_id: str, listing_id: str) -> BookingDraft | None:
        draft = await self.repository.get(user_id, listing_id)
        if draft is None:
            return None
        if self.is_expired(draft):
            await self.repository.delete(user_id, listing_id)
            logger.info("Expired draft for %s on listing %s removed", user_id, listing_id)
            return None
        return draft

    async def has_draft(self, user_id: str, listing_id: str) -> bool:
        return await self.get_draft(user_id, listing_id) is not None

    async def list_drafts(self, user_id: str) -> list[BookingDraft]:
        live: list[BookingDraft] = []
        for draft in await self.repository.list_for_user(user_id):
            if self.is_expired(draft):
                await self.repository.delete(user_id, draft.listing_id)
                continue
            live.append(draft)
        live.sort(key=lambda item: item.saved_at, reverse=True)
        return live

    async def delete_draft(self, user_id: str, listing_id: str) -> bool:
        removed = await self.repository.delete(user_id, listing_id)
        await self.events.publish(DRAFTS_UPDATED, {"user_id": user_id, "listing_id": listing_id})
        return removed

    async def clear_drafts(self, user_id: str) -> int:
        removed = await self.repository.delete_for_user(user_id)
        await self.events.publish(DRAFTS_UPDATED, {"user_id": user_id})
        return removed

    async def _cleanup(self, user_id: str) -> None:
        drafts = await self.list_drafts(user_id)
        for stale in drafts[self.max_per_user:]:
            await self.repository.delete(user_id, stale.listing_id)
            logger.debug("Draft for listing %s dropped, over per-user limit", stale.listing_id)
