"""SQLAlchemy repository for booking drafts."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.timeutils import as_utc
from fiilar.db.models import BookingDraft as DraftModel
from fiilar.modules.bookings.models import BookingDraft

logger = logging.getLogger(__name__)


class SqlDraftRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get_model(self, user_id: str, listing_id: str) -> DraftModel | None:
        stmt = select(DraftModel).where(DraftModel.user_id == user_id, DraftModel.listing_id == listing_id)
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def upsert(
        self,
        *,
        user_id: str,
        listing_id: str,
        details: dict[str, Any],
        listing_title: str | None,
        saved_at: datetime,
    ) -> BookingDraft:
        model = await self._get_model(user_id, listing_id)
        if model is None:
            model = DraftModel(user_id=user_id, listing_id=listing_id)
            self._session.add(model)
        model.details = json.dumps(details, ensure_ascii=False, default=str)
        model.listing_title = listing_title
        model.saved_at = saved_at
        await self._session.flush()
        return BookingDraft(
            user_id=user_id,
            listing_id=listing_id,
            details=details,
            saved_at=saved_at,
            listing_title=listing_title,
        )

    async def get(self, user_id: str, listing_id: str) -> BookingDraft | None:
        model = await self._get_model(user_id, listing_id)
        if model is None:
            return None
        return await self._to_domain_or_discard(model)

    async def list_for_user(self, user_id: str) -> list[BookingDraft]:
        stmt = select(DraftModel).where(DraftModel.user_id == user_id)
        result = await self._session.execute(stmt)
        drafts = []
        for model in result.scalars().all():
            draft = await self._to_domain_or_discard(model)
            if draft is not None:
                drafts.append(draft)
        return drafts

    async def delete(self, user_id: str, listing_id: str) -> bool:
        stmt = delete(DraftModel).where(DraftModel.user_id == user_id, DraftModel.listing_id == listing_id)
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def delete_for_user(self, user_id: str) -> int:
        stmt = delete(DraftModel).where(DraftModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def _to_domain_or_discard(self, model: DraftModel) -> BookingDraft | None:
        try:
            details = json.loads(model.details)
        except (TypeError, json.JSONDecodeError):
            logger.warning("Discarding unreadable draft for %s on listing %s", model.user_id, model.listing_id)
            await self._session.delete(model)
            await self._session.flush()
            return None
        return BookingDraft(
            user_id=model.user_id,
            listing_id=model.listing_id,
            details=details,
            saved_at=as_utc(model.saved_at),
            listing_title=model.listing_title,
        )
