"""SQLAlchemy repository for reviews."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.timeutils import as_utc
from fiilar.db.models import Review as ReviewModel
from fiilar.modules.reviews.exceptions import DuplicateReviewError
from fiilar.modules.reviews.models import Review, ReviewCreateInput


class SqlReviewRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, payload: ReviewCreateInput) -> Review:
        model = ReviewModel(
            listing_id=payload.listing_id,
            user_id=payload.user_id,
            booking_id=payload.booking_id,
            rating=payload.rating,
            comment=payload.comment,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(model)
                await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateReviewError(f"{payload.user_id} already reviewed {payload.listing_id}") from exc
        await self._session.refresh(model)
        return self._to_domain(model)

    async def find_by_user_and_listing(self, user_id: str, listing_id: str) -> Review | None:
        stmt = select(ReviewModel).where(ReviewModel.user_id == user_id, ReviewModel.listing_id == listing_id)
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def list_reviews(self, listing_id: str | None = None) -> list[Review]:
        stmt = select(ReviewModel).order_by(ReviewModel.created_at.desc())
        if listing_id is not None:
            stmt = stmt.where(ReviewModel.listing_id == listing_id)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def average_rating(self, listing_id: str) -> float | None:
        stmt = select(func.avg(ReviewModel.rating)).where(ReviewModel.listing_id == listing_id)
        value = (await self._session.execute(stmt)).scalar_one_or_none()
        return float(value) if value is not None else None

    @staticmethod
    def _to_domain(model: ReviewModel) -> Review:
        return Review(
            id=model.id,
            listing_id=model.listing_id,
            user_id=model.user_id,
            booking_id=model.booking_id,
            rating=int(model.rating),
            comment=model.comment or "",
            created_at=as_utc(model.created_at),
        )
