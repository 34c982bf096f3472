"""Review gating and rating aggregation."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.events import REVIEW_CREATED, EventBus, event_bus
from fiilar.modules.accounts import Account
from fiilar.modules.bookings.models import Booking
from fiilar.modules.bookings.repository import BookingRepository

from .exceptions import DuplicateReviewError
from .models import (
    ALREADY_REVIEWED,
    BOOKING_NOT_COMPLETED,
    INVALID_RATING,
    MAX_RATING,
    MIN_RATING,
    UNAUTHENTICATED,
    USER_MISMATCH,
    Review,
    ReviewCreateInput,
    ReviewResult,
)
from .repository import ReviewRepository

logger = logging.getLogger(__name__)


def review_gate(
    payload: ReviewCreateInput,
    account: Account | None,
    *,
    has_completed_booking: bool,
    already_reviewed: bool,
) -> str | None:
    """Return the first failed check, or None when the review may be stored."""
    if account is None:
        return UNAUTHENTICATED
    if payload.user_id != account.id:
        return USER_MISMATCH
    if not has_completed_booking and not account.is_admin():
        return BOOKING_NOT_COMPLETED
    if already_reviewed:
        return ALREADY_REVIEWED
    if not MIN_RATING <= payload.rating <= MAX_RATING:
        return INVALID_RATING
    return None


@dataclass(slots=True)
class ReviewService:
    repository: ReviewRepository
    bookings: BookingRepository
    events: EventBus = event_bus

    @classmethod
    def with_session(cls, session: AsyncSession, events: Optional[EventBus] = None) -> "ReviewService":
        from fiilar.infrastructure.database.repositories.booking_repository import SqlBookingRepository
        from fiilar.infrastructure.database.repositories.review_repository import SqlReviewRepository

        return cls(SqlReviewRepository(session), SqlBookingRepository(session), events=events or event_bus)

    async def add_review(self, payload: ReviewCreateInput, account: Account | None) -> ReviewResult:
        if account is None or payload.user_id != account.id:
            # no need to touch storage for identity failures
            error = review_gate(payload, account, has_completed_booking=False, already_reviewed=False)
        else:
            completed = await self._completed_booking(payload)
            existing = await self.repository.find_by_user_and_listing(payload.user_id, payload.listing_id)
            error = review_gate(
                payload,
                account,
                has_completed_booking=completed is not None,
                already_reviewed=existing is not None,
            )
            # only a verified completed booking is ever linked to the review
            payload = replace(payload, booking_id=completed.id if completed is not None else None)

        if error is None:
            try:
                review = await self.repository.add(payload)
            except DuplicateReviewError:
                error = ALREADY_REVIEWED

        if error is not None:
            logger.info(
                "Review by %s on listing %s rejected: %s", payload.user_id, payload.listing_id, error
            )
            return ReviewResult.failed(error)

        logger.info("Review %s stored for listing %s", review.id, review.listing_id)
        await self.events.publish(REVIEW_CREATED, {"listing_id": review.listing_id, "review": asdict(review)})
        return ReviewResult(success=True, review=review)

    async def _completed_booking(self, payload: ReviewCreateInput) -> Booking | None:
        """The completed booking backing the review, or None.

        A booking id supplied by the caller is honoured only when it belongs
        to the reviewer, is for the reviewed listing and is completed.
        """
        if payload.booking_id is None:
            return await self.bookings.find_completed(payload.user_id, payload.listing_id)
        booking = await self.bookings.get(payload.booking_id)
        if (
            booking is None
            or booking.user_id != payload.user_id
            or booking.listing_id != payload.listing_id
            or not booking.is_completed
        ):
            return None
        return booking

    async def get_reviews(self, listing_id: str | None = None) -> list[Review]:
        return list(await self.repository.list_reviews(listing_id))

    async def get_average_rating(self, listing_id: str) -> float:
        average = await self.repository.average_rating(listing_id)
        return float(average) if average is not None else 0.0
