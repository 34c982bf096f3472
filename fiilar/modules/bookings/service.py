"""Booking records used to gate reviews and hold escrow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import BookingNotFoundError, InvalidBookingAmountError, InvalidStatusTransitionError
from .models import ALLOWED_TRANSITIONS, Booking, BookingStatus
from .repository import BookingRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(slots=True)
class BookingService:
    repository: BookingRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "BookingService":
        from fiilar.infrastructure.database.repositories.booking_repository import SqlBookingRepository

        return cls(SqlBookingRepository(session))

    async def create_booking(
        self,
        *,
        listing_id: str,
        user_id: str,
        total_price: Decimal = ZERO,
        service_fee: Decimal = ZERO,
        caution_fee: Decimal = ZERO,
        status: BookingStatus = BookingStatus.PENDING,
    ) -> Booking:
        if min(total_price, service_fee, caution_fee) < 0:
            raise InvalidBookingAmountError("Booking amounts cannot be negative")
        if service_fee + caution_fee > total_price:
            raise InvalidBookingAmountError("Service and caution fees cannot exceed the total price")

        booking = await self.repository.create(
            listing_id=listing_id,
            user_id=user_id,
            status=status,
            total_price=total_price,
            service_fee=service_fee,
            caution_fee=caution_fee,
        )
        logger.info("Booking %s created for listing %s by %s", booking.id, listing_id, user_id)
        return booking

    async def get_booking(self, booking_id: str) -> Booking | None:
        return await self.repository.get(booking_id)

    async def list_bookings(self, user_id: str) -> list[Booking]:
        return list(await self.repository.list_for_user(user_id))

    async def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        current = await self.repository.get(booking_id)
        if current is None:
            raise BookingNotFoundError(booking_id)
        if current.status is status:
            return current
        if status not in ALLOWED_TRANSITIONS[current.status]:
            raise InvalidStatusTransitionError(
                f"Booking {booking_id} is {current.status.value} and cannot become {status.value}"
            )
        updated = await self.repository.update_status(booking_id, status)
        if updated is None:
            raise BookingNotFoundError(booking_id)
        logger.info("Booking %s moved from %s to %s", booking_id, current.status.value, status.value)
        return updated

    async def has_completed_booking(self, user_id: str, listing_id: str) -> bool:
        return await self.repository.find_completed(user_id, listing_id) is not None
