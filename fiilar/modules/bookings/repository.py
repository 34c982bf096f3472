"""Repository protocols for bookings and drafts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol, Sequence

from .models import Booking, BookingDraft, BookingStatus, PaymentStatus


class BookingRepository(Protocol):
    async def create(
        self,
        *,
        listing_id: str,
        user_id: str,
        status: BookingStatus,
        total_price: Decimal,
        service_fee: Decimal,
        caution_fee: Decimal,
    ) -> Booking:
        ...

    async def get(self, booking_id: str) -> Booking | None:
        ...

    async def list_for_user(self, user_id: str) -> Sequence[Booking]:
        ...

    async def update_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        ...

    async def set_payment_status(self, booking_id: str, payment_status: PaymentStatus) -> Booking | None:
        ...

    async def count_by_payment_status(self, payment_status: PaymentStatus) -> int:
        ...

    async def find_completed(self, user_id: str, listing_id: str) -> Booking | None:
        ...


class DraftRepository(Protocol):
    async def upsert(
        self,
        *,
        user_id: str,
        listing_id: str,
        details: dict[str, Any],
        listing_title: str | None,
        saved_at: datetime,
    ) -> BookingDraft:
        ...

    async def get(self, user_id: str, listing_id: str) -> BookingDraft | None:
        ...

    async def list_for_user(self, user_id: str) -> Sequence[BookingDraft]:
        ...

    async def delete(self, user_id: str, listing_id: str) -> bool:
        ...

    async def delete_for_user(self, user_id: str) -> int:
        ...
