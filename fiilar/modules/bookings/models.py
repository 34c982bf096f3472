"""Domain models for bookings and booking drafts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    STARTED = "Started"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    RESERVED = "Reserved"


class PaymentStatus(str, Enum):
    PAID_ESCROW = "Paid - Escrow"
    RELEASED = "Released"
    REFUNDED = "Refunded"


# a booking only reaches Completed after it has been confirmed and started
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.RESERVED, BookingStatus.CANCELLED}),
    BookingStatus.RESERVED: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.STARTED, BookingStatus.CANCELLED}),
    BookingStatus.STARTED: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# statuses the guest who made the booking may set without an administrator
GUEST_STATUSES = frozenset({BookingStatus.CANCELLED})


@dataclass(slots=True)
class Booking:
    id: str
    listing_id: str
    user_id: str
    status: BookingStatus
    total_price: Decimal
    created_at: datetime
    updated_at: Optional[datetime] = None
    service_fee: Decimal = Decimal("0.00")
    caution_fee: Decimal = Decimal("0.00")
    payment_status: Optional[PaymentStatus] = None

    @property
    def is_completed(self) -> bool:
        return self.status is BookingStatus.COMPLETED

    @property
    def host_payout(self) -> Decimal:
        """What the host receives once escrow is released."""
        return self.total_price - self.service_fee - self.caution_fee


@dataclass(slots=True)
class BookingDraft:
    user_id: str
    listing_id: str
    details: dict[str, Any]
    saved_at: datetime
    listing_title: Optional[str] = None
