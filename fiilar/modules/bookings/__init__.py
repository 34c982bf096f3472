"""Booking domain exports."""

from .drafts import DraftService
from .exceptions import (
    BookingError,
    BookingNotFoundError,
    InvalidBookingAmountError,
    InvalidStatusTransitionError,
)
from .models import (
    ALLOWED_TRANSITIONS,
    GUEST_STATUSES,
    Booking,
    BookingDraft,
    BookingStatus,
    PaymentStatus,
)
from .repository import BookingRepository, DraftRepository
from .service import BookingService

__all__ = [
    "ALLOWED_TRANSITIONS",
    "GUEST_STATUSES",
    "Booking",
    "BookingDraft",
    "BookingError",
    "BookingNotFoundError",
    "BookingRepository",
    "BookingService",
    "BookingStatus",
    "DraftRepository",
    "DraftService",
    "InvalidBookingAmountError",
    "InvalidStatusTransitionError",
    "PaymentStatus",
]
