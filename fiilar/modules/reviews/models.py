"""Domain models for listing reviews."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

UNAUTHENTICATED = "unauthenticated"
USER_MISMATCH = "user_mismatch"
BOOKING_NOT_COMPLETED = "booking_not_completed"
ALREADY_REVIEWED = "already_reviewed"
INVALID_RATING = "invalid_rating"

MIN_RATING = 1
MAX_RATING = 5


@dataclass(slots=True)
class Review:
    id: str
    listing_id: str
    user_id: str
    booking_id: Optional[str]
    rating: int
    comment: str
    created_at: datetime


@dataclass(slots=True)
class ReviewCreateInput:
    listing_id: str
    user_id: str
    rating: int
    comment: str = ""
    booking_id: Optional[str] = None


@dataclass(slots=True)
class ReviewResult:
    success: bool
    review: Optional[Review] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "ReviewResult":
        return cls(success=False, error=error)
