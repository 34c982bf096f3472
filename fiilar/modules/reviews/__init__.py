"""Review domain exports."""

from .exceptions import DuplicateReviewError, ReviewError
from .models import (
    ALREADY_REVIEWED,
    BOOKING_NOT_COMPLETED,
    INVALID_RATING,
    UNAUTHENTICATED,
    USER_MISMATCH,
    Review,
    ReviewCreateInput,
    ReviewResult,
)
from .repository import ReviewRepository
from .service import ReviewService, review_gate

__all__ = [
    "DuplicateReviewError",
    "ReviewError",
    "ALREADY_REVIEWED",
    "BOOKING_NOT_COMPLETED",
    "INVALID_RATING",
    "UNAUTHENTICATED",
    "USER_MISMATCH",
    "Review",
    "ReviewCreateInput",
    "ReviewRepository",
    "ReviewResult",
    "ReviewService",
    "review_gate",
]
