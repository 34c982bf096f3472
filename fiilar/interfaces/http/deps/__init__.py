"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .account import get_account_repository, get_account_service
from .services import (
    get_booking_service,
    get_draft_service,
    get_escrow_service,
    get_messaging_service,
    get_notification_service,
    get_payment_service,
    get_review_service,
)

__all__ = [
    "get_db_session",
    "get_account_repository",
    "get_account_service",
    "get_booking_service",
    "get_draft_service",
    "get_escrow_service",
    "get_messaging_service",
    "get_notification_service",
    "get_payment_service",
    "get_review_service",
]
