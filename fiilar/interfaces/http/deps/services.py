"""Service providers bound to the request session.

Services publish into the session's outbox so that listeners only hear about
changes after the request commits.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.modules.bookings import BookingService, DraftService
from fiilar.modules.escrow import EscrowService
from fiilar.modules.messaging import MessagingService
from fiilar.modules.notifications import NotificationService
from fiilar.modules.reviews import ReviewService
from fiilar.modules.wallets import PaymentService

from .database import get_db_session, session_events


def get_payment_service(db: AsyncSession = Depends(get_db_session)) -> PaymentService:
    return PaymentService.with_session(db, events=session_events(db))


def get_messaging_service(db: AsyncSession = Depends(get_db_session)) -> MessagingService:
    return MessagingService.with_session(db, events=session_events(db))


def get_notification_service(db: AsyncSession = Depends(get_db_session)) -> NotificationService:
    return NotificationService.with_session(db, events=session_events(db))


def get_review_service(db: AsyncSession = Depends(get_db_session)) -> ReviewService:
    return ReviewService.with_session(db, events=session_events(db))


def get_booking_service(db: AsyncSession = Depends(get_db_session)) -> BookingService:
    return BookingService.with_session(db)


def get_draft_service(db: AsyncSession = Depends(get_db_session)) -> DraftService:
    return DraftService.with_session(db, events=session_events(db))


def get_escrow_service(db: AsyncSession = Depends(get_db_session)) -> EscrowService:
    return EscrowService.with_session(db, events=session_events(db))


__all__ = [
    "get_booking_service",
    "get_draft_service",
    "get_escrow_service",
    "get_messaging_service",
    "get_notification_service",
    "get_payment_service",
    "get_review_service",
]
