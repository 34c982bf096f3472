from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fiilar.core.events import EventBus
from fiilar.infrastructure.database.base import Base
from fiilar.modules.bookings import BookingService, DraftService
from fiilar.modules.escrow import EscrowService
from fiilar.modules.messaging import MessagingService
from fiilar.modules.notifications import NotificationService
from fiilar.modules.reviews import ReviewService
from fiilar.modules.wallets import PaymentService

from tests.fakes import (
    FakeBookingRepository,
    FakeDraftRepository,
    FakeEscrowRepository,
    FakeMessagingRepository,
    FakeNotificationRepository,
    FakeReviewRepository,
    FakeWalletRepository,
)


class EventRecorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(events: EventBus) -> EventRecorder:
    recorder = EventRecorder()
    for name in (
        "notifications.updated",
        "message.sent",
        "messages.read",
        "review.created",
        "drafts.updated",
        "wallet.updated",
        "escrow.updated",
    ):
        events.subscribe(name, recorder)
    return recorder


@pytest.fixture
def wallet_repo() -> FakeWalletRepository:
    return FakeWalletRepository()


@pytest.fixture
def payment_service(wallet_repo: FakeWalletRepository, events: EventBus) -> PaymentService:
    return PaymentService(wallet_repo, events=events)


@pytest.fixture
def notification_repo() -> FakeNotificationRepository:
    return FakeNotificationRepository()


@pytest.fixture
def notification_service(notification_repo: FakeNotificationRepository, events: EventBus) -> NotificationService:
    return NotificationService(notification_repo, events=events)


@pytest.fixture
def messaging_repo() -> FakeMessagingRepository:
    return FakeMessagingRepository()


@pytest.fixture
def messaging_service(
    messaging_repo: FakeMessagingRepository,
    notification_service: NotificationService,
    events: EventBus,
) -> MessagingService:
    return MessagingService(messaging_repo, notification_service, events=events)


@pytest.fixture
def booking_repo() -> FakeBookingRepository:
    return FakeBookingRepository()


@pytest.fixture
def booking_service(booking_repo: FakeBookingRepository) -> BookingService:
    return BookingService(booking_repo)


@pytest.fixture
def review_repo() -> FakeReviewRepository:
    return FakeReviewRepository()


@pytest.fixture
def review_service(
    review_repo: FakeReviewRepository, booking_repo: FakeBookingRepository, events: EventBus
) -> ReviewService:
    return ReviewService(review_repo, booking_repo, events=events)


@pytest.fixture
def escrow_repo() -> FakeEscrowRepository:
    return FakeEscrowRepository()


@pytest.fixture
def escrow_service(
    escrow_repo: FakeEscrowRepository,
    booking_repo: FakeBookingRepository,
    payment_service: PaymentService,
    events: EventBus,
) -> EscrowService:
    return EscrowService(escrow_repo, booking_repo, payment_service, events=events)


@pytest.fixture
def draft_repo() -> FakeDraftRepository:
    return FakeDraftRepository()


@pytest.fixture
async def db_session(tmp_path) -> AsyncIterator[AsyncSession]:
    from fiilar.db import models  # noqa: F401

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'repo.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def api_client(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from fiilar.core.config import get_settings
    from fiilar.infrastructure.database import session as db_session_module
    from fiilar.main import create_app

    monkeypatch.setenv("DATABASE__URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("SECURITY__SECRET_KEY", "test-secret-key")
    get_settings.cache_clear()
    db_session_module._engine = None
    db_session_module.AsyncSessionFactory = None

    with TestClient(create_app()) as client:
        yield client

    get_settings.cache_clear()
    db_session_module._engine = None
    db_session_module.AsyncSessionFactory = None
