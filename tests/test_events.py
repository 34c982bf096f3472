from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fiilar.core.events import EventBus, EventOutbox
from fiilar.infrastructure.database.base import Base
from fiilar.interfaces.http.deps import database as request_db
from fiilar.modules.wallets import PaymentService


async def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []

    async def async_handler(event, payload):
        calls.append(("async", payload["n"]))

    bus.subscribe("thing", lambda event, payload: calls.append(("sync", payload["n"])))
    bus.subscribe("thing", async_handler)

    await bus.publish("thing", {"n": 1})

    assert calls == [("sync", 1), ("async", 1)]


async def test_failing_handler_does_not_stop_delivery(caplog):
    bus = EventBus()
    seen = []

    def broken(event, payload):
        raise RuntimeError("boom")

    bus.subscribe("thing", broken)
    bus.subscribe("thing", lambda event, payload: seen.append(payload))

    await bus.publish("thing", {"ok": True})

    assert seen == [{"ok": True}]
    assert "Event handler for thing failed" in caplog.text


async def test_unsubscribe_and_no_replay():
    bus = EventBus()
    seen = []

    await bus.publish("thing", {"early": True})
    unsubscribe = bus.subscribe("thing", lambda event, payload: seen.append(payload))
    assert bus.subscriber_count("thing") == 1

    unsubscribe()
    await bus.publish("thing", {"late": True})

    assert seen == []
    assert bus.subscriber_count("thing") == 0


async def test_outbox_holds_events_until_flushed():
    bus = EventBus()
    seen = []
    bus.subscribe("thing", lambda event, payload: seen.append(payload["n"]))
    outbox = EventOutbox(bus)

    await outbox.publish("thing", {"n": 1})
    await outbox.publish("thing", {"n": 2})
    assert seen == []

    await outbox.flush()
    await outbox.flush()
    assert seen == [1, 2]


async def test_discarded_outbox_delivers_nothing():
    bus = EventBus()
    seen = []
    bus.subscribe("thing", lambda event, payload: seen.append(payload))
    outbox = EventOutbox(bus)

    await outbox.publish("thing", {"n": 1})
    outbox.discard()
    await outbox.flush()

    assert seen == []


@pytest.fixture
async def request_sessions(tmp_path, monkeypatch):
    from fiilar.db import models  # noqa: F401

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'outbox.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    bus = EventBus()
    monkeypatch.setattr(request_db, "get_session_factory", lambda: factory)
    monkeypatch.setattr(request_db, "event_bus", bus)
    yield factory, bus
    await engine.dispose()


async def test_request_events_are_delivered_after_commit(request_sessions):
    factory, bus = request_sessions
    seen = []

    async def balance_after_commit(event, payload):
        async with factory() as check:
            seen.append(await PaymentService.with_session(check).get_wallet_balance(payload["account_id"]))

    bus.subscribe("wallet.updated", balance_after_commit)

    sessions = request_db.get_db_session()
    session = await sessions.__anext__()
    service = PaymentService.with_session(session, events=request_db.session_events(session))
    await service.add_funds("a-1", "10.00")
    assert seen == []

    with pytest.raises(StopAsyncIteration):
        await sessions.__anext__()

    assert seen == [Decimal("10.00")]


async def test_failed_request_drops_its_events(request_sessions):
    factory, bus = request_sessions
    seen = []
    bus.subscribe("wallet.updated", lambda event, payload: seen.append(payload))

    sessions = request_db.get_db_session()
    session = await sessions.__anext__()
    await PaymentService.with_session(session, events=request_db.session_events(session)).add_funds("a-1", 10)

    with pytest.raises(RuntimeError):
        await sessions.athrow(RuntimeError("handler failed"))

    assert seen == []
    async with factory() as check:
        assert await PaymentService.with_session(check).get_wallet_balance("a-1") == Decimal("0.00")
