"""Database session dependency."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.events import EventOutbox, event_bus
from fiilar.infrastructure.database import get_session_factory

OUTBOX_KEY = "fiilar.outbox"


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; events raised during the request go out after commit."""
    async with get_session_factory()() as session:
        outbox = EventOutbox(event_bus)
        session.info[OUTBOX_KEY] = outbox
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            outbox.discard()
            raise
        await outbox.flush()


def session_events(session: AsyncSession) -> EventOutbox:
    return session.info[OUTBOX_KEY]


__all__ = ["get_db_session", "session_events"]
