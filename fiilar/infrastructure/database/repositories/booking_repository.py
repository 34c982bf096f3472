"""SQLAlchemy repository for bookings."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.timeutils import as_utc
from fiilar.db.models import Booking as BookingModel
from fiilar.modules.bookings.models import Booking, BookingStatus, PaymentStatus

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT)


class SqlBookingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

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
        model = BookingModel(
            listing_id=listing_id,
            user_id=user_id,
            status=status.value,
            total_price=total_price,
            service_fee=service_fee,
            caution_fee=caution_fee,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def get(self, booking_id: str) -> Booking | None:
        model = await self._session.get(BookingModel, booking_id)
        return self._to_domain(model) if model else None

    async def list_for_user(self, user_id: str) -> list[Booking]:
        stmt = (
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def update_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        model = await self._session.get(BookingModel, booking_id)
        if model is None:
            return None
        model.status = status.value
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def set_payment_status(self, booking_id: str, payment_status: PaymentStatus) -> Booking | None:
        model = await self._session.get(BookingModel, booking_id)
        if model is None:
            return None
        model.payment_status = payment_status.value
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def count_by_payment_status(self, payment_status: PaymentStatus) -> int:
        stmt = select(func.count(BookingModel.id)).where(BookingModel.payment_status == payment_status.value)
        return int((await self._session.execute(stmt)).scalar_one())

    async def find_completed(self, user_id: str, listing_id: str) -> Booking | None:
        stmt = select(BookingModel).where(
            BookingModel.user_id == user_id,
            BookingModel.listing_id == listing_id,
            BookingModel.status == BookingStatus.COMPLETED.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    @staticmethod
    def _to_domain(model: BookingModel) -> Booking:
        return Booking(
            id=model.id,
            listing_id=model.listing_id,
            user_id=model.user_id,
            status=BookingStatus(model.status),
            total_price=_money(model.total_price),
            service_fee=_money(model.service_fee),
            caution_fee=_money(model.caution_fee),
            payment_status=PaymentStatus(model.payment_status) if model.payment_status else None,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
