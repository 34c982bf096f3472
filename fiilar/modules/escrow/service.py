"""Escrow bookkeeping for booking payments.

Guest payments are debited through the wallet ledger and then held against
the booking as escrow transaction records. A hold ends either in a release
to the host (the total less service and caution fees) or in refunds to the
guest's wallet. Custody itself is not modelled: escrow is the set of records
in ``escrow_transactions`` and the booking's payment status.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.events import ESCROW_UPDATED, EventBus, event_bus
from fiilar.modules.bookings.exceptions import BookingNotFoundError
from fiilar.modules.bookings.models import Booking, BookingStatus, PaymentStatus
from fiilar.modules.bookings.repository import BookingRepository
from fiilar.modules.wallets.ledger import ZERO, Amount, normalize_amount
from fiilar.modules.wallets.models import PaymentChannel
from fiilar.modules.wallets.service import PaymentService

from .exceptions import EscrowError, EscrowStateError, RefundExceedsHeldFundsError
from .models import DisputeDecision, EscrowTransaction, EscrowTransactionType, PlatformFinancials
from .repository import EscrowRepository

logger = logging.getLogger(__name__)


def _reference() -> str:
    return f"ESC-{uuid.uuid4().hex[:20].upper()}"


@dataclass(slots=True)
class EscrowService:
    repository: EscrowRepository
    bookings: BookingRepository
    payments: PaymentService
    events: EventBus = event_bus

    @classmethod
    def with_session(cls, session: AsyncSession, events: Optional[EventBus] = None) -> "EscrowService":
        from fiilar.infrastructure.database.repositories.booking_repository import SqlBookingRepository
        from fiilar.infrastructure.database.repositories.escrow_repository import SqlEscrowRepository

        bus = events or event_bus
        return cls(
            SqlEscrowRepository(session),
            SqlBookingRepository(session),
            PaymentService.with_session(session, events=bus),
            events=bus,
        )

    async def process_guest_payment(
        self,
        booking_id: str,
        guest_id: str,
        method: PaymentChannel | str = PaymentChannel.WALLET,
        payment_method_id: str | None = None,
    ) -> list[EscrowTransaction]:
        booking = await self._booking(booking_id)
        if booking.user_id != guest_id:
            raise EscrowStateError(f"Booking {booking_id} was not made by {guest_id}")
        if booking.status is BookingStatus.CANCELLED:
            raise EscrowStateError(f"Booking {booking_id} is cancelled")
        if booking.payment_status is not None:
            raise EscrowStateError(f"Booking {booking_id} is already {booking.payment_status.value}")

        debit = await self.payments.process_payment(guest_id, booking.total_price, method, payment_method_id)
        payment = await self.repository.add(
            booking_id=booking_id,
            type=EscrowTransactionType.GUEST_PAYMENT,
            amount=booking.total_price,
            reference=_reference(),
            from_user_id=guest_id,
            metadata={"listing_id": booking.listing_id, "method": debit.method.value},
        )
        fee = await self.repository.add(
            booking_id=booking_id,
            type=EscrowTransactionType.SERVICE_FEE,
            amount=booking.service_fee,
            reference=_reference(),
            from_user_id=guest_id,
            metadata={"listing_id": booking.listing_id},
        )
        await self.bookings.set_payment_status(booking_id, PaymentStatus.PAID_ESCROW)
        logger.info(
            "Booking %s paid into escrow: %s held, service fee %s",
            booking_id,
            booking.total_price,
            booking.service_fee,
        )
        await self._publish(booking, PaymentStatus.PAID_ESCROW)
        return [payment, fee]

    async def held_amount(self, booking_id: str) -> Decimal:
        totals = await self.repository.totals_by_type(booking_id)
        return (
            totals.get(EscrowTransactionType.GUEST_PAYMENT, ZERO)
            - totals.get(EscrowTransactionType.HOST_PAYOUT, ZERO)
            - totals.get(EscrowTransactionType.REFUND, ZERO)
        )

    async def release_funds_to_host(
        self, booking_id: str, host_id: str, notes: str | None = None
    ) -> EscrowTransaction:
        booking = await self._held_booking(booking_id)
        totals = await self.repository.totals_by_type(booking_id)
        # partial refunds already returned to the guest come out of the host's share
        payout = max(booking.host_payout - totals.get(EscrowTransactionType.REFUND, ZERO), ZERO)

        record = await self.repository.add(
            booking_id=booking_id,
            type=EscrowTransactionType.HOST_PAYOUT,
            amount=payout,
            reference=_reference(),
            to_user_id=host_id,
            metadata={
                "listing_id": booking.listing_id,
                "caution_fee_held": str(booking.caution_fee),
                "notes": notes or "Standard release",
            },
        )
        if payout > 0:
            await self.payments.credit_payout(host_id, payout, f"Payout for booking {booking_id}")
        await self.bookings.set_payment_status(booking_id, PaymentStatus.RELEASED)
        logger.info("Released %s to host %s for booking %s", payout, host_id, booking_id)
        await self._publish(booking, PaymentStatus.RELEASED)
        return record

    async def process_refund(
        self, booking_id: str, amount: Amount | None = None, notes: str | None = None
    ) -> EscrowTransaction:
        """Refund the guest from escrow; the whole held amount when no amount is given."""
        booking = await self._held_booking(booking_id)
        held = await self.held_amount(booking_id)
        value = normalize_amount(held if amount is None else amount)
        if value > held:
            logger.warning("Refund of %s for booking %s rejected, only %s held", value, booking_id, held)
            raise RefundExceedsHeldFundsError(
                f"Refund of {value} exceeds the {held} held for booking {booking_id}"
            )

        record = await self.repository.add(
            booking_id=booking_id,
            type=EscrowTransactionType.REFUND,
            amount=value,
            reference=_reference(),
            to_user_id=booking.user_id,
            metadata={
                "listing_id": booking.listing_id,
                "original_amount": str(booking.total_price),
                "notes": notes or "Refund",
            },
        )
        await self.payments.refund_to_wallet(booking.user_id, value, notes or f"Refund for booking {booking_id}")
        status = PaymentStatus.PAID_ESCROW
        if value == held:
            status = PaymentStatus.REFUNDED
            await self.bookings.set_payment_status(booking_id, status)
        logger.info("Refunded %s of %s held for booking %s", value, held, booking_id)
        await self._publish(booking, status)
        return record

    async def resolve_dispute(
        self,
        booking_id: str,
        decision: DisputeDecision | str,
        admin_notes: str,
        host_id: str | None = None,
    ) -> EscrowTransaction:
        decision = DisputeDecision(decision)
        logger.info("Resolving dispute on booking %s: %s", booking_id, decision.value)
        if decision is DisputeDecision.REFUND_GUEST:
            return await self.process_refund(booking_id, None, admin_notes)
        if host_id is None:
            raise EscrowError("A host id is required to release funds to the host")
        return await self.release_funds_to_host(booking_id, host_id, admin_notes)

    async def get_transactions(self, booking_id: str | None = None) -> list[EscrowTransaction]:
        return list(await self.repository.list_transactions(booking_id))

    async def get_platform_financials(self) -> PlatformFinancials:
        totals = await self.repository.totals_by_type()
        payments = totals.get(EscrowTransactionType.GUEST_PAYMENT, ZERO)
        released = totals.get(EscrowTransactionType.HOST_PAYOUT, ZERO)
        refunded = totals.get(EscrowTransactionType.REFUND, ZERO)
        return PlatformFinancials(
            total_escrow=payments - released - refunded,
            total_released=released,
            total_revenue=totals.get(EscrowTransactionType.SERVICE_FEE, ZERO),
            total_refunded=refunded,
            pending_payouts=await self.bookings.count_by_payment_status(PaymentStatus.PAID_ESCROW),
        )

    async def _booking(self, booking_id: str) -> Booking:
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    async def _held_booking(self, booking_id: str) -> Booking:
        booking = await self._booking(booking_id)
        if booking.payment_status is not PaymentStatus.PAID_ESCROW:
            raise EscrowStateError(f"Booking {booking_id} has no funds held in escrow")
        return booking

    async def _publish(self, booking: Booking, status: PaymentStatus) -> None:
        await self.events.publish(
            ESCROW_UPDATED,
            {"booking_id": booking.id, "user_id": booking.user_id, "payment_status": status.value},
        )
