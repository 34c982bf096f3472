"""In-memory repositories satisfying the module Protocols."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from fiilar.core.timeutils import utcnow
from fiilar.modules.accounts import Account
from fiilar.modules.bookings import Booking, BookingDraft, BookingStatus, PaymentStatus
from fiilar.modules.escrow import EscrowTransaction, EscrowTransactionType
from fiilar.modules.messaging import Conversation, Message
from fiilar.modules.notifications import Notification, NotificationCreateInput
from fiilar.modules.reviews import DuplicateReviewError, Review, ReviewCreateInput
from fiilar.modules.wallets import (
    PaymentChannel,
    PaymentMethodRecord,
    TransactionType,
    WalletSnapshot,
    WalletTransactionRecord,
)


def _id() -> str:
    return str(uuid.uuid4())


class FakeWalletRepository:
    def __init__(self) -> None:
        self.wallets: dict[str, WalletSnapshot] = {}
        self.transactions: list[WalletTransactionRecord] = []
        self.payment_methods: list[PaymentMethodRecord] = []

    async def get_wallet(self, account_id: str, *, for_update: bool = False) -> WalletSnapshot | None:
        wallet = self.wallets.get(account_id)
        return replace(wallet) if wallet else None

    async def create_wallet(self, account_id: str, currency: str) -> WalletSnapshot:
        wallet = WalletSnapshot(account_id=account_id, balance=Decimal("0.00"), currency=currency, updated_at=None)
        self.wallets[account_id] = wallet
        return replace(wallet)

    async def update_balance(self, account_id: str, delta: Decimal) -> WalletSnapshot:
        wallet = self.wallets[account_id]
        wallet.balance = wallet.balance + delta
        wallet.updated_at = utcnow()
        return replace(wallet)

    async def add_transaction(self, **fields: Any) -> WalletTransactionRecord:
        seq = sum(1 for tx in self.transactions if tx.account_id == fields["account_id"]) + 1
        record = WalletTransactionRecord(
            id=_id(),
            seq=seq,
            status="COMPLETED",
            created_at=utcnow(),
            **fields,
        )
        self.transactions.append(record)
        return record

    async def list_transactions(
        self, account_id: str, limit: int | None, offset: int
    ) -> list[WalletTransactionRecord]:
        rows = sorted(
            (tx for tx in self.transactions if tx.account_id == account_id),
            key=lambda tx: tx.seq,
            reverse=True,
        )[offset:]
        return rows if limit is None else rows[:limit]

    async def count_transactions(self, account_id: str) -> int:
        return sum(1 for tx in self.transactions if tx.account_id == account_id)

    async def sum_amounts(
        self,
        account_id: str,
        type: TransactionType,
        methods: Iterable[PaymentChannel] | None = None,
    ) -> Decimal:
        allowed = set(methods) if methods is not None else None
        return sum(
            (
                tx.amount
                for tx in self.transactions
                if tx.account_id == account_id
                and tx.type is type
                and (allowed is None or tx.method in allowed)
            ),
            Decimal("0.00"),
        )

    async def list_payment_methods(self, account_id: str) -> list[PaymentMethodRecord]:
        return [method for method in self.payment_methods if method.account_id == account_id]

    async def add_payment_method(self, *, account_id: str, **fields: Any) -> PaymentMethodRecord:
        record = PaymentMethodRecord(id=_id(), account_id=account_id, type="CARD", created_at=utcnow(), **fields)
        self.payment_methods.append(record)
        return record

    async def delete_payment_method(self, account_id: str, payment_method_id: str) -> bool:
        before = len(self.payment_methods)
        self.payment_methods = [
            method
            for method in self.payment_methods
            if not (method.id == payment_method_id and method.account_id == account_id)
        ]
        return len(self.payment_methods) < before


class FakeNotificationRepository:
    def __init__(self) -> None:
        self.items: list[Notification] = []

    async def add(self, payload: NotificationCreateInput) -> Notification:
        notification = Notification(
            id=_id(),
            user_id=payload.user_id,
            type=payload.type,
            title=payload.title,
            message=payload.message,
            severity=payload.severity,
            read=False,
            action_required=payload.action_required,
            metadata=dict(payload.metadata),
            created_at=utcnow(),
        )
        self.items.append(notification)
        return notification

    async def get(self, notification_id: str) -> Notification | None:
        return next((item for item in self.items if item.id == notification_id), None)

    async def list_for_user(self, user_id: str) -> list[Notification]:
        return [item for item in reversed(self.items) if item.user_id == user_id]

    async def count_unread(self, user_id: str) -> int:
        return sum(1 for item in self.items if item.user_id == user_id and not item.read)

    async def mark_read(self, notification_id: str) -> Notification | None:
        item = await self.get(notification_id)
        if item is not None:
            item.read = True
        return item

    async def mark_all_read(self, user_id: str) -> int:
        updated = 0
        for item in self.items:
            if item.user_id == user_id and not item.read:
                item.read = True
                updated += 1
        return updated

    async def delete_for_user(self, user_id: str) -> int:
        before = len(self.items)
        self.items = [item for item in self.items if item.user_id != user_id]
        return before - len(self.items)


class FakeMessagingRepository:
    def __init__(self) -> None:
        self.conversations: dict[str, Conversation] = {}
        self.messages: list[Message] = []

    async def find_conversation(self, user_id: str, other_id: str, listing_id: str | None) -> Conversation | None:
        for conversation in self.conversations.values():
            if set(conversation.participants) == {user_id, other_id} and conversation.listing_id == listing_id:
                return replace(conversation)
        return None

    async def create_conversation(self, participants: tuple[str, str], listing_id: str | None) -> Conversation:
        now = utcnow()
        conversation = Conversation(
            id=_id(),
            participants=participants,
            listing_id=listing_id,
            last_message_id=None,
            last_message_preview=None,
            created_at=now,
            updated_at=now,
        )
        self.conversations[conversation.id] = conversation
        return replace(conversation)

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        conversation = self.conversations.get(conversation_id)
        return replace(conversation) if conversation else None

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        return [replace(conv) for conv in self.conversations.values() if user_id in conv.participants]

    async def add_message(self, *, conversation_id: str, sender_id: str, content: str) -> Message:
        message = Message(
            id=_id(),
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            read=False,
            created_at=utcnow(),
        )
        self.messages.append(message)
        return message

    async def touch_conversation(
        self, conversation_id: str, *, message_id: str, preview: str, timestamp: datetime
    ) -> None:
        conversation = self.conversations[conversation_id]
        conversation.last_message_id = message_id
        conversation.last_message_preview = preview
        conversation.updated_at = timestamp

    async def list_messages(self, conversation_id: str) -> list[Message]:
        return [message for message in self.messages if message.conversation_id == conversation_id]

    async def count_unread(self, conversation_id: str, user_id: str) -> int:
        return sum(
            1
            for message in self.messages
            if message.conversation_id == conversation_id and message.sender_id != user_id and not message.read
        )

    async def mark_read(self, conversation_id: str, user_id: str) -> int:
        updated = 0
        for message in self.messages:
            if message.conversation_id == conversation_id and message.sender_id != user_id and not message.read:
                message.read = True
                updated += 1
        return updated


class FakeBookingRepository:
    def __init__(self) -> None:
        self.bookings: dict[str, Booking] = {}

    async def create(
        self,
        *,
        listing_id: str,
        user_id: str,
        status: BookingStatus,
        total_price: Decimal,
        service_fee: Decimal = Decimal("0.00"),
        caution_fee: Decimal = Decimal("0.00"),
    ) -> Booking:
        booking = Booking(
            id=_id(),
            listing_id=listing_id,
            user_id=user_id,
            status=status,
            total_price=total_price,
            service_fee=service_fee,
            caution_fee=caution_fee,
            created_at=utcnow(),
        )
        self.bookings[booking.id] = booking
        return replace(booking)

    async def get(self, booking_id: str) -> Booking | None:
        booking = self.bookings.get(booking_id)
        return replace(booking) if booking else None

    async def list_for_user(self, user_id: str) -> list[Booking]:
        return [replace(booking) for booking in self.bookings.values() if booking.user_id == user_id]

    async def update_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        booking = self.bookings.get(booking_id)
        if booking is None:
            return None
        booking.status = status
        booking.updated_at = utcnow()
        return replace(booking)

    async def find_completed(self, user_id: str, listing_id: str) -> Booking | None:
        for booking in self.bookings.values():
            if booking.user_id == user_id and booking.listing_id == listing_id and booking.is_completed:
                return replace(booking)
        return None

    async def set_payment_status(self, booking_id: str, payment_status: PaymentStatus) -> Booking | None:
        booking = self.bookings.get(booking_id)
        if booking is None:
            return None
        booking.payment_status = payment_status
        booking.updated_at = utcnow()
        return replace(booking)

    async def count_by_payment_status(self, payment_status: PaymentStatus) -> int:
        return sum(1 for booking in self.bookings.values() if booking.payment_status is payment_status)


class FakeDraftRepository:
    def __init__(self) -> None:
        self.drafts: dict[tuple[str, str], BookingDraft] = {}

    async def upsert(
        self,
        *,
        user_id: str,
        listing_id: str,
        details: dict[str, Any],
        listing_title: str | None,
        saved_at: datetime,
    ) -> BookingDraft:
        draft = BookingDraft(
            user_id=user_id,
            listing_id=listing_id,
            details=details,
            saved_at=saved_at,
            listing_title=listing_title,
        )
        self.drafts[(user_id, listing_id)] = draft
        return draft

    async def get(self, user_id: str, listing_id: str) -> BookingDraft | None:
        return self.drafts.get((user_id, listing_id))

    async def list_for_user(self, user_id: str) -> list[BookingDraft]:
        return [draft for (owner, _), draft in self.drafts.items() if owner == user_id]

    async def delete(self, user_id: str, listing_id: str) -> bool:
        return self.drafts.pop((user_id, listing_id), None) is not None

    async def delete_for_user(self, user_id: str) -> int:
        keys = [key for key in self.drafts if key[0] == user_id]
        for key in keys:
            del self.drafts[key]
        return len(keys)


class FakeReviewRepository:
    def __init__(self) -> None:
        self.reviews: list[Review] = []

    async def add(self, payload: ReviewCreateInput) -> Review:
        # mirrors the unique (user_id, listing_id) constraint
        if any(r.user_id == payload.user_id and r.listing_id == payload.listing_id for r in self.reviews):
            raise DuplicateReviewError(f"{payload.user_id} already reviewed {payload.listing_id}")
        review = Review(
            id=_id(),
            listing_id=payload.listing_id,
            user_id=payload.user_id,
            booking_id=payload.booking_id,
            rating=payload.rating,
            comment=payload.comment,
            created_at=utcnow(),
        )
        self.reviews.append(review)
        return review

    async def find_by_user_and_listing(self, user_id: str, listing_id: str) -> Review | None:
        return next(
            (review for review in self.reviews if review.user_id == user_id and review.listing_id == listing_id),
            None,
        )

    async def list_reviews(self, listing_id: str | None = None) -> list[Review]:
        return [
            review
            for review in reversed(self.reviews)
            if listing_id is None or review.listing_id == listing_id
        ]

    async def average_rating(self, listing_id: str) -> float | None:
        ratings = [review.rating for review in self.reviews if review.listing_id == listing_id]
        if not ratings:
            return None
        return sum(ratings) / len(ratings)

class FakeEscrowRepository:
    def __init__(self) -> None:
        self.transactions: list[EscrowTransaction] = []

    async def add(
        self,
        *,
        booking_id: str,
        type: EscrowTransactionType,
        amount: Decimal,
        reference: str,
        from_user_id: str | None = None,
        to_user_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> EscrowTransaction:
        record = EscrowTransaction(
            id=_id(),
            booking_id=booking_id,
            type=type,
            amount=amount,
            status="COMPLETED",
            reference=reference,
            created_at=utcnow(),
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            metadata=dict(metadata or {}),
        )
        self.transactions.append(record)
        return record

    async def list_transactions(self, booking_id: str | None = None) -> list[EscrowTransaction]:
        return [
            record
            for record in reversed(self.transactions)
            if booking_id is None or record.booking_id == booking_id
        ]

    async def totals_by_type(self, booking_id: str | None = None) -> dict[EscrowTransactionType, Decimal]:
        totals: dict[EscrowTransactionType, Decimal] = {}
        for record in self.transactions:
            if booking_id is None or record.booking_id == booking_id:
                totals[record.type] = totals.get(record.type, Decimal("0.00")) + record.amount
        return totals


async def complete_booking(service, booking_id: str) -> Booking:
    """Walk a booking through confirmation and start to Completed."""
    for status in (BookingStatus.CONFIRMED, BookingStatus.STARTED, BookingStatus.COMPLETED):
        booking = await service.update_status(booking_id, status)
    return booking



def make_account(account_id: str | None = None, *, role: str = "user", username: str | None = None) -> Account:
    account_id = account_id or _id()
    return Account(
        id=account_id,
        username=username or f"user-{account_id[:8]}",
        role=role,
        is_active=True,
        password_hash="x",
        created_at=utcnow(),
    )
