"""SQLAlchemy ORM models."""
import uuid
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from fiilar.core.timeutils import utcnow
from fiilar.infrastructure.database.base import Base

MONEY = Numeric(14, 2, asdecimal=True)


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user")
    is_active = Column(Boolean, default=True)
    email = Column(String(100), unique=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    last_login_at = Column(DateTime(timezone=True))


class Wallet(Base):
    __tablename__ = "wallets"

    account_id = Column(String(36), ForeignKey("accounts.id"), primary_key=True)
    balance = Column(MONEY, nullable=False, default=0)
    currency = Column(String(10), nullable=False, default="NGN")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    transactions = relationship("WalletTransaction", back_populates="wallet", cascade="all, delete-orphan")


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("wallets.account_id"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    type = Column(String(20), nullable=False)  # DEPOSIT, PAYMENT, REFUND, WITHDRAWAL
    method = Column(String(10), nullable=False, default="WALLET")  # WALLET, CARD, BANK
    amount = Column(MONEY, nullable=False)
    balance_delta = Column(MONEY, nullable=False)
    balance_after = Column(MONEY, nullable=False)
    currency = Column(String(10), nullable=False, default="NGN")
    payment_method_id = Column(String(36))
    description = Column(String(255))
    status = Column(String(20), nullable=False, default="COMPLETED")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    wallet = relationship("Wallet", back_populates="transactions")


class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False, default="CARD")
    brand = Column(String(50), nullable=False)
    last4 = Column(String(4), nullable=False)
    expiry_month = Column(Integer, nullable=False)
    expiry_year = Column(Integer, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    participant_one = Column(String(36), nullable=False, index=True)
    participant_two = Column(String(36), nullable=False, index=True)
    listing_id = Column(String(36), index=True)
    last_message_id = Column(String(36))
    last_message_preview = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    messages = relationship("Message", back_populates="conversation", cascade="all, delete-orphan")


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    conversation_id = Column(String(36), ForeignKey("conversations.id"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    sender_id = Column(String(36), nullable=False)
    content = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    conversation = relationship("Conversation", back_populates="messages")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    severity = Column(String(10), nullable=False, default="info")
    read = Column(Boolean, nullable=False, default=False)
    action_required = Column(Boolean, nullable=False, default=False)
    meta = Column("metadata", Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    listing_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="Pending")
    total_price = Column(MONEY, nullable=False, default=0)
    service_fee = Column(MONEY, nullable=False, default=0)
    caution_fee = Column(MONEY, nullable=False, default=0)
    payment_status = Column(String(20), index=True)  # Paid - Escrow, Released, Refunded
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    escrow_transactions = relationship(
        "EscrowTransaction", back_populates="booking", cascade="all, delete-orphan"
    )


class EscrowTransaction(Base):
    __tablename__ = "escrow_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    type = Column(String(20), nullable=False, index=True)  # GUEST_PAYMENT, SERVICE_FEE, HOST_PAYOUT, REFUND
    amount = Column(MONEY, nullable=False)
    status = Column(String(20), nullable=False, default="COMPLETED")
    reference = Column(String(64), nullable=False, unique=True)
    from_user_id = Column(String(36))
    to_user_id = Column(String(36))
    meta = Column("metadata", Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    booking = relationship("Booking", back_populates="escrow_transactions")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "listing_id", name="uq_reviews_user_listing"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    listing_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow)


class BookingDraft(Base):
    __tablename__ = "booking_drafts"
    __table_args__ = (UniqueConstraint("user_id", "listing_id", name="uq_booking_drafts_user_listing"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    listing_id = Column(String(36), nullable=False)
    listing_title = Column(String(255))
    details = Column(Text, nullable=False)
    saved_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
