"""Pydantic schemas used across the HTTP and websocket surfaces."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class AccountCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    role: Literal["user", "host"] = "user"
    email: Optional[str] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    account_id: str
    username: str
    role: str


class AccountLoginResponse(Token):
    account_id: str
    username: str
    role: str
    ws_url: Optional[str] = None


class AccountResponse(BaseModel):
    id: str
    username: str
    role: str
    email: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# wallet

class WalletBalanceResponse(BaseModel):
    account_id: str
    balance: Decimal
    currency: str


class WalletTransactionResponse(BaseModel):
    id: str
    type: str
    method: str
    amount: Decimal
    balance_delta: Decimal
    balance_after: Decimal
    currency: str
    description: str
    status: str
    payment_method_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionListResponse(BaseModel):
    total: int
    transactions: list[WalletTransactionResponse]


class DepositRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    payment_method_id: Optional[str] = None


class PaymentRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    method: Literal["WALLET", "CARD"] = "WALLET"
    payment_method_id: Optional[str] = None


class RefundRequest(BaseModel):
    account_id: str
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    reason: Optional[str] = None


class WithdrawalRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2)


class LedgerCheckResponse(BaseModel):
    account_id: str
    balance: Decimal
    ledger_sum: Decimal
    transaction_count: int
    consistent: bool


class PaymentMethodCreate(BaseModel):
    brand: str = Field(..., min_length=1, max_length=32)
    last4: str = Field(..., pattern=r"^\d{4}$")
    expiry_month: int = Field(..., ge=1, le=12)
    expiry_year: int = Field(..., ge=2000)


class PaymentMethodResponse(BaseModel):
    id: str
    type: str
    brand: str
    last4: str
    expiry_month: int
    expiry_year: int
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# messaging

class ConversationStartRequest(BaseModel):
    host_id: str
    listing_id: Optional[str] = None


class ConversationStartResponse(BaseModel):
    conversation_id: str


class ConversationResponse(BaseModel):
    id: str
    participants: list[str]
    listing_id: Optional[str] = None
    last_message_id: Optional[str] = None
    last_message_preview: Optional[str] = None
    unread_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MarkReadResponse(BaseModel):
    updated: int


# notifications

class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    severity: str
    read: bool
    action_required: bool
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    unread: int


# reviews

class ReviewCreate(BaseModel):
    listing_id: str
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=2000)
    booking_id: Optional[str] = None


class ReviewResponse(BaseModel):
    id: str
    listing_id: str
    user_id: str
    booking_id: Optional[str] = None
    rating: int
    comment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RatingResponse(BaseModel):
    listing_id: str
    average_rating: float
    review_count: int


# bookings

class BookingCreate(BaseModel):
    listing_id: str
    total_price: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    service_fee: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    caution_fee: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)


class BookingStatusUpdate(BaseModel):
    status: Literal["Pending", "Confirmed", "Started", "Completed", "Cancelled", "Reserved"]


class BookingResponse(BaseModel):
    id: str
    listing_id: str
    user_id: str
    status: str
    total_price: Decimal
    service_fee: Decimal
    caution_fee: Decimal
    payment_status: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# escrow

class EscrowPaymentRequest(BaseModel):
    booking_id: str
    method: Literal["WALLET", "CARD"] = "WALLET"
    payment_method_id: Optional[str] = None


class EscrowReleaseRequest(BaseModel):
    booking_id: str
    host_id: str
    notes: Optional[str] = None


class EscrowRefundRequest(BaseModel):
    booking_id: str
    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    notes: Optional[str] = None


class DisputeResolveRequest(BaseModel):
    booking_id: str
    decision: Literal["REFUND_GUEST", "RELEASE_TO_HOST"]
    admin_notes: str = Field(..., min_length=1)
    host_id: Optional[str] = None


class EscrowTransactionResponse(BaseModel):
    id: str
    booking_id: str
    type: str
    amount: Decimal
    status: str
    reference: str
    from_user_id: Optional[str] = None
    to_user_id: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class PlatformFinancialsResponse(BaseModel):
    total_escrow: Decimal
    total_released: Decimal
    total_revenue: Decimal
    total_refunded: Decimal
    pending_payouts: int


class DraftSaveRequest(BaseModel):
    details: dict[str, Any] = Field(default_factory=dict)
    listing_title: Optional[str] = None


class DraftResponse(BaseModel):
    listing_id: str
    listing_title: Optional[str] = None
    details: dict[str, Any]
    saved_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WSMessage(BaseModel):
    type: str
    data: Optional[dict[str, Any]] = None
