"""Domain models for escrow bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class EscrowTransactionType(str, Enum):
    GUEST_PAYMENT = "GUEST_PAYMENT"
    SERVICE_FEE = "SERVICE_FEE"
    HOST_PAYOUT = "HOST_PAYOUT"
    REFUND = "REFUND"


class DisputeDecision(str, Enum):
    REFUND_GUEST = "REFUND_GUEST"
    RELEASE_TO_HOST = "RELEASE_TO_HOST"


@dataclass(slots=True)
class EscrowTransaction:
    id: str
    booking_id: str
    type: EscrowTransactionType
    amount: Decimal
    status: str
    reference: str
    created_at: datetime
    from_user_id: Optional[str] = None
    to_user_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PlatformFinancials:
    total_escrow: Decimal
    total_released: Decimal
    total_revenue: Decimal
    total_refunded: Decimal
    pending_payouts: int
