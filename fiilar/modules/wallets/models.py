"""Domain models for wallet ledger operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    WITHDRAWAL = "WITHDRAWAL"


class PaymentChannel(str, Enum):
    WALLET = "WALLET"
    CARD = "CARD"
    BANK = "BANK"


@dataclass(slots=True)
class WalletSnapshot:
    account_id: str
    balance: Decimal
    currency: str
    updated_at: Optional[datetime]


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    account_id: str
    seq: int
    type: TransactionType
    method: PaymentChannel
    amount: Decimal
    balance_delta: Decimal
    balance_after: Decimal
    currency: str
    description: str
    status: str
    payment_method_id: Optional[str]
    created_at: datetime


@dataclass(slots=True)
class PaymentMethodRecord:
    id: str
    account_id: str
    type: str
    brand: str
    last4: str
    expiry_month: int
    expiry_year: int
    is_default: bool
    created_at: datetime


@dataclass(slots=True)
class LedgerCheck:
    account_id: str
    balance: Decimal
    ledger_sum: Decimal
    transaction_count: int

    @property
    def consistent(self) -> bool:
        return self.balance == self.ledger_sum
