"""Wallet ledger exports"""

from .exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    PaymentMethodNotFoundError,
    UnsupportedPaymentChannelError,
    WalletError,
)
from .models import (
    LedgerCheck,
    PaymentChannel,
    PaymentMethodRecord,
    TransactionType,
    WalletSnapshot,
    WalletTransactionRecord,
)
from .service import PaymentService

__all__ = [
    "InsufficientFundsError",
    "InvalidAmountError",
    "PaymentMethodNotFoundError",
    "UnsupportedPaymentChannelError",
    "WalletError",
    "LedgerCheck",
    "PaymentChannel",
    "PaymentMethodRecord",
    "TransactionType",
    "WalletSnapshot",
    "WalletTransactionRecord",
    "PaymentService",
]
