"""Repository protocol for wallet ledger operations."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Protocol, Sequence

from .models import (
    PaymentChannel,
    PaymentMethodRecord,
    TransactionType,
    WalletSnapshot,
    WalletTransactionRecord,
)


class WalletRepository(Protocol):
    async def get_wallet(self, account_id: str, *, for_update: bool = False) -> WalletSnapshot | None:
        ...

    async def create_wallet(self, account_id: str, currency: str) -> WalletSnapshot:
        ...

    async def update_balance(self, account_id: str, delta: Decimal) -> WalletSnapshot:
        ...

    async def add_transaction(
        self,
        *,
        account_id: str,
        type: TransactionType,
        method: PaymentChannel,
        amount: Decimal,
        balance_delta: Decimal,
        balance_after: Decimal,
        currency: str,
        description: str,
        payment_method_id: str | None,
    ) -> WalletTransactionRecord:
        ...

    async def list_transactions(
        self, account_id: str, limit: int | None, offset: int
    ) -> Sequence[WalletTransactionRecord]:
        ...

    async def count_transactions(self, account_id: str) -> int:
        ...

    async def sum_amounts(
        self,
        account_id: str,
        type: TransactionType,
        methods: Iterable[PaymentChannel] | None = None,
    ) -> Decimal:
        ...

    async def list_payment_methods(self, account_id: str) -> Sequence[PaymentMethodRecord]:
        ...

    async def add_payment_method(
        self,
        *,
        account_id: str,
        brand: str,
        last4: str,
        expiry_month: int,
        expiry_year: int,
        is_default: bool,
    ) -> PaymentMethodRecord:
        ...

    async def delete_payment_method(self, account_id: str, payment_method_id: str) -> bool:
        ...
