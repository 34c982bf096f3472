"""Repository protocol for escrow transactions."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol, Sequence

from .models import EscrowTransaction, EscrowTransactionType


class EscrowRepository(Protocol):
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
        ...

    async def list_transactions(self, booking_id: str | None = None) -> Sequence[EscrowTransaction]:
        """Newest first."""
        ...

    async def totals_by_type(self, booking_id: str | None = None) -> dict[EscrowTransactionType, Decimal]:
        ...
