"""SQLAlchemy repository for escrow transaction records."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.timeutils import as_utc
from fiilar.db.models import EscrowTransaction as EscrowTransactionModel
from fiilar.modules.escrow.models import EscrowTransaction, EscrowTransactionType

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(CENT)


class SqlEscrowRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

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
        seq_stmt = select(func.coalesce(func.max(EscrowTransactionModel.seq), 0)).where(
            EscrowTransactionModel.booking_id == booking_id
        )
        next_seq = (await self._session.execute(seq_stmt)).scalar_one() + 1
        model = EscrowTransactionModel(
            booking_id=booking_id,
            seq=next_seq,
            type=type.value,
            amount=amount,
            status="COMPLETED",
            reference=reference,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            meta=json.dumps(metadata, ensure_ascii=False, default=str) if metadata else None,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def list_transactions(self, booking_id: str | None = None) -> list[EscrowTransaction]:
        stmt = select(EscrowTransactionModel).order_by(
            EscrowTransactionModel.created_at.desc(), EscrowTransactionModel.seq.desc()
        )
        if booking_id is not None:
            stmt = stmt.where(EscrowTransactionModel.booking_id == booking_id)
        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def totals_by_type(self, booking_id: str | None = None) -> dict[EscrowTransactionType, Decimal]:
        stmt = select(
            EscrowTransactionModel.type, func.coalesce(func.sum(EscrowTransactionModel.amount), 0)
        ).group_by(EscrowTransactionModel.type)
        if booking_id is not None:
            stmt = stmt.where(EscrowTransactionModel.booking_id == booking_id)
        result = await self._session.execute(stmt)
        return {EscrowTransactionType(type_): _money(total) for type_, total in result.all()}

    @staticmethod
    def _to_domain(model: EscrowTransactionModel) -> EscrowTransaction:
        metadata: dict = {}
        if model.meta:
            try:
                metadata = json.loads(model.meta)
            except json.JSONDecodeError:
                logger.warning("Unreadable metadata on escrow transaction %s", model.id)
                metadata = {}
        return EscrowTransaction(
            id=model.id,
            booking_id=model.booking_id,
            type=EscrowTransactionType(model.type),
            amount=_money(model.amount),
            status=model.status,
            reference=model.reference,
            from_user_id=model.from_user_id,
            to_user_id=model.to_user_id,
            metadata=metadata,
            created_at=as_utc(model.created_at),
        )
