"""SQLAlchemy implementation for the wallet ledger"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.timeutils import as_utc
from fiilar.db.models import PaymentMethod, Wallet, WalletTransaction
from fiilar.modules.wallets.models import (
    PaymentChannel,
    PaymentMethodRecord,
    TransactionType,
    WalletSnapshot,
    WalletTransactionRecord,
)

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(CENT)


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _get_model(self, account_id: str, *, for_update: bool = False) -> Wallet | None:
        stmt = select(Wallet).where(Wallet.account_id == account_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_wallet(self, account_id: str, *, for_update: bool = False) -> WalletSnapshot | None:
        wallet = await self._get_model(account_id, for_update=for_update)
        return self._to_snapshot(wallet) if wallet else None

    async def create_wallet(self, account_id: str, currency: str) -> WalletSnapshot:
        wallet = Wallet(account_id=account_id, currency=currency, balance=Decimal("0.00"))
        self.session.add(wallet)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            wallet = await self._get_model(account_id)
            if wallet is None:
                raise
        return self._to_snapshot(wallet)

    async def update_balance(self, account_id: str, delta: Decimal) -> WalletSnapshot:
        wallet = await self._get_model(account_id, for_update=True)
        if wallet is None:
            raise LookupError(f"Wallet for account {account_id} does not exist")
        wallet.balance = _money(wallet.balance) + delta
        await self.session.flush()
        return self._to_snapshot(wallet)

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
        seq_stmt = select(func.coalesce(func.max(WalletTransaction.seq), 0)).where(
            WalletTransaction.account_id == account_id
        )
        next_seq = (await self.session.execute(seq_stmt)).scalar_one() + 1
        tx = WalletTransaction(
            account_id=account_id,
            seq=next_seq,
            type=type.value,
            method=method.value,
            amount=amount,
            balance_delta=balance_delta,
            balance_after=balance_after,
            currency=currency,
            description=description,
            payment_method_id=payment_method_id,
            status="COMPLETED",
        )
        self.session.add(tx)
        await self.session.flush()
        return self._to_record(tx)

    async def list_transactions(
        self, account_id: str, limit: int | None, offset: int
    ) -> list[WalletTransactionRecord]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.account_id == account_id)
            .order_by(WalletTransaction.seq.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_record(row) for row in result.scalars().all()]

    async def count_transactions(self, account_id: str) -> int:
        stmt = select(func.count(WalletTransaction.id)).where(WalletTransaction.account_id == account_id)
        return int((await self.session.execute(stmt)).scalar_one())

    async def sum_amounts(
        self,
        account_id: str,
        type: TransactionType,
        methods: Iterable[PaymentChannel] | None = None,
    ) -> Decimal:
        stmt = select(func.coalesce(func.sum(WalletTransaction.amount), 0)).where(
            WalletTransaction.account_id == account_id,
            WalletTransaction.type == type.value,
        )
        if methods is not None:
            stmt = stmt.where(WalletTransaction.method.in_([m.value for m in methods]))
        total = (await self.session.execute(stmt)).scalar_one()
        return _money(total)

    async def list_payment_methods(self, account_id: str) -> list[PaymentMethodRecord]:
        stmt = (
            select(PaymentMethod)
            .where(PaymentMethod.account_id == account_id)
            .order_by(PaymentMethod.created_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_payment_method(row) for row in result.scalars().all()]

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
        model = PaymentMethod(
            account_id=account_id,
            type="CARD",
            brand=brand,
            last4=last4,
            expiry_month=expiry_month,
            expiry_year=expiry_year,
            is_default=is_default,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_payment_method(model)

    async def delete_payment_method(self, account_id: str, payment_method_id: str) -> bool:
        stmt = delete(PaymentMethod).where(
            PaymentMethod.id == payment_method_id,
            PaymentMethod.account_id == account_id,
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0

    @staticmethod
    def _to_snapshot(model: Wallet) -> WalletSnapshot:
        return WalletSnapshot(
            account_id=model.account_id,
            balance=_money(model.balance),
            currency=model.currency,
            updated_at=as_utc(model.updated_at),
        )

    @staticmethod
    def _to_record(model: WalletTransaction) -> WalletTransactionRecord:
        return WalletTransactionRecord(
            id=model.id,
            account_id=model.account_id,
            seq=model.seq,
            type=TransactionType(model.type),
            method=PaymentChannel(model.method),
            amount=_money(model.amount),
            balance_delta=_money(model.balance_delta),
            balance_after=_money(model.balance_after),
            currency=model.currency,
            description=model.description or "",
            status=model.status,
            payment_method_id=model.payment_method_id,
            created_at=as_utc(model.created_at),
        )

    @staticmethod
    def _to_payment_method(model: PaymentMethod) -> PaymentMethodRecord:
        return PaymentMethodRecord(
            id=model.id,
            account_id=model.account_id,
            type=model.type,
            brand=model.brand,
            last4=model.last4,
            expiry_month=model.expiry_month,
            expiry_year=model.expiry_year,
            is_default=bool(model.is_default),
            created_at=as_utc(model.created_at),
        )
