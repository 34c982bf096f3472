"""Wallet ledger service: deposits, payments, refunds and withdrawals."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.config import get_settings
from fiilar.core.events import WALLET_UPDATED, EventBus, event_bus

from .exceptions import InsufficientFundsError, PaymentMethodNotFoundError, UnsupportedPaymentChannelError
from .ledger import ZERO, Amount, ensure_sufficient_funds, ledger_sum, normalize_amount, signed_delta
from .models import (
    LedgerCheck,
    PaymentChannel,
    PaymentMethodRecord,
    TransactionType,
    WalletTransactionRecord,
)
from .repository import WalletRepository

logger = logging.getLogger(__name__)

WITHDRAWAL_DESCRIPTION = "Withdrawal to bank account"
DEPOSIT_DESCRIPTION = "Added funds to wallet"
DEFAULT_REFUND_DESCRIPTION = "Refund to wallet"


@dataclass(slots=True)
class PaymentService:
    """Append-only transaction log plus derived balance, one wallet per account.

    Every balance change goes through ``_record`` so that the stored balance
    always equals the signed sum of ``balance_delta`` over the account's
    transactions.
    """

    repository: WalletRepository
    currency: str = "NGN"
    events: EventBus = event_bus

    @classmethod
    def with_session(cls, session: AsyncSession, events: Optional[EventBus] = None) -> "PaymentService":
        from fiilar.infrastructure.database.repositories.wallet_repository import SqlWalletRepository

        settings = get_settings()
        return cls(
            SqlWalletRepository(session),
            currency=settings.wallet.currency,
            events=events or event_bus,
        )

    async def get_wallet_balance(self, account_id: str) -> Decimal:
        wallet = await self.repository.get_wallet(account_id)
        return wallet.balance if wallet is not None else ZERO

    async def get_transactions(
        self, account_id: str, limit: int | None = None, offset: int = 0
    ) -> list[WalletTransactionRecord]:
        rows = await self.repository.list_transactions(account_id, limit, offset)
        return list(rows)

    async def count_transactions(self, account_id: str) -> int:
        return await self.repository.count_transactions(account_id)

    async def add_funds(
        self, account_id: str, amount: Amount, payment_method_id: str | None = None
    ) -> WalletTransactionRecord:
        return await self._record(
            account_id,
            type_=TransactionType.DEPOSIT,
            method=PaymentChannel.WALLET,
            amount=normalize_amount(amount),
            description=DEPOSIT_DESCRIPTION,
            payment_method_id=payment_method_id,
        )

    async def credit_payout(self, account_id: str, amount: Amount, description: str) -> WalletTransactionRecord:
        """Credit money paid out to the account, such as an escrow release to a host."""
        return await self._record(
            account_id,
            type_=TransactionType.DEPOSIT,
            method=PaymentChannel.WALLET,
            amount=normalize_amount(amount),
            description=description,
        )

    async def process_payment(
        self,
        account_id: str,
        amount: Amount,
        method: PaymentChannel | str,
        payment_method_id: str | None = None,
    ) -> WalletTransactionRecord:
        try:
            channel = PaymentChannel(method)
        except ValueError as exc:
            raise UnsupportedPaymentChannelError(f"Unsupported payment method: {method}") from exc
        if channel not in (PaymentChannel.WALLET, PaymentChannel.CARD):
            raise UnsupportedPaymentChannelError(f"Unsupported payment method: {method}")

        label = "Wallet" if channel is PaymentChannel.WALLET else "Card"
        return await self._record(
            account_id,
            type_=TransactionType.PAYMENT,
            method=channel,
            amount=normalize_amount(amount),
            description=f"Payment for booking via {label}",
            payment_method_id=payment_method_id,
            insufficient_message="Insufficient wallet funds",
        )

    async def refund_to_wallet(
        self, account_id: str, amount: Amount, reason: str | None = None
    ) -> WalletTransactionRecord:
        value = normalize_amount(amount)
        # refunds are not matched to a payment; over-refunding is only logged
        paid = await self.repository.sum_amounts(
            account_id, TransactionType.PAYMENT, (PaymentChannel.WALLET, PaymentChannel.CARD)
        )
        refunded = await self.repository.sum_amounts(account_id, TransactionType.REFUND)
        if refunded + value > paid:
            logger.warning(
                "Refund of %s for account %s exceeds recorded payments (paid=%s, refunded=%s)",
                value,
                account_id,
                paid,
                refunded,
            )
        return await self._record(
            account_id,
            type_=TransactionType.REFUND,
            method=PaymentChannel.WALLET,
            amount=value,
            description=reason or DEFAULT_REFUND_DESCRIPTION,
        )

    async def withdraw_funds(self, account_id: str, amount: Amount) -> WalletTransactionRecord:
        # Withdrawals are recorded as PAYMENT entries out through the bank rail.
        return await self._record(
            account_id,
            type_=TransactionType.PAYMENT,
            method=PaymentChannel.BANK,
            amount=normalize_amount(amount),
            description=WITHDRAWAL_DESCRIPTION,
            insufficient_message="Insufficient balance",
        )

    async def verify_ledger(self, account_id: str) -> LedgerCheck:
        balance = await self.get_wallet_balance(account_id)
        transactions = await self.repository.list_transactions(account_id, None, 0)
        total = ledger_sum(transactions)
        check = LedgerCheck(
            account_id=account_id,
            balance=balance,
            ledger_sum=total,
            transaction_count=len(transactions),
        )
        if not check.consistent:
            logger.error(
                "Ledger mismatch for account %s: balance=%s ledger_sum=%s", account_id, balance, total
            )
        return check

    async def list_payment_methods(self, account_id: str) -> list[PaymentMethodRecord]:
        return list(await self.repository.list_payment_methods(account_id))

    async def add_payment_method(
        self,
        account_id: str,
        *,
        brand: str,
        last4: str,
        expiry_month: int,
        expiry_year: int,
    ) -> PaymentMethodRecord:
        existing = await self.repository.list_payment_methods(account_id)
        return await self.repository.add_payment_method(
            account_id=account_id,
            brand=brand,
            last4=last4,
            expiry_month=expiry_month,
            expiry_year=expiry_year,
            is_default=len(existing) == 0,
        )

    async def delete_payment_method(self, account_id: str, payment_method_id: str) -> None:
        deleted = await self.repository.delete_payment_method(account_id, payment_method_id)
        if not deleted:
            raise PaymentMethodNotFoundError(payment_method_id)

    async def _record(
        self,
        account_id: str,
        *,
        type_: TransactionType,
        method: PaymentChannel,
        amount: Decimal,
        description: str,
        payment_method_id: str | None = None,
        insufficient_message: str = "Insufficient balance",
    ) -> WalletTransactionRecord:
        wallet = await self.repository.get_wallet(account_id, for_update=True)
        if wallet is None:
            wallet = await self.repository.create_wallet(account_id, self.currency)

        delta = signed_delta(type_, method, amount)
        if delta < 0:
            try:
                ensure_sufficient_funds(wallet.balance, amount, insufficient_message)
            except InsufficientFundsError:
                logger.warning(
                    "Rejected %s of %s for account %s: balance %s",
                    type_.value,
                    amount,
                    account_id,
                    wallet.balance,
                )
                raise
        if delta != 0:
            wallet = await self.repository.update_balance(account_id, delta)

        record = await self.repository.add_transaction(
            account_id=account_id,
            type=type_,
            method=method,
            amount=amount,
            balance_delta=delta,
            balance_after=wallet.balance,
            currency=wallet.currency,
            description=description,
            payment_method_id=payment_method_id,
        )
        logger.info(
            "Recorded %s %s via %s for account %s, balance now %s",
            type_.value,
            amount,
            method.value,
            account_id,
            wallet.balance,
        )
        await self.events.publish(
            WALLET_UPDATED,
            {"account_id": account_id, "balance": wallet.balance, "transaction": asdict(record)},
        )
        return record
