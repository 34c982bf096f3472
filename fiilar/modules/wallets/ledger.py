"""Pure ledger rules, independent of storage."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from .exceptions import InsufficientFundsError, InvalidAmountError
from .models import PaymentChannel, TransactionType, WalletTransactionRecord

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def normalize_amount(amount: Amount) -> Decimal:
    """Coerce to a two-place Decimal.

    Anything that is not strictly positive, or that carries fractions of a
    cent, raises ``InvalidAmountError``; amounts are never rounded.
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite() or value <= 0:
        raise InvalidAmountError("Amount must be greater than 0")
    try:
        quantized = value.quantize(CENT)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from exc
    if quantized != value:
        raise InvalidAmountError("Amount cannot have more than 2 decimal places")
    return quantized


def signed_delta(type_: TransactionType, method: PaymentChannel, amount: Decimal) -> Decimal:
    """Effect of one transaction on the wallet balance."""
    if type_ in (TransactionType.DEPOSIT, TransactionType.REFUND):
        return amount
    if method is PaymentChannel.CARD:
        return ZERO
    return -amount


def ensure_sufficient_funds(balance: Decimal, amount: Decimal, message: str) -> None:
    if amount > balance:
        raise InsufficientFundsError(message, balance=balance, requested=amount)


def ledger_sum(transactions: Iterable[WalletTransactionRecord]) -> Decimal:
    return sum((tx.balance_delta for tx in transactions), ZERO)


__all__ = [
    "ZERO",
    "Amount",
    "normalize_amount",
    "signed_delta",
    "ensure_sufficient_funds",
    "ledger_sum",
]
