"""Wallet domain specific exceptions."""

from decimal import Decimal


class WalletError(Exception):
    """Base class for wallet ledger errors."""


class InsufficientFundsError(WalletError):
    """Raised when a debit would take the balance below zero."""

    def __init__(self, message: str, *, balance: Decimal, requested: Decimal) -> None:
        super().__init__(message)
        self.balance = balance
        self.requested = requested


class InvalidAmountError(WalletError):
    """Raised when an amount is not a positive number of whole cents."""


class UnsupportedPaymentChannelError(WalletError):
    """Raised when a payment is requested through an unknown channel."""


class PaymentMethodNotFoundError(WalletError):
    """Raised when a stored payment method cannot be found for the account."""
