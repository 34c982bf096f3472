from decimal import Decimal

import pytest

from fiilar.modules.wallets import (
    InsufficientFundsError,
    InvalidAmountError,
    PaymentChannel,
    PaymentMethodNotFoundError,
    TransactionType,
    UnsupportedPaymentChannelError,
)
from fiilar.modules.wallets.ledger import ensure_sufficient_funds, ledger_sum, normalize_amount, signed_delta

ACCOUNT = "acct-1"


async def test_balance_defaults_to_zero(payment_service):
    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("0")
    assert await payment_service.get_transactions(ACCOUNT) == []


async def test_deposit_payment_refund_withdrawal_scenario(payment_service):
    await payment_service.add_funds(ACCOUNT, 40000)
    await payment_service.process_payment(ACCOUNT, 34000, PaymentChannel.WALLET)
    await payment_service.refund_to_wallet(ACCOUNT, 34000)
    await payment_service.withdraw_funds(ACCOUNT, 10000)

    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("30000.00")

    transactions = await payment_service.get_transactions(ACCOUNT)
    assert len(transactions) == 4
    assert [tx.description for tx in transactions] == [
        "Withdrawal to bank account",
        "Refund to wallet",
        "Payment for booking via Wallet",
        "Added funds to wallet",
    ]
    withdrawal = transactions[0]
    assert withdrawal.type is TransactionType.PAYMENT
    assert withdrawal.method is PaymentChannel.BANK
    assert withdrawal.balance_after == Decimal("30000.00")


async def test_wallet_payment_over_balance_mutates_nothing(payment_service, wallet_repo):
    await payment_service.add_funds(ACCOUNT, "100.00")

    with pytest.raises(InsufficientFundsError) as excinfo:
        await payment_service.process_payment(ACCOUNT, "100.01", "WALLET")

    assert str(excinfo.value) == "Insufficient wallet funds"
    assert excinfo.value.requested == Decimal("100.01")
    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("100.00")
    assert len(wallet_repo.transactions) == 1


async def test_withdrawal_over_balance_mutates_nothing(payment_service, wallet_repo):
    await payment_service.add_funds(ACCOUNT, 50)

    with pytest.raises(InsufficientFundsError, match="Insufficient balance"):
        await payment_service.withdraw_funds(ACCOUNT, 51)

    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("50.00")
    assert len(wallet_repo.transactions) == 1


async def test_card_payment_records_without_touching_balance(payment_service):
    await payment_service.add_funds(ACCOUNT, 200)

    record = await payment_service.process_payment(ACCOUNT, 5000, PaymentChannel.CARD, "pm-1")

    assert record.description == "Payment for booking via Card"
    assert record.balance_delta == Decimal("0")
    assert record.payment_method_id == "pm-1"
    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("200.00")
    assert len(await payment_service.get_transactions(ACCOUNT)) == 2


async def test_card_payment_allowed_on_empty_wallet(payment_service):
    record = await payment_service.process_payment(ACCOUNT, 75, "CARD")
    assert record.balance_after == Decimal("0.00")


async def test_bank_is_not_a_payment_channel(payment_service):
    await payment_service.add_funds(ACCOUNT, 10)
    with pytest.raises(UnsupportedPaymentChannelError):
        await payment_service.process_payment(ACCOUNT, 1, "BANK")
    with pytest.raises(UnsupportedPaymentChannelError):
        await payment_service.process_payment(ACCOUNT, 1, "PAYPAL")


@pytest.mark.parametrize("amount", [0, -5, "abc", "NaN", "Infinity", "12.345", "0.001"])
async def test_rejects_non_positive_or_invalid_amounts(payment_service, amount):
    with pytest.raises(InvalidAmountError):
        await payment_service.add_funds(ACCOUNT, amount)


async def test_refund_beyond_payments_is_allowed_but_logged(payment_service, caplog):
    await payment_service.add_funds(ACCOUNT, 100)
    await payment_service.process_payment(ACCOUNT, 60, "WALLET")
    await payment_service.refund_to_wallet(ACCOUNT, 60)

    with caplog.at_level("WARNING", logger="fiilar.modules.wallets.service"):
        await payment_service.refund_to_wallet(ACCOUNT, 60, "Booking cancelled")

    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("160.00")
    assert "exceeds recorded payments" in caplog.text
    latest = (await payment_service.get_transactions(ACCOUNT, limit=1))[0]
    assert latest.description == "Booking cancelled"


async def test_ledger_stays_consistent(payment_service):
    await payment_service.add_funds(ACCOUNT, "1000.50")
    await payment_service.process_payment(ACCOUNT, "200.25", "WALLET")
    await payment_service.process_payment(ACCOUNT, "999", "CARD")
    await payment_service.refund_to_wallet(ACCOUNT, "50")
    await payment_service.withdraw_funds(ACCOUNT, "100")
    with pytest.raises(InsufficientFundsError):
        await payment_service.withdraw_funds(ACCOUNT, "100000")

    check = await payment_service.verify_ledger(ACCOUNT)

    assert check.consistent
    assert check.balance == Decimal("750.25")
    assert check.transaction_count == 5


async def test_transactions_paginate_newest_first(payment_service):
    for amount in (1, 2, 3):
        await payment_service.add_funds(ACCOUNT, amount)

    page = await payment_service.get_transactions(ACCOUNT, limit=2, offset=1)

    assert [tx.amount for tx in page] == [Decimal("2.00"), Decimal("1.00")]
    assert await payment_service.count_transactions(ACCOUNT) == 3


async def test_mutations_publish_wallet_updates(payment_service, recorder):
    await payment_service.add_funds(ACCOUNT, 10)
    assert recorder.names() == ["wallet.updated"]
    assert recorder.events[0][1]["balance"] == Decimal("10.00")


async def test_payment_methods_first_is_default(payment_service):
    first = await payment_service.add_payment_method(
        ACCOUNT, brand="visa", last4="4242", expiry_month=12, expiry_year=2030
    )
    second = await payment_service.add_payment_method(
        ACCOUNT, brand="mastercard", last4="4444", expiry_month=1, expiry_year=2031
    )
    assert first.is_default and not second.is_default

    await payment_service.delete_payment_method(ACCOUNT, first.id)
    remaining = await payment_service.list_payment_methods(ACCOUNT)
    assert [method.id for method in remaining] == [second.id]

    with pytest.raises(PaymentMethodNotFoundError):
        await payment_service.delete_payment_method(ACCOUNT, first.id)


def test_signed_delta_rules():
    amount = Decimal("10.00")
    assert signed_delta(TransactionType.DEPOSIT, PaymentChannel.WALLET, amount) == amount
    assert signed_delta(TransactionType.REFUND, PaymentChannel.WALLET, amount) == amount
    assert signed_delta(TransactionType.PAYMENT, PaymentChannel.WALLET, amount) == -amount
    assert signed_delta(TransactionType.PAYMENT, PaymentChannel.BANK, amount) == -amount
    assert signed_delta(TransactionType.PAYMENT, PaymentChannel.CARD, amount) == 0


def test_sufficient_funds_boundary():
    ensure_sufficient_funds(Decimal("10.00"), Decimal("10.00"), "Insufficient balance")
    with pytest.raises(InsufficientFundsError):
        ensure_sufficient_funds(Decimal("10.00"), Decimal("10.01"), "Insufficient balance")


def test_normalize_amount_never_rounds():
    assert normalize_amount(3) == Decimal("3.00")
    assert normalize_amount("12.5") == Decimal("12.50")
    assert normalize_amount("12.340") == Decimal("12.34")
    with pytest.raises(InvalidAmountError):
        normalize_amount("12.345")


def test_ledger_sum_of_empty_log_is_zero():
    assert ledger_sum([]) == Decimal("0")


async def test_rejected_precision_leaves_wallet_untouched(payment_service, wallet_repo):
    await payment_service.add_funds(ACCOUNT, "10.00")

    with pytest.raises(InvalidAmountError):
        await payment_service.add_funds(ACCOUNT, "12.345")

    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("10.00")
    assert len(wallet_repo.transactions) == 1


async def test_credit_payout_is_a_wallet_deposit(payment_service):
    record = await payment_service.credit_payout(ACCOUNT, "130.00", "Payout for booking b-1")

    assert record.type is TransactionType.DEPOSIT
    assert record.method is PaymentChannel.WALLET
    assert record.description == "Payout for booking b-1"
    assert await payment_service.get_wallet_balance(ACCOUNT) == Decimal("130.00")
