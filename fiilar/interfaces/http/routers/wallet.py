"""Wallet balance, ledger and stored payment methods."""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from fiilar.core.security import get_current_account, get_current_admin
from fiilar.interfaces.http.deps import get_account_service, get_payment_service
from fiilar.modules.accounts import Account as AccountDomain
from fiilar.modules.accounts.service import AccountService
from fiilar.modules.wallets import (
    InsufficientFundsError,
    InvalidAmountError,
    PaymentMethodNotFoundError,
    PaymentMethodRecord,
    PaymentService,
    UnsupportedPaymentChannelError,
    WalletError,
    WalletTransactionRecord,
)
from fiilar.schemas import (
    DepositRequest,
    LedgerCheckResponse,
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentRequest,
    RefundRequest,
    WalletBalanceResponse,
    WalletTransactionListResponse,
    WalletTransactionResponse,
    WithdrawalRequest,
)

router = APIRouter()


def wallet_http_error(exc: WalletError) -> HTTPException:
    if isinstance(exc, InsufficientFundsError):
        return HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=str(exc))
    if isinstance(exc, (InvalidAmountError, UnsupportedPaymentChannelError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, PaymentMethodNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment method not found")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _to_transaction_response(record: WalletTransactionRecord) -> WalletTransactionResponse:
    return WalletTransactionResponse(
        id=record.id,
        type=record.type.value,
        method=record.method.value,
        amount=record.amount,
        balance_delta=record.balance_delta,
        balance_after=record.balance_after,
        currency=record.currency,
        description=record.description,
        status=record.status,
        payment_method_id=record.payment_method_id,
        created_at=record.created_at,
    )


def _to_payment_method_response(record: PaymentMethodRecord) -> PaymentMethodResponse:
    return PaymentMethodResponse.model_validate(record)


@router.get("", response_model=WalletBalanceResponse, summary="Wallet balance")
async def get_balance(
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> WalletBalanceResponse:
    balance = await service.get_wallet_balance(account.id)
    return WalletBalanceResponse(account_id=account.id, balance=balance, currency=service.currency)


@router.get("/transactions", response_model=WalletTransactionListResponse, summary="Transaction history, newest first")
async def list_transactions(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> WalletTransactionListResponse:
    records = await service.get_transactions(account.id, limit, offset)
    return WalletTransactionListResponse(
        total=await service.count_transactions(account.id),
        transactions=[_to_transaction_response(record) for record in records],
    )


@router.post(
    "/deposits",
    response_model=WalletTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add funds to the wallet",
)
async def deposit(
    payload: DepositRequest,
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> WalletTransactionResponse:
    try:
        record = await service.add_funds(account.id, payload.amount, payload.payment_method_id)
    except WalletError as exc:
        raise wallet_http_error(exc) from exc
    return _to_transaction_response(record)


@router.post(
    "/payments",
    response_model=WalletTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pay for a booking from the wallet or a card",
)
async def pay(
    payload: PaymentRequest,
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> WalletTransactionResponse:
    try:
        record = await service.process_payment(
            account.id, payload.amount, payload.method, payload.payment_method_id
        )
    except WalletError as exc:
        raise wallet_http_error(exc) from exc
    return _to_transaction_response(record)


@router.post(
    "/refunds",
    response_model=WalletTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Refund an amount into a user's wallet",
)
async def refund(
    payload: RefundRequest,
    _: AccountDomain = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    service: PaymentService = Depends(get_payment_service),
) -> WalletTransactionResponse:
    if await accounts.get_by_id(payload.account_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    try:
        record = await service.refund_to_wallet(payload.account_id, payload.amount, payload.reason)
    except WalletError as exc:
        raise wallet_http_error(exc) from exc
    return _to_transaction_response(record)


@router.post(
    "/withdrawals",
    response_model=WalletTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Withdraw funds to a bank account",
)
async def withdraw(
    payload: WithdrawalRequest,
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> WalletTransactionResponse:
    try:
        record = await service.withdraw_funds(account.id, payload.amount)
    except WalletError as exc:
        raise wallet_http_error(exc) from exc
    return _to_transaction_response(record)


@router.get("/verify", response_model=LedgerCheckResponse, summary="Compare balance with the ledger sum")
async def verify(
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> LedgerCheckResponse:
    check = await service.verify_ledger(account.id)
    return LedgerCheckResponse(
        account_id=check.account_id,
        balance=check.balance,
        ledger_sum=check.ledger_sum,
        transaction_count=check.transaction_count,
        consistent=check.consistent,
    )


@router.get("/payment-methods", response_model=list[PaymentMethodResponse], summary="Stored cards")
async def list_payment_methods(
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> list[PaymentMethodResponse]:
    methods = await service.list_payment_methods(account.id)
    return [_to_payment_method_response(method) for method in methods]


@router.post(
    "/payment-methods",
    response_model=PaymentMethodResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Store a card",
)
async def add_payment_method(
    payload: PaymentMethodCreate,
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentMethodResponse:
    method = await service.add_payment_method(
        account.id,
        brand=payload.brand,
        last4=payload.last4,
        expiry_month=payload.expiry_month,
        expiry_year=payload.expiry_year,
    )
    return _to_payment_method_response(method)


@router.delete(
    "/payment-methods/{payment_method_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a stored card",
)
async def delete_payment_method(
    payment_method_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    try:
        await service.delete_payment_method(account.id, payment_method_id)
    except WalletError as exc:
        raise wallet_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
