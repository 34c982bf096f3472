"""Escrow payments, host releases, refunds and platform totals."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from fiilar.core.security import get_current_account, get_current_admin
from fiilar.interfaces.http.deps import get_account_service, get_booking_service, get_escrow_service
from fiilar.interfaces.http.routers.wallet import wallet_http_error
from fiilar.modules.accounts import Account as AccountDomain
from fiilar.modules.accounts.service import AccountService
from fiilar.modules.bookings import BookingNotFoundError, BookingService
from fiilar.modules.escrow import (
    EscrowError,
    EscrowService,
    EscrowStateError,
    EscrowTransaction,
    RefundExceedsHeldFundsError,
)
from fiilar.modules.wallets import WalletError
from fiilar.schemas import (
    DisputeResolveRequest,
    EscrowPaymentRequest,
    EscrowRefundRequest,
    EscrowReleaseRequest,
    EscrowTransactionResponse,
    PlatformFinancialsResponse,
)

router = APIRouter()


def _escrow_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, WalletError):
        return wallet_http_error(exc)
    if isinstance(exc, BookingNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    if isinstance(exc, (EscrowStateError, RefundExceedsHeldFundsError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _to_response(record: EscrowTransaction) -> EscrowTransactionResponse:
    return EscrowTransactionResponse(
        id=record.id,
        booking_id=record.booking_id,
        type=record.type.value,
        amount=record.amount,
        status=record.status,
        reference=record.reference,
        from_user_id=record.from_user_id,
        to_user_id=record.to_user_id,
        metadata=record.metadata,
        created_at=record.created_at,
    )


async def _require_account(accounts: AccountService, account_id: str) -> None:
    if await accounts.get_by_id(account_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")


@router.post(
    "/payments",
    response_model=list[EscrowTransactionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Pay for a booking into escrow",
)
async def pay_into_escrow(
    payload: EscrowPaymentRequest,
    account: AccountDomain = Depends(get_current_account),
    bookings: BookingService = Depends(get_booking_service),
    service: EscrowService = Depends(get_escrow_service),
) -> list[EscrowTransactionResponse]:
    booking = await bookings.get_booking(payload.booking_id)
    if booking is None or booking.user_id != account.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    try:
        records = await service.process_guest_payment(
            payload.booking_id, account.id, payload.method, payload.payment_method_id
        )
    except (EscrowError, BookingNotFoundError, WalletError) as exc:
        raise _escrow_http_error(exc) from exc
    return [_to_response(record) for record in records]


@router.get(
    "/bookings/{booking_id}/transactions",
    response_model=list[EscrowTransactionResponse],
    summary="Escrow history of one booking, newest first",
)
async def booking_transactions(
    booking_id: str,
    account: AccountDomain = Depends(get_current_account),
    bookings: BookingService = Depends(get_booking_service),
    service: EscrowService = Depends(get_escrow_service),
) -> list[EscrowTransactionResponse]:
    booking = await bookings.get_booking(booking_id)
    if booking is None or (booking.user_id != account.id and not account.is_admin()):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return [_to_response(record) for record in await service.get_transactions(booking_id)]


@router.post(
    "/releases",
    response_model=EscrowTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Release held funds to the host",
)
async def release_to_host(
    payload: EscrowReleaseRequest,
    _: AccountDomain = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    service: EscrowService = Depends(get_escrow_service),
) -> EscrowTransactionResponse:
    await _require_account(accounts, payload.host_id)
    try:
        record = await service.release_funds_to_host(payload.booking_id, payload.host_id, payload.notes)
    except (EscrowError, BookingNotFoundError, WalletError) as exc:
        raise _escrow_http_error(exc) from exc
    return _to_response(record)


@router.post(
    "/refunds",
    response_model=EscrowTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Refund held funds to the guest",
)
async def refund_guest(
    payload: EscrowRefundRequest,
    _: AccountDomain = Depends(get_current_admin),
    service: EscrowService = Depends(get_escrow_service),
) -> EscrowTransactionResponse:
    try:
        record = await service.process_refund(payload.booking_id, payload.amount, payload.notes)
    except (EscrowError, BookingNotFoundError, WalletError) as exc:
        raise _escrow_http_error(exc) from exc
    return _to_response(record)


@router.post(
    "/disputes/resolve",
    response_model=EscrowTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Settle a disputed booking",
)
async def resolve_dispute(
    payload: DisputeResolveRequest,
    _: AccountDomain = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    service: EscrowService = Depends(get_escrow_service),
) -> EscrowTransactionResponse:
    if payload.host_id is not None:
        await _require_account(accounts, payload.host_id)
    try:
        record = await service.resolve_dispute(
            payload.booking_id, payload.decision, payload.admin_notes, payload.host_id
        )
    except (EscrowError, BookingNotFoundError, WalletError) as exc:
        raise _escrow_http_error(exc) from exc
    return _to_response(record)


@router.get("/transactions", response_model=list[EscrowTransactionResponse], summary="All escrow records")
async def list_transactions(
    booking_id: Optional[str] = Query(None),
    _: AccountDomain = Depends(get_current_admin),
    service: EscrowService = Depends(get_escrow_service),
) -> list[EscrowTransactionResponse]:
    return [_to_response(record) for record in await service.get_transactions(booking_id)]


@router.get("/financials", response_model=PlatformFinancialsResponse, summary="Platform escrow totals")
async def financials(
    _: AccountDomain = Depends(get_current_admin),
    service: EscrowService = Depends(get_escrow_service),
) -> PlatformFinancialsResponse:
    totals = await service.get_platform_financials()
    return PlatformFinancialsResponse(
        total_escrow=totals.total_escrow,
        total_released=totals.total_released,
        total_revenue=totals.total_revenue,
        total_refunded=totals.total_refunded,
        pending_payouts=totals.pending_payouts,
    )
