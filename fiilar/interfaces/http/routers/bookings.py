"""Bookings and resumable booking drafts."""
from fastapi import APIRouter, Depends, HTTPException, status

from fiilar.core.security import get_current_account
from fiilar.interfaces.http.deps import get_booking_service, get_draft_service
from fiilar.modules.accounts import Account as AccountDomain
from fiilar.modules.bookings import (
    GUEST_STATUSES,
    Booking,
    BookingDraft,
    BookingNotFoundError,
    BookingService,
    BookingStatus,
    DraftService,
    InvalidBookingAmountError,
    InvalidStatusTransitionError,
)
from fiilar.schemas import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    DraftResponse,
    DraftSaveRequest,
)

router = APIRouter()


def _to_booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        listing_id=booking.listing_id,
        user_id=booking.user_id,
        status=booking.status.value,
        total_price=booking.total_price,
        service_fee=booking.service_fee,
        caution_fee=booking.caution_fee,
        payment_status=booking.payment_status.value if booking.payment_status else None,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )


def _to_draft_response(draft: BookingDraft) -> DraftResponse:
    return DraftResponse.model_validate(draft)


@router.get("", response_model=list[BookingResponse], summary="Bookings of the current account")
async def list_bookings(
    account: AccountDomain = Depends(get_current_account),
    service: BookingService = Depends(get_booking_service),
) -> list[BookingResponse]:
    bookings = await service.list_bookings(account.id)
    return [_to_booking_response(booking) for booking in bookings]


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED, summary="Create a booking")
async def create_booking(
    payload: BookingCreate,
    account: AccountDomain = Depends(get_current_account),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await service.create_booking(
            listing_id=payload.listing_id,
            user_id=account.id,
            total_price=payload.total_price,
            service_fee=payload.service_fee,
            caution_fee=payload.caution_fee,
        )
    except InvalidBookingAmountError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_booking_response(booking)


@router.get("/drafts", response_model=list[DraftResponse], summary="Saved drafts, newest first")
async def list_drafts(
    account: AccountDomain = Depends(get_current_account),
    service: DraftService = Depends(get_draft_service),
) -> list[DraftResponse]:
    drafts = await service.list_drafts(account.id)
    return [_to_draft_response(draft) for draft in drafts]


@router.delete("/drafts", summary="Delete every draft of the current account")
async def clear_drafts(
    account: AccountDomain = Depends(get_current_account),
    service: DraftService = Depends(get_draft_service),
) -> dict:
    return {"removed": await service.clear_drafts(account.id)}


@router.put("/drafts/{listing_id}", response_model=DraftResponse, summary="Save the in-progress booking for a listing")
async def save_draft(
    listing_id: str,
    payload: DraftSaveRequest,
    account: AccountDomain = Depends(get_current_account),
    service: DraftService = Depends(get_draft_service),
) -> DraftResponse:
    draft = await service.save_draft(account.id, listing_id, payload.details, payload.listing_title)
    return _to_draft_response(draft)


@router.get("/drafts/{listing_id}", response_model=DraftResponse, summary="Resume a saved draft")
async def get_draft(
    listing_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: DraftService = Depends(get_draft_service),
) -> DraftResponse:
    draft = await service.get_draft(account.id, listing_id)
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft not found")
    return _to_draft_response(draft)


@router.delete("/drafts/{listing_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Discard a draft")
async def delete_draft(
    listing_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: DraftService = Depends(get_draft_service),
) -> None:
    await service.delete_draft(account.id, listing_id)


@router.post("/{booking_id}/status", response_model=BookingResponse, summary="Move a booking to a new status")
async def update_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    account: AccountDomain = Depends(get_current_account),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = await service.get_booking(booking_id)
    if booking is None or (booking.user_id != account.id and not account.is_admin()):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    target = BookingStatus(payload.status)
    # the guest may only cancel; every other move is made by an administrator
    if not account.is_admin() and target is not booking.status and target not in GUEST_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only an administrator can move a booking to {target.value}",
        )
    try:
        updated = await service.update_status(booking_id, target)
    except BookingNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found") from exc
    except InvalidStatusTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _to_booking_response(updated)
