from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fiilar.modules.bookings import (
    BookingNotFoundError,
    BookingStatus,
    DraftService,
    InvalidBookingAmountError,
    InvalidStatusTransitionError,
)

from tests.fakes import complete_booking


class Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def drafts(draft_repo, clock, events) -> DraftService:
    return DraftService(draft_repo, clock=clock, events=events)


async def test_booking_lifecycle(booking_service):
    booking = await booking_service.create_booking(
        listing_id="l-1", user_id="u-1", total_price=Decimal("15000.00")
    )
    assert booking.status is BookingStatus.PENDING
    assert not await booking_service.has_completed_booking("u-1", "l-1")

    await booking_service.update_status(booking.id, BookingStatus.CONFIRMED)
    await booking_service.update_status(booking.id, BookingStatus.STARTED)
    completed = await booking_service.update_status(booking.id, BookingStatus.COMPLETED)

    assert completed.is_completed
    assert await booking_service.has_completed_booking("u-1", "l-1")
    assert [b.id for b in await booking_service.list_bookings("u-1")] == [booking.id]


async def test_completed_booking_is_final(booking_service):
    booking = await booking_service.create_booking(listing_id="l-1", user_id="u-1")
    await complete_booking(booking_service, booking.id)

    for status in (BookingStatus.PENDING, BookingStatus.CANCELLED):
        with pytest.raises(InvalidStatusTransitionError):
            await booking_service.update_status(booking.id, status)


async def test_cancelled_booking_is_final(booking_service):
    booking = await booking_service.create_booking(listing_id="l-1", user_id="u-1")
    await booking_service.update_status(booking.id, BookingStatus.CANCELLED)

    with pytest.raises(InvalidStatusTransitionError):
        await booking_service.update_status(booking.id, BookingStatus.CONFIRMED)


@pytest.mark.parametrize("skipped_to", [BookingStatus.COMPLETED, BookingStatus.STARTED])
async def test_pending_booking_cannot_skip_ahead(booking_service, skipped_to):
    booking = await booking_service.create_booking(listing_id="l-1", user_id="u-1")

    with pytest.raises(InvalidStatusTransitionError):
        await booking_service.update_status(booking.id, skipped_to)

    assert (await booking_service.get_booking(booking.id)).status is BookingStatus.PENDING


async def test_reserved_booking_goes_through_confirmation(booking_service):
    booking = await booking_service.create_booking(
        listing_id="l-1", user_id="u-1", status=BookingStatus.RESERVED
    )
    with pytest.raises(InvalidStatusTransitionError):
        await booking_service.update_status(booking.id, BookingStatus.STARTED)

    confirmed = await booking_service.update_status(booking.id, BookingStatus.CONFIRMED)
    assert confirmed.status is BookingStatus.CONFIRMED


async def test_same_status_is_a_no_op(booking_service):
    booking = await booking_service.create_booking(listing_id="l-1", user_id="u-1")

    again = await booking_service.update_status(booking.id, BookingStatus.PENDING)

    assert again.status is BookingStatus.PENDING


async def test_booking_fees_and_host_payout(booking_service):
    booking = await booking_service.create_booking(
        listing_id="l-1",
        user_id="u-1",
        total_price=Decimal("20000.00"),
        service_fee=Decimal("2000.00"),
        caution_fee=Decimal("5000.00"),
    )

    assert booking.host_payout == Decimal("13000.00")
    assert booking.payment_status is None


@pytest.mark.parametrize(
    "amounts",
    [
        {"total_price": Decimal("-1.00")},
        {"total_price": Decimal("100.00"), "service_fee": Decimal("-5.00")},
        {"total_price": Decimal("100.00"), "service_fee": Decimal("60.00"), "caution_fee": Decimal("50.00")},
    ],
)
async def test_invalid_booking_amounts_are_rejected(booking_service, booking_repo, amounts):
    with pytest.raises(InvalidBookingAmountError):
        await booking_service.create_booking(listing_id="l-1", user_id="u-1", **amounts)

    assert booking_repo.bookings == {}



async def test_update_unknown_booking(booking_service):
    with pytest.raises(BookingNotFoundError):
        await booking_service.update_status("missing", BookingStatus.CONFIRMED)


async def test_save_and_resume_draft(drafts, recorder):
    details = {"date": "2026-01-05", "hours": [10, 11], "guest_count": 4, "add_ons": ["projector"]}

    await drafts.save_draft("u-1", "l-1", details, "Loft studio")

    draft = await drafts.get_draft("u-1", "l-1")
    assert draft.details == details
    assert draft.listing_title == "Loft studio"
    assert await drafts.has_draft("u-1", "l-1")
    assert not await drafts.has_draft("u-2", "l-1")
    assert recorder.names() == ["drafts.updated"]


async def test_saving_again_overwrites(drafts):
    await drafts.save_draft("u-1", "l-1", {"guest_count": 1})
    await drafts.save_draft("u-1", "l-1", {"guest_count": 2})

    listed = await drafts.list_drafts("u-1")

    assert len(listed) == 1
    assert listed[0].details == {"guest_count": 2}


async def test_expired_draft_is_removed_on_read(drafts, draft_repo, clock):
    await drafts.save_draft("u-1", "l-1", {"days": 2})

    clock.advance(days=7)
    assert await drafts.get_draft("u-1", "l-1") is not None

    clock.advance(seconds=1)
    assert await drafts.get_draft("u-1", "l-1") is None
    assert draft_repo.drafts == {}


async def test_list_drafts_newest_first_and_capped(drafts, clock):
    for index in range(12):
        await drafts.save_draft("u-1", f"l-{index}", {"index": index})
        clock.advance(minutes=1)

    listed = await drafts.list_drafts("u-1")

    assert len(listed) == 10
    assert listed[0].listing_id == "l-11"
    assert listed[-1].listing_id == "l-2"


async def test_list_drafts_prunes_expired(drafts, clock):
    await drafts.save_draft("u-1", "old", {})
    clock.advance(days=6)
    await drafts.save_draft("u-1", "fresh", {})
    clock.advance(days=2)

    assert [draft.listing_id for draft in await drafts.list_drafts("u-1")] == ["fresh"]


async def test_delete_and_clear(drafts):
    await drafts.save_draft("u-1", "l-1", {})
    await drafts.save_draft("u-1", "l-2", {})
    await drafts.save_draft("u-2", "l-1", {})

    assert await drafts.delete_draft("u-1", "l-1")
    assert not await drafts.delete_draft("u-1", "l-1")
    assert await drafts.clear_drafts("u-1") == 1
    assert await drafts.list_drafts("u-1") == []
    assert len(await drafts.list_drafts("u-2")) == 1
