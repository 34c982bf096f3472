from dataclasses import replace

import pytest

from fiilar.modules.bookings import BookingStatus
from fiilar.modules.reviews import ReviewCreateInput, review_gate

from tests.fakes import complete_booking, make_account

LISTING = "listing-1"


@pytest.fixture
def guest():
    return make_account("guest-1")


def _payload(user_id: str, rating: int = 5) -> ReviewCreateInput:
    return ReviewCreateInput(listing_id=LISTING, user_id=user_id, rating=rating, comment="Lovely space")


async def _complete_booking(booking_service, user_id: str) -> str:
    booking = await booking_service.create_booking(listing_id=LISTING, user_id=user_id)
    await complete_booking(booking_service, booking.id)
    return booking.id


async def test_unauthenticated_review_is_rejected(review_service):
    result = await review_service.add_review(_payload("guest-1"), None)
    assert not result.success
    assert result.error == "unauthenticated"


async def test_reviewing_as_someone_else_is_rejected(review_service, guest):
    result = await review_service.add_review(_payload("someone-else"), guest)
    assert result.error == "user_mismatch"


async def test_review_requires_completed_booking(review_service, booking_service, guest):
    booking = await booking_service.create_booking(listing_id=LISTING, user_id=guest.id)
    await booking_service.update_status(booking.id, BookingStatus.CONFIRMED)

    result = await review_service.add_review(_payload(guest.id), guest)

    assert result.error == "booking_not_completed"


async def test_completed_booking_allows_one_review(review_service, booking_service, guest, recorder):
    booking_id = await _complete_booking(booking_service, guest.id)

    result = await review_service.add_review(_payload(guest.id), guest)
    assert result.success
    assert result.review.booking_id == booking_id
    assert recorder.names() == ["review.created"]

    second = await review_service.add_review(_payload(guest.id, rating=1), guest)
    assert second.error == "already_reviewed"
    assert len(await review_service.get_reviews(LISTING)) == 1


async def test_admin_bypasses_booking_requirement(review_service):
    admin = make_account("admin-1", role="admin")
    result = await review_service.add_review(_payload(admin.id, rating=4), admin)
    assert result.success


async def test_average_rating(review_service, booking_service):
    assert await review_service.get_average_rating(LISTING) == 0

    for user_id, rating in (("u1", 5), ("u2", 4), ("u3", 4)):
        await _complete_booking(booking_service, user_id)
        result = await review_service.add_review(_payload(user_id, rating), make_account(user_id))
        assert result.success

    assert await review_service.get_average_rating(LISTING) == pytest.approx(13 / 3)
    assert len(await review_service.get_reviews()) == 3

async def test_foreign_booking_id_does_not_unlock_review(review_service, booking_service, guest):
    other = await booking_service.create_booking(listing_id=LISTING, user_id="someone-else")
    await complete_booking(booking_service, other.id)

    payload = replace(_payload(guest.id), booking_id=other.id)
    result = await review_service.add_review(payload, guest)

    assert result.error == "booking_not_completed"


async def test_booking_id_for_another_listing_is_ignored(review_service, booking_service, guest):
    elsewhere = await booking_service.create_booking(listing_id="listing-2", user_id=guest.id)
    await complete_booking(booking_service, elsewhere.id)

    result = await review_service.add_review(replace(_payload(guest.id), booking_id=elsewhere.id), guest)

    assert result.error == "booking_not_completed"


async def test_unknown_booking_id_is_not_stored_for_admin(review_service):
    admin = make_account("admin-1", role="admin")

    result = await review_service.add_review(replace(_payload(admin.id), booking_id="no-such-booking"), admin)

    assert result.success
    assert result.review.booking_id is None


async def test_concurrent_duplicate_reports_already_reviewed(
    review_service, review_repo, booking_service, guest, recorder, monkeypatch
):
    await _complete_booking(booking_service, guest.id)
    assert (await review_service.add_review(_payload(guest.id), guest)).success

    # a second request that passed its duplicate check before the first one stored its review
    async def not_found_yet(user_id, listing_id):
        return None

    monkeypatch.setattr(review_repo, "find_by_user_and_listing", not_found_yet)
    result = await review_service.add_review(_payload(guest.id, rating=2), guest)

    assert not result.success
    assert result.error == "already_reviewed"
    assert len(review_repo.reviews) == 1
    assert recorder.names() == ["review.created"]



def test_gate_checks_run_in_order():
    guest = make_account("guest-1")
    payload = _payload("other", rating=9)

    assert review_gate(payload, None, has_completed_booking=False, already_reviewed=True) == "unauthenticated"
    assert review_gate(payload, guest, has_completed_booking=False, already_reviewed=True) == "user_mismatch"

    own = _payload(guest.id, rating=9)
    assert review_gate(own, guest, has_completed_booking=False, already_reviewed=True) == "booking_not_completed"
    assert review_gate(own, guest, has_completed_booking=True, already_reviewed=True) == "already_reviewed"
    assert review_gate(own, guest, has_completed_booking=True, already_reviewed=False) == "invalid_rating"
    assert review_gate(_payload(guest.id), guest, has_completed_booking=True, already_reviewed=False) is None
