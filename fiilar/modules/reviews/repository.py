"""Repository protocol for reviews."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Review, ReviewCreateInput


class ReviewRepository(Protocol):
    async def add(self, payload: ReviewCreateInput) -> Review:
        ...

    async def find_by_user_and_listing(self, user_id: str, listing_id: str) -> Review | None:
        ...

    async def list_reviews(self, listing_id: str | None = None) -> Sequence[Review]:
        ...

    async def average_rating(self, listing_id: str) -> float | None:
        ...
