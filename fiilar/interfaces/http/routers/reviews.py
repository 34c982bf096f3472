"""Listing reviews and ratings."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from fiilar.core.security import get_optional_account
from fiilar.interfaces.http.deps import get_review_service
from fiilar.modules.accounts import Account as AccountDomain
from fiilar.modules.reviews import ReviewCreateInput, ReviewService
from fiilar.schemas import RatingResponse, ReviewCreate, ReviewResponse

router = APIRouter()


@router.get("", response_model=list[ReviewResponse], summary="Reviews, optionally for one listing")
async def list_reviews(
    listing_id: Optional[str] = Query(None),
    service: ReviewService = Depends(get_review_service),
) -> list[ReviewResponse]:
    reviews = await service.get_reviews(listing_id)
    return [ReviewResponse.model_validate(review) for review in reviews]


@router.post(
    "",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a listing after a completed booking",
)
async def create_review(
    payload: ReviewCreate,
    account: Optional[AccountDomain] = Depends(get_optional_account),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    result = await service.add_review(
        ReviewCreateInput(
            listing_id=payload.listing_id,
            user_id=payload.user_id,
            rating=payload.rating,
            comment=payload.comment,
            booking_id=payload.booking_id,
        ),
        account,
    )
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"error": result.error})
    return ReviewResponse.model_validate(result.review)


@router.get("/listings/{listing_id}/rating", response_model=RatingResponse, summary="Average rating of a listing")
async def listing_rating(
    listing_id: str,
    service: ReviewService = Depends(get_review_service),
) -> RatingResponse:
    average = await service.get_average_rating(listing_id)
    reviews = await service.get_reviews(listing_id)
    return RatingResponse(
        listing_id=listing_id,
        average_rating=round(average, 1),
        review_count=len(reviews),
    )
