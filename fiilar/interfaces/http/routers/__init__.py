from fastapi import APIRouter

from fiilar.interfaces.http.routers import (
    auth,
    bookings,
    conversations,
    escrow,
    notifications,
    reviews,
    wallet,
)


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
    router.include_router(conversations.router, prefix="/conversations", tags=["messaging"])
    router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
    router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
    router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
    router.include_router(escrow.router, prefix="/escrow", tags=["escrow"])
    return router


__all__ = [
    "create_api_router",
]
