"""Notification inbox for the current account."""
from fastapi import APIRouter, Depends, HTTPException, status

from fiilar.core.security import get_current_account
from fiilar.interfaces.http.deps import get_notification_service
from fiilar.modules.accounts import Account as AccountDomain
from fiilar.modules.notifications import NotificationService
from fiilar.schemas import MarkReadResponse, NotificationResponse, UnreadCountResponse

router = APIRouter()


@router.get("", response_model=list[NotificationResponse], summary="Notifications, newest first")
async def list_notifications(
    account: AccountDomain = Depends(get_current_account),
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationResponse]:
    notifications = await service.get_notifications(account.id)
    return [NotificationResponse.model_validate(item) for item in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Number of unread notifications")
async def unread_count(
    account: AccountDomain = Depends(get_current_account),
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=await service.get_unread_count(account.id))


@router.post("/read-all", response_model=MarkReadResponse, summary="Mark every notification as read")
async def mark_all_read(
    account: AccountDomain = Depends(get_current_account),
    service: NotificationService = Depends(get_notification_service),
) -> MarkReadResponse:
    return MarkReadResponse(updated=await service.mark_all_as_read(account.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse, summary="Mark one notification as read")
async def mark_read(
    notification_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    existing = await service.get_notification(notification_id)
    if existing is None or existing.user_id != account.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    notification = await service.mark_as_read(notification_id)
    return NotificationResponse.model_validate(notification)


@router.delete("", status_code=status.HTTP_200_OK, summary="Delete all notifications of the current account")
async def clear_notifications(
    account: AccountDomain = Depends(get_current_account),
    service: NotificationService = Depends(get_notification_service),
) -> dict:
    removed = await service.clear_all(account.id)
    return {"removed": removed}
