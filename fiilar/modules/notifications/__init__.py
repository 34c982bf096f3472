"""Notification domain exports."""

from .models import Notification, NotificationCreateInput
from .repository import NotificationRepository
from .service import NotificationService

__all__ = [
    "Notification",
    "NotificationCreateInput",
    "NotificationRepository",
    "NotificationService",
]
