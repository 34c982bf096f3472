"""Domain models for user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

NotificationType = Literal["damage_report", "complaint", "platform_update", "booking", "message", "review"]
Severity = Literal["info", "warning", "urgent"]


@dataclass(slots=True)
class Notification:
    id: str
    user_id: str
    type: str
    title: str
    message: str
    severity: str
    read: bool
    action_required: bool
    metadata: dict[str, Any]
    created_at: datetime


@dataclass(slots=True)
class NotificationCreateInput:
    user_id: str
    type: NotificationType
    title: str
    message: str
    severity: Severity = "info"
    action_required: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
