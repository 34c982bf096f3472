"""Domain models for conversations and messages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Message:
    id: str
    conversation_id: str
    sender_id: str
    content: str
    read: bool
    created_at: datetime


@dataclass(slots=True)
class Conversation:
    id: str
    participants: tuple[str, str]
    listing_id: Optional[str]
    last_message_id: Optional[str]
    last_message_preview: Optional[str]
    created_at: datetime
    updated_at: datetime
    unread_count: int = 0

    def other_participant(self, user_id: str) -> Optional[str]:
        for participant in self.participants:
            if participant != user_id:
                return participant
        return None

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants
