"""Repository protocol for conversations and messages."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import Conversation, Message


class MessagingRepository(Protocol):
    async def find_conversation(
        self, user_id: str, other_id: str, listing_id: str | None
    ) -> Conversation | None:
        ...

    async def create_conversation(
        self, participants: tuple[str, str], listing_id: str | None
    ) -> Conversation:
        ...

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        ...

    async def list_conversations(self, user_id: str) -> Sequence[Conversation]:
        ...

    async def add_message(self, *, conversation_id: str, sender_id: str, content: str) -> Message:
        ...

    async def touch_conversation(
        self, conversation_id: str, *, message_id: str, preview: str, timestamp: datetime
    ) -> None:
        ...

    async def list_messages(self, conversation_id: str) -> Sequence[Message]:
        ...

    async def count_unread(self, conversation_id: str, user_id: str) -> int:
        ...

    async def mark_read(self, conversation_id: str, user_id: str) -> int:
        ...
