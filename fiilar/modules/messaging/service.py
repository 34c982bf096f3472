"""Conversation and message use cases."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.config import get_settings
from fiilar.core.events import MESSAGE_SENT, MESSAGES_READ, EventBus, event_bus
from fiilar.modules.notifications import NotificationCreateInput, NotificationService

from .exceptions import ConversationNotFoundError, MessageBlockedError
from .models import Conversation, Message
from .repository import MessagingRepository
from .safety import DEFAULT_MAX_LENGTH, SafetyCheckResult, check_message_safety

logger = logging.getLogger(__name__)

SafetyFilter = Callable[[str, int], SafetyCheckResult]


def preview(content: str, length: int = 50) -> str:
    if len(content) > length:
        return f"{content[:length]}..."
    return content


@dataclass(slots=True)
class MessagingService:
    repository: MessagingRepository
    notifications: NotificationService
    safety_filter: SafetyFilter = check_message_safety
    max_message_length: int = DEFAULT_MAX_LENGTH
    preview_length: int = 50
    events: EventBus = event_bus

    @classmethod
    def with_session(cls, session: AsyncSession, events: Optional[EventBus] = None) -> "MessagingService":
        from fiilar.infrastructure.database.repositories.messaging_repository import SqlMessagingRepository

        settings = get_settings()
        bus = events or event_bus
        return cls(
            SqlMessagingRepository(session),
            NotificationService.with_session(session, events=bus),
            max_message_length=settings.messaging.max_message_length,
            preview_length=settings.messaging.preview_length,
            events=bus,
        )

    async def start_conversation(self, user_id: str, host_id: str, listing_id: str | None = None) -> str:
        existing = await self.repository.find_conversation(user_id, host_id, listing_id)
        if existing is not None:
            return existing.id
        conversation = await self.repository.create_conversation((user_id, host_id), listing_id)
        logger.info("Conversation %s started between %s and %s", conversation.id, user_id, host_id)
        return conversation.id

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        return await self.repository.get_conversation(conversation_id)

    async def get_conversations(self, user_id: str) -> list[Conversation]:
        conversations = list(await self.repository.list_conversations(user_id))
        for conversation in conversations:
            conversation.unread_count = await self.repository.count_unread(conversation.id, user_id)
        conversations.sort(key=lambda conv: conv.updated_at, reverse=True)
        return conversations

    async def get_messages(self, conversation_id: str) -> list[Message]:
        return list(await self.repository.list_messages(conversation_id))

    async def send_message(self, conversation_id: str, content: str, sender_id: str) -> Message:
        verdict = self.safety_filter(content, self.max_message_length)
        if not verdict.is_safe:
            logger.warning(
                "Blocked message from %s in %s: %s", sender_id, conversation_id, verdict.flagged_reason
            )
            raise MessageBlockedError(verdict.flagged_reason or "other", verdict.flagged_content)

        conversation = await self.repository.get_conversation(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)

        message = await self.repository.add_message(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
        )
        await self.repository.touch_conversation(
            conversation_id,
            message_id=message.id,
            preview=preview(content, self.preview_length),
            timestamp=message.created_at,
        )

        recipient_id = conversation.other_participant(sender_id)
        if recipient_id:
            await self.notifications.add_notification(
                NotificationCreateInput(
                    user_id=recipient_id,
                    type="message",
                    title="New Message",
                    message=f'You have a new message: "{preview(content, self.preview_length)}"',
                    severity="info",
                    metadata={
                        "link": f"/dashboard?tab=messages&conversationId={conversation_id}",
                        "sender_id": sender_id,
                    },
                )
            )

        await self.events.publish(
            MESSAGE_SENT,
            {"user_id": recipient_id, "conversation_id": conversation_id, "message": asdict(message)},
        )
        return message

    async def mark_as_read(self, conversation_id: str, user_id: str) -> int:
        updated = await self.repository.mark_read(conversation_id, user_id)
        if updated:
            await self.events.publish(
                MESSAGES_READ,
                {"user_id": user_id, "conversation_id": conversation_id, "count": updated},
            )
        return updated
