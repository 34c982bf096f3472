"""SQLAlchemy repository for conversations and messages."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.timeutils import as_utc
from fiilar.db.models import Conversation as ConversationModel
from fiilar.db.models import Message as MessageModel
from fiilar.modules.messaging.models import Conversation, Message


class SqlMessagingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_conversation(
        self, user_id: str, other_id: str, listing_id: str | None
    ) -> Conversation | None:
        pair = or_(
            and_(ConversationModel.participant_one == user_id, ConversationModel.participant_two == other_id),
            and_(ConversationModel.participant_one == other_id, ConversationModel.participant_two == user_id),
        )
        listing_clause = (
            ConversationModel.listing_id.is_(None)
            if listing_id is None
            else ConversationModel.listing_id == listing_id
        )
        stmt = select(ConversationModel).where(pair, listing_clause)
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_conversation(model) if model else None

    async def create_conversation(
        self, participants: tuple[str, str], listing_id: str | None
    ) -> Conversation:
        model = ConversationModel(
            participant_one=participants[0],
            participant_two=participants[1],
            listing_id=listing_id,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_conversation(model)

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        model = await self._session.get(ConversationModel, conversation_id)
        return self._to_conversation(model) if model else None

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        stmt = (
            select(ConversationModel)
            .where(
                or_(
                    ConversationModel.participant_one == user_id,
                    ConversationModel.participant_two == user_id,
                )
            )
            .order_by(ConversationModel.updated_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_conversation(model) for model in result.scalars().all()]

    async def add_message(self, *, conversation_id: str, sender_id: str, content: str) -> Message:
        seq_stmt = select(func.coalesce(func.max(MessageModel.seq), 0)).where(
            MessageModel.conversation_id == conversation_id
        )
        next_seq = (await self._session.execute(seq_stmt)).scalar_one() + 1
        model = MessageModel(
            conversation_id=conversation_id,
            seq=next_seq,
            sender_id=sender_id,
            content=content,
            read=False,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_message(model)

    async def touch_conversation(
        self, conversation_id: str, *, message_id: str, preview: str, timestamp: datetime
    ) -> None:
        model = await self._session.get(ConversationModel, conversation_id)
        if model is None:
            return
        model.last_message_id = message_id
        model.last_message_preview = preview
        model.updated_at = timestamp
        await self._session.flush()

    async def list_messages(self, conversation_id: str) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.seq)
        )
        result = await self._session.execute(stmt)
        return [self._to_message(model) for model in result.scalars().all()]

    async def count_unread(self, conversation_id: str, user_id: str) -> int:
        stmt = select(func.count(MessageModel.id)).where(
            MessageModel.conversation_id == conversation_id,
            MessageModel.sender_id != user_id,
            MessageModel.read.is_(False),
        )
        return int((await self._session.execute(stmt)).scalar_one())

    async def mark_read(self, conversation_id: str, user_id: str) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.sender_id != user_id,
                MessageModel.read.is_(False),
            )
            .values(read=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    def _to_conversation(model: ConversationModel) -> Conversation:
        return Conversation(
            id=model.id,
            participants=(model.participant_one, model.participant_two),
            listing_id=model.listing_id,
            last_message_id=model.last_message_id,
            last_message_preview=model.last_message_preview,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    @staticmethod
    def _to_message(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            conversation_id=model.conversation_id,
            sender_id=model.sender_id,
            content=model.content,
            read=bool(model.read),
            created_at=as_utc(model.created_at),
        )
