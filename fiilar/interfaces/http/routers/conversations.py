"""Conversations between guests and hosts."""
from fastapi import APIRouter, Depends, HTTPException, status

from fiilar.core.security import get_current_account
from fiilar.interfaces.http.deps import get_messaging_service
from fiilar.modules.accounts import Account as AccountDomain
from fiilar.modules.messaging import (
    Conversation,
    ConversationNotFoundError,
    MessageBlockedError,
    MessagingService,
)
from fiilar.schemas import (
    ConversationResponse,
    ConversationStartRequest,
    ConversationStartResponse,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
)

router = APIRouter()


async def _participant_conversation(
    service: MessagingService, conversation_id: str, account: AccountDomain
) -> Conversation:
    conversation = await service.get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
    if not conversation.has_participant(account.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a participant in this conversation")
    return conversation


@router.get("", response_model=list[ConversationResponse], summary="Conversations of the current account")
async def list_conversations(
    account: AccountDomain = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
) -> list[ConversationResponse]:
    conversations = await service.get_conversations(account.id)
    return [ConversationResponse.model_validate(conversation) for conversation in conversations]


@router.post("", response_model=ConversationStartResponse, summary="Open or reuse a conversation with a host")
async def start_conversation(
    payload: ConversationStartRequest,
    account: AccountDomain = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
) -> ConversationStartResponse:
    if payload.host_id == account.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot start a conversation with yourself")
    conversation_id = await service.start_conversation(account.id, payload.host_id, payload.listing_id)
    return ConversationStartResponse(conversation_id=conversation_id)


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse], summary="Messages, oldest first")
async def list_messages(
    conversation_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
) -> list[MessageResponse]:
    await _participant_conversation(service, conversation_id, account)
    messages = await service.get_messages(conversation_id)
    return [MessageResponse.model_validate(message) for message in messages]


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message after the safety check",
)
async def send_message(
    conversation_id: str,
    payload: MessageCreate,
    account: AccountDomain = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
) -> MessageResponse:
    await _participant_conversation(service, conversation_id, account)
    try:
        message = await service.send_message(conversation_id, payload.content, account.id)
    except MessageBlockedError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"reason": exc.reason, "message": str(exc)},
        ) from exc
    except ConversationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found") from exc
    return MessageResponse.model_validate(message)


@router.post("/{conversation_id}/read", response_model=MarkReadResponse, summary="Mark incoming messages as read")
async def mark_read(
    conversation_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
) -> MarkReadResponse:
    await _participant_conversation(service, conversation_id, account)
    updated = await service.mark_as_read(conversation_id, account.id)
    return MarkReadResponse(updated=updated)
