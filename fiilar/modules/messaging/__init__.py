"""Messaging domain exports."""

from .exceptions import ConversationNotFoundError, MessageBlockedError, MessagingError
from .models import Conversation, Message
from .repository import MessagingRepository
from .safety import SafetyCheckResult, check_message_safety
from .service import MessagingService

__all__ = [
    "Conversation",
    "ConversationNotFoundError",
    "Message",
    "MessageBlockedError",
    "MessagingError",
    "MessagingRepository",
    "MessagingService",
    "SafetyCheckResult",
    "check_message_safety",
]
