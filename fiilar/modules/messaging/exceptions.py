"""Messaging domain specific exceptions."""


class MessagingError(Exception):
    """Base class for messaging errors."""


class ConversationNotFoundError(MessagingError):
    """Raised when a conversation id does not exist."""


class MessageBlockedError(MessagingError):
    """Raised when the safety filter rejects a message before it is stored."""

    def __init__(self, reason: str, detail: str | None = None) -> None:
        super().__init__(f"Message blocked: {reason} detected.")
        self.reason = reason
        self.detail = detail
