"""Application services."""
from fileshare.application.services.chat_service import ChatService, MessageRejected

__all__ = ["ChatService", "MessageRejected"]
