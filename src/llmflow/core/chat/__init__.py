"""Chat sessions and the chat service."""

from llmflow.core.chat.session import (
    ChatMessage,
    ChatSession,
    ChatSessionStore,
    Sender,
    derive_title,
)
from llmflow.core.chat.service import ChatService

__all__ = [
    "ChatMessage",
    "ChatSession",
    "ChatSessionStore",
    "ChatService",
    "Sender",
    "derive_title",
]
