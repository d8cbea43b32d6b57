"""Chat turns sent through the shared dispatcher.

Each turn reuses the configuration of an LLM node (model, key, limits)
and sends the earlier messages of the session as history.
"""

from typing import Optional

from llmflow.core.dispatch import Dispatcher
from llmflow.core.graph.state import LLMNodeData
from llmflow.core.logging import get_logger, LogComponent
from llmflow.core.providers.base import GenerationError, GenerationRequest
from llmflow.core.chat.session import ChatMessage, ChatSession, ChatSessionStore, Sender

logger = get_logger(LogComponent.CHAT)


class ChatService:
    """Drives chat sessions: creating, deleting and sending messages."""

    def __init__(self, store: ChatSessionStore, dispatcher: Dispatcher):
        self.store = store
        self.dispatcher = dispatcher

    def new_session(self) -> ChatSession:
        """Create a session and make it the active one."""
        session = self.store.create()
        self.store.set_active(session.id)
        return session

    def delete_session(self, session_id: str) -> Optional[str]:
        """Delete a session; if it was active, activate the first remaining one.

        Returns:
            The active session ID after deletion, or None.
        """
        if self.store.delete(session_id):
            remaining = self.store.list()
            self.store.set_active(remaining[0].id if remaining else None)
        return self.store.active_id

    async def send(self, session_id: str, text: str, config: LLMNodeData) -> ChatSession:
        """Append a user message, ask the model, and append its reply.

        A failed generation is recorded as an AI message starting with
        "Error:" rather than raised. Blank input leaves the session as is.

        Raises:
            UnknownSession: If the session does not exist
        """
        session = self.store.get(session_id)
        if not text.strip():
            return session

        history = [message.to_message_param() for message in session.messages]
        messages = session.messages + [ChatMessage(text=text, sender=Sender.USER)]
        self.store.append_and_retitle(session_id, messages)

        outcome = await self.dispatcher.generate(GenerationRequest(
            provider=config.model,
            prompt=text,
            credential=config.api_key,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            history=history,
        ))

        if isinstance(outcome, GenerationError):
            logger.error(f"Chat turn in session {session_id} failed: {outcome.kind.value}")
            reply = ChatMessage(text=f"Error: {outcome.message}", sender=Sender.AI)
        else:
            reply = ChatMessage(text=outcome.text or "No response received", sender=Sender.AI)

        # the session may have been deleted while the call was in flight
        return self.store.append_and_retitle(session_id, messages + [reply])
