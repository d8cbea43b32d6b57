"""Chat sessions: conversation threads kept apart from the workflow graph."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Sequence

from mirascope.core import BaseMessageParam
from pydantic import BaseModel, Field

from llmflow.core.errors import UnknownSession
from llmflow.core.logging import get_logger, LogComponent

logger = get_logger(LogComponent.CHAT)

DEFAULT_TITLE = "New Chat"
TITLE_LENGTH = 30


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Sender(str, Enum):
    USER = "user"
    AI = "ai"


class ChatMessage(BaseModel):
    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=_now)

    def to_message_param(self) -> BaseMessageParam:
        role = "user" if self.sender == Sender.USER else "assistant"
        return BaseMessageParam(role=role, content=self.text)


class ChatSession(BaseModel):
    """An ordered conversation thread.

    Attributes:
        id: Session identifier
        title: First user message, truncated; "New Chat" until there is one
        messages: Messages in order
        created_at: Creation time
        last_updated: Time of the last message replacement
    """
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str = DEFAULT_TITLE
    messages: List[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    last_updated: datetime = Field(default_factory=_now)


def derive_title(messages: Sequence[ChatMessage]) -> str:
    """Title from the first user message: 30 characters, with "..." if it was longer."""
    first = next((m for m in messages if m.sender == Sender.USER), None)
    if first is None:
        return DEFAULT_TITLE
    if len(first.text) > TITLE_LENGTH:
        return first.text[:TITLE_LENGTH] + "..."
    return first.text


class ChatSessionStore:
    """In-memory session store.

    Sessions live until deleted explicitly. Callers get deep copies, so the
    only way to change a session is through the store's methods.
    """

    def __init__(self):
        self._sessions: Dict[str, ChatSession] = {}
        self.active_id: Optional[str] = None

    def create(self) -> ChatSession:
        now = _now()
        session = ChatSession(created_at=now, last_updated=now)
        self._sessions[session.id] = session
        logger.info(f"Created chat session {session.id}")
        return session.model_copy(deep=True)

    def get(self, session_id: str) -> ChatSession:
        return self._require(session_id).model_copy(deep=True)

    def list(self) -> List[ChatSession]:
        """Sessions in creation order."""
        return [session.model_copy(deep=True) for session in self._sessions.values()]

    def append_and_retitle(self, session_id: str, messages: Sequence[ChatMessage]) -> ChatSession:
        """Replace the session's messages and recompute its title.

        Raises:
            UnknownSession: If the session does not exist
        """
        session = self._require(session_id)
        session.messages = [message.model_copy() for message in messages]
        session.title = derive_title(session.messages)
        session.last_updated = _now()
        logger.debug(f"Session {session_id}: {len(session.messages)} message(s), title {session.title!r}")
        return session.model_copy(deep=True)

    def delete(self, session_id: str) -> bool:
        """Remove a session.

        If it was the active session, ``active_id`` becomes None and the
        caller chooses what to activate next.

        Returns:
            True if the deleted session was the active one.

        Raises:
            UnknownSession: If the session does not exist
        """
        self._require(session_id)
        del self._sessions[session_id]
        was_active = self.active_id == session_id
        if was_active:
            self.active_id = None
        logger.info(f"Deleted chat session {session_id}")
        return was_active

    def set_active(self, session_id: Optional[str]) -> None:
        if session_id is not None:
            self._require(session_id)
        self.active_id = session_id

    def __len__(self) -> int:
        return len(self._sessions)

    def _require(self, session_id: str) -> ChatSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise UnknownSession(session_id) from None
