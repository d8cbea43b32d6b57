"""llmflow - LLM workflow graphs over several model providers."""

from llmflow.core import (
    ChatService,
    ChatSessionStore,
    Dispatcher,
    GraphStore,
    NodeExecutor,
    configure_logging,
    LogLevel,
    LogComponent,
)

__all__ = [
    'Dispatcher',
    'GraphStore',
    'NodeExecutor',
    'ChatSessionStore',
    'ChatService',
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
