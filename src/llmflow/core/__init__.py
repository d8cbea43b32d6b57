"""Core modules for llmflow."""

from llmflow.core.logging import configure_logging, LogLevel, LogComponent
from llmflow.core.errors import ErrorKind, GraphIntegrityError, LLMFlowError, ProviderError
from llmflow.core.config import DispatchConfig, ServerConfig
from llmflow.core.dispatch import Dispatcher
from llmflow.core.graph import GraphStore, NodeExecutor, PropagationEngine
from llmflow.core.chat import ChatService, ChatSessionStore

__all__ = [
    'Dispatcher',
    'DispatchConfig',
    'ServerConfig',
    'GraphStore',
    'PropagationEngine',
    'NodeExecutor',
    'ChatSessionStore',
    'ChatService',
    'ErrorKind',
    'LLMFlowError',
    'GraphIntegrityError',
    'ProviderError',
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
