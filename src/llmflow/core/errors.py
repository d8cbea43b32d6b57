"""Error taxonomy shared by the graph, dispatch and chat layers.

Two families live here:

1. Graph-integrity errors (``GraphIntegrityError`` and subclasses) are
   programming errors. They are raised immediately and never retried.
2. Provider errors (``ProviderError``) are raised inside the dispatch
   layer and converted into a ``GenerationError`` value before they reach
   callers of ``Dispatcher.generate``.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Normalized error kinds."""
    MISSING_PARAMETER = "MissingParameter"
    UNSUPPORTED_MODEL = "UnsupportedModel"
    INVALID_EDGE = "InvalidEdge"
    DUPLICATE_EDGE = "DuplicateEdge"
    UNKNOWN_NODE = "UnknownNode"
    UNKNOWN_SESSION = "UnknownSession"
    AUTH_ERROR = "AuthError"
    RATE_LIMITED = "RateLimited"
    PROVIDER_UNAVAILABLE = "ProviderUnavailable"
    BAD_REQUEST = "BadRequest"
    INVALID_RESPONSE_SHAPE = "InvalidResponseShape"
    NETWORK_TIMEOUT = "NetworkTimeout"


class LLMFlowError(Exception):
    """Base class for all llmflow exceptions."""
    kind: Optional[ErrorKind] = None


class GraphIntegrityError(LLMFlowError, ValueError):
    """A caller asked for something the graph or session state cannot satisfy."""


class UnknownNode(GraphIntegrityError):
    kind = ErrorKind.UNKNOWN_NODE

    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class DuplicateNode(GraphIntegrityError):
    def __init__(self, node_id: str):
        super().__init__(f"Node already exists: {node_id}")
        self.node_id = node_id


class InvalidEdge(GraphIntegrityError):
    kind = ErrorKind.INVALID_EDGE

    def __init__(self, source: str, target: str, reason: str):
        super().__init__(f"Invalid edge {source} -> {target}: {reason}")
        self.source = source
        self.target = target


class DuplicateEdge(GraphIntegrityError):
    kind = ErrorKind.DUPLICATE_EDGE

    def __init__(self, source: str, target: str):
        super().__init__(f"Edge already exists: {source} -> {target}")
        self.source = source
        self.target = target


class InvalidNodeData(GraphIntegrityError):
    """A partial update does not fit the node's data variant."""

    def __init__(self, node_id: str, detail: str):
        super().__init__(f"Invalid data for node {node_id}: {detail}")
        self.node_id = node_id


class NotExecutable(GraphIntegrityError):
    def __init__(self, node_id: str, kind: str):
        super().__init__(f"Node {node_id} of kind '{kind}' cannot be executed")
        self.node_id = node_id


class UnknownSession(GraphIntegrityError):
    kind = ErrorKind.UNKNOWN_SESSION

    def __init__(self, session_id: str):
        super().__init__(f"Chat session not found: {session_id}")
        self.session_id = session_id


class ProviderError(LLMFlowError):
    """A failure on the provider side of a generation call."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        provider_detail: Optional[Any] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.provider_detail = provider_detail


class InvalidResponseShape(ProviderError):
    def __init__(self, message: str, provider_detail: Optional[Any] = None):
        super().__init__(ErrorKind.INVALID_RESPONSE_SHAPE, message, provider_detail)


class TransportError(ProviderError):
    """The request never produced an HTTP response.

    ``transient`` failures (timeouts, dropped connections) are the only ones
    the dispatcher retries.
    """

    def __init__(self, kind: ErrorKind, message: str, transient: bool = False):
        super().__init__(kind, message)
        self.transient = transient
