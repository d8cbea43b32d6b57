"""Provider adapter contract and the generic request/response types.

An adapter translates between the generic generation contract and one
provider's HTTP wire format. Adapters never perform I/O; the dispatcher
sends the wire request they build and hands the reply back to them.
"""

import math
from typing import Any, Dict, List, Optional, Tuple, Union

from mirascope.core import BaseMessageParam
from pydantic import BaseModel, ConfigDict, Field

from llmflow.core.errors import ErrorKind, InvalidResponseShape


class GenerationRequest(BaseModel):
    """A provider-independent generation request.

    Attributes:
        provider: Registry ID of the provider/model (e.g. "gpt-4")
        prompt: The user prompt
        credential: API key for the provider
        max_tokens: Requested completion budget; provider default when None
        temperature: Requested sampling temperature; provider default when None
        history: Earlier conversation turns sent before the prompt
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    provider: str = ""
    prompt: str = ""
    credential: str = Field(default="", repr=False)
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    history: List[BaseMessageParam] = Field(default_factory=list)


class GenerationResult(BaseModel):
    text: str
    provider: Optional[str] = None
    model: Optional[str] = None


class GenerationError(BaseModel):
    kind: ErrorKind
    message: str
    provider_detail: Optional[Any] = None


GenerationOutcome = Union[GenerationResult, GenerationError]


class DeclaredRange(BaseModel):
    """Accepted parameter ranges and defaults for one provider/model."""
    model_config = ConfigDict(frozen=True)

    max_tokens_range: Tuple[int, int]
    temperature_range: Tuple[float, float]
    default_max_tokens: int = 1000
    default_temperature: float = 0.7

    def clamp_max_tokens(self, value: Optional[int]) -> int:
        if value is None:
            value = self.default_max_tokens
        low, high = self.max_tokens_range
        return min(max(value, low), high)

    def clamp_temperature(self, value: Optional[float]) -> float:
        if value is None or not math.isfinite(value):
            value = self.default_temperature
        low, high = self.temperature_range
        return min(max(value, low), high)


class ProviderWireRequest(BaseModel):
    """An HTTP request ready to be sent; opaque to dispatcher callers."""
    method: str = "POST"
    url: str
    headers: Dict[str, str] = Field(default_factory=dict, repr=False)
    payload: Dict[str, Any] = Field(default_factory=dict)


class ProviderWireResponse(BaseModel):
    """An HTTP reply. ``body`` is the decoded JSON, or the raw text if it was not JSON."""
    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class ProviderAdapter(BaseModel):
    """Base class for provider adapters.

    Subclasses implement ``build_request`` and ``parse_response``; the error
    classification below covers the common HTTP status conventions and can
    be refined per provider.

    Attributes:
        provider_id: Registry key this adapter is served under
        model: Model name sent to the provider
        base_url: Provider API root
        limits: Accepted parameter ranges and defaults
    """
    model_config = ConfigDict(frozen=True)

    provider_id: str
    model: str
    base_url: str
    limits: DeclaredRange

    def declared_range(self) -> DeclaredRange:
        return self.limits

    def build_request(self, request: GenerationRequest) -> ProviderWireRequest:
        """Translate a (clamped) generic request into the provider's wire format."""
        raise NotImplementedError("Subclasses must implement build_request()")

    def parse_response(self, body: Any) -> GenerationResult:
        """Extract the generated text.

        Raises:
            InvalidResponseShape: If the expected fields are absent
        """
        raise NotImplementedError("Subclasses must implement parse_response()")

    def classify_error(self, status: int, body: Any) -> ErrorKind:
        """Map an HTTP error reply to a normalized error kind."""
        if status == 401:
            return ErrorKind.AUTH_ERROR
        if status == 429:
            return ErrorKind.RATE_LIMITED
        if status >= 500:
            return ErrorKind.PROVIDER_UNAVAILABLE
        if 400 <= status < 500:
            return ErrorKind.BAD_REQUEST
        return ErrorKind.PROVIDER_UNAVAILABLE

    def error_message(self, status: int, body: Any) -> str:
        """Best human-readable message from an error reply.

        Most providers nest it as ``{"error": {"message": ...}}``.
        """
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
        if isinstance(body, str) and body.strip():
            return body.strip()[:500]
        return f"HTTP {status}"

    def history_messages(self, request: GenerationRequest) -> List[Dict[str, str]]:
        """Flatten history params to ``{"role", "content"}`` dicts with text content only."""
        messages = []
        for message in request.history:
            content = message.content
            if not isinstance(content, str):
                content = "".join(getattr(part, "text", "") for part in content)
            messages.append({"role": message.role, "content": content})
        return messages


def dig(body: Any, *path: Union[str, int]) -> Any:
    """Follow ``path`` through nested dicts/lists.

    Raises:
        InvalidResponseShape: If any step is missing
    """
    current = body
    for step in path:
        try:
            current = current[step]
        except (KeyError, IndexError, TypeError):
            trail = ".".join(str(p) for p in path)
            raise InvalidResponseShape(
                f"Provider response is missing '{trail}'",
                provider_detail=body,
            ) from None
    return current
