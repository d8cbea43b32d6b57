"""Provider adapters and the static provider registry."""

from llmflow.core.providers.base import (
    DeclaredRange,
    GenerationError,
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
    ProviderAdapter,
    ProviderWireRequest,
    ProviderWireResponse,
)
from llmflow.core.providers.openai import OpenAICompatibleAdapter
from llmflow.core.providers.deepseek import DeepseekAdapter
from llmflow.core.providers.gemini import GeminiAdapter
from llmflow.core.providers.registry import ProviderRegistry, default_registry
from llmflow.core.providers.transport import AiohttpTransport, Transport

__all__ = [
    # Generic contract
    "GenerationRequest",
    "GenerationResult",
    "GenerationError",
    "GenerationOutcome",
    "DeclaredRange",
    "ProviderWireRequest",
    "ProviderWireResponse",

    # Adapters
    "ProviderAdapter",
    "OpenAICompatibleAdapter",
    "DeepseekAdapter",
    "GeminiAdapter",

    # Wiring
    "ProviderRegistry",
    "default_registry",
    "Transport",
    "AiohttpTransport",
]
