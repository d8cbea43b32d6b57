"""Static registry mapping provider IDs to adapters."""

from typing import Dict, Iterable, List

from llmflow.core.errors import ErrorKind, ProviderError
from llmflow.core.logging import get_logger, LogComponent
from llmflow.core.providers.base import DeclaredRange, ProviderAdapter
from llmflow.core.providers.deepseek import DeepseekAdapter
from llmflow.core.providers.gemini import GeminiAdapter
from llmflow.core.providers.openai import OpenAICompatibleAdapter

logger = get_logger(LogComponent.PROVIDERS)


class ProviderRegistry:
    """Adapters keyed by provider ID.

    Built once at startup and handed to the dispatcher. Lookups never fall
    back to another provider.
    """

    def __init__(self, adapters: Iterable[ProviderAdapter] = ()):
        self._adapters: Dict[str, ProviderAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: ProviderAdapter) -> None:
        if adapter.provider_id in self._adapters:
            raise ValueError(f"Provider already registered: {adapter.provider_id}")
        self._adapters[adapter.provider_id] = adapter
        logger.debug(f"Registered provider {adapter.provider_id} -> {type(adapter).__name__}({adapter.model})")

    def resolve(self, provider_id: str) -> ProviderAdapter:
        """Raises ProviderError(UnsupportedModel) for an unknown ID."""
        try:
            return self._adapters[provider_id]
        except KeyError:
            raise ProviderError(
                ErrorKind.UNSUPPORTED_MODEL,
                f"Unsupported model: {provider_id}",
            ) from None

    def __contains__(self, provider_id: str) -> bool:
        return provider_id in self._adapters

    def provider_ids(self) -> List[str]:
        return list(self._adapters)


def default_registry() -> ProviderRegistry:
    """The providers offered by the workflow editor, with their parameter ranges."""
    deepseek_limits = DeclaredRange(
        max_tokens_range=(1, 2000),
        temperature_range=(0.0, 1.0),
        default_max_tokens=1000,
        default_temperature=0.7,
    )
    return ProviderRegistry([
        OpenAICompatibleAdapter(
            provider_id="gpt-3.5-turbo",
            model="gpt-3.5-turbo",
            limits=DeclaredRange(
                max_tokens_range=(1, 2000),
                temperature_range=(0.0, 2.0),
                default_max_tokens=1000,
                default_temperature=0.7,
            ),
        ),
        OpenAICompatibleAdapter(
            provider_id="gpt-4",
            model="gpt-4",
            limits=DeclaredRange(
                max_tokens_range=(1, 4000),
                temperature_range=(0.0, 2.0),
                default_max_tokens=2000,
                default_temperature=0.7,
            ),
        ),
        # the editor sends "deepseek"; older clients send the wire model name
        DeepseekAdapter(provider_id="deepseek", limits=deepseek_limits),
        DeepseekAdapter(provider_id="deepseek-chat", limits=deepseek_limits),
        GeminiAdapter(
            provider_id="gemini-pro",
            limits=DeclaredRange(
                max_tokens_range=(1, 2048),
                temperature_range=(0.0, 1.0),
                default_max_tokens=1000,
                default_temperature=0.7,
            ),
        ),
    ])
