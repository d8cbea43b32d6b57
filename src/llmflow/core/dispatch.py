"""Dispatcher: one generation contract over several LLM providers.

``Dispatcher.generate`` validates a request, resolves the adapter for its
provider ID, clamps parameters into the provider's declared range, sends
the wire request with a bounded timeout and a single retry on transient
transport failures, and normalizes the outcome.

Example:
    ```python
    dispatcher = Dispatcher()
    outcome = await dispatcher.generate(GenerationRequest(
        provider="gpt-4",
        prompt="Summarize the plot of Hamlet",
        credential=api_key,
    ))
    if isinstance(outcome, GenerationError):
        ...
    ```
"""

from typing import Optional

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_fixed

from llmflow.core.config import DispatchConfig
from llmflow.core.errors import ErrorKind, InvalidResponseShape, ProviderError, TransportError
from llmflow.core.logging import get_logger, log_verbose, mask_secret, LogComponent
from llmflow.core.providers.base import (
    GenerationError,
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
    ProviderAdapter,
    ProviderWireRequest,
    ProviderWireResponse,
)
from llmflow.core.providers.registry import ProviderRegistry, default_registry
from llmflow.core.providers.transport import AiohttpTransport, Transport

logger = get_logger(LogComponent.DISPATCH)


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, TransportError) and error.transient


class Dispatcher:
    """Selects an adapter, executes the call and normalizes results and errors.

    The dispatcher keeps no per-call state; one instance can serve any
    number of concurrent ``generate`` calls.

    Attributes:
        registry: Provider ID -> adapter lookup
        transport: Sends wire requests
        config: Timeout and retry policy
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        transport: Optional[Transport] = None,
        config: Optional[DispatchConfig] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.transport = transport if transport is not None else AiohttpTransport()
        self.config = config if config is not None else DispatchConfig()

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        """Run one generation.

        Never raises for provider-side failures: every ``ProviderError`` is
        returned as a ``GenerationError``.
        """
        try:
            return await self._generate(request)
        except ProviderError as e:
            logger.warning(f"Generation via '{request.provider}' failed: {e.kind.value}: {e.message}")
            return GenerationError(
                kind=e.kind,
                message=e.message,
                provider_detail=e.provider_detail,
            )

    async def _generate(self, request: GenerationRequest) -> GenerationResult:
        self._check_required(request)
        adapter = self.registry.resolve(request.provider)
        prepared = self._clamp(adapter, request)
        wire = adapter.build_request(prepared)

        logger.provider(
            f"→ {adapter.provider_id} ({adapter.model}) "
            f"key={mask_secret(request.credential)} "
            f"max_tokens={prepared.max_tokens} temperature={prepared.temperature}"
        )
        response = await self._send(wire)

        if not response.ok:
            kind = adapter.classify_error(response.status, response.body)
            raise ProviderError(
                kind,
                adapter.error_message(response.status, response.body),
                provider_detail=response.body,
            )

        try:
            result = adapter.parse_response(response.body)
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            raise InvalidResponseShape(f"Unreadable provider response: {e}", provider_detail=response.body) from e
        logger.provider(f"← {adapter.provider_id}: {len(result.text)} chars")
        return result

    @staticmethod
    def _check_required(request: GenerationRequest) -> None:
        missing = [
            name for name in ("provider", "prompt", "credential")
            if not getattr(request, name)
        ]
        if missing:
            raise ProviderError(
                ErrorKind.MISSING_PARAMETER,
                f"Missing required parameters: {', '.join(missing)}",
            )

    @staticmethod
    def _clamp(adapter: ProviderAdapter, request: GenerationRequest) -> GenerationRequest:
        """Fill defaults and clamp parameters into the adapter's declared range."""
        limits = adapter.declared_range()
        max_tokens = limits.clamp_max_tokens(request.max_tokens)
        temperature = limits.clamp_temperature(request.temperature)
        if request.max_tokens is not None and max_tokens != request.max_tokens:
            logger.warning(
                f"max_tokens={request.max_tokens} outside {limits.max_tokens_range} "
                f"for {adapter.provider_id}; using {max_tokens}"
            )
        if request.temperature is not None and temperature != request.temperature:
            logger.warning(
                f"temperature={request.temperature} outside {limits.temperature_range} "
                f"for {adapter.provider_id}; using {temperature}"
            )
        return request.model_copy(update={"max_tokens": max_tokens, "temperature": temperature})

    async def _send(self, wire: ProviderWireRequest) -> ProviderWireResponse:
        """Send with the configured timeout; retry once on a transient transport failure.

        HTTP error statuses are responses, not exceptions, so they are never retried.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.retry_count + 1),
            wait=wait_fixed(self.config.retry_wait),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_retry,
            reraise=True,
        )
        response = None
        async for attempt in retrying:
            with attempt:
                response = await self.transport.send(wire, timeout=self.config.timeout)
        return response

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(f"Transient provider failure ({error}); retrying (attempt {retry_state.attempt_number + 1})")
        log_verbose(logger, f"Retry state: {retry_state}")
