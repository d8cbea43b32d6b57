"""OpenAI-compatible chat completions adapter."""

from typing import Any

from llmflow.core.errors import InvalidResponseShape
from llmflow.core.providers.base import (
    GenerationRequest,
    GenerationResult,
    ProviderAdapter,
    ProviderWireRequest,
    dig,
)

OPENAI_BASE_URL = "https://api.openai.com/v1"


class OpenAICompatibleAdapter(ProviderAdapter):
    """Adapter for ``POST {base_url}/chat/completions`` with bearer auth.

    Also serves any provider that mirrors the OpenAI wire format.
    """
    base_url: str = OPENAI_BASE_URL

    def build_request(self, request: GenerationRequest) -> ProviderWireRequest:
        messages = self.history_messages(request)
        messages.append({"role": "user", "content": request.prompt})
        return ProviderWireRequest(
            url=f"{self.base_url.rstrip('/')}/chat/completions",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {request.credential}",
            },
            payload={
                "model": self.model,
                "messages": messages,
                "max_tokens": request.max_tokens,
                "temperature": request.temperature,
            },
        )

    def parse_response(self, body: Any) -> GenerationResult:
        content = dig(body, "choices", 0, "message", "content")
        if not isinstance(content, str):
            # null content: refusals and tool calls
            raise InvalidResponseShape("Provider returned no text content", provider_detail=body)
        return GenerationResult(
            text=content,
            provider=self.provider_id,
            model=body.get("model") or self.model,
        )
