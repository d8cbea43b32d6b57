"""Gemini ``generateContent`` adapter."""

from typing import Any, Dict, List

from llmflow.core.errors import ErrorKind, InvalidResponseShape
from llmflow.core.providers.base import (
    GenerationRequest,
    GenerationResult,
    ProviderAdapter,
    ProviderWireRequest,
    dig,
)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Gemini reports a bad key as 400 INVALID_ARGUMENT with this reason
_AUTH_REASONS = {"API_KEY_INVALID", "API_KEY_EXPIRED"}


class GeminiAdapter(ProviderAdapter):
    """Adapter for ``POST {base_url}/models/{model}:generateContent``.

    Gemini names the assistant role ``model`` and nests text in ``parts``.
    """
    base_url: str = GEMINI_BASE_URL
    model: str = "gemini-pro"

    def build_request(self, request: GenerationRequest) -> ProviderWireRequest:
        contents: List[Dict[str, Any]] = []
        for message in self.history_messages(request):
            if message["role"] == "system":
                continue
            role = "model" if message["role"] == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": message["content"]}]})
        contents.append({"role": "user", "parts": [{"text": request.prompt}]})
        return ProviderWireRequest(
            url=f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent",
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": request.credential,
            },
            payload={
                "contents": contents,
                "generationConfig": {
                    "temperature": request.temperature,
                    "maxOutputTokens": request.max_tokens,
                },
            },
        )

    def parse_response(self, body: Any) -> GenerationResult:
        parts = dig(body, "candidates", 0, "content", "parts")
        if not isinstance(parts, list):
            raise InvalidResponseShape("Gemini candidate has no parts", provider_detail=body)
        texts = [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
        if not texts:
            raise InvalidResponseShape("Gemini candidate has no text parts", provider_detail=body)
        return GenerationResult(text="".join(texts), provider=self.provider_id, model=self.model)

    def classify_error(self, status: int, body: Any) -> ErrorKind:
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            if status == 403 and error.get("status") == "PERMISSION_DENIED":
                return ErrorKind.AUTH_ERROR
            reasons = {
                detail.get("reason")
                for detail in error.get("details") or []
                if isinstance(detail, dict)
            }
            if status == 400 and reasons & _AUTH_REASONS:
                return ErrorKind.AUTH_ERROR
        return super().classify_error(status, body)
