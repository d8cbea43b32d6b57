"""Test doubles for the provider side of the dispatcher.

No test talks to a real provider: dispatchers are built around a
``FakeTransport`` that records every wire request and answers from a
script or a responder callable.
"""

import inspect
from typing import Any, Callable, List, Optional

from llmflow.core.providers import (
    GenerationRequest,
    GenerationResult,
    ProviderAdapter,
    ProviderWireRequest,
    ProviderWireResponse,
)


class FakeTransport:
    """Transport double.

    Answers with the scripted ``responses`` in order, or with ``responder``
    when one is given. An exception instance in either place is raised.
    """

    def __init__(self, *responses: Any, responder: Optional[Callable] = None):
        self.responses = list(responses)
        self.responder = responder
        self.calls: List[ProviderWireRequest] = []
        self.timeouts: List[float] = []

    async def send(self, request: ProviderWireRequest, timeout: float) -> ProviderWireResponse:
        self.calls.append(request)
        self.timeouts.append(timeout)
        if self.responder is not None:
            result = self.responder(request)
            if inspect.isawaitable(result):
                result = await result
        else:
            assert self.responses, "unexpected provider call"
            result = self.responses.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


class EchoAdapter(ProviderAdapter):
    """Adapter whose provider echoes the prompt back."""

    def build_request(self, request: GenerationRequest) -> ProviderWireRequest:
        return ProviderWireRequest(
            url=f"{self.base_url}/echo",
            headers={"X-Key": request.credential},
            payload={
                "prompt": request.prompt,
                "max_tokens": request.max_tokens,
                "temperature": request.temperature,
            },
        )

    def parse_response(self, body: Any) -> GenerationResult:
        return GenerationResult(text=body["echo"], provider=self.provider_id, model=self.model)


def echo_responder(request: ProviderWireRequest) -> ProviderWireResponse:
    return ProviderWireResponse(status=200, body={"echo": request.payload["prompt"]})


def openai_reply(text: str, model: str = "gpt-3.5-turbo") -> ProviderWireResponse:
    return ProviderWireResponse(status=200, body={
        "id": "chatcmpl-1",
        "model": model,
        "choices": [{"index": 0, "message": {"role": "assistant", "content": text}}],
    })


def gemini_reply(*parts: str) -> ProviderWireResponse:
    return ProviderWireResponse(status=200, body={
        "candidates": [{"content": {"role": "model", "parts": [{"text": part} for part in parts]}}],
    })


def error_reply(status: int, message: str = "boom", **extra: Any) -> ProviderWireResponse:
    return ProviderWireResponse(status=status, body={"error": {"message": message, **extra}})


