"""LLM Gateway Service.

This module runs the HTTP service the workflow editor talks to:
1. Text generation via POST /api/llm/generate
2. Liveness via GET /health
3. A connectivity probe via GET /api/test

Settings come from the environment (a .env file is loaded first):
HOST and PORT for the bind address, LLMFLOW_TIMEOUT, LLMFLOW_RETRY_COUNT
and LLMFLOW_RETRY_WAIT for provider calls.
"""

from typing import Optional

from aiohttp import web
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from llmflow.core.config import ServerConfig
from llmflow.core.dispatch import Dispatcher
from llmflow.core.errors import ErrorKind, GraphIntegrityError
from llmflow.core.logging import configure_logging, get_logger, mask_secret, LogComponent
from llmflow.core.providers.base import GenerationError, GenerationRequest

logger = get_logger(LogComponent.SERVER)

MISSING_PARAMETERS = "Missing required parameters"
INVALID_API_KEY = "Invalid API key"


class GenerateBody(BaseModel):
    """Body of POST /api/llm/generate."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)

    model: str
    prompt: str
    api_key: str
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None

    def is_complete(self) -> bool:
        return bool(self.model and self.prompt and self.api_key)


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Turn graph-integrity errors raised by handlers into 400 replies."""
    try:
        return await handler(request)
    except GraphIntegrityError as e:
        logger.warning(f"{request.method} {request.path}: {e}")
        return web.json_response({"error": str(e)}, status=400)


class GatewayService:
    """Service that exposes the dispatcher over HTTP."""

    def __init__(self, dispatcher: Optional[Dispatcher] = None):
        self.dispatcher = dispatcher if dispatcher is not None else Dispatcher()

    async def handle_generate(self, request: web.Request) -> web.Response:
        """Handle POST /api/llm/generate request."""
        try:
            body = GenerateBody.model_validate(await request.json())
        except (ValueError, ValidationError):
            return web.json_response({"error": MISSING_PARAMETERS}, status=400)
        if not body.is_complete():
            return web.json_response({"error": MISSING_PARAMETERS}, status=400)

        logger.info(f"Generate with {body.model} (key {mask_secret(body.api_key)})")
        outcome = await self.dispatcher.generate(GenerationRequest(
            provider=body.model,
            prompt=body.prompt,
            credential=body.api_key,
            max_tokens=body.max_tokens,
            temperature=body.temperature,
        ))

        if isinstance(outcome, GenerationError):
            if outcome.kind == ErrorKind.AUTH_ERROR:
                return web.json_response({"error": INVALID_API_KEY}, status=401)
            if outcome.kind == ErrorKind.MISSING_PARAMETER:
                return web.json_response({"error": MISSING_PARAMETERS}, status=400)
            logger.error(f"Generation failed: {outcome.kind.value}: {outcome.message}")
            payload = {"error": outcome.message}
            if outcome.provider_detail is not None:
                payload["details"] = outcome.provider_detail
            return web.json_response(payload, status=500)

        return web.json_response({"response": outcome.text})

    async def handle_health(self, request: web.Request) -> web.Response:
        """Handle GET /health request."""
        return web.json_response({"status": "healthy"})

    async def handle_test(self, request: web.Request) -> web.Response:
        """Handle GET /api/test request."""
        return web.json_response({
            "message": "LLM gateway is running",
            "providers": self.dispatcher.registry.provider_ids(),
        })

    def create_app(self) -> web.Application:
        app = web.Application(middlewares=[error_middleware])
        app.router.add_post('/api/llm/generate', self.handle_generate)
        app.router.add_get('/health', self.handle_health)
        app.router.add_get('/api/test', self.handle_test)
        return app


def create_app(dispatcher: Optional[Dispatcher] = None) -> web.Application:
    """Build the aiohttp application around a dispatcher."""
    return GatewayService(dispatcher).create_app()


def main():
    """Run the LLM gateway service."""
    load_dotenv()
    configure_logging()

    config = ServerConfig()
    app = create_app()

    logger.info(f"LLM gateway running on http://{config.host}:{config.port}")
    logger.info("Available endpoints:")
    logger.info("  - POST /api/llm/generate")
    logger.info("  - GET /health")
    logger.info("  - GET /api/test")
    web.run_app(app, host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
