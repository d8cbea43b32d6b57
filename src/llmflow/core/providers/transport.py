"""HTTP transport for provider calls.

The dispatcher only depends on the ``Transport`` protocol, so tests can
swap in an in-memory fake. ``AiohttpTransport`` is the real one.
"""

import asyncio
import json
from typing import Protocol, runtime_checkable

import aiohttp

from llmflow.core.errors import ErrorKind, TransportError
from llmflow.core.providers.base import ProviderWireRequest, ProviderWireResponse


@runtime_checkable
class Transport(Protocol):
    async def send(self, request: ProviderWireRequest, timeout: float) -> ProviderWireResponse:
        """Send one request.

        Raises:
            TransportError: If no HTTP response was received
        """
        ...


class AiohttpTransport:
    """Sends each request on its own short-lived ``aiohttp.ClientSession``."""

    async def send(self, request: ProviderWireRequest, timeout: float) -> ProviderWireResponse:
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        try:
            async with aiohttp.ClientSession(timeout=client_timeout) as session:
                async with session.request(
                    request.method,
                    request.url,
                    json=request.payload,
                    headers=request.headers,
                ) as response:
                    raw = await response.read()
                    return ProviderWireResponse(status=response.status, body=_decode(raw))
        except asyncio.TimeoutError as e:
            raise TransportError(
                ErrorKind.NETWORK_TIMEOUT,
                f"Provider did not answer within {timeout:g}s",
                transient=True,
            ) from e
        except aiohttp.ClientConnectionError as e:
            # covers refused and reset connections and server disconnects
            raise TransportError(
                ErrorKind.PROVIDER_UNAVAILABLE,
                f"Connection to provider failed: {e}",
                transient=True,
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                ErrorKind.PROVIDER_UNAVAILABLE,
                f"HTTP client error: {e}",
            ) from e


def _decode(raw: bytes):
    # undecodable bytes become U+FFFD
    text = raw.decode("utf-8", errors="replace")
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
