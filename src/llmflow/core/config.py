"""Runtime configuration for the dispatcher and the HTTP server.

Values come from keyword arguments first, then environment variables,
then the defaults below. An environment value that does not parse falls
back to the default instead of failing startup.
"""

import os
from typing import Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from llmflow.core.logging import get_logger, LogComponent

logger = get_logger(LogComponent.DISPATCH)

T = TypeVar("T")

ENV_PREFIX = "LLMFLOW_"


def _from_env(name: str, cast: Callable[[str], T], default: T) -> Callable[[], T]:
    """Build a default factory reading ``name`` from the environment."""

    def factory() -> T:
        raw = os.getenv(name)
        if raw is None or raw == "":
            return default
        try:
            return cast(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
            return default

    return factory


class DispatchConfig(BaseModel):
    """Timeout and retry policy for provider calls.

    Attributes:
        timeout: Total seconds allowed for one HTTP attempt
        retry_count: Extra attempts after a transient failure (0 or 1)
        retry_wait: Seconds to wait before the retry
    """
    model_config = ConfigDict(validate_assignment=True)

    timeout: float = Field(
        default_factory=_from_env(f"{ENV_PREFIX}TIMEOUT", float, 30.0),
        gt=0,
    )
    retry_count: int = Field(
        default_factory=_from_env(f"{ENV_PREFIX}RETRY_COUNT", int, 1),
        ge=0,
        le=1,
    )
    retry_wait: float = Field(
        default_factory=_from_env(f"{ENV_PREFIX}RETRY_WAIT", float, 0.5),
        ge=0,
    )


class ServerConfig(BaseModel):
    """Bind address for the HTTP server."""
    model_config = ConfigDict(validate_assignment=True)

    host: str = Field(default_factory=_from_env("HOST", str, "0.0.0.0"))
    port: int = Field(
        default_factory=_from_env("PORT", int, 3002),
        gt=0,
        lt=65536,
    )
