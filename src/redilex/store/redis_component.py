"""Redis connection settings and client construction."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Optional

import redis

from redilex.errors import StoreError

logger = logging.getLogger(__name__)

_URL_ENV = "REDILEX_REDIS_URL"
_TIMEOUT_ENV = "REDILEX_SOCKET_TIMEOUT"
DEFAULT_URL = "redis://localhost:6379/0"


@dataclass(frozen=True)
class RedisCfg:
    url: str = DEFAULT_URL
    decode_responses: bool = True
    socket_timeout: Optional[float] = None

    @staticmethod
    def from_env() -> "RedisCfg":
        timeout = os.environ.get(_TIMEOUT_ENV)
        try:
            socket_timeout = float(timeout) if timeout else None
        except ValueError as exc:
            raise StoreError(f"{_TIMEOUT_ENV} must be a number, got {timeout!r}") from exc
        return RedisCfg(
            url=os.environ.get(_URL_ENV) or DEFAULT_URL,
            socket_timeout=socket_timeout,
        )


def connect(cfg: RedisCfg | None = None) -> redis.Redis:
    """Build a client for ``cfg``; the connection itself is opened lazily."""

    cfg = cfg or RedisCfg.from_env()
    logger.debug("Creating redis client (decode_responses=%s).", cfg.decode_responses)
    return redis.Redis.from_url(
        cfg.url,
        decode_responses=cfg.decode_responses,
        socket_timeout=cfg.socket_timeout,
    )
