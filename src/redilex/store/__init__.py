"""Store access: redis settings and the atomic batch executor."""

from redilex.store.executor import BatchExecutor
from redilex.store.redis_component import RedisCfg, connect

__all__ = [
    "BatchExecutor",
    "RedisCfg",
    "connect",
]
