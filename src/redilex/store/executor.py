"""Run compiled batches atomically against the store."""

from __future__ import annotations

import logging
from typing import Any

import redis

from redilex.errors import StoreError
from redilex.protocol.keys import decode_index_entry
from redilex.query.commands import Batch, RangeQuery

logger = logging.getLogger(__name__)


def _text(value: object) -> object:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class BatchExecutor:
    """Submit a ``Batch`` as one MULTI/EXEC round trip and shape the replies.

    ``client`` is a ``redis.Redis`` or anything exposing the same
    ``pipeline(transaction=True)`` and ``zrangebylex`` surface.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    def run(self, batch: Batch) -> list[object]:
        if not batch.commands:
            return []
        try:
            with self._client.pipeline(transaction=True) as pipe:
                for command in batch.commands:
                    pipe.execute_command(*command.wire())
                replies = pipe.execute()
        except redis.RedisError as exc:
            raise StoreError(f"Batch of {len(batch)} command(s) failed: {exc}") from exc
        logger.debug("Executed batch of %d command(s) for ids %s.", len(batch), batch.ids)
        return list(replies)

    def execute_image(self, batch: Batch) -> list[str]:
        self.run(batch)
        return list(batch.ids)

    def execute_raw(self, batch: Batch) -> list[object]:
        """Run ``batch`` and keep only the replies of non-index commands."""

        replies = self.run(batch)
        return [
            reply
            for command, reply in zip(batch.commands, replies)
            if not command.is_index
        ]

    def fetch(self, batch: Batch) -> list[dict[str, object]]:
        """Run HGETALL commands and return hashes with ``str`` keys and values.

        Byte replies from a client without ``decode_responses`` are decoded as
        UTF-8.
        """

        return [
            {_text(name): _text(value) for name, value in (reply or {}).items()}
            for reply in self.run(batch)
        ]

    def range_by_lex(self, query: RangeQuery) -> list[str]:
        try:
            tokens = self._client.zrangebylex(
                query.key,
                query.start,
                query.end,
                start=query.offset,
                num=query.count,
            )
        except redis.RedisError as exc:
            raise StoreError(f"Range query on {query.key} failed: {exc}") from exc
        return [decode_index_entry(token) for token in tokens]
