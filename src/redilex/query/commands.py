"""Primitive store commands and compiled batches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


HSET = "HSET"
HDEL = "HDEL"
HGETALL = "HGETALL"
DEL = "DEL"
ZADD = "ZADD"
ZREM = "ZREM"

INDEX_OPS = frozenset({ZADD, ZREM})
INDEX_SCORE = 0


@dataclass(frozen=True)
class Command:
    """One store primitive: ``op key *args``."""

    op: str
    key: str
    args: tuple[object, ...] = ()

    def wire(self) -> tuple[object, ...]:
        return (self.op, self.key, *self.args)

    @property
    def is_index(self) -> bool:
        return self.op in INDEX_OPS


def hset(key: str, mapping: dict[str, object]) -> Command:
    args: list[object] = []
    for name, value in mapping.items():
        args.extend((name, value))
    return Command(HSET, key, tuple(args))


def hdel(key: str, fields: list[str]) -> Command:
    return Command(HDEL, key, tuple(fields))


def hgetall(key: str) -> Command:
    return Command(HGETALL, key)


def delete(key: str) -> Command:
    return Command(DEL, key)


def zadd(key: str, token: str) -> Command:
    return Command(ZADD, key, (INDEX_SCORE, token))


def zrem(key: str, token: str) -> Command:
    return Command(ZREM, key, (token,))


@dataclass
class Batch:
    """A compiled unit of work and the record ids it pertains to."""

    commands: list[Command] = field(default_factory=list)
    ids: list[str] = field(default_factory=list)

    def extend(self, commands: list[Command]) -> None:
        self.commands.extend(commands)

    def wire(self) -> list[tuple[object, ...]]:
        return [command.wire() for command in self.commands]

    def __len__(self) -> int:
        return len(self.commands)


@dataclass(frozen=True)
class RangeQuery:
    """A ``ZRANGEBYLEX`` request over one lexical index."""

    key: str
    start: bytes
    end: bytes
    offset: Optional[int] = None
    count: Optional[int] = None
