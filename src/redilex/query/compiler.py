"""Compile model operations into ordered store command batches.

Everything here is pure: records in, ``Batch``/``RangeQuery`` out. The
compiler assumes its input has already been seeded and validated.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from redilex.model.registry import Model
from redilex.protocol.keys import encode_index_entry, index_key, prefix_range, record_key
from redilex.query.commands import (
    Batch,
    Command,
    RangeQuery,
    delete,
    hdel,
    hgetall,
    hset,
    zadd,
    zrem,
)

logger = logging.getLogger(__name__)

Record = Mapping[str, object]


def is_indexable(value: object) -> bool:
    return value is not None and value != ""


def _index_token(record: Record, field: str) -> Optional[str]:
    value = record.get(field)
    if not is_indexable(value):
        return None
    return encode_index_entry(value, str(record["id"]))


def _stored_fields(record: Record) -> dict[str, object]:
    return {name: value for name, value in record.items() if value is not None}


def seed_record(model: Model, data: Record) -> dict[str, object]:
    """Keep caller values for model fields and seed the missing ones.

    A ``None`` value counts as missing. Keys outside the model are dropped.
    """

    seeded: dict[str, object] = {}
    for name, spec in model.fields.items():
        value = data.get(name)
        if value is not None:
            seeded[name] = value
        elif spec.seed is not None:
            seeded[name] = spec.generate()
    return seeded


def seed_records(model: Model, records: Iterable[Record]) -> list[dict[str, object]]:
    seeded = [seed_record(model, record) for record in records]
    logger.debug("Seeded %d record(s) for %s.", len(seeded), model.name)
    return seeded


def index_commands(model: Model, record: Record, *, remove: bool = False) -> list[Command]:
    commands: list[Command] = []
    for field in model.lexical_fields:
        token = _index_token(record, field)
        if token is None:
            continue
        key = index_key(model.name, field)
        commands.append(zrem(key, token) if remove else zadd(key, token))
    return commands


def compile_create(model: Model, records: Iterable[Record]) -> Batch:
    batch = Batch()
    for record in records:
        record_id = str(record["id"])
        batch.ids.append(record_id)
        batch.commands.append(hset(record_key(model.name, record_id), _stored_fields(record)))
        batch.extend(index_commands(model, record))
    logger.debug("Compiled create for %s: %s", model.name, batch.wire())
    return batch


def compile_get(model: Model, ids: Iterable[str]) -> Batch:
    batch = Batch()
    for record_id in ids:
        batch.ids.append(record_id)
        batch.commands.append(hgetall(record_key(model.name, record_id)))
    return batch


def compile_remove(model: Model, current: Iterable[Record]) -> Batch:
    """Delete each stored record and retract the tokens it currently owns."""

    batch = Batch()
    for record in current:
        record_id = str(record["id"])
        batch.ids.append(record_id)
        batch.commands.append(delete(record_key(model.name, record_id)))
        batch.extend(index_commands(model, record, remove=True))
    logger.debug("Compiled remove for %s: %s", model.name, batch.wire())
    return batch


def merge_update(model: Model, new: Record, old: Record) -> tuple[dict[str, object], list[str]]:
    """Overlay the mutable fields of ``new`` on ``old``.

    Returns the merged record and the names of mutable fields that ``new``
    explicitly cleared with ``None``.
    """

    merged = dict(old)
    cleared: list[str] = []
    for name, value in new.items():
        spec = model.fields.get(name)
        if spec is None or not spec.mutable:
            continue
        if value is None:
            if merged.pop(name, None) is not None:
                cleared.append(name)
            continue
        merged[name] = value
    merged["id"] = old["id"]
    return merged, cleared


def index_delta(model: Model, merged: Record, old: Record) -> list[Command]:
    commands: list[Command] = []
    for field in model.lexical_fields:
        old_token = _index_token(old, field)
        new_token = _index_token(merged, field)
        if old_token == new_token:
            continue
        key = index_key(model.name, field)
        if old_token is not None:
            commands.append(zrem(key, old_token))
        if new_token is not None:
            commands.append(zadd(key, new_token))
    return commands


def compile_update(model: Model, new_records: list[Record], old_records: list[Record]) -> Batch:
    """Pair new and old records by position and emit the write plus index delta."""

    if len(new_records) != len(old_records):
        raise ValueError("new and old records must be the same length")
    batch = Batch()
    for new, old in zip(new_records, old_records):
        if str(new["id"]) != str(old["id"]):
            raise ValueError(f"update pair is not aligned on id: {new['id']} != {old['id']}")
        merged, cleared = merge_update(model, new, old)
        key = record_key(model.name, str(merged["id"]))
        batch.ids.append(str(merged["id"]))
        batch.commands.append(hset(key, _stored_fields(merged)))
        if cleared:
            batch.commands.append(hdel(key, cleared))
        batch.extend(index_delta(model, merged, old))
    logger.debug("Compiled update for %s: %s", model.name, batch.wire())
    return batch


def compile_search(
    model: Model,
    field: str,
    term: str,
    *,
    offset: Optional[int] = None,
    count: Optional[int] = None,
) -> RangeQuery:
    start, end = prefix_range(term)
    return RangeQuery(
        key=index_key(model.name, field),
        start=start,
        end=end,
        offset=offset,
        count=count,
    )
