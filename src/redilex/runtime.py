"""Model runtime: the public create/get/update/remove/search operations.

Each operation is a short linear pipeline (validate, hook, compile, execute)
and returns a ``Result``; redilex errors never escape an operation.

Update and remove read the current records before writing. The read and the
write batch are separate round trips and are not serialized across callers:
two concurrent updates of one id can both read the same old state, and the
slower writer's index retraction may then miss the token the faster writer
added. Pass ``lock`` in the model options to serialize per id when that
matters.
"""

from __future__ import annotations

from contextlib import nullcontext
import functools
from typing import Any, Callable, Mapping, Optional, TypeVar

from redilex.errors import HookError, NotFoundError, RedilexError
from redilex.log import model_logger
from redilex.model.registry import FieldMap, Model, normalize_model
from redilex.query.compiler import (
    compile_create,
    compile_get,
    compile_remove,
    compile_search,
    compile_update,
    seed_records,
)
from redilex.result import Result
from redilex.store.executor import BatchExecutor
from redilex.store.redis_component import RedisCfg, connect
from redilex.validation.schemas import ModelOptions
from redilex.validation.validator import RecordValidator

T = TypeVar("T")
Record = dict[str, object]


def _wrap(data: Any) -> list[Any]:
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]


def _operation(label: str) -> Callable[[Callable[..., T]], Callable[..., Result[T]]]:
    def decorator(func: Callable[..., T]) -> Callable[..., Result[T]]:
        @functools.wraps(func)
        def wrapper(self: "RecordModel", data: Any) -> Result[T]:
            self._log.debug("%s begin: %r", label, data)
            try:
                value = func(self, data)
            except RedilexError as exc:
                self._log.debug("%s failed: %s", label, exc)
                return Result(error=exc)
            self._log.debug("%s done: %r", label, value)
            return Result(value=value)

        return wrapper

    return decorator


class RecordModel:
    """Operations over the hash records of one model."""

    def __init__(self, model: Model, client: Any) -> None:
        self._model = model
        self._executor = BatchExecutor(client)
        self._validator = RecordValidator(model)
        self._log = model_logger(model.name)

    @property
    def name(self) -> str:
        return self._model.name

    @property
    def model(self) -> Model:
        return self._model

    @property
    def options(self) -> ModelOptions:
        return self._model.options

    @_operation("Create")
    def create(self, data: Mapping[str, object] | list[Mapping[str, object]]) -> list[str]:
        """Seed, validate and store new records; returns their ids."""

        records = self._validator.require_records(_wrap(data))
        seeded = seed_records(self._model, records)
        self._validator.validate_create(seeded)
        prepared = self._apply_hook(self.options.pre_create, seeded)
        self._validator.require_ids(prepared)
        return self._executor.execute_image(compile_create(self._model, prepared))

    @_operation("Get")
    def get(self, data: str | list[str]) -> list[Record]:
        """Fetch records by id; unknown ids come back as empty dicts."""

        ids = self._validator.validate_ids(_wrap(data))
        return self._fetch(ids)

    @_operation("Remove")
    def remove(self, data: str | list[str]) -> list[object]:
        """Delete records and their index tokens; returns the store acks."""

        ids = self._validator.validate_ids(_wrap(data))
        with self._lock(ids):
            current = self._read_current(ids)
            missing = [record_id for record_id, record in zip(ids, current) if not record]
            if missing and self.options.on_missing == "error":
                raise NotFoundError(missing)
            if missing:
                self._log.info("Skipping missing id(s) on remove: %s", missing)
            found = [record for record in current if record]
            if not found:
                return []
            return self._executor.execute_raw(compile_remove(self._model, found))

    @_operation("Update")
    def update(self, data: Mapping[str, object] | list[Mapping[str, object]]) -> list[str]:
        """Replace the mutable fields of existing records; returns their ids.

        Fields the model marks immutable are ignored. A mutable field given
        as ``None`` is removed from the record.
        """

        records = self._validator.require_records(_wrap(data))
        self._validator.validate_update(records)
        prepared = self._apply_hook(self.options.pre_update, records)
        ids = self._validator.require_ids(prepared)
        with self._lock(ids):
            current = self._read_current(ids)
            missing = [record_id for record_id, record in zip(ids, current) if not record]
            if missing:
                raise NotFoundError(missing)
            return self._executor.execute_image(compile_update(self._model, prepared, current))

    @_operation("Search")
    def search(self, data: Mapping[str, object]) -> list[str] | list[Record]:
        """Prefix search over one lexical field.

        ``data`` is ``{"field", "term", "get"?, "offset"?, "count"?}``. Returns
        ids, or full records when ``get`` is set. A field without an index
        simply matches nothing.
        """

        request = self._validator.validate_search(data)
        query = compile_search(
            self._model,
            request.field,
            request.term,
            offset=request.offset,
            count=request.count,
        )
        ids = self._executor.range_by_lex(query)
        if not request.get or not ids:
            return ids
        return self._fetch(ids)

    def _fetch(self, ids: list[str]) -> list[Record]:
        records = self._executor.fetch(compile_get(self._model, ids))
        hook = self.options.post_get
        if hook is None:
            return records
        return [self._call_hook(hook, record) if record else record for record in records]

    def _read_current(self, ids: list[str]) -> list[Record]:
        current = self._executor.fetch(compile_get(self._model, ids))
        for record_id, record in zip(ids, current):
            if record:
                record.setdefault("id", record_id)
        return current

    def _lock(self, ids: list[str]) -> Any:
        if self.options.lock is None:
            return nullcontext()
        return self.options.lock(list(ids))

    def _apply_hook(
        self,
        hook: Optional[Callable[[Record], Record]],
        records: list[Mapping[str, object]],
    ) -> list[Mapping[str, object]]:
        if hook is None:
            return records
        return [self._call_hook(hook, record) for record in records]

    @staticmethod
    def _call_hook(hook: Callable[[Record], Record], record: Mapping[str, object]) -> Record:
        name = getattr(hook, "__name__", repr(hook))
        try:
            result = hook(dict(record))
        except RedilexError:
            raise
        except Exception as exc:
            raise HookError(f"Hook {name!r} failed: {exc!r}") from exc
        if not isinstance(result, Mapping):
            raise HookError(f"Hook {name!r} must return a mapping.")
        return dict(result)


def create_model(
    fields: FieldMap,
    options: ModelOptions | Mapping[str, object] | str,
    client: Any = None,
    *,
    cfg: RedisCfg | None = None,
) -> RecordModel:
    """Normalize ``fields`` into a model and bind it to a store client.

    Raises ``ModelShapeError`` for a malformed model or options. Without a
    ``client`` a redis client is built from ``cfg`` (or the environment).
    """

    model = normalize_model(fields, options)
    if client is None:
        client = connect(cfg)
    model_logger(model.name).debug("Created model with fields %s.", list(model.fields))
    return RecordModel(model, client)
