"""Field descriptors and the default identity/creation fields."""

from __future__ import annotations

from dataclasses import dataclass, field
import time
from typing import Any, Callable
from uuid import uuid4

from pydantic import PydanticUserError, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from redilex.errors import ModelShapeError
from redilex.validation.schemas import RecordId


Seed = Callable[[], object]

_DESCRIPTOR_KEYS = {"seed", "mutable", "lexical", "validate", "update_validate"}


def new_id() -> str:
    return uuid4().hex


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def constant(value: object) -> Seed:
    def _seed() -> object:
        return value

    return _seed


def _adapter(annotation: Any, *, what: str) -> TypeAdapter:
    try:
        return TypeAdapter(annotation)
    except (PydanticUserError, TypeError) as exc:
        raise ModelShapeError(f"{what} is not a usable validator: {annotation!r}") from exc


@dataclass(frozen=True)
class FieldSpec:
    """Descriptor for one model field.

    ``validate`` and ``update_validate`` are type annotations checked with a
    pydantic ``TypeAdapter`` in strict mode. ``update_validate`` defaults to
    ``validate``. A non-callable ``seed`` is wrapped as a constant generator.

    The field may be absent at create time only when ``validate`` accepts
    ``None`` (e.g. ``Optional[str]``). The default ``Any`` requires a value.
    """

    seed: Seed | object | None = None
    mutable: bool = False
    lexical: bool = False
    validate: Any = Any
    update_validate: Any = None
    _create_adapter: TypeAdapter = field(init=False, repr=False, compare=False)
    _update_adapter: TypeAdapter = field(init=False, repr=False, compare=False)
    _optional: bool = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.mutable, bool):
            raise ModelShapeError(f"mutable must be a bool, got {self.mutable!r}")
        if not isinstance(self.lexical, bool):
            raise ModelShapeError(f"lexical must be a bool, got {self.lexical!r}")
        if self.seed is not None and not callable(self.seed):
            object.__setattr__(self, "seed", constant(self.seed))
        if self.update_validate is None:
            object.__setattr__(self, "update_validate", self.validate)
        object.__setattr__(self, "_create_adapter", _adapter(self.validate, what="validate"))
        object.__setattr__(
            self, "_update_adapter", _adapter(self.update_validate, what="update_validate")
        )
        optional = self.validate is not Any and self.check(None) is None
        object.__setattr__(self, "_optional", optional)

    @property
    def optional(self) -> bool:
        return self._optional

    @staticmethod
    def from_dict(data: dict[str, object]) -> "FieldSpec":
        unknown = sorted(set(data) - _DESCRIPTOR_KEYS)
        if unknown:
            raise ModelShapeError(f"Unknown field descriptor keys: {unknown}")
        return FieldSpec(**data)

    def check(self, value: object, *, update: bool = False) -> str | None:
        """Return an error message if ``value`` fails, else ``None``."""

        adapter = self._update_adapter if update else self._create_adapter
        try:
            adapter.validate_python(value, strict=True)
        except PydanticValidationError as exc:
            return "; ".join(err["msg"] for err in exc.errors())
        return None

    def generate(self) -> object:
        if self.seed is None:
            raise ModelShapeError("field has no seed")
        return self.seed()


DEFAULT_FIELDS: dict[str, FieldSpec] = {
    "id": FieldSpec(seed=new_id, mutable=False, lexical=False, validate=RecordId),
    "created": FieldSpec(seed=now_millis, mutable=False, lexical=True, validate=int),
}
