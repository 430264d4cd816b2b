"""Model normalization: merge defaults, wrap seeds, check the shape."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import Mapping, Iterator

from pydantic import ValidationError as PydanticValidationError

from redilex.errors import ModelShapeError
from redilex.model.field import DEFAULT_FIELDS, FieldSpec
from redilex.protocol.keys import SEP
from redilex.validation.schemas import ModelOptions

logger = logging.getLogger(__name__)

FieldMap = Mapping[str, "FieldSpec | Mapping[str, object] | None"]


@dataclass(frozen=True)
class Model:
    """An immutable record model: ordered field specs plus options."""

    fields: Mapping[str, FieldSpec]
    options: ModelOptions

    @property
    def name(self) -> str:
        return self.options.name

    @property
    def lexical_fields(self) -> tuple[str, ...]:
        return tuple(name for name, spec in self.fields.items() if spec.lexical)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __getitem__(self, field_name: str) -> FieldSpec:
        return self.fields[field_name]


def _coerce_options(options: ModelOptions | Mapping[str, object] | str) -> ModelOptions:
    if isinstance(options, ModelOptions):
        return options
    if isinstance(options, str):
        options = {"name": options}
    if not isinstance(options, Mapping):
        raise ModelShapeError("options must be a name, a mapping or ModelOptions.")
    try:
        return ModelOptions(**options)
    except PydanticValidationError as exc:
        raise ModelShapeError(f"Invalid model options: {exc}") from exc


def _coerce_field(name: str, spec: object) -> FieldSpec:
    if not isinstance(name, str) or not name or SEP in name:
        raise ModelShapeError(f"Field name must be a non-empty string without {SEP!r}: {name!r}")
    if isinstance(spec, FieldSpec):
        return spec
    if isinstance(spec, Mapping):
        return FieldSpec.from_dict(dict(spec))
    raise ModelShapeError(f"Field {name} must be a FieldSpec or a mapping, got {type(spec).__name__}")


def normalize_model(
    fields: FieldMap,
    options: ModelOptions | Mapping[str, object] | str,
) -> Model:
    """Build a ``Model`` from a caller's field map.

    The default ``id`` and ``created`` fields come first; the caller's map
    overrides them, and mapping a field to ``None`` drops it.
    """

    if not isinstance(fields, Mapping):
        raise ModelShapeError("fields must be a mapping of field name to descriptor.")
    resolved_options = _coerce_options(options)
    merged: dict[str, FieldSpec] = dict(DEFAULT_FIELDS)
    for name, spec in fields.items():
        if spec is None:
            merged.pop(name, None)
            continue
        merged[name] = _coerce_field(name, spec)
    if "id" not in merged:
        raise ModelShapeError("Model must define an id field.")
    model = Model(fields=MappingProxyType(merged), options=resolved_options)
    logger.debug(
        "Normalized model %s: fields=%s lexical=%s",
        model.name,
        list(model.fields),
        list(model.lexical_fields),
    )
    return model
