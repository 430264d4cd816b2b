"""Record model definitions."""

from redilex.model.field import DEFAULT_FIELDS, FieldSpec, new_id, now_millis
from redilex.model.registry import Model, normalize_model

__all__ = [
    "DEFAULT_FIELDS",
    "FieldSpec",
    "new_id",
    "now_millis",
    "Model",
    "normalize_model",
]
