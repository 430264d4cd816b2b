"""
redilex - hash record models with lexical secondary indexes over Redis.

Usage:
    from redilex import create_model

    users = create_model({"name": {"lexical": True, "mutable": True}}, "user")
    err, ids = users.create({"name": "Oscar"})
    err, found = users.search({"field": "name", "term": "osc"})
"""

from redilex.errors import (
    RedilexError,
    ModelShapeError,
    ValidationError,
    NotFoundError,
    StoreError,
    HookError,
)
from redilex.log import configure_logging
from redilex.model.field import FieldSpec
from redilex.model.registry import Model, normalize_model
from redilex.result import Result
from redilex.runtime import RecordModel, create_model
from redilex.store.redis_component import RedisCfg
from redilex.validation.schemas import ModelOptions

__all__ = [
    # Main API
    "create_model",
    "RecordModel",
    "Result",
    # Model definition
    "FieldSpec",
    "Model",
    "ModelOptions",
    "normalize_model",
    "RedisCfg",
    "configure_logging",
    # Errors
    "RedilexError",
    "ModelShapeError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
    "HookError",
]

__version__ = "0.1.0"
