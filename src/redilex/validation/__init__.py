"""Input validation for model operations."""

from redilex.validation.schemas import IdList, ModelOptions, SearchRequest
from redilex.validation.validator import RecordValidator

__all__ = [
    "IdList",
    "ModelOptions",
    "SearchRequest",
    "RecordValidator",
]
