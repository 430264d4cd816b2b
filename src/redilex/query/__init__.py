"""Compilation of model operations into store command batches."""

from redilex.query.commands import Batch, Command, RangeQuery
from redilex.query.compiler import (
    compile_create,
    compile_get,
    compile_remove,
    compile_search,
    compile_update,
    seed_records,
)

__all__ = [
    "Batch",
    "Command",
    "RangeQuery",
    "compile_create",
    "compile_get",
    "compile_remove",
    "compile_search",
    "compile_update",
    "seed_records",
]
