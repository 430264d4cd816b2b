"""Pydantic shapes for model options and operation requests."""

from __future__ import annotations

from typing import Annotated, Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from redilex.protocol.keys import SEP


Name = Annotated[str, StringConstraints(min_length=1, pattern=rf"^[^{SEP}]+$")]
RecordId = Annotated[str, StringConstraints(min_length=1, pattern=rf"^[^{SEP}]+$")]
Hook = Callable[[dict[str, Any]], dict[str, Any]]


class ModelOptions(BaseModel):
    """Per-model options.

    ``lock`` is called with the ids of an update or remove and must return a
    context manager; it is held across the read of the current records and
    the write batch. The default does no locking.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Name
    pre_create: Optional[Hook] = None
    pre_update: Optional[Hook] = None
    post_get: Optional[Hook] = None
    on_missing: Literal["error", "skip"] = "error"
    lock: Optional[Callable[[list[str]], Any]] = None


class SearchRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    field: Annotated[str, StringConstraints(min_length=1)]
    term: Annotated[str, StringConstraints(min_length=1)]
    get: bool = False
    offset: Optional[int] = Field(default=None, ge=0)
    count: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_paging(self):
        if (self.offset is None) != (self.count is None):
            raise ValueError("offset and count must be given together")
        return self


class IdList(BaseModel):
    model_config = ConfigDict(strict=True)

    ids: list[RecordId] = Field(min_length=1)
