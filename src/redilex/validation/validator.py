"""Validation of operation input against a model."""

from __future__ import annotations

from collections import Counter
from typing import Any, Mapping, TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from redilex.errors import ValidationError
from redilex.validation.schemas import IdList, SearchRequest

if TYPE_CHECKING:
    from redilex.model.registry import Model


def _pydantic_details(exc: PydanticValidationError) -> list[dict[str, object]]:
    details: list[dict[str, object]] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        details.append({"index": None, "field": ".".join(loc) or None, "message": err["msg"]})
    return details


def _from_pydantic(exc: PydanticValidationError, what: str) -> ValidationError:
    details = _pydantic_details(exc)
    return ValidationError(f"Invalid {what}: {details[0]['message']} ({details[0]['field']})", details)


def _raise_if(details: list[dict[str, object]], what: str) -> None:
    if not details:
        return
    first = details[0]
    where = f" (record {first['index']}, field {first['field']})" if first["index"] is not None else ""
    raise ValidationError(f"Invalid {what}: {first['message']}{where}", details)


class RecordValidator:
    """Check records, id lists and search requests for one model.

    Create-time validation requires every model field whose validator
    rejects ``None``; update-time validation requires only ``id`` and
    rejects fields the model lacks.
    """

    def __init__(self, model: Model) -> None:
        self.model = model

    def require_records(self, records: list[Any]) -> list[Mapping[str, object]]:
        if not records:
            raise ValidationError("At least one record is required.")
        details = [
            {"index": idx, "field": None, "message": "record must be a mapping"}
            for idx, record in enumerate(records)
            if not isinstance(record, Mapping)
        ]
        _raise_if(details, "records")
        return records

    def validate_create(self, records: list[Mapping[str, object]]) -> None:
        details: list[dict[str, object]] = []
        for idx, record in enumerate(records):
            for name, spec in self.model.fields.items():
                if record.get(name) is None:
                    if not spec.optional:
                        details.append({"index": idx, "field": name, "message": "field required"})
                    continue
                message = spec.check(record[name])
                if message is not None:
                    details.append({"index": idx, "field": name, "message": message})
        details.extend(self._duplicate_ids(records))
        _raise_if(details, "create input")

    def validate_update(self, records: list[Mapping[str, object]]) -> None:
        details: list[dict[str, object]] = []
        for idx, record in enumerate(records):
            if record.get("id") is None:
                details.append({"index": idx, "field": "id", "message": "field required"})
            for name, value in record.items():
                spec = self.model.fields.get(name)
                if spec is None:
                    details.append({"index": idx, "field": name, "message": "unknown field"})
                    continue
                if value is None:
                    continue
                message = spec.check(value, update=True)
                if message is not None:
                    details.append({"index": idx, "field": name, "message": message})
        details.extend(self._duplicate_ids(records))
        _raise_if(details, "update input")

    def require_ids(self, records: list[Mapping[str, object]]) -> list[str]:
        """Re-check the ids records carry once hooks have run."""

        spec = self.model.fields["id"]
        details: list[dict[str, object]] = []
        for idx, record in enumerate(records):
            record_id = record.get("id")
            message = "field required" if record_id is None else spec.check(record_id)
            if message is not None:
                details.append({"index": idx, "field": "id", "message": message})
        details.extend(self._duplicate_ids(records))
        _raise_if(details, "hook output")
        return self.validate_ids([record["id"] for record in records])

    def validate_ids(self, ids: list[Any]) -> list[str]:
        try:
            return IdList(ids=ids).ids
        except PydanticValidationError as exc:
            raise _from_pydantic(exc, "ids") from exc

    def validate_search(self, data: Any) -> SearchRequest:
        if isinstance(data, SearchRequest):
            return data
        if not isinstance(data, Mapping):
            raise ValidationError("Search request must be a mapping.")
        try:
            return SearchRequest.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise _from_pydantic(exc, "search request") from exc

    @staticmethod
    def _duplicate_ids(records: list[Mapping[str, object]]) -> list[dict[str, object]]:
        counts = Counter(str(r["id"]) for r in records if r.get("id") is not None)
        return [
            {"index": None, "field": "id", "message": f"duplicate id in batch: {record_id}"}
            for record_id, seen in counts.items()
            if seen > 1
        ]
