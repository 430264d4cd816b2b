"""Store key layout and lexical index token encoding.

Keys:
  record  -> ``<model>:<id>``
  index   -> ``<model>:i:<field>``

Index tokens are ``normalize(value) + ":" + id``. Normalization removes every
``:`` from the value, so the first separator in a token always marks the
start of the id, whatever the id itself contains.
"""

from __future__ import annotations

import re


SEP = ":"
INDEX_NS = "i"
RANGE_INCLUSIVE = b"["
# 0xFF never appears in UTF-8 text, so it sorts after every token byte.
RANGE_SENTINEL = b"\xff"

_STRIP_RE = re.compile(r"[\s:]")


def _require_name(value: str, *, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{what} must be a non-empty string")
    if SEP in value:
        raise ValueError(f"{what} must not contain {SEP!r}: {value}")
    return value


def record_key(name: str, record_id: str) -> str:
    _require_name(name, what="model name")
    return f"{name}{SEP}{record_id}"


def index_key(name: str, field: str) -> str:
    _require_name(name, what="model name")
    return f"{name}{SEP}{INDEX_NS}{SEP}{field}"


def normalize_value(value: object) -> str:
    """Case-fold ``value`` and strip whitespace and separators."""

    return _STRIP_RE.sub("", str(value).casefold())


def encode_index_entry(value: object, record_id: str) -> str:
    return f"{normalize_value(value)}{SEP}{record_id}"


def decode_index_entry(token: str | bytes) -> str:
    if isinstance(token, bytes):
        token = token.decode("utf-8")
    _, sep, record_id = token.partition(SEP)
    if not sep:
        raise ValueError(f"index token has no separator: {token!r}")
    return record_id


def prefix_range(term: object) -> tuple[bytes, bytes]:
    """Return ``ZRANGEBYLEX`` bounds matching tokens that start with ``term``."""

    start = RANGE_INCLUSIVE + normalize_value(term).encode("utf-8")
    return start, start + RANGE_SENTINEL
