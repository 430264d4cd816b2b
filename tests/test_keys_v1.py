from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from redilex.protocol.keys import (
    RANGE_SENTINEL,
    decode_index_entry,
    encode_index_entry,
    index_key,
    normalize_value,
    prefix_range,
    record_key,
)


def test_key_layout() -> None:
    assert record_key("user", "a1") == "user:a1"
    assert index_key("user", "name") == "user:i:name"


@pytest.mark.parametrize("name", ["", "us:er", None])
def test_bad_model_names_are_rejected(name) -> None:
    with pytest.raises(ValueError):
        record_key(name, "a1")
    with pytest.raises(ValueError):
        index_key(name, "name")


def test_normalization_folds_case_and_strips_separators() -> None:
    assert normalize_value("Oscar Wilde") == "oscarwilde"
    assert normalize_value(" \tA:b\nC ") == "abc"
    assert normalize_value("Straße") == "strasse"
    assert normalize_value(1700000000000) == "1700000000000"
    assert normalize_value("a+b") == "a+b"


def test_token_carries_id_after_first_separator() -> None:
    token = encode_index_entry("Oscar: Wilde", "a1")
    assert token == "oscarwilde:a1"
    assert decode_index_entry(token) == "a1"
    assert decode_index_entry(b"oscar:a:1") == "a:1"


def test_decode_rejects_token_without_separator() -> None:
    with pytest.raises(ValueError):
        decode_index_entry("oscar")


def test_prefix_range_is_bytes() -> None:
    start, end = prefix_range(" Osc ")
    assert start == b"[osc"
    assert end == b"[osc" + RANGE_SENTINEL


def test_prefix_range_brackets_matching_tokens_only() -> None:
    start, end = prefix_range("osc")
    low, high = start[1:], end[1:]
    inside = [encode_index_entry(v, "x").encode("utf-8") for v in ("Oscar", "oscillate", "Osc", "oscé")]
    outside = [encode_index_entry(v, "x").encode("utf-8") for v in ("car", "os", "ot", "bosc")]
    assert all(low <= token <= high for token in inside)
    assert not any(low <= token <= high for token in outside)
