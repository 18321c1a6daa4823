"""Value codec tests."""

import sqlite3

import pytest

from sqlbridge.errors import EncodingError, InvalidParameterKind
from sqlbridge.lib.codec import (
    decode_text,
    from_storage_value,
    row_to_dynamic,
    to_dynamic,
    to_storage_params,
    to_storage_value,
)


@pytest.mark.parametrize("value", [None, 0, -7, 2**63 - 1, -(2**63), 3.25, -0.5, "", "café"])
def test_roundtrip(value):
    assert from_storage_value(to_storage_value(value)) == value


def test_bool_stored_as_integer():
    assert to_storage_value(True) == 1
    assert to_storage_value(False) == 0
    assert type(to_storage_value(True)) is int


def test_whole_float_becomes_integer():
    result = to_storage_value(2.0)
    assert result == 2
    assert type(result) is int


def test_fractional_float_stays_real():
    assert type(to_storage_value(2.5)) is float


def test_non_finite_float_stays_real():
    assert to_storage_value(float("inf")) == float("inf")


def test_out_of_range_int_rejected():
    with pytest.raises(InvalidParameterKind):
        to_storage_value(2**63)


@pytest.mark.parametrize("value", [{"a": 1}, [1, 2], b"\x00", object()])
def test_unsupported_kinds_rejected(value):
    with pytest.raises(InvalidParameterKind):
        to_storage_value(value)


def test_params_report_position():
    with pytest.raises(InvalidParameterKind, match="position 1") as exc:
        to_storage_params([1, {"nested": True}, "x"])
    assert exc.value.position == 1


def test_params_none_is_empty():
    assert to_storage_params(None) == []


def test_params_must_be_sequence():
    with pytest.raises(InvalidParameterKind):
        to_storage_params("abc")


def test_blob_passthrough():
    assert from_storage_value(b"\x01\x02") == b"\x01\x02"


def test_decode_text_invalid_utf8():
    with pytest.raises(EncodingError):
        decode_text(b"\xff\xfe")


def test_to_dynamic_renders_blob_as_ints():
    assert to_dynamic(b"\x00\xff") == [0, 255]
    assert row_to_dynamic({"a": 1, "b": b"\x01"}) == {"a": 1, "b": [1]}


def test_invalid_utf8_text_column_raises_encoding_error():
    """Text columns go through decode_text when used as text_factory."""
    conn = sqlite3.connect(":memory:")
    conn.text_factory = decode_text
    conn.execute("CREATE TABLE t(v TEXT)")
    conn.execute("INSERT INTO t VALUES (CAST(X'FF' AS TEXT))")
    with pytest.raises(EncodingError):
        conn.execute("SELECT v FROM t").fetchall()
    conn.close()
