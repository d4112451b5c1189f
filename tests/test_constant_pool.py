"""Tests for constant pool entry and pool decoding."""

from __future__ import annotations

import math
import struct

import pytest

from classy.core.errors import DecodeError, TruncationError, UnknownConstantTag
from classy.core.models import (
    ClassConstant,
    ConstantTag,
    DoubleConstant,
    FloatConstant,
    IntegerConstant,
    InvokeDynamicConstant,
    LongConstant,
    MethodHandleConstant,
    MethodRefConstant,
    MethodTypeConstant,
    NameAndTypeConstant,
    StringConstant,
    Utf8Constant,
)
from classy.parsers.constant_pool import decode_constant_entry, decode_constant_pool
from classy.parsers.cursor import ByteCursor


def _pool_bytes(count: int, *entries: bytes) -> bytes:
    return struct.pack(">H", count) + b"".join(entries)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (b"\x01\x00\x03abc", Utf8Constant(raw=b"abc")),
        (b"\x03\xff\xff\xff\xfe", IntegerConstant(value=-2)),
        (b"\x04\x3f\xc0\x00\x00", FloatConstant(bits=0x3FC00000)),
        (b"\x05\x00\x00\x00\x01\x00\x00\x00\x02", LongConstant(value=(1 << 32) | 2)),
        (b"\x06" + struct.pack(">d", 2.5), DoubleConstant(bits=0x4004000000000000)),
        (b"\x07\x00\x02", ClassConstant(name_index=2)),
        (b"\x08\x00\x04", StringConstant(string_index=4)),
        (b"\x0a\x00\x01\x00\x02", MethodRefConstant(class_index=1, name_and_type_index=2)),
        (b"\x0c\x00\x05\x00\x06", NameAndTypeConstant(name_index=5, descriptor_index=6)),
        (b"\x0f\x06\x00\x09", MethodHandleConstant(reference_kind=6, reference_index=9)),
        (b"\x10\x00\x07", MethodTypeConstant(descriptor_index=7)),
        (
            b"\x12\x00\x00\x00\x08",
            InvokeDynamicConstant(bootstrap_method_attr_index=0, name_and_type_index=8),
        ),
    ],
    ids=[
        "utf8", "integer", "float", "long", "double", "class", "string",
        "methodref", "name-and-type", "method-handle", "method-type",
        "invoke-dynamic",
    ],
)
def test_decode_each_entry_kind(raw: bytes, expected) -> None:
    cursor = ByteCursor(raw)
    assert decode_constant_entry(cursor) == expected
    assert cursor.at_end


def test_long_combines_high_and_low_words_signed() -> None:
    entry = decode_constant_entry(ByteCursor(b"\x05" + b"\xff" * 8))
    assert entry.value == -1


def test_float_and_double_values() -> None:
    assert FloatConstant(bits=0x3FC00000).value == 1.5
    assert DoubleConstant(bits=0x4004000000000000).value == 2.5
    assert math.isnan(FloatConstant(bits=0x7FC00001).value)


def test_unknown_tag_reports_offset_of_tag_byte() -> None:
    cursor = ByteCursor(b"\x00\x00\x02")
    cursor.read_u2()

    with pytest.raises(UnknownConstantTag) as excinfo:
        decode_constant_entry(cursor)

    assert excinfo.value.tag == 2
    assert excinfo.value.offset == 2


def test_truncated_entry_payload() -> None:
    with pytest.raises(TruncationError):
        decode_constant_entry(ByteCursor(b"\x01\x00\x05ab"))


def test_pool_slot_count_matches_header() -> None:
    raw = _pool_bytes(
        6,
        b"\x01\x00\x01A",
        b"\x05" + struct.pack(">q", 7),
        b"\x06" + struct.pack(">d", 1.0),
    )
    pool = decode_constant_pool(ByteCursor(raw))

    assert len(pool.slots) == pool.count - 1 == 5
    assert [pool.is_placeholder(i) for i in range(1, 6)] == [False, False, True, False, True]
    assert [index for index, _ in pool.entries()] == [1, 2, 4]


def test_long_at_index_one_leaves_index_two_unused() -> None:
    raw = _pool_bytes(4, b"\x05" + struct.pack(">q", 1), b"\x01\x00\x01x")
    pool = decode_constant_pool(ByteCursor(raw))

    assert pool.slots[1] is None
    assert pool.get(3, ConstantTag.UTF8).value == "x"


def test_empty_pool() -> None:
    pool = decode_constant_pool(ByteCursor(_pool_bytes(1)))
    assert pool.slots == ()
    assert pool.count == 1


def test_zero_count_is_rejected() -> None:
    with pytest.raises(DecodeError, match="at least 1"):
        decode_constant_pool(ByteCursor(_pool_bytes(0)))


def test_wide_entry_in_last_slot_is_rejected() -> None:
    raw = _pool_bytes(2, b"\x06" + struct.pack(">d", 1.0))
    with pytest.raises(DecodeError, match="reserved slot"):
        decode_constant_pool(ByteCursor(raw))


def test_bad_entry_aborts_whole_pool() -> None:
    raw = _pool_bytes(3, b"\x01\x00\x01A", b"\x02\x00")
    with pytest.raises(UnknownConstantTag) as excinfo:
        decode_constant_pool(ByteCursor(raw))
    assert excinfo.value.offset == 6
