"""Tests for field, method, attribute and interface decoding."""

from __future__ import annotations

import struct

import pytest

from classy.core.errors import TruncationError
from classy.core.models import Attribute, FieldInfo, MethodInfo
from classy.parsers.cursor import ByteCursor
from classy.parsers.members import (
    decode_attribute,
    decode_attributes,
    decode_field,
    decode_fields,
    decode_interfaces,
    decode_methods,
)


def test_attribute_payload_is_opaque() -> None:
    cursor = ByteCursor(struct.pack(">HI", 9, 3) + b"\x00\xff\x10")
    attr = decode_attribute(cursor)

    assert attr == Attribute(name_index=9, data=b"\x00\xff\x10")
    assert attr.length == 3


def test_attribute_length_past_end() -> None:
    with pytest.raises(TruncationError):
        decode_attribute(ByteCursor(struct.pack(">HI", 1, 10) + b"abc"))


def test_attribute_list() -> None:
    raw = struct.pack(">H", 2) + struct.pack(">HI", 1, 0) + struct.pack(">HI", 2, 1) + b"z"
    attrs = decode_attributes(ByteCursor(raw))
    assert [a.name_index for a in attrs] == [1, 2]
    assert attrs[1].data == b"z"


def test_field_record() -> None:
    raw = struct.pack(">HHHH", 0x0019, 4, 5, 1) + struct.pack(">HI", 6, 2) + b"\x00\x07"
    field = decode_field(ByteCursor(raw))

    assert isinstance(field, FieldInfo)
    assert (field.access_flags, field.name_index, field.descriptor_index) == (0x0019, 4, 5)
    assert field.attributes == (Attribute(name_index=6, data=b"\x00\x07"),)


def test_fields_and_methods_tables() -> None:
    member = struct.pack(">HHHH", 1, 2, 3, 0)
    raw = struct.pack(">H", 2) + member + member

    cursor = ByteCursor(raw + raw)
    fields = decode_fields(cursor)
    methods = decode_methods(cursor)

    assert len(fields) == 2 and all(isinstance(f, FieldInfo) for f in fields)
    assert len(methods) == 2 and all(isinstance(m, MethodInfo) for m in methods)
    assert cursor.at_end


def test_interfaces_are_flat_indices() -> None:
    raw = struct.pack(">HHHH", 3, 7, 9, 11)
    assert decode_interfaces(ByteCursor(raw)) == (7, 9, 11)


def test_truncated_member_list() -> None:
    raw = struct.pack(">H", 2) + struct.pack(">HHHH", 1, 2, 3, 0)
    with pytest.raises(TruncationError):
        decode_fields(ByteCursor(raw))
