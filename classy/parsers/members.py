"""
Member and Attribute Decoders
==============================

Fields, methods and the class itself all carry the same length-prefixed
shapes: an access-flags word, name/descriptor indices and a counted list
of ``attribute_info`` records.  The interfaces table is the degenerate
case -- a counted list of bare u2 class indices.

No index is resolved here; resolution is an on-demand lookup against the
finished constant pool.
"""

from __future__ import annotations

from classy.core.models import Attribute, FieldInfo, MethodInfo
from classy.parsers.cursor import ByteCursor


def decode_attribute(cursor: ByteCursor) -> Attribute:
    """Decode one ``attribute_info``: u2 name index, u4 length, payload."""
    name_index = cursor.read_u2()
    length = cursor.read_u4()
    return Attribute(name_index=name_index, data=cursor.read_bytes(length))


def decode_attributes(cursor: ByteCursor) -> tuple[Attribute, ...]:
    """Decode a u2 ``attributes_count`` followed by that many attributes."""
    count = cursor.read_u2()
    return tuple(decode_attribute(cursor) for _ in range(count))


def _decode_member_fields(cursor: ByteCursor) -> dict:
    access_flags = cursor.read_u2()
    name_index = cursor.read_u2()
    descriptor_index = cursor.read_u2()
    return {
        "access_flags": access_flags,
        "name_index": name_index,
        "descriptor_index": descriptor_index,
        "attributes": decode_attributes(cursor),
    }


def decode_field(cursor: ByteCursor) -> FieldInfo:
    """Decode one ``field_info`` record."""
    return FieldInfo(**_decode_member_fields(cursor))


def decode_method(cursor: ByteCursor) -> MethodInfo:
    """Decode one ``method_info`` record."""
    return MethodInfo(**_decode_member_fields(cursor))


def decode_fields(cursor: ByteCursor) -> tuple[FieldInfo, ...]:
    count = cursor.read_u2()
    return tuple(decode_field(cursor) for _ in range(count))


def decode_methods(cursor: ByteCursor) -> tuple[MethodInfo, ...]:
    count = cursor.read_u2()
    return tuple(decode_method(cursor) for _ in range(count))


def decode_interfaces(cursor: ByteCursor) -> tuple[int, ...]:
    """Decode a u2 ``interfaces_count`` followed by u2 class indices."""
    count = cursor.read_u2()
    return tuple(cursor.read_u2() for _ in range(count))
