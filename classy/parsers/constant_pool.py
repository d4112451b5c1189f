"""
Constant Pool Decoder
======================

Decodes the variant-tagged record stream that makes up a class file's
constant pool.

Each record starts with a one-byte tag followed by a fixed,
tag-specific payload (``CONSTANT_Utf8`` additionally carries a u2
length and that many raw bytes).  The pool header declares
``constant_pool_count``; entries occupy indices ``1 .. count - 1``.

For historical reasons every ``CONSTANT_Long`` and ``CONSTANT_Double``
takes up two indices: the slot immediately after it is unusable.  This
module reproduces that rule exactly, storing the reserved slot as
``None``.

References:
    - Lindholm, T., et al. (2014). The Java Virtual Machine
      Specification, Java SE 8 Edition. Section 4.4.
"""

from __future__ import annotations

from typing import Callable, Optional

from classy.core.errors import DecodeError, UnknownConstantTag
from classy.core.models import (
    ClassConstant,
    ConstantPool,
    ConstantPoolEntry,
    ConstantTag,
    DoubleConstant,
    FieldRefConstant,
    FloatConstant,
    IntegerConstant,
    InterfaceMethodRefConstant,
    InvokeDynamicConstant,
    LongConstant,
    MethodHandleConstant,
    MethodRefConstant,
    MethodTypeConstant,
    NameAndTypeConstant,
    StringConstant,
    Utf8Constant,
)
from classy.parsers.cursor import ByteCursor


# ---------------------------------------------------------------------------
# Per-tag payload readers
# ---------------------------------------------------------------------------

def _read_utf8(cursor: ByteCursor) -> Utf8Constant:
    length = cursor.read_u2()
    return Utf8Constant(raw=cursor.read_bytes(length))


def _read_integer(cursor: ByteCursor) -> IntegerConstant:
    return IntegerConstant(value=cursor.read_i4())


def _read_float(cursor: ByteCursor) -> FloatConstant:
    return FloatConstant(bits=cursor.read_u4())


def _read_long(cursor: ByteCursor) -> LongConstant:
    # high_bytes then low_bytes, i.e. a plain big-endian signed 64-bit value
    return LongConstant(value=cursor.read_i8())


def _read_double(cursor: ByteCursor) -> DoubleConstant:
    return DoubleConstant(bits=cursor.read_u8())


def _read_class(cursor: ByteCursor) -> ClassConstant:
    return ClassConstant(name_index=cursor.read_u2())


def _read_string(cursor: ByteCursor) -> StringConstant:
    return StringConstant(string_index=cursor.read_u2())


def _read_fieldref(cursor: ByteCursor) -> FieldRefConstant:
    class_index = cursor.read_u2()
    return FieldRefConstant(
        class_index=class_index,
        name_and_type_index=cursor.read_u2(),
    )


def _read_methodref(cursor: ByteCursor) -> MethodRefConstant:
    class_index = cursor.read_u2()
    return MethodRefConstant(
        class_index=class_index,
        name_and_type_index=cursor.read_u2(),
    )


def _read_interface_methodref(cursor: ByteCursor) -> InterfaceMethodRefConstant:
    class_index = cursor.read_u2()
    return InterfaceMethodRefConstant(
        class_index=class_index,
        name_and_type_index=cursor.read_u2(),
    )


def _read_name_and_type(cursor: ByteCursor) -> NameAndTypeConstant:
    name_index = cursor.read_u2()
    return NameAndTypeConstant(
        name_index=name_index,
        descriptor_index=cursor.read_u2(),
    )


def _read_method_handle(cursor: ByteCursor) -> MethodHandleConstant:
    reference_kind = cursor.read_u1()
    return MethodHandleConstant(
        reference_kind=reference_kind,
        reference_index=cursor.read_u2(),
    )


def _read_method_type(cursor: ByteCursor) -> MethodTypeConstant:
    return MethodTypeConstant(descriptor_index=cursor.read_u2())


def _read_invoke_dynamic(cursor: ByteCursor) -> InvokeDynamicConstant:
    bootstrap_index = cursor.read_u2()
    return InvokeDynamicConstant(
        bootstrap_method_attr_index=bootstrap_index,
        name_and_type_index=cursor.read_u2(),
    )


_ENTRY_READERS: dict[int, Callable[[ByteCursor], ConstantPoolEntry]] = {
    ConstantTag.UTF8: _read_utf8,
    ConstantTag.INTEGER: _read_integer,
    ConstantTag.FLOAT: _read_float,
    ConstantTag.LONG: _read_long,
    ConstantTag.DOUBLE: _read_double,
    ConstantTag.CLASS: _read_class,
    ConstantTag.STRING: _read_string,
    ConstantTag.FIELDREF: _read_fieldref,
    ConstantTag.METHODREF: _read_methodref,
    ConstantTag.INTERFACE_METHODREF: _read_interface_methodref,
    ConstantTag.NAME_AND_TYPE: _read_name_and_type,
    ConstantTag.METHOD_HANDLE: _read_method_handle,
    ConstantTag.METHOD_TYPE: _read_method_type,
    ConstantTag.INVOKE_DYNAMIC: _read_invoke_dynamic,
}


# ---------------------------------------------------------------------------
# Public decoders
# ---------------------------------------------------------------------------

def decode_constant_entry(cursor: ByteCursor) -> ConstantPoolEntry:
    """Decode one constant pool entry starting at its tag byte.

    Args:
        cursor: Cursor positioned exactly at the entry's tag.

    Returns:
        The decoded, immutable entry.

    Raises:
        UnknownConstantTag: If the tag is not one of the 14 known kinds.
        TruncationError: If the buffer ends inside the entry.
    """
    tag_offset = cursor.offset
    tag = cursor.read_u1()
    reader = _ENTRY_READERS.get(tag)
    if reader is None:
        raise UnknownConstantTag(tag, tag_offset)
    return reader(cursor)


def decode_constant_pool(cursor: ByteCursor) -> ConstantPool:
    """Decode ``constant_pool_count`` and the entries that follow it.

    ``count - 1`` logical slots are decoded.  A Long or Double entry is
    followed by a placeholder slot, which counts towards that total.

    Args:
        cursor: Cursor positioned at the u2 ``constant_pool_count``.

    Returns:
        The complete :class:`ConstantPool`; a partially decoded pool is
        never returned.

    Raises:
        DecodeError: On a zero count, an unknown tag, a truncated entry,
            or a Long/Double whose reserved slot would fall outside the
            declared count.
    """
    count_offset = cursor.offset
    count = cursor.read_u2()
    if count == 0:
        raise DecodeError("constant_pool_count must be at least 1", count_offset)

    slots: list[Optional[ConstantPoolEntry]] = []
    index = 1
    while index < count:
        entry_offset = cursor.offset
        entry = decode_constant_entry(cursor)
        slots.append(entry)
        index += 1

        if entry.is_wide:
            if index >= count:
                raise DecodeError(
                    f"{entry.kind} at index {index - 1} has no room for its "
                    f"reserved slot (constant_pool_count={count})",
                    entry_offset,
                )
            slots.append(None)
            index += 1

    return ConstantPool(slots=tuple(slots))
