"""
Classy Error Taxonomy
======================

Exceptions raised while decoding a JVM class file and while resolving
the symbolic references it stores in its constant pool.

Decode errors (:class:`TruncationError`, :class:`UnknownConstantTag`
and the generic :class:`DecodeError`) are terminal for the decode call
that raised them: every later offset in the stream depends on having
consumed every earlier variable-length record, so there is no point at
which decoding could resynchronise.

Resolution and descriptor errors are scoped to the single lookup that
raised them and never invalidate an already decoded
:class:`~classy.core.models.ClassFile`.

References:
    - Lindholm, T., Yellin, F., Bracha, G., & Buckley, A. (2014).
      The Java Virtual Machine Specification, Java SE 8 Edition.
      Chapter 4: The class File Format.
"""

from __future__ import annotations

from typing import Optional


class ClassFileError(ValueError):
    """Base class for every error raised by the class file decoder."""

    pass


# ========================== Decode-time errors =============================


class DecodeError(ClassFileError):
    """A structural violation that aborts the whole decode.

    Attributes:
        offset: Byte offset in the input buffer where the problem was found.
    """

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} (at offset {offset})")
        self.offset = offset


class TruncationError(DecodeError):
    """The buffer ended before a field or record was complete.

    Attributes:
        offset:    Offset of the read that could not be satisfied.
        needed:    Number of bytes the read required.
        available: Number of bytes actually left in the buffer.
    """

    def __init__(self, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"Truncated class file: needed {needed} byte(s), "
            f"{available} available",
            offset,
        )
        self.needed = needed
        self.available = available


class UnknownConstantTag(DecodeError):
    """A constant pool entry carried a tag outside the 14 known kinds.

    Attributes:
        tag:    The offending tag byte.
        offset: Offset of the tag byte itself.
    """

    def __init__(self, tag: int, offset: int) -> None:
        super().__init__(f"Unknown constant pool tag {tag}", offset)
        self.tag = tag


# ========================== Reportable errors ==============================


class BadMagic(ClassFileError):
    """The header magic is not ``0xCAFEBABE``.

    The decoder reports this rather than aborting; callers decide
    whether a file with a foreign magic is fatal for them.
    """

    def __init__(self, magic: int) -> None:
        super().__init__(
            f"Invalid class file magic 0x{magic:08X} (expected 0xCAFEBABE)"
        )
        self.magic = magic


class IndexResolutionError(ClassFileError):
    """A constant pool index could not be resolved to the expected entry.

    Raised for index 0, an index past the end of the pool, an index
    pointing at the placeholder slot after a Long/Double, or an entry of
    the wrong kind for the requested lookup.

    Attributes:
        index:    The index that failed to resolve.
        reason:   Short human-readable cause.
        expected: Name of the expected entry kind, if the lookup had one.
    """

    def __init__(
        self,
        index: int,
        reason: str,
        expected: Optional[str] = None,
    ) -> None:
        message = f"Cannot resolve constant pool index {index}: {reason}"
        if expected:
            message += f" (expected {expected})"
        super().__init__(message)
        self.index = index
        self.reason = reason
        self.expected = expected


class DescriptorSyntaxError(ClassFileError):
    """A field or method descriptor does not follow the descriptor grammar.

    Attributes:
        descriptor: The complete descriptor string being parsed.
        position:   Character position where parsing failed.
        reason:     Short human-readable cause.
    """

    def __init__(self, descriptor: str, position: int, reason: str) -> None:
        super().__init__(
            f"Malformed descriptor {descriptor!r} at position {position}: "
            f"{reason}"
        )
        self.descriptor = descriptor
        self.position = position
        self.reason = reason
