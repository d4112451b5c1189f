"""
Big-Endian Byte Cursor
=======================

Sequential, bounds-checked reader over an immutable byte buffer.  Every
multi-byte quantity in a class file is stored big-endian ("network
order"), so all reads here use :mod:`struct` with the ``>`` prefix.

A read that would run past the end of the buffer raises
:class:`~classy.core.errors.TruncationError` and leaves the cursor
where it was.
"""

from __future__ import annotations

import struct

from classy.core.errors import TruncationError


_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")
_U8 = struct.Struct(">Q")
_I4 = struct.Struct(">i")
_I8 = struct.Struct(">q")


class ByteCursor:
    """Forward-only big-endian reader.

    Usage::

        cursor = ByteCursor(raw_bytes)
        magic = cursor.read_u4()
        minor, major = cursor.read_u2(), cursor.read_u2()
    """

    __slots__ = ("_data", "_offset")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data: bytes = bytes(data)
        self._offset: int = 0

    # ------------------------------------------------------------------ #
    #  Position
    # ------------------------------------------------------------------ #

    @property
    def offset(self) -> int:
        """Offset of the next byte to be read."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self._offset

    @property
    def at_end(self) -> bool:
        return self._offset >= len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    # ------------------------------------------------------------------ #
    #  Reads
    # ------------------------------------------------------------------ #

    def _require(self, size: int) -> int:
        """Check that *size* bytes are available and return the start offset."""
        start = self._offset
        if size > len(self._data) - start:
            raise TruncationError(start, size, len(self._data) - start)
        return start

    def _unpack(self, fmt: struct.Struct) -> int:
        start = self._require(fmt.size)
        value = fmt.unpack_from(self._data, start)[0]
        self._offset = start + fmt.size
        return value

    def read_u1(self) -> int:
        start = self._require(1)
        self._offset = start + 1
        return self._data[start]

    def read_u2(self) -> int:
        return self._unpack(_U2)

    def read_u4(self) -> int:
        return self._unpack(_U4)

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_i4(self) -> int:
        return self._unpack(_I4)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_bytes(self, length: int) -> bytes:
        """Read exactly *length* raw bytes.

        Args:
            length: Number of bytes to consume.

        Returns:
            A copy of the byte run.
        """
        start = self._require(length)
        self._offset = start + length
        return self._data[start:start + length]
