"""
Class File Decoder
===================

Orchestrates the single, top-down pass over a class file buffer::

    ClassFile {
        u4             magic;
        u2             minor_version;
        u2             major_version;
        u2             constant_pool_count;
        cp_info        constant_pool[constant_pool_count-1];
        u2             access_flags;
        u2             this_class;
        u2             super_class;
        u2             interfaces_count;
        u2             interfaces[interfaces_count];
        u2             fields_count;
        field_info     fields[fields_count];
        u2             methods_count;
        method_info    methods[methods_count];
        u2             attributes_count;
        attribute_info attributes[attributes_count];
    }

Decoding fails fast: the first truncation or unknown constant tag
aborts the call and no partial :class:`ClassFile` is produced.  A wrong
magic number does not abort by default -- it is logged and surfaced via
:attr:`ClassFile.has_valid_magic` so that callers can still inspect a
damaged file.

References:
    - Lindholm, T., et al. (2014). The Java Virtual Machine
      Specification, Java SE 8 Edition. Section 4.1.
"""

from __future__ import annotations

from shared.logger import ClassyLogger

from classy.core.errors import BadMagic
from classy.core.models import CLASS_FILE_MAGIC, ClassFile
from classy.parsers.constant_pool import decode_constant_pool
from classy.parsers.cursor import ByteCursor
from classy.parsers.members import (
    decode_attributes,
    decode_fields,
    decode_interfaces,
    decode_methods,
)


_default_logger = ClassyLogger("decoder", console_output=False)


class ClassFileDecoder:
    """Decode one class file buffer into a :class:`ClassFile`.

    Usage::

        decoder = ClassFileDecoder(raw_bytes)
        class_file = decoder.decode()
        print(class_file.name())

    Args:
        data:         Complete contents of one class file.
        strict_magic: Raise :class:`BadMagic` instead of only reporting it.
        logger:       Logger for decode diagnostics.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        *,
        strict_magic: bool = False,
        logger: ClassyLogger | None = None,
    ) -> None:
        self._data: bytes | bytearray | memoryview = data
        self._strict_magic: bool = strict_magic
        self._logger: ClassyLogger = logger or _default_logger

    def decode(self) -> ClassFile:
        """Run the decode.

        Returns:
            The decoded class file.

        Raises:
            TruncationError: The buffer ended inside a field or record.
            UnknownConstantTag: A constant pool entry had an unknown tag.
            DecodeError: Any other structural violation.
            BadMagic: Only when ``strict_magic`` was requested.
        """
        cursor = ByteCursor(self._data)

        with self._logger.operation("decode"):
            magic = cursor.read_u4()
            minor_version = cursor.read_u2()
            major_version = cursor.read_u2()

            constant_pool = decode_constant_pool(cursor)
            self._logger.debug(
                "Constant pool: %d slot(s) ending at offset %d",
                len(constant_pool),
                cursor.offset,
            )

            access_flags = cursor.read_u2()
            this_class = cursor.read_u2()
            super_class = cursor.read_u2()
            interfaces = decode_interfaces(cursor)
            fields = decode_fields(cursor)
            methods = decode_methods(cursor)
            attributes = decode_attributes(cursor)

            if not cursor.at_end:
                self._logger.warning(
                    "Ignoring %d trailing byte(s) after offset %d",
                    cursor.remaining,
                    cursor.offset,
                )

            class_file = ClassFile(
                magic=magic,
                minor_version=minor_version,
                major_version=major_version,
                constant_pool=constant_pool,
                access_flags=access_flags,
                this_class=this_class,
                super_class=super_class,
                interfaces=interfaces,
                fields=fields,
                methods=methods,
                attributes=attributes,
            )

            if magic != CLASS_FILE_MAGIC:
                self._logger.warning(
                    "Bad magic 0x%08X (expected 0x%08X)", magic, CLASS_FILE_MAGIC
                )
                if self._strict_magic:
                    raise BadMagic(magic)

            self._logger.debug(
                "Decoded class file %s: %d field(s), %d method(s), %d attribute(s)",
                class_file.version,
                len(fields),
                len(methods),
                len(attributes),
            )

        return class_file


def decode(
    data: bytes | bytearray | memoryview,
    *,
    strict_magic: bool = False,
    logger: ClassyLogger | None = None,
) -> ClassFile:
    """Decode *data* as a class file.

    Module-level convenience wrapper around :class:`ClassFileDecoder`.
    """
    return ClassFileDecoder(data, strict_magic=strict_magic, logger=logger).decode()
