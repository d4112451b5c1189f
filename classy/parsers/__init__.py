"""
Classy Parsers
===============

Byte-level readers for the class file layout: the bounds-checked cursor,
the constant pool decoder, member and attribute tables, and the
top-level decoder that ties them together.
"""

from classy.parsers.classfile import ClassFileDecoder, decode
from classy.parsers.constant_pool import decode_constant_pool
from classy.parsers.cursor import ByteCursor

__all__ = [
    "ByteCursor",
    "ClassFileDecoder",
    "decode",
    "decode_constant_pool",
]
