"""
Type Descriptor Parser
=======================

Recursive-descent parser for the compact type grammar the JVM uses for
field types and method signatures::

    FieldType        := BaseType | ObjectType | ArrayType
    BaseType         := B | C | D | F | I | J | S | Z
    ObjectType       := L ClassName ;
    ArrayType        := [ FieldType
    MethodDescriptor := ( FieldType* ) ReturnType
    ReturnType       := FieldType | V

Types come back as Java source spellings: ``I`` is ``int``,
``Ljava/lang/String;`` is ``java.lang.String`` and ``[[I`` is
``int[][]``.

References:
    - Lindholm, T., et al. (2014). The Java Virtual Machine
      Specification, Java SE 8 Edition. Section 4.3: Descriptors.
"""

from __future__ import annotations

from typing import NamedTuple

from classy.core.errors import DescriptorSyntaxError


_PRIMITIVES: dict[str, str] = {
    "B": "byte",
    "C": "char",
    "D": "double",
    "F": "float",
    "I": "int",
    "J": "long",
    "S": "short",
    "Z": "boolean",
}

MAX_ARRAY_DIMENSIONS: int = 255

# Not allowed inside a binary class name
_CLASS_NAME_FORBIDDEN = frozenset("()[.")


class MethodDescriptor(NamedTuple):
    """A parsed method descriptor.

    Attributes:
        parameters:  Parameter type names in declaration order.
        return_type: Return type name, ``"void"`` for ``V``.
    """
    parameters: list[str]
    return_type: str


class _DescriptorReader:
    """Cursor over one descriptor string."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def error(self, reason: str, position: int | None = None) -> DescriptorSyntaxError:
        return DescriptorSyntaxError(
            self._text, self._pos if position is None else position, reason
        )

    def peek(self) -> str | None:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return None

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.error(f"expected {char!r}")
        self._pos += 1

    def consume(self, char: str) -> bool:
        if self.peek() == char:
            self._pos += 1
            return True
        return False

    def expect_end(self) -> None:
        if self._pos != len(self._text):
            raise self.error(
                f"unexpected trailing characters {self._text[self._pos:]!r}"
            )

    def read_type(self, *, allow_void: bool = False) -> str:
        """Read one field type (or ``V`` when *allow_void*)."""
        start = self._pos
        dimensions = 0
        while self.consume("["):
            dimensions += 1
        if dimensions > MAX_ARRAY_DIMENSIONS:
            raise self.error(
                f"more than {MAX_ARRAY_DIMENSIONS} array dimensions", start
            )

        lead = self.peek()
        if lead is None:
            raise self.error("unexpected end of descriptor")

        if lead in _PRIMITIVES:
            self._pos += 1
            name = _PRIMITIVES[lead]
        elif lead == "L":
            name = self._read_class_name()
        elif lead == "V":
            if not allow_void or dimensions:
                raise self.error("'V' is only valid as a method return type")
            self._pos += 1
            name = "void"
        else:
            raise self.error(f"unexpected character {lead!r}")

        return name + "[]" * dimensions

    def _read_class_name(self) -> str:
        start = self._pos
        end = self._text.find(";", start + 1)
        if end < 0:
            raise self.error("class name is missing its terminating ';'", start)
        binary_name = self._text[start + 1:end]
        if not binary_name:
            raise self.error("empty class name", start)
        for offset, char in enumerate(binary_name, start=start + 1):
            if char in _CLASS_NAME_FORBIDDEN:
                raise self.error(
                    f"illegal character {char!r} in class name", offset
                )
        self._pos = end + 1
        return binary_name.replace("/", ".")


def parse_field_descriptor(descriptor: str) -> str:
    """Parse a field descriptor into a Java type name.

    Args:
        descriptor: e.g. ``"[Ljava/lang/String;"``.

    Returns:
        The type name, e.g. ``"java.lang.String[]"``.

    Raises:
        DescriptorSyntaxError: If *descriptor* is not exactly one field
            type.
    """
    reader = _DescriptorReader(descriptor)
    if not descriptor:
        raise reader.error("empty descriptor")
    name = reader.read_type()
    reader.expect_end()
    return name


def parse_method_descriptor(descriptor: str) -> MethodDescriptor:
    """Parse a method descriptor into parameter and return type names.

    >>> parse_method_descriptor("(IFLjava/lang/Object;)Z")
    MethodDescriptor(parameters=['int', 'float', 'java.lang.Object'], return_type='boolean')

    Raises:
        DescriptorSyntaxError: On a missing ``(`` or ``)``, a malformed
            parameter or return type, or trailing characters.
    """
    reader = _DescriptorReader(descriptor)
    if not descriptor:
        raise reader.error("empty descriptor")
    reader.expect("(")

    parameters: list[str] = []
    while not reader.consume(")"):
        if reader.peek() is None:
            raise reader.error("parameter list is missing its closing ')'")
        parameters.append(reader.read_type())

    return_type = reader.read_type(allow_void=True)
    reader.expect_end()
    return MethodDescriptor(parameters, return_type)
