"""
Access Flag Formatting
=======================

Maps ``access_flags`` bitmasks to Java modifier keywords.

The same bit means different things depending on what carries it:
``0x0040`` is ``volatile`` on a field but marks a compiler-generated
bridge on a method, and ``0x0080`` is ``transient`` on a field but
``varargs`` on a method.  Each context therefore has its own table.
Keywords are emitted in the order they are conventionally written in
source, whatever the order the bits were set in.  Unknown bits are
dropped; nothing in this module raises for any 16-bit input.

References:
    - Lindholm, T., et al. (2014). The Java Virtual Machine
      Specification, Java SE 8 Edition. Tables 4.1-A, 4.5-A, 4.6-A.
"""

from __future__ import annotations

import enum


# ---------------------------------------------------------------------------
# Flag constants
# ---------------------------------------------------------------------------

ACC_PUBLIC: int = 0x0001
ACC_PRIVATE: int = 0x0002
ACC_PROTECTED: int = 0x0004
ACC_STATIC: int = 0x0008
ACC_FINAL: int = 0x0010
ACC_SUPER: int = 0x0020          # class
ACC_SYNCHRONIZED: int = 0x0020   # method
ACC_VOLATILE: int = 0x0040       # field
ACC_BRIDGE: int = 0x0040         # method
ACC_TRANSIENT: int = 0x0080      # field
ACC_VARARGS: int = 0x0080        # method
ACC_NATIVE: int = 0x0100
ACC_INTERFACE: int = 0x0200
ACC_ABSTRACT: int = 0x0400
ACC_STRICT: int = 0x0800
ACC_SYNTHETIC: int = 0x1000
ACC_ANNOTATION: int = 0x2000
ACC_ENUM: int = 0x4000
ACC_MODULE: int = 0x8000


class FlagContext(str, enum.Enum):
    """What an access-flags word belongs to."""
    CLASS = "class"
    FIELD = "field"
    METHOD = "method"


# ---------------------------------------------------------------------------
# Modifier tables (source order)
# ---------------------------------------------------------------------------

_FIELD_MODIFIERS: tuple[tuple[int, str], ...] = (
    (ACC_PUBLIC, "public"),
    (ACC_PRIVATE, "private"),
    (ACC_PROTECTED, "protected"),
    (ACC_STATIC, "static"),
    (ACC_FINAL, "final"),
    (ACC_VOLATILE, "volatile"),
    (ACC_TRANSIENT, "transient"),
    (ACC_ENUM, "enum"),
)

_METHOD_MODIFIERS: tuple[tuple[int, str], ...] = (
    (ACC_PUBLIC, "public"),
    (ACC_PRIVATE, "private"),
    (ACC_PROTECTED, "protected"),
    (ACC_ABSTRACT, "abstract"),
    (ACC_STATIC, "static"),
    (ACC_FINAL, "final"),
    (ACC_SYNCHRONIZED, "synchronized"),
    (ACC_NATIVE, "native"),
    (ACC_STRICT, "strictfp"),
)

_CLASS_MODIFIERS: tuple[tuple[int, str], ...] = (
    (ACC_PUBLIC, "public"),
    (ACC_ABSTRACT, "abstract"),
    (ACC_FINAL, "final"),
)

# ---------------------------------------------------------------------------
# ACC_* name tables, in bit order
# ---------------------------------------------------------------------------

_FLAG_NAMES: dict[FlagContext, tuple[tuple[int, str], ...]] = {
    FlagContext.CLASS: (
        (ACC_PUBLIC, "ACC_PUBLIC"),
        (ACC_FINAL, "ACC_FINAL"),
        (ACC_SUPER, "ACC_SUPER"),
        (ACC_INTERFACE, "ACC_INTERFACE"),
        (ACC_ABSTRACT, "ACC_ABSTRACT"),
        (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
        (ACC_ANNOTATION, "ACC_ANNOTATION"),
        (ACC_ENUM, "ACC_ENUM"),
        (ACC_MODULE, "ACC_MODULE"),
    ),
    FlagContext.FIELD: (
        (ACC_PUBLIC, "ACC_PUBLIC"),
        (ACC_PRIVATE, "ACC_PRIVATE"),
        (ACC_PROTECTED, "ACC_PROTECTED"),
        (ACC_STATIC, "ACC_STATIC"),
        (ACC_FINAL, "ACC_FINAL"),
        (ACC_VOLATILE, "ACC_VOLATILE"),
        (ACC_TRANSIENT, "ACC_TRANSIENT"),
        (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
        (ACC_ENUM, "ACC_ENUM"),
    ),
    FlagContext.METHOD: (
        (ACC_PUBLIC, "ACC_PUBLIC"),
        (ACC_PRIVATE, "ACC_PRIVATE"),
        (ACC_PROTECTED, "ACC_PROTECTED"),
        (ACC_STATIC, "ACC_STATIC"),
        (ACC_FINAL, "ACC_FINAL"),
        (ACC_SYNCHRONIZED, "ACC_SYNCHRONIZED"),
        (ACC_BRIDGE, "ACC_BRIDGE"),
        (ACC_VARARGS, "ACC_VARARGS"),
        (ACC_NATIVE, "ACC_NATIVE"),
        (ACC_ABSTRACT, "ACC_ABSTRACT"),
        (ACC_STRICT, "ACC_STRICT"),
        (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    ),
}


def _select(flags: int, table: tuple[tuple[int, str], ...]) -> list[str]:
    return [name for bit, name in table if flags & bit]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def field_modifiers(flags: int) -> list[str]:
    """Modifier keywords of a field, in source order."""
    return _select(flags, _FIELD_MODIFIERS)


def format_field_access(flags: int) -> str:
    """Space separated field modifiers, e.g. ``"private static final"``."""
    return " ".join(field_modifiers(flags))


def method_modifiers(flags: int) -> list[str]:
    """Modifier keywords of a method, in source order.

    ``ACC_BRIDGE`` and ``ACC_VARARGS`` have no keyword and are never
    rendered as ``volatile`` / ``transient``.
    """
    return _select(flags, _METHOD_MODIFIERS)


def format_method_access(flags: int) -> str:
    """Space separated method modifiers, e.g. ``"public static final"``."""
    return " ".join(method_modifiers(flags))


def class_modifiers(flags: int) -> list[str]:
    """Modifier keywords of a class declaration.

    Interfaces always carry ``ACC_ABSTRACT``; it is left implicit for
    them the same way ``javac`` output omits it.
    """
    modifiers = _select(flags, _CLASS_MODIFIERS)
    if flags & ACC_INTERFACE and "abstract" in modifiers:
        modifiers.remove("abstract")
    return modifiers


def format_class_access(flags: int) -> str:
    return " ".join(class_modifiers(flags))


def class_kind(flags: int) -> str:
    """Declaration keyword: ``class``, ``interface``, ``enum`` or ``@interface``."""
    if flags & ACC_ANNOTATION:
        return "@interface"
    if flags & ACC_INTERFACE:
        return "interface"
    if flags & ACC_ENUM:
        return "enum"
    return "class"


def flag_names(flags: int, context: FlagContext | str) -> list[str]:
    """Return the ``ACC_*`` names of every known bit set in *flags*.

    Args:
        flags:   Access-flags word.
        context: ``"class"``, ``"field"`` or ``"method"``.

    Raises:
        ValueError: If *context* is not one of the three contexts.
    """
    return _select(flags, _FLAG_NAMES[FlagContext(context)])
