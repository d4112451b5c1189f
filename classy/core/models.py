"""
Classy Data Models
===================

Pydantic-based, immutable models for a decoded JVM class file.  The
models mirror the serialised layout closely: indices stay indices, and
turning an index into a name or a type is an explicit, checked lookup
against the :class:`ConstantPool` rather than a stored reference.

The constant pool is an arena: one owned, ordered tuple of slots that
every other structure points into by 1-based index.  Slot ``i`` lives at
``slots[i - 1]``; the placeholder slot that follows each Long/Double
entry is stored as ``None``.

References:
    - Lindholm, T., Yellin, F., Bracha, G., & Buckley, A. (2014).
      The Java Virtual Machine Specification, Java SE 8 Edition.
      Section 4.4: The Constant Pool.
"""

from __future__ import annotations

import codecs
import enum
import struct
from typing import Annotated, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from classy.core.errors import BadMagic, IndexResolutionError


CLASS_FILE_MAGIC: int = 0xCAFEBABE


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ConstantTag(enum.IntEnum):
    """One-byte tag preceding every constant pool entry."""
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    INVOKE_DYNAMIC = 18

    @property
    def label(self) -> str:
        """Conventional ``CONSTANT_<Kind>`` name of the tag."""
        return _TAG_LABELS[self]

    @property
    def is_wide(self) -> bool:
        """``True`` for the 8-byte kinds that occupy two pool slots."""
        return self in (ConstantTag.LONG, ConstantTag.DOUBLE)


_TAG_LABELS: dict[ConstantTag, str] = {
    ConstantTag.UTF8: "CONSTANT_Utf8",
    ConstantTag.INTEGER: "CONSTANT_Integer",
    ConstantTag.FLOAT: "CONSTANT_Float",
    ConstantTag.LONG: "CONSTANT_Long",
    ConstantTag.DOUBLE: "CONSTANT_Double",
    ConstantTag.CLASS: "CONSTANT_Class",
    ConstantTag.STRING: "CONSTANT_String",
    ConstantTag.FIELDREF: "CONSTANT_Fieldref",
    ConstantTag.METHODREF: "CONSTANT_Methodref",
    ConstantTag.INTERFACE_METHODREF: "CONSTANT_InterfaceMethodref",
    ConstantTag.NAME_AND_TYPE: "CONSTANT_NameAndType",
    ConstantTag.METHOD_HANDLE: "CONSTANT_MethodHandle",
    ConstantTag.METHOD_TYPE: "CONSTANT_MethodType",
    ConstantTag.INVOKE_DYNAMIC: "CONSTANT_InvokeDynamic",
}


class ReferenceKind(enum.IntEnum):
    """Behaviour of a method handle (JVMS table 5.4.3.5-A)."""
    GET_FIELD = 1
    GET_STATIC = 2
    PUT_FIELD = 3
    PUT_STATIC = 4
    INVOKE_VIRTUAL = 5
    INVOKE_STATIC = 6
    INVOKE_SPECIAL = 7
    NEW_INVOKE_SPECIAL = 8
    INVOKE_INTERFACE = 9

    @property
    def label(self) -> str:
        """The ``REF_<kind>`` mnemonic, e.g. ``REF_invokeStatic``."""
        head, *rest = self.name.lower().split("_")
        return "REF_" + head + "".join(part.capitalize() for part in rest)


# ---------------------------------------------------------------------------
# Modified UTF-8
# ---------------------------------------------------------------------------

def decode_modified_utf8(raw: bytes) -> str:
    """Materialise the JVM's modified UTF-8 encoding as text.

    Modified UTF-8 differs from standard UTF-8 in two ways: NUL is
    written as the overlong pair ``C0 80``, and characters outside the
    Basic Multilingual Plane are written as a UTF-16 surrogate pair with
    each surrogate encoded as its own 3-byte sequence.

    Byte runs that are not decodable at all are replaced with U+FFFD
    rather than failing the lookup.

    Args:
        raw: The verbatim bytes of a ``CONSTANT_Utf8`` entry.

    Returns:
        Decoded string value.
    """
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors=_MUTF8_ERRORS)
    # Join surrogate pairs; lone surrogates are kept as they are
    return text.encode("utf-16-be", errors="surrogatepass").decode(
        "utf-16-be", errors="surrogatepass"
    )


def _mutf8_error_handler(exc: UnicodeError) -> tuple[str, int]:
    """Decode error handler: pass encoded surrogates, replace anything else."""
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    data, start = exc.object, exc.start
    lead = data[start:start + 3]
    if (
        len(lead) == 3
        and lead[0] == 0xED
        and 0xA0 <= lead[1] <= 0xBF
        and 0x80 <= lead[2] <= 0xBF
    ):
        code_point = 0xD000 | ((lead[1] & 0x3F) << 6) | (lead[2] & 0x3F)
        return chr(code_point), start + 3
    return "\ufffd", exc.end


_MUTF8_ERRORS = "classy.mutf8"
codecs.register_error(_MUTF8_ERRORS, _mutf8_error_handler)


# ---------------------------------------------------------------------------
# Constant pool entries
# ---------------------------------------------------------------------------

class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True, ser_json_bytes="base64", val_json_bytes="base64"
    )


class _ConstantEntry(_FrozenModel):
    """Shared behaviour of every constant pool entry."""

    @property
    def kind(self) -> str:
        """``CONSTANT_<Kind>`` label of the entry."""
        return ConstantTag(self.tag).label  # type: ignore[attr-defined]

    @property
    def is_wide(self) -> bool:
        return ConstantTag(self.tag).is_wide  # type: ignore[attr-defined]


class ClassConstant(_ConstantEntry):
    """A class or interface; *name_index* points at its binary name."""
    tag: Literal[ConstantTag.CLASS] = ConstantTag.CLASS
    name_index: int


class FieldRefConstant(_ConstantEntry):
    tag: Literal[ConstantTag.FIELDREF] = ConstantTag.FIELDREF
    class_index: int
    name_and_type_index: int


class MethodRefConstant(_ConstantEntry):
    tag: Literal[ConstantTag.METHODREF] = ConstantTag.METHODREF
    class_index: int
    name_and_type_index: int


class InterfaceMethodRefConstant(_ConstantEntry):
    tag: Literal[ConstantTag.INTERFACE_METHODREF] = ConstantTag.INTERFACE_METHODREF
    class_index: int
    name_and_type_index: int


class StringConstant(_ConstantEntry):
    """A ``java.lang.String`` literal backed by a Utf8 entry."""
    tag: Literal[ConstantTag.STRING] = ConstantTag.STRING
    string_index: int


class IntegerConstant(_ConstantEntry):
    """Signed 32-bit integer literal."""
    tag: Literal[ConstantTag.INTEGER] = ConstantTag.INTEGER
    value: int


class FloatConstant(_ConstantEntry):
    """IEEE-754 single precision literal.

    The raw bit pattern is stored so that NaN payloads survive and two
    decodes of the same buffer compare equal.
    """
    tag: Literal[ConstantTag.FLOAT] = ConstantTag.FLOAT
    bits: int

    @property
    def value(self) -> float:
        return struct.unpack(">f", struct.pack(">I", self.bits))[0]


class LongConstant(_ConstantEntry):
    """Signed 64-bit integer literal; occupies two pool slots."""
    tag: Literal[ConstantTag.LONG] = ConstantTag.LONG
    value: int


class DoubleConstant(_ConstantEntry):
    """IEEE-754 double precision literal; occupies two pool slots."""
    tag: Literal[ConstantTag.DOUBLE] = ConstantTag.DOUBLE
    bits: int

    @property
    def value(self) -> float:
        return struct.unpack(">d", struct.pack(">Q", self.bits))[0]


class NameAndTypeConstant(_ConstantEntry):
    tag: Literal[ConstantTag.NAME_AND_TYPE] = ConstantTag.NAME_AND_TYPE
    name_index: int
    descriptor_index: int


class Utf8Constant(_ConstantEntry):
    """Verbatim modified UTF-8 bytes.

    Attributes:
        raw: Bytes exactly as stored in the class file.
    """
    tag: Literal[ConstantTag.UTF8] = ConstantTag.UTF8
    raw: bytes

    @property
    def value(self) -> str:
        """Decoded text (see :func:`decode_modified_utf8`)."""
        return decode_modified_utf8(self.raw)


class MethodHandleConstant(_ConstantEntry):
    tag: Literal[ConstantTag.METHOD_HANDLE] = ConstantTag.METHOD_HANDLE
    reference_kind: int
    reference_index: int

    @property
    def kind_name(self) -> str:
        """``REF_*`` mnemonic of the reference kind."""
        try:
            return ReferenceKind(self.reference_kind).label
        except ValueError:
            return f"REF_unknown({self.reference_kind})"


class MethodTypeConstant(_ConstantEntry):
    tag: Literal[ConstantTag.METHOD_TYPE] = ConstantTag.METHOD_TYPE
    descriptor_index: int


class InvokeDynamicConstant(_ConstantEntry):
    tag: Literal[ConstantTag.INVOKE_DYNAMIC] = ConstantTag.INVOKE_DYNAMIC
    bootstrap_method_attr_index: int
    name_and_type_index: int


ConstantPoolEntry = Annotated[
    Union[
        ClassConstant,
        FieldRefConstant,
        MethodRefConstant,
        InterfaceMethodRefConstant,
        StringConstant,
        IntegerConstant,
        FloatConstant,
        LongConstant,
        DoubleConstant,
        NameAndTypeConstant,
        Utf8Constant,
        MethodHandleConstant,
        MethodTypeConstant,
        InvokeDynamicConstant,
    ],
    Field(discriminator="tag"),
]

_MEMBER_REF_TAGS: tuple[ConstantTag, ...] = (
    ConstantTag.FIELDREF,
    ConstantTag.METHODREF,
    ConstantTag.INTERFACE_METHODREF,
)

_LITERAL_TAGS: tuple[ConstantTag, ...] = (
    ConstantTag.INTEGER,
    ConstantTag.FLOAT,
    ConstantTag.LONG,
    ConstantTag.DOUBLE,
    ConstantTag.STRING,
)


class MemberRef(NamedTuple):
    """A resolved Fieldref / Methodref / InterfaceMethodref."""
    class_name: str
    name: str
    descriptor: str


# ---------------------------------------------------------------------------
# Constant pool
# ---------------------------------------------------------------------------

class ConstantPool(_FrozenModel):
    """The decoded constant pool.

    Indices are 1-based.  ``slots[i - 1]`` holds entry ``i``; a ``None``
    slot is the unaddressable placeholder following a Long or Double.

    Attributes:
        slots: Every slot from index 1 to ``count - 1``.
    """
    slots: tuple[Optional[ConstantPoolEntry], ...] = ()

    @property
    def count(self) -> int:
        """The ``constant_pool_count`` value declared in the header."""
        return len(self.slots) + 1

    def __len__(self) -> int:
        return len(self.slots)

    def is_placeholder(self, index: int) -> bool:
        """Whether *index* is the reserved slot after a Long/Double."""
        return 1 <= index <= len(self.slots) and self.slots[index - 1] is None

    def entries(self):
        """Yield ``(index, entry)`` for every real entry, skipping placeholders."""
        for position, entry in enumerate(self.slots, start=1):
            if entry is not None:
                yield position, entry

    # ------------------------------------------------------------------ #
    #  Checked lookup
    # ------------------------------------------------------------------ #

    def get(
        self,
        index: int,
        expected: ConstantTag | tuple[ConstantTag, ...] | None = None,
    ) -> ConstantPoolEntry:
        """Return the entry at *index*, checking bounds and kind.

        Args:
            index:    1-based constant pool index.
            expected: Tag (or tags) the entry must carry.  ``None``
                      accepts any kind.

        Returns:
            The constant pool entry.

        Raises:
            IndexResolutionError: If *index* is 0, out of range, a
                placeholder slot, or an entry of the wrong kind.
        """
        if isinstance(expected, ConstantTag):
            expected = (expected,)
        wanted = " or ".join(tag.label for tag in expected) if expected else None

        if index == 0:
            raise IndexResolutionError(index, "index 0 is never valid", wanted)
        if index < 0 or index > len(self.slots):
            raise IndexResolutionError(
                index,
                f"out of range for a pool of {len(self.slots)} slot(s)",
                wanted,
            )

        entry = self.slots[index - 1]
        if entry is None:
            raise IndexResolutionError(
                index, "placeholder slot after a Long/Double entry", wanted
            )
        if expected and entry.tag not in expected:
            raise IndexResolutionError(index, f"found {entry.kind}", wanted)
        return entry

    # ------------------------------------------------------------------ #
    #  Typed resolution helpers
    # ------------------------------------------------------------------ #

    def utf8(self, index: int) -> str:
        """Resolve a ``CONSTANT_Utf8`` entry to its text."""
        return self.get(index, ConstantTag.UTF8).value

    def class_name(self, index: int) -> str:
        """Resolve a ``CONSTANT_Class`` entry to its binary name (``a/b/C``)."""
        entry = self.get(index, ConstantTag.CLASS)
        return self.utf8(entry.name_index)

    def string(self, index: int) -> str:
        """Resolve a ``CONSTANT_String`` entry to its literal text."""
        entry = self.get(index, ConstantTag.STRING)
        return self.utf8(entry.string_index)

    def name_and_type(self, index: int) -> tuple[str, str]:
        """Resolve a ``CONSTANT_NameAndType`` entry to ``(name, descriptor)``."""
        entry = self.get(index, ConstantTag.NAME_AND_TYPE)
        return self.utf8(entry.name_index), self.utf8(entry.descriptor_index)

    def member_ref(self, index: int) -> MemberRef:
        """Resolve a field, method or interface method reference."""
        entry = self.get(index, _MEMBER_REF_TAGS)
        name, descriptor = self.name_and_type(entry.name_and_type_index)
        return MemberRef(self.class_name(entry.class_index), name, descriptor)

    def literal(self, index: int) -> int | float | str:
        """Resolve a loadable literal (Integer, Float, Long, Double, String)."""
        entry = self.get(index, _LITERAL_TAGS)
        if isinstance(entry, StringConstant):
            return self.utf8(entry.string_index)
        return entry.value


# ---------------------------------------------------------------------------
# Attributes and members
# ---------------------------------------------------------------------------

class Attribute(_FrozenModel):
    """A named attribute with an opaque payload.

    Attributes:
        name_index: Index of the Utf8 entry holding the attribute name.
        data:       The raw ``info`` bytes; never interpreted.
    """
    name_index: int
    data: bytes = b""

    @property
    def length(self) -> int:
        return len(self.data)

    def name(self, pool: ConstantPool) -> str:
        return pool.utf8(self.name_index)


class MemberInfo(_FrozenModel):
    """Fields and methods share one layout: flags, name, descriptor, attributes.

    Name and descriptor are resolved on demand so that a malformed index
    only fails that lookup, not the decode.

    Attributes:
        access_flags:     ``ACC_*`` bitmask.
        name_index:       Index of the Utf8 entry holding the simple name.
        descriptor_index: Index of the Utf8 entry holding the descriptor.
        attributes:       Attributes owned by this member, in file order.
    """
    access_flags: int
    name_index: int
    descriptor_index: int
    attributes: tuple[Attribute, ...] = ()

    def name(self, pool: ConstantPool) -> str:
        return pool.utf8(self.name_index)

    def descriptor(self, pool: ConstantPool) -> str:
        return pool.utf8(self.descriptor_index)

    def attribute(self, pool: ConstantPool, name: str) -> Optional[Attribute]:
        """Return the first attribute called *name*, or ``None``."""
        for attr in self.attributes:
            if attr.name(pool) == name:
                return attr
        return None


class FieldInfo(MemberInfo):
    """A ``field_info`` record."""


class MethodInfo(MemberInfo):
    """A ``method_info`` record."""


# ---------------------------------------------------------------------------
# Class file
# ---------------------------------------------------------------------------

_LEGACY_RELEASES: dict[int, str] = {
    45: "1.1",
    46: "1.2",
    47: "1.3",
    48: "1.4",
}


class ClassFile(_FrozenModel):
    """A fully decoded class file.

    Attributes:
        magic:          Header magic; ``0xCAFEBABE`` for a valid file.
        minor_version:  Minor format version.
        major_version:  Major format version (52 for Java 8).
        constant_pool:  The decoded constant pool arena.
        access_flags:   Class-level ``ACC_*`` bitmask.
        this_class:     Index of the Class entry naming this class.
        super_class:    Index of the superclass entry, 0 for ``java/lang/Object``.
        interfaces:     Class entry indices of the direct superinterfaces.
        fields:         Declared fields in file order.
        methods:        Declared methods in file order.
        attributes:     Class-level attributes in file order.
    """
    magic: int
    minor_version: int
    major_version: int
    constant_pool: ConstantPool
    access_flags: int
    this_class: int
    super_class: int
    interfaces: tuple[int, ...] = ()
    fields: tuple[FieldInfo, ...] = ()
    methods: tuple[MethodInfo, ...] = ()
    attributes: tuple[Attribute, ...] = ()

    # ------------------------------------------------------------------ #
    #  Header
    # ------------------------------------------------------------------ #

    @property
    def constant_pool_count(self) -> int:
        return self.constant_pool.count

    @property
    def has_valid_magic(self) -> bool:
        return self.magic == CLASS_FILE_MAGIC

    def check_magic(self) -> None:
        """Raise :class:`BadMagic` if the header magic is wrong."""
        if not self.has_valid_magic:
            raise BadMagic(self.magic)

    @property
    def version(self) -> str:
        """Format version as ``"major.minor"``."""
        return f"{self.major_version}.{self.minor_version}"

    @property
    def java_release(self) -> str:
        """Java platform release that introduced this major version."""
        if self.major_version >= 49:
            return str(self.major_version - 44)
        return _LEGACY_RELEASES.get(self.major_version, "unknown")

    # ------------------------------------------------------------------ #
    #  Resolution helpers
    # ------------------------------------------------------------------ #

    def name(self) -> str:
        """Binary name of this class, e.g. ``java/lang/String``."""
        return self.constant_pool.class_name(self.this_class)

    def super_name(self) -> Optional[str]:
        """Binary name of the superclass, ``None`` for ``java/lang/Object``."""
        if self.super_class == 0:
            return None
        return self.constant_pool.class_name(self.super_class)

    def interface_names(self) -> list[str]:
        return [self.constant_pool.class_name(idx) for idx in self.interfaces]

    def attribute(self, name: str) -> Optional[Attribute]:
        """Return the first class-level attribute called *name*, or ``None``."""
        for attr in self.attributes:
            if attr.name(self.constant_pool) == name:
                return attr
        return None


# ---------------------------------------------------------------------------
# Analysis summaries
# ---------------------------------------------------------------------------

class ResolutionProblem(BaseModel):
    """A lookup that failed while summarising an otherwise decoded class.

    Attributes:
        location: What was being resolved, e.g. ``"method #2 descriptor"``.
        message:  The error message of the failed lookup.
    """
    location: str
    message: str


class MemberSummary(BaseModel):
    """Resolved, display-ready view of one field or method.

    Unresolvable names, descriptors or types are left as ``None`` and a
    matching :class:`ResolutionProblem` is recorded on the class summary.

    Attributes:
        kind:         ``"field"`` or ``"method"``.
        index:        Position of the member in its table.
        name:         Simple name.
        descriptor:   Raw descriptor string.
        access_flags: ``ACC_*`` bitmask.
        modifiers:    Modifier keywords in source order.
        flag_names:   ``ACC_*`` names of every set bit.
        type:         Field type, or the method's return type.
        parameters:   Method parameter types (empty for fields).
        attributes:   Names of the member's attributes.
    """
    kind: str
    index: int
    name: Optional[str] = None
    descriptor: Optional[str] = None
    access_flags: int = 0
    modifiers: list[str] = Field(default_factory=list)
    flag_names: list[str] = Field(default_factory=list)
    type: Optional[str] = None
    parameters: list[str] = Field(default_factory=list)
    attributes: list[str] = Field(default_factory=list)

    @property
    def declaration(self) -> str:
        """Java-like declaration, e.g. ``public static void main(java.lang.String[])``."""
        parts = list(self.modifiers)
        parts.append(self.type or "?")
        name = self.name or "?"
        if self.kind == "method":
            name += "(" + ", ".join(self.parameters) + ")"
        parts.append(name)
        return " ".join(parts)


class ClassSummary(BaseModel):
    """Resolved view of a decoded class file.

    Attributes:
        name:                Class name in dotted form.
        super_name:          Superclass in dotted form, ``None`` for the root.
        interfaces:          Direct superinterfaces in dotted form.
        kind:                ``class``, ``interface``, ``enum`` or ``@interface``.
        modifiers:           Class modifier keywords.
        access_flags:        Class ``ACC_*`` bitmask.
        flag_names:          ``ACC_*`` names of every set bit.
        version:             ``"major.minor"``.
        java_release:        Java release introducing the major version.
        magic_valid:         Whether the header magic was ``0xCAFEBABE``.
        constant_pool_count: Declared constant pool count.
        fields:              Field summaries in file order.
        methods:             Method summaries in file order.
        attributes:          Class attribute names.
        problems:            Lookups that failed, each scoped to one item.
    """
    name: Optional[str] = None
    super_name: Optional[str] = None
    interfaces: list[str] = Field(default_factory=list)
    kind: str = "class"
    modifiers: list[str] = Field(default_factory=list)
    access_flags: int = 0
    flag_names: list[str] = Field(default_factory=list)
    version: str = ""
    java_release: str = ""
    magic_valid: bool = True
    constant_pool_count: int = 0
    fields: list[MemberSummary] = Field(default_factory=list)
    methods: list[MemberSummary] = Field(default_factory=list)
    attributes: list[str] = Field(default_factory=list)
    problems: list[ResolutionProblem] = Field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """``True`` when every lookup resolved and the magic was valid."""
        return self.magic_valid and not self.problems


class AnalysisResult(BaseModel):
    """Outcome of analysing one class file.

    Attributes:
        path:       Resolved path of the analysed file, or a label.
        file_size:  Size of the input in bytes.
        sha256:     SHA-256 of the input.
        class_file: The decoded structure.
        summary:    Resolved view of *class_file*.
        duration:   Wall-clock seconds spent decoding and summarising.
    """
    path: str
    file_size: int
    sha256: str
    class_file: ClassFile
    summary: ClassSummary
    duration: float = 0.0
