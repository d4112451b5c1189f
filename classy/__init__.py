"""
Classy -- JVM Class File Decoder
=================================

Decodes a JVM ``.class`` file into an immutable, navigable structure and
resolves the names, type descriptors and literals it stores indirectly
through its constant pool.

Capabilities:
    - Bounds-checked, single-pass decoding of the class file layout
    - All 14 constant pool entry kinds, including the two-slot Long/Double
    - Checked constant pool lookups with precise error reporting
    - Field and method descriptor parsing into Java type names
    - Access flag formatting for classes, fields and methods
    - Rich tree rendering and JSON reports via the ``classy`` command

Usage::

    from classy import decode, parse_method_descriptor

    class_file = decode(open("Main.class", "rb").read())
    for method in class_file.methods:
        pool = class_file.constant_pool
        print(method.name(pool), parse_method_descriptor(method.descriptor(pool)))
"""

__version__ = "0.1.0"

from classy.core.errors import (
    BadMagic,
    ClassFileError,
    DecodeError,
    DescriptorSyntaxError,
    IndexResolutionError,
    TruncationError,
    UnknownConstantTag,
)
from classy.core.models import (
    Attribute,
    ClassFile,
    ConstantPool,
    ConstantTag,
    FieldInfo,
    MethodInfo,
)
from classy.analyzers.access_flags import (
    class_kind,
    format_class_access,
    format_field_access,
    format_method_access,
)
from classy.analyzers.descriptors import (
    MethodDescriptor,
    parse_field_descriptor,
    parse_method_descriptor,
)
from classy.parsers.classfile import ClassFileDecoder, decode

__all__ = [
    "__version__",
    "decode",
    "ClassFileDecoder",
    "ClassFile",
    "ConstantPool",
    "ConstantTag",
    "Attribute",
    "FieldInfo",
    "MethodInfo",
    "MethodDescriptor",
    "parse_field_descriptor",
    "parse_method_descriptor",
    "format_field_access",
    "format_method_access",
    "format_class_access",
    "class_kind",
    "ClassFileError",
    "DecodeError",
    "TruncationError",
    "UnknownConstantTag",
    "BadMagic",
    "IndexResolutionError",
    "DescriptorSyntaxError",
]
