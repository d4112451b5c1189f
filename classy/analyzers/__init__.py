"""
Classy Analyzers
=================

Interpretation of values stored in a decoded class file: type
descriptors and access flag bit sets.
"""

from classy.analyzers.access_flags import (
    FlagContext,
    class_kind,
    flag_names,
    format_class_access,
    format_field_access,
    format_method_access,
)
from classy.analyzers.descriptors import (
    MethodDescriptor,
    parse_field_descriptor,
    parse_method_descriptor,
)

__all__ = [
    "FlagContext",
    "MethodDescriptor",
    "class_kind",
    "flag_names",
    "format_class_access",
    "format_field_access",
    "format_method_access",
    "parse_field_descriptor",
    "parse_method_descriptor",
]
