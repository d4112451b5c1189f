"""
Classy Core Module
===================

Contains the analysis engine, the class file data model and the error
hierarchy shared by every Classy component.
"""

from classy.core.engine import ClassyEngine
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
    AnalysisResult,
    Attribute,
    ClassFile,
    ClassSummary,
    ConstantPool,
    ConstantTag,
    FieldInfo,
    MemberSummary,
    MethodInfo,
    ResolutionProblem,
)

__all__ = [
    "ClassyEngine",
    "AnalysisResult",
    "Attribute",
    "ClassFile",
    "ClassSummary",
    "ConstantPool",
    "ConstantTag",
    "FieldInfo",
    "MemberSummary",
    "MethodInfo",
    "ResolutionProblem",
    "BadMagic",
    "ClassFileError",
    "DecodeError",
    "DescriptorSyntaxError",
    "IndexResolutionError",
    "TruncationError",
    "UnknownConstantTag",
]
