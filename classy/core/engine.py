"""
Classy Analysis Engine
=======================

Reads a class file from disk, decodes it and builds a resolved
:class:`ClassSummary` for presentation.

Pipeline:
    1. Check the file exists and respects ``decoder.max_file_size``
    2. Read the bytes and hash them (SHA-256)
    3. Decode the class file structure
    4. Resolve names, descriptors and modifiers into a summary

Decoding errors propagate to the caller.  Resolution failures during
summarising are collected per item on :attr:`ClassSummary.problems`, so
one bad index does not hide the rest of the class.
"""

from __future__ import annotations

import hashlib
import time
from pathlib import Path
from typing import Callable, Optional, TypeVar

from shared.config import ClassyConfig
from shared.logger import ClassyLogger

from classy.analyzers.access_flags import (
    FlagContext,
    class_kind,
    class_modifiers,
    field_modifiers,
    flag_names,
    method_modifiers,
)
from classy.analyzers.descriptors import (
    parse_field_descriptor,
    parse_method_descriptor,
)
from classy.core.errors import ClassFileError
from classy.core.models import (
    AnalysisResult,
    Attribute,
    ClassFile,
    ClassSummary,
    ConstantPool,
    MemberInfo,
    MemberSummary,
    ResolutionProblem,
)
from classy.parsers.classfile import ClassFileDecoder

_T = TypeVar("_T")


def _dotted(binary_name: str) -> str:
    return binary_name.replace("/", ".")


class ClassyEngine:
    """Decode and summarise class files.

    Usage::

        engine = ClassyEngine()
        result = engine.analyze("build/classes/Main.class")
        for method in result.summary.methods:
            print(method.declaration)

    Args:
        config: Classy configuration; defaults are used if omitted.
        logger: Logger instance; a new ``engine`` logger if omitted.
    """

    def __init__(
        self,
        config: ClassyConfig | None = None,
        logger: ClassyLogger | None = None,
    ) -> None:
        self._config: ClassyConfig = config or ClassyConfig()
        self._logger: ClassyLogger = logger or ClassyLogger(
            "engine", log_level=self._config.global_settings.log_level
        )

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def analyze(self, file_path: str | Path) -> AnalysisResult:
        """Decode and summarise the class file at *file_path*.

        Raises:
            FileNotFoundError: If *file_path* is not an existing file.
            ValueError: If the file exceeds ``decoder.max_file_size``.
            ClassFileError: If the file cannot be decoded.
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Class file not found: {path}")

        file_size = path.stat().st_size
        max_size = self._config.decoder.max_file_size
        if file_size > max_size:
            raise ValueError(
                f"File too large: {file_size:,} bytes (max: {max_size:,} bytes)"
            )

        self._logger.info("Analyzing %s (%d bytes)", path, file_size)
        return self.analyze_data(path.read_bytes(), str(path.resolve()))

    def analyze_data(self, data: bytes, path: str = "<memory>") -> AnalysisResult:
        """Decode and summarise an in-memory class file.

        Args:
            data: Raw class file bytes.
            path: Label recorded on the result.
        """
        started = time.perf_counter()

        with self._logger.timed(f"decode {path}"):
            class_file = ClassFileDecoder(
                data,
                strict_magic=self._config.decoder.strict_magic,
                logger=self._logger,
            ).decode()
            summary = self.summarize(class_file)

        if summary.problems:
            self._logger.warning(
                "%d constant pool lookup(s) failed while summarising %s",
                len(summary.problems),
                path,
            )

        return AnalysisResult(
            path=path,
            file_size=len(data),
            sha256=hashlib.sha256(data).hexdigest(),
            class_file=class_file,
            summary=summary,
            duration=time.perf_counter() - started,
        )

    # ------------------------------------------------------------------ #
    #  Summary
    # ------------------------------------------------------------------ #

    def summarize(self, class_file: ClassFile) -> ClassSummary:
        """Resolve everything displayable about *class_file*.

        Never raises for resolution or descriptor errors; each one is
        recorded as a :class:`ResolutionProblem` and the affected value
        is left empty.
        """
        pool = class_file.constant_pool
        problems: list[ResolutionProblem] = []

        def attempt(location: str, lookup: Callable[[], _T]) -> Optional[_T]:
            try:
                return lookup()
            except ClassFileError as exc:
                self._logger.debug("Lookup failed for %s: %s", location, exc)
                problems.append(ResolutionProblem(location=location, message=str(exc)))
                return None

        name = attempt("this_class", class_file.name)
        super_name = attempt("super_class", class_file.super_name)

        interfaces: list[str] = []
        for position, index in enumerate(class_file.interfaces):
            resolved = attempt(
                f"interface #{position}", lambda index=index: pool.class_name(index)
            )
            if resolved is not None:
                interfaces.append(_dotted(resolved))

        flags = class_file.access_flags
        return ClassSummary(
            name=_dotted(name) if name is not None else None,
            super_name=_dotted(super_name) if super_name is not None else None,
            interfaces=interfaces,
            kind=class_kind(flags),
            modifiers=class_modifiers(flags),
            access_flags=flags,
            flag_names=flag_names(flags, FlagContext.CLASS),
            version=class_file.version,
            java_release=class_file.java_release,
            magic_valid=class_file.has_valid_magic,
            constant_pool_count=class_file.constant_pool_count,
            fields=[
                self._summarize_member(FlagContext.FIELD, position, field, pool, attempt)
                for position, field in enumerate(class_file.fields)
            ],
            methods=[
                self._summarize_member(FlagContext.METHOD, position, method, pool, attempt)
                for position, method in enumerate(class_file.methods)
            ],
            attributes=self._attribute_names(
                "class", class_file.attributes, pool, attempt
            ),
            problems=problems,
        )

    def _summarize_member(
        self,
        context: FlagContext,
        position: int,
        member: MemberInfo,
        pool: ConstantPool,
        attempt: Callable,
    ) -> MemberSummary:
        label = f"{context.value} #{position}"
        name = attempt(f"{label} name", lambda: member.name(pool))
        descriptor = attempt(f"{label} descriptor", lambda: member.descriptor(pool))

        member_type: Optional[str] = None
        parameters: list[str] = []
        if descriptor is not None:
            if context is FlagContext.METHOD:
                parsed = attempt(
                    f"{label} signature", lambda: parse_method_descriptor(descriptor)
                )
                if parsed is not None:
                    parameters, member_type = parsed
            else:
                member_type = attempt(
                    f"{label} type", lambda: parse_field_descriptor(descriptor)
                )

        modifiers = (
            method_modifiers(member.access_flags)
            if context is FlagContext.METHOD
            else field_modifiers(member.access_flags)
        )

        return MemberSummary(
            kind=context.value,
            index=position,
            name=name,
            descriptor=descriptor,
            access_flags=member.access_flags,
            modifiers=modifiers,
            flag_names=flag_names(member.access_flags, context),
            type=member_type,
            parameters=parameters,
            attributes=self._attribute_names(label, member.attributes, pool, attempt),
        )

    @staticmethod
    def _attribute_names(
        owner: str,
        attributes: tuple[Attribute, ...],
        pool: ConstantPool,
        attempt: Callable,
    ) -> list[str]:
        names: list[str] = []
        for position, attr in enumerate(attributes):
            resolved = attempt(
                f"{owner} attribute #{position}", lambda attr=attr: attr.name(pool)
            )
            names.append(resolved if resolved is not None else f"#{attr.name_index}")
        return names
