"""
Classy Configuration Management
================================

Dataclass-based settings for the Classy tools, persisted as TOML.

A configuration file has three optional tables::

    [global]
    log_level = "INFO"
    log_file = ""            # empty string disables file logging
    log_json = false
    output_dir = "output"
    debug = false

    [decoder]
    max_file_size = 16777216
    strict_magic = false

    [output]
    show_banner = true
    show_constant_pool = true
    show_attributes = true
    max_string_length = 80

References:
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


# Looked up relative to the working directory when no path is given
DEFAULT_CONFIG_FILENAME = "classy.toml"


# ========================== Sections =======================================


@dataclass(slots=True)
class GlobalConfig:
    """Logging and output-location settings shared by every Classy tool."""

    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    output_dir: str = "output"
    debug: bool = False


@dataclass(slots=True)
class DecoderConfig:
    """Limits applied before and during decoding.

    ``max_file_size`` guards against feeding arbitrary large files to the
    decoder; real class files are rarely above a few hundred KiB.
    """

    max_file_size: int = 16_777_216  # 16 MiB
    strict_magic: bool = False


@dataclass(slots=True)
class OutputConfig:
    """Console rendering switches."""

    show_banner: bool = True
    show_constant_pool: bool = True
    show_attributes: bool = True
    max_string_length: int = 80


# ========================== Master config ==================================


@dataclass(slots=True)
class ClassyConfig:
    """All Classy settings.

    Usage:
        >>> config = ClassyConfig.load()                # ./classy.toml or defaults
        >>> config = ClassyConfig.load("custom.toml")
        >>> config.decoder.strict_magic
        False
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> ClassyConfig:
        """Load configuration from a TOML file.

        Missing tables and keys fall back to the dataclass defaults and
        unknown keys are ignored.

        Args:
            path: TOML file to read.  Defaults to ``classy.toml`` in the
                  current working directory.

        Returns:
            A fully populated :class:`ClassyConfig`.

        Raises:
            FileNotFoundError: If *path* was given explicitly and does
                not exist.
            tomllib.TOMLDecodeError: If the file is not valid TOML.
        """
        config_path = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILENAME)

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ClassyConfig:
        """Build a configuration from an already parsed TOML mapping."""
        return cls(
            global_settings=_build_section(GlobalConfig, raw.get("global", {})),
            decoder=_build_section(DecoderConfig, raw.get("decoder", {})),
            output=_build_section(OutputConfig, raw.get("output", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _build_section(section: type, data: dict[str, Any]) -> Any:
    """Instantiate dataclass *section* from the keys it declares."""
    known = set(section.__dataclass_fields__)  # type: ignore[attr-defined]
    return section(**{key: value for key, value in data.items() if key in known})

