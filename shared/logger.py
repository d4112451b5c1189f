"""
Classy Structured Logger
=========================

Provides :class:`ClassyLogger`, a thin facade over :mod:`logging` that
binds every record to a tool name and, optionally, to the operation in
progress.  Records go to a Rich console handler on stderr and, when a
log file is configured, to a size-rotated file as plain text or JSON
lines.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAMESPACE = "classy"

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Keyword arguments understood natively by logging.Logger methods
_STDLIB_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel"})


def _resolve_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


# ========================== Formatters / handlers ==========================


class _JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    Example line::

        {"timestamp": "...", "level": "WARNING", "logger": "classy.decoder",
         "message": "Bad magic 0xDEADBEEF (expected 0xCAFEBABE)",
         "tool_name": "decoder", "operation": "decode"}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("tool_name", "operation"):
            value = getattr(record, attr, None)
            if value is not None:
                payload[attr] = value

        context = getattr(record, "classy_context", None)
        if context:
            payload["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class _ColorConsoleHandler(RichHandler):
    """:class:`RichHandler` on stderr with the Classy level colours.

    Markup is disabled: descriptors such as ``[Ljava/lang/String;``
    would otherwise be parsed as Rich style tags.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(
            console=Console(theme=_LOG_THEME, stderr=True),
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


# ========================== ClassyLogger ===================================


class ClassyLogger:
    """Logger bound to one Classy component.

    The underlying stdlib logger is named ``classy.<tool_name>`` and does
    not propagate to the root logger.  Re-creating a ``ClassyLogger``
    with the same *tool_name* replaces the handlers of the previous
    instance instead of stacking new ones.

    Extra keyword arguments passed to the log methods are collected into
    a ``context`` mapping that the JSON formatter writes out::

        log = ClassyLogger("engine", log_file="classy.log", json_logs=True)
        with log.operation("analyze"):
            log.info("Decoding %s", path, size=len(data))

    Args:
        tool_name:      Component name (``"cli"``, ``"engine"``, ``"decoder"``).
        log_level:      Minimum level name.
        log_file:       Rotating log file path; ``None`` disables file output.
        json_logs:      Write JSON lines instead of plain text to the file.
        max_bytes:      Rotation threshold of the log file.
        backup_count:   Rotated files to keep.
        console_output: Attach the Rich stderr handler.
    """

    def __init__(
        self,
        tool_name: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._tool_name = tool_name
        self._operation: str | None = None

        level = _resolve_level(log_level)
        self._logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{tool_name}")
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        if console_output:
            self._logger.addHandler(_ColorConsoleHandler(level=level))

        if log_file is not None:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            handler.setLevel(level)
            if json_logs:
                handler.setFormatter(_JSONFormatter())
            else:
                handler.setFormatter(
                    logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_TEXT_DATEFMT)
                )
            self._logger.addHandler(handler)

        if not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

    # ------------------------------------------------------------------ #
    #  Operation scope
    # ------------------------------------------------------------------ #

    class _OperationContext:
        """Bind an operation name for the duration of a ``with`` block."""

        def __init__(self, parent: ClassyLogger, operation: str) -> None:
            self._parent = parent
            self._operation = operation
            self._previous: str | None = None

        def __enter__(self) -> ClassyLogger:
            self._previous = self._parent._operation
            self._parent._operation = self._operation
            return self._parent

        def __exit__(self, *exc: Any) -> None:
            self._parent._operation = self._previous

    def operation(self, name: str) -> _OperationContext:
        """Tag every record emitted inside the block with ``operation=name``.

        Scopes nest; leaving an inner scope restores the outer name.
        """
        return self._OperationContext(self, name)

    @property
    def current_operation(self) -> str | None:
        return self._operation

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        extra = kwargs.pop("extra", None) or {}
        context = {
            key: kwargs.pop(key) for key in list(kwargs) if key not in _STDLIB_KWARGS
        }

        extra["tool_name"] = self._tool_name
        extra["operation"] = self._operation
        if context:
            extra["classy_context"] = context

        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **self._enrich(kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        kwargs.setdefault("exc_info", True)
        self._logger.error(msg, *args, **self._enrich(kwargs))

    # ------------------------------------------------------------------ #
    #  Timing
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Log the start (DEBUG) and duration (INFO) of a block."""

        def __init__(self, parent: ClassyLogger, label: str) -> None:
            self._parent = parent
            self._label = label
            self._start: float = 0.0
            self._end: float | None = None

        def __enter__(self) -> ClassyLogger._TimingContext:
            self._start = time.perf_counter()
            self._parent.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._end = time.perf_counter()
            self._parent.info(
                "Completed: %s (%.3f sec)", self._label, self.elapsed
            )

        @property
        def elapsed(self) -> float:
            """Seconds spent in the block so far (or in total, once left)."""
            end = self._end if self._end is not None else time.perf_counter()
            return end - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager measuring how long the block takes.

        Usage::

            with log.timed("decode Foo.class") as timer:
                class_file = decode(data)
            elapsed = timer.elapsed
        """
        return self._TimingContext(self, label)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def tool_name(self) -> str:
        return self._tool_name

    @property
    def underlying(self) -> logging.Logger:
        """The wrapped :class:`logging.Logger`."""
        return self._logger
