"""Tests for the structured logger facade."""

from __future__ import annotations

import json
import logging

from shared.logger import ClassyLogger


def test_logger_name_and_level() -> None:
    log = ClassyLogger("unit", log_level="warning", console_output=False)
    assert log.underlying.name == "classy.unit"
    assert log.underlying.level == logging.WARNING
    assert log.underlying.propagate is False


def test_reinstantiation_does_not_stack_handlers(tmp_path) -> None:
    ClassyLogger("stack", log_file=tmp_path / "a.log")
    log = ClassyLogger("stack", log_file=tmp_path / "a.log")
    assert len(log.underlying.handlers) == 2


def test_json_file_output_carries_context(tmp_path) -> None:
    log_path = tmp_path / "logs" / "classy.log"
    log = ClassyLogger(
        "jsonfile", log_level="DEBUG", log_file=log_path, json_logs=True, console_output=False
    )

    with log.operation("decode"):
        log.warning("Bad magic 0x%08X", 0xDEADBEEF, path="X.class")
    log.info("outside")
    for handler in log.underlying.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert lines[0]["message"] == "Bad magic 0xDEADBEEF"
    assert lines[0]["level"] == "WARNING"
    assert lines[0]["tool_name"] == "jsonfile"
    assert lines[0]["operation"] == "decode"
    assert lines[0]["context"] == {"path": "X.class"}
    assert "operation" not in lines[1]


def test_operation_scopes_nest() -> None:
    log = ClassyLogger("nest", console_output=False)
    with log.operation("outer"):
        with log.operation("inner"):
            assert log.current_operation == "inner"
        assert log.current_operation == "outer"
    assert log.current_operation is None


def test_timed_reports_elapsed() -> None:
    log = ClassyLogger("timer", console_output=False)
    with log.timed("work") as timer:
        pass
    assert timer.elapsed >= 0.0
