"""Tests for the classy command line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from classy import __version__
from classy.cli import classy_cli

runner = CliRunner()


@pytest.fixture
def quiet_config(tmp_path):
    path = tmp_path / "quiet.toml"
    path.write_text(
        '[global]\nlog_level = "ERROR"\n[output]\nshow_banner = false\n',
        encoding="utf-8",
    )
    return str(path)


def test_tree_output(greeter_path, quiet_config) -> None:
    result = runner.invoke(classy_cli, [str(greeter_path), "--config", quiet_config])

    assert result.exit_code == 0, result.output
    assert "Constant Pool" in result.output
    assert "CONSTANT_Utf8" in result.output
    assert "Methods" in result.output
    assert "COUNT" in result.output


def test_no_pool(greeter_path, quiet_config) -> None:
    result = runner.invoke(
        classy_cli, [str(greeter_path), "--no-pool", "--config", quiet_config]
    )
    assert result.exit_code == 0
    assert "Constant Pool" not in result.output


def test_json_output(greeter_path, quiet_config) -> None:
    result = runner.invoke(
        classy_cli, [str(greeter_path), "--json", "--config", quiet_config]
    )

    assert result.exit_code == 0
    report = json.loads(result.output)
    assert report["summary"]["name"] == "com.example.Greeter"
    assert report["generator"] == f"classy {__version__}"


def test_output_file(greeter_path, quiet_config, tmp_path) -> None:
    target = tmp_path / "reports" / "Greeter.json"
    result = runner.invoke(
        classy_cli,
        [str(greeter_path), "--no-pool", "-o", str(target), "--config", quiet_config],
    )

    assert result.exit_code == 0
    assert json.loads(target.read_text(encoding="utf-8"))["summary"]["kind"] == "class"


def test_decode_failure_exits_with_error(tmp_path, quiet_config) -> None:
    broken = tmp_path / "Broken.class"
    broken.write_bytes(b"\xca\xfe\xba\xbe\x00")

    result = runner.invoke(classy_cli, [str(broken), "--config", quiet_config])

    assert result.exit_code == 1
    assert "Failed to decode" in result.output


def test_strict_magic(tmp_path, quiet_config, builder) -> None:
    builder.magic = 0xFEEDFACE
    builder.this_class = builder.class_("A")
    path = tmp_path / "A.class"
    path.write_bytes(builder.build())

    lenient = runner.invoke(classy_cli, [str(path), "--config", quiet_config])
    strict = runner.invoke(
        classy_cli, [str(path), "--strict-magic", "--config", quiet_config]
    )

    assert lenient.exit_code == 0
    assert "INVALID" in lenient.output
    assert strict.exit_code == 1
    assert "0xFEEDFACE" in strict.output


def test_missing_config_file(greeter_path, tmp_path) -> None:
    result = runner.invoke(
        classy_cli, [str(greeter_path), "--config", str(tmp_path / "none.toml")]
    )
    assert result.exit_code == 1
    assert "Cannot load configuration" in result.output


def test_missing_class_file(tmp_path) -> None:
    result = runner.invoke(classy_cli, [str(tmp_path / "Nope.class")])
    assert result.exit_code == 2


def test_version() -> None:
    result = runner.invoke(classy_cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
