"""
Classy CLI -- JVM Class File Decoder
=====================================

Click-based command line interface that decodes one ``.class`` file and
prints its structure as trees.

Usage::

    # Header, constant pool, methods, fields and attributes
    classy build/classes/Main.class

    # Skip the (often long) constant pool
    classy Main.class --no-pool

    # Machine-readable output on stdout
    classy Main.class --json

    # Also write a JSON report
    classy Main.class --output reports/Main.json

    # Refuse files whose magic is not 0xCAFEBABE
    classy Main.class --strict-magic

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from shared.config import ClassyConfig
from shared.console import ClassyConsole
from shared.logger import ClassyLogger

from classy import __version__
from classy.core.engine import ClassyEngine
from classy.core.errors import ClassFileError
from classy.output.console import ClassyConsoleOutput
from classy.output.report import ClassyReportGenerator


def _load_config(config_path: str | None, console: ClassyConsole) -> ClassyConfig:
    if config_path is None:
        try:
            return ClassyConfig.load()
        except ValueError as exc:
            console.warning(f"Ignoring unreadable classy.toml: {exc}")
            return ClassyConfig()
    try:
        return ClassyConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Cannot load configuration: {exc}")
        sys.exit(1)


def _report_destination(output_path: str, output_dir: str) -> Path:
    destination = Path(output_path)
    if output_dir and not destination.is_absolute() and destination.parent == Path("."):
        return Path(output_dir) / destination
    return destination


@click.command("classy")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the analysis as JSON on stdout instead of trees.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help=(
        "Also write a JSON report to this file.  A bare file name is "
        "placed under [global] output_dir."
    ),
)
@click.option(
    "--strict-magic",
    is_flag=True,
    default=False,
    help="Fail when the magic number is not 0xCAFEBABE.",
)
@click.option(
    "--no-pool",
    is_flag=True,
    default=False,
    help="Do not print the constant pool.",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="TOML configuration file (default: ./classy.toml if present).",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(__version__, prog_name="classy")
def classy_cli(
    path: str,
    json_output: bool,
    output_path: str | None,
    strict_magic: bool,
    no_pool: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Classy -- decode and inspect a JVM class file.

    PATH is the .class file to decode.

    Examples:

    \b
        classy Main.class
        classy Main.class --no-pool
        classy Main.class --json > Main.json
    """
    console = ClassyConsole()
    config = _load_config(config_path, console)

    settings = config.global_settings
    if verbose:
        settings.log_level = "DEBUG"
    if strict_magic:
        config.decoder.strict_magic = True
    if no_pool:
        config.output.show_constant_pool = False

    logger = ClassyLogger(
        "cli",
        log_level=settings.log_level,
        log_file=settings.log_file or None,
        json_logs=settings.log_json,
    )
    engine = ClassyEngine(config=config, logger=logger)

    try:
        result = engine.analyze(path)
    except ClassFileError as exc:
        if settings.debug or verbose:
            logger.exception("Decode of %s failed", path)
        console.error(f"Failed to decode {path}: {exc}")
        sys.exit(1)
    except (OSError, ValueError) as exc:
        console.error(str(exc))
        sys.exit(1)

    report_gen = ClassyReportGenerator()

    if json_output:
        click.echo(report_gen.to_json(result))
    else:
        if config.output.show_banner:
            console.banner(__version__)
        ClassyConsoleOutput(
            console,
            show_constant_pool=config.output.show_constant_pool,
            show_attributes=config.output.show_attributes,
            max_string_length=config.output.max_string_length,
        ).display(result)
        if not result.summary.magic_valid:
            console.warning("The magic number is not 0xCAFEBABE.")

    if output_path:
        report_path = report_gen.generate_json(
            result, _report_destination(output_path, settings.output_dir)
        )
        if not json_output:
            console.success(f"JSON report saved: {report_path}")


def main() -> None:
    """Entry point for the ``classy`` console script."""
    classy_cli()


if __name__ == "__main__":
    main()
