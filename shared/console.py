"""
Classy Console Interface
=========================

Thin wrapper over :class:`rich.console.Console` with the Classy colour
theme, a banner and escaped status lines for the command line tools.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

_CLASSY_THEME = Theme(
    {
        "classy.banner": "bold bright_cyan",
        "classy.section": "bold bright_magenta",
        "classy.success": "bold green",
        "classy.warning": "bold yellow",
        "classy.error": "bold red",
        "classy.info": "bold bright_blue",
        "classy.dim": "dim white",
        "classy.index": "bold bright_white",
        "classy.kind": "bright_cyan",
        "classy.modifier": "magenta",
        "classy.type": "green",
        "classy.name": "bold bright_white",
        "classy.literal": "yellow",
    }
)

_TAGLINE = "JVM class file decoder"


class ClassyConsole:
    """Themed console shared by the Classy command line tools.

    Usage::

        con = ClassyConsole()
        con.banner("0.1.0")
        con.error("Truncated class file")

    Args:
        quiet:  Suppress all output.
        record: Keep rendered output for :meth:`export_text`.
        width:  Fixed render width; ``None`` detects the terminal.
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        self._console = Console(
            theme=_CLASSY_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            width=width,
        )

    # ------------------------------------------------------------------ #
    #  Headers
    # ------------------------------------------------------------------ #

    def banner(self, version: str) -> None:
        title = Text("classy", style="classy.banner")
        subtitle = Text(f"{_TAGLINE}  |  v{version}", style="classy.dim")
        self._console.print(
            Panel(
                Text.assemble(title, "\n", subtitle),
                border_style="bright_cyan",
                expand=False,
                padding=(0, 2),
            )
        )

    # ------------------------------------------------------------------ #
    #  Status lines
    # ------------------------------------------------------------------ #

    # Messages are escaped: they routinely contain descriptors like "[I".

    def success(self, message: str) -> None:
        self._console.print(f"[classy.success]✔ {escape(message)}[/classy.success]")

    def warning(self, message: str) -> None:
        self._console.print(
            f"[classy.warning]⚠ WARNING:[/classy.warning] {escape(message)}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[classy.error]✘ ERROR:[/classy.error] {escape(message)}"
        )

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def export_text(self) -> str:
        """Return everything printed so far (requires ``record=True``)."""
        return self._console.export_text()
