"""Rich output formatting and logging setup for the rpmsolve CLI.

Resolution results go to standard output; log records and fatal errors go
to standard error, so ``rpmsolve resolve ... > plan.txt`` captures only the
package list.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from rpmsolve.core import Resolution

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str, verbose: int = 0) -> None:
    """Route ``logging`` through a Rich handler on stderr.

    Args:
        level: Level name from the settings.
        verbose: ``-v`` count; 1 selects INFO, 2 or more DEBUG.
    """
    if verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_plain(text: str) -> None:
    """Print text verbatim: no markup, highlighting or wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def print_resolution(resolution: Resolution) -> None:
    """Print a resolved package list or the conflict explanation.

    Args:
        resolution: Result of ``rpmsolve.core.resolve``.
    """
    if resolution.success:
        console.print("[bold green]Resolved:[/bold green]\n")
        for item in resolution.installed:
            print_plain(f"- {item}")
    else:
        console.print("[bold red]Resolution failed[/bold red]")
        print_plain(resolution.explanation)


def print_error(message: str) -> None:
    """Print a fatal error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {message}", highlight=False, soft_wrap=True)
