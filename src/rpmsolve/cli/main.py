"""rpmsolve CLI — dependency resolution over RPM repository metadata.

Entry point for the ``rpmsolve`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve      — Resolve package names to an installable set.
    fetch        — Download repository metadata.
    packages     — List every package in the local metadata.
    whatprovides — List the candidates for a name.

Usage::

    rpmsolve resolve rust                      # fetch Fedora 38 metadata, resolve
    rpmsolve resolve --no-suggest rust cargo
    rpmsolve -v resolve -t ./mirror --no-fetch vim
    rpmsolve fetch --repo-url https://example.org/os/ -t ./mirror
    rpmsolve whatprovides 'libc.so.6()(64bit)'
"""

from __future__ import annotations

from pathlib import Path

import click

from rpmsolve import __version__
from rpmsolve.cli.fetch_cmd import fetch_command
from rpmsolve.cli.output import configure_logging
from rpmsolve.cli.packages_cmd import packages_command, whatprovides_command
from rpmsolve.cli.resolve import resolve_command
from rpmsolve.config import load_settings
from rpmsolve.exceptions import ConfigError


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file (default: $RPMSOLVE_CONFIG).",
)
@click.option("--verbose", "-v", count=True, help="Log more (-v info, -vv debug).")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: int) -> None:
    """rpmsolve: resolve RPM package dependencies from repository metadata."""
    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc
    configure_logging(settings.log_level, verbose)
    ctx.obj = settings


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(fetch_command)
cli.add_command(packages_command)
cli.add_command(whatprovides_command)
