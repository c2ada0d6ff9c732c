"""``rpmsolve packages`` and ``rpmsolve whatprovides NAME`` — inspect the repository.

``packages`` dumps every record of primary.xml with its relations, for
checking what the resolver will see. ``whatprovides`` lists the candidates
for a package or capability name in the order the resolver tries them.

Exit Codes:
    0 — Success.
    1 — ``whatprovides``: nothing provides NAME.
    3 — The local metadata cannot be read.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from rpmsolve.cli.output import console, print_error, print_plain
from rpmsolve.cli.repository import open_repository
from rpmsolve.core import RpmDependencyProvider
from rpmsolve.exceptions import RpmSolveError
from rpmsolve.repodata import RepositoryReader

_TARGET_DIR = click.option(
    "--target-dir", "-t",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Local repository directory (default: ./fedora).",
)


def _join(items) -> str:
    return ", ".join(str(item) for item in items) or "-"


@click.command("packages")
@_TARGET_DIR
@click.pass_obj
def packages_command(settings, target_dir: Path | None) -> None:
    """List every package in the local metadata with its relations."""
    settings = settings.merged(target_dir=target_dir)
    try:
        reader = RepositoryReader(settings.target_dir)
        for record in reader.iter_packages():
            version = f"{record.epoch}:{record.version}" if record.epoch else record.version
            print_plain(f"{record.name}-{version}")
            print_plain(f"  Provides:   {_join(record.provides)}")
            print_plain(f"  Requires:   {_join(record.requires)}")
            print_plain(f"  Suggests:   {_join(record.suggests)}")
    except RpmSolveError as exc:
        print_error(str(exc))
        sys.exit(3)


@click.command("whatprovides")
@click.argument("name")
@_TARGET_DIR
@click.pass_obj
def whatprovides_command(settings, name: str, target_dir: Path | None) -> None:
    """List the packages providing NAME, most preferred first."""
    settings = settings.merged(target_dir=target_dir)
    try:
        universe = open_repository(settings, fetch=False)
        provider = RpmDependencyProvider(universe)
        name_id = universe.pool.lookup_name(name)
        candidates = provider.candidates(name_id) if name_id is not None else []
    except RpmSolveError as exc:
        print_error(str(exc))
        sys.exit(3)

    if not candidates:
        console.print(f"Nothing provides {name}", markup=False, highlight=False)
        sys.exit(1)
    for solvable in candidates:
        print_plain(str(universe.solvable(solvable)))
