"""``rpmsolve resolve NAME...`` — Resolve package names to an installable set.

Loads the repository at the target directory (fetching its metadata first
when none is present), resolves each NAME to its newest installable version
together with its requirements, and prints the sorted ``name-version`` list
or the conflict explanation.

Exit Codes:
    0 — Resolution succeeded.
    1 — The request is unsatisfiable (conflict explanation printed).
    2 — Usage error.
    3 — Fatal error: bad metadata, malformed versions or failed download.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from rpmsolve.cli.output import print_error, print_plain, print_resolution
from rpmsolve.cli.repository import open_repository
from rpmsolve.core import resolve
from rpmsolve.exceptions import RpmSolveError


@click.command("resolve")
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--target-dir", "-t",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Local repository directory (default: ./fedora).",
)
@click.option("--repo-url", default=None, help="Repository base URL to fetch metadata from.")
@click.option("--no-suggest", is_flag=True, help="Do not expand 'suggests' relations.")
@click.option("--no-fetch", is_flag=True, help="Never download metadata; use the local copy.")
@click.option("--json", "as_json", is_flag=True, help="Emit the result as JSON.")
@click.pass_obj
def resolve_command(
    settings,
    names: tuple[str, ...],
    target_dir: Path | None,
    repo_url: str | None,
    no_suggest: bool,
    no_fetch: bool,
    as_json: bool,
) -> None:
    """Resolve NAMES against the repository and print the package set."""
    settings = settings.merged(
        target_dir=target_dir,
        repo_url=repo_url,
        no_suggest=True if no_suggest else None,
        fetch=False if no_fetch else None,
    )
    try:
        universe = open_repository(settings)
        resolution = resolve(universe, names, suggest_enabled=settings.suggests)
    except RpmSolveError as exc:
        print_error(str(exc))
        sys.exit(3)

    if as_json:
        print_plain(json.dumps(
            {
                "success": resolution.success,
                "requested": list(names),
                "installed": resolution.installed,
                "conflicts": resolution.conflicts,
            },
            indent=2,
        ))
    else:
        print_resolution(resolution)
    sys.exit(0 if resolution.success else 1)
