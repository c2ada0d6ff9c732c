"""``rpmsolve fetch`` — Download repository metadata into the target directory.

Exit Codes:
    0 — Metadata downloaded, or an existing copy was kept.
    3 — The download failed.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from rpmsolve.cli.output import console, print_error
from rpmsolve.exceptions import RpmSolveError
from rpmsolve.repodata import fetch_repodata


@click.command("fetch")
@click.option(
    "--target-dir", "-t",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Local repository directory (default: ./fedora).",
)
@click.option("--repo-url", default=None, help="Repository base URL.")
@click.option("--force", is_flag=True, help="Download even if repomd.xml exists.")
@click.pass_obj
def fetch_command(settings, target_dir: Path | None, repo_url: str | None, force: bool) -> None:
    """Download repomd.xml and the metadata files it lists."""
    settings = settings.merged(target_dir=target_dir, repo_url=repo_url)
    try:
        downloaded = fetch_repodata(
            settings.repo_url,
            settings.target_dir,
            timeout=settings.timeout,
            force=force,
        )
    except RpmSolveError as exc:
        print_error(str(exc))
        sys.exit(3)

    if downloaded:
        console.print(f"Metadata written to {settings.target_dir}", highlight=False)
    else:
        console.print(f"repomd.xml already exists in {settings.target_dir}", highlight=False)
