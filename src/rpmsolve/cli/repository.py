"""Shared helpers for commands that work on a local repository copy."""

from __future__ import annotations

import logging

from rpmsolve.config import Settings
from rpmsolve.core import Universe
from rpmsolve.repodata import fetch_repodata, load_universe

logger = logging.getLogger(__name__)


def open_repository(settings: Settings, fetch: bool | None = None) -> Universe:
    """Load the universe at ``settings.target_dir``, fetching metadata first if enabled.

    Raises:
        FetchError: If the download fails.
        MetadataError: If the local metadata cannot be read.
    """
    if settings.fetch if fetch is None else fetch:
        fetch_repodata(settings.repo_url, settings.target_dir, timeout=settings.timeout)
    universe = load_universe(settings.target_dir)
    logger.info("Provider created with %d packages", len(universe))
    return universe
