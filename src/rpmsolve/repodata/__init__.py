"""Repository metadata: reading ``repodata/`` from disk and fetching it over HTTP."""

from rpmsolve.repodata.fetch import fetch_repodata
from rpmsolve.repodata.reader import (
    RepomdData,
    RepositoryReader,
    load_universe,
    parse_package,
    parse_repomd,
)

__all__ = [
    "RepomdData",
    "RepositoryReader",
    "fetch_repodata",
    "load_universe",
    "parse_package",
    "parse_repomd",
]
