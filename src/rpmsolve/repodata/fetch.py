"""Download repository metadata into a local directory.

Fetches ``repodata/repomd.xml`` from a repository base URL, then the
filelists, other and primary files it references. A directory that already
holds repomd.xml is treated as a complete local copy and left untouched
unless a refresh is forced.

Raises ``FetchError`` (a subclass of ``RpmSolveError``) on unrecoverable HTTP
failures.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from rpmsolve import __version__
from rpmsolve.exceptions import FetchError
from rpmsolve.repodata.reader import REPOMD_PATH, parse_repomd

logger = logging.getLogger(__name__)

# Timeout for all repository HTTP requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = f"rpmsolve/{__version__}"

# Metadata types downloaded alongside repomd.xml, in download order.
METADATA_TYPES: tuple[str, ...] = ("filelists", "other", "primary")


def _join(base_url: str, href: str) -> str:
    return base_url.rstrip("/") + "/" + href.lstrip("/")


def _get(client: httpx.Client, url: str) -> bytes:
    """Fetch *url* into memory.

    Raises:
        FetchError: On HTTP errors, timeouts or connection failures.
    """
    logger.info("Downloading %s", url)
    try:
        resp = client.get(url)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(f"HTTP {exc.response.status_code} from {url}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Request error for {url}: {exc}") from exc
    return resp.content


def _download(client: httpx.Client, url: str, destination: Path) -> None:
    """Stream *url* into *destination*, creating parent directories.

    Raises:
        FetchError: On HTTP errors, timeouts or connection failures.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(destination.name + ".part")
    logger.info("Downloading %s", url)
    try:
        with client.stream("GET", url) as resp:
            resp.raise_for_status()
            with open(partial, "wb") as fh:
                for chunk in resp.iter_bytes():
                    fh.write(chunk)
    except httpx.HTTPStatusError as exc:
        partial.unlink(missing_ok=True)
        raise FetchError(f"HTTP {exc.response.status_code} from {url}") from exc
    except httpx.HTTPError as exc:
        partial.unlink(missing_ok=True)
        raise FetchError(f"Request error for {url}: {exc}") from exc
    partial.replace(destination)


def _destination(target: Path, href: str) -> Path:
    """Local path for a repomd *href*, which must stay inside *target*.

    Raises:
        FetchError: If the href points outside the target directory.
    """
    root = target.resolve()
    destination = (root / href).resolve()
    if not destination.is_relative_to(root):
        raise FetchError(f"Refusing to write {href!r} outside {target}")
    return destination


def fetch_repodata(
    base_url: str,
    target_dir: str | Path,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    force: bool = False,
) -> bool:
    """Populate *target_dir* with the metadata of the repository at *base_url*.

    Args:
        base_url: Repository root URL (the one containing ``repodata/``).
        target_dir: Local repository root to write into.
        client: Optional preconfigured client (used as-is, not closed).
        timeout: Request timeout in seconds when no client is given.
        force: Download even if repomd.xml is already present.

    Returns:
        True if metadata was downloaded, False if a local copy was reused.

    Raises:
        FetchError: If any download fails or repomd.xml points a file
            outside *target_dir*.
        MetadataError: If the downloaded repomd.xml cannot be parsed.
    """
    target = Path(target_dir)
    repomd_path = target / REPOMD_PATH
    if repomd_path.exists() and not force:
        logger.info("repomd.xml already exists in %s", target)
        return False

    owned = client is None
    if client is None:
        client = httpx.Client(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )
    try:
        repomd = _get(client, _join(base_url, REPOMD_PATH.as_posix()))
        entries = parse_repomd(repomd)
        downloads = []
        for data_type in METADATA_TYPES:
            entry = entries.get(data_type)
            if entry is None:
                logger.warning("repomd.xml lists no %s data", data_type)
                continue
            downloads.append((entry.location_href, _destination(target, entry.location_href)))
        for href, destination in downloads:
            _download(client, _join(base_url, href), destination)
    finally:
        if owned:
            client.close()

    # Written last: its presence marks the local copy as complete.
    repomd_path.parent.mkdir(parents=True, exist_ok=True)
    repomd_path.write_bytes(repomd)
    return True
