"""Reader for yum/dnf repository metadata (``repodata/``).

A repository directory holds ``repodata/repomd.xml``, an index naming the
other metadata files, and the files themselves. Only ``primary.xml`` is
parsed here: it carries, per package, the name, version, epoch and the
``provides``/``requires``/``suggests`` relations the resolver needs.

``primary.xml`` is streamed with ``iterparse`` so that distribution-sized
repositories (tens of thousands of packages) are never held as one tree.
"""

from __future__ import annotations

import bz2
import gzip
import logging
import lzma
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import IO

import zstandard

from rpmsolve.core.universe import PackageRecord, Universe
from rpmsolve.core.version import Requirement
from rpmsolve.exceptions import MetadataError, VersionError

logger = logging.getLogger(__name__)

REPO_NS = "http://linux.duke.edu/metadata/repo"
COMMON_NS = "http://linux.duke.edu/metadata/common"
RPM_NS = "http://linux.duke.edu/metadata/rpm"

REPOMD_PATH = Path("repodata") / "repomd.xml"

_PACKAGE_TAG = f"{{{COMMON_NS}}}package"


@dataclass(frozen=True)
class RepomdData:
    """One ``<data>`` entry of repomd.xml.

    Attributes:
        type: Metadata type ("primary", "filelists", "other", ...).
        location_href: Path of the file, relative to the repository root.
        checksum: Checksum of the (compressed) file, as published.
        checksum_type: Checksum algorithm name, e.g. "sha256".
    """

    type: str
    location_href: str
    checksum: str = ""
    checksum_type: str = ""


def parse_repomd(content: bytes | str) -> dict[str, RepomdData]:
    """Parse repomd.xml content into its data entries, keyed by type.

    Raises:
        MetadataError: If the document is not valid repomd XML.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise MetadataError(f"Malformed repomd.xml: {exc}") from exc

    entries: dict[str, RepomdData] = {}
    for data in root.findall(f"{{{REPO_NS}}}data"):
        data_type = data.get("type")
        location = data.find(f"{{{REPO_NS}}}location")
        if not data_type or location is None or not location.get("href"):
            raise MetadataError("repomd.xml data entry without type or location")
        checksum = data.find(f"{{{REPO_NS}}}checksum")
        entries[data_type] = RepomdData(
            type=data_type,
            location_href=location.get("href"),
            checksum=(checksum.text or "").strip() if checksum is not None else "",
            checksum_type=checksum.get("type", "") if checksum is not None else "",
        )
    return entries


def _open_metadata(path: Path) -> IO[bytes]:
    """Open a metadata file, decompressing according to its suffix."""
    suffix = path.suffix
    if suffix == ".gz":
        return gzip.open(path, "rb")
    if suffix == ".xz":
        return lzma.open(path, "rb")
    if suffix == ".bz2":
        return bz2.open(path, "rb")
    if suffix == ".zst":
        return zstandard.ZstdDecompressor().stream_reader(open(path, "rb"), closefd=True)
    return open(path, "rb")


def _entries(format_elem: ET.Element | None, relation: str) -> list[ET.Element]:
    if format_elem is None:
        return []
    container = format_elem.find(f"{{{RPM_NS}}}{relation}")
    if container is None:
        return []
    return container.findall(f"{{{RPM_NS}}}entry")


def _requirements(format_elem: ET.Element | None, relation: str) -> tuple[Requirement, ...]:
    return tuple(
        Requirement.from_flags(
            name=entry.get("name", ""),
            flags=entry.get("flags"),
            version=entry.get("ver"),
            epoch=entry.get("epoch"),
        )
        for entry in _entries(format_elem, relation)
    )


def parse_package(elem: ET.Element) -> PackageRecord:
    """Convert one ``<package>`` element of primary.xml to a ``PackageRecord``.

    Raises:
        MetadataError: If name or version is missing, or a relation entry
            cannot be parsed.
    """
    name = (elem.findtext(f"{{{COMMON_NS}}}name") or "").strip()
    version_elem = elem.find(f"{{{COMMON_NS}}}version")
    if not name:
        raise MetadataError("Package entry without a name in primary.xml")
    if version_elem is None or not version_elem.get("ver"):
        raise MetadataError(f"Package {name!r} has no version in primary.xml")

    version = version_elem.get("ver")
    try:
        epoch = int(version_elem.get("epoch") or 0)
    except ValueError:
        raise MetadataError(
            f"Package {name}-{version} has invalid epoch {version_elem.get('epoch')!r}"
        ) from None

    format_elem = elem.find(f"{{{COMMON_NS}}}format")
    try:
        requires = _requirements(format_elem, "requires")
        suggests = _requirements(format_elem, "suggests")
    except VersionError as exc:
        raise MetadataError(f"Package {name}-{version}: {exc}") from exc
    provides = tuple(
        entry.get("name") for entry in _entries(format_elem, "provides") if entry.get("name")
    )

    return PackageRecord(
        name=name,
        version=version,
        epoch=epoch,
        requires=requires,
        suggests=suggests,
        provides=provides,
    )


class RepositoryReader:
    """Reads the metadata of a repository already present on disk.

    Args:
        path: Repository root, the directory containing ``repodata/``.

    Raises:
        MetadataError: If repomd.xml is missing or malformed.
    """

    def __init__(self, path: str | Path) -> None:
        self._root = Path(path)
        repomd = self._root / REPOMD_PATH
        if not repomd.is_file():
            raise MetadataError(f"No repository metadata found at {repomd}")
        self._data = parse_repomd(repomd.read_bytes())

    @property
    def root(self) -> Path:
        return self._root

    def data(self, data_type: str) -> RepomdData:
        """Return the repomd entry for *data_type*.

        Raises:
            MetadataError: If repomd.xml does not list that type.
        """
        try:
            return self._data[data_type]
        except KeyError:
            raise MetadataError(f"repomd.xml lists no {data_type!r} data") from None

    @property
    def primary(self) -> RepomdData:
        return self.data("primary")

    @property
    def filelists(self) -> RepomdData:
        return self.data("filelists")

    @property
    def other(self) -> RepomdData:
        return self.data("other")

    def iter_packages(self) -> Iterator[PackageRecord]:
        """Stream every package of primary.xml as a ``PackageRecord``.

        Raises:
            MetadataError: If the file is missing, unreadable or malformed.
        """
        path = self._root / self.primary.location_href
        if not path.is_file():
            raise MetadataError(f"Primary metadata file missing: {path}")

        try:
            with _open_metadata(path) as fh:
                for _event, elem in ET.iterparse(fh, events=("end",)):
                    if elem.tag != _PACKAGE_TAG:
                        continue
                    if elem.get("type", "rpm") == "rpm":
                        yield parse_package(elem)
                    elem.clear()
        except ET.ParseError as exc:
            raise MetadataError(f"Malformed primary metadata {path.name}: {exc}") from exc
        except (OSError, EOFError, lzma.LZMAError, zstandard.ZstdError) as exc:
            raise MetadataError(f"Cannot read {path}: {exc}") from exc


def load_universe(path: str | Path) -> Universe:
    """Build a ``Universe`` from the repository at *path*."""
    reader = RepositoryReader(path)
    logger.info("Reading %s", reader.primary.location_href)
    return Universe.build(reader.iter_packages())
