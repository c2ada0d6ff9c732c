"""Package universe: every repository record indexed by name and by provide.

The universe is built in one forward pass over the records produced by the
repodata reader. Each record becomes one interned ``PackageVersion``; the
solvable is then registered under every capability the record provides.
Lookups for candidates go through the provides index only: a package is a
candidate for its own name only when its metadata lists that self-provide,
which RPM builds do by default.

Once ``Universe.build`` returns, the package and provides indexes are frozen.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from rpmsolve.core.pool import Pool
from rpmsolve.core.version import PackageVersion, Requirement
from rpmsolve.exceptions import MetadataError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# PackageRecord: the repodata boundary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageRecord:
    """One package entry as delivered by the repository-metadata parser.

    Attributes:
        name: Package name.
        version: Version string (the ``ver`` attribute; release not included).
        epoch: Epoch, 0 when the metadata omits it.
        requires: Hard requirements.
        suggests: Soft requirements.
        provides: Capability names the package declares.
    """

    name: str
    version: str
    epoch: int = 0
    requires: tuple[Requirement, ...] = ()
    suggests: tuple[Requirement, ...] = ()
    provides: tuple[str, ...] = ()


def _validate(record: PackageRecord, index: int) -> None:
    """Reject records the universe cannot represent.

    Raises:
        MetadataError: Describing the offending record.
    """
    if not isinstance(record, PackageRecord):
        raise MetadataError(f"Record #{index} is not a PackageRecord: {record!r}")
    if not isinstance(record.name, str) or not record.name:
        raise MetadataError(f"Record #{index} has no package name")
    if not isinstance(record.version, str) or not record.version:
        raise MetadataError(f"Package {record.name!r} has no version")
    if isinstance(record.epoch, bool) or not isinstance(record.epoch, int) or record.epoch < 0:
        raise MetadataError(
            f"Package {record.name}-{record.version} has invalid epoch {record.epoch!r}"
        )
    for req in (*record.requires, *record.suggests):
        if not isinstance(req, Requirement):
            raise MetadataError(
                f"Package {record.name}-{record.version} has malformed requirement {req!r}"
            )
    for provide in record.provides:
        if not isinstance(provide, str) or not provide:
            raise MetadataError(
                f"Package {record.name}-{record.version} has malformed provide {provide!r}"
            )


# ---------------------------------------------------------------------------
# Universe
# ---------------------------------------------------------------------------


class Universe:
    """Immutable index over all package versions of a repository.

    Use ``Universe.build`` to construct one. The universe owns the ``Pool``
    that hands out the integer handles all other components use.
    """

    def __init__(
        self,
        pool: Pool,
        packages: Mapping[int, tuple[int, ...]],
        provides: Mapping[int, tuple[int, ...]],
    ) -> None:
        self._pool = pool
        self._packages = packages
        self._provides = provides

    @classmethod
    def build(cls, records: Iterable[PackageRecord]) -> Universe:
        """Build a universe from repository records in a single pass.

        Args:
            records: Package records, in repository order. Iteration order
                only affects handle numbering and log order.

        Returns:
            The frozen universe.

        Raises:
            MetadataError: If any record is malformed. Construction stops at
                the first bad record; no partial universe is returned.
        """
        pool = Pool()
        packages: dict[int, list[int]] = {}
        provides: dict[int, list[int]] = {}

        for index, record in enumerate(records):
            _validate(record, index)
            package = PackageVersion(
                name=record.name,
                version=record.version,
                epoch=record.epoch,
                requires=tuple(record.requires),
                suggests=tuple(record.suggests),
            )
            name_id = pool.intern_name(record.name)
            solvable = pool.intern_solvable(name_id, package)
            packages.setdefault(name_id, []).append(solvable)

            for capability in record.provides:
                logger.debug("%s provides %s", record.name, capability)
                providers = provides.setdefault(pool.intern_name(capability), [])
                if not providers or providers[-1] != solvable:
                    providers.append(solvable)

        logger.info(
            "Universe built: %d packages, %d names",
            pool.solvable_count, pool.name_count,
        )
        return cls(
            pool,
            MappingProxyType({k: tuple(v) for k, v in packages.items()}),
            MappingProxyType({k: tuple(v) for k, v in provides.items()}),
        )

    @property
    def pool(self) -> Pool:
        return self._pool

    def __len__(self) -> int:
        return self._pool.solvable_count

    @property
    def names(self) -> set[str]:
        """Return the set of real package names in the universe."""
        return {self._pool.resolve_name(name_id) for name_id in self._packages}

    def solvable(self, solvable_id: int) -> PackageVersion:
        return self._pool.resolve_solvable(solvable_id)

    def candidates_for(self, name: str) -> frozenset[int]:
        """Return the solvables that provide *name*.

        Args:
            name: Package or capability name.

        Returns:
            Solvable ids; empty when nothing provides *name*.
        """
        name_id = self._pool.lookup_name(name)
        if name_id is None:
            return frozenset()
        return frozenset(self._provides.get(name_id, ()))

    def candidates_for_id(self, name_id: int) -> tuple[int, ...]:
        """Return the providers of an interned name, in registration order."""
        return self._provides.get(name_id, ())

    def packages_named(self, name: str) -> tuple[int, ...]:
        """Return the solvables whose own package name is *name*."""
        name_id = self._pool.lookup_name(name)
        if name_id is None:
            return ()
        return self._packages.get(name_id, ())

    def __iter__(self) -> Iterator[int]:
        return iter(range(self._pool.solvable_count))
