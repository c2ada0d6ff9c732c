"""Dependency provider: the callback interface the solver searches through.

The solver never touches the universe directly. It asks a
``DependencyProvider`` three things:

- which solvables are candidates for a name,
- in which order those candidates should be tried,
- what a given solvable depends on.

``RpmDependencyProvider`` answers them from an immutable ``Universe``. Its
only configuration is whether ``suggests`` entries are expanded.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import cmp_to_key

from rpmsolve.core.pool import Pool
from rpmsolve.core.universe import Universe
from rpmsolve.core.version import Requirement, compare

logger = logging.getLogger(__name__)


@dataclass
class Dependencies:
    """Expanded dependencies of one solvable.

    Attributes:
        requirements: Requirement ids, one per kept requires/suggests entry,
            hard requirements first.
    """

    requirements: list[int] = field(default_factory=list)


class DependencyProvider(ABC):
    """Interface between the solver and a package universe."""

    @property
    @abstractmethod
    def pool(self) -> Pool:
        """The pool that resolves every handle passed to or returned by the provider."""

    @abstractmethod
    def candidates(self, name_id: int) -> list[int]:
        """Return the solvables providing *name_id*, most preferred first."""

    @abstractmethod
    def sort_candidates(self, solvables: list[int]) -> list[int]:
        """Return *solvables* in preference order."""

    @abstractmethod
    def dependencies(self, solvable_id: int) -> Dependencies:
        """Return the requirements a solvable brings in when selected."""


class RpmDependencyProvider(DependencyProvider):
    """Dependency provider over an RPM package universe.

    Args:
        universe: The universe to answer queries from.
        disable_suggest: When True, ``suggests`` entries are not expanded.
    """

    def __init__(self, universe: Universe, disable_suggest: bool = False) -> None:
        self._universe = universe
        self._disable_suggest = disable_suggest

    @property
    def pool(self) -> Pool:
        return self._universe.pool

    @property
    def disable_suggest(self) -> bool:
        return self._disable_suggest

    def candidates(self, name_id: int) -> list[int]:
        return self.sort_candidates(list(self._universe.candidates_for_id(name_id)))

    def sort_candidates(self, solvables: list[int]) -> list[int]:
        """Sort highest epoch, then highest version, first.

        The sort is stable: solvables that compare equal keep their input
        order, so solver output does not depend on hash ordering.

        Raises:
            VersionError: If a version string cannot be compared.
        """
        pool = self.pool

        def _cmp(a: int, b: int) -> int:
            return compare(pool.resolve_solvable(a), pool.resolve_solvable(b))

        return sorted(solvables, key=cmp_to_key(_cmp), reverse=True)

    def dependencies(self, solvable_id: int) -> Dependencies:
        package = self.pool.resolve_solvable(solvable_id)
        result = Dependencies()
        self._expand(package.requires, result)
        if not self._disable_suggest:
            self._expand(package.suggests, result)
        return result

    def _expand(self, requirements: tuple[Requirement, ...], result: Dependencies) -> None:
        pool = self.pool
        for req in requirements:
            if not req.is_supported:
                continue
            name_id = pool.intern_name(req.name)
            result.requirements.append(pool.intern_requirement(name_id, req))
