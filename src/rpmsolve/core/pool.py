"""Interning arena mapping names, solvables and requirements to integer handles.

Every other component refers to entities by handle: a *name id* for a package
or capability name, a *solvable id* for one ``PackageVersion`` and a
*requirement id* for one interned ``(name, Requirement)`` pair. Handles are
dense, start at zero and stay valid for the lifetime of the pool.

Names and requirements may be interned at query time (dependency expansion
meets names the build pass never saw); interning is append-only, so handles
already handed out never change meaning.
"""

from __future__ import annotations

from rpmsolve.core.version import PackageVersion, Requirement


class Pool:
    """Arena of interned names, solvables and requirements.

    Thread safety: This class is NOT thread-safe. The resolver is
    single-threaded; external synchronization is required otherwise.
    """

    def __init__(self) -> None:
        self._names: list[str] = []
        self._name_ids: dict[str, int] = {}
        self._solvables: list[PackageVersion] = []
        self._solvable_names: list[int] = []
        self._requirements: list[Requirement] = []
        self._requirement_names: list[int] = []
        self._requirement_ids: dict[tuple[int, Requirement], int] = {}

    # -- names --------------------------------------------------------------

    def intern_name(self, name: str) -> int:
        """Return the handle for *name*, allocating one on first use."""
        name_id = self._name_ids.get(name)
        if name_id is None:
            name_id = len(self._names)
            self._names.append(name)
            self._name_ids[name] = name_id
        return name_id

    def lookup_name(self, name: str) -> int | None:
        """Return the handle for *name* without interning it."""
        return self._name_ids.get(name)

    def resolve_name(self, name_id: int) -> str:
        return self._names[name_id]

    @property
    def name_count(self) -> int:
        return len(self._names)

    # -- solvables ----------------------------------------------------------

    def intern_solvable(self, name_id: int, package: PackageVersion) -> int:
        """Register *package* under *name_id* and return its solvable id.

        Every call allocates a new solvable; the universe interns each
        repository record exactly once.
        """
        solvable_id = len(self._solvables)
        self._solvables.append(package)
        self._solvable_names.append(name_id)
        return solvable_id

    def resolve_solvable(self, solvable_id: int) -> PackageVersion:
        return self._solvables[solvable_id]

    def solvable_name(self, solvable_id: int) -> int:
        """Name id the solvable was interned under (its own package name)."""
        return self._solvable_names[solvable_id]

    @property
    def solvable_count(self) -> int:
        return len(self._solvables)

    # -- requirements -------------------------------------------------------

    def intern_requirement(self, name_id: int, requirement: Requirement) -> int:
        """Return the handle for *requirement* against *name_id*.

        Requirements equal by ``(name, operator, version)`` share a handle
        regardless of their epoch.
        """
        key = (name_id, requirement)
        requirement_id = self._requirement_ids.get(key)
        if requirement_id is None:
            requirement_id = len(self._requirements)
            self._requirements.append(requirement)
            self._requirement_names.append(name_id)
            self._requirement_ids[key] = requirement_id
        return requirement_id

    def resolve_requirement(self, requirement_id: int) -> Requirement:
        return self._requirements[requirement_id]

    def requirement_name(self, requirement_id: int) -> int:
        return self._requirement_names[requirement_id]
