"""Resolution orchestrator: root package names in, resolved set or conflict out.

For each requested name a root requirement "any version above 0.0.0" is
synthesized and interned; the full root set is handed to the SAT-based
``Solver`` in one request. A successful resolution is rendered as sorted,
de-duplicated ``name-version`` strings. A failed one carries the solver's
conflict explanation and never a partial package list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from rpmsolve.core.provider import RpmDependencyProvider
from rpmsolve.core.solver import Problem, Solver
from rpmsolve.core.universe import Universe
from rpmsolve.core.version import Requirement
from rpmsolve.exceptions import UnsolvableError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resolution: The output of dependency resolution
# ---------------------------------------------------------------------------


@dataclass
class Resolution:
    """Result of resolving a set of root package names.

    Attributes:
        success: True if a consistent set of packages was found.
        installed: Sorted, unique ``name-version`` strings. Empty on failure.
        solvables: Selected solvable ids. Empty on failure.
        conflicts: One line per conflicting requirement. Empty on success.
        explanation: Multi-line conflict explanation. Empty on success.
        problem: The structured conflict, if resolution failed.
    """

    success: bool
    installed: list[str] = field(default_factory=list)
    solvables: list[int] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    explanation: str = ""
    problem: Problem | None = None


def root_requirements(universe: Universe, root_names: Iterable[str]) -> list[int]:
    """Intern one root requirement per requested name, in request order."""
    pool = universe.pool
    return [
        pool.intern_requirement(pool.intern_name(name), Requirement.root(name))
        for name in root_names
    ]


def resolve(
    universe: Universe,
    root_names: Iterable[str],
    suggest_enabled: bool = True,
) -> Resolution:
    """Resolve *root_names* against *universe*.

    Args:
        universe: The package universe to resolve against.
        root_names: Requested package (or capability) names.
        suggest_enabled: Whether ``suggests`` entries are expanded.

    Returns:
        A ``Resolution``. Unknown names and unsatisfiable dependencies both
        yield ``success=False`` with an explanation.

    Raises:
        VersionError: If a malformed version string is met while solving.
    """
    names = list(root_names)
    provider = RpmDependencyProvider(universe, disable_suggest=not suggest_enabled)
    solver = Solver(provider)
    requirements = root_requirements(universe, names)
    logger.info("Resolving for: %s", ", ".join(names))

    try:
        solvables = solver.solve(requirements)
    except UnsolvableError as exc:
        pool = universe.pool
        return Resolution(
            success=False,
            conflicts=exc.problem.messages(pool),
            explanation=exc.problem.display(pool),
            problem=exc.problem,
        )

    installed = sorted({str(universe.solvable(s)) for s in solvables})
    return Resolution(success=True, installed=installed, solvables=solvables)
