"""Dependency resolution over an RPM package universe.

All public names are re-exported here, so callers can write
``from rpmsolve.core import Universe, resolve``.

Data flow
---------
repository records -> ``Universe.build`` (one pass) -> ``RpmDependencyProvider``
(queried by the ``Solver`` during search) -> ``resolve`` (final ``Resolution``).
"""

from rpmsolve.core.pool import Pool
from rpmsolve.core.provider import (
    Dependencies,
    DependencyProvider,
    RpmDependencyProvider,
)
from rpmsolve.core.resolver import Resolution, resolve, root_requirements
from rpmsolve.core.solver import ConflictCause, Problem, Solver
from rpmsolve.core.universe import PackageRecord, Universe
from rpmsolve.core.version import (
    Operator,
    PackageVersion,
    Requirement,
    compare,
    compare_versions,
    satisfies,
)

__all__ = [
    "ConflictCause",
    "Dependencies",
    "DependencyProvider",
    "Operator",
    "PackageRecord",
    "PackageVersion",
    "Pool",
    "Problem",
    "Requirement",
    "Resolution",
    "RpmDependencyProvider",
    "Solver",
    "Universe",
    "compare",
    "compare_versions",
    "resolve",
    "root_requirements",
    "satisfies",
]
