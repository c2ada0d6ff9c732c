"""rpmsolve exception hierarchy.

All public exceptions inherit from RpmSolveError, giving callers a single
base class to catch when they want to handle any rpmsolve-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rpmsolve.core.solver import Problem


class RpmSolveError(Exception):
    """Base exception for all rpmsolve errors."""


class VersionError(RpmSolveError):
    """Raised for data-quality failures in version information.

    Covers version strings the comparator cannot split into segments,
    comparison flags outside EQ/GT/GE/LT/LE/NE, and non-integer epochs.
    These abort the current query; they are never coerced to a default
    ordering.
    """


class MetadataError(RpmSolveError):
    """Raised when repository metadata cannot be read or is malformed.

    Covers missing repomd.xml or primary files, unparseable XML, unsupported
    compression and package records lacking a name or version. Universe
    construction is aborted; no partial universe is built.
    """


class UnsolvableError(RpmSolveError):
    """Raised by the solver when no assignment satisfies the requirements.

    Attributes:
        problem: The structured conflict explanation.
    """

    def __init__(self, problem: Problem) -> None:
        super().__init__("requirements cannot be satisfied")
        self.problem = problem


class FetchError(RpmSolveError):
    """Raised when repository metadata cannot be downloaded."""


class ConfigError(RpmSolveError):
    """Raised when a configuration file or setting is invalid."""
