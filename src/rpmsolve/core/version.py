"""Package versions, requirements and the version ordering used to compare them.

This module provides the value types the rest of the resolver is built on:

- ``PackageVersion``: one concrete package build from the repository.
- ``Requirement``: a named constraint (``requires`` or ``suggests`` entry).
- ``Operator``: the RPM comparison flags EQ, GT, GE, LT, LE and NE.

Version strings are compared segment-wise: each string is split into runs of
digits and runs of letters, digit runs compare numerically and letter runs
lexicographically. This is a generic dotted-version comparator, not
``rpmvercmp``; tilde and caret carry no special meaning and only separate
segments.

Epochs order ``PackageVersion`` values but are not consulted when testing
whether a candidate satisfies a requirement.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering

from rpmsolve.exceptions import VersionError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Version comparison utilities
# ---------------------------------------------------------------------------

# A version is one or more alphanumeric runs joined by separator characters.
_VERSION_RE = re.compile(r"^[0-9A-Za-z]+(?:[._+~^-]+[0-9A-Za-z]+)*$")

_SEGMENT_RE = re.compile(r"\d+|[A-Za-z]+")


def _parse_segments(version: str) -> list[int | str]:
    """Split a version string into numeric and alphabetic segments.

    Args:
        version: Version string (e.g., "1.2.3", "2.0rc1", "5.4~beta").

    Returns:
        A list of ints (digit runs) and strs (letter runs), in order.

    Raises:
        VersionError: If the string is empty or contains characters other
            than letters, digits and the separators ``. - _ + ~ ^``.
    """
    if not isinstance(version, str) or not _VERSION_RE.match(version):
        raise VersionError(f"Invalid version string: {version!r}")
    return [
        int(seg) if seg.isdigit() else seg
        for seg in _SEGMENT_RE.findall(version)
    ]


def _compare_segment(left: int | str | None, right: int | str | None) -> int:
    """Three-way comparison of two segments; ``None`` marks a missing one."""
    if left is None:
        left = 0 if isinstance(right, int) else None
    if right is None:
        right = 0 if isinstance(left, int) else None

    # A letter run against a missing segment ranks lower ("1.0rc1" < "1.0").
    if left is None:
        return 1
    if right is None:
        return -1

    if isinstance(left, int) and isinstance(right, int):
        return (left > right) - (left < right)
    if isinstance(left, int):
        return 1
    if isinstance(right, int):
        return -1
    return (left > right) - (left < right)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings segment by segment.

    Missing trailing numeric segments count as zero, so ``"1.0"`` and
    ``"1.0.0"`` compare equal.

    Args:
        a: Left-hand version string.
        b: Right-hand version string.

    Returns:
        -1, 0 or 1 as *a* is lower than, equal to or greater than *b*.

    Raises:
        VersionError: If either string cannot be parsed.
    """
    left = _parse_segments(a)
    right = _parse_segments(b)
    for i in range(max(len(left), len(right))):
        result = _compare_segment(
            left[i] if i < len(left) else None,
            right[i] if i < len(right) else None,
        )
        if result:
            return result
    return 0


# ---------------------------------------------------------------------------
# Operator: RPM comparison flags
# ---------------------------------------------------------------------------


class Operator(str, Enum):
    """Comparison flag of a requirement, as spelled in repodata."""

    EQ = "EQ"
    GT = "GT"
    GE = "GE"
    LT = "LT"
    LE = "LE"
    NE = "NE"

    @classmethod
    def parse(cls, flags: str | None) -> Operator | None:
        """Parse a repodata ``flags`` attribute.

        Args:
            flags: The raw flag string, or None.

        Returns:
            The operator, or None when *flags* is missing or empty.

        Raises:
            VersionError: If *flags* names no known operator.
        """
        if not flags:
            return None
        try:
            return cls(flags)
        except ValueError:
            raise VersionError(f"Unknown comparison operator: {flags!r}") from None

    def test(self, cmp: int) -> bool:
        """Apply this operator to a three-way comparison result."""
        if self is Operator.EQ:
            return cmp == 0
        if self is Operator.NE:
            return cmp != 0
        if self is Operator.GT:
            return cmp > 0
        if self is Operator.GE:
            return cmp >= 0
        if self is Operator.LT:
            return cmp < 0
        return cmp <= 0

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    Operator.EQ: "=",
    Operator.NE: "!=",
    Operator.GT: ">",
    Operator.GE: ">=",
    Operator.LT: "<",
    Operator.LE: "<=",
}


# ---------------------------------------------------------------------------
# Requirement: a requires/suggests entry
# ---------------------------------------------------------------------------


def _parse_epoch(epoch: str | int | None) -> int | None:
    if epoch is None or epoch == "":
        return None
    try:
        return int(epoch)
    except (TypeError, ValueError):
        raise VersionError(f"Invalid epoch: {epoch!r}") from None


@dataclass(frozen=True)
class Requirement:
    """A named constraint against a package or a provided capability.

    Equality and hashing cover ``(name, operator, version)``; the epoch is
    excluded so that requirements differing only in epoch intern to the
    same handle.

    Attributes:
        name: Target name; a real package name or a virtual provide.
        operator: Comparison flag, or None for an unconstrained requirement.
        version: Version to compare candidates against, or None.
        epoch: Epoch declared alongside the version, if any.
    """

    name: str
    operator: Operator | None = None
    version: str | None = None
    epoch: int | None = field(default=None, compare=False)

    @classmethod
    def from_flags(
        cls,
        name: str,
        flags: str | None = None,
        version: str | None = None,
        epoch: str | int | None = None,
    ) -> Requirement:
        """Build a requirement from raw repodata attribute strings.

        Raises:
            VersionError: If *flags* or *epoch* cannot be parsed.
        """
        return cls(
            name=name,
            operator=Operator.parse(flags),
            version=version or None,
            epoch=_parse_epoch(epoch),
        )

    @classmethod
    def root(cls, name: str) -> Requirement:
        """Requirement on any version of *name* above the lowest possible."""
        return cls(name=name, operator=Operator.GT, version="0.0.0", epoch=0)

    @property
    def is_unconstrained(self) -> bool:
        return self.operator is None or self.version is None

    @property
    def is_supported(self) -> bool:
        """False for file dependencies and rich (conditional) dependencies."""
        return not self.name.startswith("/") and " if " not in self.name

    def __str__(self) -> str:
        if self.is_unconstrained:
            return self.name
        version = self.version
        if self.epoch:
            version = f"{self.epoch}:{version}"
        return f"{self.name} {self.operator.symbol} {version}"


# ---------------------------------------------------------------------------
# PackageVersion: one concrete build
# ---------------------------------------------------------------------------


@total_ordering
@dataclass(frozen=True, eq=False)
class PackageVersion:
    """One package build available in the repository.

    Two instances are equal when name and version match; the epoch only
    takes part in ordering, where it dominates the version string.

    Attributes:
        name: Package name (several builds may share it).
        version: Version string as published in repodata.
        epoch: Epoch override; a higher epoch always sorts greater.
        requires: Hard requirements.
        suggests: Soft requirements.
    """

    name: str
    version: str
    epoch: int = 0
    requires: tuple[Requirement, ...] = ()
    suggests: tuple[Requirement, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self.name == other.name and self.version == other.version

    def __hash__(self) -> int:
        return hash((self.name, self.version))

    def __lt__(self, other: PackageVersion) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return compare(self, other) < 0

    def __str__(self) -> str:
        if self.epoch:
            return f"{self.name}-{self.epoch}:{self.version}"
        return f"{self.name}-{self.version}"


def compare(a: PackageVersion, b: PackageVersion) -> int:
    """Order two package versions: epoch first, then the version string.

    Returns:
        -1, 0 or 1.

    Raises:
        VersionError: If either version string cannot be parsed.
    """
    if a.epoch != b.epoch:
        return (a.epoch > b.epoch) - (a.epoch < b.epoch)
    return compare_versions(a.version, b.version)


def satisfies(requirement: Requirement, candidate: PackageVersion) -> bool:
    """Check whether *candidate* lies inside the range *requirement* allows.

    An unconstrained requirement accepts every candidate. Otherwise the
    candidate's version string is compared with the requirement's; neither
    the names nor the epochs are consulted.

    Raises:
        VersionError: If either version string cannot be parsed.
    """
    if requirement.is_unconstrained:
        return True
    logger.debug(
        "Comparing: %s %s %s",
        candidate.version, requirement.operator.value, requirement.version,
    )
    return requirement.operator.test(
        compare_versions(candidate.version, requirement.version)
    )
