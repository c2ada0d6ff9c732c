"""Tests for version ordering, requirement parsing and containment."""

from __future__ import annotations

import time

import pytest

from rpmsolve.core import (
    Operator,
    PackageVersion,
    Requirement,
    compare,
    compare_versions,
    satisfies,
)
from rpmsolve.exceptions import VersionError


# ===========================================================================
# compare_versions
# ===========================================================================


class TestCompareVersions:
    """Segment-wise comparison of version strings."""

    def test_numeric_segments_compare_numerically(self) -> None:
        assert compare_versions("1.10", "1.9") == 1
        assert compare_versions("1.9", "1.2") == 1
        assert compare_versions("1.2", "1.10") == -1

    def test_equal_strings(self) -> None:
        assert compare_versions("2.4.1", "2.4.1") == 0

    def test_missing_numeric_segments_count_as_zero(self) -> None:
        assert compare_versions("1.0", "1.0.0") == 0
        assert compare_versions("1.0.1", "1.0") == 1

    def test_letters_rank_below_numbers(self) -> None:
        assert compare_versions("1.a", "1.0") == -1

    def test_letter_segment_ranks_below_missing(self) -> None:
        """A trailing letter run marks a pre-release: 1.0rc1 < 1.0."""
        assert compare_versions("1.0rc1", "1.0") == -1
        assert compare_versions("1.0", "1.0rc1") == 1

    def test_letter_segments_compare_lexicographically(self) -> None:
        assert compare_versions("1.0beta", "1.0alpha") == 1

    def test_separators_only_delimit(self) -> None:
        assert compare_versions("1_2", "1.2") == 0
        assert compare_versions("5.4~beta", "5.4.beta") == 0

    @pytest.mark.parametrize("bad", ["", "1.0 beta", "1/2", ".1", "1:2"])
    def test_malformed_version_raises(self, bad: str) -> None:
        with pytest.raises(VersionError):
            compare_versions(bad, "1.0")
        with pytest.raises(VersionError):
            compare_versions("1.0", bad)

    @pytest.mark.parametrize("bad", ["1" * 5000 + "!", "1a" * 2500 + " ", "1." * 2500 + "!"])
    def test_long_malformed_version_fails_fast(self, bad: str) -> None:
        """A bad trailing character is rejected without runaway backtracking."""
        start = time.monotonic()
        with pytest.raises(VersionError):
            compare_versions(bad, "1.0")
        assert time.monotonic() - start < 1.0


# ===========================================================================
# PackageVersion
# ===========================================================================


class TestPackageVersion:
    """Identity and ordering of package versions."""

    def test_higher_epoch_wins_regardless_of_version(self) -> None:
        new = PackageVersion("foo", "1.0", epoch=1)
        old = PackageVersion("foo", "9.9", epoch=0)
        assert compare(new, old) == 1
        assert new > old

    def test_equal_epoch_orders_by_version(self) -> None:
        versions = [PackageVersion("foo", v) for v in ("1.2", "1.10", "1.9")]
        assert [p.version for p in sorted(versions)] == ["1.2", "1.9", "1.10"]

    def test_equality_ignores_epoch(self) -> None:
        assert PackageVersion("foo", "1.0", epoch=0) == PackageVersion("foo", "1.0", epoch=3)
        assert hash(PackageVersion("foo", "1.0", epoch=0)) == hash(
            PackageVersion("foo", "1.0", epoch=3)
        )

    def test_equality_needs_same_name(self) -> None:
        assert PackageVersion("foo", "1.0") != PackageVersion("bar", "1.0")

    def test_display(self) -> None:
        assert str(PackageVersion("foo", "1.0")) == "foo-1.0"
        assert str(PackageVersion("foo", "1.0", epoch=2)) == "foo-2:1.0"

    def test_malformed_version_fails_loudly(self) -> None:
        with pytest.raises(VersionError):
            compare(PackageVersion("foo", "1 0"), PackageVersion("foo", "1.0"))


# ===========================================================================
# Operator & Requirement
# ===========================================================================


class TestOperator:
    """Parsing of repodata comparison flags."""

    @pytest.mark.parametrize("flags", ["EQ", "GT", "GE", "LT", "LE", "NE"])
    def test_known_flags(self, flags: str) -> None:
        assert Operator.parse(flags) is Operator(flags)

    def test_missing_flags_mean_unconstrained(self) -> None:
        assert Operator.parse(None) is None
        assert Operator.parse("") is None

    def test_unknown_flag_raises(self) -> None:
        with pytest.raises(VersionError):
            Operator.parse("GTE")


class TestRequirement:
    """Requirement construction, identity and filtering."""

    def test_from_flags(self) -> None:
        r = Requirement.from_flags("libfoo", "GE", "1.2", "0")
        assert r.operator is Operator.GE
        assert r.version == "1.2"
        assert r.epoch == 0

    def test_from_flags_rejects_bad_epoch(self) -> None:
        with pytest.raises(VersionError):
            Requirement.from_flags("libfoo", "GE", "1.2", "x")

    def test_identity_excludes_epoch(self) -> None:
        a = Requirement("libfoo", Operator.GE, "1.2", epoch=0)
        b = Requirement("libfoo", Operator.GE, "1.2", epoch=5)
        assert a == b
        assert hash(a) == hash(b)

    def test_identity_includes_operator(self) -> None:
        assert Requirement("x", Operator.GE, "1") != Requirement("x", Operator.GT, "1")

    def test_root_requirement(self) -> None:
        r = Requirement.root("rust")
        assert (r.name, r.operator, r.version) == ("rust", Operator.GT, "0.0.0")

    def test_file_and_rich_dependencies_are_unsupported(self) -> None:
        assert not Requirement("/usr/bin/sh").is_supported
        assert not Requirement("(foo if bar)").is_supported
        assert Requirement("libc.so.6()(64bit)").is_supported

    def test_display(self) -> None:
        assert str(Requirement("foo")) == "foo"
        assert str(Requirement("foo", Operator.GE, "1.0")) == "foo >= 1.0"
        assert str(Requirement("foo", Operator.EQ, "1.0", epoch=2)) == "foo = 2:1.0"


# ===========================================================================
# satisfies
# ===========================================================================


class TestSatisfies:
    """Containment of a candidate in a requirement's range."""

    def test_unconstrained_matches_anything(self) -> None:
        r = Requirement("foo")
        assert satisfies(r, PackageVersion("completely-different", "0.0.1"))

    def test_operator_without_version_is_unconstrained(self) -> None:
        r = Requirement("foo", Operator.GT, None)
        assert satisfies(r, PackageVersion("foo", "0"))

    def test_gt(self) -> None:
        r = Requirement("foo", Operator.GT, "2.0")
        assert satisfies(r, PackageVersion("foo", "2.1"))
        assert not satisfies(r, PackageVersion("foo", "1.9"))
        assert not satisfies(r, PackageVersion("foo", "2.0"))

    @pytest.mark.parametrize(
        "op, version, expected",
        [
            (Operator.EQ, "2.0", True),
            (Operator.EQ, "2.1", False),
            (Operator.NE, "2.0", False),
            (Operator.NE, "2.1", True),
            (Operator.GE, "2.0", True),
            (Operator.LE, "2.0", True),
            (Operator.LT, "2.0", False),
            (Operator.LT, "2.1", True),
        ],
    )
    def test_operators(self, op: Operator, version: str, expected: bool) -> None:
        assert satisfies(Requirement("foo", op, version), PackageVersion("foo", "2.0")) is expected

    def test_epoch_is_not_consulted(self) -> None:
        r = Requirement("foo", Operator.GE, "2.0", epoch=1)
        assert not satisfies(r, PackageVersion("foo", "1.0", epoch=3))
        assert satisfies(r, PackageVersion("foo", "2.0", epoch=0))

    def test_malformed_version_raises(self) -> None:
        with pytest.raises(VersionError):
            satisfies(Requirement("foo", Operator.GE, "1..?"), PackageVersion("foo", "1.0"))
