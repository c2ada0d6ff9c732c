"""Shared fixtures for rpmsolve tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import write_repository


@pytest.fixture
def sample_packages() -> list[dict]:
    """A small repository: A needs B >= 1.0 and suggests D; B has two versions."""
    return [
        {"name": "A", "version": "1.0", "requires": [("B", "GE", "1.0")], "suggests": ["D"]},
        {"name": "B", "version": "0.9"},
        {"name": "B", "version": "1.5"},
        {"name": "D", "version": "2.0"},
        {"name": "E", "version": "1.0", "requires": [("C", "EQ", "2.0")]},
        {"name": "C", "version": "1.0"},
    ]


@pytest.fixture
def repo_dir(tmp_path: Path, sample_packages: list[dict]) -> Path:
    """A repository root with gzip-compressed primary metadata."""
    return write_repository(tmp_path / "repo", sample_packages)
