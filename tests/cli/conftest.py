"""Shared fixtures for CLI tests."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from rpmsolve.config import CONFIG_ENV


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's RPMSOLVE_* variables out of CLI runs."""
    for var in (
        CONFIG_ENV,
        "RPMSOLVE_REPO_URL",
        "RPMSOLVE_TARGET_DIR",
        "RPMSOLVE_NO_SUGGEST",
        "RPMSOLVE_TIMEOUT",
        "RPMSOLVE_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()
