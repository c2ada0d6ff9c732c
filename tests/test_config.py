"""Tests for settings layering: defaults, YAML file, environment, overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from rpmsolve.config import DEFAULTS, Settings, load_file, load_settings
from rpmsolve.exceptions import ConfigError


class TestDefaults:
    def test_no_sources(self) -> None:
        settings = load_settings(environ={})
        assert settings == Settings()
        assert settings.repo_url == DEFAULTS["repo_url"]
        assert settings.target_dir == Path("./fedora")
        assert settings.suggests is True
        assert settings.fetch is True


class TestFromMapping:
    """Validation of individual keys."""

    def test_no_suggest_inverts(self) -> None:
        assert Settings.from_mapping({"no_suggest": "yes"}).suggests is False

    def test_timeout_coerced(self) -> None:
        assert Settings.from_mapping({"timeout": "5"}).timeout == 5.0

    @pytest.mark.parametrize(
        "data",
        [
            {"timeout": "soon"},
            {"timeout": 0},
            {"suggests": "maybe"},
            {"log_level": "LOUD"},
            {"repo_url": ""},
            {"mirror": "x"},
        ],
    )
    def test_invalid_values(self, data: dict) -> None:
        with pytest.raises(ConfigError):
            Settings.from_mapping(data)

    def test_log_level_normalized(self) -> None:
        assert Settings.from_mapping({"log_level": "debug"}).log_level == "DEBUG"

    def test_merged_ignores_none(self) -> None:
        base = Settings(repo_url="https://a.example/")
        merged = base.merged(repo_url=None, target_dir="/tmp/r", fetch=False)
        assert merged.repo_url == "https://a.example/"
        assert merged.target_dir == Path("/tmp/r")
        assert merged.fetch is False


class TestLayering:
    """File and environment sources."""

    def test_file_then_env(self, tmp_path: Path) -> None:
        config = tmp_path / "rpmsolve.yml"
        config.write_text("repo_url: https://file.example/\nsuggests: false\ntimeout: 10\n")
        settings = load_settings(
            config, environ={"RPMSOLVE_REPO_URL": "https://env.example/"}
        )
        assert settings.repo_url == "https://env.example/"
        assert settings.suggests is False
        assert settings.timeout == 10.0

    def test_config_path_from_env(self, tmp_path: Path) -> None:
        config = tmp_path / "c.yml"
        config.write_text("target_dir: /srv/repo\n")
        settings = load_settings(environ={"RPMSOLVE_CONFIG": str(config)})
        assert settings.target_dir == Path("/srv/repo")

    def test_env_no_suggest(self) -> None:
        assert load_settings(environ={"RPMSOLVE_NO_SUGGEST": "1"}).suggests is False

    def test_empty_file(self, tmp_path: Path) -> None:
        config = tmp_path / "empty.yml"
        config.write_text("")
        assert load_file(config) == {}


class TestLoadFileErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_file(tmp_path / "absent.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "bad.yml"
        config.write_text("repo_url: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_file(config)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        config = tmp_path / "list.yml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_file(config)
