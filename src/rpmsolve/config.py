"""Runtime settings for the rpmsolve CLI.

Settings are layered, later sources overriding earlier ones:

1. built-in defaults (``DEFAULTS``);
2. a YAML file given with ``--config`` or ``$RPMSOLVE_CONFIG``;
3. ``RPMSOLVE_*`` environment variables;
4. explicit command-line options (applied by the CLI via ``Settings.merged``).

Example ``rpmsolve.yml``::

    repo_url: https://mirrors.example.org/fedora/releases/38/Everything/x86_64/os/
    target_dir: ./fedora
    suggests: false
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from rpmsolve.exceptions import ConfigError

CONFIG_ENV = "RPMSOLVE_CONFIG"

DEFAULTS: dict[str, Any] = {
    "repo_url": "https://mirrors.xtom.de/fedora/releases/38/Everything/x86_64/os/",
    "target_dir": "./fedora",
    "suggests": True,
    "fetch": True,
    "timeout": 30.0,
    "log_level": "WARNING",
}

# Environment variable -> setting name.
_ENV_KEYS: dict[str, str] = {
    "RPMSOLVE_REPO_URL": "repo_url",
    "RPMSOLVE_TARGET_DIR": "target_dir",
    "RPMSOLVE_NO_SUGGEST": "no_suggest",
    "RPMSOLVE_TIMEOUT": "timeout",
    "RPMSOLVE_LOG_LEVEL": "log_level",
}

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
        return value.strip().lower() in _TRUE
    raise ConfigError(f"Setting {key!r} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Settings:
    """Resolved configuration.

    Attributes:
        repo_url: Base URL of the repository to fetch metadata from.
        target_dir: Local repository root holding ``repodata/``.
        suggests: Expand ``suggests`` relations while resolving.
        fetch: Download metadata when the target directory has none.
        timeout: HTTP timeout in seconds.
        log_level: Logging level name for the CLI.
    """

    repo_url: str = DEFAULTS["repo_url"]
    target_dir: Path = Path(DEFAULTS["target_dir"])
    suggests: bool = DEFAULTS["suggests"]
    fetch: bool = DEFAULTS["fetch"]
    timeout: float = DEFAULTS["timeout"]
    log_level: str = DEFAULTS["log_level"]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Settings | None = None) -> Settings:
        """Build settings from *data* layered over *base* (defaults if None).

        Unknown keys are rejected. ``no_suggest`` is accepted as the inverse
        of ``suggests``.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        values = dataclasses.asdict(base or cls())
        for key, value in data.items():
            if key == "no_suggest":
                values["suggests"] = not _as_bool(key, value)
            elif key in ("suggests", "fetch"):
                values[key] = _as_bool(key, value)
            elif key == "timeout":
                try:
                    values[key] = float(value)
                except (TypeError, ValueError):
                    raise ConfigError(f"Setting 'timeout' must be a number, got {value!r}") from None
                if values[key] <= 0:
                    raise ConfigError("Setting 'timeout' must be positive")
            elif key == "log_level":
                level = str(value).upper()
                if level not in _LOG_LEVELS:
                    raise ConfigError(f"Unknown log level {value!r}")
                values[key] = level
            elif key == "target_dir":
                values[key] = Path(str(value)).expanduser()
            elif key == "repo_url":
                if not isinstance(value, str) or not value:
                    raise ConfigError("Setting 'repo_url' must be a non-empty string")
                values[key] = value
            else:
                raise ConfigError(f"Unknown setting {key!r}")
        return cls(**values)

    def merged(self, **overrides: Any) -> Settings:
        """Return a copy with every non-None override applied."""
        return Settings.from_mapping(
            {k: v for k, v in overrides.items() if v is not None}, base=self
        )


def load_file(path: str | Path) -> dict[str, Any]:
    """Load a YAML settings file.

    Raises:
        ConfigError: If the file is missing, not YAML, or not a mapping.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from defaults, config file and environment.

    Args:
        config_path: Explicit YAML file; falls back to ``$RPMSOLVE_CONFIG``.
        environ: Environment to read (defaults to ``os.environ``).

    Raises:
        ConfigError: If any source holds an invalid value.
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    path = config_path or environ.get(CONFIG_ENV)
    if path:
        settings = Settings.from_mapping(load_file(path), base=settings)

    env_values = {
        key: environ[var] for var, key in _ENV_KEYS.items() if var in environ
    }
    if env_values:
        settings = Settings.from_mapping(env_values, base=settings)
    return settings
