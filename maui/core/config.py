"""Typed user configuration.

The configuration file is optional and lives in the user config directory
(`~/.config/maui/config.toml` or `%APPDATA%/maui/config.toml`):

    [manifest]
    url = "https://example.com/maui-check.json"

    [probe]
    timeout = 60

    [logging]
    level = "INFO"
    file = "~/maui-check.log"

Environment variables override the file: MAUI_CHECK_MANIFEST,
MAUI_PROBE_TIMEOUT, MAUI_LOG_LEVEL.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table, lookup

__all__ = [
    "Config",
    "ConfigError",
    "LoggingConfig",
    "ManifestConfig",
    "ProbeConfig",
    "DEFAULT_MANIFEST_URL",
    "load_config",
]

DEFAULT_MANIFEST_URL = "https://aka.ms/dotnet-maui-check-manifest"

ENV_MANIFEST = "MAUI_CHECK_MANIFEST"
ENV_PROBE_TIMEOUT = "MAUI_PROBE_TIMEOUT"
ENV_LOG_LEVEL = "MAUI_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ManifestConfig:
    url: str = DEFAULT_MANIFEST_URL


@dataclass(frozen=True, slots=True)
class ProbeConfig:
    """External probe settings.

    `timeout` is None by default: probes wait for the tool to exit.
    """

    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "WARNING"
    file: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        manifest: StrDict = get_table(data, "manifest") or {}
        probe: StrDict = get_table(data, "probe") or {}
        log: StrDict = get_table(data, "logging") or {}

        return cls(
            manifest=ManifestConfig(url=get_str(manifest, "url") or DEFAULT_MANIFEST_URL),
            probe=ProbeConfig(timeout=_parse_timeout(lookup(probe, "timeout"))),
            logging=LoggingConfig(
                level=_parse_level(get_str(log, "level")),
                file=get_str(log, "file"),
            ),
        )

    def with_env(self, environ: Mapping[str, str]) -> Config:
        """Return a copy with environment overrides applied."""
        config = self
        url = environ.get(ENV_MANIFEST, "").strip()
        if url:
            config = dataclasses.replace(config, manifest=ManifestConfig(url=url))
        timeout = environ.get(ENV_PROBE_TIMEOUT, "").strip()
        if timeout:
            config = dataclasses.replace(config, probe=ProbeConfig(timeout=_parse_timeout(timeout)))
        level = environ.get(ENV_LOG_LEVEL, "").strip()
        if level:
            config = dataclasses.replace(
                config,
                logging=dataclasses.replace(config.logging, level=_parse_level(level)),
            )
        return config


def _parse_timeout(value: object) -> float | None:
    """Positive number of seconds, anything else means no timeout."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return None


def _parse_level(value: str | None) -> str:
    if value and value.upper() in _LOG_LEVELS:
        return value.upper()
    return "WARNING"


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))