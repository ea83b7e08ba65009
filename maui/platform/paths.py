"""User-level directory lookup.

Every function takes an optional `environ` mapping so checkers can resolve
paths against an injected environment in tests.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from .detection import Platform, detect_platform

__all__ = [
    "home",
    "local_app_data",
    "user_config_dir",
    "config_path",
]

APP_NAME = "maui"


def _env(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def home(environ: Mapping[str, str] | None = None, platform: Platform | None = None) -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, falling back to Path.home().
    """
    env = _env(environ)
    platform = platform or detect_platform()
    value = env.get("USERPROFILE") if platform == Platform.WINDOWS else env.get("HOME")
    if value:
        return Path(value)
    return Path.home()


def local_app_data(
    environ: Mapping[str, str] | None = None, platform: Platform | None = None
) -> Path:
    """%LOCALAPPDATA% on Windows, or its conventional location under home."""
    env = _env(environ)
    value = env.get("LOCALAPPDATA")
    if value:
        return Path(value)
    return home(env, platform) / "AppData" / "Local"


def user_config_dir(
    environ: Mapping[str, str] | None = None, platform: Platform | None = None
) -> Path:
    """Get the user-level configuration directory.

    Location: ~/.config/maui/ (Linux/macOS) or %APPDATA%/maui/ (Windows)
    """
    env = _env(environ)
    platform = platform or detect_platform()
    if platform == Platform.WINDOWS:
        app_data = env.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home(env, platform) / "AppData" / "Roaming" / APP_NAME

    xdg_config = env.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home(env, platform) / ".config" / APP_NAME


def config_path(environ: Mapping[str, str] | None = None) -> Path:
    return user_config_dir(environ) / "config.toml"
