from __future__ import annotations

import os
from dataclasses import dataclass

import typer

from maui.core.config import Config, load_config
from maui.core.result import Err
from maui.output.console import ConsoleProtocol, RichConsole
from maui.platform.detection import PlatformInfo, detect
from maui.platform.paths import config_path


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: PlatformInfo
    config: Config
    console: ConsoleProtocol


def build_context() -> CLIContext:
    config = Config()
    path = config_path()
    if path.exists():
        config_result = load_config(path)
        if isinstance(config_result, Err):
            typer.echo(f"warning: {config_result.error.message} (using defaults)", err=True)
        else:
            config = config_result.value

    return CLIContext(
        platform=detect(),
        config=config.with_env(os.environ),
        console=RichConsole(),
    )
