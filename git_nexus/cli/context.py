from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from git_nexus.core.config import Config, load_config_or_default
from git_nexus.core.errors import ErrorCode
from git_nexus.core.result import Err
from git_nexus.output.console import ConsoleProtocol, RichConsole
from git_nexus.output.errors import print_error


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the command name."""

    config_path: Path | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol


def build_context(ctx: typer.Context | None = None) -> CLIContext:
    options = global_options(ctx)
    console = RichConsole()

    config_result = load_config_or_default(options.config_path)
    if isinstance(config_result, Err):
        print_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(config=config_result.value, console=console)


def global_options(ctx: typer.Context | None) -> GlobalOptions:
    if ctx is None:
        return GlobalOptions()
    root = ctx.find_root()
    if isinstance(root.obj, GlobalOptions):
        return root.obj
    return GlobalOptions()
