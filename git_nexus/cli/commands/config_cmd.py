"""Config commands - create and inspect the configuration file."""

from __future__ import annotations

from pathlib import Path

import typer

from git_nexus.cli.commands._helpers import exit_with_code
from git_nexus.cli.context import build_context, global_options
from git_nexus.core.config import (
    LOCAL_CONFIG_NAME,
    config_search_paths,
    find_config,
    render_example_config,
    write_example_config,
)
from git_nexus.core.errors import ErrorCode
from git_nexus.core.result import Err, Ok
from git_nexus.output.console import RichConsole, Style
from git_nexus.output.errors import print_error

config_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Create and inspect the configuration file.",
)


@config_app.command("init")
def init(
    output: Path = typer.Option(
        Path(LOCAL_CONFIG_NAME), "--output", "-o", help="Where to write the config file"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write an example configuration file."""
    console = RichConsole()
    match write_example_config(output, overwrite=force):
        case Ok(path):
            console.success(f"Created example config at {path}")
        case Err(e):
            print_error(e, console)
            if output.exists() and not force:
                console.print("hint: pass --force to overwrite", Style.DIM)
                exit_with_code(int(ErrorCode.USER_ERROR))
            exit_with_code(int(ErrorCode.IO_ERROR))


@config_app.command("show")
def show(ctx: typer.Context) -> None:
    """Print the effective configuration and where it came from."""
    cli = build_context(ctx)
    explicit = global_options(ctx).config_path
    source = explicit if explicit is not None else find_config()

    if source is None:
        cli.console.print("# No config file found; using defaults", Style.DIM)
        for candidate in config_search_paths():
            cli.console.print(f"#   searched {candidate}", Style.DIM)
    else:
        cli.console.print(f"# Loaded from {source}", Style.DIM)
    cli.console.print(render_example_config(cli.config))
