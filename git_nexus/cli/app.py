from __future__ import annotations

from pathlib import Path

import typer

from git_nexus import __version__
from git_nexus.cli.commands.config_cmd import config_app
from git_nexus.cli.commands.fix import fix
from git_nexus.cli.commands.scan import scan
from git_nexus.cli.context import GlobalOptions
from git_nexus.core.errors import ErrorCode
from git_nexus.logging_utils import LOG_LEVELS, configure_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Scan a workspace for git repositories, score their health and fix common issues.",
)


# Commands
app.command()(scan)
app.command()(fix)

# Sub-apps
app.add_typer(config_app, name="config")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: ./.git-nexus.toml, user config dir, ~/.git-nexus.toml)",
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", help=f"Diagnostic log level: {', '.join(LOG_LEVELS)}"
    ),
    log_json: bool = typer.Option(False, "--log-json", help="Emit diagnostic logs as JSON lines"),
) -> None:
    try:
        configure_logging(log_level, json_output=log_json)
    except ValueError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config_path: Path | None = None
    if config is not None:
        config_path = config.expanduser()
        if not config_path.is_file():
            typer.echo(f"error: config file not found: {config_path}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx.obj = GlobalOptions(config_path=config_path)


def main() -> None:
    app()
