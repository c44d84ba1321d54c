"""Fix command - apply one remediation action across repositories."""

from __future__ import annotations

from pathlib import Path

import typer

from git_nexus.cli.commands._helpers import (
    display_path,
    exit_on_error,
    exit_with_code,
    resolve_root,
)
from git_nexus.cli.context import CLIContext, build_context
from git_nexus.core.actions import ACTION_NAMES, Action, StageAll, action_name, parse_action
from git_nexus.core.errors import ErrorCode
from git_nexus.core.models import RepoStatus
from git_nexus.core.result import Err, Ok
from git_nexus.output.console import Style
from git_nexus.output.errors import error_exit_code, print_error
from git_nexus.services.resolution import BatchResult, resolve_batch
from git_nexus.services.scan import ScanOptions, scan_workspace
from git_nexus.services.suggestions import suggest


def _suggested_action(status: RepoStatus, name: str) -> Action | None:
    """First suggestion for `status` whose action has this CLI name."""
    for suggestion in suggest(status):
        if action_name(suggestion.action) == name:
            return suggestion.action
    return None


def _auto_targets(
    cli: CLIContext,
    name: str,
    root: Path,
    override: Action | None,
    workers: int | None,
) -> list[tuple[Path, Action]]:
    options = ScanOptions(
        root=root,
        max_depth=cli.config.scan_depth,
        ignore=cli.config.ignore_rules(root),
        verbose=True,
        max_workers=workers,
    )
    match scan_workspace(options):
        case Err(e):
            print_error(e, cli.console)
            exit_with_code(error_exit_code(e))
        case Ok(statuses):
            pass

    pairs: list[tuple[Path, Action]] = []
    for status in statuses:
        suggested = _suggested_action(status, name)
        if suggested is not None:
            pairs.append((status.path, override if override is not None else suggested))
    return pairs


def _confirm_destructive(cli: CLIContext, pairs: list[tuple[Path, Action]], root: Path) -> None:
    destructive = [path for path, action in pairs if action.is_destructive()]
    if not destructive:
        return

    cli.console.warning("This permanently removes uncommitted changes in:")
    for path in destructive:
        cli.console.print(f"  {display_path(path, root)}", Style.DIM)
    if not typer.confirm("Continue?", default=False):
        cli.console.print("Aborted.", Style.DIM)
        exit_with_code(int(ErrorCode.USER_ERROR))


def _print_result(cli: CLIContext, item: BatchResult, root: Path) -> None:
    where = display_path(item.path, root)
    if item.result.success:
        cli.console.success(f"{where}: {item.result.message}")
    else:
        cli.console.error(f"{where}: {item.result.message}")
    if item.result.details:
        cli.console.print(f"    {item.result.details}", Style.DIM)


def fix(
    ctx: typer.Context,
    action: str = typer.Argument(..., help=f"Action to apply: {', '.join(ACTION_NAMES)}"),
    paths: list[Path] | None = typer.Argument(
        None, help="Repositories to fix (default: every repository under --root that needs it)"
    ),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Scan root when no paths are given"),
    message: str | None = typer.Option(None, "--message", "-m", help="Commit or stash message"),
    branch: str | None = typer.Option(None, "--branch", "-b", help="Branch name for 'branch'"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done"),
    stage: bool = typer.Option(
        False, "--stage", help="Stage all changes before committing (commit only)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation for destructive actions"),
    workers: int | None = typer.Option(None, "--workers", min=1, help="Parallel workers"),
) -> None:
    """Apply one action to several repositories in parallel."""
    cli = build_context(ctx)
    name = action.strip().lower()
    if name not in ACTION_NAMES:
        cli.console.error(f"unknown action '{action}'")
        cli.console.print(f"Available: {', '.join(ACTION_NAMES)}", Style.DIM)
        exit_with_code(int(ErrorCode.USER_ERROR))
    if stage and name != "commit":
        cli.console.error("--stage only applies to the 'commit' action")
        exit_with_code(int(ErrorCode.USER_ERROR))

    scan_root = resolve_root(root)
    pool_size = workers if workers is not None else cli.config.max_workers

    if paths:
        parsed = exit_on_error(parse_action(name, message=message, branch=branch), cli)
        pairs = [(resolve_root(p), parsed) for p in paths]
    else:
        override: Action | None = None
        if message is not None or branch is not None:
            override = exit_on_error(parse_action(name, message=message, branch=branch), cli)
        pairs = _auto_targets(cli, name, scan_root, override, pool_size)

    if not pairs:
        cli.console.print("Nothing to fix.", Style.DIM)
        return

    if dry_run:
        cli.console.header("DRY-RUN")
    elif not yes:
        _confirm_destructive(cli, pairs, scan_root)

    batch: list[BatchResult] = []
    if stage:
        staged = resolve_batch(
            [(path, StageAll()) for path, _ in pairs], dry_run=dry_run, max_workers=pool_size
        )
        # A repository whose staging failed is reported once and not committed
        unstaged = {item.path for item in staged if not item.result.success}
        batch += [item for item in staged if item.path in unstaged]
        pairs = [pair for pair in pairs if pair[0] not in unstaged]

    batch += resolve_batch(pairs, dry_run=dry_run, max_workers=pool_size)
    results = sorted(batch, key=lambda r: r.path)
    for item in results:
        _print_result(cli, item, scan_root)

    failed = sum(1 for item in results if not item.result.success)
    cli.console.newline()
    cli.console.print(
        f"{len(results) - failed} succeeded, {failed} failed",
        Style.ERROR if failed else Style.BOLD,
    )
    if failed:
        exit_with_code(int(ErrorCode.ACTION_FAILED))
