"""Scan command - find repositories and report their status."""

from __future__ import annotations

from pathlib import Path

import typer

from git_nexus.cli.commands._helpers import display_path, exit_with_code, resolve_root
from git_nexus.cli.context import CLIContext, build_context
from git_nexus.core.ignore import IgnoreRuleSet
from git_nexus.core.models import RepoStatus
from git_nexus.core.result import Err, Ok
from git_nexus.output.console import Cell, Style
from git_nexus.output.errors import error_exit_code, print_error
from git_nexus.services.health import average, score
from git_nexus.services.scan import (
    ScanOptions,
    SortKey,
    StatusFilter,
    filter_statuses,
    scan_workspace,
    sort_statuses,
)
from git_nexus.services.stats import RepoStats, collect_all, summarize_stats
from git_nexus.services.suggestions import IssueSummary, suggest, summarize

# Suggestions shown per repository in the text report
_TOP_SUGGESTIONS = 2
# Languages listed per repository and for the workspace
_TOP_REPO_LANGUAGES = 3
_TOP_WORKSPACE_LANGUAGES = 5


def _status_row(
    status: RepoStatus,
    root: Path,
    *,
    show_branch: bool,
    verbose: bool,
    hooks: bool,
    health: bool,
) -> list[Cell]:
    row: list[Cell] = [(display_path(status.path, root), "bold")]
    if show_branch:
        row.append((status.branch or "?", "blue"))
    row.append(("CLEAN", "green bold") if status.is_clean else ("DIRTY", "red bold"))

    sync: list[str] = []
    if status.ahead:
        sync.append(f"+{status.ahead}")
    if status.behind:
        sync.append(f"-{status.behind}")
    row.append((" ".join(sync), "yellow") if sync else "")

    if verbose:
        row.append(_count(status.stash_count))
        row.append(_count(status.modified_count))
        row.append(_count(status.untracked_count))
        commit = status.last_commit
        row.append((f"{commit.hash} {commit.author}: {commit.message}", "dim") if commit else "")
    if hooks:
        row.append(", ".join(sorted(status.hooks)) if status.hooks else "")
    if health:
        s = score(status)
        row.append((f"{s.total}% {s.label}", s.style))
    return row


def _count(value: int | None) -> str:
    return str(value) if value else ""


def _columns(*, show_branch: bool, verbose: bool, hooks: bool, health: bool) -> list[str]:
    columns = ["Repository"]
    if show_branch:
        columns.append("Branch")
    columns += ["Status", "Sync"]
    if verbose:
        columns += ["Stash", "Modified", "Untracked", "Last commit"]
    if hooks:
        columns.append("Hooks")
    if health:
        columns.append("Health")
    return columns


def _print_summary(ctx: CLIContext, summary: IssueSummary) -> None:
    console = ctx.console
    console.header("Workspace summary")
    console.print(f"  {summary.total_repos} total repositories")
    if summary.clean_repos:
        console.print(f"  {summary.clean_repos} clean", Style.SUCCESS)
    if summary.dirty_repos:
        console.print(f"  {summary.dirty_repos} with uncommitted changes", Style.WARNING)
    if summary.ahead_repos:
        console.print(
            f"  {summary.ahead_repos} ahead of remote ({summary.total_unpushed} commits)",
            Style.WARNING,
        )
    if summary.behind_repos:
        console.print(
            f"  {summary.behind_repos} behind remote ({summary.total_unpulled} commits)",
            Style.ERROR,
        )
    if summary.detached_heads:
        console.print(f"  {summary.detached_heads} detached HEAD state", Style.ERROR)
    if summary.repos_with_stashes:
        console.print(f"  {summary.repos_with_stashes} with stashed changes", Style.INFO)


def _print_suggestions(ctx: CLIContext, statuses: list[RepoStatus], root: Path) -> None:
    console = ctx.console
    console.header("Suggestions")
    any_printed = False
    for status in statuses:
        suggestions = suggest(status)[:_TOP_SUGGESTIONS]
        if not suggestions:
            continue
        any_printed = True
        console.print(display_path(status.path, root), Style.BOLD)
        for suggestion in suggestions:
            console.print(f"  [{suggestion.priority.name.lower()}] {suggestion.title}")
            console.print(f"    {suggestion.description}", Style.DIM)
            console.print(f"    -> {suggestion.action.git_command()}", Style.INFO)
    if not any_printed:
        console.print("Nothing to do", Style.DIM)


def _print_stats(ctx: CLIContext, stats: list[RepoStats], root: Path) -> None:
    console = ctx.console
    console.header("Repository statistics")
    for item in stats:
        console.print(display_path(item.path, root), Style.BOLD)
        console.print(f"  {item.lines_of_code:,} lines across {item.file_count:,} files")
        console.print(
            f"  {item.commit_count:,} commits by {item.contributor_count:,} contributors"
        )
        console.print(f"  {item.age_days:,} days old", Style.DIM)
        if item.languages:
            top = ", ".join(
                f"{ext} ({lines:,})" for ext, lines in item.languages[:_TOP_REPO_LANGUAGES]
            )
            console.print(f"  {top}", Style.INFO)

    totals = summarize_stats(stats)
    console.header("Workspace statistics")
    console.print(
        f"  {totals.lines_of_code:,} total lines of code across {totals.file_count:,} files"
    )
    console.print(f"  {totals.commit_count:,} total commits")
    if totals.languages:
        console.print("  Top languages:")
        for rank, (ext, lines) in enumerate(totals.languages[:_TOP_WORKSPACE_LANGUAGES], 1):
            console.print(f"    {rank}. {ext} - {lines:,} lines ({totals.share(lines):.1f}%)")


def _json_payload(
    statuses: list[RepoStatus],
    *,
    with_health: bool,
    with_suggestions: bool,
    stats: dict[Path, RepoStats] | None = None,
) -> list[dict[str, object]]:
    payload: list[dict[str, object]] = []
    for status in statuses:
        item = status.to_dict()
        if with_health:
            item["health"] = score(status).to_dict()
        if with_suggestions:
            item["suggestions"] = [
                {
                    "title": s.title,
                    "description": s.description,
                    "priority": s.priority.name.lower(),
                    "command": s.action.git_command(),
                    "reason": s.reason,
                }
                for s in suggest(status)
            ]
        if stats is not None and status.path in stats:
            item["stats"] = stats[status.path].to_dict()
        payload.append(item)
    return payload


def scan(
    ctx: typer.Context,
    root: Path = typer.Argument(Path("."), help="Root directory to scan for repositories"),
    depth: int | None = typer.Option(
        None, "--depth", "-d", min=1, help="Maximum directory traversal depth"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show stashes, file counts, last commit"),
    hooks: bool = typer.Option(False, "--hooks", help="Show executable git hooks"),
    suggest_: bool = typer.Option(False, "--suggest", help="Show suggestions for fixing issues"),
    health: bool = typer.Option(False, "--health", help="Show health scores"),
    stats_: bool = typer.Option(
        False, "--stats", help="Show lines of code, commit counts and repository age"
    ),
    json_: bool = typer.Option(False, "--json", help="Output in JSON format"),
    filter_: StatusFilter | None = typer.Option(
        None, "--filter", "-f", help="Only show repositories in this state"
    ),
    sort: SortKey = typer.Option(SortKey.PATH, "--sort", "-s", help="Sort repositories by field"),
    workers: int | None = typer.Option(None, "--workers", min=1, help="Parallel workers"),
) -> None:
    """Scan a directory tree for git repositories and report their status."""
    cli = build_context(ctx)
    config = cli.config
    scan_root = resolve_root(root)

    verbose = verbose or config.display.default_verbose
    hooks = hooks or config.display.show_hooks

    options = ScanOptions(
        root=scan_root,
        max_depth=depth if depth is not None else config.scan_depth,
        ignore=config.ignore_rules(scan_root),
        # Dirty-file counts drive the suggestions and the cleanliness score
        verbose=verbose or suggest_ or health,
        want_hooks=hooks,
        max_workers=workers if workers is not None else config.max_workers,
    )

    match scan_workspace(options):
        case Err(e):
            print_error(e, cli.console)
            exit_with_code(error_exit_code(e))
        case Ok(found):
            statuses = found

    if filter_ is not None:
        statuses = filter_statuses(statuses, filter_)
    statuses = sort_statuses(statuses, sort)

    repo_stats: dict[Path, RepoStats] | None = None
    if stats_:
        collected = collect_all(
            [status.path for status in statuses],
            ignore=IgnoreRuleSet.from_patterns(config.ignore_dirs),
            use_gitignore=config.use_gitignore,
            max_workers=options.max_workers,
        )
        repo_stats = {item.path: item for item in collected}

    if json_:
        cli.console.json(
            _json_payload(
                statuses, with_health=health, with_suggestions=suggest_, stats=repo_stats
            )
        )
        return

    if not statuses:
        cli.console.print("No git repositories found.", Style.WARNING)
        return

    cli.console.success(f"{len(statuses)} repositories found")

    flags = {
        "show_branch": config.display.show_branch,
        "verbose": verbose,
        "hooks": hooks,
        "health": health,
    }
    cli.console.table(
        _columns(**flags),
        [_status_row(status, scan_root, **flags) for status in statuses],
    )

    if health:
        overall = average(statuses)
        if overall is not None:
            cli.console.newline()
            cli.console.print(
                f"Workspace health: {overall.total}% ({overall.label}) "
                f"cleanliness {overall.cleanliness}/40, sync {overall.sync}/40, "
                f"branch {overall.branch}/20",
                Style.BOLD,
            )

    if repo_stats is not None:
        _print_stats(cli, [repo_stats[s.path] for s in statuses if s.path in repo_stats], scan_root)

    if suggest_:
        summary = summarize(statuses)
        _print_summary(cli, summary)
        _print_suggestions(cli, statuses, scan_root)
        if summary.has_issues:
            cli.console.newline()
            cli.console.info("Run 'git-nexus fix <action>' to resolve issues in bulk")
