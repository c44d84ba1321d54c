"""Status analysis: one repository path in, one RepoStatus out."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from git_nexus.core.errors import RepositoryUnavailable
from git_nexus.core.models import (
    DETACHED_PREFIX,
    HOOK_NAMES,
    UNBORN_SUFFIX,
    RepoStatus,
    VerboseDetails,
)
from git_nexus.core.result import Err, Ok, Result
from git_nexus.git.backend import Detached, GitBackend, OnBranch, StatusEntry, Unborn
from git_nexus.git.repository import open_repository

from .pool import run_parallel

__all__ = ["Opener", "analyze", "analyze_all", "branch_label"]

type Opener = Callable[[Path], Result[GitBackend, RepositoryUnavailable]]

logger = logging.getLogger(__name__)


def branch_label(repo: GitBackend) -> str | None:
    """Encode HEAD as a display string, None when it cannot be resolved."""
    match repo.head_state():
        case Ok(OnBranch(name)):
            return name
        case Ok(Detached(commit)):
            return f"{DETACHED_PREFIX}{commit[:7]}"
        case Ok(Unborn(name)):
            return f"{name} {UNBORN_SUFFIX}"
        case Err(e):
            logger.debug(
                "HEAD unresolved",
                extra={"event": "status.head_unresolved", "repo": str(repo.path), "error": e.message},
            )
            return None


def analyze(
    path: Path,
    *,
    verbose: bool = False,
    want_hooks: bool = False,
    opener: Opener = open_repository,
) -> RepoStatus | None:
    """Build the status snapshot for one repository.

    Args:
        path: Repository working tree root
        verbose: Collect stash count, file counts and the last commit
        want_hooks: Collect executable hooks
        opener: Backend factory

    Returns:
        RepoStatus, or None when the repository cannot be opened or its
        working tree status cannot be read
    """
    match opener(path):
        case Err(e):
            logger.info(
                "skipping unavailable repository",
                extra={"event": "status.unavailable", "repo": str(path), "error": e.message},
            )
            return None
        case Ok(repo):
            pass

    match repo.working_tree_status(include_untracked=True):
        case Err(e):
            logger.info(
                "skipping repository with unreadable status",
                extra={"event": "status.unreadable", "repo": str(path), "error": e.message},
            )
            return None
        case Ok(entries):
            pass

    branch = branch_label(repo)
    ahead, behind = _divergence(repo, branch)

    details = _verbose_details(repo, entries) if verbose else None
    hooks = _hooks(repo) if want_hooks else None

    return RepoStatus(
        path=path,
        branch=branch,
        is_clean=len(entries) == 0,
        ahead=ahead,
        behind=behind,
        details=details,
        hooks=hooks,
    )


def analyze_all(
    paths: Iterable[Path],
    *,
    verbose: bool = False,
    want_hooks: bool = False,
    max_workers: int | None = None,
    opener: Opener = open_repository,
) -> list[RepoStatus]:
    """Analyze repositories in parallel, dropping the ones that fail.

    Each worker opens its own backend handle. Order is unspecified.
    """

    def work(path: Path) -> RepoStatus | None:
        return analyze(path, verbose=verbose, want_hooks=want_hooks, opener=opener)

    results = run_parallel(paths, work, max_workers=max_workers)
    return [status for status in results if status is not None]


def _divergence(repo: GitBackend, branch: str | None) -> tuple[int, int]:
    if branch is None or branch.startswith(DETACHED_PREFIX) or UNBORN_SUFFIX in branch:
        return (0, 0)
    match repo.upstream_divergence():
        case Ok(None):
            return (0, 0)
        case Ok((ahead, behind)):
            return (ahead, behind)
        case Err(e):
            logger.debug(
                "divergence unavailable",
                extra={"event": "status.divergence_failed", "repo": str(repo.path), "error": e.message},
            )
            return (0, 0)


def _verbose_details(repo: GitBackend, entries: tuple[StatusEntry, ...]) -> VerboseDetails:
    modified = sum(1 for entry in entries if entry.is_tracked_change)
    untracked = sum(1 for entry in entries if entry.is_untracked)

    match repo.stash_count():
        case Ok(count):
            stash_count = count
        case Err(_):
            stash_count = 0

    match repo.last_commit():
        case Ok(commit):
            last_commit = commit
        case Err(_):
            last_commit = None

    return VerboseDetails(
        stash_count=stash_count,
        modified_count=modified,
        untracked_count=untracked,
        last_commit=last_commit,
    )


def _hooks(repo: GitBackend) -> frozenset[str] | None:
    if not repo.hooks_dir_exists():
        return None
    return frozenset(name for name in HOOK_NAMES if repo.hook_present(name))
