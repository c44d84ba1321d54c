"""Resolution engine: apply remediation actions to repositories.

`apply_action` opens the repository and runs one action against it.
`resolve` wraps it so that nothing escapes as an exception, and the batch
helpers fan `resolve` out over the worker pool.

The engine never prompts. Callers decide whether a destructive action may
run (see `Action.is_destructive`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from git_nexus.core.actions import (
    DEFAULT_STASH_MESSAGE,
    Action,
    ActionResult,
    CommitWip,
    CreateBranch,
    DiscardChanges,
    Pull,
    Push,
    StageAll,
    Stash,
    StashPop,
    Sync,
    action_name,
)
from git_nexus.core.errors import GitError, RepositoryUnavailable
from git_nexus.core.result import Err, Ok, Result
from git_nexus.git.backend import FetchOutcome, GitBackend, OnBranch
from git_nexus.git.repository import open_repository

from .pool import run_parallel
from .status import Opener

__all__ = [
    "BatchResult",
    "apply_action",
    "resolve",
    "resolve_all",
    "resolve_batch",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcome of one (repository, action) pair in a batch."""

    path: Path
    action: Action
    result: ActionResult

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "action": action_name(self.action),
            "success": self.result.success,
            "message": self.result.message,
            "details": self.result.details,
        }


def apply_action(
    path: Path,
    action: Action,
    *,
    dry_run: bool = False,
    opener: Opener = open_repository,
) -> Result[ActionResult, RepositoryUnavailable]:
    """Apply one action to the repository at `path`.

    The repository is opened even in dry-run mode so that an invalid path
    is reported the same way in both modes.

    Returns:
        Ok(ActionResult) once the repository is open (git failures are
        failure results), Err(RepositoryUnavailable) otherwise
    """
    match opener(path):
        case Err(e):
            return Err(e)
        case Ok(repo):
            pass

    if dry_run:
        return Ok(
            ActionResult.ok(
                f"Would execute: {action.description()}",
                f"Command: {action.git_command()}",
            )
        )

    logger.info(
        "applying action",
        extra={"event": "resolution.apply", "repo": str(path), "action": action_name(action)},
    )
    return Ok(_dispatch(repo, action))


def resolve(
    path: Path,
    action: Action,
    *,
    dry_run: bool = False,
    opener: Opener = open_repository,
) -> ActionResult:
    """Like `apply_action`, but every outcome is an ActionResult.

    Never raises: an unavailable repository or an unexpected exception
    becomes a failure result.
    """
    try:
        match apply_action(path, action, dry_run=dry_run, opener=opener):
            case Ok(result):
                return result
            case Err(e):
                return ActionResult.failure(e.message)
    except Exception as e:
        logger.exception(
            "action crashed",
            extra={"event": "resolution.crashed", "repo": str(path), "action": action_name(action)},
        )
        return ActionResult.failure(f"Unexpected error: {e}")


def resolve_batch(
    pairs: Iterable[tuple[Path, Action]],
    *,
    dry_run: bool = False,
    max_workers: int | None = None,
    opener: Opener = open_repository,
) -> list[BatchResult]:
    """Resolve every (path, action) pair independently on the worker pool.

    Results come back in completion order; a failing pair never affects
    the others.
    """

    def work(pair: tuple[Path, Action]) -> BatchResult:
        path, action = pair
        return BatchResult(
            path=path,
            action=action,
            result=resolve(path, action, dry_run=dry_run, opener=opener),
        )

    return run_parallel(pairs, work, max_workers=max_workers)


def resolve_all(
    paths: Iterable[Path],
    action: Action,
    *,
    dry_run: bool = False,
    max_workers: int | None = None,
    opener: Opener = open_repository,
) -> list[BatchResult]:
    """Apply the same action to every repository."""
    return resolve_batch(
        ((path, action) for path in paths),
        dry_run=dry_run,
        max_workers=max_workers,
        opener=opener,
    )


# =============================================================================
# Action implementations
# =============================================================================


def _dispatch(repo: GitBackend, action: Action) -> ActionResult:
    match action:
        case StageAll():
            return _stage_all(repo)
        case CommitWip(message=message):
            return _commit(repo, message)
        case Stash(message=message):
            return _stash(repo, message or DEFAULT_STASH_MESSAGE)
        case Pull():
            return _pull(repo)
        case Push():
            return _push(repo)
        case CreateBranch(name=name):
            return _create_branch(repo, name)
        case DiscardChanges():
            return _discard(repo)
        case StashPop():
            return _stash_pop(repo)
        case Sync():
            return _sync(repo)


def _failure(error: GitError) -> ActionResult:
    return ActionResult.failure(error.message)


def _stage_all(repo: GitBackend) -> ActionResult:
    match repo.stage_all():
        case Ok(_):
            return ActionResult.ok("Staged all changes")
        case Err(e):
            return _failure(e)


def _commit(repo: GitBackend, message: str) -> ActionResult:
    match repo.commit(message):
        case Ok(commit):
            return ActionResult.ok(f"Created commit: {message}", f"Commit: {commit[:7]}")
        case Err(e):
            return _failure(e)


def _stash(repo: GitBackend, message: str) -> ActionResult:
    match repo.stash_save(message):
        case Ok(stash_id):
            return ActionResult.ok("Stashed changes", f"Stash: {stash_id[:7]}")
        case Err(e):
            return _failure(e)


def _pull(repo: GitBackend) -> ActionResult:
    match repo.head_state():
        case Ok(OnBranch()):
            pass
        case Ok(_):
            return ActionResult.failure("Cannot pull: not on a branch")
        case Err(e):
            return _failure(e)

    match repo.fetch_and_fastforward():
        case Ok(FetchOutcome.UP_TO_DATE):
            return ActionResult.ok("Already up to date")
        case Ok(FetchOutcome.APPLIED):
            return ActionResult.ok("Pulled and fast-forwarded")
        case Ok(FetchOutcome.NEEDS_MERGE):
            return ActionResult.failure("Cannot pull: merge required (not implemented)")
        case Err(e):
            return _failure(e)


def _push(repo: GitBackend) -> ActionResult:
    """Explain why the push was not performed; pushing is left to `git push`."""
    match repo.head_state():
        case Ok(OnBranch()):
            pass
        case Ok(_):
            return ActionResult.failure("Cannot push: not on a branch")
        case Err(e):
            return _failure(e)

    match repo.upstream_divergence():
        case Ok(None):
            return ActionResult.failure("No upstream branch configured")
        case Ok(_):
            return ActionResult.failure(
                "Push requires authentication - please use 'git push' manually"
            )
        case Err(e):
            return _failure(e)


def _create_branch(repo: GitBackend, name: str) -> ActionResult:
    match repo.create_branch(name):
        case Ok(_):
            return ActionResult.ok(f"Created and switched to branch '{name}'")
        case Err(e):
            return _failure(e)


def _discard(repo: GitBackend) -> ActionResult:
    match repo.hard_reset_and_clean():
        case Ok(_):
            return ActionResult.ok("Discarded all changes", "This action cannot be undone!")
        case Err(e):
            return _failure(e)


def _stash_pop(repo: GitBackend) -> ActionResult:
    match repo.stash_pop():
        case Ok(_):
            return ActionResult.ok("Popped stash")
        case Err(e):
            return _failure(e)


def _sync(repo: GitBackend) -> ActionResult:
    pulled = _pull(repo)
    if not pulled.success:
        return pulled

    pushed = _push(repo)
    if "up to date" in pulled.message and pushed.success:
        return ActionResult.ok("Synced with remote")
    return ActionResult.ok("Pulled changes", "Push requires manual authentication")
