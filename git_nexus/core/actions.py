"""Remediation actions and their results.

`Action` is a closed union of small value types. Producers (the
suggestion engine, the CLI) build them; the resolution engine consumes
them with an exhaustive `match`.
"""

from __future__ import annotations

from dataclasses import dataclass

from .result import Err, Ok, Result

__all__ = [
    "ACTION_NAMES",
    "Action",
    "ActionResult",
    "CommitWip",
    "CreateBranch",
    "DiscardChanges",
    "Pull",
    "Push",
    "StageAll",
    "Stash",
    "StashPop",
    "Sync",
    "action_name",
    "describe",
    "git_command",
    "parse_action",
]

DEFAULT_COMMIT_MESSAGE = "WIP: Auto-commit by git-nexus"
DEFAULT_STASH_MESSAGE = "git-nexus auto-stash"


class _ActionMixin:
    __slots__ = ()

    def is_destructive(self) -> bool:
        """True if the effect cannot be undone through git (reset + clean)."""
        return isinstance(self, DiscardChanges)

    def description(self) -> str:
        return describe(self)  # type: ignore[arg-type]

    def git_command(self) -> str:
        return git_command(self)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class StageAll(_ActionMixin):
    """Stage every change in the working tree."""


@dataclass(frozen=True, slots=True)
class CommitWip(_ActionMixin):
    """Commit the index on top of HEAD."""

    message: str = DEFAULT_COMMIT_MESSAGE


@dataclass(frozen=True, slots=True)
class Stash(_ActionMixin):
    """Stash tracked and untracked changes."""

    message: str | None = None


@dataclass(frozen=True, slots=True)
class Pull(_ActionMixin):
    """Fetch the upstream and fast-forward."""


@dataclass(frozen=True, slots=True)
class Push(_ActionMixin):
    """Publish local commits (reported only; see resolution)."""


@dataclass(frozen=True, slots=True)
class CreateBranch(_ActionMixin):
    """Create a branch at HEAD and switch to it."""

    name: str


@dataclass(frozen=True, slots=True)
class DiscardChanges(_ActionMixin):
    """Hard reset to HEAD and delete untracked files."""


@dataclass(frozen=True, slots=True)
class StashPop(_ActionMixin):
    """Apply and drop the most recent stash."""


@dataclass(frozen=True, slots=True)
class Sync(_ActionMixin):
    """Pull, then push."""


Action = StageAll | CommitWip | Stash | Pull | Push | CreateBranch | DiscardChanges | StashPop | Sync

# CLI names, in menu order
ACTION_NAMES: tuple[str, ...] = (
    "stage",
    "commit",
    "stash",
    "pull",
    "push",
    "branch",
    "discard",
    "pop",
    "sync",
)


def action_name(action: Action) -> str:
    """Stable short name, shared by the CLI and action matching."""
    match action:
        case StageAll():
            return "stage"
        case CommitWip():
            return "commit"
        case Stash():
            return "stash"
        case Pull():
            return "pull"
        case Push():
            return "push"
        case CreateBranch():
            return "branch"
        case DiscardChanges():
            return "discard"
        case StashPop():
            return "pop"
        case Sync():
            return "sync"


def describe(action: Action) -> str:
    """Human-readable description."""
    match action:
        case StageAll():
            return "Stage all changes"
        case CommitWip(message=message):
            return f"Create commit: {message}"
        case Stash(message=None):
            return "Stash changes"
        case Stash(message=message):
            return f"Stash changes: {message}"
        case Pull():
            return "Pull latest changes from remote"
        case Push():
            return "Push local commits to remote"
        case CreateBranch(name=name):
            return f"Create branch: {name}"
        case DiscardChanges():
            return "Discard all uncommitted changes (DESTRUCTIVE)"
        case StashPop():
            return "Pop most recent stash"
        case Sync():
            return "Sync with remote (pull + push)"


def git_command(action: Action) -> str:
    """Equivalent git command line, for display and dry runs."""
    match action:
        case StageAll():
            return "git add ."
        case CommitWip(message=message):
            return f'git commit -m "{message}"'
        case Stash(message=None):
            return "git stash"
        case Stash(message=message):
            return f'git stash push -m "{message}"'
        case Pull():
            return "git pull"
        case Push():
            return "git push"
        case CreateBranch(name=name):
            return f"git checkout -b {name}"
        case DiscardChanges():
            return "git reset --hard && git clean -fd"
        case StashPop():
            return "git stash pop"
        case Sync():
            return "git pull && git push"


def parse_action(
    name: str,
    *,
    message: str | None = None,
    branch: str | None = None,
) -> Result[Action, str]:
    """Build an Action from its CLI name.

    Args:
        name: One of ACTION_NAMES
        message: Commit or stash message
        branch: Branch name, required for "branch"

    Returns:
        Ok(Action), or Err(reason) for an unknown name or missing argument
    """
    match name.strip().lower():
        case "stage":
            return Ok(StageAll())
        case "commit":
            return Ok(CommitWip(message or DEFAULT_COMMIT_MESSAGE))
        case "stash":
            return Ok(Stash(message or DEFAULT_STASH_MESSAGE))
        case "pull":
            return Ok(Pull())
        case "push":
            return Ok(Push())
        case "branch":
            if not branch:
                return Err("action 'branch' needs a branch name (--branch)")
            return Ok(CreateBranch(branch))
        case "discard":
            return Ok(DiscardChanges())
        case "pop":
            return Ok(StashPop())
        case "sync":
            return Ok(Sync())
        case other:
            return Err(f"unknown action '{other}' (expected one of: {', '.join(ACTION_NAMES)})")


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of applying one Action to one repository.

    Attributes:
        success: Whether the action achieved its effect
        message: One-line outcome
        details: Extra context (commit hash, command text, warnings)
    """

    success: bool
    message: str
    details: str | None = None

    @classmethod
    def ok(cls, message: str, details: str | None = None) -> ActionResult:
        return cls(success=True, message=message, details=details)

    @classmethod
    def failure(cls, message: str, details: str | None = None) -> ActionResult:
        return cls(success=False, message=message, details=details)
