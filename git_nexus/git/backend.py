"""Git capability interface.

The analyzer and the resolution engine only talk to a `GitBackend`. The
shell implementation lives in `git_nexus.git.repository`; tests plug in
fakes that implement the same protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from git_nexus.core.errors import GitError
from git_nexus.core.models import CommitInfo, HistorySummary
from git_nexus.core.result import Result

__all__ = [
    "ChangeKind",
    "Detached",
    "FetchOutcome",
    "GitBackend",
    "HeadState",
    "OnBranch",
    "StatusEntry",
    "Unborn",
]


# =============================================================================
# HEAD state
# =============================================================================


@dataclass(frozen=True, slots=True)
class OnBranch:
    """HEAD points at a branch with at least one commit."""

    name: str


@dataclass(frozen=True, slots=True)
class Detached:
    """HEAD points directly at a commit (full hash)."""

    commit: str


@dataclass(frozen=True, slots=True)
class Unborn:
    """HEAD points at a branch that has no commits yet."""

    name: str


type HeadState = OnBranch | Detached | Unborn


# =============================================================================
# Working tree entries
# =============================================================================


class ChangeKind(Enum):
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"
    UNTRACKED = "untracked"
    CONFLICTED = "conflicted"


# Unmerged XY pairs from git-status(1)
_CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

_KIND_BY_CODE = {
    "M": ChangeKind.MODIFIED,
    "A": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
    "C": ChangeKind.COPIED,
    "T": ChangeKind.TYPE_CHANGED,
}


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
        orig_path: Source path of a rename or copy
    """

    xy: str
    path: str
    orig_path: str | None = None

    @property
    def kind(self) -> ChangeKind:
        """Dominant change kind; the index side wins over the worktree side."""
        if self.xy == "??":
            return ChangeKind.UNTRACKED
        if self.xy in _CONFLICT_CODES:
            return ChangeKind.CONFLICTED
        for code in self.xy:
            kind = _KIND_BY_CODE.get(code)
            if kind is not None:
                return kind
        return ChangeKind.MODIFIED

    @property
    def is_untracked(self) -> bool:
        """True if file is untracked."""
        return self.xy == "??"

    @property
    def is_tracked_change(self) -> bool:
        """Staged or unstaged change to a tracked file (conflicts excluded)."""
        return self.kind not in (ChangeKind.UNTRACKED, ChangeKind.CONFLICTED)


class FetchOutcome(Enum):
    """Result of fetching the upstream and attempting a fast-forward."""

    APPLIED = "applied"
    UP_TO_DATE = "up_to_date"
    NEEDS_MERGE = "needs_merge"


# =============================================================================
# Backend protocol
# =============================================================================


class GitBackend(Protocol):
    """Operations the scanner and fixer need from one repository.

    Handles are not shared between threads; each worker opens its own.
    """

    path: Path

    # Queries

    def head_state(self) -> Result[HeadState, GitError]: ...

    def working_tree_status(
        self, include_untracked: bool = True
    ) -> Result[tuple[StatusEntry, ...], GitError]: ...

    def upstream_divergence(self) -> Result[tuple[int, int] | None, GitError]:
        """(ahead, behind) against the upstream, None when there is none."""
        ...

    def stash_count(self) -> Result[int, GitError]: ...

    def last_commit(self) -> Result[CommitInfo | None, GitError]: ...

    def history(self) -> Result[HistorySummary | None, GitError]:
        """Commit and author totals for HEAD, None on an unborn branch."""
        ...

    def hooks_dir_exists(self) -> bool: ...

    def hook_present(self, name: str) -> bool: ...

    # Mutations

    def stage_all(self) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit the index on top of HEAD, even when unchanged, and return the new hash.

        Fails on an unborn branch.
        """
        ...

    def stash_save(self, message: str) -> Result[str, GitError]:
        """Stash tracked and untracked changes and return the stash commit id."""
        ...

    def stash_pop(self) -> Result[None, GitError]: ...

    def fetch_and_fastforward(self) -> Result[FetchOutcome, GitError]: ...

    def create_branch(self, name: str) -> Result[None, GitError]: ...

    def hard_reset_and_clean(self) -> Result[None, GitError]: ...
