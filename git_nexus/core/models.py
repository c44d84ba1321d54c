"""Repository status snapshot produced by one scan pass."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "DETACHED_PREFIX",
    "HOOK_NAMES",
    "UNBORN_SUFFIX",
    "CommitInfo",
    "HistorySummary",
    "RepoStatus",
    "VerboseDetails",
]

DETACHED_PREFIX = "detached@"
UNBORN_SUFFIX = "(no commits)"

HOOK_NAMES: tuple[str, ...] = (
    "pre-commit",
    "pre-push",
    "post-commit",
    "post-merge",
    "prepare-commit-msg",
    "commit-msg",
)


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """Summary of the most recent commit.

    Attributes:
        hash: Abbreviated commit hash (7 characters)
        author: Author name
        message: First line of the commit message
        timestamp: Local time formatted as YYYY-MM-DD HH:MM:SS
    """

    hash: str
    author: str
    message: str
    timestamp: str


@dataclass(frozen=True, slots=True)
class HistorySummary:
    """Aggregates over the commits reachable from HEAD.

    Attributes:
        commit_count: Number of commits
        contributor_count: Distinct author email addresses
        first_commit_epoch: Author time of the oldest commit, in seconds
    """

    commit_count: int
    contributor_count: int
    first_commit_epoch: int


@dataclass(frozen=True, slots=True)
class VerboseDetails:
    """Fields collected only in verbose mode, always together.

    Attributes:
        stash_count: Number of stash entries
        modified_count: Files with tracked changes, staged or unstaged
        untracked_count: New files not yet staged
        last_commit: Most recent commit, None when the branch has no commits
    """

    stash_count: int
    modified_count: int
    untracked_count: int
    last_commit: CommitInfo | None


@dataclass(frozen=True, slots=True)
class RepoStatus:
    """Normalized status of one repository.

    `branch` encodes three states: a plain branch name, `detached@<hash>`
    for a detached HEAD, and `<name> (no commits)` for an unborn branch.
    It is None when HEAD cannot be resolved at all. `ahead` and `behind`
    are both zero unless the repository is on a named branch with an
    upstream.

    Attributes:
        path: Absolute repository root
        branch: Encoded HEAD state, see above
        is_clean: No staged, unstaged or untracked changes
        ahead: Commits on HEAD not on upstream
        behind: Commits on upstream not on HEAD
        details: Verbose-only counters, None outside verbose mode
        hooks: Executable hooks found, None when not requested
    """

    path: Path
    branch: str | None
    is_clean: bool
    ahead: int = 0
    behind: int = 0
    details: VerboseDetails | None = None
    hooks: frozenset[str] | None = None

    def __post_init__(self) -> None:
        if self.ahead < 0 or self.behind < 0:
            raise ValueError("ahead/behind must be non-negative")

    @property
    def is_detached(self) -> bool:
        return self.branch is not None and self.branch.startswith(DETACHED_PREFIX)

    @property
    def is_unborn(self) -> bool:
        return self.branch is not None and UNBORN_SUFFIX in self.branch

    @property
    def detached_hash(self) -> str | None:
        if not self.is_detached:
            return None
        assert self.branch is not None
        return self.branch.removeprefix(DETACHED_PREFIX)

    @property
    def is_diverged(self) -> bool:
        return self.ahead > 0 and self.behind > 0

    @property
    def has_issues(self) -> bool:
        """Dirty, or out of sync with upstream."""
        return not self.is_clean or self.ahead > 0 or self.behind > 0

    @property
    def stash_count(self) -> int | None:
        return self.details.stash_count if self.details else None

    @property
    def modified_count(self) -> int | None:
        return self.details.modified_count if self.details else None

    @property
    def untracked_count(self) -> int | None:
        return self.details.untracked_count if self.details else None

    @property
    def last_commit(self) -> CommitInfo | None:
        return self.details.last_commit if self.details else None

    def to_dict(self) -> dict[str, object]:
        """JSON-ready mapping; absent optional groups are omitted."""
        data: dict[str, object] = {
            "path": str(self.path),
            "is_clean": self.is_clean,
            "ahead": self.ahead,
            "behind": self.behind,
            "branch": self.branch,
        }
        if self.details is not None:
            data["stash_count"] = self.details.stash_count
            data["modified_count"] = self.details.modified_count
            data["untracked_count"] = self.details.untracked_count
            commit = self.details.last_commit
            if commit is not None:
                data["last_commit"] = {
                    "message": commit.message,
                    "author": commit.author,
                    "timestamp": commit.timestamp,
                    "hash": commit.hash,
                }
        if self.hooks is not None:
            data["hooks"] = [name for name in HOOK_NAMES if name in self.hooks]
        return data
