"""Remediation suggestions derived from a repository status.

Rules are independent; every rule that applies contributes. The result
is ordered by descending priority, keeping rule order within a priority.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from git_nexus.core.actions import (
    Action,
    CommitWip,
    CreateBranch,
    DiscardChanges,
    Pull,
    Push,
    Stash,
    StashPop,
    Sync,
)
from git_nexus.core.models import RepoStatus

__all__ = [
    "IssueSummary",
    "Priority",
    "Suggestion",
    "suggest",
    "summarize",
]

AUTO_COMMIT_MESSAGE = "WIP: Auto-commit by git-nexus"
AUTO_STASH_MESSAGE = "git-nexus auto-stash"
PRE_PULL_STASH_MESSAGE = "Before pull"


class Priority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def style(self) -> str:
        """Rich style for the priority marker."""
        return {
            Priority.CRITICAL: "bold red",
            Priority.HIGH: "bold yellow",
            Priority.MEDIUM: "blue",
            Priority.LOW: "dim",
        }[self]


@dataclass(frozen=True, slots=True)
class Suggestion:
    """One recommended action.

    Attributes:
        title: Short imperative title
        description: What was observed
        action: The Action that would resolve it
        priority: Urgency
        reason: Why it matters
    """

    title: str
    description: str
    action: Action
    priority: Priority
    reason: str


def suggest(status: RepoStatus) -> list[Suggestion]:
    """All suggestions for `status`, most urgent first. Empty means nothing to do."""
    suggestions: list[Suggestion] = []

    if not status.is_clean:
        suggestions.extend(_dirty(status))
    if status.ahead > 0:
        suggestions.append(_push(status))
    if status.behind > 0:
        suggestions.extend(_behind(status))
    if status.is_detached:
        suggestions.append(_detached(status))
    stash_count = status.stash_count
    if stash_count:
        suggestions.append(_pop_stash(stash_count))

    return sorted(suggestions, key=lambda s: s.priority, reverse=True)


def _dirty(status: RepoStatus) -> list[Suggestion]:
    modified = status.modified_count or 0
    untracked = status.untracked_count or 0
    if modified == 0 and untracked == 0:
        return []

    return [
        Suggestion(
            title="Commit your changes",
            description=f"You have {modified} modified and {untracked} untracked file(s)",
            action=CommitWip(AUTO_COMMIT_MESSAGE),
            priority=Priority.HIGH,
            reason="Uncommitted changes can be lost",
        ),
        Suggestion(
            title="Stash your changes",
            description="Save changes for later without committing",
            action=Stash(AUTO_STASH_MESSAGE),
            priority=Priority.MEDIUM,
            reason="Clean working directory temporarily",
        ),
        Suggestion(
            title="Discard changes (destructive)",
            description="Permanently remove all uncommitted changes",
            action=DiscardChanges(),
            priority=Priority.LOW,
            reason="Use only if changes are not needed",
        ),
    ]


def _push(status: RepoStatus) -> Suggestion:
    return Suggestion(
        title=f"Push {status.ahead} commit(s) to remote",
        description="Your local branch has unpushed commits",
        action=Push(),
        priority=Priority.MEDIUM,
        reason="Share your work with the team",
    )


def _behind(status: RepoStatus) -> list[Suggestion]:
    suggestions: list[Suggestion] = []

    if status.is_clean:
        suggestions.append(
            Suggestion(
                title=f"Pull {status.behind} commit(s) from remote",
                description="Your local branch is behind the remote",
                action=Pull(),
                priority=Priority.HIGH,
                reason="Stay up to date with team changes",
            )
        )
    else:
        suggestions.append(
            Suggestion(
                title="Stash changes before pulling",
                description=(
                    f"You're {status.behind} commit(s) behind but have uncommitted changes"
                ),
                action=Stash(PRE_PULL_STASH_MESSAGE),
                priority=Priority.HIGH,
                reason="Avoid merge conflicts",
            )
        )

    if status.is_diverged:
        suggestions.append(
            Suggestion(
                title="Sync with remote",
                description=f"Diverged: {status.ahead} ahead, {status.behind} behind",
                action=Sync(),
                priority=Priority.CRITICAL,
                reason="Branches have diverged",
            )
        )

    return suggestions


def _detached(status: RepoStatus) -> Suggestion:
    commit = status.detached_hash or "unknown"
    return Suggestion(
        title="Create branch from detached HEAD",
        description=f"Currently at commit {commit}",
        action=CreateBranch(f"from-detached-{commit}"),
        priority=Priority.CRITICAL,
        reason="Commits may be lost when switching branches",
    )


def _pop_stash(count: int) -> Suggestion:
    return Suggestion(
        title=f"Pop stash (you have {count})",
        description="Restore previously stashed changes",
        action=StashPop(),
        priority=Priority.LOW,
        reason="Don't forget about stashed work",
    )


# =============================================================================
# Workspace summary
# =============================================================================


@dataclass(frozen=True, slots=True)
class IssueSummary:
    """Issue counters across a workspace."""

    total_repos: int = 0
    clean_repos: int = 0
    dirty_repos: int = 0
    ahead_repos: int = 0
    behind_repos: int = 0
    detached_heads: int = 0
    repos_with_stashes: int = 0
    total_unpushed: int = 0
    total_unpulled: int = 0

    @property
    def has_issues(self) -> bool:
        return (
            self.dirty_repos > 0
            or self.ahead_repos > 0
            or self.behind_repos > 0
            or self.detached_heads > 0
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "total_repos": self.total_repos,
            "clean_repos": self.clean_repos,
            "dirty_repos": self.dirty_repos,
            "ahead_repos": self.ahead_repos,
            "behind_repos": self.behind_repos,
            "detached_heads": self.detached_heads,
            "repos_with_stashes": self.repos_with_stashes,
            "total_unpushed": self.total_unpushed,
            "total_unpulled": self.total_unpulled,
            "has_issues": self.has_issues,
        }


def summarize(statuses: Iterable[RepoStatus]) -> IssueSummary:
    total = clean = dirty = ahead = behind = detached = stashes = unpushed = unpulled = 0
    for status in statuses:
        total += 1
        if status.is_clean:
            clean += 1
        else:
            dirty += 1
        if status.ahead > 0:
            ahead += 1
            unpushed += status.ahead
        if status.behind > 0:
            behind += 1
            unpulled += status.behind
        if status.is_detached:
            detached += 1
        if status.stash_count:
            stashes += 1

    return IssueSummary(
        total_repos=total,
        clean_repos=clean,
        dirty_repos=dirty,
        ahead_repos=ahead,
        behind_repos=behind,
        detached_heads=detached,
        repos_with_stashes=stashes,
        total_unpushed=unpushed,
        total_unpulled=unpulled,
    )
