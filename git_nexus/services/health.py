"""Repository health scoring.

A score out of 100 is the sum of three components:
- cleanliness (0-40): uncommitted work
- sync (0-40): divergence from upstream
- branch (0-20): HEAD state
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from git_nexus.core.models import DETACHED_PREFIX, UNBORN_SUFFIX, RepoStatus

__all__ = ["HealthScore", "average", "score"]

MAX_CLEANLINESS = 40
MAX_SYNC = 40
MAX_BRANCH = 20


@dataclass(frozen=True, slots=True)
class HealthScore:
    """Health score with its components.

    Attributes:
        total: Sum of the components (0-100)
        cleanliness: Working tree component (0-40)
        sync: Upstream divergence component (0-40)
        branch: HEAD state component (0-20)
    """

    total: int
    cleanliness: int
    sync: int
    branch: int

    @property
    def label(self) -> str:
        if self.total >= 90:
            return "Excellent"
        if self.total >= 70:
            return "Good"
        if self.total >= 50:
            return "Fair"
        if self.total >= 30:
            return "Poor"
        return "Critical"

    @property
    def style(self) -> str:
        """Rich style name for the score band."""
        if self.total >= 90:
            return "green"
        if self.total >= 70:
            return "bright_green"
        if self.total >= 50:
            return "yellow"
        if self.total >= 30:
            return "dark_orange"
        return "red"

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "cleanliness": self.cleanliness,
            "sync": self.sync,
            "branch": self.branch,
            "label": self.label,
        }


def score(status: RepoStatus) -> HealthScore:
    """Score one repository. Counts absent outside verbose mode count as 0."""
    cleanliness = _cleanliness(status)
    sync = _sync(status)
    branch = _branch(status.branch)
    return HealthScore(
        total=cleanliness + sync + branch,
        cleanliness=cleanliness,
        sync=sync,
        branch=branch,
    )


def average(statuses: Sequence[RepoStatus]) -> HealthScore | None:
    """Workspace score: each component and the total averaged and floored independently."""
    if not statuses:
        return None
    scores = [score(status) for status in statuses]
    n = len(scores)
    return HealthScore(
        total=sum(s.total for s in scores) // n,
        cleanliness=sum(s.cleanliness for s in scores) // n,
        sync=sum(s.sync for s in scores) // n,
        branch=sum(s.branch for s in scores) // n,
    )


def _cleanliness(status: RepoStatus) -> int:
    if status.is_clean:
        return MAX_CLEANLINESS
    changes = (status.modified_count or 0) + (status.untracked_count or 0)
    if changes == 0:
        return 40
    if changes <= 5:
        return 30
    if changes <= 15:
        return 20
    if changes <= 30:
        return 10
    return 5


def _sync(status: RepoStatus) -> int:
    if status.ahead == 0 and status.behind == 0:
        return MAX_SYNC
    commits = status.ahead + status.behind
    if commits <= 3:
        return 30
    if commits <= 10:
        return 20
    if commits <= 20:
        return 10
    return 5


def _branch(branch: str | None) -> int:
    if branch is None:
        return 5
    if branch.startswith(DETACHED_PREFIX):
        return 5
    if UNBORN_SUFFIX in branch:
        return 10
    return MAX_BRANCH
