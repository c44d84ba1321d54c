"""Workspace scan: discovery followed by parallel status analysis."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from git_nexus.core.errors import ScanError
from git_nexus.core.ignore import IgnoreRuleSet
from git_nexus.core.models import RepoStatus
from git_nexus.core.result import Err, Ok, Result
from git_nexus.git.repository import open_repository

from .discovery import discover
from .status import Opener, analyze_all

__all__ = [
    "ScanOptions",
    "SortKey",
    "StatusFilter",
    "filter_statuses",
    "scan_workspace",
    "sort_statuses",
]

logger = logging.getLogger(__name__)


class StatusFilter(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    AHEAD = "ahead"
    BEHIND = "behind"


class SortKey(str, Enum):
    PATH = "path"
    STATUS = "status"
    BRANCH = "branch"


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Inputs of one workspace scan.

    Attributes:
        root: Directory to scan
        max_depth: Maximum depth of a `.git` entry below root
        ignore: Directory pruning rules
        verbose: Collect verbose details
        want_hooks: Collect executable hooks
        max_workers: Pool size, None for the default
    """

    root: Path
    max_depth: int
    ignore: IgnoreRuleSet = field(default_factory=IgnoreRuleSet)
    verbose: bool = False
    want_hooks: bool = False
    max_workers: int | None = None


def scan_workspace(
    options: ScanOptions,
    *,
    opener: Opener = open_repository,
) -> Result[list[RepoStatus], ScanError]:
    """Discover repositories under the root and analyze each in parallel.

    Repositories that cannot be analyzed are left out. The list is sorted
    by path.
    """
    match discover(options.root, options.max_depth, options.ignore):
        case Err(e):
            return Err(e)
        case Ok(paths):
            pass

    logger.info(
        "repositories discovered",
        extra={"event": "scan.discovered", "root": str(options.root), "count": len(paths)},
    )

    statuses = analyze_all(
        paths,
        verbose=options.verbose,
        want_hooks=options.want_hooks,
        max_workers=options.max_workers,
        opener=opener,
    )
    dropped = len(paths) - len(statuses)
    if dropped:
        logger.warning(
            "%d repositor%s could not be analyzed",
            dropped,
            "y" if dropped == 1 else "ies",
            extra={"event": "scan.dropped", "count": dropped},
        )
    return Ok(sort_statuses(statuses, SortKey.PATH))


def filter_statuses(statuses: Iterable[RepoStatus], kind: StatusFilter) -> list[RepoStatus]:
    match kind:
        case StatusFilter.CLEAN:
            return [s for s in statuses if s.is_clean]
        case StatusFilter.DIRTY:
            return [s for s in statuses if not s.is_clean]
        case StatusFilter.AHEAD:
            return [s for s in statuses if s.ahead > 0]
        case StatusFilter.BEHIND:
            return [s for s in statuses if s.behind > 0]


def sort_statuses(statuses: Iterable[RepoStatus], key: SortKey) -> list[RepoStatus]:
    """Stable sort. STATUS puts dirty repositories first; BRANCH puts unresolved HEADs first."""
    match key:
        case SortKey.PATH:
            return sorted(statuses, key=lambda s: s.path)
        case SortKey.STATUS:
            return sorted(statuses, key=lambda s: s.is_clean)
        case SortKey.BRANCH:
            return sorted(statuses, key=lambda s: (s.branch is not None, s.branch or ""))
