"""Repository discovery.

Walks a directory tree and returns every git working tree root found
within a depth limit. Depth counts entries below the scan root: the
root's own `.git` sits at depth 1, so `max_depth=1` only finds the root
itself.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from git_nexus.core.errors import ScanError
from git_nexus.core.ignore import IgnoreRuleSet
from git_nexus.core.result import Err, Ok, Result

__all__ = ["discover"]

logger = logging.getLogger(__name__)


def discover(
    root: Path,
    max_depth: int,
    ignore: IgnoreRuleSet | None = None,
) -> Result[frozenset[Path], ScanError]:
    """Find git repositories under `root`.

    A directory is a repository root when it contains a `.git` entry,
    directory or file (worktrees and submodules use a file). `.git`
    directories are never descended into. Symlinked directories are not
    followed and unreadable directories are skipped.

    Args:
        root: Directory to scan
        max_depth: Maximum depth of a `.git` entry below `root` (>= 1)
        ignore: Patterns pruning the walk, matched relative to `root`

    Returns:
        Ok(set of absolute repository roots), or Err(ScanError) for an
        unusable root or depth
    """
    if max_depth < 1:
        return Err(ScanError(f"Scan depth must be at least 1, got {max_depth}"))
    if not root.exists():
        return Err(ScanError(f"Scan root does not exist: {root}", path=root))
    if not root.is_dir():
        return Err(ScanError(f"Scan root is not a directory: {root}", path=root))

    rules = ignore if ignore is not None else IgnoreRuleSet()
    base = root.resolve()
    found: set[Path] = set()

    # (directory, depth of the directory's own children)
    stack: list[tuple[Path, int]] = [(base, 1)]
    while stack:
        directory, depth = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            logger.debug(
                "skipping unreadable directory",
                extra={"event": "discovery.unreadable", "path": str(directory), "error": str(e)},
            )
            continue

        for entry in entries:
            if entry.name == ".git":
                found.add(directory)
                break

        if depth >= max_depth:
            continue

        for entry in entries:
            if entry.name == ".git":
                continue
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue
            child = Path(entry.path)
            rel = PurePosixPath(child.relative_to(base).as_posix())
            if rules.should_ignore(rel, is_dir=True):
                continue
            stack.append((child, depth + 1))

    logger.debug(
        "discovery finished",
        extra={"event": "discovery.done", "root": str(base), "count": len(found)},
    )
    return Ok(frozenset(found))
