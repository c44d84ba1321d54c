"""Git operations module.

This module provides the repository abstraction used by the scanner and
the fixer:
- GitBackend: capability protocol (queries + mutations)
- ShellGitBackend: implementation driving the `git` executable

Usage:
    from git_nexus.git import open_repository

    match open_repository(Path("/path/to/repo")):
        case Ok(repo):
            print(repo.working_tree_status())
        case Err(e):
            print(e.message)
"""

from git_nexus.git.backend import (
    ChangeKind,
    Detached,
    FetchOutcome,
    GitBackend,
    HeadState,
    OnBranch,
    StatusEntry,
    Unborn,
)
from git_nexus.git.repository import (
    ShellGitBackend,
    open_repository,
    parse_porcelain_z,
)

__all__ = [
    # Backend interface
    "ChangeKind",
    "Detached",
    "FetchOutcome",
    "GitBackend",
    "HeadState",
    "OnBranch",
    "StatusEntry",
    "Unborn",
    # Shell implementation
    "ShellGitBackend",
    "open_repository",
    "parse_porcelain_z",
]
