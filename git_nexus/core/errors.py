"""Error values shared across layers, and CLI exit codes.

Expected failures are plain frozen dataclasses carried inside `Err`.
`ErrorCode` maps them to stable process exit codes at the CLI boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

__all__ = [
    "ErrorCode",
    "GitError",
    "RepositoryUnavailable",
    "ScanError",
]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad arguments, invalid config, declined confirmation)
    - 2: Environment error (git missing, scan root unusable)
    - 3: One or more remediation actions failed
    - 5: I/O error (could not write a file)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    ACTION_FAILED = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK


@dataclass(frozen=True, slots=True)
class GitError:
    """A git query or mutation that the backend rejected.

    Attributes:
        command: Short name of the git operation (e.g. "stash push")
        message: Human-readable reason, usually git's stderr
        returncode: Process exit status, -1 when git could not run at all
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class RepositoryUnavailable:
    """The path could not be opened as a git repository."""

    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class ScanError:
    """Invalid scan input: unusable root or depth."""

    message: str
    path: Path | None = None
    hint: str | None = None
