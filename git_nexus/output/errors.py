"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from git_nexus.core.config import ConfigError
from git_nexus.core.errors import ErrorCode, GitError, RepositoryUnavailable, ScanError
from git_nexus.output.console import Style

if TYPE_CHECKING:
    from git_nexus.output.console import ConsoleProtocol

__all__ = ["AppError", "error_exit_code", "print_error"]

type AppError = ConfigError | ScanError | RepositoryUnavailable | GitError


def print_error(error: AppError, console: ConsoleProtocol) -> None:
    """Print an error value to console with appropriate formatting."""
    match error:
        case ConfigError(message=message, path=path):
            console.error(message)
            if path is not None:
                console.print(f"config: {path}", Style.DIM)
        case ScanError(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case RepositoryUnavailable(message=message):
            console.error(message)
        case GitError(command=command, message=message, returncode=rc):
            console.error(f"git {command} failed (exit {rc})")
            if message:
                console.print(message, Style.DIM)


def error_exit_code(error: AppError) -> int:
    """Get exit code for an error value."""
    match error:
        case ConfigError():
            return int(ErrorCode.USER_ERROR)
        case ScanError(path=None):
            return int(ErrorCode.USER_ERROR)
        case ScanError():
            return int(ErrorCode.ENV_ERROR)
        case RepositoryUnavailable():
            return int(ErrorCode.ENV_ERROR)
        case GitError():
            return int(ErrorCode.ACTION_FAILED)
