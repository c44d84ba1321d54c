"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import typer

from git_nexus.core.errors import ErrorCode
from git_nexus.core.result import Err, Result
from git_nexus.output.console import Style

if TYPE_CHECKING:
    from git_nexus.cli.context import CLIContext


def exit_on_error[T, E](
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> T:
    """Exit with error if result is Err, otherwise return the value.

    This helper reduces boilerplate for the common pattern:
        match result:
            case Err(e):
                ctx.console.error(e.message)
                if e.hint:
                    ctx.console.print(f"hint: {e.hint}", Style.DIM)
                raise typer.Exit(code=int(ErrorCode.USER_ERROR))
            case Ok(value):
                ...

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        ctx.console.error(message)
        if hint:
            ctx.console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)


def resolve_root(root: Path) -> Path:
    """Absolute scan root; the path is not required to exist."""
    return root.expanduser().resolve()


def display_path(path: Path, root: Path) -> str:
    """`path` relative to `root` when below it, else absolute."""
    try:
        rel = path.relative_to(root)
    except ValueError:
        return str(path)
    return "." if rel == Path(".") else rel.as_posix()
