"""Git repository access through the `git` executable.

`ShellGitBackend` implements `GitBackend` for one repository. All
operations return Result types; nothing here raises for a git failure.

Usage:
    match open_repository(Path("/path/to/repo")):
        case Ok(repo):
            match repo.head_state():
                case Ok(OnBranch(name)):
                    print(f"Branch: {name}")
                case Ok(_):
                    print("Not on a branch")
                case Err(e):
                    print(f"Error: {e.message}")
        case Err(e):
            print(e.message)
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from git_nexus.core.errors import GitError, RepositoryUnavailable
from git_nexus.core.models import CommitInfo, HistorySummary
from git_nexus.core.result import Err, Ok, Result
from git_nexus.platform.files import is_executable
from git_nexus.platform.process import ProcessError
from git_nexus.platform.process import run as run_process

from .backend import (
    Detached,
    FetchOutcome,
    HeadState,
    OnBranch,
    StatusEntry,
    Unborn,
)

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

# Identity used only when the repository has none configured
_FALLBACK_IDENTITY = ("-c", "user.name=git-nexus", "-c", "user.email=git-nexus@localhost")

logger = logging.getLogger(__name__)

__all__ = [
    "ShellGitBackend",
    "open_repository",
    "parse_porcelain_z",
]


def open_repository(path: Path) -> Result[ShellGitBackend, RepositoryUnavailable]:
    """Open `path` as the root of a git working tree.

    Parent directories are not searched: a subdirectory of a working tree
    is not a repository.

    Returns:
        Ok(ShellGitBackend) when `path` is a working tree root
        Err(RepositoryUnavailable) otherwise
    """
    if not path.is_dir():
        return Err(RepositoryUnavailable(path=path, message=f"Not a directory: {path}"))

    repo = ShellGitBackend(path)
    match repo._run(["rev-parse", "--is-inside-work-tree"]):
        case Ok(stdout) if stdout.strip() == "true":
            pass
        case Ok(_):
            return Err(RepositoryUnavailable(path=path, message=f"Not a work tree: {path}"))
        case Err(e):
            return Err(
                RepositoryUnavailable(
                    path=path,
                    message=f"Not a git repository: {path} ({e.detail})",
                )
            )

    match repo._run(["rev-parse", "--show-toplevel"]):
        case Ok(stdout) if _same_dir(Path(stdout.strip()), path):
            return Ok(repo)
        case Ok(stdout):
            logger.debug(
                "path is inside a work tree",
                extra={"event": "git.not_root", "repo": str(path), "toplevel": stdout.strip()},
            )
            return Err(RepositoryUnavailable(path=path, message=f"Not a repository root: {path}"))
        case Err(e):
            return Err(
                RepositoryUnavailable(
                    path=path,
                    message=f"Not a git repository: {path} ({e.detail})",
                )
            )


def _same_dir(a: Path, b: Path) -> bool:
    try:
        return a.samefile(b)
    except OSError:
        return a.resolve() == b.resolve()


def parse_porcelain_z(output: str) -> tuple[StatusEntry, ...]:
    """Parse `git status --porcelain=v1 -z` output.

    Entries are NUL-terminated. Renames and copies are followed by an extra
    token holding the source path.
    """
    tokens = output.split("\0")
    entries: list[StatusEntry] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        xy = token[:2]
        path = token[3:]
        orig_path: str | None = None
        if xy[0] in "RC" or xy[1] in "RC":
            if i < len(tokens):
                orig_path = tokens[i]
                i += 1
        entries.append(StatusEntry(xy=xy, path=path, orig_path=orig_path))
    return tuple(entries)


class ShellGitBackend:
    """Git repository handle backed by the `git` command line.

    Attributes:
        path: Path to the repository working tree root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def __repr__(self) -> str:
        return f"ShellGitBackend({self.path!s})"

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def head_state(self) -> Result[HeadState, GitError]:
        """Resolve HEAD to a branch, a detached commit or an unborn branch."""
        match self._run(["symbolic-ref", "-q", "--short", "HEAD"]):
            case Ok(stdout):
                name = stdout.strip()
                if isinstance(self._run(["rev-parse", "-q", "--verify", "HEAD"]), Ok):
                    return Ok(OnBranch(name))
                return Ok(Unborn(name))
            case Err(_):
                pass

        match self._run(["rev-parse", "--verify", "HEAD"]):
            case Ok(stdout):
                return Ok(Detached(stdout.strip()))
            case Err(e):
                return Err(self._error("rev-parse HEAD", e))

    def working_tree_status(
        self, include_untracked: bool = True
    ) -> Result[tuple[StatusEntry, ...], GitError]:
        untracked = "--untracked-files=normal" if include_untracked else "--untracked-files=no"
        match self._run(["status", "--porcelain=v1", "-z", untracked]):
            case Ok(stdout):
                return Ok(parse_porcelain_z(stdout))
            case Err(e):
                return Err(self._error("status", e))

    def upstream_divergence(self) -> Result[tuple[int, int] | None, GitError]:
        if isinstance(self._upstream(), Err):
            return Ok(None)

        match self._run(["rev-list", "--left-right", "--count", "HEAD...@{upstream}"]):
            case Ok(stdout):
                parts = stdout.split()
                if len(parts) != 2 or not all(p.isdigit() for p in parts):
                    return Err(
                        GitError(
                            command="rev-list",
                            message=f"unexpected rev-list output: {stdout.strip()!r}",
                        )
                    )
                return Ok((int(parts[0]), int(parts[1])))
            case Err(e):
                return Err(self._error("rev-list", e))

    def stash_count(self) -> Result[int, GitError]:
        match self._run(["stash", "list"]):
            case Ok(stdout):
                return Ok(len([ln for ln in stdout.splitlines() if ln.strip()]))
            case Err(e):
                return Err(self._error("stash list", e))

    def last_commit(self) -> Result[CommitInfo | None, GitError]:
        if isinstance(self._run(["rev-parse", "-q", "--verify", "HEAD"]), Err):
            return Ok(None)

        match self._run(["log", "-1", "--format=%H%x00%an%x00%at%x00%s"]):
            case Ok(stdout):
                fields = stdout.rstrip("\n").split("\0")
                if len(fields) != 4:
                    return Err(GitError(command="log", message="unexpected log output"))
                full_hash, author, epoch, subject = fields
                return Ok(
                    CommitInfo(
                        hash=full_hash[:7],
                        author=author,
                        message=subject,
                        timestamp=_format_epoch(epoch),
                    )
                )
            case Err(e):
                return Err(self._error("log", e))

    def history(self) -> Result[HistorySummary | None, GitError]:
        if isinstance(self._run(["rev-parse", "-q", "--verify", "HEAD"]), Err):
            return Ok(None)

        match self._run(["log", "--format=%ae%x00%at", "HEAD"]):
            case Ok(stdout):
                pass
            case Err(e):
                return Err(self._error("log", e))

        authors: set[str] = set()
        count = 0
        oldest: int | None = None
        for line in stdout.splitlines():
            email, _, epoch = line.partition("\0")
            if not epoch.isdigit():
                continue
            count += 1
            if email:
                authors.add(email)
            oldest = int(epoch) if oldest is None else min(oldest, int(epoch))

        if oldest is None:
            return Err(GitError(command="log", message="unexpected log output"))
        return Ok(
            HistorySummary(
                commit_count=count,
                contributor_count=len(authors),
                first_commit_epoch=oldest,
            )
        )

    def hooks_dir_exists(self) -> bool:
        hooks_dir = self._hooks_dir()
        return hooks_dir is not None and hooks_dir.is_dir()

    def hook_present(self, name: str) -> bool:
        hooks_dir = self._hooks_dir()
        return hooks_dir is not None and is_executable(hooks_dir / name)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def stage_all(self) -> Result[None, GitError]:
        return self._simple(["add", "-A"], "add")

    def commit(self, message: str) -> Result[str, GitError]:
        if isinstance(self._run(["rev-parse", "-q", "--verify", "HEAD"]), Err):
            return Err(GitError(command="commit", message="No commits yet on this branch"))

        args = ["commit", "--no-verify", "--allow-empty", "-m", message]
        if not self._has_identity():
            args = [*_FALLBACK_IDENTITY, *args]

        match self._run(args):
            case Err(e):
                return Err(self._error("commit", e))
            case Ok(_):
                pass

        match self._run(["rev-parse", "HEAD"]):
            case Ok(stdout):
                return Ok(stdout.strip())
            case Err(e):
                return Err(self._error("rev-parse HEAD", e))

    def stash_save(self, message: str) -> Result[str, GitError]:
        args = ["stash", "push", "--include-untracked", "-m", message]
        if not self._has_identity():
            args = [*_FALLBACK_IDENTITY, *args]

        match self._run(args):
            case Err(e):
                return Err(self._error("stash push", e))
            case Ok(stdout) if "No local changes to save" in stdout:
                return Err(GitError(command="stash push", message="No local changes to save"))
            case Ok(_):
                pass

        match self._run(["rev-parse", "stash@{0}"]):
            case Ok(stdout):
                return Ok(stdout.strip())
            case Err(e):
                return Err(self._error("rev-parse stash", e))

    def stash_pop(self) -> Result[None, GitError]:
        return self._simple(["stash", "pop"], "stash pop")

    def fetch_and_fastforward(self) -> Result[FetchOutcome, GitError]:
        """Fetch the upstream's remote and fast-forward HEAD if possible."""
        match self._upstream():
            case Err(e):
                return Err(e)
            case Ok(upstream):
                pass

        remote = self._upstream_remote()
        if remote is not None:
            match self._run(["fetch", remote]):
                case Err(e):
                    return Err(self._error("fetch", e))
                case Ok(_):
                    pass

        if self._is_ancestor("@{upstream}", "HEAD"):
            return Ok(FetchOutcome.UP_TO_DATE)
        if not self._is_ancestor("HEAD", "@{upstream}"):
            logger.debug(
                "fast-forward not possible",
                extra={"event": "git.needs_merge", "repo": str(self.path), "upstream": upstream},
            )
            return Ok(FetchOutcome.NEEDS_MERGE)

        match self._run(["merge", "--ff-only", "@{upstream}"]):
            case Ok(_):
                return Ok(FetchOutcome.APPLIED)
            case Err(e):
                return Err(self._error("merge --ff-only", e))

    def create_branch(self, name: str) -> Result[None, GitError]:
        return self._simple(["checkout", "-b", name], "checkout -b")

    def hard_reset_and_clean(self) -> Result[None, GitError]:
        match self._simple(["reset", "--hard", "HEAD"], "reset --hard"):
            case Err(e):
                return Err(e)
            case Ok(_):
                return self._simple(["clean", "-fd"], "clean -fd")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _upstream(self) -> Result[str, GitError]:
        match self._run(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"]):
            case Ok(stdout):
                return Ok(stdout.strip())
            case Err(e):
                return Err(
                    GitError(
                        command="rev-parse @{upstream}",
                        message="No upstream branch configured",
                        returncode=e.returncode,
                    )
                )

    def _upstream_remote(self) -> str | None:
        match self._run(["symbolic-ref", "-q", "--short", "HEAD"]):
            case Ok(stdout):
                branch = stdout.strip()
            case Err(_):
                return None
        match self._run(["config", "--get", f"branch.{branch}.remote"]):
            case Ok(stdout):
                remote = stdout.strip()
                return remote or None
            case Err(_):
                return None

    def _is_ancestor(self, ancestor: str, descendant: str) -> bool:
        result = self._run(["merge-base", "--is-ancestor", ancestor, descendant])
        return isinstance(result, Ok)

    def _has_identity(self) -> bool:
        match self._run(["config", "--get", "user.email"]):
            case Ok(stdout):
                return bool(stdout.strip())
            case Err(_):
                return False

    def _hooks_dir(self) -> Path | None:
        match self._run(["rev-parse", "--git-path", "hooks"]):
            case Ok(stdout):
                hooks = Path(stdout.strip())
                return hooks if hooks.is_absolute() else self.path / hooks
            case Err(_):
                return None

    def _simple(self, args: list[str], command: str) -> Result[None, GitError]:
        match self._run(args):
            case Ok(_):
                return Ok(None)
            case Err(e):
                return Err(self._error(command, e))

    def _error(self, command: str, e: ProcessError) -> GitError:
        return GitError(command=command, message=e.detail, returncode=e.returncode)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = next((a for a in args if not a.startswith("-") and "=" not in a), "")
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        logger.debug(
            "git %s",
            " ".join(args),
            extra={"event": "git.run", "repo": str(self.path)},
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)


def _format_epoch(epoch: str) -> str:
    try:
        return datetime.fromtimestamp(int(epoch)).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return epoch
