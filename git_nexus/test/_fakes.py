"""In-memory GitBackend for service tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from git_nexus.core.errors import GitError, RepositoryUnavailable
from git_nexus.core.models import CommitInfo, HistorySummary
from git_nexus.core.result import Err, Ok, Result
from git_nexus.git.backend import FetchOutcome, HeadState, OnBranch, StatusEntry


@dataclass
class FakeBackend:
    """Scripted repository state. Mutations are recorded in `calls`.

    Any mutation listed in `failures` returns Err(GitError) with the
    mapped message instead of succeeding.
    """

    path: Path = field(default_factory=lambda: Path("/ws/repo"))
    head: Result[HeadState, GitError] = field(default_factory=lambda: Ok(OnBranch("main")))
    entries: Result[tuple[StatusEntry, ...], GitError] = field(default_factory=lambda: Ok(()))
    divergence: Result[tuple[int, int] | None, GitError] = field(default_factory=lambda: Ok(None))
    history_summary: Result[HistorySummary | None, GitError] = field(default_factory=lambda: Ok(None))
    stashes: Result[int, GitError] = field(default_factory=lambda: Ok(0))
    commit_info: Result[CommitInfo | None, GitError] = field(default_factory=lambda: Ok(None))
    hooks_dir: bool = True
    hooks: frozenset[str] = frozenset()
    fetch_outcome: FetchOutcome = FetchOutcome.UP_TO_DATE
    failures: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=list)

    # Queries

    def head_state(self) -> Result[HeadState, GitError]:
        return self.head

    def working_tree_status(
        self, include_untracked: bool = True
    ) -> Result[tuple[StatusEntry, ...], GitError]:
        return self.entries

    def upstream_divergence(self) -> Result[tuple[int, int] | None, GitError]:
        return self.divergence

    def stash_count(self) -> Result[int, GitError]:
        return self.stashes

    def last_commit(self) -> Result[CommitInfo | None, GitError]:
        return self.commit_info

    def history(self) -> Result[HistorySummary | None, GitError]:
        return self.history_summary

    def hooks_dir_exists(self) -> bool:
        return self.hooks_dir

    def hook_present(self, name: str) -> bool:
        return name in self.hooks

    # Mutations

    def _mutate[T](self, name: str, value: T, *args: str) -> Result[T, GitError]:
        self.calls.append((name, *args))
        if name in self.failures:
            return Err(GitError(command=name, message=self.failures[name]))
        return Ok(value)

    def stage_all(self) -> Result[None, GitError]:
        return self._mutate("stage_all", None)

    def commit(self, message: str) -> Result[str, GitError]:
        return self._mutate("commit", "0123456789abcdef", message)

    def stash_save(self, message: str) -> Result[str, GitError]:
        return self._mutate("stash_save", "fedcba9876543210", message)

    def stash_pop(self) -> Result[None, GitError]:
        return self._mutate("stash_pop", None)

    def fetch_and_fastforward(self) -> Result[FetchOutcome, GitError]:
        return self._mutate("fetch_and_fastforward", self.fetch_outcome)

    def create_branch(self, name: str) -> Result[None, GitError]:
        return self._mutate("create_branch", None, name)

    def hard_reset_and_clean(self) -> Result[None, GitError]:
        return self._mutate("hard_reset_and_clean", None)


def opener_for(
    *backends: FakeBackend,
) -> Callable[[Path], Result[FakeBackend, RepositoryUnavailable]]:
    """Opener returning the fake registered for a path, Err for any other path."""
    by_path = {backend.path: backend for backend in backends}

    def opener(path: Path) -> Result[FakeBackend, RepositoryUnavailable]:
        backend = by_path.get(path)
        if backend is None:
            return Err(RepositoryUnavailable(path=path, message=f"Not a git repository: {path}"))
        return Ok(backend)

    return opener
