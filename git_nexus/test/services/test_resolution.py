"""Tests for git_nexus.services.resolution module."""

from __future__ import annotations

from pathlib import Path

import pytest

from git_nexus.core.actions import (
    ActionResult,
    CommitWip,
    CreateBranch,
    DiscardChanges,
    Pull,
    Push,
    StageAll,
    Stash,
    StashPop,
    Sync,
)
from git_nexus.core.errors import GitError, RepositoryUnavailable
from git_nexus.core.result import Err, Ok
from git_nexus.git.backend import Detached, FetchOutcome, Unborn
from git_nexus.services.resolution import (
    BatchResult,
    apply_action,
    resolve,
    resolve_all,
    resolve_batch,
)
from git_nexus.test._fakes import FakeBackend, opener_for
from git_nexus.test._gitrepo import commit_file, init_repo, isolate_git, requires_git


def _resolve(backend: FakeBackend, action: object, *, dry_run: bool = False) -> ActionResult:
    return resolve(backend.path, action, dry_run=dry_run, opener=opener_for(backend))  # type: ignore[arg-type]


# =============================================================================
# Single actions
# =============================================================================


class TestLocalActions:
    def test_stage_all(self) -> None:
        backend = FakeBackend()
        assert _resolve(backend, StageAll()) == ActionResult.ok("Staged all changes")
        assert backend.calls == [("stage_all",)]

    def test_commit(self) -> None:
        backend = FakeBackend()
        result = _resolve(backend, CommitWip("save work"))
        assert result == ActionResult.ok("Created commit: save work", "Commit: 0123456")
        assert backend.calls == [("commit", "save work")]

    def test_commit_failure(self) -> None:
        backend = FakeBackend(failures={"commit": "nothing to commit"})
        assert _resolve(backend, CommitWip()) == ActionResult.failure("nothing to commit")

    def test_stash_default_message(self) -> None:
        backend = FakeBackend()
        result = _resolve(backend, Stash())
        assert result == ActionResult.ok("Stashed changes", "Stash: fedcba9")
        assert backend.calls == [("stash_save", "git-nexus auto-stash")]

    def test_stash_pop(self) -> None:
        backend = FakeBackend()
        assert _resolve(backend, StashPop()) == ActionResult.ok("Popped stash")

    def test_stash_pop_conflict(self) -> None:
        backend = FakeBackend(failures={"stash_pop": "CONFLICT (content)"})
        assert not _resolve(backend, StashPop()).success

    def test_create_branch(self) -> None:
        backend = FakeBackend()
        result = _resolve(backend, CreateBranch("rescue"))
        assert result == ActionResult.ok("Created and switched to branch 'rescue'")
        assert backend.calls == [("create_branch", "rescue")]

    def test_discard(self) -> None:
        backend = FakeBackend()
        result = _resolve(backend, DiscardChanges())
        assert result == ActionResult.ok("Discarded all changes", "This action cannot be undone!")
        assert backend.calls == [("hard_reset_and_clean",)]


class TestPull:
    @pytest.mark.parametrize(
        ("outcome", "expected"),
        [
            (FetchOutcome.UP_TO_DATE, ActionResult.ok("Already up to date")),
            (FetchOutcome.APPLIED, ActionResult.ok("Pulled and fast-forwarded")),
            (
                FetchOutcome.NEEDS_MERGE,
                ActionResult.failure("Cannot pull: merge required (not implemented)"),
            ),
        ],
    )
    def test_outcomes(self, outcome: FetchOutcome, expected: ActionResult) -> None:
        assert _resolve(FakeBackend(fetch_outcome=outcome), Pull()) == expected

    @pytest.mark.parametrize("head", [Ok(Detached("abc")), Ok(Unborn("main"))])
    def test_requires_branch(self, head: object) -> None:
        backend = FakeBackend(head=head)  # type: ignore[arg-type]
        assert _resolve(backend, Pull()) == ActionResult.failure("Cannot pull: not on a branch")
        assert backend.calls == []

    def test_fetch_error(self) -> None:
        backend = FakeBackend(failures={"fetch_and_fastforward": "No upstream branch configured"})
        assert _resolve(backend, Pull()) == ActionResult.failure("No upstream branch configured")


class TestPush:
    def test_reports_manual_push(self) -> None:
        result = _resolve(FakeBackend(divergence=Ok((1, 0))), Push())
        assert not result.success
        assert "git push" in result.message

    def test_no_upstream(self) -> None:
        result = _resolve(FakeBackend(divergence=Ok(None)), Push())
        assert result == ActionResult.failure("No upstream branch configured")

    def test_detached(self) -> None:
        result = _resolve(FakeBackend(head=Ok(Detached("abc"))), Push())
        assert result == ActionResult.failure("Cannot push: not on a branch")

    def test_never_mutates(self) -> None:
        backend = FakeBackend(divergence=Ok((1, 0)))
        _resolve(backend, Push())
        assert backend.calls == []


class TestSync:
    def test_up_to_date(self) -> None:
        backend = FakeBackend(divergence=Ok((0, 0)))
        result = _resolve(backend, Sync())
        assert result == ActionResult.ok("Pulled changes", "Push requires manual authentication")

    def test_pulled(self) -> None:
        backend = FakeBackend(fetch_outcome=FetchOutcome.APPLIED, divergence=Ok((1, 0)))
        result = _resolve(backend, Sync())
        assert result.success
        assert result.message == "Pulled changes"

    def test_pull_failure_short_circuits(self) -> None:
        backend = FakeBackend(fetch_outcome=FetchOutcome.NEEDS_MERGE)
        result = _resolve(backend, Sync())
        assert result == ActionResult.failure("Cannot pull: merge required (not implemented)")


# =============================================================================
# Dry run and failures
# =============================================================================


class TestDryRun:
    def test_describes_without_mutating(self) -> None:
        backend = FakeBackend()
        result = _resolve(backend, DiscardChanges(), dry_run=True)
        assert result.success
        assert result.message == "Would execute: Discard all uncommitted changes (DESTRUCTIVE)"
        assert result.details == "Command: git reset --hard && git clean -fd"
        assert backend.calls == []

    def test_unavailable_path_still_fails(self) -> None:
        result = apply_action(Path("/nowhere"), StageAll(), dry_run=True, opener=opener_for())
        assert isinstance(result, Err)
        assert isinstance(result.error, RepositoryUnavailable)


class TestFailureIsolation:
    def test_apply_action_unavailable(self) -> None:
        result = apply_action(Path("/nowhere"), Pull(), opener=opener_for())
        assert isinstance(result, Err)

    def test_resolve_unavailable(self) -> None:
        result = resolve(Path("/nowhere"), Pull(), opener=opener_for())
        assert result == ActionResult.failure(f"Not a git repository: {Path('/nowhere')}")

    def test_unexpected_exception(self) -> None:
        class Exploding(FakeBackend):
            def stage_all(self) -> Ok[None] | Err[GitError]:
                raise RuntimeError("disk on fire")

        backend = Exploding()
        result = _resolve(backend, StageAll())
        assert result == ActionResult.failure("Unexpected error: disk on fire")


class TestBatch:
    def test_mixed_batch(self) -> None:
        good = FakeBackend(path=Path("/ws/good"))
        failing = FakeBackend(path=Path("/ws/failing"), failures={"stage_all": "locked"})
        missing = Path("/ws/missing")

        results = resolve_all(
            [good.path, failing.path, missing],
            StageAll(),
            opener=opener_for(good, failing),
            max_workers=3,
        )
        by_path = {r.path: r for r in results}
        assert len(results) == 3
        assert by_path[good.path].result.success
        assert by_path[failing.path].result == ActionResult.failure("locked")
        assert not by_path[missing].result.success

    def test_pairs_keep_their_action(self) -> None:
        a = FakeBackend(path=Path("/ws/a"))
        b = FakeBackend(path=Path("/ws/b"))
        results = resolve_batch(
            [(a.path, StageAll()), (b.path, CreateBranch("x"))],
            opener=opener_for(a, b),
        )
        assert {r.path: r.action for r in results} == {a.path: StageAll(), b.path: CreateBranch("x")}
        assert a.calls == [("stage_all",)]
        assert b.calls == [("create_branch", "x")]

    def test_empty_batch(self) -> None:
        assert resolve_batch([]) == []

    def test_to_dict(self) -> None:
        item = BatchResult(Path("/ws/a"), StageAll(), ActionResult.ok("Staged all changes"))
        assert item.to_dict() == {
            "path": str(Path("/ws/a")),
            "action": "stage",
            "success": True,
            "message": "Staged all changes",
            "details": None,
        }


# =============================================================================
# Real repositories
# =============================================================================


@requires_git
class TestRepositoryRoots:
    """Actions only reach the repository at exactly the given path."""

    @pytest.fixture
    def repo_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        isolate_git(monkeypatch, tmp_path)
        repo = init_repo(tmp_path / "repo")
        commit_file(repo, "src/app.py", "original\n")
        return repo

    def test_discard_on_subdirectory_fails(self, repo_dir: Path) -> None:
        (repo_dir / "src" / "app.py").write_text("edited\n", encoding="utf-8")
        (repo_dir / "notes.txt").write_text("keep me\n", encoding="utf-8")

        result = resolve(repo_dir / "src", DiscardChanges())

        assert not result.success
        assert "Not a repository root" in result.message
        assert (repo_dir / "notes.txt").read_text(encoding="utf-8") == "keep me\n"
        assert (repo_dir / "src" / "app.py").read_text(encoding="utf-8") == "edited\n"

    def test_batch_with_subdirectory_has_one_failure(self, repo_dir: Path) -> None:
        results = resolve_all([repo_dir, repo_dir / "src"], StageAll(), max_workers=2)
        by_path = {r.path: r.result for r in results}
        assert by_path[repo_dir].success
        assert not by_path[repo_dir / "src"].success
        assert sum(not r.result.success for r in results) == 1
