"""Tests for git_nexus.services.stats module."""

from __future__ import annotations

from pathlib import Path

import pytest

from git_nexus.core.errors import GitError
from git_nexus.core.ignore import IgnoreRuleSet
from git_nexus.core.models import HistorySummary
from git_nexus.core.result import Err, Ok
from git_nexus.services.stats import (
    RepoStats,
    collect_all,
    collect_stats,
    count_lines,
    summarize_stats,
)
from git_nexus.test._fakes import FakeBackend, opener_for

DAY = 86400


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _stats(path: str, lines: int, languages: tuple[tuple[str, int], ...]) -> RepoStats:
    return RepoStats(
        path=Path(path),
        lines_of_code=lines,
        file_count=len(languages),
        commit_count=2,
        contributor_count=1,
        age_days=0,
        languages=languages,
    )


# =============================================================================
# Line counting
# =============================================================================


class TestCountLines:
    def test_counts_by_extension(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.py", "one\ntwo\nthree\n")
        _write(tmp_path / "pkg" / "b.py", "x = 1")
        _write(tmp_path / "web" / "app.js", "a\nb\n")
        _write(tmp_path / "README.md", "not code\n")

        total, files, languages = count_lines(tmp_path)
        assert total == 6
        assert files == 3
        assert languages == (("py", 4), ("js", 2))

    def test_empty_file_has_no_lines(self, tmp_path: Path) -> None:
        _write(tmp_path / "empty.rs", "")
        assert count_lines(tmp_path) == (0, 1, (("rs", 0),))

    def test_hidden_and_build_dirs_skipped(self, tmp_path: Path) -> None:
        _write(tmp_path / "src" / "main.go", "package main\n")
        _write(tmp_path / ".git" / "hooks" / "x.sh", "echo\n")
        _write(tmp_path / ".cache" / "c.py", "x\n")
        _write(tmp_path / "node_modules" / "dep" / "index.js", "x\n")
        _write(tmp_path / "target" / "gen.rs", "x\n")
        _write(tmp_path / ".hidden.py", "x\n")

        assert count_lines(tmp_path) == (1, 1, (("go", 1),))

    def test_ignore_rules_prune_directories(self, tmp_path: Path) -> None:
        _write(tmp_path / "src" / "keep.py", "x\n")
        _write(tmp_path / "generated" / "skip.py", "x\ny\n")

        rules = IgnoreRuleSet.from_patterns(["generated/"])
        assert count_lines(tmp_path, rules) == (1, 1, (("py", 1),))

    def test_skip_names_are_exact(self, tmp_path: Path) -> None:
        _write(tmp_path / "builder" / "b.py", "x\n")
        assert count_lines(tmp_path)[1] == 1

    def test_non_utf8_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "bin.c").write_bytes(b"\xff\xfe\x00int")
        _write(tmp_path / "ok.c", "int x;\n")
        assert count_lines(tmp_path) == (1, 1, (("c", 1),))

    def test_ties_sorted_by_extension(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.ts", "x\n")
        _write(tmp_path / "b.css", "x\n")
        assert count_lines(tmp_path)[2] == (("css", 1), ("ts", 1))


# =============================================================================
# Repository statistics
# =============================================================================


class TestCollectStats:
    def test_history_and_age(self, tmp_path: Path) -> None:
        _write(tmp_path / "main.py", "print('hi')\n")
        backend = FakeBackend(
            path=tmp_path,
            history_summary=Ok(
                HistorySummary(commit_count=12, contributor_count=3, first_commit_epoch=1_000)
            ),
        )
        stats = collect_stats(tmp_path, now=1_000 + 10 * DAY + 5, opener=opener_for(backend))

        assert stats == RepoStats(
            path=tmp_path,
            lines_of_code=1,
            file_count=1,
            commit_count=12,
            contributor_count=3,
            age_days=10,
            languages=(("py", 1),),
        )

    def test_unborn_has_no_history(self, tmp_path: Path) -> None:
        stats = collect_stats(tmp_path, opener=opener_for(FakeBackend(path=tmp_path)))
        assert stats is not None
        assert (stats.commit_count, stats.contributor_count, stats.age_days) == (0, 0, 0)

    def test_history_error_counts_as_empty(self, tmp_path: Path) -> None:
        backend = FakeBackend(
            path=tmp_path, history_summary=Err(GitError(command="log", message="corrupt"))
        )
        stats = collect_stats(tmp_path, opener=opener_for(backend))
        assert stats is not None
        assert stats.commit_count == 0

    def test_future_first_commit_clamped(self, tmp_path: Path) -> None:
        backend = FakeBackend(
            path=tmp_path,
            history_summary=Ok(HistorySummary(1, 1, first_commit_epoch=5 * DAY)),
        )
        stats = collect_stats(tmp_path, now=0, opener=opener_for(backend))
        assert stats is not None
        assert stats.age_days == 0

    def test_unavailable_repository(self, tmp_path: Path) -> None:
        assert collect_stats(tmp_path / "nowhere", opener=opener_for()) is None

    def test_to_dict(self) -> None:
        item = _stats("/ws/a", 5, (("py", 4), ("sh", 1)))
        assert item.to_dict() == {
            "lines_of_code": 5,
            "file_count": 2,
            "commit_count": 2,
            "contributor_count": 1,
            "age_days": 0,
            "languages": {"py": 4, "sh": 1},
        }


class TestCollectAll:
    def test_sorted_and_unavailable_dropped(self, tmp_path: Path) -> None:
        a = tmp_path / "a"
        b = tmp_path / "b"
        _write(a / "x.py", "x\n")
        _write(b / "y.py", "y\n")
        backends = (FakeBackend(path=a), FakeBackend(path=b))

        results = collect_all(
            [b, tmp_path / "missing", a], opener=opener_for(*backends), max_workers=3
        )
        assert [item.path for item in results] == [a, b]

    def test_repository_gitignore(self, tmp_path: Path) -> None:
        repo = tmp_path / "repo"
        _write(repo / ".gitignore", "gen/\n")
        _write(repo / "gen" / "out.py", "x\n")
        _write(repo / "src" / "in.py", "x\n")
        opener = opener_for(FakeBackend(path=repo))

        assert collect_all([repo], opener=opener)[0].file_count == 2
        assert collect_all([repo], use_gitignore=True, opener=opener)[0].file_count == 1


class TestSummarizeStats:
    def test_totals(self) -> None:
        totals = summarize_stats(
            [
                _stats("/ws/a", 30, (("py", 20), ("sh", 10))),
                _stats("/ws/b", 70, (("js", 50), ("py", 20))),
            ]
        )
        assert totals.lines_of_code == 100
        assert totals.commit_count == 4
        assert totals.languages == (("js", 50), ("py", 40), ("sh", 10))
        assert totals.share(40) == pytest.approx(40.0)

    def test_empty(self) -> None:
        totals = summarize_stats([])
        assert totals.lines_of_code == 0
        assert totals.languages == ()
        assert totals.share(0) == 0.0
