"""Per-repository statistics: lines of code, history totals and age.

Source files are counted by extension. Hidden entries are skipped and
directories matched by the ignore rules are pruned, so `.git` is never
entered.
"""

from __future__ import annotations

import logging
import os
import time
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from git_nexus.core.ignore import IgnoreRuleSet
from git_nexus.core.result import Err, Ok
from git_nexus.git.repository import open_repository

from .pool import run_parallel
from .status import Opener

__all__ = [
    "CODE_EXTENSIONS",
    "STATS_SKIP_DIRS",
    "RepoStats",
    "WorkspaceStats",
    "collect_all",
    "collect_stats",
    "count_lines",
    "summarize_stats",
]

logger = logging.getLogger(__name__)

CODE_EXTENSIONS: frozenset[str] = frozenset(
    {
        "rs", "py", "js", "ts", "java", "c", "cpp", "h", "hpp", "go", "rb", "php",
        "cs", "swift", "kt", "scala", "r", "m", "mm", "dart", "lua", "pl", "sh",
        "jsx", "tsx", "vue", "svelte", "html", "css", "scss", "sass", "less",
    }
)  # fmt: skip

# Directory names never entered, on top of the ignore rules
STATS_SKIP_DIRS: tuple[str, ...] = ("target", "node_modules", "build", "dist", "vendor")

_SECONDS_PER_DAY = 86400


@dataclass(frozen=True, slots=True)
class RepoStats:
    """Statistics for one repository.

    Attributes:
        path: Repository root
        lines_of_code: Lines across all counted source files
        file_count: Number of counted source files
        commit_count: Commits reachable from HEAD
        contributor_count: Distinct author emails reachable from HEAD
        age_days: Whole days since the oldest commit
        languages: (extension, lines) pairs, most lines first
    """

    path: Path
    lines_of_code: int
    file_count: int
    commit_count: int
    contributor_count: int
    age_days: int
    languages: tuple[tuple[str, int], ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "lines_of_code": self.lines_of_code,
            "file_count": self.file_count,
            "commit_count": self.commit_count,
            "contributor_count": self.contributor_count,
            "age_days": self.age_days,
            "languages": dict(self.languages),
        }


@dataclass(frozen=True, slots=True)
class WorkspaceStats:
    """Totals across repositories."""

    lines_of_code: int
    file_count: int
    commit_count: int
    languages: tuple[tuple[str, int], ...]

    def share(self, lines: int) -> float:
        """Percentage of all counted lines."""
        if self.lines_of_code == 0:
            return 0.0
        return lines / self.lines_of_code * 100


def count_lines(
    root: Path, ignore: IgnoreRuleSet | None = None
) -> tuple[int, int, tuple[tuple[str, int], ...]]:
    """Count source lines below `root`.

    Files that are not valid UTF-8 or cannot be read are skipped.

    Returns:
        (total lines, file count, (extension, lines) pairs sorted by lines
        descending then extension)
    """
    rules = ignore if ignore is not None else IgnoreRuleSet()
    per_extension: Counter[str] = Counter()
    files = 0
    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError:
            continue

        for entry in entries:
            if entry.name.startswith("."):
                continue
            rel = PurePosixPath(Path(entry.path).relative_to(root).as_posix())
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError:
                continue
            if is_dir:
                if entry.name not in STATS_SKIP_DIRS and not rules.should_ignore(rel, is_dir=True):
                    stack.append(Path(entry.path))
                continue
            if not is_file:
                continue

            extension = rel.suffix[1:]
            if extension not in CODE_EXTENSIONS:
                continue
            try:
                content = Path(entry.path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            per_extension[extension] += _line_count(content)
            files += 1

    languages = tuple(sorted(per_extension.items(), key=lambda item: (-item[1], item[0])))
    return sum(per_extension.values()), files, languages


def _line_count(content: str) -> int:
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


def collect_stats(
    path: Path,
    *,
    ignore: IgnoreRuleSet | None = None,
    now: float | None = None,
    opener: Opener = open_repository,
) -> RepoStats | None:
    """Gather statistics for one repository, None when it cannot be opened.

    History that cannot be read counts as empty.
    """
    match opener(path):
        case Err(e):
            logger.debug(
                "stats skipped",
                extra={"event": "stats.unavailable", "repo": str(path), "error": e.message},
            )
            return None
        case Ok(repo):
            pass

    lines, files, languages = count_lines(path, ignore)

    commits = contributors = age = 0
    match repo.history():
        case Ok(None):
            pass
        case Ok(summary):
            current = time.time() if now is None else now
            commits = summary.commit_count
            contributors = summary.contributor_count
            age = max(0, int(current - summary.first_commit_epoch) // _SECONDS_PER_DAY)
        case Err(e):
            logger.debug(
                "history unavailable",
                extra={"event": "stats.history_failed", "repo": str(path), "error": e.message},
            )

    return RepoStats(
        path=path,
        lines_of_code=lines,
        file_count=files,
        commit_count=commits,
        contributor_count=contributors,
        age_days=age,
        languages=languages,
    )


def collect_all(
    paths: Iterable[Path],
    *,
    ignore: IgnoreRuleSet | None = None,
    use_gitignore: bool = False,
    max_workers: int | None = None,
    opener: Opener = open_repository,
) -> list[RepoStats]:
    """Collect statistics in parallel, sorted by path.

    With `use_gitignore`, each repository's own top-level .gitignore is
    appended to `ignore`.
    """

    def work(path: Path) -> RepoStats | None:
        rules = ignore if ignore is not None else IgnoreRuleSet()
        if use_gitignore:
            rules = rules.extend(IgnoreRuleSet.from_repo(path))
        return collect_stats(path, ignore=rules, opener=opener)

    results = run_parallel(paths, work, max_workers=max_workers)
    return sorted((stats for stats in results if stats is not None), key=lambda s: s.path)


def summarize_stats(stats: Sequence[RepoStats]) -> WorkspaceStats:
    languages: Counter[str] = Counter()
    for item in stats:
        languages.update(dict(item.languages))
    return WorkspaceStats(
        lines_of_code=sum(s.lines_of_code for s in stats),
        file_count=sum(s.file_count for s in stats),
        commit_count=sum(s.commit_count for s in stats),
        languages=tuple(sorted(languages.items(), key=lambda item: (-item[1], item[0]))),
    )
