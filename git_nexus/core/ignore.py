"""Ignore pattern matching for workspace scans.

A practical subset of gitignore syntax, applied to paths relative to the
scan root:

    build/        directory-only
    /vendor       anchored at the scan root
    docs/api      substring anywhere in the path
    src/**.gen    contains prefix and ends with suffix
    *.log         segment glob
    node_modules  path segment match
    !keep.log     negation

Patterns are evaluated in order and the last matching pattern decides.
This is not gitignore's precedence model: a negation cannot re-include a
path whose parent directory was already pruned, and there is no per
directory scoping.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath

__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "IgnoreRuleSet",
]

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "node_modules",
    "target",
    "venv",
    ".venv",
    "__pycache__",
    "build",
    "dist",
    ".build",
    ".next",
    "vendor",
    ".gradle",
    ".idea",
    ".vscode",
    "*.pyc",
    "*.class",
    "*.o",
    ".DS_Store",
)


@dataclass(frozen=True, slots=True)
class IgnoreRuleSet:
    """Ordered, immutable list of ignore patterns.

    Attributes:
        patterns: Patterns in evaluation order
    """

    patterns: tuple[str, ...] = ()

    @classmethod
    def defaults(cls) -> IgnoreRuleSet:
        """Common build, dependency and editor directories."""
        return cls(DEFAULT_IGNORE_PATTERNS)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> IgnoreRuleSet:
        return cls(tuple(_clean_lines(patterns)))

    @classmethod
    def from_file(cls, path: Path) -> IgnoreRuleSet:
        """Load patterns from an ignore file; unreadable files give an empty set."""
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return cls()
        return cls.from_patterns(content.splitlines())

    @classmethod
    def from_repo(cls, repo_path: Path) -> IgnoreRuleSet:
        """Load the repository's top-level .gitignore, if any."""
        return cls.from_file(repo_path / ".gitignore")

    def with_pattern(self, pattern: str) -> IgnoreRuleSet:
        return IgnoreRuleSet((*self.patterns, pattern))

    def extend(self, other: IgnoreRuleSet) -> IgnoreRuleSet:
        """Append `other`'s patterns after this set's (they take precedence)."""
        return IgnoreRuleSet((*self.patterns, *other.patterns))

    def should_ignore(self, path: PurePath | str, is_dir: bool) -> bool:
        """Decide whether `path` is excluded.

        Args:
            path: Path relative to the scan root
            is_dir: Whether the path is a directory (for `dir/` patterns)
        """
        text = _as_posix(path)
        if is_dir and text.rsplit("/", 1)[-1] == ".git":
            return True

        ignored = False
        for raw in self.patterns:
            negate = raw.startswith("!")
            pattern = raw[1:] if negate else raw
            if pattern and _matches(text, pattern, is_dir):
                ignored = not negate
        return ignored

    def __len__(self) -> int:
        return len(self.patterns)


def _clean_lines(lines: Iterable[str]) -> Iterable[str]:
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        yield stripped


def _as_posix(path: PurePath | str) -> str:
    if isinstance(path, PurePath):
        text = path.as_posix()
    else:
        text = path.replace("\\", "/")
    if text.startswith("./"):
        text = text[2:]
    return text


def _matches(path: str, pattern: str, is_dir: bool) -> bool:
    if pattern.endswith("/"):
        if not is_dir:
            return False
        return _simple_match(path, pattern[:-1])
    if pattern.startswith("/"):
        return path.startswith(pattern[1:])
    if "/" in pattern:
        return pattern in path
    return _simple_match(path, pattern)


def _simple_match(path: str, pattern: str) -> bool:
    if "**" in pattern:
        parts = pattern.split("**")
        if len(parts) == 2:
            prefix, suffix = parts
            return prefix in path and path.endswith(suffix)

    if "*" in pattern:
        return _glob_match(path, pattern)

    return path == pattern or f"/{pattern}" in path or path.endswith(pattern)


def _glob_match(path: str, pattern: str) -> bool:
    parts = pattern.split("*")
    last = len(parts) - 1
    pos = 0

    for i, part in enumerate(parts):
        if not part:
            continue
        if i == 0:
            if not path.startswith(part, pos):
                return False
            pos += len(part)
        elif i == last:
            return path.endswith(part)
        else:
            idx = path.find(part, pos)
            if idx < 0:
                return False
            pos = idx + len(part)

    return True
