"""Tests for git_nexus.platform.files module."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from git_nexus.platform.files import atomic_write_text, is_executable


class TestAtomicWriteText:
    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "file.toml"
        atomic_write_text(target, "x = 1\n")
        assert target.read_text(encoding="utf-8") == "x = 1\n"

    def test_replaces_and_leaves_no_temp(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("old", encoding="utf-8")
        atomic_write_text(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


class TestIsExecutable:
    def test_missing(self, tmp_path: Path) -> None:
        assert not is_executable(tmp_path / "nope")

    def test_directory(self, tmp_path: Path) -> None:
        assert not is_executable(tmp_path)

    @pytest.mark.skipif(os.name == "nt", reason="executable bit")
    def test_mode_bits(self, tmp_path: Path) -> None:
        script = tmp_path / "hook"
        script.write_text("#!/bin/sh\n", encoding="utf-8")
        script.chmod(0o644)
        assert not is_executable(script)
        script.chmod(0o755)
        assert is_executable(script)
