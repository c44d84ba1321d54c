"""Tests for git_nexus.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

from git_nexus.core.result import Err, Ok
from git_nexus.platform.process import ProcessError, run


class TestRun:
    def test_success(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hi')"], cwd=tmp_path)
        assert result == Ok("hi\n")

    def test_non_zero_exit(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('bad\\n'); sys.exit(3)"
        result = run([sys.executable, "-c", code], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.detail == "bad"

    def test_missing_executable(self, tmp_path: Path) -> None:
        result = run(["definitely-not-a-real-binary-xyz"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2)
        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr

    def test_cwd(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert Path(result.value.strip()).resolve() == tmp_path.resolve()


class TestProcessError:
    def test_str_truncates_command(self) -> None:
        error = ProcessError(("git", "-C", "/r", "status"), 128, "", "")
        assert str(error) == "git -C /r ... failed (exit 128)"

    def test_detail_fallbacks(self) -> None:
        assert ProcessError(("git",), 1, "out\n", "").detail == "out"
        assert ProcessError(("git",), 1, "", "").detail == "git failed (exit 1)"
