"""Tests for git_nexus.output.console module."""

from __future__ import annotations

import json

import pytest

from git_nexus.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestMockConsole:
    """Tests for MockConsole capture."""

    def test_styled_shorthands(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("bad")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: bad", "warning: careful", "info: fyi"]
        assert console.has_error()
        assert console.has_warning()
        assert console.has_success()

    def test_table_rows(self) -> None:
        console = MockConsole()
        console.table(
            ["Repository", "Status"],
            [["a", ("CLEAN", "green")], ["b", ("DIRTY", "red")]],
            title="Repos",
        )
        assert console.messages == ["Repos", "Repository | Status", "a | CLEAN", "b | DIRTY"]
        assert console.count(Style.HEADER) == 1
        assert console.count(Style.BOLD) == 1

    def test_table_without_title(self) -> None:
        console = MockConsole()
        console.table(["A"], [])
        assert console.messages == ["A"]

    def test_json(self) -> None:
        console = MockConsole()
        console.json([{"path": "/x", "ahead": 1}])
        assert json.loads(console.text) == [{"path": "/x", "ahead": 1}]

    def test_find_and_clear(self) -> None:
        console = MockConsole()
        console.print("alpha")
        console.print("beta", Style.DIM)
        assert [o.style for o in console.find("beta")] == [Style.DIM]
        console.clear()
        assert console.messages == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.newline()


class TestRichConsole:
    """RichConsole writes through Rich to stdout."""

    def test_markup_in_messages_is_literal(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(no_color=True)
        console.error("branch [main] gone")
        console.print("[bold]raw[/bold]")
        out = capsys.readouterr().out
        assert "error: branch [main] gone" in out
        assert "[bold]raw[/bold]" in out

    def test_json_is_parseable(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(no_color=True).json({"path": "/tmp/[x]", "ok": True})
        assert json.loads(capsys.readouterr().out) == {"path": "/tmp/[x]", "ok": True}

    def test_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(no_color=True).table(["Repository", "Status"], [["web", ("DIRTY", "red")]])
        out = capsys.readouterr().out
        assert "Repository" in out
        assert "DIRTY" in out
