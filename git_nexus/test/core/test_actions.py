"""Tests for git_nexus.core.actions module."""

from __future__ import annotations

import pytest

from git_nexus.core.actions import (
    ACTION_NAMES,
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
    action_name,
    describe,
    git_command,
    parse_action,
)
from git_nexus.core.result import Err, Ok

ALL_ACTIONS = [
    StageAll(),
    CommitWip(),
    Stash(),
    Pull(),
    Push(),
    CreateBranch("feature"),
    DiscardChanges(),
    StashPop(),
    Sync(),
]


class TestNames:
    def test_names_follow_menu_order(self) -> None:
        assert tuple(action_name(a) for a in ALL_ACTIONS) == ACTION_NAMES

    @pytest.mark.parametrize("action", ALL_ACTIONS)
    def test_parse_round_trip(self, action: object) -> None:
        name = action_name(action)  # type: ignore[arg-type]
        parsed = parse_action(name, branch="feature")
        assert isinstance(parsed, Ok)
        assert action_name(parsed.value) == name


class TestDescriptions:
    """Human-readable text and equivalent git commands."""

    def test_commit(self) -> None:
        action = CommitWip("save")
        assert describe(action) == "Create commit: save"
        assert git_command(action) == 'git commit -m "save"'

    def test_stash_without_message(self) -> None:
        assert describe(Stash()) == "Stash changes"
        assert git_command(Stash()) == "git stash"

    def test_stash_with_message(self) -> None:
        assert describe(Stash("x")) == "Stash changes: x"
        assert git_command(Stash("x")) == 'git stash push -m "x"'

    def test_branch(self) -> None:
        assert describe(CreateBranch("fix")) == "Create branch: fix"
        assert git_command(CreateBranch("fix")) == "git checkout -b fix"

    def test_discard(self) -> None:
        assert "DESTRUCTIVE" in describe(DiscardChanges())
        assert git_command(DiscardChanges()) == "git reset --hard && git clean -fd"

    def test_sync(self) -> None:
        assert git_command(Sync()) == "git pull && git push"

    def test_methods_delegate(self) -> None:
        action = Pull()
        assert action.description() == describe(action)
        assert action.git_command() == git_command(action)

    @pytest.mark.parametrize("action", ALL_ACTIONS)
    def test_every_action_described(self, action: object) -> None:
        assert describe(action)  # type: ignore[arg-type]
        assert git_command(action).startswith("git ")  # type: ignore[arg-type]


class TestDestructive:
    def test_only_discard(self) -> None:
        destructive = [a for a in ALL_ACTIONS if a.is_destructive()]
        assert destructive == [DiscardChanges()]


class TestParseAction:
    def test_defaults(self) -> None:
        assert parse_action("commit") == Ok(CommitWip("WIP: Auto-commit by git-nexus"))
        assert parse_action("stash") == Ok(Stash("git-nexus auto-stash"))

    def test_messages(self) -> None:
        assert parse_action("commit", message="m") == Ok(CommitWip("m"))
        assert parse_action("stash", message="s") == Ok(Stash("s"))

    def test_case_and_whitespace(self) -> None:
        assert parse_action("  PULL ") == Ok(Pull())

    def test_branch_requires_name(self) -> None:
        result = parse_action("branch")
        assert isinstance(result, Err)
        assert "--branch" in result.error

    def test_unknown(self) -> None:
        result = parse_action("rebase")
        assert isinstance(result, Err)
        assert "unknown action 'rebase'" in result.error
        assert "sync" in result.error


class TestActionResult:
    def test_ok(self) -> None:
        result = ActionResult.ok("done", "abc")
        assert result.success
        assert result.details == "abc"

    def test_failure(self) -> None:
        result = ActionResult.failure("nope")
        assert not result.success
        assert result.details is None
