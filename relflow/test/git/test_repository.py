"""Tests for git/repository.py."""

from __future__ import annotations

from relflow.core.result import Err, Ok
from relflow.git.repository import GitError, Repository, parse_branch_list
from relflow.output.console import MockConsole
from relflow.test.fakes import FakeRunner


def _repo(runner: FakeRunner) -> tuple[Repository, MockConsole]:
    console = MockConsole()
    return Repository(runner, console), console


# =============================================================================
# parse_branch_list
# =============================================================================


class TestParseBranchList:
    def test_strips_current_marker(self) -> None:
        output = "* release/1.2.4\n  release/1.2.3\n  release/1.0.0\n"
        assert parse_branch_list(output) == ["release/1.2.4", "release/1.2.3", "release/1.0.0"]

    def test_strips_worktree_marker(self) -> None:
        assert parse_branch_list("+ release/2.0.0\n  main\n") == ["release/2.0.0", "main"]

    def test_empty_output(self) -> None:
        assert parse_branch_list("") == []
        assert parse_branch_list("\n\n") == []


# =============================================================================
# Queries
# =============================================================================


class TestBranchExists:
    def test_present(self) -> None:
        repo, _ = _repo(FakeRunner().with_branches("main"))
        assert repo.branch_exists("main") == Ok(True)

    def test_absent(self) -> None:
        repo, _ = _repo(FakeRunner())
        assert repo.branch_exists("develop") == Ok(False)

    def test_git_failure(self) -> None:
        runner = FakeRunner()
        runner.fail("git", "branch", "--list", "main", stderr="fatal: not a git repository\n")
        repo, _ = _repo(runner)

        result = repo.branch_exists("main")

        assert isinstance(result, Err)
        assert result.error.message == "fatal: not a git repository"
        assert str(result.error) == "git branch --list main: fatal: not a git repository"

    def test_queries_are_silent(self) -> None:
        runner = FakeRunner().with_branches("main")
        repo, console = _repo(runner)

        repo.branch_exists("main")

        assert console.outputs == []
        assert runner.calls == [(("git", "branch", "--list", "main"), True)]


class TestListBranches:
    def test_sorted_listing(self) -> None:
        runner = FakeRunner()
        runner.reply(
            "git", "branch", "--list", "--sort=-committerdate", "release/*",
            stdout="  release/1.1.0\n  release/1.0.0\n",
        )
        repo, _ = _repo(runner)

        result = repo.list_branches("release/*", sort="-committerdate")

        assert result == Ok(["release/1.1.0", "release/1.0.0"])


class TestCurrentBranch:
    def test_named_branch(self) -> None:
        runner = FakeRunner()
        runner.reply("git", "rev-parse", "--abbrev-ref", "HEAD", stdout="develop\n")
        repo, _ = _repo(runner)
        assert repo.current_branch() == "develop"

    def test_detached_head(self) -> None:
        runner = FakeRunner()
        runner.reply("git", "rev-parse", "--abbrev-ref", "HEAD", stdout="HEAD\n")
        repo, _ = _repo(runner)
        assert repo.current_branch() is None

    def test_error(self) -> None:
        runner = FakeRunner()
        runner.fail("git", "rev-parse", "--abbrev-ref", "HEAD")
        repo, _ = _repo(runner)
        assert repo.current_branch() is None


# =============================================================================
# Mutations
# =============================================================================


class TestMutations:
    def test_command_lines(self) -> None:
        runner = FakeRunner()
        repo, _ = _repo(runner)

        repo.create_branch("release/1.2.4")
        repo.delete_branch("release/1.2.4")
        repo.checkout("develop")
        repo.add_all()
        repo.commit("chore: v1.2.4")
        repo.merge_no_ff("release/1.2.4", "chore: merge release 1.2.4 into develop")
        repo.tag_annotated("v1.2.4", "Release 1.2.4")
        repo.push("origin", "main")
        repo.push("origin", "main", tags=True)

        assert runner.mutations == [
            ["git", "checkout", "-b", "release/1.2.4"],
            ["git", "branch", "-D", "release/1.2.4"],
            ["git", "checkout", "develop"],
            ["git", "add", "."],
            ["git", "commit", "-m", "chore: v1.2.4"],
            [
                "git", "merge", "--no-ff", "release/1.2.4",
                "-m", "chore: merge release 1.2.4 into develop",
            ],
            ["git", "tag", "-a", "v1.2.4", "-m", "Release 1.2.4"],
            ["git", "push", "--set-upstream", "origin", "main"],
            ["git", "push", "--set-upstream", "origin", "main", "--tags"],
        ]

    def test_mutations_are_echoed(self) -> None:
        repo, console = _repo(FakeRunner())

        repo.checkout("main")

        assert console.messages == ["$ git checkout main"]

    def test_failure_without_captured_output(self) -> None:
        runner = FakeRunner()
        runner.fail("git", "push", "--set-upstream", "origin", "main", returncode=128)
        repo, _ = _repo(runner)

        result = repo.push("origin", "main")

        assert result == Err(
            GitError(
                command="push --set-upstream origin main",
                message="exited with status 128",
                returncode=128,
            )
        )
