"""Git repository abstraction.

``Repository`` exposes exactly the git surface the release pipeline needs:
branch existence and listing, checkout/create/delete, add and commit,
non-fast-forward merges, annotated tags and pushes with upstream tracking.

Queries run with captured output and are silent. Mutations echo the command
line to the console and stream git's own output to the terminal.

Usage:
    repo = Repository(ProcessRunner(cwd), console)

    match repo.branch_exists("develop"):
        case Ok(True):
            ...
        case Ok(False):
            console.error("Branch develop does not exist")
        case Err(e):
            console.error(e.message)
"""

from __future__ import annotations

from dataclasses import dataclass

from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol
from relflow.platform.process import CommandRunner

__all__ = ["GitError", "Repository", "parse_branch_list"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand line that failed (without the "git" prefix)
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def __str__(self) -> str:
        return f"git {self.command}: {self.message}"


def parse_branch_list(output: str) -> list[str]:
    """Parse ``git branch --list`` output into bare branch names.

    Strips the ``*`` (current branch) and ``+`` (checked out in another
    worktree) markers and drops blank lines, keeping git's ordering.
    """
    names: list[str] = []
    for line in output.splitlines():
        name = line.strip()
        if name[:2] in ("* ", "+ "):
            name = name[2:].strip()
        if name:
            names.append(name)
    return names


class Repository:
    """Git operations on the working directory of a ``CommandRunner``."""

    def __init__(self, runner: CommandRunner, console: ConsoleProtocol) -> None:
        self._runner = runner
        self._console = console

    # -- queries -------------------------------------------------------------

    def branch_exists(self, name: str) -> Result[bool, GitError]:
        """Check whether a local branch exists.

        Returns Err only when git itself fails (e.g. not a repository).
        """
        listed = self.list_branches(name)
        if isinstance(listed, Err):
            return listed
        return Ok(name in listed.value)

    def list_branches(
        self, pattern: str, *, sort: str | None = None
    ) -> Result[list[str], GitError]:
        """List local branches matching a glob pattern.

        Args:
            pattern: Branch glob, e.g. ``release/*``
            sort: Optional git sort key, e.g. ``-committerdate``
        """
        args = ["branch", "--list"]
        if sort is not None:
            args.append(f"--sort={sort}")
        args.append(pattern)
        return self._query(args).map(parse_branch_list)

    def current_branch(self) -> str | None:
        """Get current branch name, or None on detached HEAD or error."""
        result = self._query(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch in ("", "HEAD") else branch
            case Err(_):
                return None

    # -- mutations -----------------------------------------------------------

    def checkout(self, branch: str) -> Result[None, GitError]:
        return self._mutate(["checkout", branch])

    def create_branch(self, branch: str) -> Result[None, GitError]:
        """Create ``branch`` from HEAD and switch to it."""
        return self._mutate(["checkout", "-b", branch])

    def delete_branch(self, branch: str) -> Result[None, GitError]:
        """Force-delete a local branch, merged or not."""
        return self._mutate(["branch", "-D", branch])

    def add_all(self) -> Result[None, GitError]:
        return self._mutate(["add", "."])

    def commit(self, message: str) -> Result[None, GitError]:
        return self._mutate(["commit", "-m", message])

    def merge_no_ff(self, branch: str, message: str) -> Result[None, GitError]:
        """Merge ``branch`` into the current branch, always creating a merge commit."""
        return self._mutate(["merge", "--no-ff", branch, "-m", message])

    def tag_annotated(self, tag: str, message: str) -> Result[None, GitError]:
        return self._mutate(["tag", "-a", tag, "-m", message])

    def push(
        self, remote: str, branch: str, *, tags: bool = False
    ) -> Result[None, GitError]:
        """Push ``branch`` to ``remote`` and set it as upstream."""
        args = ["push", "--set-upstream", remote, branch]
        if tags:
            args.append("--tags")
        return self._mutate(args)

    # -- plumbing ------------------------------------------------------------

    def _query(self, args: list[str]) -> Result[str, GitError]:
        result = self._runner.run(["git", *args], capture=True)
        if isinstance(result, Err):
            e = result.error
            return Err(
                GitError(
                    command=" ".join(args),
                    message=e.detail or str(e),
                    returncode=e.returncode,
                )
            )
        return Ok(result.value)

    def _mutate(self, args: list[str]) -> Result[None, GitError]:
        cmd = ["git", *args]
        self._console.command(cmd)
        result = self._runner.run(cmd, capture=False)
        if isinstance(result, Err):
            e = result.error
            return Err(
                GitError(
                    command=" ".join(args),
                    message=e.detail or f"exited with status {e.returncode}",
                    returncode=e.returncode,
                )
            )
        return Ok(None)
