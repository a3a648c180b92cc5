"""Subprocess execution with Result-based error handling.

Every external tool relflow drives (git, npm, the changelog generator) goes
through a ``CommandRunner``. The production ``ProcessRunner`` shells out;
tests substitute a fake that records command lines and replays output.

Two I/O modes exist:

- captured: stdout is returned to the caller (branch listings, changelog text)
- inherited: output streams straight to the terminal (checkout, merge, push)

No timeouts are applied: a hanging tool hangs the release.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relflow.core.result import Err, Ok, Result

__all__ = [
    "CommandRunner",
    "ProcessError",
    "ProcessRunner",
    "run",
    "run_inherited",
]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never started).
        stdout: Standard output (empty in inherited mode).
        stderr: Standard error (empty in inherited mode).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def detail(self) -> str | None:
        """Most useful diagnostic text, if any was captured."""
        return self.stderr.strip() or self.stdout.strip() or None


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_inherited(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command with stdio inherited from this process.

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)


class CommandRunner(Protocol):
    """Narrow command-execution interface used by the release pipeline."""

    def run(self, cmd: Sequence[str], *, capture: bool = True) -> Result[str, ProcessError]:
        """Run ``cmd``; return captured stdout (or "" when not capturing)."""
        ...


@dataclass(frozen=True, slots=True)
class ProcessRunner:
    """CommandRunner that executes real processes in ``cwd``."""

    cwd: Path

    def run(self, cmd: Sequence[str], *, capture: bool = True) -> Result[str, ProcessError]:
        if capture:
            return run(list(cmd), cwd=self.cwd)
        result = run_inherited(list(cmd), cwd=self.cwd)
        if isinstance(result, Err):
            return result
        return Ok("")
