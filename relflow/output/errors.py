"""Error presentation utilities.

Centralized failure formatting and exit code mapping for the release command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relflow.core.errors import ErrorCode
from relflow.output.console import Style
from relflow.release.errors import (
    ConfigurationError,
    PreconditionError,
    ReleaseFailure,
    StageFailure,
    UsageError,
    UserCancellation,
)

if TYPE_CHECKING:
    from relflow.output.console import ConsoleProtocol
    from relflow.release.context import ReleaseContext

__all__ = ["print_left_behind", "print_release_failure", "release_failure_exit_code"]


def print_release_failure(failure: ReleaseFailure, console: ConsoleProtocol) -> None:
    match failure:
        case UsageError(message=message):
            console.error(message)
        case ConfigurationError(path=path, reason=reason):
            console.error(f"{path.name} {reason}")
            console.print(f"hint: {path}", Style.DIM)
        case PreconditionError(message=message):
            console.error(message)
        case StageFailure(stage=stage, message=message, detail=detail):
            console.error(f"An error occurred during the release process ({stage}): {message}")
            if detail:
                console.print(detail, Style.DIM)
        case UserCancellation():
            console.warning(failure.message)


def print_left_behind(ctx: ReleaseContext, console: ConsoleProtocol) -> None:
    """Tell the operator where the run stopped and what it already changed."""
    if ctx.stage is not None:
        console.print(f"stopped at stage: {ctx.stage}", Style.DIM)
    if not ctx.left_behind:
        console.print("no changes were made", Style.DIM)
        return

    console.header("Left in place (no automatic rollback)")
    for note in ctx.left_behind:
        console.print(f"- {note}")
    if ctx.current_branch is not None:
        console.print(f"current branch: {ctx.current_branch}", Style.DIM)


def release_failure_exit_code(failure: ReleaseFailure) -> int:
    """Every failure kind terminates with the same status."""
    del failure
    return int(ErrorCode.FAILURE)
