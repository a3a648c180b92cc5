"""Changelog generation and the prepend-only changelog record.

Generation is delegated to an external tool (``npx changelogen`` by default)
invoked over a ref range: ``--from <previous release branch> --to <new
release branch>``, or ``--to <new release branch>`` alone for the first
release. Its stdout becomes the new section of the changelog record.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol
from relflow.platform.files import atomic_write_text, read_text_if_exists
from relflow.platform.process import CommandRunner
from relflow.release.errors import StageFailure


@dataclass(frozen=True, slots=True)
class ChangelogUpdate:
    path: Path
    created: bool


def select_previous_release(branches: Sequence[str], *, current: str) -> str | None:
    """Pick the most recent release branch other than ``current``.

    ``branches`` must already be sorted newest first.
    """
    for branch in branches:
        if branch != current:
            return branch
    return None


def changelog_command(
    base: Sequence[str], *, from_ref: str | None, to_ref: str
) -> list[str]:
    cmd = list(base)
    if from_ref is not None:
        cmd += ["--from", from_ref]
    cmd += ["--to", to_ref]
    return cmd


def generate_changelog(
    *,
    runner: CommandRunner,
    console: ConsoleProtocol,
    base_command: Sequence[str],
    from_ref: str | None,
    to_ref: str,
) -> Result[str, StageFailure]:
    cmd = changelog_command(base_command, from_ref=from_ref, to_ref=to_ref)
    console.command(cmd)
    result = runner.run(cmd, capture=True)
    if isinstance(result, Err):
        e = result.error
        return Err(StageFailure(stage="changelog", message=str(e), detail=e.detail))
    return Ok(result.value)


def merge_changelog(new_content: str, existing: str | None) -> str:
    """Place ``new_content`` above ``existing``.

    The existing text is appended unmodified after a single blank line.
    """
    head = new_content.strip()
    if existing is None:
        return head + "\n"
    return f"{head}\n\n{existing}"


def prepend_changelog(path: Path, new_content: str) -> Result[ChangelogUpdate, StageFailure]:
    try:
        existing = read_text_if_exists(path)
        atomic_write_text(path, merge_changelog(new_content, existing))
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            StageFailure(
                stage="changelog",
                message=f"failed to update {path.name}: {e}",
                detail=str(path),
            )
        )
    return Ok(ChangelogUpdate(path=path, created=existing is None))
