from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from relflow.core.config import Config
from relflow.release.model import Increment


def _empty_notes() -> list[str]:
    return []


@dataclass
class ReleaseContext:
    """Mutable state threaded through one release run.

    ``current_branch`` is updated after every checkout so the pipeline never
    has to ask git where it is. ``left_behind`` lists each mutation already
    applied, in order; it is what the operator has to inspect or undo when a
    later stage fails.
    """

    cwd: Path
    increment: Increment
    config: Config
    current_branch: str | None = None
    stage: str | None = None
    previous_version: str | None = None
    new_version: str | None = None
    release_branch: str | None = None
    previous_release_branch: str | None = None
    left_behind: list[str] = field(default_factory=_empty_notes)

    @property
    def manifest_path(self) -> Path:
        return self.cwd / self.config.manifest

    @property
    def changelog_path(self) -> Path:
        return self.cwd / self.config.changelog

    @property
    def tag(self) -> str | None:
        if self.new_version is None:
            return None
        return f"v{self.new_version}"

    def record(self, note: str) -> None:
        self.left_behind.append(note)
