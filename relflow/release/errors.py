"""Failure types for a release run.

Each variant is a frozen dataclass; ``ReleaseFailure`` is their union. They
travel inside ``Err`` values and are rendered by ``relflow.output.errors``.
All of them end the run: nothing is retried or recovered locally.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class UsageError:
    """Bad or missing CLI argument."""

    message: str


@dataclass(frozen=True, slots=True)
class ConfigurationError:
    """Manifest or config file missing or unusable."""

    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"{self.path.name}: {self.reason}"


@dataclass(frozen=True, slots=True)
class PreconditionError:
    """A required long-lived branch is missing (or git is unusable)."""

    message: str
    branch: str | None = None


@dataclass(frozen=True, slots=True)
class StageFailure:
    """An external command or file operation failed during a stage."""

    stage: str
    message: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class UserCancellation:
    """The operator declined a confirmation gate."""

    prompt: str

    @property
    def message(self) -> str:
        return "Operation cancelled by user"


ReleaseFailure = (
    UsageError | ConfigurationError | PreconditionError | StageFailure | UserCancellation
)
