"""Platform layer: processes and files."""

from .files import atomic_write_text, read_text_if_exists
from .process import (
    CommandRunner,
    ProcessError,
    ProcessRunner,
    run,
    run_inherited,
)

__all__ = [
    # files
    "atomic_write_text",
    "read_text_if_exists",
    # process
    "CommandRunner",
    "ProcessError",
    "ProcessRunner",
    "run",
    "run_inherited",
]
