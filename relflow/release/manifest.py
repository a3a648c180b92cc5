"""Package manifest access (``package.json``).

The manifest is the single source of the release version. Bumping is
delegated to ``npm version <kind> --no-git-tag-version`` by default, which
rewrites the file but never commits or tags. The ``builtin`` strategy does
the same rewrite in-process for repositories without npm.
"""

from __future__ import annotations

import json
from pathlib import Path

from relflow.core.config import BumpStrategy
from relflow.core.result import Err, Ok, Result
from relflow.core.structured import StrDict, as_str_dict, get_str
from relflow.output.console import ConsoleProtocol
from relflow.platform.files import atomic_write_text
from relflow.platform.process import CommandRunner
from relflow.release.errors import ConfigurationError, StageFailure
from relflow.release.model import Increment
from relflow.release.semver import parse_version


def _load(path: Path) -> Result[StrDict, ConfigurationError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ConfigurationError(path=path, reason="not found"))
    except UnicodeDecodeError:
        return Err(ConfigurationError(path=path, reason="not valid UTF-8"))
    except OSError as e:
        return Err(ConfigurationError(path=path, reason=f"unreadable: {e}"))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ConfigurationError(path=path, reason=f"invalid JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(ConfigurationError(path=path, reason="JSON root must be an object"))
    return Ok(data)


def read_version(path: Path) -> Result[str, ConfigurationError]:
    """Read the ``version`` field of the manifest."""
    loaded = _load(path)
    if isinstance(loaded, Err):
        return loaded

    value = get_str(loaded.value, "version")
    if value is None:
        return Err(ConfigurationError(path=path, reason="missing version field"))
    return Ok(value)


def write_version(path: Path, version: str) -> Result[bool, ConfigurationError]:
    """Set the manifest version, keeping key order. Returns False if unchanged."""
    loaded = _load(path)
    if isinstance(loaded, Err):
        return loaded

    data = loaded.value
    if get_str(data, "version") == version:
        return Ok(False)
    data["version"] = version

    try:
        atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return Err(ConfigurationError(path=path, reason=f"failed to write: {e}"))
    return Ok(True)


def bump_version(
    *,
    path: Path,
    increment: Increment,
    strategy: BumpStrategy,
    runner: CommandRunner,
    console: ConsoleProtocol,
) -> Result[None, ConfigurationError | StageFailure]:
    """Advance the manifest version by ``increment`` without committing or tagging."""
    if strategy == "npm":
        cmd = ["npm", "version", increment, "--no-git-tag-version"]
        console.command(cmd)
        result = runner.run(cmd, capture=False)
        if isinstance(result, Err):
            e = result.error
            return Err(StageFailure(stage="bump-version", message=str(e), detail=e.detail))
        return Ok(None)

    current = read_version(path)
    if isinstance(current, Err):
        return current

    parsed = parse_version(current.value)
    if parsed is None:
        return Err(
            StageFailure(
                stage="bump-version",
                message=f"cannot bump non-semver version: {current.value}",
                detail="Expected MAJOR.MINOR.PATCH",
            )
        )

    written = write_version(path, str(parsed.bump(increment)))
    if isinstance(written, Err):
        return written
    return Ok(None)
