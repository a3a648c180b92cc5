"""Typed configuration loading.

relflow works with no configuration at all. A ``.relflow.toml`` at the
working-directory root (or a file passed with ``--config``) can override the
branch names, remote, file names and the external tool invocations:

    main_branch = "main"
    develop_branch = "develop"
    remote = "origin"
    manifest = "package.json"
    changelog = "CHANGELOG.md"
    release_prefix = "release/"
    bump = "npm"                        # or "builtin"
    changelog_command = ["npx", "changelogen", "--no-output"]
    push_release_branch = true
    push_tags = false
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list

__all__ = [
    "BumpStrategy",
    "Config",
    "ConfigError",
    "DEFAULT_CONFIG_NAME",
    "load_config",
    "resolve_config",
]

DEFAULT_CONFIG_NAME = ".relflow.toml"

BumpStrategy = Literal["npm", "builtin"]

_BUMP_STRATEGIES: tuple[BumpStrategy, ...] = ("npm", "builtin")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Config:
    main_branch: str = "main"
    develop_branch: str = "develop"
    remote: str = "origin"
    manifest: str = "package.json"
    changelog: str = "CHANGELOG.md"
    release_prefix: str = "release/"
    bump: BumpStrategy = "npm"
    changelog_command: tuple[str, ...] = ("npx", "changelogen", "--no-output")
    push_release_branch: bool = True
    push_tags: bool = False

    @property
    def required_branches(self) -> tuple[str, str]:
        return (self.main_branch, self.develop_branch)

    def release_branch(self, version: str) -> str:
        return f"{self.release_prefix}{version}"

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed TOML, falling back to defaults per key.

        Raises:
            ValueError: if ``bump`` names an unknown strategy.
        """
        defaults = cls()

        bump_raw = get_str(data, "bump")
        bump: BumpStrategy = defaults.bump
        if bump_raw is not None:
            if bump_raw not in _BUMP_STRATEGIES:
                raise ValueError(
                    f"bump must be one of {', '.join(_BUMP_STRATEGIES)} (got {bump_raw!r})"
                )
            bump = "npm" if bump_raw == "npm" else "builtin"

        push_release = get_bool(data, "push_release_branch")
        push_tags = get_bool(data, "push_tags")

        return cls(
            main_branch=get_str(data, "main_branch") or defaults.main_branch,
            develop_branch=get_str(data, "develop_branch") or defaults.develop_branch,
            remote=get_str(data, "remote") or defaults.remote,
            manifest=get_str(data, "manifest") or defaults.manifest,
            changelog=get_str(data, "changelog") or defaults.changelog,
            release_prefix=get_str(data, "release_prefix") or defaults.release_prefix,
            bump=bump,
            changelog_command=get_str_list(data, "changelog_command")
            or defaults.changelog_command,
            push_release_branch=(
                defaults.push_release_branch if push_release is None else push_release
            ),
            push_tags=defaults.push_tags if push_tags is None else push_tags,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Cannot read config: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def resolve_config(*, cwd: Path, explicit: Path | None) -> Result[Config, ConfigError]:
    """Load the explicit config file, else ``.relflow.toml`` if present, else defaults.

    An explicit path that does not exist is an error; a missing default file is not.
    """
    if explicit is not None:
        return load_config(explicit)

    default_path = cwd / DEFAULT_CONFIG_NAME
    if not default_path.exists():
        return Ok(Config())
    return load_config(default_path)
