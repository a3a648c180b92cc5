from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relflow.core.config import Config, resolve_config
from relflow.core.errors import ErrorCode
from relflow.core.result import Err
from relflow.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    config: Config
    console: ConsoleProtocol


def build_context(*, cwd: Path | None, config_path: Path | None) -> CLIContext:
    try:
        root = (cwd or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --cwd: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    if not root.is_dir():
        typer.echo(f"error: --cwd '{root}' is not a directory", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    config_result = resolve_config(cwd=root, explicit=config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(cwd=root, config=config_result.value, console=RichConsole())
