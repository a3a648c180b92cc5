from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

import typer

from relflow import __version__
from relflow.cli.context import build_context
from relflow.core.config import Config
from relflow.core.errors import ErrorCode
from relflow.core.result import Err
from relflow.output.console import ConsoleProtocol
from relflow.output.errors import (
    print_left_behind,
    print_release_failure,
    release_failure_exit_code,
)
from relflow.platform.process import CommandRunner, ProcessRunner
from relflow.release.gate import ConfirmationGate
from relflow.release.orchestrator import ReleaseOrchestrator


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def run_release(
    *,
    increment: str | None,
    extra_args: Sequence[str] = (),
    cwd: Path,
    config: Config,
    console: ConsoleProtocol,
    runner: CommandRunner,
    stdin: TextIO | None = None,
    assume_yes: bool = False,
) -> int:
    """Run one release and return the process exit code."""
    gate = ConfirmationGate(console, stream=stdin, assume_yes=assume_yes)
    orchestrator = ReleaseOrchestrator(
        cwd=cwd,
        config=config,
        runner=runner,
        console=console,
        gate=gate,
    )

    result = orchestrator.run(increment, extra_args=extra_args)
    if isinstance(result, Err):
        print_release_failure(result.error, console)
        if orchestrator.context is not None:
            print_left_behind(orchestrator.context, console)
        return release_failure_exit_code(result.error)
    return int(ErrorCode.OK)


def release(
    typer_ctx: typer.Context,
    increment: str | None = typer.Argument(
        None,
        metavar="[major|minor|patch]",
        help="Which version component to increment.",
        show_default=False,
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Proceed without confirmation prompts."),
    cwd: Path | None = typer.Option(
        None,
        "--cwd",
        "-C",
        help="Repository root (defaults to the current directory).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (defaults to .relflow.toml in the repository root).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Bump the version, write the changelog, merge release/<version> and push."""
    del version
    ctx = build_context(cwd=cwd, config_path=config_path)
    code = run_release(
        increment=increment,
        extra_args=tuple(typer_ctx.args),
        cwd=ctx.cwd,
        config=ctx.config,
        console=ctx.console,
        runner=ProcessRunner(ctx.cwd),
        assume_yes=yes,
    )
    if code != int(ErrorCode.OK):
        raise typer.Exit(code=code)
