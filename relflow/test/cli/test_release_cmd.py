from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from relflow import __version__
from relflow.cli.app import app
from relflow.cli.commands.release_cmd import run_release
from relflow.core.config import Config
from relflow.output.console import MockConsole
from relflow.test.fakes import FakeRunner

CONFIG = Config(bump="builtin")
MERGE_DEVELOP = (
    "git",
    "merge",
    "--no-ff",
    "release/1.2.4",
    "-m",
    "chore: merge release 1.2.4 into develop",
)

cli = CliRunner()


def _write_manifest(root: Path, version: str = "1.2.3") -> None:
    (root / "package.json").write_text(
        json.dumps({"name": "demo", "version": version}, indent=2) + "\n"
    )


def _runner() -> FakeRunner:
    runner = FakeRunner().with_branches("main", "develop")
    runner.reply("git", "rev-parse", "--abbrev-ref", "HEAD", stdout="develop\n")
    return runner


# =============================================================================
# run_release
# =============================================================================


def test_run_release_success_returns_zero(tmp_path: Path) -> None:
    _write_manifest(tmp_path)
    console = MockConsole()

    code = run_release(
        increment="patch",
        cwd=tmp_path,
        config=CONFIG,
        console=console,
        runner=_runner(),
        assume_yes=True,
    )

    assert code == 0
    assert console.has_success()
    assert not console.has_error()
    assert console.prompts == []


def test_run_release_usage_error_reports_nothing_left_behind(tmp_path: Path) -> None:
    _write_manifest(tmp_path)
    console = MockConsole()

    code = run_release(
        increment=None,
        cwd=tmp_path,
        config=CONFIG,
        console=console,
        runner=_runner(),
    )

    assert code == 1
    assert console.find("Usage: relflow [major|minor|patch]")
    assert not console.find("Left in place")


def test_run_release_missing_manifest(tmp_path: Path) -> None:
    console = MockConsole()

    code = run_release(
        increment="minor",
        cwd=tmp_path,
        config=CONFIG,
        console=console,
        runner=_runner(),
    )

    assert code == 1
    assert console.find("package.json not found")


def test_run_release_stage_failure_lists_left_behind_state(tmp_path: Path) -> None:
    _write_manifest(tmp_path)
    runner = _runner()
    runner.fail(*MERGE_DEVELOP, stderr="CONFLICT (content): Merge conflict in CHANGELOG.md")
    console = MockConsole()

    code = run_release(
        increment="patch",
        cwd=tmp_path,
        config=CONFIG,
        console=console,
        runner=runner,
        assume_yes=True,
    )

    assert code == 1
    assert console.find("An error occurred during the release process (merge-develop)")
    assert console.find("stopped at stage: merge-develop")
    assert console.find("Left in place (no automatic rollback)")
    assert console.find('committed "chore: v1.2.4" on release/1.2.4')
    assert not console.has_success()


def test_run_release_undecodable_changelog_reports_left_behind_state(tmp_path: Path) -> None:
    _write_manifest(tmp_path)
    (tmp_path / "CHANGELOG.md").write_bytes(b"# caf\xe9\n")
    runner = _runner()
    runner.reply(
        "npx", "changelogen", "--no-output", "--to", "release/1.2.4", stdout="## v1.2.4\n"
    )
    console = MockConsole()

    code = run_release(
        increment="patch",
        cwd=tmp_path,
        config=CONFIG,
        console=console,
        runner=runner,
        assume_yes=True,
    )

    assert code == 1
    assert console.find("An error occurred during the release process (changelog)")
    assert console.find("stopped at stage: changelog")
    assert console.find("created branch release/1.2.4 from develop (checked out)")


def test_run_release_extra_argument_is_a_usage_error(tmp_path: Path) -> None:
    _write_manifest(tmp_path)
    runner = _runner()
    console = MockConsole()

    code = run_release(
        increment="patch",
        extra_args=["minor"],
        cwd=tmp_path,
        config=CONFIG,
        console=console,
        runner=runner,
    )

    assert code == 1
    assert console.find("Usage: relflow [major|minor|patch]")
    assert runner.calls == []


def test_run_release_declined_gate(tmp_path: Path) -> None:
    _write_manifest(tmp_path)
    runner = _runner()
    console = MockConsole()

    code = run_release(
        increment="patch",
        cwd=tmp_path,
        config=CONFIG,
        console=console,
        runner=runner,
        stdin=io.StringIO("n\n"),
    )

    assert code == 1
    assert console.prompts == ["Reading current version proceed? (y/n)"]
    assert console.find("Operation cancelled by user")
    assert console.find("no changes were made")
    assert runner.mutations == []


# =============================================================================
# CLI surface
# =============================================================================


def test_version_flag() -> None:
    result = cli.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


@pytest.mark.parametrize(
    "args", [[], ["huge"], ["patch", "minor"], ["--bogus", "patch"], ["patch", "--bogus"]]
)
def test_bad_increment_exits_one(tmp_path: Path, args: list[str]) -> None:
    _write_manifest(tmp_path)

    result = cli.invoke(app, ["--cwd", str(tmp_path), *args])

    assert result.exit_code == 1


def test_missing_cwd_exits_one(tmp_path: Path) -> None:
    result = cli.invoke(app, ["--cwd", str(tmp_path / "nope"), "patch"])

    assert result.exit_code == 1


def test_missing_explicit_config_exits_one(tmp_path: Path) -> None:
    _write_manifest(tmp_path)

    result = cli.invoke(
        app, ["--cwd", str(tmp_path), "--config", str(tmp_path / "missing.toml"), "patch"]
    )

    assert result.exit_code == 1


def test_invalid_config_exits_one(tmp_path: Path) -> None:
    _write_manifest(tmp_path)
    (tmp_path / ".relflow.toml").write_text('bump = "cargo"\n')

    result = cli.invoke(app, ["--cwd", str(tmp_path), "patch"])

    assert result.exit_code == 1
