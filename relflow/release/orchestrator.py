"""Release orchestration: preconditions, then the ordered release stages.

A run is strictly linear:

    read-version -> bump-version -> read-new-version -> create-branch
    -> changelog -> commit -> merge-develop -> merge-main
    -> push-main -> push-develop -> push-release

Every stage is preceded by a confirmation gate. The first failure (or a
declined gate) ends the run; whatever was already applied stays in place and
is listed in ``ReleaseContext.left_behind``. Nothing is rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TypeAlias

from relflow.core.config import Config
from relflow.core.result import Err, Ok, Result
from relflow.git.repository import GitError, Repository
from relflow.output.console import ConsoleProtocol
from relflow.platform.process import CommandRunner
from relflow.release.changelog import (
    generate_changelog,
    prepend_changelog,
    select_previous_release,
)
from relflow.release.context import ReleaseContext
from relflow.release.errors import (
    ConfigurationError,
    PreconditionError,
    ReleaseFailure,
    StageFailure,
    UsageError,
)
from relflow.release.gate import ConfirmationGate
from relflow.release.manifest import bump_version, read_version
from relflow.release.model import INCREMENTS, Increment, parse_increment

StageResult: TypeAlias = Result[None, ReleaseFailure]
Stage: TypeAlias = tuple[str, str, Callable[[ReleaseContext], StageResult]]

USAGE = f"Usage: relflow [{'|'.join(INCREMENTS)}]"


def _stage_error(stage: str, error: GitError) -> Err[StageFailure]:
    return Err(StageFailure(stage=stage, message=str(error)))


class ReleaseOrchestrator:
    """Runs one release against the repository in ``cwd``.

    Args:
        cwd: Working directory holding the manifest and the git checkout
        config: Branch names, remote, files and tool commands
        runner: Executes git/npm/changelog commands
        console: Operator output
        gate: Confirmation prompts
    """

    def __init__(
        self,
        *,
        cwd: Path,
        config: Config,
        runner: CommandRunner,
        console: ConsoleProtocol,
        gate: ConfirmationGate,
    ) -> None:
        self._cwd = cwd
        self._config = config
        self._runner = runner
        self._console = console
        self._gate = gate
        self._repo = Repository(runner, console)
        self.context: ReleaseContext | None = None

    def run(
        self, increment_arg: str | None, *, extra_args: Sequence[str] = ()
    ) -> Result[ReleaseContext, ReleaseFailure]:
        checked = self.check_preconditions(increment_arg, extra_args=extra_args)
        if isinstance(checked, Err):
            return checked

        ctx = ReleaseContext(
            cwd=self._cwd,
            increment=checked.value,
            config=self._config,
            current_branch=self._repo.current_branch(),
        )
        self.context = ctx

        for name, description, step in self._stages():
            ctx.stage = name
            confirmed = self._gate.ask(description)
            if isinstance(confirmed, Err):
                return confirmed
            result = step(ctx)
            if isinstance(result, Err):
                return result

        ctx.stage = None
        self._console.success(f"Release {ctx.new_version} completed successfully!")
        return Ok(ctx)

    # -- preconditions -------------------------------------------------------

    def check_preconditions(
        self, increment_arg: str | None, *, extra_args: Sequence[str] = ()
    ) -> Result[Increment, UsageError | ConfigurationError | PreconditionError]:
        """Validate argument, manifest and long-lived branches; mutates nothing.

        Exactly one increment is accepted; any ``extra_args`` is a usage error.
        """
        increment = parse_increment(increment_arg)
        if increment is None or extra_args:
            return Err(UsageError(message=USAGE))

        manifest = self._cwd / self._config.manifest
        if not manifest.is_file():
            return Err(ConfigurationError(path=manifest, reason="not found"))
        version = read_version(manifest)
        if isinstance(version, Err):
            return version

        for branch in self._config.required_branches:
            exists = self._repo.branch_exists(branch)
            if isinstance(exists, Err):
                return Err(PreconditionError(message=str(exists.error)))
            if not exists.value:
                return Err(
                    PreconditionError(message=f'Branch "{branch}" does not exist', branch=branch)
                )

        return Ok(increment)

    # -- stages --------------------------------------------------------------

    def _stages(self) -> list[Stage]:
        main = self._config.main_branch
        develop = self._config.develop_branch
        stages: list[Stage] = [
            ("read-version", "Reading current version", self._read_version),
            ("bump-version", "Bumping version", self._bump_version),
            ("read-new-version", "Reading updated version", self._read_new_version),
            ("create-branch", "Creating release branch", self._create_branch),
            ("changelog", "Generating changelog", self._update_changelog),
            ("commit", "Committing changes", self._commit),
            ("merge-develop", f"Merging release branch into {develop}", self._merge_develop),
            ("merge-main", f"Merging release branch into {main}", self._merge_main),
            ("push-main", f"Pushing {main}", self._push_main),
            ("push-develop", f"Pushing {develop}", self._push_develop),
        ]
        if self._config.push_release_branch:
            stages.append(("push-release", "Pushing release branch", self._push_release))
        return stages

    def _read_version(self, ctx: ReleaseContext) -> StageResult:
        version = read_version(ctx.manifest_path)
        if isinstance(version, Err):
            return version
        ctx.previous_version = version.value
        self._console.info(f"Current version: {version.value}")
        return Ok(None)

    def _bump_version(self, ctx: ReleaseContext) -> StageResult:
        bumped = bump_version(
            path=ctx.manifest_path,
            increment=ctx.increment,
            strategy=self._config.bump,
            runner=self._runner,
            console=self._console,
        )
        if isinstance(bumped, Err):
            return bumped
        ctx.record(f"{self._config.manifest}: version bumped ({ctx.increment}), not committed")
        self._console.success(f"Bumped to {ctx.increment}")
        return Ok(None)

    def _read_new_version(self, ctx: ReleaseContext) -> StageResult:
        version = read_version(ctx.manifest_path)
        if isinstance(version, Err):
            return version
        if version.value == ctx.previous_version:
            return Err(
                StageFailure(
                    stage="read-new-version",
                    message=f"version unchanged after bump: {version.value}",
                    detail=f"check the {ctx.config.bump} bump of {self._config.manifest}",
                )
            )
        ctx.new_version = version.value
        ctx.release_branch = self._config.release_branch(version.value)
        self._console.info(f"New version: {version.value}")
        return Ok(None)

    def _create_branch(self, ctx: ReleaseContext) -> StageResult:
        branch = _require(ctx.release_branch)
        exists = self._repo.branch_exists(branch)
        if isinstance(exists, Err):
            return _stage_error("create-branch", exists.error)

        if exists.value:
            self._console.warning(f"Branch {branch} already exists.")
            confirmed = self._gate.ask("Should we delete it?")
            if isinstance(confirmed, Err):
                return confirmed
            deleted = self._repo.delete_branch(branch)
            if isinstance(deleted, Err):
                return _stage_error("create-branch", deleted.error)
            ctx.record(f"deleted stale branch {branch}")

        base = ctx.current_branch or "HEAD"
        created = self._repo.create_branch(branch)
        if isinstance(created, Err):
            return _stage_error("create-branch", created.error)
        ctx.current_branch = branch
        ctx.record(f"created branch {branch} from {base} (checked out)")
        return Ok(None)

    def _update_changelog(self, ctx: ReleaseContext) -> StageResult:
        branch = _require(ctx.release_branch)
        listed = self._repo.list_branches(
            f"{self._config.release_prefix}*", sort="-committerdate"
        )
        if isinstance(listed, Err):
            return _stage_error("changelog", listed.error)

        previous = select_previous_release(listed.value, current=branch)
        ctx.previous_release_branch = previous
        if previous is not None:
            self._console.info(f"Previous release branch detected: {previous}")
        else:
            self._console.info("No previous release branch detected. This is the first release.")

        generated = generate_changelog(
            runner=self._runner,
            console=self._console,
            base_command=self._config.changelog_command,
            from_ref=previous,
            to_ref=branch,
        )
        if isinstance(generated, Err):
            return generated

        if not generated.value.strip():
            self._console.warning(
                f"changelog generator produced no output; {self._config.changelog} left unchanged"
            )
            return Ok(None)

        updated = prepend_changelog(ctx.changelog_path, generated.value)
        if isinstance(updated, Err):
            return updated
        verb = "created" if updated.value.created else "updated"
        ctx.record(f"{self._config.changelog}: {verb}, not committed")
        self._console.success(f"{self._config.changelog} {verb}")
        return Ok(None)

    def _commit(self, ctx: ReleaseContext) -> StageResult:
        message = f"chore: v{ctx.new_version}"
        added = self._repo.add_all()
        if isinstance(added, Err):
            return _stage_error("commit", added.error)
        committed = self._repo.commit(message)
        if isinstance(committed, Err):
            return _stage_error("commit", committed.error)
        ctx.record(f'committed "{message}" on {ctx.release_branch}')
        return Ok(None)

    def _merge_into(self, ctx: ReleaseContext, *, stage: str, target: str) -> StageResult:
        branch = _require(ctx.release_branch)
        checked_out = self._repo.checkout(target)
        if isinstance(checked_out, Err):
            return _stage_error(stage, checked_out.error)
        ctx.current_branch = target

        merged = self._repo.merge_no_ff(
            branch, f"chore: merge release {ctx.new_version} into {target}"
        )
        if isinstance(merged, Err):
            return _stage_error(stage, merged.error)
        ctx.record(f"merged {branch} into {target} (not pushed)")
        return Ok(None)

    def _merge_develop(self, ctx: ReleaseContext) -> StageResult:
        return self._merge_into(ctx, stage="merge-develop", target=self._config.develop_branch)

    def _merge_main(self, ctx: ReleaseContext) -> StageResult:
        merged = self._merge_into(ctx, stage="merge-main", target=self._config.main_branch)
        if isinstance(merged, Err):
            return merged

        tag = _require(ctx.tag)
        tagged = self._repo.tag_annotated(tag, f"Release {ctx.new_version}")
        if isinstance(tagged, Err):
            return _stage_error("merge-main", tagged.error)
        ctx.record(f"tagged {tag} on {self._config.main_branch}")
        return Ok(None)

    def _push(
        self, ctx: ReleaseContext, *, stage: str, branch: str, tags: bool = False
    ) -> StageResult:
        pushed = self._repo.push(self._config.remote, branch, tags=tags)
        if isinstance(pushed, Err):
            return _stage_error(stage, pushed.error)
        ctx.record(f"pushed {branch} to {self._config.remote}")
        return Ok(None)

    def _push_main(self, ctx: ReleaseContext) -> StageResult:
        return self._push(
            ctx, stage="push-main", branch=self._config.main_branch, tags=self._config.push_tags
        )

    def _push_develop(self, ctx: ReleaseContext) -> StageResult:
        return self._push(ctx, stage="push-develop", branch=self._config.develop_branch)

    def _push_release(self, ctx: ReleaseContext) -> StageResult:
        return self._push(ctx, stage="push-release", branch=_require(ctx.release_branch))


def _require(value: str | None) -> str:
    if value is None:
        raise AssertionError("release stage ran out of order")
    return value
