from __future__ import annotations

import typer

from relflow.cli.commands.release_cmd import release


# A single registered command becomes the root command: `relflow patch`.
app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)

# Stray arguments are collected rather than rejected by click (exit 2) so
# they surface as the usual usage error with exit code 1.
app.command(context_settings={"ignore_unknown_options": True, "allow_extra_args": True})(
    release
)


def main() -> None:
    app()
