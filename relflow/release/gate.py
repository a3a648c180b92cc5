"""Yes/no confirmation before each pipeline stage.

Answers are read line by line from an injectable text stream:

- ``y...`` or an empty line: proceed
- ``n...``: cancel the whole run
- end of input: proceed, so the tool runs unattended when stdin is closed
  or redirected from ``/dev/null``

Anything else asks again.
"""

from __future__ import annotations

import sys
from typing import TextIO

from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol
from relflow.release.errors import UserCancellation


class ConfirmationGate:
    def __init__(
        self,
        console: ConsoleProtocol,
        *,
        stream: TextIO | None = None,
        assume_yes: bool = False,
    ) -> None:
        self._console = console
        self._stream = stream
        self._assume_yes = assume_yes

    def ask(self, description: str) -> Result[None, UserCancellation]:
        """Ask ``"<description> proceed? (y/n)"``; Err when the operator says no."""
        if self._assume_yes:
            return Ok(None)

        stream = self._stream if self._stream is not None else sys.stdin
        while True:
            self._console.prompt(f"{description} proceed? (y/n)")
            line = stream.readline()
            if line == "":
                return Ok(None)

            answer = line.strip().lower()
            if answer == "" or answer.startswith("y"):
                return Ok(None)
            if answer.startswith("n"):
                return Err(UserCancellation(prompt=description))
