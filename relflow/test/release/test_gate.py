from __future__ import annotations

import io

import pytest

from relflow.core.result import Err, Ok
from relflow.output.console import MockConsole
from relflow.release.errors import UserCancellation
from relflow.release.gate import ConfirmationGate


def _gate(answers: str) -> tuple[ConfirmationGate, MockConsole]:
    console = MockConsole()
    return ConfirmationGate(console, stream=io.StringIO(answers)), console


@pytest.mark.parametrize("answer", ["y\n", "Y\n", "yes\n", "\n", "  y  \n"])
def test_accepting_answers(answer: str) -> None:
    gate, console = _gate(answer)

    assert gate.ask("Bumping version") == Ok(None)
    assert console.prompts == ["Bumping version proceed? (y/n)"]


@pytest.mark.parametrize("answer", ["n\n", "N\n", "no\n"])
def test_declining_answers(answer: str) -> None:
    gate, _ = _gate(answer)

    assert gate.ask("Pushing main") == Err(UserCancellation(prompt="Pushing main"))


def test_end_of_input_accepts() -> None:
    gate, _ = _gate("")

    assert gate.ask("Committing changes") == Ok(None)
    assert gate.ask("Pushing develop") == Ok(None)


def test_unrecognized_answer_asks_again() -> None:
    gate, console = _gate("maybe\nq\nn\n")

    result = gate.ask("Merging release branch into main")

    assert isinstance(result, Err)
    assert len(console.prompts) == 3


def test_each_gate_consumes_one_line() -> None:
    gate, _ = _gate("y\nn\n")

    assert gate.ask("first") == Ok(None)
    assert isinstance(gate.ask("second"), Err)


def test_assume_yes_never_reads_or_prompts() -> None:
    console = MockConsole()
    stream = io.StringIO("n\n")
    gate = ConfirmationGate(console, stream=stream, assume_yes=True)

    assert gate.ask("Pushing main") == Ok(None)
    assert console.prompts == []
    assert stream.read() == "n\n"
