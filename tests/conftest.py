"""Shared fixtures: a scripted prompter and a capturing console."""

from __future__ import annotations

import io
from typing import Any, List, Optional, Sequence, Tuple

import pytest
from rich.console import Console

from dev_toolkit.prompts import Choice


class FakePrompter:
    """Return pre-scripted answers in call order and record every question."""

    def __init__(self, answers: Sequence[Any] = ()) -> None:
        self.answers: List[Any] = list(answers)
        self.calls: List[Tuple[str, str]] = []

    def _next(self, kind: str, message: str) -> Any:
        self.calls.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def select(self, message: str, choices: Sequence[Choice], default: Optional[str] = None) -> str:
        answer = self._next("select", message)
        assert answer in [value for _label, value in choices], f"{answer!r} is not a valid choice"
        return answer

    def text(self, message: str, default: str = "", required: bool = False) -> str:
        return self._next("text", message)

    def confirm(self, message: str, default: bool = False) -> bool:
        return self._next("confirm", message)

    def editor(self, message: str, default: str = "") -> str:
        return self._next("editor", message)


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, soft_wrap=True, color_system=None, highlight=False)


def output_of(console: Console) -> str:
    return console.file.getvalue()
