"""
Interactive prompt collaborator.

Commands only depend on the :class:`Prompter` protocol so tests can script the
answers; :class:`ConsolePrompter` is the terminal implementation built on
``rich.prompt``.
"""

from __future__ import annotations

import functools
import os
import pathlib
import shlex
import subprocess
import sys
import tempfile
from typing import Callable, Optional, Protocol, Sequence, Tuple, TypeVar

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from .errors import PromptAborted, ToolkitError
from .logging_utils import console as default_console

Choice = Tuple[str, str]  # (label, value)

T = TypeVar("T")


class Prompter(Protocol):
    def select(self, message: str, choices: Sequence[Choice], default: Optional[str] = None) -> str:
        ...

    def text(self, message: str, default: str = "", required: bool = False) -> str:
        ...

    def confirm(self, message: str, default: bool = False) -> bool:
        ...

    def editor(self, message: str, default: str = "") -> str:
        ...


def _abortable(func: Callable[..., T]) -> Callable[..., T]:
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptAborted("Prompt cancelled by user") from exc

    return wrapper


def default_editor_command() -> str:
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR")
    if editor:
        return editor
    return "notepad" if sys.platform.startswith("win") else "vi"


class ConsolePrompter:
    def __init__(self, console: Optional[Console] = None, editor_command: Optional[str] = None) -> None:
        self.console = console or default_console
        self.editor_command = editor_command

    @_abortable
    def select(self, message: str, choices: Sequence[Choice], default: Optional[str] = None) -> str:
        if not choices:
            raise ValueError("select() needs at least one choice")
        self.console.print(f"[bold]{escape(message)}[/bold]")
        default_index = 1
        for index, (label, value) in enumerate(choices, start=1):
            if value == default:
                default_index = index
            self.console.print(f"  [cyan]{index}[/cyan]) {escape(label)}")
        picked = IntPrompt.ask(
            "Choice",
            console=self.console,
            choices=[str(i) for i in range(1, len(choices) + 1)],
            default=default_index,
        )
        return choices[picked - 1][1]

    @_abortable
    def text(self, message: str, default: str = "", required: bool = False) -> str:
        while True:
            answer = Prompt.ask(escape(message), console=self.console, default=default, show_default=bool(default))
            if not required or answer.strip():
                return answer
            self.console.print("[red]A value is required.[/red]")

    @_abortable
    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(escape(message), console=self.console, default=default)

    @_abortable
    def editor(self, message: str, default: str = "") -> str:
        self.console.print(f"[bold]{escape(message)}[/bold]")
        command = self.editor_command or default_editor_command()
        handle, name = tempfile.mkstemp(suffix=".md", prefix="dev-toolkit-")
        path = pathlib.Path(name)
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as fh:
                fh.write(default)
            try:
                subprocess.run([*shlex.split(command), str(path)], check=True)
            except FileNotFoundError as exc:
                raise ToolkitError(f"Editor {command!r} was not found. Set $EDITOR.") from exc
            except subprocess.CalledProcessError as exc:
                raise PromptAborted(f"Editor exited with status {exc.returncode}") from exc
            return path.read_text(encoding="utf-8")
        finally:
            path.unlink(missing_ok=True)
