"""Tests for the rich-based console prompter."""

import io
import subprocess

import pytest
from rich.console import Console

from dev_toolkit import prompts
from dev_toolkit.errors import PromptAborted, ToolkitError


@pytest.fixture
def prompter() -> prompts.ConsolePrompter:
    console = Console(file=io.StringIO(), width=200, color_system=None)
    return prompts.ConsolePrompter(console=console, editor_command="fake-editor --wait")


class TestConsolePrompter:
    """Verify answer handling and cancellation."""

    def test_select_returns_value_of_numbered_choice(self, prompter, monkeypatch) -> None:
        """The picked number maps back to the choice value."""
        monkeypatch.setattr(prompts.IntPrompt, "ask", lambda *args, **kwargs: 2)
        assert prompter.select("Pick", [("First", "a"), ("Second", "b")]) == "b"

    def test_select_default_index(self, prompter, monkeypatch) -> None:
        """The default value is offered as the default number."""
        seen = {}

        def fake_ask(*args, **kwargs):
            seen.update(kwargs)
            return kwargs["default"]

        monkeypatch.setattr(prompts.IntPrompt, "ask", fake_ask)
        assert prompter.select("Pick", [("A", "a"), ("B", "b"), ("C", "c")], default="c") == "c"
        assert seen["choices"] == ["1", "2", "3"]

    def test_required_text_asks_again(self, prompter, monkeypatch) -> None:
        """Blank answers to required questions are refused."""
        answers = iter(["", "  ", "value"])
        monkeypatch.setattr(prompts.Prompt, "ask", lambda *args, **kwargs: next(answers))
        assert prompter.text("Name", required=True) == "value"

    def test_ctrl_c_becomes_prompt_aborted(self, prompter, monkeypatch) -> None:
        """KeyboardInterrupt is translated into PromptAborted."""

        def interrupt(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr(prompts.Confirm, "ask", interrupt)
        with pytest.raises(PromptAborted):
            prompter.confirm("Sure?")

    def test_eof_becomes_prompt_aborted(self, prompter, monkeypatch) -> None:
        """EOFError (Ctrl+D) is translated into PromptAborted."""

        def eof(*args, **kwargs):
            raise EOFError

        monkeypatch.setattr(prompts.Prompt, "ask", eof)
        with pytest.raises(PromptAborted):
            prompter.text("Name")

    def test_editor_round_trip(self, prompter, monkeypatch) -> None:
        """The editor sees the default text and its edits are returned."""
        seen = {}

        def fake_run(cmd, check):
            seen["cmd"] = cmd[:-1]
            path = cmd[-1]
            with open(path, encoding="utf-8") as fh:
                seen["initial"] = fh.read()
            with open(path, "w", encoding="utf-8") as fh:
                fh.write("edited")
            return subprocess.CompletedProcess(cmd, 0)

        monkeypatch.setattr(prompts.subprocess, "run", fake_run)
        assert prompter.editor("Body", default="{}") == "edited"
        assert seen == {"cmd": ["fake-editor", "--wait"], "initial": "{}"}

    def test_missing_editor(self, prompter, monkeypatch) -> None:
        """A missing editor binary is reported as a toolkit error."""

        def missing(cmd, check):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(prompts.subprocess, "run", missing)
        with pytest.raises(ToolkitError, match="fake-editor"):
            prompter.editor("Body")

    def test_default_editor_command(self, monkeypatch) -> None:
        """$VISUAL wins over $EDITOR."""
        monkeypatch.setenv("EDITOR", "nano")
        monkeypatch.setenv("VISUAL", "code --wait")
        assert prompts.default_editor_command() == "code --wait"
        monkeypatch.delenv("VISUAL")
        assert prompts.default_editor_command() == "nano"
