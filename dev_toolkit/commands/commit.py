"""
Conventional-commit message composer.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from ..errors import ToolkitError, ValidationError
from ..logging_utils import console as default_console
from ..prompts import Choice, Prompter

logger = logging.getLogger(__name__)

COMMIT_TYPES: List[Choice] = [
    ("feat: A new feature", "feat"),
    ("fix: A bug fix", "fix"),
    ("docs: Documentation only changes", "docs"),
    ("style: Changes that do not affect the meaning of the code", "style"),
    ("refactor: A code change that neither fixes a bug nor adds a feature", "refactor"),
    ("perf: A code change that improves performance", "perf"),
    ("test: Adding missing tests or correcting existing tests", "test"),
    ("build: Changes that affect the build system or external dependencies", "build"),
    ("ci: Changes to CI configuration files and scripts", "ci"),
    ("chore: Other changes that do not modify src or test files", "chore"),
    ("revert: Reverts a previous commit", "revert"),
]

GitRunner = Callable[[Sequence[str]], str]

NOT_A_REPOSITORY = 128


def run_git(args: Sequence[str]) -> str:
    """Run ``git <args>`` and return its stdout."""
    logger.debug("git %s", " ".join(args))
    try:
        completed = subprocess.run(["git", *args], capture_output=True, text=True, check=True)
    except FileNotFoundError as exc:
        raise ToolkitError("git is not installed or not found in PATH.") from exc
    except subprocess.CalledProcessError as exc:
        if exc.returncode == NOT_A_REPOSITORY:
            raise ToolkitError("Not a git repository. Please run this command in a git repository.") from exc
        detail = (exc.stderr or exc.stdout or "").strip()
        raise ToolkitError(f"Error during git operation: {detail or exc}") from exc
    return completed.stdout


def build_commit_message(commit_type: str, scope: str, message: str) -> str:
    """
    Format ``type(scope): message``.

    The message is trimmed and its first character lower-cased; a blank scope
    produces ``type: message``.
    """
    text = message.strip()
    if not text:
        raise ValidationError("Commit message cannot be empty")
    text = text[0].lower() + text[1:]
    scope = (scope or "").strip()
    if scope:
        return f"{commit_type}({scope}): {text}"
    return f"{commit_type}: {text}"


def commit_and_push(commit_message: str, git: GitRunner = run_git, console: Optional[Console] = None) -> bool:
    """Stage everything, commit and push. Returns False for a clean tree."""
    console = console or default_console
    if not git(["status", "--porcelain"]).strip():
        console.print("[yellow]No changes to commit. Working tree is clean.[/yellow]")
        return False

    console.print("[blue]Staging changes...[/blue]")
    git(["add", "-A"])

    console.print("[blue]Committing changes...[/blue]")
    git(["commit", "-m", commit_message])

    branch = git(["rev-parse", "--abbrev-ref", "HEAD"]).strip()
    console.print(f"[blue]Pushing to origin/{escape(branch)}...[/blue]")
    git(["push", "origin", branch])

    console.print("[green]\n✓ Successfully committed and pushed![/green]")
    console.print(f"[bright_black]Branch: {escape(branch)}\n[/bright_black]")
    return True


def commit_command(
    prompter: Prompter,
    push: bool = False,
    git: GitRunner = run_git,
    console: Optional[Console] = None,
) -> str:
    console = console or default_console
    commit_type = prompter.select("Select the type of commit:", COMMIT_TYPES)
    scope = prompter.text("Enter the scope (optional, e.g., api, ui, db):")
    message = prompter.text("Enter the commit message:", required=True)

    commit_message = build_commit_message(commit_type, scope, message)

    console.print("\n[green]Generated commit message:[/green]")
    console.print(f"[cyan]{escape(commit_message)}[/cyan]\n")

    if push:
        commit_and_push(commit_message, git=git, console=console)
    else:
        quoted = commit_message.replace('"', '\\"')
        console.print("[bright_black]Copy the message above and use it with:[/bright_black]")
        console.print(f'[bright_black]git commit -m "{escape(quoted)}"[/bright_black]')
    return commit_message
