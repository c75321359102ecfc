"""
Exception hierarchy shared by every dev-toolkit command.

Command handlers raise these; ``cli.main`` turns them into a message on stderr
and a non-zero exit status.
"""

from __future__ import annotations


class ToolkitError(Exception):
    """Base class for failures reported to the user."""

    exit_code = 1


class ValidationError(ToolkitError):
    """Input was rejected before any file or network access happened."""


class NotFoundError(ToolkitError):
    """A file, directory or key the command needs does not exist."""


class FormatError(ToolkitError):
    """Malformed user input such as an invalid URL or JSON body."""


class PromptAborted(ToolkitError):
    """The user cancelled an interactive prompt (Ctrl+C / Ctrl+D)."""

    exit_code = 0
