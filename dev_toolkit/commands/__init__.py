"""
Command handlers behind the ``dev-toolkit`` sub-commands.
"""

from . import apitest, cleaner, commit, envset, readme

__all__ = ["apitest", "cleaner", "commit", "envset", "readme"]
