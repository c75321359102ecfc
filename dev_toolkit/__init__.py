"""
dev-toolkit: developer-workflow command line utilities.

Key modules:

- envstore: format-preserving ``.env`` parse/merge/format engine.
- commands: handlers for commit, readme, env, clean and api sub-commands.
- history: JSON request history for the API tester.
- settings: configuration from defaults, project config file and environment.
- cli: argparse entry point (``dev-toolkit``).
"""

from .envstore import EnvEntry, EnvStore, escape_value, format_env_content, parse_env_content

__version__ = "1.0.0"

__all__ = [
    "EnvEntry",
    "EnvStore",
    "escape_value",
    "format_env_content",
    "parse_env_content",
    "__version__",
]
