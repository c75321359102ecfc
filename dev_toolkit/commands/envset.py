"""
``env`` sub-commands: set, get, list, delete and switch.

Each handler performs a single read, transform and write of one file resolved
against ``base_dir``. Failures are raised as :mod:`dev_toolkit.errors` types.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from ..envstore import DEFAULT_ENV_FILE, EnvStore, resolve_env_path
from ..errors import NotFoundError, ValidationError
from ..logging_utils import console as default_console

logger = logging.getLogger(__name__)

PRODUCTION_ENV_FILE = ".env.production"
DEVELOPMENT_ENV_FILE = ".env.development"
AUTO_CREATED_FILES = (PRODUCTION_ENV_FILE, DEVELOPMENT_ENV_FILE)

PREVIEW_LIMIT = 50


def select_env_file(file: Optional[str] = None, prod: bool = False, dev: bool = False) -> str:
    """Map the ``--file`` / ``--prod`` / ``--dev`` flags to a file name."""
    if prod and dev:
        raise ValidationError("Use only one of --prod and --dev.")
    if prod:
        return PRODUCTION_ENV_FILE
    if dev:
        return DEVELOPMENT_ENV_FILE
    return file or DEFAULT_ENV_FILE


def validate_key(key: str) -> None:
    if not key or not key.strip():
        raise ValidationError("Key cannot be empty.")
    if " " in key or "=" in key:
        raise ValidationError("Key cannot contain spaces or equals sign.")


def preview_value(value: str, limit: int = PREVIEW_LIMIT) -> str:
    if len(value) > limit:
        return value[: limit - 3] + "..."
    return value


def _load_existing(path: pathlib.Path, env_file: str, key: str) -> EnvStore:
    """Load ``path`` for get/delete, which both require the file to exist."""
    if not path.exists():
        if env_file in AUTO_CREATED_FILES:
            path.write_text("", encoding="utf-8")
            logger.info("Created empty %s", path)
            raise NotFoundError(f'Key "{key}" not found in {path.name} (file was just created).')
        raise NotFoundError(f"{path.name} does not exist.")
    return EnvStore.load(path)


def set_command(
    key: str,
    value: str,
    env_file: str = DEFAULT_ENV_FILE,
    base_dir: str | pathlib.Path | None = None,
    console: Optional[Console] = None,
) -> bool:
    """Add or update ``key``. Returns True when the key was newly added."""
    console = console or default_console
    validate_key(key)
    path = resolve_env_path(env_file, base_dir)
    store = EnvStore.load(path)
    added = store.set(key.strip(), value.strip())
    store.save(path)
    if added:
        console.print(f"[green]✓ Added {escape(key)} to {escape(path.name)}[/green]")
    else:
        console.print(f"[green]✓ Updated {escape(key)} in {escape(path.name)}[/green]")
    return added


def get_command(
    key: str,
    env_file: str = DEFAULT_ENV_FILE,
    base_dir: str | pathlib.Path | None = None,
) -> str:
    """Print only the raw value so the output can be captured by a shell."""
    path = resolve_env_path(env_file, base_dir)
    store = _load_existing(path, env_file, key)
    if key not in store:
        raise NotFoundError(f'Key "{key}" not found in {path.name}.')
    value = store.get(key) or ""
    print(value)
    return value


def delete_command(
    key: str,
    env_file: str = DEFAULT_ENV_FILE,
    base_dir: str | pathlib.Path | None = None,
    console: Optional[Console] = None,
) -> None:
    console = console or default_console
    path = resolve_env_path(env_file, base_dir)
    store = _load_existing(path, env_file, key)
    try:
        store.delete(key)
    except KeyError:
        raise NotFoundError(f'Key "{key}" not found in {path.name}.') from None
    store.save(path)
    console.print(f"[green]✓ Deleted {escape(key)} from {escape(path.name)}[/green]")


def list_command(
    env_file: str = DEFAULT_ENV_FILE,
    base_dir: str | pathlib.Path | None = None,
    console: Optional[Console] = None,
) -> Dict[str, str]:
    console = console or default_console
    path = resolve_env_path(env_file, base_dir)
    if not path.exists():
        raise NotFoundError(f"{path.name} does not exist.")
    store = EnvStore.load(path)
    if not len(store):
        console.print(f"[yellow]No environment variables found in {escape(path.name)}.[/yellow]")
        return {}

    console.print(f"\n[cyan]Environment variables in {escape(path.name)}:[/cyan]\n")
    for key, value in store.items():
        console.print(f"[green]{escape(key)}[/green][bright_black] = [/bright_black]{escape(preview_value(value))}")
    console.print()
    return dict(store.items())


def _available_env_files(root: pathlib.Path) -> List[str]:
    return sorted(entry.name for entry in root.iterdir() if entry.name.startswith(".env"))


def switch_command(
    env_file: str,
    base_dir: str | pathlib.Path | None = None,
    console: Optional[Console] = None,
) -> None:
    """Copy ``env_file`` over ``.env`` so it becomes the active file."""
    console = console or default_console
    root = pathlib.Path(base_dir) if base_dir is not None else pathlib.Path.cwd()
    source = resolve_env_path(env_file, root)
    target = resolve_env_path(DEFAULT_ENV_FILE, root)

    if source.exists():
        target.write_text(source.read_text(encoding="utf-8"), encoding="utf-8")
        console.print(f"[green]✓ Switched to {escape(env_file)}[/green]")
        console.print(f"[green]✓ Copied {escape(env_file)} to .env[/green]")
        console.print(f"[bright_black]\nActive .env file is now: {escape(env_file)}\n[/bright_black]")
        return

    available = _available_env_files(root)
    if not available:
        source.write_text("", encoding="utf-8")
        console.print(f"[green]✓ Created new {escape(env_file)}[/green]")
        console.print("[yellow]Note: To make this active, copy it to .env manually or use this command again.[/yellow]")
        return

    listing = "\n".join(f"  - {name}" for name in available)
    raise NotFoundError(f"{env_file} does not exist.\n\nAvailable .env files:\n{listing}")
