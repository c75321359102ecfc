"""
Project junk-file cleaner.

Walks a project tree looking for build output, caches and editor droppings,
reports what it found with sizes, and deletes them after confirmation.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import pathlib
import shutil
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from ..errors import NotFoundError, ValidationError
from ..logging_utils import console as default_console
from ..prompts import Prompter

logger = logging.getLogger(__name__)

JUNK_DIRECTORIES = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        "out",
        ".cache",
        "cache",
        "coverage",
        ".nyc_output",
        ".next",
        ".nuxt",
        ".svelte-kit",
        ".vite",
        ".parcel-cache",
        "tmp",
        "temp",
        ".tmp",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
    }
)

JUNK_FILE_PATTERNS: Tuple[str, ...] = (
    ".DS_Store",
    "Thumbs.db",
    "*.swp",
    "*.swo",
    "*~",
    "*.log",
    "*.tmp",
    "*.pyc",
)

SKIPPED_DIRECTORIES = frozenset({".git"})

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


@dataclass(slots=True)
class JunkItem:
    path: pathlib.Path
    kind: Literal["file", "directory"]
    size: int


@dataclass(slots=True)
class CleanResult:
    items: List[JunkItem]
    deleted: int = 0
    errors: int = 0

    @property
    def total_size(self) -> int:
        return sum(item.size for item in self.items)


def format_size(num_bytes: int) -> str:
    """Human readable size in base 1024, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 B"
    exponent = 0
    while num_bytes >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    value = round(num_bytes / (1024 ** exponent), 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[exponent]}"


def is_junk_file(name: str) -> bool:
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in JUNK_FILE_PATTERNS)


def calculate_size(path: pathlib.Path) -> int:
    """Size of a file, or the recursive size of a directory. Unreadable parts count as 0."""
    try:
        if not path.is_dir() or path.is_symlink():
            return path.lstat().st_size
    except OSError:
        return 0
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path, onerror=lambda exc: logger.debug("skip: %s", exc)):
        for filename in filenames:
            try:
                total += (pathlib.Path(dirpath) / filename).lstat().st_size
            except OSError:
                logger.debug("Cannot stat %s", pathlib.Path(dirpath) / filename)
    return total


def find_junk(root: str | pathlib.Path, node_modules_only: bool = False) -> List[JunkItem]:
    """
    Recursively collect junk under ``root``.

    Matched directories are reported whole and not descended into. With
    ``node_modules_only`` only ``node_modules`` directories are reported.
    """
    root = pathlib.Path(root)
    found: List[JunkItem] = []

    def scan(directory: pathlib.Path) -> None:
        try:
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("Cannot read %s: %s", directory, exc)
            return
        for entry in entries:
            if entry.name in SKIPPED_DIRECTORIES:
                continue
            try:
                is_dir = entry.is_dir() and not entry.is_symlink()
                is_file = entry.is_file()
            except OSError as exc:
                logger.debug("Cannot stat %s: %s", entry, exc)
                continue
            if is_dir:
                wanted = entry.name == "node_modules" if node_modules_only else entry.name in JUNK_DIRECTORIES
                if wanted:
                    found.append(JunkItem(entry, "directory", calculate_size(entry)))
                else:
                    scan(entry)
            elif is_file and not node_modules_only and is_junk_file(entry.name):
                found.append(JunkItem(entry, "file", calculate_size(entry)))

    scan(root)
    return found


def delete_item(path: pathlib.Path) -> None:
    """Delete a file or directory tree. Already-missing paths are ignored."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        logger.debug("%s vanished before deletion", path)


def _print_group(console: Console, title: str, items: List[JunkItem], root: pathlib.Path) -> None:
    if not items:
        return
    console.print(f"[cyan]{title}:[/cyan]")
    for item in items:
        relative = os.path.relpath(item.path, root)
        console.print(f"  [red]✗[/red] {escape(relative)} [bright_black]({format_size(item.size)})[/bright_black]")
    console.print()


def clean_command(
    path: str | pathlib.Path | None,
    prompter: Prompter,
    node_modules: bool = False,
    force: bool = False,
    dry_run: bool = False,
    console: Optional[Console] = None,
) -> CleanResult:
    console = console or default_console
    root = pathlib.Path(path or pathlib.Path.cwd()).resolve()
    if not root.exists():
        raise NotFoundError(f"Path {root} does not exist.")
    if not root.is_dir():
        raise ValidationError(f"{root} is not a directory.")

    console.print(f"[blue]Scanning for junk files in: {escape(str(root))}\n[/blue]")
    result = CleanResult(items=find_junk(root, node_modules_only=node_modules))

    if not result.items:
        console.print("[green]✓ No junk files found. Project is clean![/green]")
        return result

    console.print(f"[yellow]Found {len(result.items)} junk item(s) to delete:\n[/yellow]")
    _print_group(console, "Directories", [item for item in result.items if item.kind == "directory"], root)
    _print_group(console, "Files", [item for item in result.items if item.kind == "file"], root)
    console.print(f"[yellow]Total size to free: [bold]{format_size(result.total_size)}[/bold]\n[/yellow]")

    if dry_run:
        console.print("[blue]DRY RUN MODE - No files will be deleted\n[/blue]")
        console.print("[bright_black]This is a preview. Run without --dry-run to actually delete these files.[/bright_black]")
        return result

    if not force and not prompter.confirm("Do you want to delete these files?", default=False):
        console.print("[bright_black]Operation cancelled.[/bright_black]")
        return result

    console.print("[blue]\nDeleting junk files...\n[/blue]")
    for item in result.items:
        relative = os.path.relpath(item.path, root)
        try:
            delete_item(item.path)
        except OSError as exc:
            result.errors += 1
            logger.warning("Failed to delete %s: %s", item.path, exc)
            console.print(f"[red]✗ Failed to delete: {escape(relative)} - {escape(str(exc))}[/red]")
            continue
        result.deleted += 1
        console.print(f"[green]✓ Deleted: {escape(relative)}[/green]")

    console.print("[green]\n✓ Cleanup complete![/green]")
    console.print(
        f"[bright_black]Deleted: {result.deleted} item(s), Errors: {result.errors}, "
        f"Freed: {format_size(result.total_size)}[/bright_black]"
    )
    return result
