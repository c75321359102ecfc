"""
README.md scaffold generator.
"""

from __future__ import annotations

import logging
import pathlib
import re
from typing import List, Optional, Pattern

from rich.console import Console
from rich.markup import escape

from ..errors import ToolkitError
from ..logging_utils import console as default_console
from ..prompts import Choice, Prompter

logger = logging.getLogger(__name__)

LICENSES: List[Choice] = [
    ("MIT", "MIT"),
    ("Apache-2.0", "Apache-2.0"),
    ("GPL-3.0", "GPL-3.0"),
    ("ISC", "ISC"),
    ("Unlicense", "Unlicense"),
    ("None", "None"),
]
NO_LICENSE = "None"

FENCE = "```"

INSTALL_COMMAND_RE = re.compile(r"^\$|^npm |^yarn |^pnpm |^git |^\./|^node |^npx ")
USAGE_COMMAND_RE = re.compile(r"^\$|^npm |^yarn |^pnpm |^git |^node |^npx |^\./|^import |^const |^function |^class ")
CODE_START_RE = re.compile(r"^(import|const|let|var|function|class|export)")
PROMPT_PREFIX_RE = re.compile(r"^\$+\s*")


def _format_section_body(content: str, command_re: Pattern[str], detect_language: bool) -> str:
    if FENCE in content:
        return f"{content}\n\n"

    lines = [line for line in content.split("\n") if line.strip()]
    if not any(command_re.search(line.strip()) for line in lines):
        return "".join(f"{line}\n" for line in lines) + "\n"

    language = "bash"
    if detect_language and lines and CODE_START_RE.search(lines[0].strip()):
        language = "javascript"
    body = "".join(f"{PROMPT_PREFIX_RE.sub('', line.strip())}\n" for line in lines)
    return f"{FENCE}{language}\n{body}{FENCE}\n\n"


def generate_readme(
    project_name: str,
    description: str,
    installation: Optional[str] = None,
    usage: Optional[str] = None,
    license: str = "MIT",
    minimal: bool = False,
) -> str:
    has_license = bool(license) and license != NO_LICENSE
    parts = [f"# {project_name}\n\n", f"{description}\n\n"]

    if not minimal and (installation or usage):
        parts.append("## Table of Contents\n\n")
        if installation:
            parts.append("- [Installation](#installation)\n")
        if usage:
            parts.append("- [Usage](#usage)\n")
        if has_license:
            parts.append("- [License](#license)\n")
        parts.append("\n")

    if installation:
        parts.append("## Installation\n\n")
        parts.append(_format_section_body(installation, INSTALL_COMMAND_RE, detect_language=False))

    if usage:
        parts.append("## Usage\n\n")
        parts.append(_format_section_body(usage, USAGE_COMMAND_RE, detect_language=True))

    if has_license:
        parts.append("## License\n\n")
        parts.append(f"This project is licensed under the {license} License.\n\n")

    return "".join(parts)


def readme_command(
    prompter: Prompter,
    output: Optional[str] = None,
    no_install: bool = False,
    minimal: bool = False,
    base_dir: str | pathlib.Path | None = None,
    console: Optional[Console] = None,
) -> Optional[pathlib.Path]:
    """Prompt for README content and write it. Returns None if cancelled."""
    console = console or default_console
    root = pathlib.Path(base_dir) if base_dir is not None else pathlib.Path.cwd()
    output_path = (root / output).resolve() if output else root / "README.md"

    if output_path.exists():
        overwrite = prompter.confirm(f"{output_path.name} already exists. Do you want to overwrite it?", default=False)
        if not overwrite:
            console.print("[bright_black]Operation cancelled.[/bright_black]")
            return None

    project_name = prompter.text("Enter the project name:", required=True)
    description = prompter.text("Enter the project description:", required=True)

    installation = None
    if not minimal and not no_install:
        installation = prompter.editor(
            "Enter installation steps (optional - open editor, write your content, save and close to continue):"
        )
    usage = None
    if not minimal:
        usage = prompter.editor(
            "Enter usage examples (optional - open editor, write your content, save and close to continue):"
        )
    license = prompter.select("Select a license:", LICENSES, default="MIT")

    content = generate_readme(
        project_name=project_name.strip(),
        description=description.strip(),
        installation=(installation or "").strip() or None,
        usage=(usage or "").strip() or None,
        license=license,
        minimal=minimal,
    )

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ToolkitError(f"Error writing {output_path.name}: {exc}") from exc

    logger.info("Wrote README to %s", output_path)
    console.print(f"\n[green]✓ {escape(output_path.name)} generated successfully![/green]")
    console.print(f"[bright_black]File saved to: {escape(str(output_path))}\n[/bright_black]")
    return output_path
