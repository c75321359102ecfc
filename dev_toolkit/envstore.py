"""
Format-preserving reader/writer for ``.env`` files.

A ``.env`` file is a sequence of lines, each one of:

- a comment (first non-blank character is ``#``),
- a blank line,
- ``KEY=VALUE`` where VALUE may be wrapped in one layer of matching quotes.

Parsing yields an ordered ``key -> EnvEntry`` mapping. Formatting either emits
the mapping on its own (new file) or re-scans the original text so comments,
blank lines and key ordering survive an edit; only the lines whose key is still
present are rewritten, deleted keys are dropped and new keys are appended.
"""

from __future__ import annotations

import logging
import pathlib
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"

_LINE_RE = re.compile(r"^([^=#]+?)=(.*)$")
_QUOTES = ('"', "'")
_NEEDS_QUOTING = (" ", "=", "#")


@dataclass(slots=True)
class EnvEntry:
    key: str
    value: str
    raw_line: Optional[str] = None


def _split_lines(content: str) -> List[str]:
    # A trailing newline terminates the last line; it does not start a new one.
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _is_passthrough(stripped: str) -> bool:
    return not stripped or stripped.startswith("#")


def _match_line(stripped: str) -> Optional[Tuple[str, str]]:
    match = _LINE_RE.match(stripped)
    if match is None:
        return None
    return match.group(1).strip(), match.group(2).strip()


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_env_content(content: str) -> Dict[str, EnvEntry]:
    """
    Parse ``.env`` text into an insertion-ordered mapping.

    Comments, blank lines and lines without ``=`` contribute nothing. When a
    key repeats, the later value wins but the key keeps the position of its
    first occurrence (plain ``dict`` assignment semantics).
    """
    entries: Dict[str, EnvEntry] = {}
    for line in _split_lines(content):
        stripped = line.strip()
        if _is_passthrough(stripped):
            continue
        matched = _match_line(stripped)
        if matched is None:
            logger.debug("Ignoring malformed .env line: %r", line)
            continue
        key, value = matched
        entries[key] = EnvEntry(key=key, value=_unquote(value), raw_line=line)
    return entries


def escape_value(value: str) -> str:
    """Quote ``value`` if it contains a space, ``=`` or ``#``."""
    if any(char in value for char in _NEEDS_QUOTING):
        escaped = value.replace('"', '\\"')
        return f'"{escaped}"'
    return value


def _format_entry(entry: EnvEntry) -> str:
    return f"{entry.key}={escape_value(entry.value)}"


def format_env_content(entries: Dict[str, EnvEntry], original_content: Optional[str] = None) -> str:
    """
    Serialise ``entries`` back to ``.env`` text.

    With ``original_content`` the original layout is reused: comment and blank
    lines are copied verbatim, recognised lines are rewritten with the current
    value (or dropped if the key was removed), malformed lines are dropped and
    keys that never appeared in the original are appended at the end.
    """
    if not original_content:
        lines = [_format_entry(entry) for entry in entries.values()]
        return "\n".join(lines) + "\n"

    output: List[str] = []
    emitted: Set[str] = set()
    for line in _split_lines(original_content):
        stripped = line.strip()
        if _is_passthrough(stripped):
            output.append(line)
            continue
        matched = _match_line(stripped)
        if matched is None:
            continue
        key = matched[0]
        # Repeated keys are rewritten at every occurrence, all with the current value.
        if key in entries:
            output.append(_format_entry(entries[key]))
            emitted.add(key)

    for key, entry in entries.items():
        if key not in emitted:
            output.append(_format_entry(entry))
    return "\n".join(output) + "\n"


def resolve_env_path(env_file: str | pathlib.Path = DEFAULT_ENV_FILE, base_dir: str | pathlib.Path | None = None) -> pathlib.Path:
    path = pathlib.Path(env_file)
    if path.is_absolute():
        return path
    root = pathlib.Path(base_dir) if base_dir is not None else pathlib.Path.cwd()
    return root / path


class EnvStore:
    """
    In-memory view of one ``.env`` file.

    Keeps the parsed entries plus the text they were parsed from so that
    :meth:`to_text` can perform a format-preserving rewrite.
    """

    def __init__(self, entries: Optional[Dict[str, EnvEntry]] = None, original_content: Optional[str] = None) -> None:
        self._entries: Dict[str, EnvEntry] = dict(entries or {})
        self.original_content = original_content

    @classmethod
    def from_text(cls, content: str) -> "EnvStore":
        return cls(parse_env_content(content), content)

    @classmethod
    def load(cls, path: str | pathlib.Path) -> "EnvStore":
        """Read ``path``; a missing file yields an empty store."""
        env_path = pathlib.Path(path)
        try:
            content = env_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("%s does not exist, starting from an empty store", env_path)
            return cls()
        return cls.from_text(content)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def keys(self) -> List[str]:
        return list(self._entries)

    def items(self) -> List[Tuple[str, str]]:
        return [(key, entry.value) for key, entry in self._entries.items()]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._entries.get(key)
        return entry.value if entry is not None else default

    def set(self, key: str, value: str) -> bool:
        """Insert or update ``key``. Returns True when the key is new."""
        is_new = key not in self._entries
        if is_new:
            self._entries[key] = EnvEntry(key=key, value=value)
        else:
            self._entries[key].value = value
        return is_new

    def delete(self, key: str) -> None:
        if key not in self._entries:
            raise KeyError(key)
        del self._entries[key]

    def to_text(self) -> str:
        return format_env_content(self._entries, self.original_content)

    def save(self, path: str | pathlib.Path) -> None:
        env_path = pathlib.Path(path)
        content = self.to_text()
        env_path.write_text(content, encoding="utf-8")
        self.original_content = content
        logger.debug("Wrote %d entries to %s", len(self._entries), env_path)
