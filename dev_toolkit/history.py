"""
Request history for the API tester.

History is a single JSON array (newest last) stored in the working directory.
Only the most recent ``limit`` entries are kept.
"""

from __future__ import annotations

import json
import logging
import pathlib
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE = ".apiteset-history.json"
DEFAULT_HISTORY_LIMIT = 100


class ApiResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: int
    status_text: str = Field(default="", alias="statusText")
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""


def _new_entry_id() -> str:
    return f"{int(time.time() * 1000)}{uuid.uuid4().hex[:9]}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class HistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_entry_id)
    method: str
    url: str
    headers: Optional[Dict[str, str]] = None
    body: Optional[str] = None
    response: ApiResponse
    timestamp: str = Field(default_factory=_now_iso)


class HistoryStore:
    def __init__(self, path: str | pathlib.Path, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.path = pathlib.Path(path)
        self.limit = limit

    @classmethod
    def in_directory(
        cls,
        base_dir: str | pathlib.Path | None = None,
        filename: str = DEFAULT_HISTORY_FILE,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> "HistoryStore":
        root = pathlib.Path(base_dir) if base_dir is not None else pathlib.Path.cwd()
        return cls(root / filename, limit=limit)

    def load(self) -> List[HistoryEntry]:
        """Return stored entries; a missing or unreadable file yields ``[]``."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [HistoryEntry.model_validate(item) for item in raw]
        except FileNotFoundError:
            return []
        except (OSError, TypeError, json.JSONDecodeError, ValidationError) as exc:
            logger.debug("Ignoring unreadable history file %s: %s", self.path, exc)
            return []

    def append(self, entry: HistoryEntry) -> bool:
        """
        Add ``entry`` and trim to ``limit``.

        History is best effort: write failures are logged and reported through
        the return value instead of raising.
        """
        entries = self.load()
        entries.append(entry)
        entries = entries[-self.limit :]
        payload = [item.model_dump(by_alias=True, exclude_none=True) for item in entries]
        try:
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save to history %s: %s", self.path, exc)
            return False
        return True

    def clear(self) -> bool:
        """Delete the history file. Returns False if there was nothing to delete."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
