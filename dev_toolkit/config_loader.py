"""
Project-level configuration files: YAML with a JSON fallback.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Dict, Optional

import yaml

from .errors import ValidationError

CONFIG_FILENAMES = (".devtoolkit.yaml", ".devtoolkit.yml", ".devtoolkit.json")


def load_config(path: str | pathlib.Path) -> Dict[str, Any]:
    path = pathlib.Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Could not parse {path.name}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"{path.name} must contain a mapping at the top level")
    return data


def find_config(base_dir: str | pathlib.Path) -> Optional[pathlib.Path]:
    """Return the first config file present in ``base_dir``, if any."""
    root = pathlib.Path(base_dir)
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None
