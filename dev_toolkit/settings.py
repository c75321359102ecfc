"""
Runtime settings resolved from defaults, a project config file and the
environment.

Precedence (lowest first):

1. field defaults below,
2. ``.devtoolkit.yaml`` / ``.devtoolkit.yml`` / ``.devtoolkit.json`` in the
   working directory,
3. ``DEV_TOOLKIT_*`` environment variables (``.devtoolkit.env`` is loaded into
   the environment first via python-dotenv, without overriding real variables).
"""

from __future__ import annotations

import logging
import os
import pathlib
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from .config_loader import find_config, load_config
from .errors import ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "DEV_TOOLKIT_"
DOTENV_FILENAME = ".devtoolkit.env"


class ToolkitSettings(BaseModel):
    env_file: str = ".env"
    history_file: str = ".apiteset-history.json"
    history_limit: int = Field(default=100, ge=1)
    request_timeout: float = Field(default=30.0, gt=0)
    editor: Optional[str] = None
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in ToolkitSettings.model_fields:
        env_name = ENV_PREFIX + name.upper()
        if env_name in environ:
            overrides[name] = environ[env_name]
    return overrides


def load_settings(
    base_dir: str | pathlib.Path | None = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ToolkitSettings:
    root = pathlib.Path(base_dir) if base_dir is not None else pathlib.Path.cwd()
    if environ is None:
        dotenv_path = root / DOTENV_FILENAME
        if dotenv_path.is_file():
            load_dotenv(dotenv_path, override=False)
        environ = os.environ

    data: Dict[str, Any] = {}
    config_path = find_config(root)
    if config_path is not None:
        logger.debug("Loading settings from %s", config_path)
        data.update(load_config(config_path))
    data.update(_env_overrides(environ))

    try:
        return ToolkitSettings(**data)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid dev-toolkit configuration: {exc}") from exc
