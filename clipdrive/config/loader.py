"""Configuration loading with fail-fast behavior.

The configuration lives in ``~/.clipdrive/config.json`` unless the
``CLIPDRIVE_HOME`` environment variable points elsewhere. A missing file
means pydantic defaults; an unreadable or invalid one is an error.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from clipdrive.config.schema import Config
from clipdrive.core.errors import ConfigError, LoadError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_clipdrive_dir() -> Path:
    """Directory holding the user's clipdrive configuration."""
    override = os.environ.get("CLIPDRIVE_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".clipdrive"


def read_config_file(path: Path, required: bool = True) -> dict[str, Any] | None:
    """Read one JSON config file.

    Editors on Windows like to save with a UTF-8 BOM, so ``utf-8-sig`` is
    used. A blank file counts as an empty object.

    Args:
        path: File to read.
        required: Whether a missing file is an error. Optional files that
            do not exist give None.

    Returns:
        The parsed top-level object, or None for a missing optional file.

    Raises:
        LoadError: If the file is missing (and required), unreadable, not
            JSON, or not a JSON object.
    """
    # resolve() turns Git Bash style /c/Users/... paths into real ones
    resolved = path.resolve()
    if not resolved.is_file():
        if required:
            raise LoadError(f"config: File not found: {path}")
        logger.debug("Config file not found: %s (resolved: %s)", path, resolved)
        return None

    try:
        text = resolved.read_text(encoding="utf-8-sig").strip()
    except OSError as e:
        raise LoadError(f"config: Failed to read file {path}: {e}") from e
    if not text:
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"config: Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise LoadError(f"config: Expected object in {path}, got {type(data).__name__}")
    return data


def load_config(path: Path | None = None) -> Config:
    """Load configuration.

    Args:
        path: Explicit config file path. The file must exist.
            When None, the default location is used if present.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    config_path = path if path is not None else get_clipdrive_dir() / CONFIG_FILE_NAME
    try:
        data = read_config_file(config_path, required=path is not None)
    except LoadError as e:
        raise ConfigError(e.message) from e

    if not data:
        logger.debug("No config at %s, using defaults", config_path)
        return Config()

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {config_path}: {e}") from e
    logger.info("Config loaded from: %s", config_path)
    return config
