"""Configuration loading and validation."""

from clipdrive.config.loader import get_clipdrive_dir, load_config
from clipdrive.config.schema import AutomationConfig, Config, ScriptingConfig

__all__ = [
    "AutomationConfig",
    "Config",
    "ScriptingConfig",
    "get_clipdrive_dir",
    "load_config",
]
