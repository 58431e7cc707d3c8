"""Pydantic models for clipdrive configuration validation."""

import re
import sys

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScriptingConfig(BaseModel):
    """Configuration for the command dispatch engine."""

    model_config = ConfigDict(extra="forbid")

    batch_lock_threshold: int = Field(
        default=4,
        ge=0,
        description="Multi-row operations lock the remote browser above this row count",
    )
    clipboard_poll_interval_ms: int = Field(
        default=250,
        ge=1,
        description="Delay between checks that a clipboard write converged",
    )
    clipboard_poll_attempts: int = Field(
        default=10,
        ge=1,
        description="Number of convergence checks before a clipboard write fails",
    )
    input_separator: str = Field(
        default="\n",
        description="Separator used when joining several items into one payload",
    )
    crlf_line_endings: bool = Field(
        default_factory=lambda: sys.platform == "win32",
        description="Encode script text output with CRLF line endings",
    )
    keys_delay_ms: int = Field(
        default=500,
        ge=0,
        description="Delay before each key sequence passed to the keys command",
    )

    @property
    def clipboard_poll_interval(self) -> float:
        return self.clipboard_poll_interval_ms / 1000


class AutomationConfig(BaseModel):
    """Configuration for keyboard emulation against foreground windows."""

    model_config = ConfigDict(extra="forbid")

    paste_with_ctrl_v_windows: str = Field(
        default="",
        description=(
            "Regular expression matched against window titles. Matching windows "
            "get Ctrl+V, all others Shift+Insert."
        ),
    )
    raise_delay_ms: int = Field(
        default=150,
        ge=0,
        description="Delay between raising a window and sending keys to it",
    )
    paste_settle_ms: int = Field(
        default=150,
        ge=0,
        description="Delay after a paste key combo before returning",
    )
    copy_timeout_ms: int = Field(
        default=2000,
        ge=0,
        description="Maximum wait for the OS clipboard to change after Ctrl+C",
    )
    copy_poll_interval_ms: int = Field(
        default=20,
        ge=1,
        description="Interval between clipboard sequence number checks",
    )

    @field_validator("paste_with_ctrl_v_windows")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid window title pattern {value!r}: {e}") from e
        return value


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    scripting: ScriptingConfig = Field(default_factory=ScriptingConfig)
    """Command engine settings."""

    automation: AutomationConfig = Field(default_factory=AutomationConfig)
    """Platform keyboard emulation settings."""
