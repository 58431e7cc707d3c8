"""Per-invocation state threaded through every command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from clipdrive.core.cancel import CancellationToken
from clipdrive.rpc.channel import ClientChannel


@dataclass
class InvocationContext:
    """State owned by one top-level command invocation.

    Attributes:
        channel: Message channel to the invoking client.
        current_path: Directory relative file names are resolved against.
        input_separator: Separator joining several items into one payload.
        action_id: Identifier of the action that started this invocation.
        finish_payload: Set by commands that end the server session.
    """

    channel: ClientChannel
    current_path: str = field(default_factory=lambda: str(Path.cwd()))
    input_separator: str = "\n"
    action_id: str = ""
    finish_payload: bytes | None = None

    @property
    def token(self) -> CancellationToken:
        return self.channel.token

    @property
    def quit_requested(self) -> bool:
        return self.finish_payload is not None

    def file_name(self, name: str) -> str:
        """Resolve ``name`` against the current path unless it is absolute."""
        return str(Path(self.current_path) / name)
