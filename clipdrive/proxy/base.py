"""Contract for the remote clipboard-history service.

The engine never touches history storage directly; every read and mutation
goes through an object satisfying ``ScriptableProxy``. Calls are synchronous
and observed by the service in the order they are issued. Reads reflect all
previously completed writes of the same invocation, but nothing prevents
another client from mutating rows between two calls unless the batch lock
is held.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

ClipboardMapping = dict[str, bytes]


class ClipboardMode(Enum):
    """Which OS clipboard source to read or write."""

    CLIPBOARD = "clipboard"
    SELECTION = "selection"  # X11 primary selection


@dataclass
class ActionCommand:
    """Description of a background command run on item text.

    Attributes:
        cmd: Program to run; ``%1`` is replaced with the item text.
        input: MIME passed on standard input.
        output: MIME of the command output.
        sep: Separator splitting command output into new items.
        output_tab: Tab receiving output items.
        wait: Whether to show the action dialog before running.
    """

    cmd: str
    input: str
    output: str
    sep: str = "\n"
    output_tab: str = ""
    wait: bool = False


class ScriptableProxy(Protocol):
    """Operations the engine may invoke against the clipboard service."""

    # --- Clipboard ---

    def get_clipboard_data(
        self, mime: str, mode: ClipboardMode = ClipboardMode.CLIPBOARD
    ) -> bytes: ...

    def set_clipboard(
        self, data: ClipboardMapping, mode: ClipboardMode = ClipboardMode.CLIPBOARD
    ) -> None: ...

    # --- Tabs ---

    def tabs(self) -> list[str]: ...

    def current_tab(self) -> str: ...

    def set_current_tab(self, name: str) -> None:
        """Select the tab used by following row calls, creating it if needed."""
        ...

    def remove_tab(self, name: str) -> str:
        """Remove a tab. Returns an error message, empty on success."""
        ...

    def rename_tab(self, new_name: str, name: str) -> str:
        """Rename a tab. Returns an error message, empty on success."""
        ...

    def save_tab(self, path: str) -> bool: ...

    def load_tab(self, path: str) -> bool: ...

    # --- Rows ---

    def browser_length(self) -> int: ...

    def browser_add_text(self, text: str) -> None: ...

    def browser_add(self, data: ClipboardMapping, row: int) -> None: ...

    def browser_change(self, data: ClipboardMapping, row: int) -> None: ...

    def browser_remove_row(self, row: int) -> None: ...

    def browser_item_data(self, row: int, mime: str) -> bytes: ...

    def browser_item(self, row: int) -> ClipboardMapping: ...

    def browser_move_to_clipboard(self, row: int) -> None: ...

    def browser_copy_next_item_to_clipboard(self) -> None: ...

    def browser_copy_previous_item_to_clipboard(self) -> None: ...

    def browser_delayed_save_items(self) -> None: ...

    def browser_open_editor(self, data: bytes) -> bool:
        """Open an external editor. Returns False if none is configured."""
        ...

    def browser_set_current(self, row: int) -> None: ...

    def browser_edit_row(self, row: int) -> None: ...

    def browser_edit_new(self, text: str) -> None: ...

    def browser_lock(self) -> None: ...

    def browser_unlock(self) -> None: ...

    # --- Selection ---

    def select_items(self, rows: list[int]) -> bool: ...

    def selected(self) -> str:
        """Selected tab name followed by the selected rows, one per line."""
        ...

    def selected_tab(self) -> str: ...

    def selected_items(self) -> list[int]: ...

    def current_item(self) -> int: ...

    # --- Actions ---

    def action(self, data: ClipboardMapping, command: ActionCommand) -> None: ...

    def open_action_dialog(self, data: ClipboardMapping) -> None: ...

    def get_action_data(self, action_id: str, mime: str) -> bytes: ...

    # --- Configuration ---

    def config(self, name: str, value: str | None) -> str | None:
        """Get or set an option.

        An empty ``name`` lists all options. Returns None for unknown options.
        """
        ...

    # --- Application ---

    def show_window(self) -> None: ...

    def show_browser(self, tab: str | None = None) -> None: ...

    def close(self) -> None: ...

    def toggle_visible(self) -> None: ...

    def toggle_menu(self, tab: str | None = None) -> None: ...

    def disable_monitoring(self, disable: bool) -> None: ...

    def is_monitoring_enabled(self) -> bool: ...

    def ignore_current_clipboard(self) -> None: ...

    def show_message(self, title: str, message: str, msec: int) -> None: ...

    def send_keys(self, keys: str) -> str:
        """Inject keys into the application. Returns an error message or empty."""
        ...
