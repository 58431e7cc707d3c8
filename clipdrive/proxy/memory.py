"""In-process clipboard-history service.

``MemoryProxy`` keeps tabs, the live clipboard and options in memory. It is
the reference implementation of ``ScriptableProxy`` used for local runs and
by the test-suite; window and tray calls are recorded in ``calls`` instead of
being rendered.
"""

from __future__ import annotations

import base64
import json
import logging
from pathlib import Path
from typing import Any

from clipdrive.core.buffer import MIME_TEXT
from clipdrive.core.errors import ProxyError
from clipdrive.proxy.base import ActionCommand, ClipboardMapping, ClipboardMode

logger = logging.getLogger(__name__)

DEFAULT_TAB = "&clipboard"

DEFAULT_OPTIONS: dict[str, str] = {
    "maxitems": "200",
    "editor": "",
    "move": "true",
    "check_clipboard": "true",
    "check_selection": "false",
    "paste_with_ctrl_v_windows": "",
}


class MemoryProxy:
    """Clipboard service kept entirely in memory.

    Attributes:
        clipboard_lag: Number of clipboard reads after a write that still
            return the previous content. Simulates slow propagation.
        accept_clipboard_writes: When False, clipboard writes never land.
        calls: Recorded window, tray and action calls as ``(name, args)``.
        lock_count: How many times ``browser_lock`` was called.
    """

    def __init__(self, options: dict[str, str] | None = None) -> None:
        self._tabs: dict[str, list[ClipboardMapping]] = {DEFAULT_TAB: []}
        self._current_tab = DEFAULT_TAB
        self._clipboards: dict[ClipboardMode, ClipboardMapping] = {
            ClipboardMode.CLIPBOARD: {},
            ClipboardMode.SELECTION: {},
        }
        self._pending: dict[ClipboardMode, tuple[ClipboardMapping, int]] = {}
        self._options = dict(DEFAULT_OPTIONS)
        if options:
            self._options.update(options)
        self._current_row = 0
        self._selected: list[int] = []
        self._monitoring = True
        self._lock_depth = 0
        self._action_data: dict[str, ClipboardMapping] = {}

        self.clipboard_lag = 0
        self.accept_clipboard_writes = True
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.lock_count = 0
        self.sent_keys: list[str] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def _rows(self) -> list[ClipboardMapping]:
        return self._tabs[self._current_tab]

    # --- Clipboard ---

    def get_clipboard_data(
        self, mime: str, mode: ClipboardMode = ClipboardMode.CLIPBOARD
    ) -> bytes:
        pending = self._pending.get(mode)
        if pending is not None:
            data, remaining = pending
            if remaining <= 0:
                self._clipboards[mode] = data
                del self._pending[mode]
            else:
                self._pending[mode] = (data, remaining - 1)
        return self._clipboards[mode].get(mime, b"")

    def set_clipboard(
        self, data: ClipboardMapping, mode: ClipboardMode = ClipboardMode.CLIPBOARD
    ) -> None:
        if not self.accept_clipboard_writes:
            logger.debug("Dropping clipboard write (%s)", mode.value)
            return
        if self.clipboard_lag > 0:
            self._pending[mode] = (dict(data), self.clipboard_lag)
        else:
            self._clipboards[mode] = dict(data)

    # --- Tabs ---

    def tabs(self) -> list[str]:
        return list(self._tabs)

    def current_tab(self) -> str:
        return self._current_tab

    def set_current_tab(self, name: str) -> None:
        self._tabs.setdefault(name, [])
        self._current_tab = name

    def remove_tab(self, name: str) -> str:
        if name not in self._tabs:
            return "Tab with given name doesn't exist!"
        if len(self._tabs) == 1:
            return "Cannot remove last tab!"
        del self._tabs[name]
        if self._current_tab == name:
            self._current_tab = next(iter(self._tabs))
        return ""

    def rename_tab(self, new_name: str, name: str) -> str:
        if not new_name:
            return "Tab name cannot be empty!"
        if name not in self._tabs:
            return "Tab with given name doesn't exist!"
        if new_name in self._tabs:
            return "Tab with given name already exists!"
        self._tabs = {
            (new_name if key == name else key): rows for key, rows in self._tabs.items()
        }
        if self._current_tab == name:
            self._current_tab = new_name
        return ""

    def save_tab(self, path: str) -> bool:
        payload = [
            {mime: base64.b64encode(data).decode("ascii") for mime, data in row.items()}
            for row in self._rows()
        ]
        try:
            Path(path).write_text(json.dumps({"items": payload}), encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot save tab to %s: %s", path, e)
            return False
        return True

    def load_tab(self, path: str) -> bool:
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            rows = [
                {mime: base64.b64decode(value) for mime, value in row.items()}
                for row in raw["items"]
            ]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Cannot load tab from %s: %s", path, e)
            return False
        self._rows().extend(rows)
        return True

    # --- Rows ---

    def browser_length(self) -> int:
        return len(self._rows())

    def browser_add_text(self, text: str) -> None:
        self.browser_add({MIME_TEXT: text.encode("utf-8")}, 0)

    def browser_add(self, data: ClipboardMapping, row: int) -> None:
        rows = self._rows()
        row = max(0, min(row, len(rows)))
        rows.insert(row, dict(data))

    def browser_change(self, data: ClipboardMapping, row: int) -> None:
        rows = self._rows()
        if 0 <= row < len(rows):
            rows[row] = {**rows[row], **data}

    def browser_remove_row(self, row: int) -> None:
        rows = self._rows()
        if 0 <= row < len(rows):
            del rows[row]

    def browser_item_data(self, row: int, mime: str) -> bytes:
        return self.browser_item(row).get(mime, b"")

    def browser_item(self, row: int) -> ClipboardMapping:
        rows = self._rows()
        if 0 <= row < len(rows):
            return dict(rows[row])
        return {}

    def browser_move_to_clipboard(self, row: int) -> None:
        rows = self._rows()
        if not 0 <= row < len(rows):
            return
        item = rows.pop(row)
        rows.insert(0, item)
        self._current_row = 0
        self.set_clipboard(item)

    def browser_copy_next_item_to_clipboard(self) -> None:
        self._copy_relative(1)

    def browser_copy_previous_item_to_clipboard(self) -> None:
        self._copy_relative(-1)

    def _copy_relative(self, step: int) -> None:
        rows = self._rows()
        row = self._current_row + step
        if 0 <= row < len(rows):
            self._current_row = row
            self.set_clipboard(rows[row])

    def browser_delayed_save_items(self) -> None:
        self._record("save_items")

    def browser_open_editor(self, data: bytes) -> bool:
        if not self._options.get("editor"):
            return False
        self._record("open_editor", data)
        return True

    def browser_set_current(self, row: int) -> None:
        self._current_row = row

    def browser_edit_row(self, row: int) -> None:
        self._record("edit_row", row)

    def browser_edit_new(self, text: str) -> None:
        self._record("edit_new", text)

    def browser_lock(self) -> None:
        self._lock_depth += 1
        self.lock_count += 1

    def browser_unlock(self) -> None:
        if self._lock_depth == 0:
            raise ProxyError("Browser is not locked!")
        self._lock_depth -= 1

    @property
    def is_locked(self) -> bool:
        return self._lock_depth > 0

    # --- Selection ---

    def select_items(self, rows: list[int]) -> bool:
        length = len(self._rows())
        if any(not 0 <= row < length for row in rows):
            return False
        self._selected = list(rows)
        if rows:
            self._current_row = rows[0]
        return True

    def selected(self) -> str:
        return "\n".join([self._current_tab, *(str(row) for row in self._selected)])

    def selected_tab(self) -> str:
        return self._current_tab

    def selected_items(self) -> list[int]:
        return list(self._selected)

    def current_item(self) -> int:
        return self._current_row

    # --- Actions ---

    def action(self, data: ClipboardMapping, command: ActionCommand) -> None:
        self._record("action", data, command)

    def open_action_dialog(self, data: ClipboardMapping) -> None:
        self._record("action_dialog", data)

    def set_action_data(self, action_id: str, data: ClipboardMapping) -> None:
        self._action_data[action_id] = dict(data)

    def get_action_data(self, action_id: str, mime: str) -> bytes:
        return self._action_data.get(action_id, {}).get(mime, b"")

    # --- Configuration ---

    def config(self, name: str, value: str | None) -> str | None:
        if not name:
            return "\n".join(sorted(self._options))
        if name not in self._options:
            return None
        if value is not None:
            self._options[name] = value
        return self._options[name]

    # --- Application ---

    def show_window(self) -> None:
        self._record("show_window")

    def show_browser(self, tab: str | None = None) -> None:
        self._record("show_browser", tab)

    def close(self) -> None:
        self._record("close")

    def toggle_visible(self) -> None:
        self._record("toggle_visible")

    def toggle_menu(self, tab: str | None = None) -> None:
        self._record("toggle_menu", tab)

    def disable_monitoring(self, disable: bool) -> None:
        self._monitoring = not disable

    def is_monitoring_enabled(self) -> bool:
        return self._monitoring

    def ignore_current_clipboard(self) -> None:
        self._record("ignore")

    def show_message(self, title: str, message: str, msec: int) -> None:
        self._record("show_message", title, message, msec)

    def send_keys(self, keys: str) -> str:
        self.sent_keys.append(keys)
        return ""
