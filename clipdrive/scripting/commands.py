"""Script command implementations.

Every command is a coroutine ``cmd_<name>(engine, ctx, args)`` where
``args`` were already checked and coerced against the command's parameter
list in ``COMMANDS``. Commands return a value for the client or raise
``ScriptError``; they never send the terminating client message themselves.
"""

from __future__ import annotations

import base64
import binascii
import html
import logging
import platform
from typing import TYPE_CHECKING, Any

import pydantic

from clipdrive import PROGRAM_NAME, __version__
from clipdrive.core import wait
from clipdrive.core.buffer import (
    MIME_ITEMS,
    MIME_TEXT,
    TypedBuffer,
    to_int,
    to_string,
)
from clipdrive.core.errors import ItemDataError, ScriptError, ScriptErrorKind
from clipdrive.core.itemdata import deserialize_data, serialize_data
from clipdrive.proxy.base import ActionCommand, ClipboardMapping, ClipboardMode
from clipdrive.rpc.types import MessageStatus
from clipdrive.scripting.registry import (
    ArgKind,
    CommandRegistry,
    CommandSpec,
    HelpEntry,
    Param,
)

if TYPE_CHECKING:
    from clipdrive.scripting.context import InvocationContext
    from clipdrive.scripting.engine import ScriptEngine

logger = logging.getLogger(__name__)

Args = list[Any]


# === Marshaling helpers ===


def to_item_data(value: Any, mime: str, data: ClipboardMapping) -> None:
    """Insert ``value`` into ``data`` under ``mime``.

    Item bundles are unpacked into several formats. Binary buffers for
    non-text formats are stored verbatim; everything else is stored as
    UTF-8 text.

    Raises:
        ScriptError: If an item bundle is not a valid binary buffer.
    """
    if mime == MIME_ITEMS:
        if not isinstance(value, TypedBuffer) or not value.is_binary:
            raise ScriptError.argument_value("Item data must be a binary buffer!")
        try:
            data.update(deserialize_data(value.data))
        except ItemDataError as e:
            raise ScriptError.argument_value(e.message) from e
        return

    if not mime.startswith("text/") and isinstance(value, TypedBuffer) and value.is_binary:
        data[mime] = value.data
    else:
        data[mime] = to_string(value).encode("utf-8")


def mapping_from_pairs(args: Args) -> ClipboardMapping:
    """Build a mapping from alternating MIME and data values."""
    data: ClipboardMapping = {}
    for i in range(0, len(args), 2):
        to_item_data(args[i + 1], to_string(args[i]), data)
    return data


def clipboard_equals(
    engine: ScriptEngine, data: ClipboardMapping, mode: ClipboardMode
) -> bool:
    return all(
        engine.proxy.get_clipboard_data(mime, mode) == payload
        for mime, payload in data.items()
    )


async def set_clipboard(
    engine: ScriptEngine,
    ctx: InvocationContext,
    data: ClipboardMapping,
    mode: ClipboardMode,
) -> None:
    """Write ``data`` and wait until the live clipboard reports it back.

    Raises:
        ScriptError: OPERATION_FAILED if the clipboard never converges.
    """
    settings = engine.config.scripting
    engine.proxy.set_clipboard(data, mode)

    attempt = await wait.poll_attempts(
        lambda: clipboard_equals(engine, data, mode),
        attempts=settings.clipboard_poll_attempts,
        interval=settings.clipboard_poll_interval,
        token=ctx.token,
    )
    if attempt is None:
        logger.warning(
            "%s: clipboard did not converge after %d checks",
            ScriptErrorKind.CONVERGENCE_TIMEOUT.value,
            settings.clipboard_poll_attempts,
        )
        raise ScriptError.failed("Failed to set clipboard!")
    logger.debug("Clipboard converged on check %d", attempt)


def _row_text(engine: ScriptEngine, row: int) -> str:
    if row >= 0:
        raw = engine.proxy.browser_item_data(row, MIME_TEXT)
    else:
        raw = engine.proxy.get_clipboard_data(MIME_TEXT)
    return raw.decode("utf-8", errors="replace")


# === Application ===


async def cmd_version(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    return (
        f"{PROGRAM_NAME} v{__version__}\n"
        f"Built with: Python {platform.python_version()}, pydantic {pydantic.VERSION}\n"
    )


HELP_HEAD = (
    "Usage: clipdrive [COMMAND]\n\n"
    "Starts server if no command is specified.\n"
    "  COMMANDs:\n"
)

HELP_TAIL = (
    "NOTES:\n"
    "  - Use dash argument (-) to read data from standard input.\n"
    "  - Use double-dash argument (--) to read all following arguments without\n"
    "    expanding escape sequences (i.e. \\n, \\t and others).\n"
    '  - Use ? for MIME to print available MIME types (default is "text/plain").\n'
)


async def cmd_help(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    """Print help for all commands, or for commands matching each argument."""
    if not args:
        lines = engine.registry.help_lines() or []
        return (
            HELP_HEAD
            + "".join(lines)
            + "\n"
            + HELP_TAIL
            + f"\n{PROGRAM_NAME} v{__version__}\n"
        )

    text: list[str] = []
    for query in args:
        lines = engine.registry.help_lines(query)
        if lines is None:
            raise ScriptError(ScriptErrorKind.COMMAND_NOT_FOUND, "Command not found!")
        text.extend(lines)
    return "".join(text)


async def cmd_show(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    if args:
        engine.proxy.show_browser(args[0])
    else:
        engine.proxy.show_window()


async def cmd_hide(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.close()


async def cmd_toggle(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.toggle_visible()


async def cmd_menu(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.toggle_menu(args[0] if args else None)


async def cmd_exit(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    logger.info("Server exit requested")
    ctx.finish_payload = engine.from_string("Terminating server.\n")


async def cmd_disable(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.disable_monitoring(True)


async def cmd_enable(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.disable_monitoring(False)


async def cmd_monitoring(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> bool:
    return engine.proxy.is_monitoring_enabled()


async def cmd_ignore(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.ignore_current_clipboard()


# === Clipboard ===


async def cmd_clipboard(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> TypedBuffer:
    mime = args[0] if args else MIME_TEXT
    return TypedBuffer.from_bytes(engine.proxy.get_clipboard_data(mime), mime)


async def cmd_selection(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> TypedBuffer:
    mime = args[0] if args else MIME_TEXT
    data = engine.proxy.get_clipboard_data(mime, ClipboardMode.SELECTION)
    return TypedBuffer.from_bytes(data, mime)


async def _copy(
    engine: ScriptEngine, ctx: InvocationContext, args: Args, mode: ClipboardMode
) -> None:
    if len(args) == 1:
        data = {MIME_TEXT: to_string(args[0]).encode("utf-8")}
    elif len(args) % 2 == 0:
        data = mapping_from_pairs(args)
    else:
        raise ScriptError.argument_count()
    await set_clipboard(engine, ctx, data, mode)


async def cmd_copy(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    """Set clipboard text, or several formats from MIME/DATA pairs."""
    await _copy(engine, ctx, args, ClipboardMode.CLIPBOARD)


async def cmd_copyselection(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    await _copy(engine, ctx, args, ClipboardMode.SELECTION)


async def cmd_paste(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    """Paste the clipboard into the current window (best effort)."""
    window = engine.automation.current_window() if engine.automation else None
    if window is None:
        logger.warning("No window to paste into")
        return
    await window.paste_clipboard(ctx.token)


async def cmd_currentwindowtitle(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> str:
    window = engine.automation.current_window() if engine.automation else None
    return window.title if window is not None else ""


# === Tabs ===


async def cmd_tab(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> Any:
    """List tabs, or select a tab and run the rest of the arguments in it."""
    if not args:
        return "".join(f"{name}\n" for name in engine.proxy.tabs())
    name, rest = args
    engine.proxy.set_current_tab(name)
    return await engine.apply_rest(rest, ctx)


async def cmd_removetab(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    error = engine.proxy.remove_tab(args[0])
    if error:
        raise ScriptError.failed(error)


async def cmd_renametab(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    name, new_name = args
    error = engine.proxy.rename_tab(new_name, name)
    if error:
        raise ScriptError.failed(error)


async def cmd_exporttab(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    file_name = args[0]
    if not engine.proxy.save_tab(ctx.file_name(file_name)):
        raise ScriptError.failed(f'Cannot save to file "{file_name}"!')


async def cmd_importtab(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    file_name = args[0]
    if not engine.proxy.load_tab(ctx.file_name(file_name)):
        raise ScriptError.failed(f'Cannot import file "{file_name}"!')


# === Items ===


async def cmd_length(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> int:
    return engine.proxy.browser_length()


async def cmd_select(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    row = args[0] if args else 0
    engine.proxy.browser_move_to_clipboard(row)
    engine.proxy.browser_delayed_save_items()


async def cmd_next(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.browser_copy_next_item_to_clipboard()


async def cmd_previous(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    engine.proxy.browser_copy_previous_item_to_clipboard()


async def cmd_add(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    with engine.lock(len(args)):
        for text in args:
            engine.proxy.browser_add_text(text)
    engine.proxy.browser_delayed_save_items()


async def cmd_insert(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    row, text = args
    engine.proxy.browser_add({MIME_TEXT: text.encode("utf-8")}, row)
    engine.proxy.browser_delayed_save_items()


async def cmd_remove(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    """Remove rows, highest index first so earlier removals keep later indices valid."""
    rows = sorted(args or [0], reverse=True)
    with engine.lock(len(rows)):
        for row in rows:
            engine.proxy.browser_remove_row(row)
    engine.proxy.browser_delayed_save_items()


async def cmd_edit(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    """Edit rows (-1 for the clipboard) or text in an editor."""
    parts: list[str] = []
    for value in args:
        row = to_int(value)
        parts.append(_row_text(engine, row) if row is not None else to_string(value))
    text = ctx.input_separator.join(parts)

    if engine.proxy.browser_open_editor(engine.from_string(text)):
        return

    engine.proxy.show_browser()
    single_row = to_int(args[0]) if len(args) == 1 else None
    if single_row is not None and single_row >= 0:
        engine.proxy.browser_set_current(single_row)
        engine.proxy.browser_edit_row(single_row)
    else:
        engine.proxy.browser_edit_new(text)


# === Raw data ===


async def cmd_separator(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> Any:
    separator, rest = args
    ctx.input_separator = separator
    return await engine.apply_rest(rest, ctx)


async def cmd_read(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> TypedBuffer:
    """Concatenate data of rows (-1 for the clipboard) in the last given MIME."""
    mime = MIME_TEXT
    separator = ctx.input_separator.encode("utf-8")
    chunks: list[bytes] = []
    for value in args:
        row = to_int(value)
        if row is None:
            mime = to_string(value)
        elif row >= 0:
            chunks.append(engine.proxy.browser_item_data(row, mime))
        else:
            chunks.append(engine.proxy.get_clipboard_data(mime))

    if not chunks:
        return TypedBuffer.from_bytes(engine.proxy.get_clipboard_data(mime), mime)
    return TypedBuffer.from_bytes(separator.join(chunks), mime)


def _row_and_pairs(args: Args) -> tuple[int, ClipboardMapping]:
    row = to_int(args[0]) if args else None
    pairs = args[1:] if row is not None else args
    if len(pairs) < 2 or len(pairs) % 2 != 0:
        raise ScriptError.argument_count()
    return (row if row is not None else 0), mapping_from_pairs(pairs)


async def cmd_write(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    """Insert a new item built from MIME/DATA pairs at a row (default 0)."""
    row, data = _row_and_pairs(args)
    engine.proxy.browser_add(data, row)
    engine.proxy.browser_delayed_save_items()


async def cmd_change(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    row, data = _row_and_pairs(args)
    engine.proxy.browser_change(data, row)
    engine.proxy.browser_delayed_save_items()


async def cmd_getitem(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> TypedBuffer:
    return TypedBuffer.from_bytes(serialize_data(engine.proxy.browser_item(args[0])), MIME_ITEMS)


async def cmd_setitem(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    row, value = args
    data: ClipboardMapping = {}
    to_item_data(value, MIME_ITEMS, data)
    engine.proxy.browser_add(data, row)
    engine.proxy.browser_delayed_save_items()


async def cmd_pack(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> TypedBuffer:
    if len(args) % 2 != 0:
        raise ScriptError.argument_count()
    return TypedBuffer.from_bytes(serialize_data(mapping_from_pairs(args)), MIME_ITEMS)


async def cmd_unpack(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> dict[str, TypedBuffer]:
    data: ClipboardMapping = {}
    to_item_data(args[0], MIME_ITEMS, data)
    return {mime: TypedBuffer.from_bytes(payload, mime) for mime, payload in data.items()}


async def cmd_tobase64(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    value = args[0]
    raw = value.data if isinstance(value, TypedBuffer) else value.encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


async def cmd_frombase64(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> TypedBuffer:
    try:
        raw = base64.b64decode(args[0].encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ScriptError.argument_value(f"Invalid base64 data: {e}") from e
    return TypedBuffer.from_bytes(raw)


# === Actions ===


async def cmd_action(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    """Run a program on text of leading rows, or open the action dialog."""
    texts: list[str] = []
    index = 0
    for index, value in enumerate(args):
        row = to_int(value)
        if row is None:
            break
        raw = engine.proxy.browser_item_data(row, MIME_TEXT)
        texts.append(raw.decode("utf-8", errors="replace"))
    else:
        index = len(args)

    if texts:
        text = ctx.input_separator.join(texts)
    else:
        raw = engine.proxy.get_clipboard_data(MIME_TEXT)
        text = raw.decode("utf-8", errors="replace")
    data = {MIME_TEXT: text.encode("utf-8")}

    if index < len(args):
        command = ActionCommand(
            cmd=to_string(args[index]),
            input=MIME_TEXT,
            output=MIME_TEXT,
            sep=to_string(args[index + 1]) if index + 1 < len(args) else "\n",
            output_tab=engine.proxy.current_tab(),
            wait=False,
        )
        logger.debug("Dispatching action command: %s", command.cmd)
        engine.proxy.action(data, command)
    else:
        engine.proxy.open_action_dialog(data)


async def cmd_popup(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    title = args[0]
    message = args[1] if len(args) > 1 else ""
    msec = to_int(args[2]) if len(args) > 2 else None
    engine.proxy.show_message(title, message, 8000 if msec is None else msec)


async def cmd_data(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> TypedBuffer:
    mime = args[0]
    return TypedBuffer.from_bytes(engine.proxy.get_action_data(ctx.action_id, mime), mime)


# === Configuration and invocation state ===


async def cmd_config(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str | None:
    name = args[0] if args else ""
    value = args[1] if len(args) > 1 else None
    result = engine.proxy.config(name, value)
    if result is None:
        raise ScriptError.failed(f'Invalid option "{name}"!')
    return f"{result}\n" if result else None


async def cmd_currentpath(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    if args:
        ctx.current_path = args[0]
    return ctx.current_path


async def cmd_str(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    return args[0]


async def cmd_input(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> TypedBuffer:
    """Read data the client supplies, asking for it if needed."""
    return TypedBuffer.from_bytes(await ctx.channel.read_input())


async def cmd_print(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    value = args[0]
    payload = value.data if isinstance(value, TypedBuffer) else engine.from_string(value)
    await ctx.channel.send(payload, MessageStatus.SUCCESS)


async def cmd_abort(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    ctx.channel.abort()
    ctx.token.raise_if_cancelled()


async def cmd_fail(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    raise ScriptError.failed("")


async def cmd_keys(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> None:
    """Pass key sequences to the application window (used in tests)."""
    delay = engine.config.scripting.keys_delay_ms / 1000
    for keys in args:
        await wait.sleep(delay, ctx.token)
        error = engine.proxy.send_keys(keys)
        if error:
            raise ScriptError.failed(error)
        # Shortcuts are postponed while modal windows block them.
        engine.proxy.send_keys("FLUSH_KEYS")


# === Selection ===


async def cmd_selectitems(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> bool:
    return engine.proxy.select_items(list(args))


async def cmd_selected(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    return engine.proxy.selected()


async def cmd_selectedtab(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    return engine.proxy.selected_tab()


async def cmd_selecteditems(
    engine: ScriptEngine, ctx: InvocationContext, args: Args
) -> list[int]:
    return engine.proxy.selected_items()


async def cmd_currentitem(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> int:
    return engine.proxy.current_item()


async def cmd_escapehtml(engine: ScriptEngine, ctx: InvocationContext, args: Args) -> str:
    return html.escape(args[0]).replace("\n", "<br />")


# === Command table ===

_MIME = Param("MIME", required=False)
_ROW = Param("ROW", ArgKind.INT)
_ROWS = Param("ROWS", ArgKind.INT, required=False, variadic=True)
_DATA_PAIRS = Param("ARGS", ArgKind.ANY, required=False, variadic=True)
_REST = Param("COMMAND", ArgKind.REST, required=False)

COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("show", cmd_show, (Param("NAME", required=False),), section=1,
                help=(HelpEntry("", "Show main window."),)),
    CommandSpec("hide", cmd_hide, section=1, help=(HelpEntry("", "Hide main window."),)),
    CommandSpec("toggle", cmd_toggle, section=1,
                help=(HelpEntry("", "Show or hide main window."),)),
    CommandSpec("menu", cmd_menu, (Param("NAME", required=False),), section=1,
                help=(HelpEntry("", "Open context menu."),)),
    CommandSpec("exit", cmd_exit, section=1, help=(HelpEntry("", "Exit server."),)),
    CommandSpec("disable", cmd_disable, section=1,
                help=(HelpEntry("", "Disable clipboard content storing."),)),
    CommandSpec("enable", cmd_enable, section=1,
                help=(HelpEntry("", "Enable clipboard content storing."),)),
    CommandSpec("monitoring", cmd_monitoring),
    CommandSpec("ignore", cmd_ignore),
    CommandSpec("clipboard", cmd_clipboard, (_MIME,), section=2,
                help=(HelpEntry(" [MIME]", "Print clipboard content."),)),
    CommandSpec("selection", cmd_selection, (_MIME,), section=2,
                help=(HelpEntry(" [MIME]", "Print X11 selection content."),)),
    CommandSpec("paste", cmd_paste, section=2, help=(HelpEntry(
        "", "Paste clipboard to current window\n(may not work with some applications)."),)),
    CommandSpec("copy", cmd_copy, (Param("ARGS", ArgKind.ANY, variadic=True),), section=2,
                help=(HelpEntry(" TEXT", "Set clipboard text."),
                      HelpEntry(" MIME DATA [MIME DATA]...", "\nSet clipboard content."))),
    CommandSpec("copyselection", cmd_copyselection, (Param("ARGS", ArgKind.ANY, variadic=True),)),
    CommandSpec("currentwindowtitle", cmd_currentwindowtitle),
    CommandSpec("length", cmd_length, aliases=("count", "size"), section=3,
                help=(HelpEntry("", "Print number of items in history."),)),
    CommandSpec("select", cmd_select, (Param("ROW", ArgKind.INT, required=False),), section=3,
                help=(HelpEntry(" [ROW=0]", "Copy item in the row to clipboard."),)),
    CommandSpec("next", cmd_next, section=3,
                help=(HelpEntry("", "Copy next item from current tab to clipboard."),)),
    CommandSpec("previous", cmd_previous, section=3,
                help=(HelpEntry("", "Copy previous item from current tab to clipboard."),)),
    CommandSpec("add", cmd_add, (Param("TEXT", variadic=True, required=False),), section=3,
                help=(HelpEntry(" TEXT...", "Add text into clipboard."),)),
    CommandSpec("insert", cmd_insert, (_ROW, Param("TEXT")), section=3,
                help=(HelpEntry(" ROW TEXT", "Insert text into given row."),)),
    CommandSpec("remove", cmd_remove, (_ROWS,), section=3,
                help=(HelpEntry(" [ROWS=0...]", "Remove items in given rows."),)),
    CommandSpec("edit", cmd_edit, (Param("ROWS", ArgKind.ANY, required=False, variadic=True),),
                section=3, help=(HelpEntry(
                    " [ROWS...]",
                    "Edit items or edit new one.\nValue -1 is for current text in clipboard."),)),
    CommandSpec("separator", cmd_separator, (Param("SEPARATOR"), _REST), section=4,
                help=(HelpEntry(" SEPARATOR", "Set separator for items on output."),)),
    CommandSpec("read", cmd_read, (Param("ARGS", ArgKind.ANY, required=False, variadic=True),),
                section=4,
                help=(HelpEntry(" [MIME|ROW]...", "Print raw data of clipboard or item in row."),)),
    CommandSpec("write", cmd_write, (_DATA_PAIRS,), section=4, help=(HelpEntry(
        " [ROW=0] MIME DATA [MIME DATA]...", "\nWrite raw data to given row."),)),
    CommandSpec("change", cmd_change, (_DATA_PAIRS,), section=4, help=(HelpEntry(
        " [ROW=0] MIME DATA [MIME DATA]...", "\nChange data of item in given row."),)),
    CommandSpec("action", cmd_action, (_DATA_PAIRS,), section=5, help=(
        HelpEntry(" [ROWS=0...]", "Show action dialog."),
        HelpEntry(" [ROWS=0...] [PROGRAM [SEPARATOR=\\n]]",
                  "\nRun PROGRAM on item text in the rows.\n"
                  "Use %1 in PROGRAM to pass text as argument."),
    )),
    CommandSpec("popup", cmd_popup, (Param("TITLE"), Param("MESSAGE", required=False),
                                     Param("TIME", ArgKind.ANY, required=False)), section=5,
                help=(HelpEntry(" TITLE MESSAGE [TIME=8000]",
                                "\nShow tray popup message for TIME milliseconds."),)),
    CommandSpec("tab", cmd_tab, (Param("NAME", required=False), _REST), section=6, help=(
        HelpEntry("", "List available tab names."),
        HelpEntry(" NAME [COMMAND]",
                  "Run command on tab with given name.\n"
                  "Tab is created if it doesn't exist.\n"
                  "Default is the first tab."),
    )),
    CommandSpec("removetab", cmd_removetab, (Param("NAME"),), section=6,
                help=(HelpEntry(" NAME", "Remove tab."),)),
    CommandSpec("renametab", cmd_renametab, (Param("NAME"), Param("NEW_NAME")), section=6,
                help=(HelpEntry(" NAME NEW_NAME", "Rename tab."),)),
    CommandSpec("exporttab", cmd_exporttab, (Param("FILE_NAME"),), section=7,
                help=(HelpEntry(" FILE_NAME", "Export items to file."),)),
    CommandSpec("importtab", cmd_importtab, (Param("FILE_NAME"),), section=7,
                help=(HelpEntry(" FILE_NAME", "Import items from file."),)),
    CommandSpec("config", cmd_config, (Param("OPTION", required=False),
                                       Param("VALUE", required=False)), section=8, help=(
        HelpEntry("", "List all options."),
        HelpEntry(" OPTION", "Get option value."),
        HelpEntry(" OPTION VALUE", "Set option value."),
    )),
    CommandSpec("help", cmd_help, (Param("COMMAND", required=False, variadic=True),),
                section=9, help=(HelpEntry(" [COMMAND]...",
                                           "\nPrint help for COMMAND or all commands."),)),
    CommandSpec("version", cmd_version, section=9, help=(HelpEntry(
        "", "\nPrint version of program and libraries."),)),
    CommandSpec("keys", cmd_keys, (Param("KEYS", variadic=True),), section=9, help=(HelpEntry(
        " KEYS...", "Pass keys to the main window (used in tests)."),)),
    CommandSpec("currentpath", cmd_currentpath, (Param("PATH", required=False),)),
    CommandSpec("str", cmd_str, (Param("VALUE"),)),
    CommandSpec("input", cmd_input),
    CommandSpec("data", cmd_data, (Param("MIME"),)),
    CommandSpec("print", cmd_print, (Param("VALUE", ArgKind.BUFFER),)),
    CommandSpec("abort", cmd_abort),
    CommandSpec("fail", cmd_fail),
    CommandSpec("selectitems", cmd_selectitems, (_ROWS,)),
    CommandSpec("selected", cmd_selected),
    CommandSpec("selectedtab", cmd_selectedtab),
    CommandSpec("selecteditems", cmd_selecteditems),
    CommandSpec("currentitem", cmd_currentitem, aliases=("index",)),
    CommandSpec("escapehtml", cmd_escapehtml, (Param("TEXT"),)),
    CommandSpec("unpack", cmd_unpack, (Param("DATA", ArgKind.BUFFER),)),
    CommandSpec("pack", cmd_pack, (_DATA_PAIRS,)),
    CommandSpec("getitem", cmd_getitem, (_ROW,)),
    CommandSpec("setitem", cmd_setitem, (_ROW, Param("DATA", ArgKind.BUFFER))),
    CommandSpec("tobase64", cmd_tobase64, (Param("DATA", ArgKind.BUFFER),)),
    CommandSpec("frombase64", cmd_frombase64, (Param("TEXT"),)),
)


def default_registry() -> CommandRegistry:
    return CommandRegistry.from_specs(COMMANDS)
