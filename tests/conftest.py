"""Platform markers for the keyboard automation tests."""

import sys

import pytest


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "windows: needs the real Win32 keyboard backend")
    config.addinivalue_line("markers", "unix_only: asserts behavior where Win32 is missing")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip tests whose platform marker does not match the running OS."""
    on_windows = sys.platform == "win32"
    for item in items:
        if "windows" in item.keywords and not on_windows:
            item.add_marker(pytest.mark.skip(reason="Win32 only"))
        if "unix_only" in item.keywords and on_windows:
            item.add_marker(pytest.mark.skip(reason="Not on Win32"))
