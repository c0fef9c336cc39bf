"""Shared fixtures for CLI output tests."""

import re
from io import StringIO

import pytest
from rich.console import Console

# Width wide enough for the calendar and graph tables
CONSOLE_WIDTH = 120

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def console_text(console: Console) -> str:
    """Text printed to a StringIO-backed console, without color codes."""
    return _ANSI_ESCAPE.sub("", console.file.getvalue())


@pytest.fixture
def console() -> Console:
    """Colored console writing into memory."""
    return Console(file=StringIO(), force_terminal=True, width=CONSOLE_WIDTH)
