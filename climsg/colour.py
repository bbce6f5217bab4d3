"""Colour styling for console messages.

Escape codes are all padded to the same length so that output aligned with
tab stops stays aligned, as long as styles are not mixed within one column.

Colour is enabled or disabled process-wide. The state is detected from the
environment once (``FORCE_COLOR``, ``NO_COLOR``, ``TERM`` and whether stdout is
a terminal) unless it is set explicitly with :func:`set_colour_enabled`.
"""

from __future__ import annotations

import enum
import os
import sys
import threading
from typing import Mapping, TextIO

from colorama import just_fix_windows_console


class Style(enum.Enum):
    """Semantic style tags."""

    ERROR = "error"
    TITLE = "title"
    INFO = "info"
    WARN = "warn"
    SUCCESS = "success"
    CAUSE = "cause"


RESET = "\x1b[000000m"

CODES: dict[Style, str] = {
    Style.ERROR: "\x1b[1;0031m",  # bold red
    Style.TITLE: "\x1b[1;0096m",  # bold bright cyan
    Style.INFO: "\x1b[1;0036m",  # bold cyan
    Style.WARN: "\x1b[1;0033m",  # bold yellow
    Style.SUCCESS: "\x1b[1;0032m",  # bold green
    Style.CAUSE: "\x1b[1;0090m",  # bold grey
}


class ColourMode(enum.Enum):
    """How a printer decides whether to colour its output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    @classmethod
    def parse(cls, raw: str) -> ColourMode:
        """Parses a mode name (case-insensitive).

        Raises:
            ValueError: If `raw` is not one of auto/always/never.
        """
        try:
            return cls(raw.strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown colour mode {raw!r} (expected one of: {choices}).") from None

    def resolve(self) -> bool:
        if self is ColourMode.ALWAYS:
            return True
        if self is ColourMode.NEVER:
            return False
        return colour_enabled()


_LOCK = threading.Lock()
_OVERRIDE: bool | None = None
_DETECTED: bool | None = None
_INITIALIZED = False


def init_console() -> None:
    """Initializes console for ANSI color support (especially on Windows)."""
    global _INITIALIZED
    if _INITIALIZED:
        return
    _INITIALIZED = True
    try:
        just_fix_windows_console()
    except Exception:
        # ! Coloring must never break functionality.
        return


def detect_colour(environ: Mapping[str, str] | None = None, stream: TextIO | None = None) -> bool:
    """Decides whether colour should be used, from the environment alone.

    Order:
        1. ``FORCE_COLOR`` set and non-empty: enabled (even if ``NO_COLOR`` is set).
        2. ``NO_COLOR`` set and non-empty: disabled.
        3. ``TERM=dumb``: disabled.
        4. Enabled only if `stream` (default stdout) is a terminal.
    """
    if environ is None:
        environ = os.environ
    if stream is None:
        stream = sys.stdout

    if environ.get("FORCE_COLOR", "").strip():
        return True
    if environ.get("NO_COLOR", "").strip():
        return False
    if environ.get("TERM", "").strip() == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # ! isatty() on a closed stream.
        return False


def colour_enabled() -> bool:
    """Returns the process-wide colour state, detecting it on first use."""
    global _DETECTED
    with _LOCK:
        if _OVERRIDE is not None:
            return _OVERRIDE
        if _DETECTED is None:
            init_console()
            _DETECTED = detect_colour()
        return _DETECTED


def set_colour_enabled(enabled: bool | None) -> None:
    """Forces colour on or off for the whole process.

    Passing None removes the override; the detected state applies again.
    """
    global _OVERRIDE
    with _LOCK:
        _OVERRIDE = None if enabled is None else bool(enabled)


def style(tag: Style, text: str, *, enabled: bool | None = None) -> str:
    """Wraps `text` in the escape code for `tag` when colour is enabled."""
    if enabled is None:
        enabled = colour_enabled()
    if not enabled:
        return text
    return f"{CODES[tag]}{text}{RESET}"
