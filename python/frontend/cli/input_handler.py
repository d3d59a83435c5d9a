"""Single-keypress reader shared by the terminal frontends.

Keys are normalised to action strings (``"up"``, ``"hint"``, ``"next"``…)
so the frontends never deal with raw escape sequences.  Works on
macOS / Linux (tty+termios) and Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable

# -- key mapping ---------------------------------------------------------------

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "r": "restart",
    "h": "help",
    "?": "help",
    "v": "solve",
    "n": "hint",
    "t": "steps",
    "p": "print",
    "\t": "next",
    "]": "next",
    "[": "prev",
    "\r": "enter",
    "\n": "enter",
}

# Final byte of ``ESC [ <x>`` sequences.
_CSI_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "Z": "prev",  # Shift-Tab
}


def _resolve(ch: str) -> str:
    """Map a raw character to its action string.

    Letters are case-insensitive; unmapped printable characters (digits
    select pieces) pass through unchanged.
    """
    action = _KEY_MAP.get(ch) or _KEY_MAP.get(ch.lower())
    if action is not None:
        return action
    return ch if ch.isprintable() else ""


def _decode(ch: str, read_next: Callable[[], str | None]) -> str:
    """Decode *ch*, pulling the rest of an escape sequence via *read_next*.

    *read_next* returns ``None`` when no further byte is pending, which
    marks a bare Escape.
    """
    if ch != "\x1b":
        return _resolve(ch)
    ch2 = read_next()
    if ch2 is None:
        return "quit"
    if ch2 != "[":
        return "quit"
    ch3 = read_next()
    return _CSI_MAP.get(ch3 or "", "")


# -- low-level character readers -----------------------------------------------


def _getch_unix() -> str:
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    return ch


def _getch_windows() -> str:
    import msvcrt  # type: ignore[import-not-found]

    return msvcrt.getch().decode("utf-8", errors="ignore")


_getch = _getch_windows if os.name == "nt" else _getch_unix


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Read a single keypress and return a normalised action string.

    Blocks until a key is pressed.

    Possible return values:
        "up", "down", "left", "right"  — slide the selected piece
        "next", "prev"                 — Tab / ] and Shift-Tab / [
        "quit"                         — q / Ctrl-C / Escape
        "restart"                      — r
        "help"                         — h / ?
        "solve"                        — v (auto-play the solution)
        "hint"                         — n (play hint moves)
        "steps"                        — t (cycle hint length)
        "print"                        — p (export board state)
        "enter"                        — Enter / Return
        "<char>"                       — unmapped printable char (digits)
        ""                             — unrecognised key
    """
    return _decode(_getch(), _getch)


def get_key_timeout(timeout: float) -> str | None:
    """Read a single keypress with a timeout.

    Returns the normalised action string (same as ``get_key``) or
    ``None`` if no key was pressed within *timeout* seconds.
    """
    if os.name == "nt":
        import msvcrt  # type: ignore[import-not-found]
        import time as _time

        end = _time.monotonic() + timeout
        while _time.monotonic() < end:
            if msvcrt.kbhit():
                return get_key()
            _time.sleep(0.02)
        return None

    import select
    import termios
    import tty

    fd = sys.stdin.fileno()

    def _read(wait: float) -> str | None:
        # os.read is unbuffered, so select() still sees the remaining
        # bytes of a multi-byte escape sequence.
        ready, _, _ = select.select([fd], [], [], wait)
        if not ready:
            return None
        return os.read(fd, 1).decode("utf-8", errors="ignore")

    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = _read(timeout)
        if ch is None:
            return None
        return _decode(ch, lambda: _read(0.1))
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
