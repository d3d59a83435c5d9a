"""Key normalisation for the terminal frontends."""

from __future__ import annotations

import pytest

from frontend.cli.input_handler import _decode, _resolve


@pytest.mark.parametrize(
    "ch, action",
    [
        ("w", "up"), ("S", "down"), ("a", "left"), ("D", "right"),
        ("\t", "next"), ("[", "prev"), ("n", "hint"), ("T", "steps"),
        ("v", "solve"), ("p", "print"), ("\r", "enter"), ("\x03", "quit"),
        ("7", "7"), ("\x01", ""),
    ],
)
def test_resolve(ch: str, action: str) -> None:
    assert _resolve(ch) == action


def _reader(*chars: str | None):
    it = iter(chars)
    return lambda: next(it, None)


@pytest.mark.parametrize(
    "tail, action",
    [(("[", "A"), "up"), (("[", "D"), "left"), (("[", "Z"), "prev"), (("[", "X"), "")],
)
def test_escape_sequences(tail: tuple[str, ...], action: str) -> None:
    assert _decode("\x1b", _reader(*tail)) == action


def test_bare_escape_quits() -> None:
    assert _decode("\x1b", _reader()) == "quit"
