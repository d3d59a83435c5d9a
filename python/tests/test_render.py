"""Terminal board rendering."""

from __future__ import annotations

from rich.console import Console

from backend.engine.gamegenerator import GameGenerator
from frontend.cli.rich.app import _render_board as rich_render
from frontend.cli.vanilla.app import _render_board as vanilla_render


def test_vanilla_board_has_one_line_per_row() -> None:
    board = GameGenerator.layout("classic")
    lines = vanilla_render(board).splitlines()
    assert len(lines) == board.height + 2
    # The two empty cells of the classic opening lie inside the exit.
    assert lines[-2].count("░") == 2


def test_rich_board_renders() -> None:
    board = GameGenerator.layout("warmup")
    console = Console(width=80, record=True, color_system=None)
    console.print(rich_render(board, selected=0))
    text = console.export_text()
    assert "░" in text
