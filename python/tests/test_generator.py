"""Named layouts and scrambles."""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import Solver
from backend.models.board import Board


def test_layout_names() -> None:
    assert GameGenerator.layouts()[:2] == ["classic", "warmup"]


def test_unknown_layout_lists_choices() -> None:
    with pytest.raises(KeyError, match="classic"):
        GameGenerator.layout("sunflower")


@pytest.mark.parametrize("name", GameGenerator.layouts())
def test_layouts_are_fresh_and_unsolved(name: str) -> None:
    board = GameGenerator.layout(name)
    assert board == GameGenerator.layout(name)
    assert not board.is_solved()


def test_scramble_is_reproducible() -> None:
    start = GameGenerator.layout("classic")
    a = GameGenerator.scramble(start, 30, random.Random(7))
    b = GameGenerator.scramble(start, 30, random.Random(7))
    assert a == b
    Board.from_dict(a.to_dict())


def test_scramble_zero_moves() -> None:
    start = GameGenerator.layout("classic")
    assert GameGenerator.scramble(start, 0, random.Random(1)) == start


def test_scramble_stays_solvable() -> None:
    start = GameGenerator.layout("warmup")
    board = GameGenerator.scramble(start, 2, random.Random(3))
    moves = Solver.solve(board)
    assert moves is not None
    assert len(moves) <= 4


def test_generate_returns_unsolved_board() -> None:
    a = GameGenerator.generate("warmup", moves=5, seed=11)
    b = GameGenerator.generate("warmup", moves=5, seed=11)
    assert a == b
    assert not a.is_solved()
