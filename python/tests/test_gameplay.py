"""Game session: selection, move counting, hints and export."""

from __future__ import annotations

import json

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay import GamePlay
from backend.engine.gameplay.game import HINT_STEPS
from backend.engine.gamesolver import Solver
from backend.models.board import Board, Direction, Move


@pytest.fixture
def game() -> GamePlay:
    return GamePlay("warmup")


# -- selection ----------------------------------------------------------------


def test_move_without_selection_is_ignored(game: GamePlay) -> None:
    assert game.selected is None
    assert not game.move(Direction.DOWN)
    assert game.state.moves == 0


def test_select_rejects_unknown_index(game: GamePlay) -> None:
    assert game.select(2)
    assert not game.select(99)
    assert game.selected == 2
    assert game.select(None)
    assert game.selected is None


def test_select_at(game: GamePlay) -> None:
    assert game.select_at(0, 0)
    assert game.selected == 4
    assert game.select_at(2, 2)
    assert game.selected == 0
    assert not game.select_at(1, 3)
    assert game.selected is None


def test_cycle_selection_wraps(game: GamePlay) -> None:
    count = len(game.state.board.pieces)
    assert game.cycle_selection() == 0
    assert game.cycle_selection(-1) == count - 1
    assert game.cycle_selection() == 0

    game.select(None)
    assert game.cycle_selection(-1) == count - 1


# -- movement -----------------------------------------------------------------


def test_illegal_move_does_not_count(game: GamePlay) -> None:
    game.select(0)
    assert not game.move(Direction.UP)
    assert game.state.moves == 0


def test_legal_moves_count_and_win(game: GamePlay) -> None:
    game.select(0)
    assert game.move(Direction.DOWN)
    assert game.state.moves == 1
    assert not game.is_won
    assert game.move(Direction.DOWN)
    assert game.state.moves == 2
    assert game.is_won
    assert not game.state.assisted


def test_solver_moves_count_and_mark_assisted(game: GamePlay) -> None:
    for move in Solver.hint(game.state.board, steps=None):
        assert game.apply(move, assisted=True)
    assert game.is_won
    assert game.state.moves == 2
    assert game.state.assisted


def test_restart(game: GamePlay) -> None:
    start = game.state.board
    game.apply(Move(0, Direction.DOWN), assisted=True)
    game.restart()
    assert game.state.board == start
    assert game.state.moves == 0
    assert not game.state.assisted


def test_from_board() -> None:
    board = GamePlay("classic").state.board
    game = GamePlay.from_board(board)
    assert game.layout == "custom"
    assert game.state.board is board
    assert game.hint_steps == HINT_STEPS[0]


def test_scrambled_session() -> None:
    game = GamePlay.scrambled("classic", moves=20, seed=11)
    board = GameGenerator.generate("classic", 20, 11)
    assert game.layout == "classic"
    assert game.state.board == board
    assert not game.is_won
    (first,) = Solver.hint(board, steps=1)
    assert game.apply(first)
    assert game.state.board != board
    game.restart()
    assert game.state.board == board
    assert game.state.moves == 0


def test_unknown_layout() -> None:
    with pytest.raises(KeyError):
        GamePlay("nonexistent")


# -- hints & export -----------------------------------------------------------


def test_hint_steps_cycle(game: GamePlay) -> None:
    labels = [game.hint_label]
    for _ in HINT_STEPS:
        game.cycle_hint_steps()
        labels.append(game.hint_label)
    assert labels == ["1 step", "3 steps", "5 steps", "10 steps", "all", "1 step"]


def test_export(game: GamePlay, tmp_path) -> None:
    game.select(0)
    game.move(Direction.DOWN)
    path = game.export(tmp_path / "boards")

    assert path.parent == tmp_path / "boards"
    assert path.name.startswith("warmup-")
    assert Board.from_dict(json.loads(path.read_text())) == game.state.board


def test_pause_freezes_time(game: GamePlay) -> None:
    game.state.pause()
    frozen = game.state.elapsed_time
    assert game.state.elapsed_time == frozen
    game.state.resume()
    assert game.state.elapsed_time >= frozen
