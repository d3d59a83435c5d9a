"""Canonical keys used to deduplicate boards during search."""

from __future__ import annotations

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamerules import MoveRules
from backend.engine.gamesolver import encode_state
from backend.models.board import Board, Direction, Move


def test_classic_key() -> None:
    assert encode_state(GameGenerator.layout("classic")) == "21122112233224424004"


def test_key_covers_every_cell() -> None:
    board = Board.from_dict(
        {
            "width": 3,
            "height": 3,
            "goal": [1, 1],
            "pieces": [{"kind": "king", "x": 0, "y": 0}],
        }
    )
    assert encode_state(board) == "110110000"


def test_same_kind_pieces_are_interchangeable() -> None:
    board = GameGenerator.layout("classic")
    pieces = list(board.pieces)
    pieces[6], pieces[7] = pieces[7], pieces[6]
    pieces[1], pieces[4] = pieces[4], pieces[1]
    swapped = Board(pieces=tuple(pieces))

    assert swapped != board
    assert encode_state(swapped) == encode_state(board)


def test_moving_a_piece_changes_the_key() -> None:
    board = GameGenerator.layout("classic")
    after = MoveRules.apply(board, Move(6, Direction.DOWN))
    assert encode_state(after) == "21122112233220424404"
