"""Slide legality: bounds, collisions and enumeration order."""

from __future__ import annotations

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamerules import MoveRules
from backend.engine.gamerules.rules import DIRECTIONS
from backend.models.board import Board, Direction, Move, Piece, PieceKind

UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

# King in the middle, a pawn in every corner, a vertical on the bottom edge
# and a horizontal on the right edge.
_EDGES = Board(
    pieces=(
        Piece.of(PieceKind.KING, 1, 1),
        Piece.of(PieceKind.PAWN, 0, 0),
        Piece.of(PieceKind.PAWN, 3, 0),
        Piece.of(PieceKind.PAWN, 0, 4),
        Piece.of(PieceKind.PAWN, 3, 4),
        Piece.of(PieceKind.VERTICAL, 1, 3),
        Piece.of(PieceKind.HORIZONTAL, 2, 3),
    )
)


@pytest.mark.parametrize(
    "index, direction",
    [
        (1, UP), (1, LEFT),
        (2, UP), (2, RIGHT),
        (3, DOWN), (3, LEFT),
        (4, DOWN), (4, RIGHT),
        (5, DOWN),
        (6, RIGHT),
    ],
)
def test_slides_off_the_grid_are_rejected(index: int, direction: Direction) -> None:
    assert MoveRules.destination(_EDGES, index, direction) is None
    assert MoveRules.apply(_EDGES, Move(index, direction)) is None


def test_collisions_are_rejected() -> None:
    # King (1,1) sits above the vertical at (1,3) and horizontal at (2,3).
    assert not MoveRules.can_move(_EDGES, 0, DOWN)
    # Horizontal (2,3)-(3,3) would run into the vertical at (1,3).
    assert not MoveRules.can_move(_EDGES, 6, LEFT)
    # Vertical (1,3)-(1,4) would run into the King's bottom row.
    assert not MoveRules.can_move(_EDGES, 5, UP)


def test_piece_does_not_block_itself() -> None:
    board = Board(pieces=(Piece.of(PieceKind.KING, 1, 1),))
    assert MoveRules.destination(board, 0, DOWN) == (1, 2)
    assert MoveRules.destination(board, 0, RIGHT) == (2, 1)


def test_classic_opening_moves() -> None:
    board = GameGenerator.layout("classic")
    assert MoveRules.legal_moves(board) == [
        Move(6, DOWN),
        Move(7, DOWN),
        Move(8, RIGHT),
        Move(9, LEFT),
    ]


def test_single_king_filling_the_grid_cannot_move() -> None:
    board = Board(pieces=(Piece.of(PieceKind.KING, 0, 0),), width=2, height=2,
                  goal=(0, 0))
    assert MoveRules.legal_moves(board) == []


def test_apply_rejects_unknown_piece() -> None:
    assert MoveRules.apply(GameGenerator.layout("classic"), Move(42, UP)) is None


def test_apply_returns_new_board() -> None:
    board = GameGenerator.layout("classic")
    after = MoveRules.apply(board, Move(6, DOWN))
    assert after is not None
    assert after.pieces[6] == Piece.of(PieceKind.PAWN, 1, 4)
    assert board.pieces[6] == Piece.of(PieceKind.PAWN, 1, 3)
    assert after.pieces[:6] == board.pieces[:6]


@pytest.mark.parametrize("layout", GameGenerator.layouts())
def test_successors_are_ordered_and_valid(layout: str) -> None:
    board = GameGenerator.layout(layout)
    pairs = list(MoveRules.successors(board))
    assert pairs

    order = [(m.piece_index, DIRECTIONS.index(m.direction)) for m, _ in pairs]
    assert order == sorted(order)

    for move, nxt in pairs:
        assert nxt == MoveRules.apply(board, move)
        # Re-validating through the constructor must not raise.
        Board.from_dict(nxt.to_dict())
