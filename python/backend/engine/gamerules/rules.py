"""Slide legality shared by the solver and every frontend.

A slide moves exactly one piece by exactly one cell.  It is legal when the
translated rectangle stays on the grid and does not overlap any *other*
piece; the moving piece never collides with itself.
"""

from __future__ import annotations

from collections.abc import Iterator

from backend.models.board import (
    Board,
    Direction,
    Move,
    rect_in_bounds,
    rects_overlap,
)

# Enumeration order for move generation; ties between equally short
# solutions are broken by it.
DIRECTIONS: tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


class MoveRules:
    """Stateless move generator — all methods are static."""

    @staticmethod
    def destination(
        board: Board, index: int, direction: Direction
    ) -> tuple[int, int] | None:
        """Return the new top-left of piece *index*, or ``None`` if blocked."""
        piece = board.pieces[index]
        dx, dy = direction.delta
        nx, ny = piece.x + dx, piece.y + dy
        moved = (nx, ny, piece.width, piece.height)

        if not rect_in_bounds(moved, board.width, board.height):
            return None

        for j, other in enumerate(board.pieces):
            if j == index:
                continue
            if rects_overlap(moved, (other.x, other.y, other.width, other.height)):
                return None

        return nx, ny

    @staticmethod
    def can_move(board: Board, index: int, direction: Direction) -> bool:
        return MoveRules.destination(board, index, direction) is not None

    @staticmethod
    def apply(board: Board, move: Move) -> Board | None:
        """Return the board after *move*, or ``None`` if the move is illegal."""
        if not 0 <= move.piece_index < len(board.pieces):
            return None
        dest = MoveRules.destination(board, move.piece_index, move.direction)
        if dest is None:
            return None
        piece = board.pieces[move.piece_index]
        return board.with_piece(move.piece_index, piece.moved_to(*dest))

    @staticmethod
    def successors(board: Board) -> Iterator[tuple[Move, Board]]:
        """Yield every legal ``(move, next_board)`` pair.

        Pieces are visited in ascending index order and directions in
        ``DIRECTIONS`` order.
        """
        for i, piece in enumerate(board.pieces):
            for direction in DIRECTIONS:
                dest = MoveRules.destination(board, i, direction)
                if dest is None:
                    continue
                yield Move(i, direction), board.with_piece(i, piece.moved_to(*dest))

    @staticmethod
    def legal_moves(board: Board) -> list[Move]:
        return [move for move, _ in MoveRules.successors(board)]
