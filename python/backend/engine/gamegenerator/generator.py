"""Named starting layouts and random scrambles."""

from __future__ import annotations

import random

from backend.engine.gamerules import MoveRules
from backend.models.board import Board, Move, Piece, PieceKind

K, V, H, P = (
    PieceKind.KING,
    PieceKind.VERTICAL,
    PieceKind.HORIZONTAL,
    PieceKind.PAWN,
)

# (kind, x, y) per piece, in piece-index order.
_LAYOUTS: dict[str, list[tuple[PieceKind, int, int]]] = {
    # Heng Dao Li Ma, the classic opening.
    "classic": [
        (K, 1, 0),
        (V, 0, 0), (V, 3, 0), (V, 0, 2), (V, 3, 2),
        (H, 1, 2),
        (P, 1, 3), (P, 2, 3), (P, 0, 4), (P, 3, 4),
    ],
    # The King is two slides from the exit.
    "warmup": [
        (K, 1, 1),
        (H, 1, 0),
        (V, 0, 1), (V, 3, 1),
        (P, 0, 0), (P, 3, 0), (P, 0, 4), (P, 3, 4),
    ],
}

_OPPOSITE = {"up": "down", "down": "up", "left": "right", "right": "left"}


class GameGenerator:
    """Builds starting boards from named layouts and scrambles them."""

    @staticmethod
    def layouts() -> list[str]:
        return list(_LAYOUTS)

    @staticmethod
    def layout(name: str) -> Board:
        """Return the starting board of the layout called *name*."""
        try:
            placements = _LAYOUTS[name]
        except KeyError:
            raise KeyError(
                f"Unknown layout {name!r}; choose from {', '.join(_LAYOUTS)}."
            ) from None
        return Board(pieces=tuple(Piece.of(kind, x, y) for kind, x, y in placements))

    @staticmethod
    def scramble(
        board: Board, moves: int, rng: random.Random | None = None
    ) -> Board:
        """Return *board* after *moves* random legal slides.

        A slide never undoes the one before it unless it is the only option.
        Every slide is reversible, so the result is exactly as solvable as
        *board*.
        """
        rng = rng or random.Random()
        prev: Move | None = None

        for _ in range(moves):
            options = list(MoveRules.successors(board))
            if not options:
                break
            if prev is not None and len(options) > 1:
                options = [
                    (m, b) for m, b in options
                    if not (
                        m.piece_index == prev.piece_index
                        and m.direction.value == _OPPOSITE[prev.direction.value]
                    )
                ]
            prev, board = rng.choice(options)

        return board

    @staticmethod
    def generate(
        name: str = "classic", moves: int = 60, seed: int | None = None
    ) -> Board:
        """Return a scrambled, *unsolved* board derived from layout *name*."""
        rng = random.Random(seed)
        start = GameGenerator.layout(name)
        while True:
            board = GameGenerator.scramble(start, moves, rng)
            # Ensure the board is not already solved
            if not board.is_solved():
                return board
