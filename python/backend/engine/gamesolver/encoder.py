"""Canonical board keys for duplicate detection during search."""

from __future__ import annotations

from backend.models.board import Board


def encode_state(board: Board) -> str:
    """Return the row-major string of kind codes covering *board*.

    Each cell holds ``0`` when empty, otherwise the code of the occupying
    piece's kind.  Two boards that differ only in which same-kind piece sits
    where share a key.
    """
    cells = [0] * (board.width * board.height)
    w = board.width
    for p in board.pieces:
        code = p.kind.code
        for dy in range(p.height):
            row = (p.y + dy) * w
            for dx in range(p.width):
                cells[row + p.x + dx] = code
    return "".join(map(str, cells))
