"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

import time

from backend.models.board import Board


class GameState:
    """Holds the current board, move counter, selection, and elapsed time.

    The board itself is immutable; every slide swaps in a new one.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self.moves: int = 0
        self.selected: int | None = None
        self.assisted: bool = False
        self._start_time: float = time.time()
        self._elapsed_banked: float = 0.0
        self._running: bool = True

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.time() - self._start_time)
        return self._elapsed_banked

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.time() - self._start_time
            self._running = False

    def resume(self) -> None:
        if not self._running:
            self._start_time = time.time()
            self._running = True

    # -- moves ----------------------------------------------------------------

    def advance(self, board: Board, *, assisted: bool = False) -> None:
        """Replace the board after one successful slide."""
        self.board = board
        self.moves += 1
        if assisted:
            self.assisted = True

    @property
    def is_solved(self) -> bool:
        return self.board.is_solved()
