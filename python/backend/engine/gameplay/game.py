"""Core gameplay logic — processes moves and checks win condition."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamerules import MoveRules
from backend.engine.gamestate import GameState
from backend.models.board import Board, Direction, Move

# Hint lengths offered by the frontends; ``None`` plays the whole solution.
HINT_STEPS: tuple[int | None, ...] = (1, 3, 5, 10, None)


class GamePlay:
    """Orchestrates a single game session."""

    def __init__(self, layout: str = "classic") -> None:
        self.layout = layout
        self._initial = GameGenerator.layout(layout)
        self.state = GameState(self._initial)
        self.hint_steps: int | None = HINT_STEPS[0]

    @classmethod
    def from_board(cls, board: Board, layout: str = "custom") -> "GamePlay":
        """Create a game session from an existing board (e.g. loaded from file)."""
        obj = object.__new__(cls)
        obj.layout = layout
        obj._initial = board
        obj.state = GameState(board)
        obj.hint_steps = HINT_STEPS[0]
        return obj

    @classmethod
    def scrambled(
        cls, layout: str = "classic", moves: int = 60, seed: int | None = None
    ) -> "GamePlay":
        """Start a study session on a scrambled, unsolved copy of *layout*."""
        return cls.from_board(GameGenerator.generate(layout, moves, seed), layout)

    # -- selection ------------------------------------------------------------

    @property
    def selected(self) -> int | None:
        return self.state.selected

    def select(self, index: int | None) -> bool:
        """Select the piece at *index* (``None`` clears the selection)."""
        if index is not None and not 0 <= index < len(self.state.board.pieces):
            return False
        self.state.selected = index
        return True

    def select_at(self, x: int, y: int) -> bool:
        """Select whichever piece covers cell ``(x, y)``."""
        index = self.state.board.piece_at(x, y)
        self.state.selected = index
        return index is not None

    def cycle_selection(self, step: int = 1) -> int:
        """Move the selection *step* pieces forward (wrapping) and return it."""
        count = len(self.state.board.pieces)
        current = self.state.selected
        if current is None:
            current = -1 if step > 0 else 0
        self.state.selected = (current + step) % count
        return self.state.selected

    # -- movement -------------------------------------------------------------

    def move(self, direction: Direction) -> bool:
        """Slide the selected piece one cell in *direction*.

        Returns True if the move was valid.
        """
        if self.state.selected is None:
            return False
        return self.move_piece(self.state.selected, direction)

    def move_piece(self, index: int, direction: Direction) -> bool:
        return self.apply(Move(index, direction))

    def apply(self, move: Move, *, assisted: bool = False) -> bool:
        """Apply *move* if it is legal; solver playback passes ``assisted``."""
        board = MoveRules.apply(self.state.board, move)
        if board is None:
            return False
        self.state.advance(board, assisted=assisted)
        return True

    def restart(self) -> None:
        """Return to the board this session started from."""
        self.state = GameState(self._initial)

    # -- hints ----------------------------------------------------------------

    def cycle_hint_steps(self) -> int | None:
        i = HINT_STEPS.index(self.hint_steps)
        self.hint_steps = HINT_STEPS[(i + 1) % len(HINT_STEPS)]
        return self.hint_steps

    @property
    def hint_label(self) -> str:
        if self.hint_steps is None:
            return "all"
        return f"{self.hint_steps} step" + ("s" if self.hint_steps > 1 else "")

    # -- export ---------------------------------------------------------------

    def export(self, directory: Path) -> Path:
        """Write the current board as JSON into *directory*; return the path."""
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        path = directory / f"{self.layout}-{stamp}.json"
        path.write_text(json.dumps(self.state.board.to_dict(), indent=2) + "\n")
        return path

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        return self.state.is_solved
