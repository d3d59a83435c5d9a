from backend.models.board import (
    Board,
    Direction,
    InvalidBoardError,
    Move,
    Piece,
    PieceKind,
)
from backend.models.highscore import HighScoreEntry, HighScoreManager

__all__ = [
    "Board",
    "Direction",
    "HighScoreEntry",
    "HighScoreManager",
    "InvalidBoardError",
    "Move",
    "Piece",
    "PieceKind",
]
