"""Board model for the sliding-block puzzle."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

GRID_WIDTH = 4
GRID_HEIGHT = 5
GOAL: tuple[int, int] = (1, 3)


class InvalidBoardError(ValueError):
    """Raised when a board breaks the geometry rules (overlap, bounds, shape)."""


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """The ``(dx, dy)`` offset of a one-cell slide."""
        return _DELTAS[self]


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class PieceKind(StrEnum):
    KING = "king"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    PAWN = "pawn"

    @property
    def size(self) -> tuple[int, int]:
        """``(width, height)`` shared by every piece of this kind."""
        return _SIZES[self]

    @property
    def code(self) -> int:
        """Non-zero cell code used by the state encoder."""
        return _CODES[self]


_SIZES: dict[PieceKind, tuple[int, int]] = {
    PieceKind.KING: (2, 2),
    PieceKind.VERTICAL: (1, 2),
    PieceKind.HORIZONTAL: (2, 1),
    PieceKind.PAWN: (1, 1),
}

_CODES: dict[PieceKind, int] = {
    PieceKind.KING: 1,
    PieceKind.VERTICAL: 2,
    PieceKind.HORIZONTAL: 3,
    PieceKind.PAWN: 4,
}


@dataclass(frozen=True)
class Piece:
    """A rigid rectangle; ``(x, y)`` is its top-left cell."""

    kind: PieceKind
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PieceKind):
            try:
                object.__setattr__(self, "kind", PieceKind(str(self.kind).lower()))
            except ValueError:
                raise InvalidBoardError(f"Unknown piece kind {self.kind!r}.") from None

    @classmethod
    def of(cls, kind: PieceKind | str, x: int, y: int) -> Piece:
        """Create a piece with the dimensions of its *kind*."""
        kind = PieceKind(kind)
        w, h = kind.size
        return cls(kind=kind, x=x, y=y, width=w, height=h)

    def moved_to(self, x: int, y: int) -> Piece:
        return replace(self, x=x, y=y)

    def overlaps(self, other: Piece) -> bool:
        return rects_overlap(
            (self.x, self.y, self.width, self.height),
            (other.x, other.y, other.width, other.height),
        )

    def cells(self) -> list[tuple[int, int]]:
        return [
            (self.x + dx, self.y + dy)
            for dy in range(self.height)
            for dx in range(self.width)
        ]


@dataclass(frozen=True)
class Move:
    """Slide the piece at ``piece_index`` (input order) one cell."""

    piece_index: int
    direction: Direction


# -- legality primitives -------------------------------------------------------


def rects_overlap(
    a: tuple[int, int, int, int], b: tuple[int, int, int, int]
) -> bool:
    """Axis-aligned overlap of two ``(x, y, width, height)`` rectangles."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def rect_in_bounds(
    rect: tuple[int, int, int, int], width: int, height: int
) -> bool:
    x, y, w, h = rect
    return x >= 0 and y >= 0 and x + w <= width and y + h <= height


@dataclass(frozen=True)
class Board:
    """An immutable board configuration.

    ``pieces`` keeps the caller's order for its whole lifetime; a piece's
    position in that tuple is the index used by :class:`Move`.  Boards are
    validated on construction, so every instance satisfies the geometry
    rules.
    """

    pieces: tuple[Piece, ...]
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    goal: tuple[int, int] = GOAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "pieces", tuple(self.pieces))
        object.__setattr__(self, "goal", tuple(self.goal))
        self._validate()

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Board:
        """Create a board from its JSON representation.

        Example::

            Board.from_dict({
                "width": 4, "height": 5, "goal": [1, 3],
                "pieces": [{"kind": "king", "x": 1, "y": 0}, ...],
            })

        A piece's ``width``/``height`` may be omitted; when given they must
        match the piece kind.
        """
        try:
            raw_pieces = list(data["pieces"])
        except (KeyError, TypeError):
            raise InvalidBoardError("Board data has no 'pieces' list.") from None

        pieces: list[Piece] = []
        for i, raw in enumerate(raw_pieces):
            try:
                kind = PieceKind(str(raw["kind"]).lower())
            except (KeyError, TypeError, ValueError):
                raise InvalidBoardError(
                    f"Piece {i} has a missing or unknown kind: {raw!r}."
                ) from None
            w, h = kind.size
            try:
                piece = Piece(
                    kind=kind,
                    x=int(raw["x"]),
                    y=int(raw["y"]),
                    width=int(raw.get("width", w)),
                    height=int(raw.get("height", h)),
                )
            except (KeyError, TypeError, ValueError):
                raise InvalidBoardError(
                    f"Piece {i} has missing or non-integer coordinates: {raw!r}."
                ) from None
            pieces.append(piece)

        try:
            goal = data.get("goal", GOAL)
            width = int(data.get("width", GRID_WIDTH))
            height = int(data.get("height", GRID_HEIGHT))
            goal = (int(goal[0]), int(goal[1]))
        except (IndexError, TypeError, ValueError):
            raise InvalidBoardError(
                "Board width, height and goal must be integers."
            ) from None
        return cls(pieces=tuple(pieces), width=width, height=height, goal=goal)

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "goal": list(self.goal),
            "pieces": [
                {"kind": p.kind.value, "x": p.x, "y": p.y} for p in self.pieces
            ],
        }

    def with_piece(self, index: int, piece: Piece) -> Board:
        """Return a copy with the piece at *index* replaced.

        The copy skips validation; callers go through the move rules,
        which only produce in-bounds, non-overlapping placements.
        """
        pieces = list(self.pieces)
        pieces[index] = piece
        obj = object.__new__(Board)
        object.__setattr__(obj, "pieces", tuple(pieces))
        object.__setattr__(obj, "width", self.width)
        object.__setattr__(obj, "height", self.height)
        object.__setattr__(obj, "goal", self.goal)
        return obj

    # -- queries --------------------------------------------------------------

    @property
    def king_index(self) -> int:
        """Index of the distinguished piece (the King)."""
        for i, p in enumerate(self.pieces):
            if p.kind is PieceKind.KING:
                return i
        raise InvalidBoardError("Board has no King.")  # unreachable once validated

    def is_solved(self) -> bool:
        """Check if the King's top-left cell sits on the goal cell."""
        king = self.pieces[self.king_index]
        return (king.x, king.y) == self.goal

    def piece_at(self, x: int, y: int) -> int | None:
        """Return the index of the piece covering cell ``(x, y)``, if any."""
        for i, p in enumerate(self.pieces):
            if p.x <= x < p.x + p.width and p.y <= y < p.y + p.height:
                return i
        return None

    def grid(self) -> list[list[int | None]]:
        """Row-major grid of piece indices (``None`` for empty cells)."""
        rows: list[list[int | None]] = [
            [None] * self.width for _ in range(self.height)
        ]
        for i, p in enumerate(self.pieces):
            for x, y in p.cells():
                rows[y][x] = i
        return rows

    def in_bounds(self, piece: Piece) -> bool:
        return rect_in_bounds(
            (piece.x, piece.y, piece.width, piece.height), self.width, self.height
        )

    # -- validation -----------------------------------------------------------

    def _validate(self) -> None:
        if self.width < 1 or self.height < 1:
            raise InvalidBoardError(
                f"Grid must be at least 1×1, got {self.width}×{self.height}."
            )

        kings = [i for i, p in enumerate(self.pieces) if p.kind is PieceKind.KING]
        if len(kings) != 1:
            raise InvalidBoardError(
                f"Expected exactly one King, found {len(kings)}."
            )

        for i, p in enumerate(self.pieces):
            if (p.width, p.height) != p.kind.size:
                raise InvalidBoardError(
                    f"Piece {i} ({p.kind.value}) must be "
                    f"{p.kind.size[0]}×{p.kind.size[1]}, "
                    f"got {p.width}×{p.height}."
                )
            if not self.in_bounds(p):
                raise InvalidBoardError(
                    f"Piece {i} ({p.kind.value}) at ({p.x}, {p.y}) "
                    f"leaves the {self.width}×{self.height} grid."
                )

        for i, a in enumerate(self.pieces):
            for j in range(i + 1, len(self.pieces)):
                if a.overlaps(self.pieces[j]):
                    raise InvalidBoardError(f"Pieces {i} and {j} overlap.")

        gx, gy = self.goal
        kw, kh = PieceKind.KING.size
        if not rect_in_bounds((gx, gy, kw, kh), self.width, self.height):
            raise InvalidBoardError(
                f"Goal {self.goal} cannot hold the King on this grid."
            )
