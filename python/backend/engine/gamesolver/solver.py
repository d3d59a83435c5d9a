"""Exact breadth-first Klotski solver.

The search walks the implicit graph of board configurations level by
level, so the first goal board it discovers is reached by a shortest
sequence of single-cell slides.  Boards are deduplicated by their
canonical key (occupancy by piece kind), and every queued node carries its
full path from the root, so no parent graph is needed to rebuild the
answer.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple

from backend.engine.gamerules import MoveRules
from backend.engine.gamesolver.encoder import encode_state
from backend.models.board import Board, Move

log = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 200
DEFAULT_MAX_ITERATIONS = 50_000


class SearchStatus(StrEnum):
    SOLVED = "solved"
    ALREADY_SOLVED = "already_solved"
    EXHAUSTED = "exhausted"  # every reachable board searched, goal unreachable
    DEPTH_LIMITED = "depth_limited"  # boards beyond max_depth were left unexplored
    TRUNCATED = "truncated"  # iteration budget spent
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SearchResult:
    status: SearchStatus
    moves: tuple[Move, ...] | None
    expanded: int
    visited: int

    @property
    def found(self) -> bool:
        return self.moves is not None


class _Node(NamedTuple):
    board: Board
    path: tuple[Move, ...]


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def search(
        board: Board,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        cancel: threading.Event | None = None,
    ) -> SearchResult:
        """Run the breadth-first search and report how it ended.

        *max_depth* bounds the solution length, *max_iterations* the number
        of nodes taken off the frontier.  *cancel*, when given, is checked
        once per dequeue.
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}.")
        if max_iterations < 1:
            raise ValueError(
                f"max_iterations must be positive, got {max_iterations}."
            )

        if board.is_solved():
            return SearchResult(SearchStatus.ALREADY_SOLVED, (), 0, 1)

        log.debug(
            "Searching %d pieces on %dx%d (max_depth=%d, max_iterations=%d)",
            len(board.pieces), board.width, board.height,
            max_depth, max_iterations,
        )

        frontier: deque[_Node] = deque([_Node(board, ())])
        visited: set[str] = {encode_state(board)}
        expanded = 0
        pruned = False

        while frontier:
            if expanded >= max_iterations:
                return Solver._finish(SearchStatus.TRUNCATED, None, expanded, visited)
            if cancel is not None and cancel.is_set():
                return Solver._finish(SearchStatus.CANCELLED, None, expanded, visited)

            node = frontier.popleft()
            expanded += 1

            for move, nxt in MoveRules.successors(node.board):
                key = encode_state(nxt)
                if key in visited:
                    continue

                path = node.path + (move,)
                if nxt.is_solved():
                    return Solver._finish(SearchStatus.SOLVED, path, expanded, visited)

                if len(path) < max_depth:
                    visited.add(key)
                    frontier.append(_Node(nxt, path))
                else:
                    pruned = True

        status = SearchStatus.DEPTH_LIMITED if pruned else SearchStatus.EXHAUSTED
        return Solver._finish(status, None, expanded, visited)

    @staticmethod
    def solve(
        board: Board,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> list[Move] | None:
        """Return a shortest move list for *board*.

        ``[]`` means the board is already solved; ``None`` means no solution
        was found within the bounds (unsolvable or budget spent alike — use
        :meth:`search` to tell them apart).
        """
        result = Solver.search(board, max_depth, max_iterations)
        return list(result.moves) if result.moves is not None else None

    @staticmethod
    def hint(
        board: Board,
        steps: int | None = 1,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> list[Move] | None:
        """Return the next *steps* moves of a shortest solution.

        ``steps=None`` returns the whole solution.  Same ``[]``/``None``
        conventions as :meth:`solve`.
        """
        if steps is not None and steps < 1:
            raise ValueError(f"steps must be positive, got {steps}.")

        moves = Solver.solve(board, max_depth, max_iterations)
        if moves is None or steps is None:
            return moves
        return moves[:steps]

    @staticmethod
    def is_solvable(
        board: Board,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> bool | None:
        """Return True if *board* can reach the goal, False if it provably cannot.

        ``None`` means the bounds stopped the search before an answer: the
        iteration budget ran out or boards deeper than *max_depth* went
        unexplored.
        """
        result = Solver.search(board, max_depth, max_iterations)
        if result.found:
            return True
        if result.status is SearchStatus.EXHAUSTED:
            return False
        return None

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _finish(
        status: SearchStatus,
        path: tuple[Move, ...] | None,
        expanded: int,
        visited: set[str],
    ) -> SearchResult:
        if path is not None:
            log.info(
                "Solved in %d moves (%d expanded, %d visited)",
                len(path), expanded, len(visited),
            )
        else:
            log.info(
                "Search %s after %d expanded, %d visited",
                status.value, expanded, len(visited),
            )
        return SearchResult(status, path, expanded, len(visited))
