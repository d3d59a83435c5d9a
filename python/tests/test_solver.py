"""Solver test suite — fixture boards plus the classic opening.

Boards are JSON fixtures under ``<project_root>/fixtures/``.  Every test is
hard-killed by ``pytest-timeout`` (configured in ``pyproject.toml``).  When
the solver returns a move list it is replayed through the real game engine
to verify correctness, and its length is checked against an independent
breadth-first search that tracks every piece by identity.
"""

from __future__ import annotations

import json
import threading
from collections import deque
from pathlib import Path

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay.game import GamePlay
from backend.engine.gamesolver.solver import SearchStatus, Solver
from backend.models.board import Board, Direction, Move, Piece, PieceKind

FIXTURES_DIR = Path(__file__).resolve().parent.parent.parent / "fixtures"


# -- fixture loaders ----------------------------------------------------------


def _load(name: str) -> list[dict]:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


def _ids(board_data: dict) -> str:
    return board_data["id"]


_BOARDS = _load("boards.json")
_UNSOLVABLE = [b for b in _BOARDS if b.get("solvable") is False]
_WITH_SOLUTION = [b for b in _BOARDS if "solution" in b]


# -- helpers ------------------------------------------------------------------


def _board(data: dict) -> Board:
    return Board.from_dict(data["board"])


def _assert_replays(board: Board, moves: list[Move], label: str) -> None:
    """Apply *moves* via the game engine and check the King ends on the goal."""
    game = GamePlay.from_board(board)
    for i, move in enumerate(moves):
        ok = game.apply(move)
        assert ok, (
            f"Move {i} (piece {move.piece_index} {move.direction.value}) "
            f"was illegal ({label})"
        )
    assert game.is_won, f"Board not solved after {len(moves)} moves ({label})"
    king = game.state.board.pieces[game.state.board.king_index]
    assert (king.x, king.y) == board.goal


_STEPS = ((0, -1), (0, 1), (-1, 0), (1, 0))


def _reference_distance(board: Board) -> int | None:
    """Shortest solution length by plain BFS over piece positions.

    Shares no code with the solver: pieces keep their identity and cell
    occupancy is rebuilt for every state.
    """
    sizes = [(p.width, p.height) for p in board.pieces]
    king = next(i for i, p in enumerate(board.pieces) if p.kind is PieceKind.KING)
    start = tuple((p.x, p.y) for p in board.pieces)
    if start[king] == board.goal:
        return 0

    seen = {start}
    queue = deque([(start, 0)])
    while queue:
        state, dist = queue.popleft()
        occupied: dict[tuple[int, int], int] = {}
        for i, (x, y) in enumerate(state):
            w, h = sizes[i]
            for cx in range(x, x + w):
                for cy in range(y, y + h):
                    occupied[(cx, cy)] = i
        for i, (x, y) in enumerate(state):
            w, h = sizes[i]
            for dx, dy in _STEPS:
                nx, ny = x + dx, y + dy
                if nx < 0 or ny < 0 or nx + w > board.width or ny + h > board.height:
                    continue
                if any(
                    occupied.get((cx, cy), i) != i
                    for cx in range(nx, nx + w)
                    for cy in range(ny, ny + h)
                ):
                    continue
                nxt = state[:i] + ((nx, ny),) + state[i + 1:]
                if nxt in seen:
                    continue
                if i == king and (nx, ny) == board.goal:
                    return dist + 1
                seen.add(nxt)
                queue.append((nxt, dist + 1))
    return None


@pytest.fixture(scope="module")
def classic_result():
    return Solver.search(GameGenerator.layout("classic"))


# -- fixture boards -----------------------------------------------------------


@pytest.mark.parametrize("board_data", _BOARDS, ids=_ids)
def test_solution_is_shortest(board_data: dict) -> None:
    board = _board(board_data)
    moves = Solver.solve(board)
    expected = _reference_distance(board)

    if expected is None:
        assert moves is None
    else:
        assert moves is not None, f"No solution for {board_data['id']}"
        assert len(moves) == expected
        _assert_replays(board, moves, board_data["id"])

    if "solvable" in board_data:
        assert (moves is not None) == board_data["solvable"]


@pytest.mark.parametrize("board_data", _WITH_SOLUTION, ids=_ids)
def test_known_solution(board_data: dict) -> None:
    expected = [Move(i, Direction(d)) for i, d in board_data["solution"]]
    assert Solver.solve(_board(board_data)) == expected


@pytest.mark.parametrize("board_data", _UNSOLVABLE, ids=_ids)
def test_unsolvable_board_is_exhausted(board_data: dict) -> None:
    result = Solver.search(_board(board_data))
    assert result.status is SearchStatus.EXHAUSTED
    assert result.moves is None
    # Every distinct board was expanded exactly once.
    assert result.expanded == result.visited
    assert Solver.is_solvable(_board(board_data)) is False


@pytest.mark.parametrize("board_data", _BOARDS, ids=_ids)
def test_solve_is_deterministic(board_data: dict) -> None:
    board = _board(board_data)
    assert Solver.solve(board) == Solver.solve(board)


def test_sealed_board_expands_only_the_root() -> None:
    sealed = next(b for b in _BOARDS if b["id"] == "sealed")
    result = Solver.search(_board(sealed))
    assert (result.expanded, result.visited) == (1, 1)


def test_solver_leaves_input_untouched() -> None:
    board = GameGenerator.layout("warmup")
    before = board.to_dict()
    Solver.solve(board)
    assert board.to_dict() == before


# -- classic opening ----------------------------------------------------------


def test_classic_is_solved(classic_result) -> None:
    assert classic_result.status is SearchStatus.SOLVED
    moves = list(classic_result.moves)
    assert 0 < len(moves) <= 200
    _assert_replays(GameGenerator.layout("classic"), moves, "classic")


def test_classic_stays_within_budget(classic_result) -> None:
    assert classic_result.expanded <= 50_000
    assert classic_result.visited >= classic_result.expanded


# -- warmup layout ------------------------------------------------------------


def test_warmup_solution() -> None:
    assert Solver.solve(GameGenerator.layout("warmup")) == [
        Move(0, Direction.DOWN),
        Move(0, Direction.DOWN),
    ]


def test_already_solved_returns_empty_list() -> None:
    board = Board(pieces=(Piece.of(PieceKind.KING, 1, 3),))
    result = Solver.search(board)
    assert result.status is SearchStatus.ALREADY_SOLVED
    assert result.moves == ()
    assert Solver.solve(board) == []
    assert Solver.is_solvable(board) is True


# -- bounds -------------------------------------------------------------------


def test_depth_limit_hides_longer_solutions() -> None:
    board = GameGenerator.layout("warmup")
    shallow = Solver.search(board, max_depth=1)
    assert shallow.status is SearchStatus.DEPTH_LIMITED
    assert Solver.solve(board, max_depth=1) is None
    assert Solver.solve(board, max_depth=2) is not None


def test_depth_limited_board_is_not_reported_unsolvable() -> None:
    board = GameGenerator.layout("warmup")
    assert Solver.is_solvable(board, max_depth=1) is None
    assert Solver.is_solvable(board, max_depth=2) is True


def test_board_without_moves_is_exhausted_under_any_depth() -> None:
    sealed = next(b for b in _BOARDS if b["id"] == "sealed")
    result = Solver.search(_board(sealed), max_depth=1)
    assert result.status is SearchStatus.EXHAUSTED
    assert Solver.is_solvable(_board(sealed), max_depth=1) is False


def test_iteration_budget_truncates() -> None:
    board = GameGenerator.layout("classic")
    result = Solver.search(board, max_iterations=10)
    assert result.status is SearchStatus.TRUNCATED
    assert result.expanded == 10
    assert result.moves is None
    assert Solver.solve(board, max_iterations=10) is None
    assert Solver.is_solvable(board, max_iterations=10) is None


def test_cancelled_search_stops_immediately() -> None:
    cancel = threading.Event()
    cancel.set()
    result = Solver.search(GameGenerator.layout("classic"), cancel=cancel)
    assert result.status is SearchStatus.CANCELLED
    assert result.expanded == 0
    assert not result.found


@pytest.mark.parametrize(
    "kwargs", [{"max_depth": 0}, {"max_iterations": 0}], ids=["depth", "iterations"]
)
def test_non_positive_bounds_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        Solver.search(GameGenerator.layout("warmup"), **kwargs)


# -- hints --------------------------------------------------------------------


def test_hint_returns_prefix() -> None:
    board = GameGenerator.layout("warmup")
    assert Solver.hint(board) == [Move(0, Direction.DOWN)]
    assert Solver.hint(board, steps=10) == Solver.solve(board)
    assert Solver.hint(board, steps=None) == Solver.solve(board)


def test_hint_on_unsolvable_board_is_none() -> None:
    assert Solver.hint(_board(_UNSOLVABLE[0]), steps=3) is None


def test_hint_rejects_zero_steps() -> None:
    with pytest.raises(ValueError):
        Solver.hint(GameGenerator.layout("warmup"), steps=0)
