#!/usr/bin/env python3
"""Royal Escape — a Klotski sliding-block puzzle.

Usage::

    python main.py                      # interactive menu
    python main.py -f rich -l warmup    # Rich terminal, warmup layout
    python main.py -f pygame            # Pygame GUI (has its own menu)
    python main.py --scores             # view records
    python main.py --solve              # print a shortest solution and exit
    python main.py --solve --board b.json -v
"""

import importlib
import json
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamegenerator import GameGenerator  # noqa: E402
from backend.engine.gamesolver import SearchStatus, Solver  # noqa: E402
from backend.engine.gamesolver.solver import (  # noqa: E402
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_ITERATIONS,
)
from backend.models.board import Board, InvalidBoardError  # noqa: E402

log = logging.getLogger("royal_escape")
console = Console()


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    vanilla = "vanilla"
    rich = "rich"
    pygame = "pygame"


_RUNNERS = {
    Frontend.vanilla: "frontend.cli.vanilla.app",
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
}


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _print_highscores() -> None:
    from backend.models.highscore import HighScoreManager

    manager = HighScoreManager(DATA_DIR / "highscores.json")
    layouts = manager.get_layouts()

    print("\n  === RECORDS ===")
    if not layouts:
        print("  No records yet.\n")
        return
    for layout in layouts:
        print(f"\n  --- {layout} ---")
        for i, e in enumerate(manager.get_scores(layout)[:10], 1):
            tag = "  assisted" if e.assisted else ""
            print(f"  {i:>2}. {e.moves:>4} moves  {e.time:>7.1f}s  ({e.date}){tag}")
    print()


def _load_board(layout: str, board_file: Optional[Path]) -> Board:
    if board_file is None:
        return GameGenerator.layout(layout)
    return Board.from_dict(json.loads(board_file.read_text()))


def _solve(board: Board, max_depth: int, max_iterations: int) -> int:
    """Print a shortest solution for *board*; return the exit code."""
    result = Solver.search(board, max_depth, max_iterations)

    if result.status is SearchStatus.ALREADY_SOLVED:
        console.print("[green]Already solved.[/green]")
        return 0
    if result.moves is None:
        reason = {
            SearchStatus.EXHAUSTED: "the King can never reach the exit",
            SearchStatus.DEPTH_LIMITED: f"none within {max_depth} moves",
            SearchStatus.TRUNCATED: f"gave up after {max_iterations} expansions",
        }.get(result.status, result.status.value)
        console.print(f"[red]No solution found:[/red] {reason}.")
        return 1

    console.print(
        f"[bold green]Solved in {len(result.moves)} moves[/bold green] "
        f"[dim]({result.expanded} expanded, {result.visited} visited)[/dim]"
    )
    for i, move in enumerate(result.moves, 1):
        kind = board.pieces[move.piece_index].kind.value
        console.print(
            f"  {i:>3}. piece {move.piece_index:>2} [dim]({kind})[/dim] "
            f"{move.direction.value}"
        )
    return 0


def _menu_loop(layout: str) -> None:
    while True:
        print()
        print("  ====================================")
        print("        R O Y A L   E S C A P E       ")
        print("  ====================================")
        print()
        print(f"  Layout: {layout}")
        print()
        print("  1.  Play  (Vanilla Terminal)")
        print("  2.  Play  (Rich Terminal)")
        print("  3.  Play  (Pygame GUI)")
        print("  4.  Solve current layout")
        print("  5.  View Records")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        runners = {
            "1": Frontend.vanilla,
            "2": Frontend.rich,
            "3": Frontend.pygame,
        }
        if choice in runners:
            mod = importlib.import_module(_RUNNERS[runners[choice]])
            mod.run(layout=layout, data_dir=DATA_DIR)
        elif choice == "4":
            _solve(
                GameGenerator.layout(layout), DEFAULT_MAX_DEPTH, DEFAULT_MAX_ITERATIONS
            )
        elif choice == "5":
            _print_highscores()
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    layout: str = typer.Option(
        "classic", "-l", "--layout",
        help=f"Starting layout ({', '.join(GameGenerator.layouts())}).",
    ),
    scores: bool = typer.Option(
        False, "--scores",
        help="Show records and exit.",
    ),
    solve: bool = typer.Option(
        False, "--solve",
        help="Print a shortest solution and exit.",
    ),
    board_file: Optional[Path] = typer.Option(
        None, "--board",
        exists=True, dir_okay=False,
        help="JSON board to solve instead of a named layout.",
    ),
    max_depth: int = typer.Option(
        DEFAULT_MAX_DEPTH, "--max-depth", min=1,
        help="Longest solution to look for.",
    ),
    max_iterations: int = typer.Option(
        DEFAULT_MAX_ITERATIONS, "--max-iterations", min=1,
        help="Search budget in expanded boards.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log search details.",
    ),
) -> None:
    """Royal Escape — slide the King to the exit."""
    _configure_logging(verbose)

    if layout not in GameGenerator.layouts():
        raise typer.BadParameter(
            f"choose from {', '.join(GameGenerator.layouts())}",
            param_hint="--layout",
        )

    if scores:
        _print_highscores()
        return

    if solve or board_file is not None:
        try:
            board = _load_board(layout, board_file)
        except (InvalidBoardError, json.JSONDecodeError) as exc:
            console.print(f"[red]Invalid board:[/red] {exc}")
            raise typer.Exit(code=2)
        raise typer.Exit(code=_solve(board, max_depth, max_iterations))

    if frontend is None:
        _menu_loop(layout)
        return

    log.debug("Launching %s frontend", frontend.value)
    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(layout=layout, data_dir=DATA_DIR)


if __name__ == "__main__":
    app()
