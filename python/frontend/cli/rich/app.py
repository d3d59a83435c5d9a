"""Rich terminal frontend — styled tables, colours, and panels.

Uses the ``rich`` library for styled output while sharing the same
input handler and backend as the vanilla CLI.  Includes a built-in
menu for layout selection, play, study, and records.
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay import GamePlay
from backend.engine.gamesolver import Solver
from backend.models.board import Board, Direction, PieceKind
from backend.models.highscore import HighScoreEntry, HighScoreManager
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

_KIND_STYLE: dict[PieceKind, str] = {
    PieceKind.KING: "bold white on red3",
    PieceKind.VERTICAL: "bold white on dodger_blue3",
    PieceKind.HORIZONTAL: "bold black on gold3",
    PieceKind.PAWN: "bold black on sea_green3",
}

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


# -- board rendering ----------------------------------------------------------


def _render_board(board: Board, selected: int | None = None) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(board.width):
        table.add_column(width=3, justify="center")

    gx, gy = board.goal
    kw, kh = PieceKind.KING.size
    for y, row in enumerate(board.grid()):
        cells: list[Text] = []
        for x, index in enumerate(row):
            if index is None:
                in_goal = gx <= x < gx + kw and gy <= y < gy + kh
                cells.append(Text("░" if in_goal else "·", style="dim"))
                continue
            style = _KIND_STYLE[board.pieces[index].kind]
            if index == selected:
                style += " reverse"
            cells.append(Text(f" {index} ", style=style))
        table.add_row(*cells)

    return table


# -- solver helpers -----------------------------------------------------------


def _play_solver(game: GamePlay, steps: int | None, title: str) -> str:
    """Ask the solver for *steps* moves and animate them on *game*."""
    with console.status("[cyan]Calculating best moves…[/cyan]"):
        moves = Solver.hint(game.state.board, steps)

    if moves is None:
        return "[red]No solution found from here! Try restarting.[/red]"
    if not moves:
        return "[green]Already solved![/green]"

    for i, move in enumerate(moves):
        game.apply(move, assisted=True)
        game.select(move.piece_index)
        console.clear()
        board_table = _render_board(game.state.board, game.selected)

        progress = Text()
        progress.append(f"  {title}… move {i + 1}/{len(moves)} ", style="bold cyan")
        progress.append(f"(piece {move.piece_index} {move.direction.value})", style="dim")

        panel = Panel(
            Align.center(board_table),
            title=f"[bold cyan]{title}  {game.layout}[/bold cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
        console.print()
        console.print(Align.center(panel))
        console.print(Align.center(progress))
        sys.stdout.flush()
        time.sleep(0.25 if len(moves) < 20 else 0.05)

    if game.is_won:
        return f"[bold green]Solved with {len(moves)} solver moves![/bold green]"
    return f"[cyan]Hint:[/cyan] played [bold]{len(moves)}[/bold] move(s)"


def _handle_common(game: GamePlay, key: str, data_dir: Path) -> str | None:
    """Handle selection, sliding, hint and export keys.

    Returns a status message, ``""`` when the key was consumed silently,
    or ``None`` when the caller should handle it.
    """
    if key in _DIRECTIONS:
        if game.selected is None:
            return "[yellow]Select a piece first (0-9 or Tab).[/yellow]"
        game.move(_DIRECTIONS[key])
        return ""
    if key.isdigit():
        if not game.select(int(key)):
            return f"[yellow]No piece {key}.[/yellow]"
        return ""
    if key == "next":
        game.cycle_selection(1)
        return ""
    if key == "prev":
        game.cycle_selection(-1)
        return ""
    if key == "hint":
        return _play_solver(game, game.hint_steps, "Hint")
    if key == "steps":
        game.cycle_hint_steps()
        return f"Hint length: [bold]{game.hint_label}[/bold]"
    if key == "print":
        path = game.export(data_dir / "boards")
        return f"[cyan]Board saved to[/cyan] {path}"
    return None


# -- menu screen --------------------------------------------------------------


def _draw_menu(layouts: list[str], sel: int) -> None:
    """Draw the main menu."""
    console.clear()

    names = Text()
    for i, name in enumerate(layouts):
        if i:
            names.append("  ")
        if i == sel:
            names.append(f" {name} ", style="bold green on #313244")
        else:
            names.append(f" {name} ", style="dim")

    nav = Text("  ← →  change layout", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Play    ")
    opts.append("2", style="bold yellow")
    opts.append("  Study    ")
    opts.append("3", style="dim bold")
    opts.append("  Records    ", style="dim")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(names),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )

    panel = Panel(
        body,
        title="[bold]R O Y A L   E S C A P E[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


# -- game screens -------------------------------------------------------------

# (key, label, key style) shown under the board.
_PLAY_KEYS = [
    ("0-9/Tab", "select", "bold cyan"),
    ("↑↓←→/WASD", "slide", "bold cyan"),
    ("N", "hint", "bold cyan"),
    ("T", "hint length", "bold cyan"),
    ("R", "restart", "bold cyan"),
    ("P", "export", "bold cyan"),
    ("Q", "back", "bold cyan"),
]
_STUDY_KEYS = [
    *_PLAY_KEYS[:4],
    ("V", "solve", "bold cyan"),
    ("R", "scramble", "bold yellow"),
    *_PLAY_KEYS[5:],
]


def _controls(study: bool) -> Text:
    line = Text()
    for key, label, style in _STUDY_KEYS if study else _PLAY_KEYS:
        line.append(f"  {key}", style=style)
        line.append(f" {label} ", style="dim")
    return line


def _stats(game: GamePlay) -> Text:
    stats = Text()
    for label, value in (
        ("Moves", str(game.state.moves)),
        ("Time", _format_time(game.state.elapsed_time)),
    ):
        stats.append(f"  {label}: ", style="dim")
        stats.append(value, style="bold yellow")
    if game.state.assisted:
        stats.append("  (assisted)", style="dim")
    return stats


def _board_panel(game: GamePlay, title: str, style: str) -> Panel:
    return Panel(
        Align.center(_render_board(game.state.board, game.selected)),
        title=f"[bold {style}]{title}  {game.layout}[/bold {style}]",
        subtitle=f"[dim]hint: {game.hint_label}[/dim]",
        border_style=style,
        padding=(1, 2),
    )


def _draw_game(game: GamePlay, status: str = "") -> None:
    """Draw the play screen; the stats line can be refreshed in place."""
    console.clear()
    console.print()
    console.print(Align.center(_board_panel(game, "Royal Escape", "bright_blue")))
    # _update_time() restores this cursor position to repaint the stats.
    sys.stdout.write("\033[s")
    sys.stdout.flush()
    console.print(Align.center(_stats(game)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_controls(study=False)))


def _update_time(game: GamePlay) -> None:
    """Repaint only the stats line with raw ANSI, avoiding a full redraw."""
    plain = _stats(game).plain.strip()
    with console.capture() as capture:
        console.print(_stats(game), end="")
    pad = max(0, (console.width - len(plain)) // 2)
    sys.stdout.write(f"\033[u\033[K{' ' * pad}{capture.get().lstrip()}")
    sys.stdout.flush()


def _draw_study(game: GamePlay, status: str = "") -> None:
    console.clear()
    console.print()
    console.print(Align.center(_board_panel(game, "Study", "yellow")))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_controls(study=True)))


def _draw_win(game: GamePlay) -> None:
    console.clear()

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("ESCAPED!", style="bold green")
    congrats.append("  You saved the King!  ", style="green")
    congrats.append("★\n", style="bold yellow")

    panel = Panel(
        Group(
            Align.center(_render_board(game.state.board)),
            Align.center(congrats),
            Align.center(_stats(game)),
        ),
        title=f"[bold green]Royal Escape  {game.layout}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))


def _records_table(layout: str, manager: HighScoreManager) -> Table:
    table = Table(title=layout, title_style="bold cyan",
                  box=rich.box.ROUNDED, border_style="dim")
    for header, justify, style in (
        ("#", "right", "dim"),
        ("Moves", "right", "yellow"),
        ("Time", "right", "yellow"),
        ("Date", "left", "dim"),
        ("", "left", "dim"),
    ):
        table.add_column(header, justify=justify, style=style)
    for rank, e in enumerate(manager.get_scores(layout)[:10], 1):
        table.add_row(str(rank), str(e.moves), f"{e.time:.1f}s", e.date,
                      "assisted" if e.assisted else "")
    return table


def _draw_highscores(manager: HighScoreManager) -> None:
    """Full-screen records view (used from the menu)."""
    console.clear()

    parts = [
        Align.center(_records_table(layout, manager))
        for layout in manager.get_layouts()
    ] or [Align.center(Text("  No records yet.", style="dim"))]

    panel = Panel(
        Group(*parts),
        title="[bold]R E C O R D S[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


# -- game loops ---------------------------------------------------------------


def _play_game(layout: str, manager: HighScoreManager, data_dir: Path) -> None:
    """Play mode — scored; solver moves mark the game as assisted."""
    while True:
        game = GamePlay(layout)
        status = ""

        while not game.is_won:
            _draw_game(game, status)
            status = ""

            # Wait for input with a short timeout so the clock keeps ticking.
            while True:
                key = get_key_timeout(0.5)
                if key is not None:
                    break
                _update_time(game)

            handled = _handle_common(game, key, data_dir)
            if handled is not None:
                status = handled
            elif key == "restart":
                game.restart()
            elif key == "quit":
                return

        # -- win ---------------------------------------------------------------
        game.state.pause()
        _draw_win(game)

        entry = HighScoreEntry(
            moves=game.state.moves,
            time=round(game.state.elapsed_time, 2),
            date=datetime.now().strftime("%Y-%m-%d %H:%M"),
            assisted=game.state.assisted,
        )
        manager.add_score(layout, entry)

        console.print(
            Align.center(
                Text("\n  Press R to play again, Q to go back.\n", style="dim")
            )
        )

        while True:
            key = get_key()
            if key == "restart":
                break
            if key == "quit":
                return


def _study_game(layout: str, data_dir: Path) -> None:
    """Study mode — unscored, scramble/hint/solve available."""
    game = GamePlay.scrambled(layout)
    status = ""

    while True:
        _draw_study(game, status)
        status = ""
        key = get_key()

        handled = _handle_common(game, key, data_dir)
        if handled is not None:
            status = handled
        elif key == "restart":
            game = GamePlay.scrambled(layout)
            status = "[yellow]Scrambled![/yellow]"
        elif key == "solve":
            status = _play_solver(game, None, "Solving")
        elif key == "quit":
            return


# -- menu loop ----------------------------------------------------------------


def _menu_loop(layout: str, data_dir: Path) -> None:
    manager = HighScoreManager(data_dir / "highscores.json")
    layouts = GameGenerator.layouts()
    sel = layouts.index(layout) if layout in layouts else 0

    while True:
        _draw_menu(layouts, sel)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel = max(0, sel - 1)
        elif key == "right":
            sel = min(len(layouts) - 1, sel + 1)
        elif key in ("1", "enter"):
            _play_game(layouts[sel], manager, data_dir)
        elif key == "2":
            _study_game(layouts[sel], data_dir)
        elif key in ("3", "help"):
            # 'h' maps to "help", '3' is raw char
            _draw_highscores(manager)


# -- public entry point -------------------------------------------------------


def run(layout: str, data_dir: Path) -> None:
    """Launch the Rich CLI with interactive menu."""
    _menu_loop(layout, data_dir)
