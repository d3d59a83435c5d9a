"""Vanilla terminal frontend — no third-party dependencies.

Uses only stdlib (print, ANSI codes, tty/termios) for rendering and input.
Includes a built-in menu for layout selection, play, study, and records.
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay import GamePlay
from backend.engine.gamesolver import Solver
from backend.models.board import Board, Direction, PieceKind
from backend.models.highscore import HighScoreEntry, HighScoreManager
from frontend.cli.input_handler import get_key, get_key_timeout


# -- ANSI helpers -------------------------------------------------------------

_G = "\033[32;1m"    # bold green
_Y = "\033[33;1m"    # bold yellow
_C = "\033[36;1m"    # bold cyan
_RED = "\033[31;1m"  # bold red
_DIM = "\033[2m"     # dim
_BOLD = "\033[1m"    # bold
_REV = "\033[7m"     # reverse video (selected piece)
_R = "\033[0m"       # reset
_BG_SEL = "\033[42;30m"  # green bg, black fg (selected layout)

_KIND_COLOUR: dict[PieceKind, str] = {
    PieceKind.KING: "\033[41;97;1m",
    PieceKind.VERTICAL: "\033[44;97;1m",
    PieceKind.HORIZONTAL: "\033[43;30;1m",
    PieceKind.PAWN: "\033[42;30;1m",
}

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _clear() -> None:
    sys.stdout.write("\033[2J\033[H")
    sys.stdout.flush()


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m}:{s:02d}" if m else f"{s}s"


def _stats_line(game: GamePlay) -> str:
    """Return the formatted Moves + Time string (no newline)."""
    return (
        f"  Moves: {_Y}{game.state.moves}{_R}  |  "
        f"Time: {_Y}{_format_time(game.state.elapsed_time)}{_R}  |  "
        f"Hint: {_C}{game.hint_label}{_R}"
    )


# -- board rendering ----------------------------------------------------------


def _render_board(board: Board, selected: int | None = None) -> str:
    """Return an ANSI-coloured text representation of the board."""
    sep = "+" + ("----" * board.width)[:-1] + "+"
    gx, gy = board.goal
    kw, kh = PieceKind.KING.size

    lines: list[str] = [sep]
    for y, row in enumerate(board.grid()):
        cells: list[str] = []
        for x, index in enumerate(row):
            if index is None:
                mark = "░" if gx <= x < gx + kw and gy <= y < gy + kh else "·"
                cells.append(f"{_DIM} {mark} {_R}")
                continue
            colour = _KIND_COLOUR[board.pieces[index].kind]
            if index == selected:
                colour += _REV
            cells.append(f"{colour}{index:^3}{_R}")
        lines.append("|" + " ".join(cells) + "|")
    lines.append(sep)
    return "\n".join(lines)


# -- solver helpers -----------------------------------------------------------


def _play_solver(game: GamePlay, steps: int | None, title: str) -> str:
    """Run the solver and animate up to *steps* moves.  Returns a status message."""
    sys.stdout.write(f"\n  {_DIM}Calculating best moves…{_R}")
    sys.stdout.flush()
    moves = Solver.hint(game.state.board, steps)

    if moves is None:
        return f"{_RED}No solution found from here! Try restarting.{_R}"
    if not moves:
        return f"{_G}Already solved!{_R}"

    for i, move in enumerate(moves):
        game.apply(move, assisted=True)
        game.select(move.piece_index)
        _clear()
        print(f"  {_C}=== {title}… ({game.layout}) ==={_R}")
        print()
        print(_render_board(game.state.board, game.selected))
        print()
        print(
            f"  Move {i + 1}/{len(moves)}  "
            f"(piece {move.piece_index} {move.direction.value})"
        )
        sys.stdout.flush()
        time.sleep(0.25 if len(moves) < 20 else 0.05)

    if game.is_won:
        return f"{_G}Solved with {len(moves)} solver moves!{_R}"
    return f"{_C}Hint:{_R} played {_BOLD}{len(moves)}{_R} move(s)"


def _handle_common(game: GamePlay, key: str, data_dir: Path) -> str | None:
    """Handle selection, sliding, hint and export keys.

    ``None`` means the key is left to the caller.
    """
    if key in _DIRECTIONS:
        if game.selected is None:
            return f"{_Y}Select a piece first (0-9 or Tab).{_R}"
        game.move(_DIRECTIONS[key])
        return ""
    if key.isdigit():
        return "" if game.select(int(key)) else f"{_Y}No piece {key}.{_R}"
    if key in ("next", "prev"):
        game.cycle_selection(1 if key == "next" else -1)
        return ""
    if key == "hint":
        return _play_solver(game, game.hint_steps, "Hint")
    if key == "steps":
        game.cycle_hint_steps()
        return f"Hint length: {_BOLD}{game.hint_label}{_R}"
    if key == "print":
        return f"{_C}Board saved to{_R} {game.export(data_dir / 'boards')}"
    return None


# -- menu screen --------------------------------------------------------------


def _show_menu(layouts: list[str], sel: int) -> None:
    _clear()
    print()
    print(f"  {_BOLD}======================================{_R}")
    print(f"  {_BOLD}      R O Y A L   E S C A P E         {_R}")
    print(f"  {_BOLD}======================================{_R}")
    print()

    names = ""
    for i, name in enumerate(layouts):
        if i == sel:
            names += f"  {_BG_SEL} {name} {_R}"
        else:
            names += f"  {_DIM}{name}{_R}"
    print(f"    Layout:{names}")
    print(f"    {_DIM}← → to change{_R}")
    print()

    print(f"    {_C}1{_R}  Play")
    print(f"    {_Y}2{_R}  Study")
    print(f"    {_DIM}3{_R}  Records")
    print(f"    {_DIM}Q{_R}  Quit")
    print()


# -- game screens -------------------------------------------------------------


def _show_game(game: GamePlay, status: str = "") -> None:
    """Draw the full game screen.

    The stats line is printed last, with no trailing newline, so
    ``_update_time`` can cheaply overwrite it in-place using ``\\r\\033[K``.
    """
    _clear()
    print(f"  {_C}=== Royal Escape ({game.layout}) ==={_R}")
    print()
    print(_render_board(game.state.board, game.selected))
    print()
    print(
        f"  {_C}0-9{_R}/{_C}Tab{_R}: select  |  "
        f"{_C}WASD{_R}/{_C}Arrows{_R}: slide  |  "
        f"{_C}N{_R}: hint  |  {_C}T{_R}: hint length"
    )
    print(
        f"  {_C}R{_R}: restart  |  {_C}P{_R}: export  |  {_C}Q{_R}: back"
    )
    if status:
        print(f"  {status}")
    sys.stdout.write(f"\n{_stats_line(game)}")
    sys.stdout.flush()


def _update_time(game: GamePlay) -> None:
    """Overwrite just the stats (last) line in-place."""
    sys.stdout.write(f"\r\033[K{_stats_line(game)}")
    sys.stdout.flush()


def _show_study(game: GamePlay, status: str = "") -> None:
    _clear()
    print(f"  {_Y}=== Study ({game.layout}) ==={_R}")
    print()
    print(_render_board(game.state.board, game.selected))
    if status:
        print(f"\n  {status}")
    print()
    print(
        f"  {_C}0-9{_R}/{_C}Tab{_R}: select  |  "
        f"{_C}WASD{_R}/{_C}Arrows{_R}: slide  |  "
        f"{_C}N{_R}: hint ({game.hint_label})  |  {_C}T{_R}: hint length"
    )
    print(
        f"  {_C}V{_R}: solve  |  {_Y}R{_R}: scramble  |  "
        f"{_C}P{_R}: export  |  {_C}Q{_R}: back"
    )


def _show_win(game: GamePlay) -> None:
    _clear()
    print(f"  {_G}=== Royal Escape ({game.layout}) ==={_R}")
    print()
    print(_render_board(game.state.board))
    print()
    print(f"  {_G}★ ESCAPED! You saved the King! ★{_R}")
    print()
    assisted = f"  {_DIM}(assisted){_R}" if game.state.assisted else ""
    print(
        f"  Moves: {_Y}{game.state.moves}{_R}  |  "
        f"Time: {_Y}{_format_time(game.state.elapsed_time)}{_R}{assisted}"
    )


def _show_highscores(manager: HighScoreManager) -> None:
    _clear()
    print()
    print(f"  {_BOLD}=== RECORDS ==={_R}")
    layouts = manager.get_layouts()
    if not layouts:
        print(f"\n  {_DIM}No records yet.{_R}")
    else:
        for layout in layouts:
            print(f"\n  {_C}--- {layout} ---{_R}")
            for i, e in enumerate(manager.get_scores(layout)[:10], 1):
                tag = f"  {_DIM}assisted{_R}" if e.assisted else ""
                print(
                    f"  {i:>2}. {_Y}{e.moves:>4}{_R} moves  "
                    f"{_Y}{e.time:>7.1f}s{_R}  "
                    f"{_DIM}({e.date}){_R}{tag}"
                )
    print(f"\n  {_DIM}Press any key to go back.{_R}")
    get_key()


# -- game loops ---------------------------------------------------------------


def _play_game(layout: str, manager: HighScoreManager, data_dir: Path) -> None:
    """Play mode — scored."""
    while True:
        game = GamePlay(layout)
        status = ""

        while not game.is_won:
            _show_game(game, status)
            status = ""

            # Wait for input; update the time display every 0.5 s.
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
        _show_win(game)

        entry = HighScoreEntry(
            moves=game.state.moves,
            time=round(game.state.elapsed_time, 2),
            date=datetime.now().strftime("%Y-%m-%d %H:%M"),
            assisted=game.state.assisted,
        )
        manager.add_score(layout, entry)
        print(f"\n  {_DIM}Record saved!{_R}")
        print(f"\n  Press {_C}R{_R} to play again, {_C}Q{_R} to go back.")

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
        _show_study(game, status)
        status = ""
        key = get_key()

        handled = _handle_common(game, key, data_dir)
        if handled is not None:
            status = handled
        elif key == "restart":
            game = GamePlay.scrambled(layout)
            status = f"{_Y}Scrambled!{_R}"
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
        _show_menu(layouts, sel)
        key = get_key()

        if key == "quit":
            _clear()
            print("  Goodbye!\n")
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
            _show_highscores(manager)


# -- public entry point -------------------------------------------------------


def run(layout: str, data_dir: Path) -> None:
    """Launch the vanilla CLI with interactive menu."""
    _menu_loop(layout, data_dir)
