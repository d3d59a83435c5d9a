"""Pygame GUI frontend.

Menu with layout selection, play and study modes, a win screen and the
records table.  Searches run on a worker thread so the window stays
responsive; the moves they return are played back one every quarter second
and Esc cancels a search in flight.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from datetime import datetime
from pathlib import Path

import pygame

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay import GamePlay
from backend.engine.gamesolver import SearchResult, SearchStatus, Solver
from backend.models.board import Board, Direction, Move, PieceKind
from backend.models.highscore import HighScoreEntry, HighScoreManager
from frontend.gui.pygame.widgets import (
    COL_BASE,
    COL_BLUE,
    COL_GREEN,
    COL_MANTLE,
    COL_OVERLAY0,
    COL_PINK,
    COL_SUBTEXT,
    COL_SURFACE0,
    COL_TEXT,
    COL_YELLOW,
    KIND_COLOUR,
    THEME_BLUE,
    THEME_GREEN,
    THEME_PINK,
    THEME_PLAIN,
    THEME_RED,
    THEME_YELLOW,
    Button,
    blit_centered,
    button_column,
    button_row,
    load_fonts,
    text_line,
)

log = logging.getLogger(__name__)

WIN_W, WIN_H = 500, 700
CELL = 80
CELL_GAP = 6
BOARD_TOP = 76
PLAYBACK_DELAY = 0.25  # seconds between solver moves
FPS = 30

_KEY_DIRECTIONS: dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}


class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    WIN = "win"
    SCORES = "scores"


def _clock(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


# -- board geometry -----------------------------------------------------------


class _BoardView:
    """Maps grid cells to window pixels for one board size."""

    def __init__(self, board: Board) -> None:
        self.width = board.width * CELL + (board.width + 1) * CELL_GAP
        self.height = board.height * CELL + (board.height + 1) * CELL_GAP
        self.frame = pygame.Rect((WIN_W - self.width) // 2, BOARD_TOP,
                                 self.width, self.height)
        self._cols = board.width
        self._rows = board.height

    def rect(self, x: int, y: int, w: int = 1, h: int = 1) -> pygame.Rect:
        step = CELL + CELL_GAP
        return pygame.Rect(
            self.frame.x + CELL_GAP + x * step,
            self.frame.y + CELL_GAP + y * step,
            w * CELL + (w - 1) * CELL_GAP,
            h * CELL + (h - 1) * CELL_GAP,
        )

    def cell_at(self, pos: tuple[int, int]) -> tuple[int, int] | None:
        if not self.frame.collidepoint(pos):
            return None
        step = CELL + CELL_GAP
        x = (pos[0] - self.frame.x - CELL_GAP) // step
        y = (pos[1] - self.frame.y - CELL_GAP) // step
        if 0 <= x < self._cols and 0 <= y < self._rows and self.rect(x, y).collidepoint(pos):
            return x, y
        return None


# -- application --------------------------------------------------------------


class PygameApp:
    def __init__(self, layout: str, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._records = HighScoreManager(data_dir / "highscores.json")
        self._layouts = GameGenerator.layouts()
        self._layout = layout if layout in self._layouts else self._layouts[0]

        pygame.init()
        pygame.display.set_caption("Royal Escape")
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        self._ticker = pygame.time.Clock()
        self._fonts = load_fonts()

        self._screen = _Screen.MENU
        self._game: GamePlay | None = None
        self._view: _BoardView | None = None
        self._study = False
        self._recorded = False
        self._message = ""

        self._worker: threading.Thread | None = None
        self._cancel = threading.Event()
        self._results: list[SearchResult] = []
        self._hint_len: int | None = 1
        self._playback: list[Move] = []
        self._next_move_at = 0.0

        font_sm = self._fonts["button_sm"]
        self._layout_btns = button_row(
            [(name.upper(), THEME_PLAIN) for name in self._layouts],
            font_sm, width=WIN_W, y=250, button_w=130, button_h=46,
        )
        self._play_btn, self._study_btn, self._records_btn, self._quit_btn = (
            button_column(
                [
                    ("P L A Y", THEME_BLUE),
                    ("S T U D Y", THEME_YELLOW),
                    ("R E C O R D S", THEME_PLAIN),
                    ("Q U I T", THEME_RED),
                ],
                font_sm, width=WIN_W, top=330, button_w=220, button_h=44,
            )
        )
        self._again_btn, self._menu_btn = button_column(
            [("PLAY AGAIN", THEME_GREEN), ("M E N U", THEME_PLAIN)],
            self._fonts["button"], width=WIN_W, top=420, button_w=220, button_h=48,
        )
        (self._back_btn,) = button_column(
            [("B A C K", THEME_PLAIN)],
            font_sm, width=WIN_W, top=WIN_H - 64, button_w=180, button_h=46,
        )
        self._action_btns: list[Button] = []

    # -- session control ------------------------------------------------------

    def _begin(self, game: GamePlay, *, study: bool) -> None:
        self._game = game
        self._view = _BoardView(game.state.board)
        self._study = study
        self._recorded = False
        self._message = ""
        self._playback = []

        labels = [
            ("HINT (N)", THEME_YELLOW),
            ("STEPS", THEME_PLAIN),
            ("SCRAMBLE (R)" if study else "RESTART (R)", THEME_PINK),
        ]
        if study:
            labels.append(("SOLVE (V)", THEME_GREEN))
        self._action_btns = button_row(
            labels, self._fonts["button_sm"],
            width=WIN_W, y=BOARD_TOP + self._view.height + 22,
            button_w=104, button_h=36,
        )
        self._screen = _Screen.PLAYING

    def _reset(self) -> None:
        game = self._game
        assert game is not None
        if self._study:
            self._begin(GamePlay.scrambled(self._layout), study=True)
            self._message = "Scrambled!"
        else:
            game.restart()
            self._recorded = False
            self._message = ""

    def _record_win(self) -> None:
        game = self._game
        if game is None or self._recorded or self._playback or not game.is_won:
            return
        self._recorded = True
        game.state.pause()
        if not self._study:
            self._records.add_score(
                game.layout,
                HighScoreEntry(
                    moves=game.state.moves,
                    time=round(game.state.elapsed_time, 2),
                    date=datetime.now().strftime("%Y-%m-%d %H:%M"),
                    assisted=game.state.assisted,
                ),
            )
        self._screen = _Screen.WIN

    # -- solver worker --------------------------------------------------------

    @property
    def _busy(self) -> bool:
        return self._worker is not None or bool(self._playback)

    def _ask_solver(self, steps: int | None) -> None:
        game = self._game
        assert game is not None
        if self._busy:
            return

        board = game.state.board
        self._cancel = threading.Event()
        self._results = []
        self._hint_len = steps
        self._message = "Calculating best moves…  (Esc to cancel)"

        def _search(cancel: threading.Event, out: list[SearchResult]) -> None:
            out.append(Solver.search(board, cancel=cancel))

        self._worker = threading.Thread(
            target=_search, args=(self._cancel, self._results), daemon=True
        )
        self._worker.start()

    def _cancel_solver(self) -> None:
        self._cancel.set()
        self._worker = None
        self._playback = []
        self._message = "Cancelled."

    def _step_solver(self) -> None:
        """Collect a finished search, then play its moves back one by one."""
        game = self._game
        if game is None:
            return

        if self._worker is not None and not self._worker.is_alive():
            self._worker = None
            result = self._results[0] if self._results else None
            if result is None or result.status is SearchStatus.CANCELLED:
                return
            if result.status is SearchStatus.ALREADY_SOLVED:
                self._message = "You've already won!"
            elif result.moves is None:
                log.info("No hint: search %s", result.status.value)
                self._message = "No solution found from here! Try resetting."
            else:
                moves = list(result.moves)
                self._playback = moves if self._hint_len is None else moves[: self._hint_len]
                self._next_move_at = time.monotonic()

        if self._playback and time.monotonic() >= self._next_move_at:
            move = self._playback.pop(0)
            game.apply(move, assisted=True)
            game.select(move.piece_index)
            self._next_move_at = time.monotonic() + PLAYBACK_DELAY
            self._message = f"Playing… {len(self._playback)} left" if self._playback else ""

    # -- screens: drawing -----------------------------------------------------

    def _paint_menu(self) -> None:
        surf, fonts = self._surf, self._fonts
        text_line(surf, fonts["big"], "ROYAL  ESCAPE", COL_TEXT, 80)
        text_line(surf, fonts["body"], "Select layout", COL_SUBTEXT, 210)
        for name, btn in zip(self._layouts, self._layout_btns):
            btn.theme = THEME_GREEN if name == self._layout else THEME_PLAIN
            btn.draw(surf)
        for btn in (self._play_btn, self._study_btn, self._records_btn, self._quit_btn):
            btn.draw(surf)

    def _paint_board(self, game: GamePlay, view: _BoardView) -> None:
        surf = self._surf
        board = game.state.board
        pygame.draw.rect(surf, COL_MANTLE, view.frame, border_radius=10)

        gx, gy = board.goal
        exit_rect = view.rect(gx, gy, *PieceKind.KING.size)
        pygame.draw.rect(surf, COL_SURFACE0, exit_rect, width=2, border_radius=8)
        label = self._fonts["small"].render("EXIT", True, COL_OVERLAY0)
        surf.blit(label, label.get_rect(midtop=(exit_rect.centerx, view.frame.bottom + 2)))

        for i, piece in enumerate(board.pieces):
            rect = view.rect(piece.x, piece.y, piece.width, piece.height)
            pygame.draw.rect(surf, KIND_COLOUR[piece.kind], rect, border_radius=8)
            if i == game.selected:
                pygame.draw.rect(surf, COL_TEXT, rect, width=4, border_radius=8)
            blit_centered(
                surf, self._fonts["piece"].render(str(i), True, COL_BASE), rect.center
            )

    def _paint_game(self) -> None:
        game, view = self._game, self._view
        assert game is not None and view is not None
        surf, fonts = self._surf, self._fonts

        title = f"Study  {game.layout}" if self._study else f"Royal Escape  {game.layout}"
        text_line(surf, fonts["title"], title, COL_YELLOW if self._study else COL_TEXT, 14)
        text_line(
            surf, fonts["body"],
            f"Moves: {game.state.moves}    Time: {_clock(game.state.elapsed_time)}",
            COL_PINK, 44,
        )
        self._paint_board(game, view)

        self._action_btns[1].label = f"STEPS: {game.hint_label.upper()}"
        for btn in self._action_btns:
            btn.draw(surf)

        y = self._action_btns[0].rect.bottom + 8
        if self._message:
            text_line(surf, fonts["small"], self._message, COL_YELLOW, y)
        reset = "scramble" if self._study else "restart"
        text_line(surf, fonts["small"],
                  "Click / Tab  select     Arrows / WASD  slide", COL_OVERLAY0, y + 24)
        text_line(surf, fonts["small"],
                  f"N  hint     T  steps     R  {reset}     M  menu", COL_OVERLAY0, y + 42)

    def _paint_win(self) -> None:
        game = self._game
        assert game is not None
        surf, fonts = self._surf, self._fonts
        text_line(surf, fonts["big"], "★  E S C A P E D  ★", COL_GREEN, 100)

        lines = [
            (f"Layout:  {game.layout}", COL_SUBTEXT),
            (f"Moves:  {game.state.moves}", COL_YELLOW),
            (f"Time:   {_clock(game.state.elapsed_time)}", COL_YELLOW),
        ]
        if game.state.assisted:
            lines.append(("(solver assisted)", COL_OVERLAY0))
        for i, (text, colour) in enumerate(lines):
            text_line(surf, fonts["title"], text, colour, 200 + i * 44)

        self._again_btn.draw(surf)
        self._menu_btn.draw(surf)

    def _paint_records(self) -> None:
        surf, fonts = self._surf, self._fonts
        text_line(surf, fonts["big"], "RECORDS", COL_TEXT, 24)

        layouts = self._records.get_layouts()
        if not layouts:
            text_line(surf, fonts["body"], "No records yet.", COL_OVERLAY0, 120)

        y = 90
        for name in layouts:
            if y > WIN_H - 90:
                break
            text_line(surf, fonts["button_sm"], f"—  {name}  —", COL_BLUE, y)
            y += 28
            for rank, e in enumerate(self._records.get_scores(name)[:5], 1):
                row = f"{rank}.  {e.moves} moves   {e.time:.1f}s   ({e.date})"
                if e.assisted:
                    row += "   assisted"
                surf.blit(fonts["row"].render(row, True, COL_SUBTEXT), (60, y))
                y += 22
            y += 14

        self._back_btn.draw(surf)

    # -- screens: input -------------------------------------------------------

    def _on_menu(self, ev: pygame.event.Event) -> bool:
        buttons = [*self._layout_btns, self._play_btn, self._study_btn,
                   self._records_btn, self._quit_btn]
        if ev.type == pygame.MOUSEMOTION:
            for btn in buttons:
                btn.track(ev.pos)
            return True

        action = None
        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for name, btn in zip(self._layouts, self._layout_btns):
                if btn.hit(ev.pos):
                    self._layout = name
            for btn, name in ((self._play_btn, "play"), (self._study_btn, "study"),
                              (self._records_btn, "records"), (self._quit_btn, "quit")):
                if btn.hit(ev.pos):
                    action = name
        elif ev.type == pygame.KEYDOWN:
            i = self._layouts.index(self._layout)
            if ev.key in (pygame.K_LEFT, pygame.K_RIGHT):
                i += 1 if ev.key == pygame.K_RIGHT else -1
                self._layout = self._layouts[max(0, min(len(self._layouts) - 1, i))]
            action = {
                pygame.K_RETURN: "play",
                pygame.K_l: "study",
                pygame.K_h: "records",
                pygame.K_q: "quit",
                pygame.K_ESCAPE: "quit",
            }.get(ev.key)

        if action == "play":
            self._begin(GamePlay(self._layout), study=False)
        elif action == "study":
            self._begin(GamePlay.scrambled(self._layout), study=True)
        elif action == "records":
            self._records = HighScoreManager(self._data_dir / "highscores.json")
            self._screen = _Screen.SCORES
        return action != "quit"

    def _on_game(self, ev: pygame.event.Event) -> bool:
        game = self._game
        assert game is not None
        if self._busy:
            # Input is locked while the solver thinks or plays back.
            if ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE:
                self._cancel_solver()
            return True

        if ev.type == pygame.MOUSEMOTION:
            for btn in self._action_btns:
                btn.track(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            self._click_game(game, ev.pos)
        elif ev.type == pygame.KEYDOWN:
            self._key_game(game, ev)
        return True

    def _click_game(self, game: GamePlay, pos: tuple[int, int]) -> None:
        hint, steps, reset, *solve = self._action_btns
        if hint.hit(pos):
            self._ask_solver(game.hint_steps)
        elif steps.hit(pos):
            game.cycle_hint_steps()
        elif reset.hit(pos):
            self._reset()
        elif solve and solve[0].hit(pos):
            self._ask_solver(None)
        else:
            assert self._view is not None
            cell = self._view.cell_at(pos)
            if cell is None:
                game.select(None)
            else:
                game.select_at(*cell)
            self._message = ""

    def _key_game(self, game: GamePlay, ev: pygame.event.Event) -> None:
        key = ev.key
        if key in _KEY_DIRECTIONS:
            if game.selected is None:
                self._message = "Click a piece first (or press Tab)"
            else:
                game.move(_KEY_DIRECTIONS[key])
                self._message = ""
        elif key == pygame.K_TAB:
            game.cycle_selection(-1 if ev.mod & pygame.KMOD_SHIFT else 1)
        elif pygame.K_0 <= key <= pygame.K_9:
            game.select(key - pygame.K_0)
        elif key == pygame.K_n:
            self._ask_solver(game.hint_steps)
        elif key == pygame.K_t:
            game.cycle_hint_steps()
        elif key == pygame.K_v and self._study:
            self._ask_solver(None)
        elif key == pygame.K_r:
            self._reset()
        elif key == pygame.K_p:
            self._message = f"Saved {game.export(self._data_dir / 'boards').name}"
        elif key in (pygame.K_m, pygame.K_ESCAPE):
            self._screen = _Screen.MENU

    def _on_win(self, ev: pygame.event.Event) -> bool:
        again = menu = False
        if ev.type == pygame.MOUSEMOTION:
            self._again_btn.track(ev.pos)
            self._menu_btn.track(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            again = self._again_btn.hit(ev.pos)
            menu = self._menu_btn.hit(ev.pos)
        elif ev.type == pygame.KEYDOWN:
            again = ev.key in (pygame.K_r, pygame.K_RETURN)
            menu = ev.key in (pygame.K_m, pygame.K_ESCAPE)

        if again and self._study:
            self._begin(GamePlay.scrambled(self._layout), study=True)
        elif again:
            self._begin(GamePlay(self._layout), study=False)
        elif menu:
            self._screen = _Screen.MENU
        return True

    def _on_records(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._back_btn.track(ev.pos)
        elif (
            (ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1
             and self._back_btn.hit(ev.pos))
            or (ev.type == pygame.KEYDOWN
                and ev.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_m))
        ):
            self._screen = _Screen.MENU
        return True

    # -- main loop ------------------------------------------------------------

    def run_loop(self) -> None:
        screens = {
            _Screen.MENU: (self._on_menu, self._paint_menu),
            _Screen.PLAYING: (self._on_game, self._paint_game),
            _Screen.WIN: (self._on_win, self._paint_win),
            _Screen.SCORES: (self._on_records, self._paint_records),
        }

        running = True
        while running:
            for ev in pygame.event.get():
                on_event, _ = screens[self._screen]
                if ev.type == pygame.QUIT or not on_event(ev):
                    running = False
                    break

            if self._screen is _Screen.PLAYING:
                self._step_solver()
                self._record_win()

            self._surf.fill(COL_BASE)
            screens[self._screen][1]()
            pygame.display.flip()
            self._ticker.tick(FPS)

        self._cancel.set()
        pygame.quit()


def run(layout: str = "classic", data_dir: Path = Path("data")) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    PygameApp(layout, data_dir).run_loop()
