"""Drawing primitives for the Pygame frontend: palette, fonts and buttons."""

from __future__ import annotations

from dataclasses import dataclass, field

import pygame

from backend.models.board import PieceKind

# Catppuccin Mocha
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)
COL_PEACH = (250, 179, 135)

Colour = tuple[int, int, int]

KIND_COLOUR: dict[PieceKind, Colour] = {
    PieceKind.KING: COL_RED,
    PieceKind.VERTICAL: COL_BLUE,
    PieceKind.HORIZONTAL: COL_PEACH,
    PieceKind.PAWN: COL_GREEN,
}

# Button themes: (background, hover, foreground).
THEME_PLAIN: tuple[Colour, Colour, Colour] = (COL_SURFACE0, COL_SURFACE1, COL_TEXT)
THEME_BLUE = (COL_BLUE, COL_LAVENDER, COL_BASE)
THEME_YELLOW = (COL_YELLOW, (255, 240, 200), COL_BASE)
THEME_GREEN = (COL_GREEN, (190, 240, 190), COL_BASE)
THEME_PINK = (COL_PINK, (245, 210, 227), COL_BASE)
THEME_RED = (COL_RED, (255, 170, 185), COL_BASE)

# name -> (size, bold)
_FONT_SPECS: dict[str, tuple[int, bool]] = {
    "big": (38, True),
    "title": (22, True),
    "body": (16, False),
    "button": (17, True),
    "button_sm": (14, True),
    "small": (13, False),
    "row": (14, False),
    "piece": (24, True),
}


def load_fonts(family: str = "Helvetica") -> dict[str, pygame.font.Font]:
    """Return the named fonts used across every screen."""
    return {
        name: pygame.font.SysFont(family, size, bold=bold)
        for name, (size, bold) in _FONT_SPECS.items()
    }


def blit_centered(
    surf: pygame.Surface, rendered: pygame.Surface, center: tuple[int, int]
) -> None:
    surf.blit(rendered, rendered.get_rect(center=center))


def text_line(
    surf: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    colour: Colour,
    y: int,
) -> None:
    """Draw *text* horizontally centred with its top edge at *y*."""
    rendered = font.render(text, True, colour)
    surf.blit(rendered, rendered.get_rect(midtop=(surf.get_width() // 2, y)))


@dataclass
class Button:
    """A rounded, clickable label; ``hot`` tracks mouse hover."""

    rect: pygame.Rect
    label: str
    font: pygame.font.Font
    theme: tuple[Colour, Colour, Colour] = THEME_PLAIN
    hot: bool = field(default=False, compare=False)

    def draw(self, surf: pygame.Surface) -> None:
        bg, hover, fg = self.theme
        pygame.draw.rect(surf, hover if self.hot else bg, self.rect, border_radius=8)
        blit_centered(surf, self.font.render(self.label, True, fg), self.rect.center)

    def track(self, pos: tuple[int, int]) -> None:
        self.hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return bool(self.rect.collidepoint(pos))


def button_row(
    labels: list[tuple[str, tuple[Colour, Colour, Colour]]],
    font: pygame.font.Font,
    *,
    width: int,
    y: int,
    button_w: int,
    button_h: int,
    gap: int = 8,
) -> list[Button]:
    """Lay out buttons side by side, centred in a window *width* wide."""
    total = len(labels) * button_w + (len(labels) - 1) * gap
    x = (width - total) // 2
    row = []
    for label, theme in labels:
        row.append(Button(pygame.Rect(x, y, button_w, button_h), label, font, theme))
        x += button_w + gap
    return row


def button_column(
    labels: list[tuple[str, tuple[Colour, Colour, Colour]]],
    font: pygame.font.Font,
    *,
    width: int,
    top: int,
    button_w: int,
    button_h: int,
    gap: int = 14,
) -> list[Button]:
    """Stack buttons vertically, centred in a window *width* wide."""
    x = (width - button_w) // 2
    return [
        Button(
            pygame.Rect(x, top + i * (button_h + gap), button_w, button_h),
            label, font, theme,
        )
        for i, (label, theme) in enumerate(labels)
    ]
