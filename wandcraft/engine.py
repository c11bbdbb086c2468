"""
Rendering Engine
=================
Double-buffered terminal renderer for the sandbox.

A frame is a grid of (char, color) cells. Only cells that changed since
the previous frame are written to the terminal.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
MANA_BLUE = 63

GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255

# Rows reserved under the arena for the HUD
HUD_ROWS = 4

BLANK: Tuple[str, int] = (' ', 7)


class FrameBuffer:
    """Current frame being drawn plus the frame already on screen."""

    def __init__(self, term: Terminal, width: int, height: int):
        self.term = term
        self.width = width
        self.height = height
        self.shown: List[List[Tuple[str, int]]] = self._blank()
        self.drawing: List[List[Tuple[str, int]]] = self._blank()

    def _blank(self) -> List[List[Tuple[str, int]]]:
        return [[BLANK] * self.width for _ in range(self.height)]

    def clear(self):
        self.drawing = self._blank()

    def put(self, x: int, y: int, char: str, color: int = 7):
        if 0 <= x < self.width and 0 <= y < self.height:
            self.drawing[y][x] = (char, color)

    def flush(self) -> str:
        """Escape sequences for every changed cell. The drawn frame becomes shown."""
        term = self.term
        parts = []

        for y, (row, old_row) in enumerate(zip(self.drawing, self.shown)):
            for x, cell in enumerate(row):
                if cell == old_row[x]:
                    continue
                char, color = cell
                parts.append(term.move_xy(x, y) + term.normal + term.color(color) + (char or ' '))

        self.shown = self.drawing
        self.drawing = self._blank()
        return ''.join(parts)


@dataclass
class GameRenderer:
    """
    Arena plus HUD renderer.

    The arena is `arena_width` x `arena_height` cells; the HUD occupies
    HUD_ROWS rows below it.
    """
    term: Terminal
    arena_width: int
    arena_height: int
    frame: FrameBuffer = field(init=False)

    show_fps: bool = False
    current_fps: float = 60.0

    def __post_init__(self):
        self.frame = FrameBuffer(self.term, self.arena_width, self.arena_height + HUD_ROWS)

    @property
    def width(self) -> int:
        return self.frame.width

    @property
    def game_height(self) -> int:
        """Rows available to the arena."""
        return self.arena_height

    def begin_frame(self):
        self.frame.clear()

    def end_frame(self) -> str:
        return self.frame.flush()

    def put(self, x: int, y: int, char: str, color: int = 7):
        self.frame.put(x, y, char, color)

    def put_string(self, x: int, y: int, text: str, color: int = 7):
        for i, char in enumerate(text):
            self.frame.put(x + i, y, char, color)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK,
                 char: str = '#'):
        """Outline a rectangle."""
        right, bottom = x + w - 1, y + h - 1
        for cx in range(x, x + w):
            self.put(cx, y, char, color)
            self.put(cx, bottom, char, color)
        for cy in range(y + 1, bottom):
            self.put(x, cy, char, color)
            self.put(right, cy, char, color)

    def draw_bar(self, x: int, y: int, width: int, fill: int,
                 color: int = MANA_BLUE, empty_color: int = GRAY_DARKER):
        """Horizontal bar; `fill` runs from 0 (empty) to 255 (full)."""
        filled = round(width * max(0, min(fill, 255)) / 255)
        self.put_string(x, y, '█' * filled, color)
        self.put_string(x + filled, y, '░' * (width - filled), empty_color)
