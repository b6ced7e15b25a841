from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .config import board_config
from .topology import (
    CENTER,
    RING,
    YARD_QUADRANTS,
    home_column_color,
    is_safe_position,
    start_color_at,
    yard_cells,
)
from .types import Cell, PlayerColor
from .view import BoardView, TokenMarker

# Color styling
COLOR_MAP = {
    PlayerColor.RED: (230, 60, 60),
    PlayerColor.GREEN: (60, 170, 90),
    PlayerColor.YELLOW: (245, 205, 55),
    PlayerColor.BLUE: (65, 100, 210),
}
BG_COLOR = (245, 245, 245)
GRID_LINE = (200, 200, 200)
PATH_COLOR = (255, 255, 255)
STAR_COLOR = (255, 255, 200)
HOME_SHADE = (235, 235, 235)
CENTER_COLOR = (255, 255, 255)
MOVABLE_OUTLINE = (255, 255, 255)
STATUS_HEIGHT = 28

FONT: Optional[ImageFont.ImageFont]
try:
    FONT = ImageFont.truetype("DejaVuSans.ttf", 14)
except OSError:
    FONT = ImageFont.load_default()

CELL = 32
GRID = board_config.BOARD_SIZE
BOARD_SIZE = GRID * CELL


def _cell_bbox(cell: Cell) -> Tuple[int, int, int, int]:
    x0 = (cell.col - 1) * CELL
    y0 = (cell.row - 1) * CELL
    return (x0, y0, x0 + CELL, y0 + CELL)


def _draw_yards(d: ImageDraw.ImageDraw) -> None:
    for color, ((r0, r1), (c0, c1)) in YARD_QUADRANTS.items():
        box = ((c0 - 1) * CELL, (r0 - 1) * CELL, c1 * CELL, r1 * CELL)
        d.rectangle(box, fill=tuple(int(c * 0.9) for c in COLOR_MAP[color]))
        inner = (c0 * CELL, r0 * CELL, (c1 - 1) * CELL, (r1 - 1) * CELL)
        d.rectangle(inner, fill=HOME_SHADE)
        for slot in yard_cells(color):
            d.ellipse(_inset(_cell_bbox(slot), 3), outline=COLOR_MAP[color], width=2)


def _inset(bbox: Tuple[int, int, int, int], by: int) -> Tuple[int, int, int, int]:
    x0, y0, x1, y1 = bbox
    return (x0 + by, y0 + by, x1 - by, y1 - by)


def _draw_token(
    d: ImageDraw.ImageDraw, cell: Cell, marker: TokenMarker, shift: int = 0
) -> None:
    x0, y0, x1, y1 = _inset(_cell_bbox(cell), 4)
    box = (x0 + shift, y0 + shift, x1 + shift, y1 + shift)
    outline = MOVABLE_OUTLINE if marker.movable else (0, 0, 0)
    d.ellipse(box, fill=COLOR_MAP[marker.color], outline=outline, width=3 if marker.movable else 1)
    d.text((box[0] + CELL // 2 - 8, box[1] + CELL // 2 - 11), str(marker.index + 1), fill=(0, 0, 0), font=FONT)


def _status_line(view: BoardView) -> str:
    if view.error:
        return view.error
    if not view.has_game:
        return f"Room {view.room_code}" if view.room_code else "Not in a game"
    parts = [f"Turn: {view.current_color.display_name}"]
    if view.dice is not None:
        parts.append(f"Dice: {view.dice}")
    if view.message:
        parts.append(view.message)
    return " | ".join(parts)


def draw_board(view: BoardView) -> Image.Image:
    """Render a snapshot to an RGB image with a status strip underneath."""
    img = Image.new("RGB", (BOARD_SIZE, BOARD_SIZE + STATUS_HEIGHT), BG_COLOR)
    d = ImageDraw.Draw(img)

    _draw_yards(d)

    # Ring squares; entry squares take their color, other safe squares a star tint
    for pos, cell in RING.items():
        owner = start_color_at(pos)
        if owner is not None:
            fill = COLOR_MAP[owner]
        elif is_safe_position(pos):
            fill = STAR_COLOR
        else:
            fill = PATH_COLOR
        d.rectangle(_cell_bbox(cell), fill=fill, outline=GRID_LINE)

    for row in range(1, GRID + 1):
        for col in range(1, GRID + 1):
            cell = Cell(row, col)
            owner = home_column_color(cell)
            if owner is not None:
                d.rectangle(_cell_bbox(cell), fill=COLOR_MAP[owner], outline=GRID_LINE)

    # Finish area is the 3x3 center block
    cx0, cy0, _, _ = _cell_bbox(Cell(CENTER.row - 1, CENTER.col - 1))
    _, _, cx1, cy1 = _cell_bbox(Cell(CENTER.row + 1, CENTER.col + 1))
    d.rectangle((cx0, cy0, cx1, cy1), fill=CENTER_COLOR, outline=(80, 80, 80), width=3)

    # Stacked tokens fan out diagonally so each stays visible
    for cell, markers in view.cells.items():
        for i, marker in enumerate(markers):
            _draw_token(d, cell, marker, shift=3 * i - 3 * (len(markers) - 1) // 2)
    if view.moving is not None and view.moving_cell is not None:
        _draw_token(d, view.moving_cell, view.moving)

    d.text((6, BOARD_SIZE + 6), _status_line(view), fill=(0, 0, 0), font=FONT)
    return img
