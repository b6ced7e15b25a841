"""
Board topology for the 15x15 Ludo grid.

Maps abstract path positions (0 = yard, 1-52 = shared ring, 53-57 = home
column, 58 = finish) to 1-indexed (row, col) cells. Arms are three cells wide
on rows/cols 7-9, the 6x6 corners hold the yards and the ring runs clockwise.
Each 13-square ring segment starts on a color's entry square and ends on the
arm tip that leads into the previous color's home column.

    red    yard top-left,     entry  1, home column row 8 (left arm)
    green  yard top-right,    entry 14, home column col 8 (top arm)
    yellow yard bottom-right, entry 27, home column row 8 (right arm)
    blue   yard bottom-left,  entry 40, home column col 8 (bottom arm)
"""

import math
from typing import Dict, List, Optional, Tuple

from loguru import logger

from .config import board_config
from .types import ALL_COLORS, Cell, PlayerColor

CENTER = Cell(8, 8)

# fmt: off
# Absolute ring position -> cell, identical for every color
RING: Dict[int, Cell] = {
    # red segment: left arm top lane, top arm left lane, top tip
    1: Cell(7, 1), 2: Cell(7, 2), 3: Cell(7, 3), 4: Cell(7, 4), 5: Cell(7, 5), 6: Cell(7, 6),
    7: Cell(6, 7), 8: Cell(5, 7), 9: Cell(4, 7), 10: Cell(3, 7), 11: Cell(2, 7), 12: Cell(1, 7),
    13: Cell(1, 8),
    # green segment: top arm right lane, right arm top lane, right tip
    14: Cell(1, 9), 15: Cell(2, 9), 16: Cell(3, 9), 17: Cell(4, 9), 18: Cell(5, 9), 19: Cell(6, 9),
    20: Cell(7, 10), 21: Cell(7, 11), 22: Cell(7, 12), 23: Cell(7, 13), 24: Cell(7, 14), 25: Cell(7, 15),
    26: Cell(8, 15),
    # yellow segment: right arm bottom lane, bottom arm right lane, bottom tip
    27: Cell(9, 15), 28: Cell(9, 14), 29: Cell(9, 13), 30: Cell(9, 12), 31: Cell(9, 11), 32: Cell(9, 10),
    33: Cell(10, 9), 34: Cell(11, 9), 35: Cell(12, 9), 36: Cell(13, 9), 37: Cell(14, 9), 38: Cell(15, 9),
    39: Cell(15, 8),
    # blue segment: bottom arm left lane, left arm bottom lane, left tip
    40: Cell(15, 7), 41: Cell(14, 7), 42: Cell(13, 7), 43: Cell(12, 7), 44: Cell(11, 7), 45: Cell(10, 7),
    46: Cell(9, 6), 47: Cell(9, 5), 48: Cell(9, 4), 49: Cell(9, 3), 50: Cell(9, 2), 51: Cell(9, 1),
    52: Cell(8, 1),
}
# fmt: on

CELL_TO_RING: Dict[Cell, int] = {cell: pos for pos, cell in RING.items()}

# Unit step walked from the arm tip toward the center, per color
HOME_DIRECTIONS: Dict[PlayerColor, Tuple[int, int]] = {
    PlayerColor.RED: (0, 1),
    PlayerColor.GREEN: (1, 0),
    PlayerColor.YELLOW: (0, -1),
    PlayerColor.BLUE: (-1, 0),
}

# Arm tip each home column hangs off (the color's last ring square)
ARM_TIPS: Dict[PlayerColor, Cell] = {
    PlayerColor.RED: Cell(8, 1),
    PlayerColor.GREEN: Cell(1, 8),
    PlayerColor.YELLOW: Cell(8, 15),
    PlayerColor.BLUE: Cell(15, 8),
}

# (row range, col range) of each 6x6 corner, inclusive
YARD_QUADRANTS: Dict[PlayerColor, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    PlayerColor.RED: ((1, 6), (1, 6)),
    PlayerColor.GREEN: ((1, 6), (10, 15)),
    PlayerColor.YELLOW: ((10, 15), (10, 15)),
    PlayerColor.BLUE: ((10, 15), (1, 6)),
}

# Four fixed display slots per color, indexed by token index
YARD_SLOTS: Dict[PlayerColor, Tuple[Cell, Cell, Cell, Cell]] = {
    PlayerColor.RED: (Cell(2, 2), Cell(2, 5), Cell(5, 2), Cell(5, 5)),
    PlayerColor.GREEN: (Cell(2, 11), Cell(2, 14), Cell(5, 11), Cell(5, 14)),
    PlayerColor.YELLOW: (Cell(11, 11), Cell(11, 14), Cell(14, 11), Cell(14, 14)),
    PlayerColor.BLUE: (Cell(11, 2), Cell(11, 5), Cell(14, 2), Cell(14, 5)),
}

# Yard cell touching the color's entry square; tokens leave the yard through it
YARD_GATES: Dict[PlayerColor, Cell] = {
    PlayerColor.RED: Cell(6, 1),
    PlayerColor.GREEN: Cell(1, 10),
    PlayerColor.YELLOW: Cell(10, 15),
    PlayerColor.BLUE: Cell(15, 6),
}

SAFE_POSITIONS = frozenset(board_config.SAFE_SQUARES)


def _check_position(position: int) -> None:
    if not board_config.YARD <= position <= board_config.FINISH:
        raise ValueError(
            f"Position {position} outside [{board_config.YARD}, {board_config.FINISH}]"
        )


def entry_position(color: PlayerColor) -> int:
    """Absolute ring position where ``color`` enters the ring."""
    return color.start_square


def entry_cell(color: PlayerColor) -> Cell:
    return RING[entry_position(color)]


def home_column_cell(color: PlayerColor, offset: int) -> Cell:
    """Cell ``offset`` squares (1..5) into ``color``'s home column."""
    if not 1 <= offset <= board_config.HOME_COLUMN_SIZE:
        raise ValueError(f"Home column offset {offset} outside [1, 5]")
    tip = ARM_TIPS[color]
    dr, dc = HOME_DIRECTIONS[color]
    return Cell(tip.row + dr * offset, tip.col + dc * offset)


def map_position_to_cell(color: PlayerColor, position: int) -> Optional[Cell]:
    """
    Map an abstract path position to its board cell.

    Args:
        color: Owner of the token (only matters for the home column)
        position: 0..58

    Returns:
        Optional[Cell]: None for the yard (use ``yard_cell``), else the cell
    """
    _check_position(position)
    if position == board_config.YARD:
        return None
    if position == board_config.FINISH:
        return CENTER
    if position >= board_config.HOME_COLUMN_START:
        return home_column_cell(color, position - board_config.RING_SIZE)
    return RING[position]


def yard_cell(color: PlayerColor, slot: int) -> Cell:
    return YARD_SLOTS[color][slot]


def yard_cells(color: PlayerColor) -> Tuple[Cell, ...]:
    return YARD_SLOTS[color]


def token_cell(color: PlayerColor, token_index: int, position: int) -> Cell:
    """Static cell for a token, yard slot included."""
    if position == board_config.YARD:
        return yard_cell(color, token_index)
    return map_position_to_cell(color, position)


# --- Color-relative stepping (done by callers before mapping) ---
def step_index(color: PlayerColor, position: int) -> int:
    """Absolute position -> the player's own step count (1 = entry square).

    Yard stays 0, home column and finish are already player-relative.
    """
    _check_position(position)
    if position == board_config.YARD or position > board_config.RING_SIZE:
        return position
    ring = board_config.RING_SIZE
    return (position - entry_position(color)) % ring + 1


def ring_position(color: PlayerColor, step: int) -> int:
    """Player's step count -> absolute position (inverse of ``step_index``)."""
    _check_position(step)
    if step == board_config.YARD or step > board_config.RING_SIZE:
        return step
    ring = board_config.RING_SIZE
    return (entry_position(color) + step - 2) % ring + 1


def yard_exit_cells(color: PlayerColor, token_index: int, steps: int) -> List[Cell]:
    """Cells walked from a yard slot out to the entry square.

    The walk is ``steps`` long: ``steps - 1`` cells interpolated from the
    slot to the yard gate, then the entry square.
    """
    origin = yard_cell(color, token_index)
    gate = YARD_GATES[color]
    inner = steps - 1
    cells: List[Cell] = []
    for k in range(1, inner + 1):
        t = k / inner
        row = math.floor(origin.row + (gate.row - origin.row) * t + 0.5)
        col = math.floor(origin.col + (gate.col - origin.col) * t + 0.5)
        cells.append(Cell(row, col))
    cells.append(entry_cell(color))
    return cells


# --- Cell classification (rendering helpers) ---
def is_safe_position(position: int) -> bool:
    return position in SAFE_POSITIONS or position == board_config.FINISH


def start_color_at(position: int) -> Optional[PlayerColor]:
    """Color whose entry square is ``position``, if any."""
    return next((c for c in ALL_COLORS if entry_position(c) == position), None)


def home_column_color(cell: Cell) -> Optional[PlayerColor]:
    for color in ALL_COLORS:
        for offset in range(1, board_config.HOME_COLUMN_SIZE + 1):
            if home_column_cell(color, offset) == cell:
                return color
    return None


def yard_color(cell: Cell) -> Optional[PlayerColor]:
    for color, ((r0, r1), (c0, c1)) in YARD_QUADRANTS.items():
        if r0 <= cell.row <= r1 and c0 <= cell.col <= c1:
            return color
    return None


def is_center_block(cell: Cell) -> bool:
    return 7 <= cell.row <= 9 and 7 <= cell.col <= 9


def _neighbours(a: Cell, b: Cell) -> bool:
    return max(abs(a.row - b.row), abs(a.col - b.col)) == 1


def validate_layout() -> None:
    """Check the tables describe one consistent board. Raises ValueError."""
    size = board_config.BOARD_SIZE
    ring = board_config.RING_SIZE
    if sorted(RING) != list(range(1, ring + 1)):
        raise ValueError("Ring table must cover positions 1..52")
    if len(set(RING.values())) != ring:
        raise ValueError("Ring cells must be pairwise distinct")
    for pos in range(1, ring + 1):
        nxt = pos % ring + 1
        if not _neighbours(RING[pos], RING[nxt]):
            raise ValueError(f"Ring positions {pos} and {nxt} are not adjacent")

    for color in ALL_COLORS:
        last_step = ring_position(color, ring)
        if RING[last_step] != ARM_TIPS[color]:
            raise ValueError(f"{color.value} last ring square is not its arm tip")
        previous = ARM_TIPS[color]
        for offset in range(1, board_config.HOME_COLUMN_SIZE + 1):
            cell = home_column_cell(color, offset)
            if cell in CELL_TO_RING or is_center_block(cell):
                raise ValueError(f"{color.value} home column overlaps {cell}")
            if not _neighbours(previous, cell):
                raise ValueError(f"{color.value} home column is not contiguous")
            previous = cell
        for cell in (*YARD_SLOTS[color], YARD_GATES[color]):
            if yard_color(cell) is not color:
                raise ValueError(f"{cell} is outside the {color.value} yard")
        if not _neighbours(YARD_GATES[color], entry_cell(color)):
            raise ValueError(f"{color.value} yard gate does not touch its entry")

    for cell in RING.values():
        if not (1 <= cell.row <= size and 1 <= cell.col <= size):
            raise ValueError(f"Ring cell {cell} is off the board")
        if yard_color(cell) is not None:
            raise ValueError(f"Ring cell {cell} lies inside a yard")
    logger.debug("Board topology validated")


validate_layout()
