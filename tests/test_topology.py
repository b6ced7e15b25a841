from __future__ import annotations

import unittest

import pytest

from ludo_client.config import board_config
from ludo_client.topology import (
    ARM_TIPS,
    CENTER,
    RING,
    YARD_GATES,
    entry_cell,
    home_column_cell,
    home_column_color,
    is_safe_position,
    map_position_to_cell,
    ring_position,
    start_color_at,
    step_index,
    token_cell,
    validate_layout,
    yard_cell,
    yard_cells,
    yard_color,
    yard_exit_cells,
)
from ludo_client.types import ALL_COLORS, Cell, PlayerColor


class RingLayoutTests(unittest.TestCase):
    def test_layout_validates(self) -> None:
        validate_layout()

    def test_ring_has_52_distinct_cells(self) -> None:
        self.assertEqual(len(RING), board_config.RING_SIZE)
        self.assertEqual(len(set(RING.values())), board_config.RING_SIZE)

    def test_consecutive_ring_cells_are_neighbours(self) -> None:
        for pos in range(1, 53):
            a, b = RING[pos], RING[pos % 52 + 1]
            self.assertEqual(max(abs(a.row - b.row), abs(a.col - b.col)), 1, (pos, a, b))

    def test_ring_cells_lie_on_arms(self) -> None:
        for cell in RING.values():
            self.assertTrue(7 <= cell.row <= 9 or 7 <= cell.col <= 9, cell)
            self.assertNotEqual(cell, CENTER)

    def test_entry_cells(self) -> None:
        self.assertEqual(map_position_to_cell(PlayerColor.RED, 1), Cell(7, 1))
        self.assertEqual(map_position_to_cell(PlayerColor.GREEN, 14), Cell(1, 9))
        self.assertEqual(map_position_to_cell(PlayerColor.YELLOW, 27), Cell(9, 15))
        self.assertEqual(map_position_to_cell(PlayerColor.BLUE, 40), Cell(15, 7))

    def test_ring_positions_are_color_independent(self) -> None:
        for pos in (1, 13, 26, 39, 52):
            cells = {map_position_to_cell(c, pos) for c in ALL_COLORS}
            self.assertEqual(len(cells), 1)

    def test_last_ring_square_is_arm_tip(self) -> None:
        for color in ALL_COLORS:
            last = ring_position(color, 52)
            self.assertEqual(RING[last], ARM_TIPS[color])

    def test_start_color_and_safe_squares(self) -> None:
        self.assertIs(start_color_at(27), PlayerColor.YELLOW)
        self.assertIsNone(start_color_at(2))
        self.assertTrue(is_safe_position(9))
        self.assertFalse(is_safe_position(10))


class SpecialPositionTests(unittest.TestCase):
    def test_yard_maps_to_no_cell(self) -> None:
        for color in ALL_COLORS:
            self.assertIsNone(map_position_to_cell(color, 0))

    def test_finish_is_center_for_every_color(self) -> None:
        for color in ALL_COLORS:
            self.assertEqual(map_position_to_cell(color, 58), Cell(8, 8))

    def test_out_of_range_positions_raise(self) -> None:
        with self.assertRaises(ValueError):
            map_position_to_cell(PlayerColor.RED, -1)
        with self.assertRaises(ValueError):
            map_position_to_cell(PlayerColor.RED, 59)

    def test_home_columns(self) -> None:
        self.assertEqual(map_position_to_cell(PlayerColor.RED, 53), Cell(8, 2))
        self.assertEqual(map_position_to_cell(PlayerColor.RED, 57), Cell(8, 6))
        self.assertEqual(map_position_to_cell(PlayerColor.GREEN, 53), Cell(2, 8))
        self.assertEqual(map_position_to_cell(PlayerColor.YELLOW, 53), Cell(8, 14))
        self.assertEqual(map_position_to_cell(PlayerColor.BLUE, 57), Cell(10, 8))

    def test_home_column_offset_bounds(self) -> None:
        with self.assertRaises(ValueError):
            home_column_cell(PlayerColor.RED, 0)
        with self.assertRaises(ValueError):
            home_column_cell(PlayerColor.RED, 6)

    def test_home_stretch_moves_toward_center(self) -> None:
        for color in ALL_COLORS:
            tip = ARM_TIPS[color]
            previous = abs(tip.row - CENTER.row) + abs(tip.col - CENTER.col)
            for pos in range(53, 59):
                cell = map_position_to_cell(color, pos)
                self.assertTrue(cell.row == 8 or cell.col == 8)
                distance = abs(cell.row - CENTER.row) + abs(cell.col - CENTER.col)
                self.assertLess(distance, previous, (color, pos))
                previous = distance

    def test_yard_slots_and_token_cell(self) -> None:
        self.assertEqual(yard_cell(PlayerColor.RED, 0), Cell(2, 2))
        self.assertEqual(token_cell(PlayerColor.BLUE, 3, 0), Cell(14, 5))
        self.assertEqual(token_cell(PlayerColor.BLUE, 3, 40), Cell(15, 7))
        self.assertIs(yard_color(Cell(12, 12)), PlayerColor.YELLOW)
        self.assertIsNone(yard_color(Cell(8, 8)))

    def test_yard_cells_stay_in_their_corner(self) -> None:
        for color in ALL_COLORS:
            cells = yard_cells(color)
            self.assertEqual(len(set(cells)), 4)
            self.assertTrue(all(yard_color(c) is color for c in cells))

    def test_home_column_color(self) -> None:
        self.assertIs(home_column_color(Cell(8, 2)), PlayerColor.RED)
        self.assertIs(home_column_color(Cell(6, 8)), PlayerColor.GREEN)
        self.assertIs(home_column_color(Cell(8, 10)), PlayerColor.YELLOW)
        self.assertIs(home_column_color(Cell(14, 8)), PlayerColor.BLUE)
        self.assertIsNone(home_column_color(Cell(8, 1)))
        self.assertIsNone(home_column_color(CENTER))


class YardExitTests(unittest.TestCase):
    def test_six_cells_ending_on_entry(self) -> None:
        for color in ALL_COLORS:
            for index in range(4):
                cells = yard_exit_cells(color, index, 6)
                self.assertEqual(len(cells), 6)
                self.assertEqual(cells[-1], entry_cell(color))
                self.assertEqual(cells[-2], YARD_GATES[color])

    def test_red_first_slot_walk(self) -> None:
        self.assertEqual(
            yard_exit_cells(PlayerColor.RED, 0, 6),
            [Cell(3, 2), Cell(4, 2), Cell(4, 1), Cell(5, 1), Cell(6, 1), Cell(7, 1)],
        )


@pytest.mark.parametrize("color", ALL_COLORS)
@pytest.mark.parametrize("step", [1, 2, 13, 26, 39, 51, 52])
def test_step_and_ring_position_are_inverse(color, step):
    assert step_index(color, ring_position(color, step)) == step


@pytest.mark.parametrize(
    "color,position,expected",
    [
        (PlayerColor.RED, 1, 1),
        (PlayerColor.RED, 52, 52),
        (PlayerColor.GREEN, 14, 1),
        (PlayerColor.GREEN, 13, 52),
        (PlayerColor.BLUE, 1, 14),
        (PlayerColor.YELLOW, 55, 55),
        (PlayerColor.YELLOW, 0, 0),
    ],
)
def test_step_index(color, position, expected):
    assert step_index(color, position) == expected


if __name__ == "__main__":
    unittest.main()
