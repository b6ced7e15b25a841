from __future__ import annotations

import unittest

import numpy as np
from factories import make_state

from ludo_client.animation import AnimationSequencer
from ludo_client.scheduler import ManualScheduler
from ludo_client.topology import CENTER
from ludo_client.turn import TurnStateMachine
from ludo_client.types import Cell, Phase, PlayerColor, TokenRef
from ludo_client.view import BoardView, build_view


class BuildViewTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = ManualScheduler()
        self.sequencer = AnimationSequencer(self.scheduler, 0.1)
        self.turn = TurnStateMachine("p0")
        self.state = make_state(
            tokens=((0, 0, 5, 58), (58, 14, 0, 0)),
            current=0,
            dice=6,
            phase=Phase.AWAITING_MOVE,
        )

    def test_empty_view(self) -> None:
        view = build_view(None, self.turn, self.sequencer, False, room_code="ABC")
        self.assertFalse(view.has_game)
        self.assertEqual(view.room_code, "ABC")
        self.assertEqual(view.occupancy_grid().sum(), 0)

    def test_tokens_are_placed_on_cells(self) -> None:
        view = build_view(self.state, self.turn, self.sequencer, False, dice=6)
        self.assertEqual(view.find(TokenRef(PlayerColor.RED, 0)), Cell(2, 2))
        self.assertEqual(view.find(TokenRef(PlayerColor.RED, 2)), Cell(7, 5))
        self.assertEqual(view.find(TokenRef(PlayerColor.GREEN, 1)), Cell(1, 9))
        self.assertEqual(len(view.tokens_at(CENTER)), 2)
        self.assertEqual(view.dice, 6)
        self.assertIs(view.my_color, PlayerColor.RED)
        self.assertTrue(view.is_my_turn)

    def test_movable_flags(self) -> None:
        view = build_view(self.state, self.turn, self.sequencer, False)
        self.assertEqual(view.enabled_tokens, (0, 1, 2))
        red = [m for ms in view.cells.values() for m in ms if m.color is PlayerColor.RED]
        self.assertEqual(sorted(m.index for m in red if m.movable), [0, 1, 2])
        green = [m for ms in view.cells.values() for m in ms if m.color is PlayerColor.GREEN]
        self.assertFalse(any(m.movable for m in green))

    def test_occupancy_grid(self) -> None:
        grid = build_view(self.state, self.turn, self.sequencer, False).occupancy_grid()
        self.assertEqual(grid.shape, (15, 15))
        self.assertEqual(grid.dtype, np.int8)
        self.assertEqual(int(grid.sum()), 8)
        self.assertEqual(grid[7, 7], 2)

    def test_moving_token_is_drawn_once(self) -> None:
        self.sequencer.begin_animation(PlayerColor.RED, 2, 5, 6)
        self.scheduler.advance(0.1)
        view = build_view(self.state, self.turn, self.sequencer, True)
        ref = TokenRef(PlayerColor.RED, 2)
        self.assertEqual(view.moving.ref, ref)
        self.assertEqual(view.find(ref), Cell(7, 6))
        static = [m for ms in view.cells.values() for m in ms if m.ref == ref]
        self.assertEqual(static, [])
        self.assertEqual(int(view.occupancy_grid().sum()), 8)
        self.assertEqual(view.enabled_tokens, ())

    def test_view_is_read_only(self) -> None:
        view = build_view(self.state, self.turn, self.sequencer, False)
        with self.assertRaises(TypeError):
            view.cells[Cell(1, 1)] = ()
        with self.assertRaises(AttributeError):
            view.dice = 3

    def test_default_view(self) -> None:
        view = BoardView()
        self.assertFalse(view.is_my_turn)
        self.assertIsNone(view.find(TokenRef(PlayerColor.BLUE, 0)))


if __name__ == "__main__":
    unittest.main()
