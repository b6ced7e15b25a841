from __future__ import annotations

import unittest

from ludo_client.animation import AnimationSequencer, build_path
from ludo_client.errors import AnimationBusy
from ludo_client.scheduler import ManualScheduler
from ludo_client.topology import entry_cell, yard_cell
from ludo_client.types import ALL_COLORS, Cell, PlayerColor, TokenRef


class BuildPathTests(unittest.TestCase):
    def test_simple_ring_walk(self) -> None:
        self.assertEqual(
            build_path(PlayerColor.RED, 1, 3), [Cell(7, 2), Cell(7, 3), Cell(7, 4)]
        )

    def test_turns_into_home_column(self) -> None:
        self.assertEqual(
            build_path(PlayerColor.RED, 50, 6),
            [Cell(9, 1), Cell(8, 1), Cell(8, 2), Cell(8, 3), Cell(8, 4), Cell(8, 5)],
        )
        self.assertEqual(
            build_path(PlayerColor.GREEN, 12, 3), [Cell(1, 8), Cell(2, 8), Cell(3, 8)]
        )

    def test_wraps_around_the_ring(self) -> None:
        self.assertEqual(
            build_path(PlayerColor.YELLOW, 50, 4),
            [Cell(9, 1), Cell(8, 1), Cell(7, 1), Cell(7, 2)],
        )

    def test_ends_on_center(self) -> None:
        self.assertEqual(
            build_path(PlayerColor.RED, 55, 3), [Cell(8, 5), Cell(8, 6), Cell(8, 8)]
        )
        self.assertEqual(build_path(PlayerColor.BLUE, 57, 6), [Cell(8, 8)])

    def test_yard_exit_is_six_steps_to_entry(self) -> None:
        for color in ALL_COLORS:
            path = build_path(color, 0, 6, token_index=2)
            self.assertEqual(len(path), 6)
            self.assertEqual(path[-1], entry_cell(color))

    def test_yard_without_six_has_no_path(self) -> None:
        self.assertEqual(build_path(PlayerColor.RED, 0, 5), [])
        self.assertEqual(build_path(PlayerColor.RED, 10, 0), [])


class AnimationSequencerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = ManualScheduler()
        self.steps = []
        self.completed = []
        self.sequencer = AnimationSequencer(
            self.scheduler,
            0.1,
            on_step=lambda task: self.steps.append(task.current_cell),
            on_complete=self.completed.append,
        )

    def test_one_cell_per_tick(self) -> None:
        task = self.sequencer.begin_animation(PlayerColor.RED, 0, 1, 3)
        self.assertEqual(task.target_position, 4)
        self.assertEqual(task.current_cell, Cell(7, 1))
        self.assertTrue(self.sequencer.is_running)

        self.scheduler.advance(0.1)
        self.assertEqual(self.steps, [Cell(7, 2)])
        self.scheduler.advance(0.1)
        self.assertEqual(len(self.steps), 2)
        self.assertEqual(self.completed, [])

        self.scheduler.advance(0.1)
        self.assertEqual(self.steps, [Cell(7, 2), Cell(7, 3), Cell(7, 4)])
        self.assertFalse(self.sequencer.is_running)
        self.assertEqual(self.completed, [task])
        self.assertEqual(self.scheduler.pending, 0)

    def test_yard_exit_starts_from_slot(self) -> None:
        task = self.sequencer.begin_animation(PlayerColor.GREEN, 3, 0, 6)
        self.assertEqual(task.current_cell, yard_cell(PlayerColor.GREEN, 3))
        self.assertEqual(task.target_position, 14)
        self.scheduler.run_all()
        self.assertEqual(len(self.steps), 6)
        self.assertEqual(self.steps[-1], Cell(1, 9))

    def test_suppresses_only_the_moving_token(self) -> None:
        self.sequencer.begin_animation(PlayerColor.RED, 1, 10, 2)
        self.assertTrue(self.sequencer.is_suppressed(TokenRef(PlayerColor.RED, 1)))
        self.assertFalse(self.sequencer.is_suppressed(TokenRef(PlayerColor.RED, 0)))
        self.scheduler.run_all()
        self.assertFalse(self.sequencer.is_suppressed(TokenRef(PlayerColor.RED, 1)))

    def test_second_animation_is_refused_while_running(self) -> None:
        self.sequencer.begin_animation(PlayerColor.RED, 0, 1, 3)
        with self.assertRaises(AnimationBusy):
            self.sequencer.begin_animation(PlayerColor.RED, 1, 1, 3)
        self.scheduler.run_all()
        self.sequencer.begin_animation(PlayerColor.RED, 1, 1, 3)

    def test_empty_path_is_an_error(self) -> None:
        with self.assertRaises(ValueError):
            self.sequencer.begin_animation(PlayerColor.RED, 0, 0, 4)
        self.assertIsNone(self.sequencer.task)

    def test_reset_cancels_pending_tick(self) -> None:
        self.sequencer.begin_animation(PlayerColor.RED, 0, 1, 3)
        self.sequencer.reset()
        self.assertFalse(self.sequencer.is_running)
        self.assertEqual(self.scheduler.run_all(), 0)
        self.assertEqual(self.completed, [])


if __name__ == "__main__":
    unittest.main()
