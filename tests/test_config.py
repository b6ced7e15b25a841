import unittest

from factories import make_config

from ludo_client.config import BoardConfig, board_config


class TestBoardConfig(unittest.TestCase):
    def test_derived_values(self):
        self.assertEqual(board_config.YARD, 0)
        self.assertEqual(board_config.FINISH, 58)
        self.assertEqual(board_config.HOME_COLUMN_START, 53)
        self.assertEqual(board_config.HOME_COLUMN_END, 57)

    def test_inconsistent_path_length(self):
        with self.assertRaises(ValueError):
            BoardConfig(PATH_LENGTH=60)

    def test_start_squares_per_color(self):
        with self.assertRaises(ValueError):
            BoardConfig(PLAYER_START_SQUARES=[1, 14])


class TestClientConfig(unittest.TestCase):
    def test_custom_values(self):
        cfg = make_config(animation_step_ms=250, history_limit=5)
        self.assertEqual(cfg.animation_step_s, 0.25)
        self.assertEqual(cfg.history_limit, 5)

    def test_namespace_gets_leading_slash(self):
        self.assertEqual(make_config(namespace="game").namespace, "/game")
        self.assertEqual(make_config(namespace="/game").namespace, "/game")

    def test_invalid_values(self):
        for overrides in (
            {"animation_step_ms": 0},
            {"move_confirm_timeout_s": -1},
            {"history_limit": 0},
        ):
            with self.subTest(**overrides):
                with self.assertRaises(ValueError):
                    make_config(**overrides)


if __name__ == "__main__":
    unittest.main()
