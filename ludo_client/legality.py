"""
Client-side move plausibility.

Only the yard-exit and exact-finish rules are predicted here; captures,
blockades and bonus turns are decided by the server. The predictor must
accept every move the server would accept under these two rules, so it errs
on the side of "legal".
"""

from typing import List, Optional

from .config import board_config
from .topology import ring_position, step_index
from .types import Player, PlayerColor


def is_plausible_move(position: int, dice: Optional[int]) -> bool:
    """
    Decide whether a token could move with the given dice value.

    Args:
        position: Token position (0..58)
        dice: Dice value, None when no dice has been rolled

    Returns:
        bool: True if the move passes the yard and overshoot rules
    """
    if dice is None or not board_config.DICE_MIN <= dice <= board_config.DICE_MAX:
        return False
    if position == board_config.YARD:
        # Only a 6 releases a token from the yard
        return dice == board_config.EXIT_YARD_ROLL
    if not board_config.YARD < position < board_config.FINISH:
        return False
    # Exact count needed to finish
    return position + dice <= board_config.FINISH


def movable_tokens(player: Player, dice: Optional[int]) -> List[int]:
    """Indexes of ``player``'s tokens that pass ``is_plausible_move``."""
    return [i for i, pos in enumerate(player.tokens) if is_plausible_move(pos, dice)]


def target_position(color: PlayerColor, position: int, dice: int) -> int:
    """Absolute position a token is expected to land on.

    Leaving the yard lands on the color's entry square. Otherwise the
    player's step count advances by ``dice``, capped at the finish.
    """
    if position == board_config.YARD:
        return ring_position(color, 1)
    step = min(step_index(color, position) + dice, board_config.FINISH)
    return ring_position(color, step)
