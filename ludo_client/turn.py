from __future__ import annotations

from typing import List, Optional

from .errors import InputRejected
from .legality import is_plausible_move
from .types import GameState, Phase, Player, TokenRef

NOT_YOUR_TURN = "It's not your turn."
NO_GAME = "No game in progress."


class TurnStateMachine:
    """Tracks whose turn it is and which actions the local seat may take.

    Phase changes (including extra turns after a 6 or a capture) are decided
    by the server; this class only observes them and gates input. ``busy``
    means a move is animating or waiting for confirmation, in which case
    nothing is enabled.
    """

    def __init__(self, seat_id: Optional[str] = None):
        self.seat_id = seat_id

    def my_player(self, state: Optional[GameState]) -> Optional[Player]:
        if state is None:
            return None
        return state.player_by_id(self.seat_id)

    def is_my_turn(self, state: Optional[GameState]) -> bool:
        if state is None or self.seat_id is None:
            return False
        if state.phase not in (Phase.AWAITING_ROLL, Phase.AWAITING_MOVE):
            return False
        return state.current_player.player_id == self.seat_id

    def can_roll(self, state: Optional[GameState], busy: bool = False) -> bool:
        return (
            not busy
            and self.is_my_turn(state)
            and state.phase is Phase.AWAITING_ROLL
        )

    def can_move(
        self, state: Optional[GameState], token: TokenRef, busy: bool = False
    ) -> bool:
        try:
            self.check_move(state, token, busy)
        except InputRejected:
            return False
        return True

    def enabled_tokens(self, state: Optional[GameState], busy: bool = False) -> List[int]:
        """Token indexes of the local seat that are clickable right now."""
        player = self.my_player(state)
        if player is None:
            return []
        return [
            i
            for i in range(len(player.tokens))
            if self.can_move(state, player.token(i), busy)
        ]

    def check_roll(self, state: Optional[GameState], busy: bool = False) -> None:
        if state is None:
            raise InputRejected(NO_GAME)
        if state.is_over:
            raise InputRejected("The game is over.")
        if busy:
            raise InputRejected("A move is still in progress.")
        if not self.is_my_turn(state) or state.phase is not Phase.AWAITING_ROLL:
            raise InputRejected("It's not your turn or not the right phase to roll.")

    def check_move(
        self, state: Optional[GameState], token: TokenRef, busy: bool = False
    ) -> Player:
        """Validate a token click. Returns the moving player."""
        if state is None:
            raise InputRejected(NO_GAME)
        if state.is_over:
            raise InputRejected("The game is over.")
        if busy:
            raise InputRejected("A move is already animating.")
        if not self.is_my_turn(state):
            raise InputRejected(NOT_YOUR_TURN)
        if state.phase is not Phase.AWAITING_MOVE:
            raise InputRejected("You need to roll first.")
        player = state.current_player
        if token.color is not player.color:
            raise InputRejected("That token is not yours.")
        if not 0 <= token.index < len(player.tokens):
            raise InputRejected(f"No token {token.index}.")
        if not is_plausible_move(player.tokens[token.index], state.dice_value):
            raise InputRejected(
                f"Token {token.index + 1} cannot move {state.dice_value} squares."
            )
        return player

    @staticmethod
    def turn_changed(previous: Optional[GameState], current: GameState) -> bool:
        """True when ``current`` starts a new roll phase."""
        if current.phase is not Phase.AWAITING_ROLL:
            return False
        return previous is None or previous.phase is not Phase.AWAITING_ROLL
