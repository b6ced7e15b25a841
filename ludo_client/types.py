from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import NamedTuple, Optional

from .config import board_config


class PlayerColor(Enum):
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def start_square(self) -> int:
        """Absolute ring position where this color enters the ring."""
        return board_config.PLAYER_START_SQUARES[ALL_COLORS.index(self)]


ALL_COLORS: list[PlayerColor] = [
    PlayerColor.RED,
    PlayerColor.GREEN,
    PlayerColor.YELLOW,
    PlayerColor.BLUE,
]


class Phase(Enum):
    """Turn phase as reported by the server (wire values)."""

    WAITING = "waiting"  # lobby, game not started yet
    AWAITING_ROLL = "waiting_for_roll"
    AWAITING_MOVE = "waiting_for_move"
    GAME_OVER = "game_over"

    @property
    def is_terminal(self) -> bool:
        return self is Phase.GAME_OVER


class Cell(NamedTuple):
    """Board coordinate, 1-indexed on the 15x15 grid."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class TokenRef:
    color: PlayerColor
    index: int  # 0..3 per player

    def __str__(self) -> str:
        return f"{self.color.value}#{self.index}"


@dataclass(frozen=True, slots=True)
class Player:
    player_id: str  # session id of the seat
    color: PlayerColor
    tokens: tuple[int, ...]  # 0 = yard; 1..52 ring; 53..57 home col; 58 finished
    seat: int = 0

    def token(self, index: int) -> TokenRef:
        return TokenRef(self.color, index)

    def with_token(self, index: int, position: int) -> Player:
        tokens = list(self.tokens)
        tokens[index] = position
        return replace(self, tokens=tuple(tokens))


@dataclass(frozen=True, slots=True)
class GameState:
    """Server-authoritative snapshot. Never mutated in place."""

    players: tuple[Player, ...]
    current_player_index: int
    dice_value: Optional[int]
    phase: Phase
    message: str = ""

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def is_over(self) -> bool:
        return self.phase.is_terminal

    def player_by_id(self, player_id: Optional[str]) -> Optional[Player]:
        if player_id is None:
            return None
        return next((p for p in self.players if p.player_id == player_id), None)

    def player_by_color(self, color: PlayerColor) -> Optional[Player]:
        return next((p for p in self.players if p.color is color), None)

    def token_position(self, token: TokenRef) -> int:
        player = self.player_by_color(token.color)
        if player is None:
            raise KeyError(f"No player with color {token.color.value}")
        return player.tokens[token.index]

    def with_token_position(self, token: TokenRef, position: int) -> GameState:
        players = tuple(
            p.with_token(token.index, position) if p.color is token.color else p
            for p in self.players
        )
        return replace(self, players=players)


@dataclass(frozen=True, slots=True)
class PendingUpdate:
    """Authoritative state held back while a move animates."""

    state: GameState
    dice: Optional[int] = None  # set when the update came from a diceRolled push


@dataclass(slots=True)
class AnimationTask:
    token: TokenRef
    cells: tuple[Cell, ...]  # cells to visit, one per tick
    start_position: int
    target_position: int
    origin_cell: Optional[Cell] = None  # where the token sat before the first tick
    step: int = 0  # ticks elapsed
    running: bool = field(default=True)

    @property
    def length(self) -> int:
        return len(self.cells)

    @property
    def current_cell(self) -> Optional[Cell]:
        if self.step == 0:
            return self.origin_cell
        return self.cells[self.step - 1]

    def advance(self) -> Cell:
        self.step += 1
        if self.step >= len(self.cells):
            self.running = False
        return self.cells[self.step - 1]
