from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .animation import AnimationSequencer
from .config import board_config
from .topology import token_cell
from .turn import TurnStateMachine
from .types import Cell, GameState, Phase, PlayerColor, TokenRef


@dataclass(frozen=True, slots=True)
class TokenMarker:
    color: PlayerColor
    index: int
    position: int
    movable: bool = False

    @property
    def ref(self) -> TokenRef:
        return TokenRef(self.color, self.index)


@dataclass(frozen=True, slots=True)
class BoardView:
    """Read-only snapshot handed to renderers."""

    cells: Mapping[Cell, Tuple[TokenMarker, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    moving: Optional[TokenMarker] = None
    moving_cell: Optional[Cell] = None
    phase: Optional[Phase] = None
    dice: Optional[int] = None
    message: str = ""
    error: Optional[str] = None
    current_color: Optional[PlayerColor] = None
    my_color: Optional[PlayerColor] = None
    connected: bool = False
    can_roll: bool = False
    enabled_tokens: Tuple[int, ...] = ()
    history: Tuple[str, ...] = ()
    room_code: Optional[str] = None
    player_count: int = 0

    @property
    def has_game(self) -> bool:
        return self.phase is not None

    @property
    def is_my_turn(self) -> bool:
        return self.my_color is not None and self.my_color is self.current_color

    def tokens_at(self, cell: Cell) -> Tuple[TokenMarker, ...]:
        return self.cells.get(cell, ())

    def find(self, token: TokenRef) -> Optional[Cell]:
        """Cell where ``token`` is drawn (the animation cell if it is moving)."""
        if self.moving is not None and self.moving.ref == token:
            return self.moving_cell
        for cell, markers in self.cells.items():
            if any(m.ref == token for m in markers):
                return cell
        return None

    def occupancy_grid(self) -> np.ndarray:
        """15x15 token counts, row/col 1 at index 0. Moving token included."""
        size = board_config.BOARD_SIZE
        grid = np.zeros((size, size), dtype=np.int8)
        for cell, markers in self.cells.items():
            grid[cell.row - 1, cell.col - 1] += len(markers)
        if self.moving_cell is not None:
            grid[self.moving_cell.row - 1, self.moving_cell.col - 1] += 1
        return grid


def build_view(
    state: Optional[GameState],
    turn: TurnStateMachine,
    sequencer: AnimationSequencer,
    busy: bool,
    dice: Optional[int] = None,
    error: Optional[str] = None,
    connected: bool = False,
    history: Sequence[str] = (),
    room_code: Optional[str] = None,
    player_count: int = 0,
) -> BoardView:
    if state is None:
        return BoardView(
            error=error,
            connected=connected,
            history=tuple(history),
            room_code=room_code,
            player_count=player_count,
        )

    me = turn.my_player(state)
    enabled = set(turn.enabled_tokens(state, busy))
    cells: Dict[Cell, List[TokenMarker]] = {}
    for player in state.players:
        mine = me is not None and player.color is me.color
        for index, position in enumerate(player.tokens):
            ref = player.token(index)
            if sequencer.is_suppressed(ref):
                continue
            marker = TokenMarker(
                color=player.color,
                index=index,
                position=position,
                movable=mine and index in enabled,
            )
            cells.setdefault(token_cell(player.color, index, position), []).append(marker)

    moving = moving_cell = None
    task = sequencer.task
    if task is not None and task.running:
        moving = TokenMarker(task.token.color, task.token.index, task.start_position)
        moving_cell = task.current_cell

    return BoardView(
        cells=MappingProxyType({cell: tuple(ms) for cell, ms in cells.items()}),
        moving=moving,
        moving_cell=moving_cell,
        phase=state.phase,
        dice=dice,
        message=state.message,
        error=error,
        current_color=state.current_player.color,
        my_color=me.color if me is not None else None,
        connected=connected,
        can_roll=turn.can_roll(state, busy),
        enabled_tokens=tuple(sorted(enabled)),
        history=tuple(history),
        room_code=room_code,
        player_count=player_count,
    )
