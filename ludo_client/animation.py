from __future__ import annotations

from typing import Callable, List, Optional

from loguru import logger

from .config import board_config, config
from .errors import AnimationBusy
from .legality import target_position
from .scheduler import Scheduler, TimerHandle
from .topology import (
    map_position_to_cell,
    ring_position,
    step_index,
    token_cell,
    yard_exit_cells,
)
from .types import AnimationTask, Cell, PlayerColor, TokenRef


def build_path(
    color: PlayerColor, start_position: int, dice: int, token_index: int = 0
) -> List[Cell]:
    """Cells a token visits when moving ``dice`` squares, one per tick.

    The absolute start is converted to the player's own step count, each
    intermediate step is converted back to an absolute position and mapped
    to its cell. Steps stop at the finish. A yard exit with a 6 is a full
    six-step walk from the yard slot that ends on the entry square.
    """
    if dice < board_config.DICE_MIN:
        return []
    if start_position == board_config.YARD:
        if dice != board_config.EXIT_YARD_ROLL:
            return []
        return yard_exit_cells(color, token_index, board_config.EXIT_YARD_ROLL)

    start_step = step_index(color, start_position)
    end_step = min(start_step + dice, board_config.FINISH)
    return [
        map_position_to_cell(color, ring_position(color, step))
        for step in range(start_step + 1, end_step + 1)
    ]


class AnimationSequencer:
    """Walks one token through its path at a fixed cadence.

    Owns the single in-flight ``AnimationTask`` slot. A task always runs to
    completion once started; ``on_complete`` fires right after the tick that
    clears ``running``.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        step_seconds: float = config.animation_step_s,
        on_step: Optional[Callable[[AnimationTask], None]] = None,
        on_complete: Optional[Callable[[AnimationTask], None]] = None,
    ):
        self.scheduler = scheduler
        self.step_seconds = step_seconds
        self.on_step = on_step
        self.on_complete = on_complete
        self._task: Optional[AnimationTask] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def task(self) -> Optional[AnimationTask]:
        return self._task

    @property
    def is_running(self) -> bool:
        return self._task is not None and self._task.running

    def is_suppressed(self, token: TokenRef) -> bool:
        """True while ``token`` is drawn by the animation, not statically."""
        return self.is_running and self._task.token == token

    def begin_animation(
        self, color: PlayerColor, token_index: int, start_position: int, dice: int
    ) -> AnimationTask:
        if self.is_running:
            raise AnimationBusy("A move is already animating.")
        cells = build_path(color, start_position, dice, token_index)
        if not cells:
            raise ValueError(
                f"No path for {color.value} token {token_index} from {start_position} with {dice}"
            )
        task = AnimationTask(
            token=TokenRef(color, token_index),
            cells=tuple(cells),
            start_position=start_position,
            target_position=target_position(color, start_position, dice),
            origin_cell=token_cell(color, token_index, start_position),
        )
        self._task = task
        logger.debug(
            f"Animating {task.token}: {start_position} -> {task.target_position} in {task.length} steps"
        )
        self._schedule()
        return task

    def _schedule(self) -> None:
        self._timer = self.scheduler.call_later(self.step_seconds, self._tick)

    def _tick(self) -> None:
        task = self._task
        if task is None or not task.running:
            return
        task.advance()
        if self.on_step is not None:
            self.on_step(task)
        if task.running:
            self._schedule()
            return
        self._timer = None
        logger.debug(f"Animation of {task.token} finished after {task.step} ticks")
        if self.on_complete is not None:
            self.on_complete(task)

    def reset(self) -> None:
        """Drop the slot without completing it. Only for session teardown."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._task = None
