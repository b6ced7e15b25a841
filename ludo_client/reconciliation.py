from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from loguru import logger

from .types import PendingUpdate


class GateState(Enum):
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


class ReconciliationGate:
    """Holds back authoritative state while a local move animates.

    IDLE: every offered update is applied at once.
    AWAITING_CONFIRMATION: updates go to a single pending slot (last write
    wins) until the animation finishes; then exactly one update is applied
    and the gate returns to IDLE. If the animation ends before any update
    arrived, the gate keeps waiting and applies the first one that does.
    """

    def __init__(self, apply: Callable[[PendingUpdate], None]):
        self._apply = apply
        self.state = GateState.IDLE
        self.pending: Optional[PendingUpdate] = None
        self.animation_done = False

    @property
    def is_awaiting(self) -> bool:
        return self.state is GateState.AWAITING_CONFIRMATION

    def arm(self) -> None:
        """Enter AWAITING_CONFIRMATION for a move that just started animating."""
        if self.is_awaiting:
            raise RuntimeError("Gate is already awaiting confirmation")
        self.state = GateState.AWAITING_CONFIRMATION
        self.pending = None
        self.animation_done = False

    def offer(self, update: PendingUpdate) -> bool:
        """Hand an authoritative update to the gate.

        Returns:
            bool: True if it was applied now, False if it was buffered
        """
        if not self.is_awaiting:
            self._apply(update)
            return True
        if self.animation_done:
            self._release(update)
            return True
        if self.pending is not None:
            logger.debug("Superseding buffered server state with a newer one")
        self.pending = update
        return False

    def animation_finished(self) -> bool:
        """Called once the animation stops running.

        Returns:
            bool: True if a buffered update was applied
        """
        if not self.is_awaiting:
            return False
        self.animation_done = True
        if self.pending is None:
            logger.debug("Animation finished before server confirmation; waiting")
            return False
        self._release(self.pending)
        return True

    def _release(self, update: PendingUpdate) -> None:
        self.pending = None
        self.state = GateState.IDLE
        self.animation_done = False
        self._apply(update)

    def reset(self) -> None:
        """Back to IDLE, dropping anything buffered."""
        if self.pending is not None:
            logger.debug("Dropping buffered server state on gate reset")
        self.state = GateState.IDLE
        self.pending = None
        self.animation_done = False
