from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Callable, Deque, Optional

from loguru import logger

from .animation import AnimationSequencer
from .config import ClientConfig, config
from .errors import InputRejected, LudoClientError, MoveRejected
from .payloads import join_payload, move_payload, roll_payload
from .reconciliation import ReconciliationGate
from .scheduler import Scheduler, TimerHandle
from .turn import TurnStateMachine
from .types import AnimationTask, GameState, PendingUpdate, Phase, PlayerColor, TokenRef
from .view import BoardView, build_view


@dataclass(frozen=True, slots=True)
class OutboundRequest:
    """A request the socket adapter should emit."""

    event: str
    payload: Any


class GameEngine:
    """Client-side game state, animation and reconciliation core.

    Owns the displayed ``GameState``, the animation slot and the pending
    update slot. Inbound ``handle_*`` methods are fed by the socket adapter;
    ``request_*`` methods validate user input and return the request to send,
    or None when the input was rejected locally. Everything runs on one
    event loop, so no locking is needed.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        seat_id: Optional[str] = None,
        client_config: ClientConfig = config,
        on_change: Optional[Callable[["GameEngine"], None]] = None,
    ):
        self.config = client_config
        self.scheduler = scheduler
        self.on_change = on_change
        self.turn = TurnStateMachine(seat_id)
        self.gate = ReconciliationGate(self._apply_update)
        self.sequencer = AnimationSequencer(
            scheduler,
            client_config.animation_step_s,
            on_step=self._on_animation_step,
            on_complete=self._on_animation_complete,
        )

        self.state: Optional[GameState] = None
        self.room_code: Optional[str] = None
        self.dice_display: Optional[int] = None
        self.error: Optional[str] = None
        self.connected = False
        self.player_count = 0
        self.history: Deque[str] = deque(maxlen=client_config.history_limit)

        # In-flight move bookkeeping
        self._pre_move_state: Optional[GameState] = None
        self._rejection: Optional[MoveRejected] = None
        self._move_seq = 0
        self._watchdog: Optional[TimerHandle] = None

    # --- Derived ---
    @property
    def seat_id(self) -> Optional[str]:
        return self.turn.seat_id

    @property
    def busy(self) -> bool:
        """A move is animating or waiting for the server."""
        return self.sequencer.is_running or self.gate.is_awaiting

    @property
    def has_game(self) -> bool:
        return self.state is not None

    def snapshot(self) -> BoardView:
        return build_view(
            self.state,
            self.turn,
            self.sequencer,
            self.busy,
            dice=self.dice_display,
            error=self.error,
            connected=self.connected,
            history=self.history,
            room_code=self.room_code,
            player_count=self.player_count,
        )

    # --- Inbound events ---
    def handle_connect(self, seat_id: Optional[str]) -> None:
        self.connected = True
        self.turn.seat_id = seat_id
        self.error = None
        logger.info(f"Connected as {seat_id}")
        self._notify()

    def handle_disconnect(self) -> None:
        self.connected = False
        self._clear_game()
        logger.warning("Disconnected; cleared game state")
        self._notify()

    def handle_connect_error(self, reason: Any = None) -> None:
        self.connected = False
        self.error = f"Connection failed: {reason}" if reason else "Connection failed."
        logger.error(self.error)
        self._notify()

    def handle_game_started(self, state: GameState) -> None:
        self._reset_move()
        self.state = state
        self.dice_display = None
        self.error = None
        self._record(f"Game started with {len(state.players)} players")
        self._notify()

    def handle_state_update(self, state: GameState) -> None:
        if not self.gate.offer(PendingUpdate(state)):
            logger.debug("State update buffered until the animation finishes")
            self._notify()

    def handle_dice_rolled(self, roll: int, state: GameState) -> None:
        if not self.gate.offer(PendingUpdate(state, dice=roll)):
            logger.debug("Dice result buffered until the animation finishes")
            self._notify()

    def handle_game_over(self, state: GameState) -> None:
        if not self.gate.offer(PendingUpdate(state)):
            self._notify()

    def handle_player_joined(self, count: int) -> None:
        self.player_count = count
        if self.state is None:
            self.error = f"Waiting for 2+ players. Current: {count}"
        self._notify()

    def handle_game_error(self, message: str) -> None:
        self.error = message
        self._record(f"Error: {message}")
        logger.warning(f"Game error from server: {message}")
        # Server refused the move we are animating and sent no new state
        if self.gate.is_awaiting and self.gate.pending is None and self._pre_move_state is not None:
            self._rejection = MoveRejected(message)
            if not self.sequencer.is_running:
                self._revert()
        self._notify()

    def handle_malformed(self, exc: LudoClientError) -> None:
        """Drop the current game screen; the process keeps running."""
        logger.error(str(exc))
        self._clear_game()
        self.error = str(exc)
        self._notify()

    # --- Outbound requests ---
    def request_join(self, room_code: str) -> Optional[OutboundRequest]:
        code = (room_code or "").strip().upper()
        if not code:
            return self._reject(InputRejected("Please enter a room code."))
        self.room_code = code
        self.error = None
        self._notify()
        return OutboundRequest("joinGame", join_payload(code))

    def request_roll(self) -> Optional[OutboundRequest]:
        try:
            self.turn.check_roll(self.state, self.busy)
            self._check_room()
        except InputRejected as exc:
            return self._reject(exc)
        self.error = None
        self._notify()
        return OutboundRequest("rollDice", roll_payload(self.room_code))

    def request_move(
        self, token_index: int, color: Optional[PlayerColor] = None
    ) -> Optional[OutboundRequest]:
        """Start the optimistic animation for a token click.

        ``color`` defaults to the local seat's color.
        """
        state = self.state
        if color is None:
            me = self.turn.my_player(state)
            if me is not None:
                color = me.color
            elif state is not None:
                color = state.current_player.color
        try:
            if color is None:
                raise InputRejected("No game in progress.")
            token = TokenRef(color, token_index)
            player = self.turn.check_move(state, token, self.busy)
            self._check_room()
        except InputRejected as exc:
            return self._reject(exc)

        start = player.tokens[token_index]
        task = self.sequencer.begin_animation(color, token_index, start, state.dice_value)
        self._pre_move_state = state
        self._rejection = None
        self._move_seq += 1
        self.state = replace(
            state.with_token_position(token, task.target_position),
            phase=Phase.AWAITING_ROLL,
        )
        self.gate.arm()
        self.error = None
        self._record(f"Moving token {token_index + 1}: {start} -> {task.target_position}")
        self._notify()
        return OutboundRequest("moveToken", move_payload(self.room_code, token_index))

    def abort_move(self) -> None:
        """Undo an optimistic move whose request never reached the server."""
        pre = self._pre_move_state
        if pre is None:
            return
        self._reset_move()
        self.state = pre
        self._record("Move cancelled")
        logger.warning("Move request was not sent; restored the board")
        self._notify()

    # --- Internals ---
    def _apply_update(self, update: PendingUpdate) -> None:
        previous = self._pre_move_state or self.state
        state = update.state
        self.state = state
        if update.dice is not None:
            self.dice_display = update.dice
            self.error = None
            self._record(f"{state.current_player.color.display_name} rolled {update.dice}")
        elif self.turn.turn_changed(previous, state):
            self.dice_display = None
        if state.is_over:
            self.error = None
        if state.message:
            self._record(state.message)
        self._pre_move_state = None
        self._rejection = None
        self._cancel_watchdog()
        logger.debug(f"Applied server state: phase={state.phase.value} turn={state.current_player_index}")
        self._notify()

    def _on_animation_step(self, task: AnimationTask) -> None:
        self._notify()

    def _on_animation_complete(self, task: AnimationTask) -> None:
        if self.gate.animation_finished():
            return
        if self._rejection is not None:
            self._revert()
        elif self.gate.is_awaiting:
            self._start_watchdog()
        self._notify()

    def _revert(self) -> None:
        """Put the token back where it was before the optimistic move."""
        pre = self._pre_move_state
        reason = self._rejection
        self.gate.reset()
        self._cancel_watchdog()
        self._pre_move_state = None
        self._rejection = None
        if pre is not None:
            self.state = pre
            self._record("Move reverted")
            logger.info(f"Reverted optimistic move: {reason or 'not confirmed'}")

    def _start_watchdog(self) -> None:
        timeout = self.config.move_confirm_timeout_s
        if timeout <= 0:
            return
        seq = self._move_seq
        self._watchdog = self.scheduler.call_later(
            timeout, lambda: self._on_confirm_timeout(seq)
        )

    def _on_confirm_timeout(self, seq: int) -> None:
        self._watchdog = None
        if seq != self._move_seq or not self.gate.is_awaiting:
            return
        self.error = "The server did not confirm the move."
        logger.warning(self.error)
        self._revert()
        self._notify()

    def _cancel_watchdog(self) -> None:
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None

    def _reset_move(self) -> None:
        self.sequencer.reset()
        self.gate.reset()
        self._cancel_watchdog()
        self._pre_move_state = None
        self._rejection = None

    def _clear_game(self) -> None:
        self._reset_move()
        self.state = None
        self.dice_display = None

    def _check_room(self) -> None:
        if self.room_code is None:
            raise InputRejected("Join a room first.")

    def _reject(self, exc: InputRejected) -> None:
        self.error = str(exc)
        logger.info(f"Input rejected: {exc}")
        self._notify()
        return None

    def _record(self, line: str) -> None:
        self.history.append(line)
        logger.info(line)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
