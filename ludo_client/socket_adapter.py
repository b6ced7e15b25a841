from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from .connection import LudoConnection
from .engine import GameEngine, OutboundRequest
from .errors import ConnectionLost, MalformedPayload
from .payloads import (
    parse_dice_rolled,
    parse_error_message,
    parse_game_state,
    parse_player_count,
)

INBOUND_EVENTS = (
    "connect",
    "disconnect",
    "connect_error",
    "gameStarted",
    "gameStateUpdate",
    "diceRolled",
    "playerJoined",
    "gameError",
    "gameOver",
)


class SocketEventAdapter:
    """Translates Socket.IO events into engine calls and back.

    Every inbound payload is validated before it reaches the engine; a bad
    payload becomes ``MalformedPayload`` and only clears the game screen.
    """

    def __init__(self, connection: LudoConnection, engine: GameEngine):
        self.connection = connection
        self.engine = engine
        self._register()

    def _register(self) -> None:
        handlers = {
            "connect": self.on_connect,
            "disconnect": self.on_disconnect,
            "connect_error": self.on_connect_error,
            "gameStarted": self.on_game_started,
            "gameStateUpdate": self.on_game_state_update,
            "diceRolled": self.on_dice_rolled,
            "playerJoined": self.on_player_joined,
            "gameError": self.on_game_error,
            "gameOver": self.on_game_over,
        }
        for event in INBOUND_EVENTS:
            self.connection.on(event, handlers[event])

    # --- Inbound ---
    async def on_connect(self) -> None:
        self.engine.handle_connect(self.connection.sid)

    async def on_disconnect(self, *args: Any) -> None:
        self.engine.handle_disconnect()

    async def on_connect_error(self, data: Any = None) -> None:
        reason = data.get("message") if isinstance(data, dict) else data
        self.engine.handle_connect_error(reason)

    async def on_game_started(self, payload: Any = None) -> None:
        try:
            state = parse_game_state(payload, "gameStarted")
        except MalformedPayload as exc:
            self.engine.handle_malformed(exc)
            return
        self.engine.handle_game_started(state)

    async def on_game_state_update(self, payload: Any = None) -> None:
        try:
            state = parse_game_state(payload, "gameStateUpdate")
        except MalformedPayload as exc:
            self.engine.handle_malformed(exc)
            return
        self.engine.handle_state_update(state)

    async def on_dice_rolled(self, payload: Any = None) -> None:
        try:
            roll, state = parse_dice_rolled(payload)
        except MalformedPayload as exc:
            self.engine.handle_malformed(exc)
            return
        self.engine.handle_dice_rolled(roll, state)

    async def on_player_joined(self, payload: Any = None) -> None:
        try:
            count = parse_player_count(payload)
        except MalformedPayload as exc:
            # Lobby-only information; a bad count never touches the game
            logger.warning(str(exc))
            return
        self.engine.handle_player_joined(count)

    async def on_game_error(self, payload: Any = None) -> None:
        try:
            message = parse_error_message(payload)
        except MalformedPayload as exc:
            self.engine.handle_malformed(exc)
            return
        self.engine.handle_game_error(message)

    async def on_game_over(self, payload: Any = None) -> None:
        try:
            state = parse_game_state(payload, "gameOver")
        except MalformedPayload as exc:
            self.engine.handle_malformed(exc)
            return
        self.engine.handle_game_over(state)

    # --- Outbound ---
    async def join_game(self, room_code: str) -> bool:
        request = self.engine.request_join(room_code)
        if request is None:
            return False
        if not self.connection.connected:
            try:
                await self.connection.connect()
            except ConnectionLost as exc:
                self.engine.handle_connect_error(str(exc))
                return False
        return await self._send(request)

    async def roll_dice(self) -> bool:
        return await self._send(self.engine.request_roll())

    async def move_token(self, token_index: int) -> bool:
        return await self._send(self.engine.request_move(token_index))

    async def close(self) -> None:
        await self.connection.disconnect()

    async def _send(self, request: Optional[OutboundRequest]) -> bool:
        if request is None:
            return False
        try:
            await self.connection.emit(request.event, request.payload)
        except ConnectionLost as exc:
            if request.event == "moveToken":
                self.engine.abort_move()
            self.engine.handle_connect_error(str(exc))
            return False
        return True
