"""
Schema checks for Socket.IO payloads.

Inbound payloads are duck-typed JSON; everything is validated here so that
the engine only ever sees well-formed ``GameState`` objects. Any mismatch
raises ``MalformedPayload``.
"""

from typing import Any, Dict, Tuple

from .config import board_config
from .errors import MalformedPayload
from .types import GameState, Phase, Player, PlayerColor

_COLORS = {c.value: c for c in PlayerColor}
_PHASES = {p.value: p for p in Phase}


def _is_int(value: Any) -> bool:
    # bool is an int subclass; JSON true/false must not pass as a number
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_player(event: str, seat: int, raw: Any) -> Player:
    if not isinstance(raw, dict):
        raise MalformedPayload(event, f"player {seat} must be an object")

    player_id = raw.get("id")
    if not isinstance(player_id, str) or not player_id:
        raise MalformedPayload(event, f"player {seat} has no id")

    color = _COLORS.get(raw.get("color"))
    if color is None:
        raise MalformedPayload(event, f"player {seat} has invalid color {raw.get('color')!r}")

    tokens = raw.get("tokens")
    if not isinstance(tokens, list) or len(tokens) != board_config.PIECES_PER_PLAYER:
        raise MalformedPayload(event, f"player {seat} must have exactly 4 tokens")
    for i, pos in enumerate(tokens):
        if not _is_int(pos) or not board_config.YARD <= pos <= board_config.FINISH:
            raise MalformedPayload(event, f"player {seat} token {i} has invalid position {pos!r}")

    return Player(player_id=player_id, color=color, tokens=tuple(tokens), seat=seat)


def parse_game_state(payload: Any, event: str = "gameStateUpdate") -> GameState:
    """Validate a wire GameState and convert it."""
    if not isinstance(payload, dict):
        raise MalformedPayload(event, "state must be an object")

    raw_players = payload.get("players")
    if not isinstance(raw_players, list) or not raw_players:
        raise MalformedPayload(event, "players must be a non-empty list")
    if len(raw_players) > board_config.MAX_PLAYERS:
        raise MalformedPayload(event, f"too many players ({len(raw_players)})")
    players = tuple(_parse_player(event, i, p) for i, p in enumerate(raw_players))

    colors = [p.color for p in players]
    if len(set(colors)) != len(colors):
        raise MalformedPayload(event, "two players share a color")
    ids = [p.player_id for p in players]
    if len(set(ids)) != len(ids):
        raise MalformedPayload(event, "two players share an id")

    current = payload.get("currentPlayerIndex", 0)
    if not _is_int(current) or not 0 <= current < len(players):
        raise MalformedPayload(event, f"invalid currentPlayerIndex {current!r}")

    dice = payload.get("diceValue")
    if dice is not None and (
        not _is_int(dice) or not board_config.DICE_MIN <= dice <= board_config.DICE_MAX
    ):
        raise MalformedPayload(event, f"invalid diceValue {dice!r}")

    phase = _PHASES.get(payload.get("status"))
    if phase is None:
        raise MalformedPayload(event, f"unknown status {payload.get('status')!r}")

    message = payload.get("message", "")
    if message is None:
        message = ""
    if not isinstance(message, str):
        raise MalformedPayload(event, "message must be a string")

    return GameState(
        players=players,
        current_player_index=current,
        dice_value=dice,
        phase=phase,
        message=message,
    )


def parse_dice_rolled(payload: Any) -> Tuple[int, GameState]:
    event = "diceRolled"
    if not isinstance(payload, dict):
        raise MalformedPayload(event, "payload must be an object")
    roll = payload.get("roll")
    if not _is_int(roll) or not board_config.DICE_MIN <= roll <= board_config.DICE_MAX:
        raise MalformedPayload(event, f"invalid roll {roll!r}")
    state = parse_game_state(payload.get("state"), event)
    return roll, state


def parse_player_count(payload: Any) -> int:
    """playerJoined sends either a bare count or {"count": n}."""
    event = "playerJoined"
    count = payload.get("count") if isinstance(payload, dict) else payload
    if not _is_int(count) or count < 0:
        raise MalformedPayload(event, f"invalid count {count!r}")
    return count


def parse_error_message(payload: Any) -> str:
    event = "gameError"
    if isinstance(payload, dict):
        payload = payload.get("message")
    if not isinstance(payload, str) or not payload.strip():
        raise MalformedPayload(event, "error must be a non-empty string")
    return payload


# --- Outbound ---
def join_payload(room_code: str) -> str:
    return room_code


def roll_payload(room_code: str) -> str:
    return room_code


def move_payload(room_code: str, token_index: int) -> Dict[str, Any]:
    return {"roomCode": room_code, "tokenIndex": token_index}
