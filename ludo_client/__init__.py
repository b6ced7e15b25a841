"""
Ludo Online Client
Client-side state, animation and server reconciliation for networked Ludo.
"""

from ludo_client.animation import AnimationSequencer, build_path
from ludo_client.config import BoardConfig, ClientConfig, board_config, config
from ludo_client.connection import LudoConnection
from ludo_client.engine import GameEngine, OutboundRequest
from ludo_client.errors import (
    AnimationBusy,
    ConnectionLost,
    ErrorKind,
    InputRejected,
    LudoClientError,
    MalformedPayload,
    MoveRejected,
)
from ludo_client.legality import is_plausible_move, movable_tokens, target_position
from ludo_client.reconciliation import GateState, ReconciliationGate
from ludo_client.scheduler import AsyncioScheduler, ManualScheduler
from ludo_client.socket_adapter import SocketEventAdapter
from ludo_client.topology import map_position_to_cell, ring_position, step_index
from ludo_client.turn import TurnStateMachine
from ludo_client.types import (
    Cell,
    GameState,
    PendingUpdate,
    Phase,
    Player,
    PlayerColor,
    TokenRef,
)
from ludo_client.view import BoardView, TokenMarker

__all__ = [
    "GameEngine",
    "OutboundRequest",
    "SocketEventAdapter",
    "LudoConnection",
    "AnimationSequencer",
    "build_path",
    "ReconciliationGate",
    "GateState",
    "TurnStateMachine",
    "AsyncioScheduler",
    "ManualScheduler",
    "BoardView",
    "TokenMarker",
    "GameState",
    "Player",
    "PlayerColor",
    "Phase",
    "Cell",
    "TokenRef",
    "PendingUpdate",
    "map_position_to_cell",
    "step_index",
    "ring_position",
    "is_plausible_move",
    "movable_tokens",
    "target_position",
    "BoardConfig",
    "ClientConfig",
    "board_config",
    "config",
    "LudoClientError",
    "InputRejected",
    "AnimationBusy",
    "MoveRejected",
    "ConnectionLost",
    "MalformedPayload",
    "ErrorKind",
]
