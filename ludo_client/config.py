import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass(slots=True)
class BoardConfig:
    # --- Constants ---
    BOARD_SIZE: int = 15  # 15x15 grid, rows/cols are 1-indexed
    PATH_LENGTH: int = 58  # 0=yard, 1-52=ring, 53-57=home column, 58=finish
    RING_SIZE: int = 52
    HOME_COLUMN_SIZE: int = 5
    PIECES_PER_PLAYER: int = 4
    MAX_PLAYERS: int = 4

    # Dice
    DICE_MIN: int = 1
    DICE_MAX: int = 6
    EXIT_YARD_ROLL: int = 6

    # Absolute ring positions
    PLAYER_START_SQUARES: list[int] = field(
        default_factory=lambda: [1, 14, 27, 40]
    )  # Red, Green, Yellow, Blue
    SAFE_SQUARES: list[int] = field(
        default_factory=lambda: [1, 9, 14, 22, 27, 35, 40, 48]
    )

    # Derived (populated in __post_init__ due to slots)
    YARD: int = 0
    FINISH: int = 0
    HOME_COLUMN_START: int = 0
    HOME_COLUMN_END: int = 0

    def __post_init__(self):
        self.FINISH = self.PATH_LENGTH
        # Home column is 53..57, right after the last ring square
        self.HOME_COLUMN_START = self.RING_SIZE + 1
        self.HOME_COLUMN_END = self.RING_SIZE + self.HOME_COLUMN_SIZE

        if self.HOME_COLUMN_END + 1 != self.FINISH:
            raise ValueError("PATH_LENGTH must equal RING_SIZE + HOME_COLUMN_SIZE + 1")
        if len(self.PLAYER_START_SQUARES) != self.MAX_PLAYERS:
            raise ValueError("PLAYER_START_SQUARES needs one entry per color")


@dataclass(slots=True)
class ClientConfig:
    server_url: str = os.getenv("LUDO_SERVER_URL", "http://localhost:5001")
    namespace: str = os.getenv("LUDO_NAMESPACE", "/")
    auth_token: str | None = os.getenv("LUDO_AUTH_TOKEN") or None
    # Socket.IO transports, comma separated (e.g. "polling" or "websocket,polling")
    transports: list[str] = field(
        default_factory=lambda: [
            t.strip()
            for t in os.getenv("LUDO_TRANSPORTS", "websocket,polling").split(",")
            if t.strip()
        ]
    )
    # Animation cadence, one board cell per tick
    animation_step_ms: int = int(os.getenv("ANIMATION_STEP_MS", 150))
    # 0 keeps the UI gated until the server answers
    move_confirm_timeout_s: float = float(os.getenv("MOVE_CONFIRM_TIMEOUT", 0))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    history_limit: int = int(os.getenv("HISTORY_LIMIT", 50))

    def __post_init__(self):
        if self.animation_step_ms <= 0:
            raise ValueError("ANIMATION_STEP_MS must be positive")
        if self.move_confirm_timeout_s < 0:
            raise ValueError("MOVE_CONFIRM_TIMEOUT must be >= 0")
        if self.history_limit < 1:
            raise ValueError("HISTORY_LIMIT must be at least 1")
        if not self.namespace.startswith("/"):
            self.namespace = "/" + self.namespace

    @property
    def animation_step_s(self) -> float:
        return self.animation_step_ms / 1000.0


board_config = BoardConfig()
config = ClientConfig()
