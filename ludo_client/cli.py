"""Terminal client: join a room and play from stdin."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence, Tuple

from loguru import logger

from .board_viz import draw_board
from .config import config
from .connection import LudoConnection
from .engine import GameEngine
from .errors import InputRejected
from .logging_setup import configure_logging
from .scheduler import AsyncioScheduler
from .socket_adapter import SocketEventAdapter
from .view import BoardView

HELP = "commands: join CODE | roll | move N (1-4) | status | quit"


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Play online Ludo from the terminal.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--url", type=str, default=config.server_url, help="Game server URL")
    parser.add_argument(
        "--namespace", type=str, default=config.namespace, help="Socket.IO namespace"
    )
    parser.add_argument("--room", type=str, default=None, help="Room code to join on start")
    parser.add_argument(
        "--render",
        type=str,
        default=None,
        help="PNG path re-rendered whenever the board changes",
    )
    parser.add_argument("--log-level", type=str, default=config.log_level)
    return parser.parse_args(argv)


def parse_command(line: str) -> Tuple[str, Optional[str]]:
    """Split an input line into (verb, argument). Raises InputRejected."""
    parts = line.strip().split()
    if not parts:
        raise InputRejected(HELP)
    verb = parts[0].lower()
    arg = parts[1] if len(parts) > 1 else None
    if verb in ("roll", "status", "quit", "help") and arg is None:
        return verb, None
    if verb in ("join", "move") and arg is not None and len(parts) == 2:
        return verb, arg
    raise InputRejected(HELP)


def parse_token_number(arg: str) -> int:
    """User-facing token numbers are 1-4; returns the 0-based index."""
    try:
        number = int(arg)
    except ValueError:
        raise InputRejected(f"Not a token number: {arg!r}") from None
    if not 1 <= number <= 4:
        raise InputRejected("Token number must be between 1 and 4.")
    return number - 1


def describe(view: BoardView) -> str:
    if not view.has_game:
        lines = [f"room={view.room_code or '-'} players={view.player_count}"]
    else:
        lines = [
            f"turn={view.current_color.display_name} phase={view.phase.value} "
            f"dice={view.dice if view.dice is not None else '-'}"
            + (" (your turn)" if view.is_my_turn else "")
        ]
        if view.can_roll:
            lines.append("You can roll.")
        if view.enabled_tokens:
            movable = ", ".join(str(i + 1) for i in view.enabled_tokens)
            lines.append(f"Movable tokens: {movable}")
        if view.message:
            lines.append(view.message)
    if view.error:
        lines.append(f"! {view.error}")
    return "\n".join(lines)


class _Renderer:
    def __init__(self, path: Optional[str]):
        self.path = path

    def __call__(self, engine: GameEngine) -> None:
        if self.path is None:
            return
        draw_board(engine.snapshot()).save(self.path)


async def run(args: argparse.Namespace) -> None:
    loop = asyncio.get_running_loop()
    engine = GameEngine(AsyncioScheduler(loop), on_change=_Renderer(args.render))
    connection = LudoConnection(url=args.url, namespace=args.namespace)
    adapter = SocketEventAdapter(connection, engine)

    if args.room:
        await adapter.join_game(args.room)
    print(HELP)

    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            try:
                verb, arg = parse_command(line)
                if verb == "quit":
                    break
                if verb == "help":
                    print(HELP)
                elif verb == "status":
                    print(describe(engine.snapshot()))
                elif verb == "join":
                    await adapter.join_game(arg)
                elif verb == "roll":
                    await adapter.roll_dice()
                elif verb == "move":
                    await adapter.move_token(parse_token_number(arg))
            except InputRejected as exc:
                print(exc)
                continue
            if verb in ("join", "roll", "move"):
                print(describe(engine.snapshot()))
    finally:
        await adapter.close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
