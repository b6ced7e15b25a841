import sys
from typing import Any, Optional

from loguru import logger

from .config import config

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: Optional[str] = None, sink: Any = None) -> int:
    """Replace loguru's default handler; returns the new handler id."""
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=(level or config.log_level).upper(),
        format=LOG_FORMAT,
    )
