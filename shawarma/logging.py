import sys
from typing import Optional

from loguru import logger
from shawarma.config import get_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class AppLogger:
    """Process-wide loguru setup for the dashboard.

    Streamlit re-imports page modules on every rerun, so the stdout sink is only
    replaced when the configured level changes.
    """
    _level: Optional[str] = None

    def __init__(self) -> None:
        level = get_config().log_level.upper()
        if AppLogger._level != level:
            logger.remove()
            logger.configure(extra={"name": "shawarma"})
            logger.add(sink=sys.stdout, level=level, format=LOG_FORMAT)
            AppLogger._level = level
        self.logger = logger

    def get_logger(self, name: Optional[str] = None):
        """Logger bound to ``name`` (usually the module's ``__name__``)."""
        if name:
            return self.logger.bind(name=name)
        return self.logger


def get_logger(name: Optional[str] = None):
    """Get an application logger using the current config."""
    return AppLogger().get_logger(name)
