import logging

logger = logging.getLogger(__name__)

_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class LoggingNotifier:
    """NotifierPort for headless hosts: notifications become log records."""

    def notify(self, level: str, message: str) -> None:
        logger.log(_LEVELS.get(level, logging.INFO), "[%s] %s", level, message)
