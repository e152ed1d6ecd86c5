import logging

logger = logging.getLogger(__name__)


class LogNotifier:
    """Default user-facing notifier: success/error messages go to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)
