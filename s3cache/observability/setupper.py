"""Logging setup for the action."""

import logging
from typing import Self

from s3cache.configs.observability import LoggingConfig
from s3cache.observability.handlers import ActionsLogHandler

logger = logging.getLogger(__name__)

NOISY_LOGGERS = ("botocore", "aiobotocore", "aioboto3", "boto3", "s3transfer", "urllib3")


class LoggingSetupper:
    """Logging setupper."""

    def __init__(self, config: LoggingConfig | None = None) -> None:
        """Initialize the logging setupper.

        Args:
            config: The logging config.
            If None, the default logging config will be used.
            See `s3cache.configs.observability.LoggingConfig` for more details.

        """
        self._config = config or LoggingConfig()
        self._handler: ActionsLogHandler | None = None

    def setup_logging(self, level: int | None = None, formatter: logging.Formatter | None = None) -> Self:
        """Setup logging.

        This method will replace the handlers of the root logger with an
        `ActionsLogHandler` and set the level of the root logger.

        Args:
            level: The level to set for the root logger.
                If None, the level from the config is used.
            formatter: The formatter to use for the handler.
                If None, only the message is rendered.

        """
        root_logger = logging.getLogger()
        root_logger.setLevel(self._config.level if level is None else level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        handler = ActionsLogHandler()
        handler.setFormatter(formatter or logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
        self._handler = handler

        if self._config.suppress_botocore_logs:
            for logger_name in NOISY_LOGGERS:
                logging.getLogger(logger_name).setLevel(logging.WARNING)

        logger.debug("Logging has been setup")

        return self

    def get_handler(self) -> ActionsLogHandler | None:
        """Get the installed handler.

        Returns:
            ActionsLogHandler | None: The handler installed on the root logger.
            If None, logging has not been setup.

        """
        return self._handler
