"""Observability config."""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from s3cache.actions.core import is_debug


def get_default_level() -> int:
    """Get the default log level.

    Step debug logging on the runner switches the level to DEBUG.
    """
    return logging.DEBUG if is_debug() else logging.INFO


class LoggingConfig(BaseSettings):
    """Logging configuration.

    This config is used to configure the logging of the action.

    Attributes:
        level (int): The level of the root logger.
            Can be set via the S3CACHE_LOG_LEVEL environment variable.
            Defaults to DEBUG when RUNNER_DEBUG is "1", otherwise INFO.
        suppress_botocore_logs (bool): Whether to raise the botocore and aioboto3 loggers to WARNING.
            Defaults to True.

    """

    model_config = SettingsConfigDict(env_prefix="S3CACHE_LOG_")

    level: int = Field(default_factory=get_default_level, description="The level of the root logger.")
    suppress_botocore_logs: bool = Field(
        default=True, description="Whether to raise the botocore and aioboto3 loggers to WARNING."
    )
