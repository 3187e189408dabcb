"""Logging handlers that render records as workflow commands."""

import logging
import sys
from typing import TextIO

from s3cache.actions.core import format_command


class ActionsLogHandler(logging.StreamHandler):
    """Logging handler for the actions runner.

    DEBUG records become ``::debug::`` commands, INFO records are plain lines,
    WARNING records become ``::warning::`` commands and anything above becomes
    an ``::error::`` command. The runner only shows debug commands when step
    debug logging is enabled.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(stream or sys.stdout)

    @staticmethod
    def command_for(levelno: int) -> str | None:
        """Get the workflow command for a record level, or None for a plain line."""
        if levelno >= logging.ERROR:
            return "error"
        if levelno >= logging.WARNING:
            return "warning"
        if levelno >= logging.INFO:
            return None
        return "debug"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.command_for(record.levelno)
        if command is None:
            return message
        return format_command(command, {}, message)
