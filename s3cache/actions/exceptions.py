"""Actions toolkit exceptions."""


class ActionsException(Exception):
    """Base exception for actions toolkit errors."""


class InputRequiredError(ActionsException):
    """Raised when a required action input is not supplied."""


class ActionsCommandError(ActionsException):
    """Raised when a workflow command or state record cannot be written."""
