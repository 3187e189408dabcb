"""Runner toolkit for actions.

Inputs, state and workflow commands exchanged with the runner through
environment variables, files and stdout.
"""

import json
import os
import sys
import uuid
from collections.abc import Mapping
from typing import Any

from s3cache.actions.exceptions import ActionsCommandError, InputRequiredError

CMD_STRING = "::"


def to_command_value(value: Any) -> str:
    """Serialize a value for a command or state record."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def escape_data(value: Any) -> str:
    """Escape a command message."""
    return to_command_value(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: Any) -> str:
    """Escape a command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, properties: Mapping[str, Any] | None = None, message: Any = "") -> str:
    """Format a workflow command line.

    Properties with an empty value are skipped.

    Args:
        command: The command name, e.g. ``debug`` or ``save-state``.
        properties: The command properties.
        message: The command message.

    Returns:
        The command line without a trailing newline.

    """
    command_string = CMD_STRING + (command or "missing.command")
    if properties:
        rendered = ",".join(f"{key}={escape_property(value)}" for key, value in properties.items() if value)
        if rendered:
            command_string += " " + rendered
    return f"{command_string}{CMD_STRING}{escape_data(message)}"


def issue_command(command: str, properties: Mapping[str, Any] | None = None, message: Any = "") -> None:
    """Write a workflow command to stdout."""
    sys.stdout.write(format_command(command, properties, message) + os.linesep)
    sys.stdout.flush()


def prepare_key_value_message(key: str, value: Any) -> str:
    """Build a heredoc record for an environment file.

    Raises:
        ActionsCommandError: If the key or the value contains the delimiter.

    """
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    converted = to_command_value(value)

    if delimiter in key:
        msg = f'Unexpected input: name should not contain the delimiter "{delimiter}"'
        raise ActionsCommandError(msg)
    if delimiter in converted:
        msg = f'Unexpected input: value should not contain the delimiter "{delimiter}"'
        raise ActionsCommandError(msg)

    return f"{key}<<{delimiter}{os.linesep}{converted}{os.linesep}{delimiter}"


def issue_file_command(command: str, message: str) -> None:
    """Append a message to the environment file for ``command``.

    Raises:
        ActionsCommandError: If the environment file is not set or missing.

    """
    file_path = os.environ.get(f"GITHUB_{command}")
    if not file_path:
        msg = f"Unable to find environment variable for file command {command}"
        raise ActionsCommandError(msg)
    if not os.path.exists(file_path):
        msg = f"Missing file at path: {file_path}"
        raise ActionsCommandError(msg)

    with open(file_path, "a", encoding="utf-8") as file:
        file.write(message + os.linesep)


def get_input(name: str, required: bool = False, trim_whitespace: bool = True) -> str:
    """Get the value of an action input.

    Args:
        name: The input name as declared by the action.
        required: Whether to raise if the input is empty.
        trim_whitespace: Whether to strip surrounding whitespace.

    Returns:
        The input value, or an empty string.

    Raises:
        InputRequiredError: If ``required`` is set and the input is empty.

    """
    value = os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "")
    if required and not value:
        msg = f"Input required and not supplied: {name}"
        raise InputRequiredError(msg)
    return value.strip() if trim_whitespace else value


def get_state(name: str) -> str:
    """Get a value saved by an earlier step of this action."""
    return os.environ.get(f"STATE_{name}", "")


def save_state(name: str, value: Any) -> None:
    """Save a value for later steps of this action."""
    if os.environ.get("GITHUB_STATE"):
        issue_file_command("STATE", prepare_key_value_message(name, value))
        return
    issue_command("save-state", {"name": name}, to_command_value(value))


def set_secret(secret: str) -> None:
    """Mask a value in the job log."""
    issue_command("add-mask", {}, secret)


def is_debug() -> bool:
    """Whether the runner has step debug logging enabled."""
    return os.environ.get("RUNNER_DEBUG") == "1"
