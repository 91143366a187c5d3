"""GitHub Actions runner interface: inputs, saved state, outputs, failure."""

import json
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError, MissingStateError
from .logging import get_logger, issue_command

logger = get_logger(__name__)

TRUE_VALUES = {"true", "True", "TRUE"}
FALSE_VALUES = {"false", "False", "FALSE"}


@dataclass
class WorkflowState:
    """Values saved by the setup step for the main step."""

    release: str
    release_date: str
    type: str
    release_url: str | None = None

    # state name -> attribute
    REQUIRED = {"release": "release", "releaseDate": "release_date", "type": "type"}
    OPTIONAL = {"releaseUrl": "release_url"}


def get_input(name: str, required: bool = False) -> str:
    """Read an action input.

    Args:
        name: Input name as declared in action.yml
        required: Raise if the input is empty

    Returns:
        The trimmed input value, or an empty string
    """
    value = os.getenv(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def get_boolean_input(name: str, default: bool = False) -> bool:
    """Read a true/false action input."""
    value = get_input(name)
    if not value:
        return default
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(
        f'Input does not meet YAML 1.2 "Core Schema" specification: {name}. '
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def _append_file_command(env_name: str, name: str, value: str) -> bool:
    """Append a ``name<<delimiter`` entry to a runner file command.

    Returns:
        False if the runner did not provide the file
    """
    path = os.getenv(env_name)
    if not path:
        return False

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ValueError(f"Unexpected input: value should not contain the delimiter {delimiter}")

    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}{os.linesep}")
    return True


def save_state(name: str, value: Any) -> None:
    """Save a value for a later step of this action."""
    text = value if isinstance(value, str) else json.dumps(value)
    if not _append_file_command("GITHUB_STATE", name, text):
        issue_command(f"save-state name={name}", text)


def get_state(name: str) -> str:
    """Read a value saved by an earlier step of this action."""
    return os.getenv(f"STATE_{name}", "")


def set_output(name: str, value: Any) -> None:
    """Publish a step output."""
    text = value if isinstance(value, str) else json.dumps(value)
    if not _append_file_command("GITHUB_OUTPUT", name, text):
        issue_command(f"set-output name={name}", text)


def restore_states() -> WorkflowState:
    """Restore the values saved by the setup step.

    Raises:
        MissingStateError: If any required value is absent or empty
    """
    values = {}
    missing = []

    for name, attr in WorkflowState.REQUIRED.items():
        value = get_state(name)
        if not value:
            missing.append(name)
        values[attr] = value

    if missing:
        raise MissingStateError(missing)

    for name, attr in WorkflowState.OPTIONAL.items():
        values[attr] = get_state(name) or None

    for name, value in values.items():
        logger.debug(f"Restored {name}: {value}")

    return WorkflowState(**values)


def read_event() -> dict[str, Any]:
    """Load the webhook payload that triggered the workflow."""
    path = os.getenv("GITHUB_EVENT_PATH")
    if not path or not Path(path).exists():
        return {}
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def set_failed(message: str) -> None:
    """Mark the step as failed. The caller must exit non-zero."""
    logger.critical(message)
