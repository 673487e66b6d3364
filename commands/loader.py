"""
Command Loader
--------------
Load command declarations from YAML.

Each entry names its action as an import path ("package.module:function").

    commands:
      - id: book_appointment
        command: book appointment
        action: myapp.actions:book_appointment
        parameters:
          - {name: service, type: string, required: true}
          - {name: date, type: date, required: true}
"""

from pathlib import Path
from typing import Any, Callable, Dict, List
import importlib

import yaml

from core.errors import InvalidCommandError

from .models import Command, parameter_from_dict


def resolve_action(path: str) -> Callable:
    """Import "module:function" and return the callable."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise InvalidCommandError(f"Action must look like 'module:function', got {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidCommandError(f"Cannot import action module {module_name!r}: {e}") from e

    target: Any = module
    for part in attr.split("."):
        target = getattr(target, part, None)
        if target is None:
            raise InvalidCommandError(f"Action {path!r} not found")

    if not callable(target):
        raise InvalidCommandError(f"Action {path!r} is not callable")
    return target


def command_from_dict(data: Dict[str, Any]) -> Command:
    """Build a Command from one YAML entry."""
    if "command" not in data or "action" not in data:
        raise InvalidCommandError(f"Command entry needs 'command' and 'action': {data}")

    action = data["action"]
    if isinstance(action, str):
        action = resolve_action(action)

    try:
        parameters = [parameter_from_dict(p) for p in data.get("parameters", [])]
    except (KeyError, ValueError) as e:
        raise InvalidCommandError(f"Invalid parameter in {data['command']!r}: {e}") from e

    return Command(
        command=data["command"],
        action=action,
        id=data.get("id"),
        description=data.get("description", ""),
        keywords=list(data.get("keywords", [])),
        critical=bool(data.get("critical", False)),
        allow_ai_param_extraction=bool(
            data.get("allowAiParamExtraction", data.get("allow_ai_param_extraction", True))
        ),
        parameters=parameters,
    )


def load_commands(path: str) -> List[Command]:
    """Load command definitions from a YAML file."""
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Command file not found: {path}")

    with open(file_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return [command_from_dict(entry) for entry in data.get('commands', [])]
