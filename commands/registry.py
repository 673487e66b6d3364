"""
Command Registry
----------------
In-memory store of commands keyed by trigger phrase and by id.

Lookups are deterministic: trigger phrases and keywords are normalized
(trimmed, case-folded) and matched exactly. No I/O.
"""

from typing import Dict, List, Optional
import logging

from core.errors import DuplicateCommandError, InvalidCommandError, UnknownCommandError

from .models import Command
from .validators import validate_command


def normalize_trigger(text: str) -> str:
    """Normalize a trigger phrase for lookup."""
    return text.strip().casefold()


class CommandRegistry:
    """
    Registry for command definitions.

    Responsibilities:
    - Enforce unique trigger phrases and ids
    - Exact trigger/keyword lookup (the macro fast path)
    - Lookup by id for structured payloads

    Not thread-safe: add/remove are expected from a single control flow.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        # Insertion-ordered: normalized trigger -> command
        self._by_trigger: Dict[str, Command] = {}
        self._by_id: Dict[str, Command] = {}
        self._logger = logger or logging.getLogger("foisit.commands.registry")

    def add(self, command: Command) -> None:
        """
        Register a command.

        Raises:
            InvalidCommandError: If the definition is malformed
            DuplicateCommandError: If the trigger phrase or id is taken
        """
        problem = validate_command(command)
        if problem:
            raise InvalidCommandError(problem)

        key = normalize_trigger(command.command)
        if key in self._by_trigger:
            raise DuplicateCommandError(command.command)
        if command.id in self._by_id:
            raise DuplicateCommandError(command.id, kind="Command id")

        self._by_trigger[key] = command
        self._by_id[command.id] = command
        self._logger.info(f"Adding command: {command.command} (id={command.id})")

    def remove(self, trigger: str) -> Command:
        """
        Unregister a command by trigger phrase.

        Raises:
            UnknownCommandError: If no such command is registered
        """
        key = normalize_trigger(trigger)
        command = self._by_trigger.pop(key, None)
        if command is None:
            raise UnknownCommandError(trigger)

        del self._by_id[command.id]
        self._logger.info(f"Removing command: {command.command}")
        return command

    def get(self, command_id: str) -> Optional[Command]:
        """Get a command by id."""
        return self._by_id.get(command_id)

    def find_by_trigger(self, text: str) -> Optional[Command]:
        """
        Exact match of normalized text against triggers, then keywords.

        A keyword never shadows another command's trigger phrase.
        """
        key = normalize_trigger(text)
        if not key:
            return None

        command = self._by_trigger.get(key)
        if command is not None:
            return command

        for candidate in self._by_trigger.values():
            if any(normalize_trigger(k) == key for k in candidate.keywords):
                return candidate

        return None

    def list_triggers(self) -> List[str]:
        """Registered trigger phrases in insertion order."""
        return [command.command for command in self._by_trigger.values()]

    def list_commands(self) -> List[Command]:
        """List all registered commands."""
        return list(self._by_trigger.values())

    def __len__(self) -> int:
        return len(self._by_trigger)

    def __contains__(self, trigger: str) -> bool:
        return normalize_trigger(trigger) in self._by_trigger
