"""
Response Builder
----------------
Maps every terminal outcome of a resolution cycle to one InteractiveResponse.
"""

from typing import Any, Dict, List, Optional
import logging

from commands.models import (
    Command,
    InteractiveOption,
    InteractiveResponse,
    Parameter,
    ResponseType,
)

DEFAULT_FALLBACK = "Sorry, I didn't understand that."


class ResponseBuilder:
    """Builds the wire responses returned to callers."""

    def __init__(self, fallback_message: str = DEFAULT_FALLBACK, logger: Optional[logging.Logger] = None):
        self.fallback_message = fallback_message
        self._logger = logger or logging.getLogger("foisit.core.responses")

    def no_match(self) -> InteractiveResponse:
        return InteractiveResponse(message=self.fallback_message, type=ResponseType.ERROR)

    def not_found(self, command_id: Optional[str]) -> InteractiveResponse:
        return InteractiveResponse(
            message=f'Command not found: "{command_id or ""}"',
            type=ResponseType.ERROR,
        )

    def form(
        self,
        command: Command,
        fields: List[Parameter],
        message: Optional[str] = None,
        values: Optional[Dict[str, Any]] = None,
    ) -> InteractiveResponse:
        """Ask for the outstanding parameters only."""
        if not message:
            if len(fields) == 1:
                field_label = fields[0].description or fields[0].name
                message = f"Please provide {field_label}."
            else:
                message = f'Please provide the required details for "{command.command}".'

        return InteractiveResponse(
            message=message,
            type=ResponseType.FORM,
            fields=list(fields),
            command_id=command.id,
            params=dict(values or {}),
        )

    def confirm(self, command: Command, options: List[InteractiveOption]) -> InteractiveResponse:
        subject = command.description or command.command
        return InteractiveResponse(
            message=f'Are you sure you want to proceed with "{subject}"?',
            type=ResponseType.CONFIRM,
            options=options,
            command_id=command.id,
        )

    def ambiguous(self, candidates: List[Command], message: Optional[str] = None) -> InteractiveResponse:
        options = [
            InteractiveOption(label=c.command, command_id=c.id)
            for c in candidates
        ]
        return InteractiveResponse(
            message=message or "Did you mean one of these?",
            type=ResponseType.AMBIGUOUS,
            options=options,
        )

    def cancelled(self, command: Command) -> InteractiveResponse:
        return InteractiveResponse(
            message=f'Cancelled "{command.command}".',
            type=ResponseType.SUCCESS,
            command_id=command.id,
        )

    def action_error(self, message: str, command: Optional[Command] = None) -> InteractiveResponse:
        return InteractiveResponse(
            message=message,
            type=ResponseType.ERROR,
            command_id=command.id if command else None,
        )

    def from_action_result(self, result: Any, command: Command) -> InteractiveResponse:
        """
        Wrap an action's return value.

        str -> success; InteractiveResponse -> unchanged; None -> empty success;
        wire-shaped dict -> coerced; anything else -> success with str(value).
        """
        if isinstance(result, InteractiveResponse):
            return result
        if result is None:
            return InteractiveResponse(message="", type=ResponseType.SUCCESS, command_id=command.id)
        if isinstance(result, str):
            return InteractiveResponse(message=result, type=ResponseType.SUCCESS, command_id=command.id)
        if isinstance(result, dict) and "type" in result:
            try:
                return InteractiveResponse.from_dict(result)
            except (KeyError, TypeError, ValueError) as e:
                self._logger.warning(f"Action {command.id} returned an invalid response dict: {e}")

        return InteractiveResponse(message=str(result), type=ResponseType.SUCCESS, command_id=command.id)
