"""
Command Handler
---------------
Public entry point: register commands and resolve user input.

Flow of one execute_command call:
    input → Matcher → Slot-Filling Engine → Confirmation Gate → action → Response Builder

Only registration errors are raised. Everything reachable from user input
resolves to an InteractiveResponse.
"""

from typing import Any, Dict, List, Mapping, Optional, Union
import inspect
import logging

from api.intent_resolver import HttpIntentResolver, IntentResolver
from commands.loader import command_from_dict, load_commands
from commands.matcher import CommandInput, Matcher, MatchStatus
from commands.models import Command, InteractiveResponse
from commands.registry import CommandRegistry
from infra.config import AssistantConfig
from infra.logging import TurnContext, get_logger, log_turn_end

from .confirmation import ConfirmationGate, GateDecision, confirmed_from_option
from .errors import CommandActionError, ErrorCategory, ErrorHandler, ErrorRecord
from .responses import ResponseBuilder
from .slot_filling import SlotFillingEngine
from .state_machine import DialogState, DialogStateMachine, TransitionListener


class CommandHandler:
    """
    Resolves free-form or structured input into exactly one command invocation.

    The handler keeps no dialog state between calls: while a form is being
    filled the caller resubmits {commandId, params} with the accumulated
    values until the response is success or error.
    """

    def __init__(
        self,
        config: Optional[AssistantConfig] = None,
        resolver: Optional[IntentResolver] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config or AssistantConfig()
        self._logger = logger or get_logger("core.handler")

        if resolver is None and self.config.intent_endpoint:
            resolver = HttpIntentResolver.from_endpoint(
                self.config.intent_endpoint,
                api_key_env=self.config.intent_api_key_env,
                timeout_seconds=self.config.intent_timeout_seconds,
            )

        self._registry = CommandRegistry()
        self._matcher = Matcher(
            self._registry,
            resolver=resolver,
            enable_smart_intent=self.config.enable_smart_intent,
        )
        self._slots = SlotFillingEngine()
        self._gate = ConfirmationGate()
        self._responses = ResponseBuilder(self.config.fallback_response)
        self._errors = ErrorHandler(self._logger)
        self._listeners: List[TransitionListener] = []

    @classmethod
    def from_config(cls, config: AssistantConfig, resolver: Optional[IntentResolver] = None) -> "CommandHandler":
        """Create a handler and register the commands declared in config.commands_path."""
        handler = cls(config, resolver=resolver)
        if config.commands_path:
            for command in load_commands(config.commands_path):
                handler.add_command(command)
        return handler

    # -- Registration -------------------------------------------------------

    def add_command(self, command: Union[Command, Dict[str, Any]]) -> None:
        """
        Register a command.

        Raises:
            DuplicateCommandError: If the trigger phrase or id already exists
            InvalidCommandError: If the definition is malformed
        """
        if isinstance(command, dict):
            command = command_from_dict(command)
        self._registry.add(command)

    def remove_command(self, trigger: str) -> None:
        """
        Unregister a command by trigger phrase.

        Raises:
            UnknownCommandError: If the command is not registered
        """
        self._registry.remove(trigger)

    def get_commands(self) -> List[str]:
        """Registered trigger phrases in insertion order."""
        return self._registry.list_triggers()

    def get_command(self, command_id: str) -> Optional[Command]:
        return self._registry.get(command_id)

    def list_commands(self) -> List[Command]:
        return self._registry.list_commands()

    # -- Settings -----------------------------------------------------------

    @property
    def enable_smart_intent(self) -> bool:
        return self._matcher.enable_smart_intent

    @enable_smart_intent.setter
    def enable_smart_intent(self, enabled: bool) -> None:
        self._matcher.enable_smart_intent = enabled

    def set_fallback_message(self, message: str) -> None:
        self._responses.fallback_message = message

    def add_transition_listener(self, callback: TransitionListener) -> None:
        self._listeners.append(callback)

    @property
    def error_handler(self) -> ErrorHandler:
        return self._errors

    # -- Resolution ---------------------------------------------------------

    async def execute_command(self, user_input: CommandInput) -> InteractiveResponse:
        """
        Resolve one input to a response.

        Args:
            user_input: Free text, or a payload {commandId, params, confirmed | value}

        Returns:
            InteractiveResponse (never raises for user input)
        """
        with TurnContext() as turn_id:
            machine = DialogStateMachine(listeners=self._listeners)
            command_id: Optional[str] = None

            try:
                response = await self._resolve(user_input, machine)
                command_id = response.command_id
            except Exception as e:
                record = ErrorRecord.from_exception(e, ErrorCategory.SYSTEM_ERROR)
                response = self._responses.action_error(self._errors.handle(record))

            machine.finish(f"Responded with {response.type.value}")
            log_turn_end(turn_id, response.type.value, command_id, logger=self._logger)
            return response

    async def _resolve(self, user_input: CommandInput, machine: DialogStateMachine) -> InteractiveResponse:
        machine.transition(DialogState.MATCHING, "Input received")
        match = await self._matcher.match(user_input)

        if match.status == MatchStatus.NOT_FOUND:
            self._errors.handle(ErrorRecord(
                category=ErrorCategory.RESOLUTION_ERROR,
                message=f"Unknown command id: {match.requested_id}",
            ))
            return self._responses.not_found(match.requested_id)

        if match.status == MatchStatus.AMBIGUOUS:
            return self._responses.ambiguous(match.candidates, match.message)

        if not match.is_match:
            self._errors.handle(ErrorRecord(
                category=ErrorCategory.RESOLUTION_ERROR,
                message="No command matched input",
            ))
            return self._responses.no_match()

        command = match.command
        self._logger.info(f"Matched {command.id} via {match.source.value}")

        confirmed = match.confirmed
        if confirmed is None and isinstance(user_input, Mapping):
            confirmed = confirmed_from_option(user_input.get("value"))

        slots = self._slots.evaluate(command, match.params)
        if not slots.is_ready:
            machine.transition(
                DialogState.COLLECTING,
                "Parameters outstanding",
                {"fields": [p.name for p in slots.missing]},
            )
            return self._responses.form(command, slots.missing, match.message, slots.values)

        machine.transition(DialogState.READY, "Parameters complete")

        decision = self._gate.decide(command, confirmed)
        if decision == GateDecision.ASK:
            machine.transition(DialogState.CONFIRMING, "Critical command")
            return self._responses.confirm(command, self._gate.options(command, slots.values))
        if decision == GateDecision.CANCEL:
            return self._responses.cancelled(command)

        machine.transition(DialogState.EXECUTING, "Running action")
        return await self._run_action(command, slots.values)

    async def _run_action(self, command: Command, values: Dict[str, Any]) -> InteractiveResponse:
        try:
            result = command.action(dict(values))
            if inspect.isawaitable(result):
                result = await result
        except CommandActionError as e:
            message = self._errors.handle(ErrorRecord(
                category=ErrorCategory.ACTION_ERROR,
                message=str(e),
                details={"command": command.id},
            ))
            return self._responses.action_error(message, command)
        except Exception as e:
            record = ErrorRecord.from_exception(e, ErrorCategory.ACTION_CRASH, {"command": command.id})
            return self._responses.action_error(self._errors.handle(record), command)

        self._logger.info(f"Command executed: {command.id}")
        return self._responses.from_action_result(result, command)
