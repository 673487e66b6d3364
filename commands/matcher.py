"""
Matcher
-------
Resolve raw input to a single command and a partial parameter set.

Order of resolution:
1. Structured payload {commandId, params}: direct id lookup, no ambiguity.
2. Free text: exact trigger/keyword match (the macro fast path).
3. Free text, no exact match: the smart-intent resolver, if enabled.

Resolver failures of any kind degrade to no match. No retries.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from api.intent_resolver import IntentOutcome, IntentResolver, IntentResult

from .models import Command
from .registry import CommandRegistry


CommandInput = Union[str, Mapping[str, Any]]


class MatchStatus(Enum):
    MATCHED = auto()
    NO_MATCH = auto()    # Free text matched nothing
    NOT_FOUND = auto()   # Structured payload named an unknown id
    AMBIGUOUS = auto()   # Resolver reported several candidates


class MatchSource(str, Enum):
    STRUCTURED = "structured"
    MACRO = "macro"
    SMART_INTENT = "smart_intent"


@dataclass
class MatchResult:
    """Outcome of matching one input."""
    status: MatchStatus
    command: Optional[Command] = None
    params: Dict[str, Any] = field(default_factory=dict)
    source: Optional[MatchSource] = None
    message: Optional[str] = None       # Resolver prompt for missing fields
    candidates: List[Command] = field(default_factory=list)
    confirmed: Optional[bool] = None    # Explicit confirm/cancel from a structured payload
    requested_id: Optional[str] = None

    @property
    def is_match(self) -> bool:
        return self.status == MatchStatus.MATCHED and self.command is not None

    def __repr__(self) -> str:
        command_id = self.command.id if self.command else None
        return f"MatchResult({self.status.name}, command={command_id}, source={self.source})"


def _payload_command_id(payload: Mapping[str, Any]) -> Optional[str]:
    value = payload.get("commandId", payload.get("command_id"))
    return str(value) if value is not None else None


class Matcher:
    """
    Deterministic matcher with optional smart-intent delegation.

    The resolver is authoritative for which command, never for parameter validity.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        resolver: Optional[IntentResolver] = None,
        enable_smart_intent: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.resolver = resolver
        self.enable_smart_intent = enable_smart_intent
        self._logger = logger or logging.getLogger("foisit.commands.matcher")

    @property
    def smart_intent_active(self) -> bool:
        return self.enable_smart_intent and self.resolver is not None

    async def match(self, user_input: CommandInput) -> MatchResult:
        if isinstance(user_input, str):
            return await self.match_text(user_input)
        return self.match_payload(user_input)

    def match_payload(self, payload: Mapping[str, Any]) -> MatchResult:
        """Look a structured payload up by command id."""
        command_id = _payload_command_id(payload)
        command = self.registry.get(command_id) if command_id else None

        if command is None:
            self._logger.warning(f"Structured payload for unknown command: {command_id}")
            return MatchResult(status=MatchStatus.NOT_FOUND, requested_id=command_id)

        params = payload.get("params") or {}
        confirmed = payload.get("confirmed")

        return MatchResult(
            status=MatchStatus.MATCHED,
            command=command,
            params=dict(params) if isinstance(params, Mapping) else {},
            source=MatchSource.STRUCTURED,
            confirmed=confirmed if isinstance(confirmed, bool) else None,
            requested_id=command_id,
        )

    async def match_text(self, text: str) -> MatchResult:
        """Exact trigger match first, then the smart-intent resolver."""
        if not text or not text.strip():
            return MatchResult(status=MatchStatus.NO_MATCH)

        command = self.registry.find_by_trigger(text)
        if command is not None:
            self._logger.debug(f"Macro match: {text!r} -> {command.id}")
            return MatchResult(status=MatchStatus.MATCHED, command=command, source=MatchSource.MACRO)

        if not self.smart_intent_active:
            self._logger.info(f"No exact match and smart intent disabled: {text!r}")
            return MatchResult(status=MatchStatus.NO_MATCH)

        result = await self._resolve(text)
        return self._from_intent(result)

    async def _resolve(self, text: str) -> IntentResult:
        descriptors = [command.to_descriptor() for command in self.registry.list_commands()]
        try:
            return await self.resolver.resolve(text, descriptors)
        except Exception as e:
            self._logger.warning(f"Intent resolver failed: {e}")
            return IntentResult.no_match(error=str(e))

    def _lookup(self, key: Optional[str]) -> Optional[Command]:
        if not key:
            return None
        return self.registry.get(key) or self.registry.find_by_trigger(key)

    def _from_intent(self, result: IntentResult) -> MatchResult:
        if result.outcome == IntentOutcome.AMBIGUOUS:
            candidates: List[Command] = []
            for key in result.candidates:
                command = self._lookup(key)
                if command is not None and command not in candidates:
                    candidates.append(command)

            if len(candidates) > 1:
                return MatchResult(
                    status=MatchStatus.AMBIGUOUS,
                    candidates=candidates,
                    source=MatchSource.SMART_INTENT,
                    message=result.message,
                )
            if len(candidates) == 1:
                return MatchResult(
                    status=MatchStatus.MATCHED,
                    command=candidates[0],
                    source=MatchSource.SMART_INTENT,
                )
            return MatchResult(status=MatchStatus.NO_MATCH)

        if not result.is_match:
            return MatchResult(status=MatchStatus.NO_MATCH)

        command = self._lookup(result.command_id)
        if command is None:
            self._logger.warning(f"Intent resolver matched unregistered command: {result.command_id}")
            return MatchResult(status=MatchStatus.NO_MATCH)

        params = dict(result.params)
        message = result.message if result.incomplete else None
        if not command.allow_ai_param_extraction:
            if params:
                self._logger.info(f"Discarding extracted parameters for {command.id}")
            params = {}
            message = None

        return MatchResult(
            status=MatchStatus.MATCHED,
            command=command,
            params=params,
            source=MatchSource.SMART_INTENT,
            message=message,
        )
