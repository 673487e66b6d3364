"""
Slot-Filling Engine
-------------------
Decides whether a selected command has everything it needs.

COLLECTING: one or more required parameters are missing or invalid.
READY:      every required parameter is present and valid.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
import logging

from commands.models import Command, Parameter
from commands.validators import describe_problem, is_missing, validate_parameter

from .state_machine import DialogState


@dataclass
class SlotFillingResult:
    """Outcome of checking accumulated values against a command."""
    state: DialogState
    missing: List[Parameter] = field(default_factory=list)
    values: Dict[str, Any] = field(default_factory=dict)
    problems: Dict[str, str] = field(default_factory=dict)

    @property
    def is_ready(self) -> bool:
        return self.state == DialogState.READY


class SlotFillingEngine:
    """
    Checks parameters in declared order.

    Required parameters that fail validation are reported back so the
    user only re-answers what is outstanding. Optional parameters never
    block READY; an optional value that fails its type check is dropped.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("foisit.core.slots")

    def evaluate(self, command: Command, values: Optional[Mapping[str, Any]]) -> SlotFillingResult:
        accumulated = dict(values or {})
        missing: List[Parameter] = []
        problems: Dict[str, str] = {}

        for param in command.parameters:
            value = accumulated.get(param.name)

            if validate_parameter(param, value):
                continue

            if param.required:
                missing.append(param)
                problems[param.name] = describe_problem(param, value) or f"{param.name} is required"
            elif param.name in accumulated:
                if not is_missing(value):
                    self._logger.debug(f"Dropping invalid optional parameter {param.name} for {command.id}")
                del accumulated[param.name]

        if missing:
            self._logger.info(
                f"Collecting parameters for {command.id}: {[p.name for p in missing]}"
            )
            return SlotFillingResult(
                state=DialogState.COLLECTING,
                missing=missing,
                values=accumulated,
                problems=problems,
            )

        return SlotFillingResult(state=DialogState.READY, values=accumulated)
