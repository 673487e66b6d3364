"""
Confirmation Gate
-----------------
Critical commands never run without an explicit affirmative resubmission.

The gate is consulted only after slot filling reports READY, so a critical
command with missing parameters is never confirmed early.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Optional
import logging

from commands.models import Command, InteractiveOption

CONFIRM_VALUE = "confirm"
CANCEL_VALUE = "cancel"


class GateDecision(Enum):
    """What to do with a READY command."""
    RUN = auto()      # Not critical, or explicitly confirmed
    ASK = auto()      # Critical and not yet confirmed
    CANCEL = auto()   # Critical and explicitly declined


@dataclass
class ConfirmationGate:
    """Decides whether a READY command may run."""
    confirm_label: str = "Yes"
    cancel_label: str = "No"
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = logging.getLogger("foisit.core.confirmation")

    def decide(self, command: Command, confirmed: Optional[bool]) -> GateDecision:
        if not command.critical:
            return GateDecision.RUN
        if confirmed is True:
            self.logger.info(f"Critical command confirmed: {command.id}")
            return GateDecision.RUN
        if confirmed is False:
            self.logger.info(f"Critical command cancelled: {command.id}")
            return GateDecision.CANCEL
        return GateDecision.ASK

    def options(self, command: Command, values: Dict[str, Any]) -> List[InteractiveOption]:
        """Confirm/cancel pair carrying everything needed to resubmit."""
        return [
            InteractiveOption(
                label=self.confirm_label,
                value=CONFIRM_VALUE,
                command_id=command.id,
                params=dict(values),
            ),
            InteractiveOption(
                label=self.cancel_label,
                value=CANCEL_VALUE,
                command_id=command.id,
                params=dict(values),
            ),
        ]


def confirmed_from_option(value: Optional[str]) -> Optional[bool]:
    """Map a selected option value back to the `confirmed` payload flag."""
    if value == CONFIRM_VALUE:
        return True
    if value == CANCEL_VALUE:
        return False
    return None
