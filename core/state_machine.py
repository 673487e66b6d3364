"""
Dialog State Machine
--------------------
Tracks one resolution cycle of the handler with validated transitions.

A fresh machine is created per call: dialog context lives with the caller,
so nothing here is shared across calls.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Set
import logging


class DialogState(Enum):
    """States of a single resolution cycle."""
    IDLE = auto()        # No dialog in progress
    MATCHING = auto()    # Deciding which command is meant
    COLLECTING = auto()  # Required parameters missing or invalid
    READY = auto()       # All required parameters valid
    CONFIRMING = auto()  # Critical command awaiting explicit confirmation
    EXECUTING = auto()   # Running the command's action


@dataclass
class StateTransition:
    """Record of a state transition."""
    from_state: DialogState
    to_state: DialogState
    timestamp: datetime
    reason: str
    metadata: Dict = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"StateTransition({self.from_state.name} → {self.to_state.name}, "
            f"reason='{self.reason}')"
        )


VALID_TRANSITIONS: Dict[DialogState, Set[DialogState]] = {
    DialogState.IDLE: {DialogState.MATCHING},
    DialogState.MATCHING: {DialogState.COLLECTING, DialogState.READY, DialogState.IDLE},
    DialogState.COLLECTING: {DialogState.IDLE},
    # Confirmation is only reachable once parameters are complete
    DialogState.READY: {DialogState.CONFIRMING, DialogState.EXECUTING, DialogState.IDLE},
    DialogState.CONFIRMING: {DialogState.IDLE},
    DialogState.EXECUTING: {DialogState.IDLE},
}


TransitionListener = Callable[[StateTransition], None]


class DialogStateMachine:
    """
    State machine for one resolution cycle.

    Responsibilities:
    - Validate state transitions
    - Log all transitions
    - Notify listeners of state changes
    """

    def __init__(
        self,
        listeners: Optional[List[TransitionListener]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._state = DialogState.IDLE
        self._history: List[StateTransition] = []
        self._listeners: List[TransitionListener] = list(listeners or [])
        self._logger = logger or logging.getLogger("foisit.core.state")

    @property
    def state(self) -> DialogState:
        return self._state

    @property
    def history(self) -> List[StateTransition]:
        return self._history.copy()

    def can_transition(self, to_state: DialogState) -> bool:
        return to_state in VALID_TRANSITIONS.get(self._state, set())

    def transition(
        self,
        to_state: DialogState,
        reason: str,
        metadata: Optional[Dict] = None
    ) -> StateTransition:
        """
        Move to a new state.

        Raises:
            ValueError: If the transition is not allowed
        """
        if not self.can_transition(to_state):
            valid_names = sorted(s.name for s in VALID_TRANSITIONS.get(self._state, set()))
            raise ValueError(
                f"Invalid transition: {self._state.name} → {to_state.name}. "
                f"Valid targets: {valid_names}"
            )

        transition = StateTransition(
            from_state=self._state,
            to_state=to_state,
            timestamp=datetime.now(),
            reason=reason,
            metadata=metadata or {}
        )

        self._state = to_state
        self._history.append(transition)

        self._logger.debug(
            f"State transition: {transition.from_state.name} → {to_state.name} "
            f"(reason: {reason})"
        )

        for listener in self._listeners:
            try:
                listener(transition)
            except Exception as e:
                self._logger.warning(f"Listener error: {e}")

        return transition

    def add_listener(self, callback: TransitionListener) -> None:
        self._listeners.append(callback)

    def finish(self, reason: str) -> None:
        """Return to IDLE from wherever the cycle ended."""
        if self._state != DialogState.IDLE:
            self.transition(DialogState.IDLE, reason)

    @property
    def path(self) -> List[DialogState]:
        """States visited so far, starting from IDLE."""
        return [DialogState.IDLE] + [t.to_state for t in self._history]
