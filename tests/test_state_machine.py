"""
Dialog State Machine Tests
--------------------------
Validated transitions for a single resolution cycle.
"""

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.state_machine import DialogState, DialogStateMachine


class TestTransitions:

    def test_starts_idle(self):
        assert DialogStateMachine().state == DialogState.IDLE

    def test_happy_path(self):
        machine = DialogStateMachine()
        machine.transition(DialogState.MATCHING, "input")
        machine.transition(DialogState.READY, "complete")
        machine.transition(DialogState.EXECUTING, "run")
        machine.finish("done")

        assert machine.path == [
            DialogState.IDLE, DialogState.MATCHING, DialogState.READY,
            DialogState.EXECUTING, DialogState.IDLE,
        ]

    def test_cannot_confirm_while_collecting(self):
        machine = DialogStateMachine()
        machine.transition(DialogState.MATCHING, "input")
        machine.transition(DialogState.COLLECTING, "missing")

        assert not machine.can_transition(DialogState.CONFIRMING)
        with pytest.raises(ValueError):
            machine.transition(DialogState.CONFIRMING, "too early")

    def test_cannot_execute_from_matching(self):
        machine = DialogStateMachine()
        machine.transition(DialogState.MATCHING, "input")

        with pytest.raises(ValueError):
            machine.transition(DialogState.EXECUTING, "skip slots")

    def test_finish_when_idle_is_noop(self):
        machine = DialogStateMachine()
        machine.finish("nothing happened")

        assert machine.history == []


class TestListeners:

    def test_listener_notified(self):
        seen = []
        machine = DialogStateMachine(listeners=[seen.append])

        machine.transition(DialogState.MATCHING, "input", {"k": 1})

        [transition] = seen
        assert transition.from_state == DialogState.IDLE
        assert transition.to_state == DialogState.MATCHING
        assert transition.metadata == {"k": 1}

    def test_listener_error_does_not_break_transition(self):
        def broken(transition):
            raise RuntimeError("listener bug")

        machine = DialogStateMachine()
        machine.add_listener(broken)
        machine.transition(DialogState.MATCHING, "input")

        assert machine.state == DialogState.MATCHING
