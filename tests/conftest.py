"""
Foisit Test Configuration
-------------------------
Shared fixtures and configuration for all tests.

Async code is driven with asyncio.run so the suite needs no event-loop plugin.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from api.intent_resolver import IntentOutcome, IntentResolver, IntentResult
from commands.models import Command
from core.command_handler import CommandHandler


def run(coro):
    """Run a coroutine to completion."""
    return asyncio.run(coro)


class FakeResolver(IntentResolver):
    """
    Scripted intent resolver.

    Returns `result` for every call (or raises `error`) and records the
    requests it received.
    """

    def __init__(self, result: Optional[IntentResult] = None, error: Optional[Exception] = None):
        self.result = result or IntentResult.no_match()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def resolve(self, text: str, commands: List[Dict[str, Any]]) -> IntentResult:
        self.calls.append({"input": text, "commands": commands})
        if self.error is not None:
            raise self.error
        return self.result

    @classmethod
    def matching(cls, command_id: str, **kwargs) -> "FakeResolver":
        return cls(IntentResult(outcome=IntentOutcome.MATCH, command_id=command_id, **kwargs))


class ActionSpy:
    """Callable action that records its invocations."""

    def __init__(self, result: Any = "done", error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, params: Dict[str, Any]) -> Any:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.result

    @property
    def call_count(self) -> int:
        return len(self.calls)


# =============================================================================
# Command fixtures
# =============================================================================

def make_book_appointment(action=None) -> Command:
    return Command(
        id="book_appointment",
        command="book appointment",
        description="Book a service appointment",
        keywords=["appointment"],
        action=action or ActionSpy("Booked."),
        parameters=[
            {"name": "service", "type": "string", "required": True},
            {"name": "date", "type": "date", "required": True},
        ],
    )


def make_create_user(action=None) -> Command:
    return Command(
        id="create_user",
        command="create user",
        action=action or ActionSpy("User created."),
        parameters=[
            {"name": "fullName", "type": "string", "required": True},
            {"name": "age", "type": "number", "required": True, "min": 18, "max": 99},
            {"name": "nickname", "type": "string"},
        ],
    )


def make_transfer_money(action=None) -> Command:
    return Command(
        id="transfer_money",
        command="transfer money",
        description="Transfer money",
        critical=True,
        action=action or ActionSpy("Transferred."),
        parameters=[
            {"name": "amount", "type": "number", "required": True, "min": 1},
            {"name": "toAccount", "type": "string", "required": True},
        ],
    )


def make_set_theme(action=None) -> Command:
    return Command(
        id="set_theme",
        command="set theme",
        action=action or ActionSpy("Theme set."),
        parameters=[
            {
                "name": "theme",
                "type": "select",
                "required": True,
                "options": [
                    {"label": "Light", "value": "light"},
                    {"label": "Dark", "value": "dark"},
                ],
            },
        ],
    )


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def handler(resolver):
    """Handler with a scripted resolver and no commands."""
    return CommandHandler(resolver=resolver)
