"""
Smart Intent Resolver
---------------------
Port for the external intent classifier, plus its HTTP adapter.

Request:  {"input": str, "commands": [CommandDescriptor, ...]}
Response: {"type": "match" | "no-match" | "ambiguous", "match": str,
           "params": {...}, "incomplete": bool, "message": str,
           "candidates": [str, ...]}

The resolver decides WHICH command; it is never trusted for parameter validity.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
import logging

from pydantic import BaseModel, Field, ValidationError

from .client import APIClient, APIConfig


class IntentOutcome(str, Enum):
    MATCH = "match"
    NO_MATCH = "no-match"
    AMBIGUOUS = "ambiguous"


@dataclass
class IntentResult:
    """Normalized resolver output."""
    outcome: IntentOutcome
    command_id: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    incomplete: bool = False
    message: Optional[str] = None
    candidates: List[str] = field(default_factory=list)
    error: Optional[str] = None  # Set when the result stands in for a failure

    @classmethod
    def no_match(cls, error: Optional[str] = None) -> "IntentResult":
        return cls(outcome=IntentOutcome.NO_MATCH, error=error)

    @property
    def is_match(self) -> bool:
        return self.outcome == IntentOutcome.MATCH and bool(self.command_id)


class IntentResolverPayload(BaseModel):
    """Wire shape of the resolver's JSON response."""
    type: Literal["match", "no-match", "ambiguous"]
    match: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    incomplete: bool = False
    message: Optional[str] = None
    candidates: List[str] = Field(default_factory=list)

    def to_result(self) -> IntentResult:
        outcome = IntentOutcome(self.type)
        if outcome == IntentOutcome.MATCH and not self.match:
            return IntentResult.no_match(error="Match without command id")
        return IntentResult(
            outcome=outcome,
            command_id=self.match,
            params=dict(self.params or {}),
            incomplete=self.incomplete,
            message=self.message,
            candidates=list(self.candidates),
        )


class IntentResolver(ABC):
    """Maps free text to a registered command."""

    @abstractmethod
    async def resolve(self, text: str, commands: List[Dict[str, Any]]) -> IntentResult:
        """
        Classify text against command descriptors.

        Implementations may raise; callers treat any exception as no match.
        """


class HttpIntentResolver(IntentResolver):
    """
    Smart-intent client over HTTP.

    Network failure, non-2xx status and malformed JSON all degrade to no match.
    No retries.
    """

    def __init__(self, client: APIClient):
        self._client = client
        self._logger = logging.getLogger("foisit.api.intent")

    @classmethod
    def from_endpoint(
        cls,
        endpoint: str,
        api_key_env: Optional[str] = None,
        timeout_seconds: float = 10.0,
    ) -> "HttpIntentResolver":
        return cls(APIClient(APIConfig(
            name="intent",
            base_url=endpoint,
            api_key_env=api_key_env,
            timeout_seconds=timeout_seconds,
        )))

    async def resolve(self, text: str, commands: List[Dict[str, Any]]) -> IntentResult:
        response = await self._client.post(data={"input": text, "commands": commands})

        if not response.success:
            self._logger.warning(f"Intent service unavailable: {response.error}")
            return IntentResult.no_match(error=response.error)

        try:
            payload = IntentResolverPayload.model_validate(response.data)
        except ValidationError as e:
            self._logger.warning(f"Malformed intent response: {e.error_count()} error(s)")
            return IntentResult.no_match(error="Malformed intent response")

        result = payload.to_result()
        self._logger.debug(f"Intent resolved: {result.outcome.value} -> {result.command_id}")
        return result
