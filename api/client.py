"""
API Client Framework
--------------------
Async HTTP client with uniform error mapping.
API keys are read from the environment, never from code.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, Optional
import logging
import os

import httpx


class APIStatus(Enum):
    """Status of an API response."""
    SUCCESS = auto()
    RATE_LIMITED = auto()
    AUTH_ERROR = auto()
    NOT_FOUND = auto()
    SERVER_ERROR = auto()
    MALFORMED_RESPONSE = auto()
    TIMEOUT = auto()
    NETWORK_ERROR = auto()


@dataclass
class APIConfig:
    """Configuration for an API client."""
    name: str
    base_url: str
    api_key_env: Optional[str] = None  # Environment variable name (NOT the actual key)
    timeout_seconds: float = 10.0
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class APIResponse:
    """Response from an API call."""
    status: APIStatus
    data: Optional[Any] = None
    error: Optional[str] = None
    status_code: int = 0
    response_time_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == APIStatus.SUCCESS


class APIClient:
    """
    Base API client with error handling.

    Never raises for transport or HTTP failures; every outcome is an APIResponse.
    """

    def __init__(self, config: APIConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport
        self._logger = logging.getLogger(f"foisit.api.{config.name}")

        self._api_key = os.getenv(config.api_key_env) if config.api_key_env else None
        if config.api_key_env and not self._api_key:
            self._logger.warning(f"API key not found: {config.api_key_env}")

    @property
    def is_configured(self) -> bool:
        return bool(self.config.base_url)

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "foisit/1.0",
        }
        headers.update(self.config.headers)

        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        return headers

    def _url(self, endpoint: str) -> str:
        if not endpoint:
            return self.config.base_url
        return f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    async def get(self, endpoint: str = "", params: Optional[Dict] = None) -> APIResponse:
        return await self._request("GET", endpoint, params=params)

    async def post(self, endpoint: str = "", data: Optional[Dict] = None) -> APIResponse:
        return await self._request("POST", endpoint, json=data)

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict] = None,
        json: Optional[Dict] = None
    ) -> APIResponse:
        """Make an HTTP request with error handling."""
        if not self.is_configured:
            return APIResponse(
                status=APIStatus.NETWORK_ERROR,
                error=f"No base URL configured for {self.config.name}"
            )

        start_time = datetime.now()

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport
            ) as client:
                response = await client.request(
                    method=method,
                    url=self._url(endpoint),
                    params=params,
                    json=json,
                    headers=self._get_headers()
                )
        except httpx.TimeoutException:
            return APIResponse(status=APIStatus.TIMEOUT, error="Request timed out")
        except httpx.HTTPError as e:
            return APIResponse(status=APIStatus.NETWORK_ERROR, error=f"Network error: {e}")

        response_time = (datetime.now() - start_time).total_seconds() * 1000

        if response.is_success:
            try:
                data = response.json() if response.content else None
            except ValueError as e:
                return APIResponse(
                    status=APIStatus.MALFORMED_RESPONSE,
                    error=f"Invalid JSON: {e}",
                    status_code=response.status_code,
                    response_time_ms=response_time
                )
            return APIResponse(
                status=APIStatus.SUCCESS,
                data=data,
                status_code=response.status_code,
                response_time_ms=response_time
            )

        if response.status_code == 429:
            status, error = APIStatus.RATE_LIMITED, "Rate limit exceeded"
        elif response.status_code in (401, 403):
            status, error = APIStatus.AUTH_ERROR, "Authentication failed"
        elif response.status_code == 404:
            status, error = APIStatus.NOT_FOUND, "Resource not found"
        else:
            status, error = APIStatus.SERVER_ERROR, f"Unexpected status: {response.status_code}"

        return APIResponse(
            status=status,
            error=error,
            status_code=response.status_code,
            response_time_ms=response_time
        )
