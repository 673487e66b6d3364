"""
FastAPI Service Bus
-------------------
HTTP surface over the command handler for UI collaborators.

POST /execute accepts either free text or a structured payload and always
answers with an InteractiveResponse dict.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from core.command_handler import CommandHandler


class ExecuteRequest(BaseModel):
    """Free text, or {commandId, params, confirmed | value}."""
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = Field(None, description="Free-text user input")
    command_id: Optional[str] = Field(None, alias="commandId", description="Command id for structured input")
    params: Dict[str, Any] = Field(default_factory=dict, description="Accumulated parameter values")
    confirmed: Optional[bool] = Field(None, description="Explicit answer to a confirm response")
    value: Optional[str] = Field(None, description="Value of the selected confirm option")

    def to_input(self) -> Any:
        if self.command_id is not None:
            payload: Dict[str, Any] = {"commandId": self.command_id, "params": self.params}
            if self.confirmed is not None:
                payload["confirmed"] = self.confirmed
            if self.value is not None:
                payload["value"] = self.value
            return payload
        return self.text or ""


class HealthResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    commands_loaded: int = 0
    smart_intent: bool = False
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class ServiceBus:
    """
    HTTP service for the command handler.

    Provides REST API for:
    - Health
    - Listing command descriptors
    - Executing commands
    """

    def __init__(self, handler: Optional[CommandHandler] = None):
        self._handler = handler
        self._logger = logging.getLogger("foisit.infra.service_bus")
        self._app: Optional[FastAPI] = None

    def set_handler(self, handler: CommandHandler) -> None:
        self._handler = handler

    def _require_handler(self) -> CommandHandler:
        if self._handler is None:
            raise HTTPException(status_code=503, detail="Command handler not initialized")
        return self._handler

    def create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            self._logger.info("Service bus starting...")
            yield
            self._logger.info("Service bus shutting down...")

        app = FastAPI(
            title="Foisit Command API",
            description="Command resolution and slot filling for assistant UIs",
            version="0.1.0",
            lifespan=lifespan
        )

        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._register_routes(app)

        self._app = app
        return app

    def _register_routes(self, app: FastAPI) -> None:

        @app.get("/health", response_model=HealthResponse, tags=["System"])
        async def health_check():
            if self._handler is None:
                return HealthResponse(status="starting")
            return HealthResponse(
                status="healthy",
                commands_loaded=len(self._handler.get_commands()),
                smart_intent=self._handler.enable_smart_intent,
            )

        @app.get("/commands", tags=["Commands"])
        async def list_commands() -> List[Dict[str, Any]]:
            handler = self._require_handler()
            return [command.to_descriptor() for command in handler.list_commands()]

        @app.post("/execute", tags=["Commands"])
        async def execute(request: ExecuteRequest) -> Dict[str, Any]:
            handler = self._require_handler()
            if request.command_id is None and not (request.text and request.text.strip()):
                raise HTTPException(status_code=422, detail="Provide 'text' or 'commandId'")

            response = await handler.execute_command(request.to_input())
            return response.to_dict()


def create_app(handler: Optional[CommandHandler] = None) -> FastAPI:
    """Create the FastAPI application."""
    return ServiceBus(handler).create_app()
