# Infrastructure module - Logging, configuration and the HTTP service surface
# The service bus is imported explicitly (infra.service_bus) to keep core imports light

from .logging import (
    get_logger, configure_logging, TurnContext,
    log_turn_end, get_turn_id, generate_turn_id
)
from .config import AssistantConfig, ConfigManager, load_config

__all__ = [
    "get_logger",
    "configure_logging",
    "TurnContext",
    "log_turn_end",
    "get_turn_id",
    "generate_turn_id",
    "AssistantConfig",
    "ConfigManager",
    "load_config",
]
