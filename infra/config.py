"""
Configuration Manager
---------------------
YAML configuration with environment variable overrides.

    assistant:
      enable_smart_intent: true
      intent_endpoint: https://intent.example.com/resolve
      fallback_response: "Sorry, I didn't understand that."
    logging:
      level: INFO

FOISIT_ASSISTANT_INTENT_ENDPOINT overrides assistant.intent_endpoint.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os

import yaml

ENV_PREFIX = "FOISIT"


@dataclass
class AssistantConfig:
    """Settings of the command handler and its hosts."""
    enable_smart_intent: bool = True
    intent_endpoint: Optional[str] = None
    intent_api_key_env: Optional[str] = None
    intent_timeout_seconds: float = 10.0
    fallback_response: str = "Sorry, I didn't understand that."
    commands_path: Optional[str] = None
    log_level: str = "INFO"
    log_dir: Optional[str] = None


def _coerce(value: Any, default: Any) -> Any:
    """Convert environment strings to the type of the field's default."""
    if not isinstance(value, str):
        return value
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, float):
        return float(value)
    if isinstance(default, int):
        return int(value)
    return value


class ConfigManager:
    """
    Centralized configuration management.
    Loads configuration from YAML with environment variable overrides.
    """

    def __init__(self, config_path: Optional[str] = "config.yaml"):
        self._config_path = Path(config_path) if config_path else None
        self._config: Dict[str, Any] = {}
        self._logger = logging.getLogger("foisit.infra.config")

        self._load_config()

    def _load_config(self) -> None:
        if self._config_path is None:
            return
        if self._config_path.exists():
            with open(self._config_path, 'r') as f:
                self._config = yaml.safe_load(f) or {}
            self._logger.info(f"Loaded config from {self._config_path}")
        else:
            self._logger.warning(f"Config file not found: {self._config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        Supports dot notation: 'section.key'
        Environment variables override file config.
        """
        env_key = f"{ENV_PREFIX}_{key.upper().replace('.', '_')}"
        env_value = os.getenv(env_key)
        if env_value is not None:
            return env_value

        value: Any = self._config
        for part in key.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value (runtime only, not persisted)."""
        parts = key.split('.')
        config = self._config

        for part in parts[:-1]:
            config = config.setdefault(part, {})

        config[parts[-1]] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        return self._config.get(section, {})

    def reload(self) -> None:
        self._load_config()

    def assistant_config(self) -> AssistantConfig:
        """Build AssistantConfig from the 'assistant' and 'logging' sections."""
        defaults = AssistantConfig()
        values: Dict[str, Any] = {}

        for f in fields(AssistantConfig):
            if f.name.startswith("log_"):
                key = f"logging.{f.name[len('log_'):]}"
            else:
                key = f"assistant.{f.name}"
            default = getattr(defaults, f.name)
            values[f.name] = _coerce(self.get(key, default), default)

        return AssistantConfig(**values)


def load_config(path: Optional[str] = "config.yaml") -> AssistantConfig:
    """Load AssistantConfig from YAML plus environment overrides."""
    return ConfigManager(path).assistant_config()
