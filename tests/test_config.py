"""
Configuration Tests
-------------------
YAML settings with FOISIT_* environment overrides.
"""

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from infra.config import AssistantConfig, ConfigManager, load_config


CONFIG = """
assistant:
  enable_smart_intent: false
  intent_endpoint: https://intent.example.com/resolve
  intent_timeout_seconds: 2.5
  fallback_response: Say that again?
logging:
  level: DEBUG
"""


class TestConfigManager:

    def test_dotted_get(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG)
        manager = ConfigManager(str(path))

        assert manager.get("assistant.intent_timeout_seconds") == 2.5
        assert manager.get("assistant.missing", "x") == "x"
        assert manager.get_section("logging") == {"level": "DEBUG"}

    def test_environment_wins(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG)
        monkeypatch.setenv("FOISIT_ASSISTANT_FALLBACK_RESPONSE", "Pardon?")

        assert ConfigManager(str(path)).get("assistant.fallback_response") == "Pardon?"

    def test_runtime_set(self):
        manager = ConfigManager(None)
        manager.set("assistant.commands_path", "commands.yaml")

        assert manager.get("assistant.commands_path") == "commands.yaml"

    def test_missing_file_is_empty(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "nope.yaml"))
        assert manager.get("assistant.intent_endpoint") is None


class TestAssistantConfig:

    def test_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "nope.yaml"))

        assert config == AssistantConfig()
        assert config.enable_smart_intent is True
        assert config.intent_endpoint is None
        assert config.fallback_response == "Sorry, I didn't understand that."

    def test_from_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG)

        config = load_config(str(path))

        assert config.enable_smart_intent is False
        assert config.intent_endpoint == "https://intent.example.com/resolve"
        assert config.intent_timeout_seconds == 2.5
        assert config.fallback_response == "Say that again?"
        assert config.log_level == "DEBUG"

    def test_environment_strings_are_coerced(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FOISIT_ASSISTANT_ENABLE_SMART_INTENT", "false")
        monkeypatch.setenv("FOISIT_ASSISTANT_INTENT_TIMEOUT_SECONDS", "3")

        config = load_config(str(tmp_path / "nope.yaml"))

        assert config.enable_smart_intent is False
        assert config.intent_timeout_seconds == 3.0
