"""
Command Loader Tests
--------------------
YAML command declarations with import-path actions.
"""

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from commands.loader import command_from_dict, load_commands, resolve_action
from commands.models import NumberParameter, SelectParameter
from core.errors import InvalidCommandError

import sample_actions


COMMANDS = """
commands:
  - id: greet
    command: say hello
    description: Greet someone
    keywords: [hello, hi]
    action: sample_actions:greet
    parameters:
      - {name: name, type: string, required: true}
  - command: order pizza
    action: sample_actions:shout
    critical: true
    allowAiParamExtraction: false
    parameters:
      - {name: size, type: select, required: true, options: [small, large]}
      - {name: count, type: number, min: 1, max: 5}
"""


class TestResolveAction:

    def test_resolves_function(self):
        assert resolve_action("sample_actions:greet") is sample_actions.greet

    @pytest.mark.parametrize("path", [
        "sample_actions",
        "sample_actions:",
        "no_such_module_here:greet",
        "sample_actions:missing",
        "sample_actions:not_callable",
    ])
    def test_bad_paths(self, path):
        with pytest.raises(InvalidCommandError):
            resolve_action(path)


class TestLoadCommands:

    def test_loads_file(self, tmp_path):
        path = tmp_path / "commands.yaml"
        path.write_text(COMMANDS)

        greet, pizza = load_commands(str(path))

        assert greet.id == "greet"
        assert greet.keywords == ["hello", "hi"]
        assert greet.action is sample_actions.greet

        assert pizza.id == "order pizza"
        assert pizza.critical
        assert not pizza.allow_ai_param_extraction
        size, count = pizza.parameters
        assert isinstance(size, SelectParameter)
        assert size.option_values == ["small", "large"]
        assert isinstance(count, NumberParameter)
        assert (count.min, count.max, count.required) == (1, 5, False)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_commands(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "commands.yaml"
        path.write_text("")

        assert load_commands(str(path)) == []

    def test_entry_needs_command_and_action(self):
        with pytest.raises(InvalidCommandError):
            command_from_dict({"command": "say hello"})

    def test_unknown_parameter_type(self):
        with pytest.raises(InvalidCommandError):
            command_from_dict({
                "command": "say hello",
                "action": "sample_actions:greet",
                "parameters": [{"name": "x", "type": "color"}],
            })
