# Commands module - Command model, validation, registry and matching
# This module does NOT run actions, only decides which command is meant

from .models import (
    Command, Parameter, ParameterType, StringParameter, NumberParameter,
    DateParameter, SelectParameter, SelectOption, FileParameter, FileDelivery,
    InteractiveResponse, InteractiveOption, ResponseType, parameter_from_dict,
)
from .validators import validate_parameter, validate_command
from .registry import CommandRegistry, normalize_trigger
from .matcher import Matcher, MatchResult, MatchStatus, MatchSource
from .loader import load_commands

__all__ = [
    "Command", "Parameter", "ParameterType", "StringParameter", "NumberParameter",
    "DateParameter", "SelectParameter", "SelectOption", "FileParameter", "FileDelivery",
    "InteractiveResponse", "InteractiveOption", "ResponseType", "parameter_from_dict",
    "validate_parameter", "validate_command",
    "CommandRegistry", "normalize_trigger",
    "Matcher", "MatchResult", "MatchStatus", "MatchSource",
    "load_commands",
]
