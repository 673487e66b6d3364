"""
Parameter Validator
-------------------
One pure predicate per parameter type.

Values are checked as received: no coercion, no network or UI I/O,
no natural-language date parsing.
"""

from datetime import date
from io import IOBase
from pathlib import PurePath
from typing import Any, Callable, Dict, Optional
import math
import re

from .models import (
    Command,
    DateParameter,
    FileDelivery,
    FileParameter,
    NumberParameter,
    Parameter,
    ParameterType,
    SelectParameter,
    StringParameter,
)


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_missing(value: Any) -> bool:
    """Absent values: None or a whitespace-only string."""
    return value is None or (isinstance(value, str) and not value.strip())


def validate_string(param: StringParameter, value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_number(param: NumberParameter, value: Any) -> bool:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if not math.isfinite(value):
        return False
    if param.min is not None and value < param.min:
        return False
    if param.max is not None and value > param.max:
        return False
    return True


def validate_date(param: DateParameter, value: Any) -> bool:
    """
    Strict YYYY-MM-DD calendar date.

    "next week thursday" and "2026-02-30" are both rejected.
    min/max are rendering hints for the UI and are not enforced.
    """
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_select(param: SelectParameter, value: Any) -> bool:
    """
    Value must be one of the static options.

    Selects whose options are exclusively dynamic accept any non-empty
    string; the UI collaborator owns validation of supplier values.
    """
    if param.options:
        return isinstance(value, str) and value in param.option_values
    if param.has_dynamic_options:
        return isinstance(value, str) and bool(value.strip())
    return False


def _is_file_handle(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray, IOBase, PurePath)):
        return True
    return callable(getattr(value, "read", None))


def _is_data_url(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("data:")


def validate_file(param: FileParameter, value: Any) -> bool:
    """
    Presence and delivery shape only.

    delivery=file expects a file handle (file-like object, bytes or path);
    delivery=base64 expects a data: URL string. Textual descriptions such
    as "csv file" never count as a file.
    """
    check = _is_data_url if FileDelivery(param.delivery) == FileDelivery.BASE64 else _is_file_handle

    if isinstance(value, (list, tuple)):
        if not param.multiple or not value:
            return False
        return all(check(item) for item in value)

    return check(value)


VALIDATORS: Dict[ParameterType, Callable[[Any, Any], bool]] = {
    ParameterType.STRING: validate_string,
    ParameterType.NUMBER: validate_number,
    ParameterType.DATE: validate_date,
    ParameterType.SELECT: validate_select,
    ParameterType.FILE: validate_file,
}


def validate_parameter(param: Parameter, value: Any) -> bool:
    """Check one value against its parameter. Missing values are invalid."""
    if is_missing(value):
        return False
    return VALIDATORS[param.type](param, value)


def describe_problem(param: Parameter, value: Any) -> Optional[str]:
    """Human-readable reason a value was rejected, or None if valid."""
    if is_missing(value):
        return f"{param.name} is required" if param.required else None
    if validate_parameter(param, value):
        return None

    if isinstance(param, NumberParameter):
        if param.min is not None and param.max is not None:
            return f"{param.name} must be a number between {param.min} and {param.max}"
        if param.min is not None:
            return f"{param.name} must be a number >= {param.min}"
        if param.max is not None:
            return f"{param.name} must be a number <= {param.max}"
        return f"{param.name} must be a number"
    if isinstance(param, DateParameter):
        return f"{param.name} must be a date in YYYY-MM-DD format"
    if isinstance(param, SelectParameter) and param.options:
        return f"{param.name} must be one of {param.option_values}"
    if isinstance(param, FileParameter):
        if FileDelivery(param.delivery) == FileDelivery.BASE64:
            return f"{param.name} must be a data: URL"
        return f"{param.name} must be a file"
    return f"Invalid value for {param.name}"


def validate_command(command: Command) -> Optional[str]:
    """
    Check a command definition before registration.

    Returns an error message, or None if the definition is usable.
    """
    if not isinstance(command.command, str) or not command.command.strip():
        return "Command trigger phrase must be a non-empty string"
    if not callable(command.action):
        return f'Command "{command.command}" has no callable action'

    seen = set()
    for param in command.parameters:
        if param.name in seen:
            return f'Command "{command.command}" declares parameter "{param.name}" twice'
        seen.add(param.name)

        if isinstance(param, SelectParameter) and not param.options and not param.has_dynamic_options:
            return f'Select parameter "{param.name}" has no options'

    return None
