"""
Command Model
-------------
Commands, typed parameters and the interactive response contract.

Every public operation of the handler returns an InteractiveResponse.
Wire dictionaries use camelCase keys so UI collaborators can consume them directly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, ClassVar, Dict, List, Optional, Union


class ParameterType(str, Enum):
    """Supported parameter types."""
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    FILE = "file"


class FileDelivery(str, Enum):
    """How a file parameter is handed back to the action."""
    FILE = "file"      # Native file handle
    BASE64 = "base64"  # data: URL string


class ResponseType(str, Enum):
    """Discriminator of InteractiveResponse."""
    SUCCESS = "success"
    ERROR = "error"
    QUESTION = "question"
    SUGGESTION = "suggestion"
    FORM = "form"
    AMBIGUOUS = "ambiguous"
    CONFIRM = "confirm"


@dataclass
class SelectOption:
    """Static label/value pair of a select parameter."""
    label: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass
class Parameter:
    """
    Common fields of every parameter.

    Concrete parameters set the class-level `type` tag; validation rules
    are chosen by that tag alone.
    """
    type: ClassVar[ParameterType]

    name: str
    description: str = ""
    required: bool = False

    def _extra_fields(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire format. Unset optional fields are omitted."""
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "required": self.required,
        }
        for key, value in self._extra_fields().items():
            if value is not None:
                data[key] = value
        return data

    def to_descriptor(self) -> Dict[str, Any]:
        """Shape sent to the smart-intent service."""
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "required": self.required,
        }


@dataclass
class StringParameter(Parameter):
    type: ClassVar[ParameterType] = ParameterType.STRING

    placeholder: Optional[str] = None
    default_value: Optional[str] = None

    def _extra_fields(self) -> Dict[str, Any]:
        return {"placeholder": self.placeholder, "defaultValue": self.default_value}


@dataclass
class NumberParameter(Parameter):
    type: ClassVar[ParameterType] = ParameterType.NUMBER

    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    default_value: Optional[float] = None

    def _extra_fields(self) -> Dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "step": self.step,
            "defaultValue": self.default_value,
        }


@dataclass
class DateParameter(Parameter):
    type: ClassVar[ParameterType] = ParameterType.DATE

    min: Optional[str] = None  # YYYY-MM-DD
    max: Optional[str] = None  # YYYY-MM-DD
    default_value: Optional[str] = None

    def _extra_fields(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "defaultValue": self.default_value}


OptionsSupplier = Callable[[], Awaitable[List[SelectOption]]]


@dataclass
class SelectParameter(Parameter):
    """
    Select parameter with static options and/or an async options supplier.

    The supplier belongs to the UI collaborator; the handler never calls it.
    """
    type: ClassVar[ParameterType] = ParameterType.SELECT

    options: List[SelectOption] = field(default_factory=list)
    get_options: Optional[OptionsSupplier] = None
    default_value: Optional[str] = None

    @property
    def has_dynamic_options(self) -> bool:
        return self.get_options is not None

    @property
    def option_values(self) -> List[str]:
        return [option.value for option in self.options]

    def _extra_fields(self) -> Dict[str, Any]:
        return {
            "options": [option.to_dict() for option in self.options],
            "hasDynamicOptions": self.has_dynamic_options or None,
            "defaultValue": self.default_value,
        }

    def to_descriptor(self) -> Dict[str, Any]:
        descriptor = super().to_descriptor()
        if self.options:
            descriptor["options"] = [option.to_dict() for option in self.options]
        return descriptor


@dataclass
class FileParameter(Parameter):
    """
    File parameter.

    Size, type and count limits are enforced by the UI collaborator
    before resubmission; the handler only checks the delivery shape.
    """
    type: ClassVar[ParameterType] = ParameterType.FILE

    accept: List[str] = field(default_factory=list)
    multiple: bool = False
    max_files: Optional[int] = None
    max_size_bytes: Optional[int] = None
    max_total_bytes: Optional[int] = None
    delivery: FileDelivery = FileDelivery.FILE

    def _extra_fields(self) -> Dict[str, Any]:
        return {
            "accept": list(self.accept) or None,
            "multiple": self.multiple,
            "maxFiles": self.max_files,
            "maxSizeBytes": self.max_size_bytes,
            "maxTotalBytes": self.max_total_bytes,
            "delivery": FileDelivery(self.delivery).value,
        }


PARAMETER_CLASSES: Dict[ParameterType, type] = {
    ParameterType.STRING: StringParameter,
    ParameterType.NUMBER: NumberParameter,
    ParameterType.DATE: DateParameter,
    ParameterType.SELECT: SelectParameter,
    ParameterType.FILE: FileParameter,
}


def parameter_from_dict(data: Dict[str, Any]) -> Parameter:
    """
    Build a typed parameter from a declaration dict.

    Accepts both camelCase (wire/YAML) and snake_case keys.
    Raises ValueError for an unknown type tag.
    """
    param_type = ParameterType(data.get("type", "string"))
    common = {
        "name": data["name"],
        "description": data.get("description", ""),
        "required": bool(data.get("required", False)),
    }
    default = data.get("defaultValue", data.get("default_value"))

    if param_type == ParameterType.STRING:
        return StringParameter(
            **common,
            placeholder=data.get("placeholder"),
            default_value=default,
        )
    if param_type == ParameterType.NUMBER:
        return NumberParameter(
            **common,
            min=data.get("min"),
            max=data.get("max"),
            step=data.get("step"),
            default_value=default,
        )
    if param_type == ParameterType.DATE:
        return DateParameter(
            **common,
            min=data.get("min"),
            max=data.get("max"),
            default_value=default,
        )
    if param_type == ParameterType.SELECT:
        options = []
        for option in data.get("options", []):
            if isinstance(option, SelectOption):
                options.append(option)
            elif isinstance(option, dict):
                options.append(SelectOption(label=str(option["label"]), value=str(option["value"])))
            else:
                options.append(SelectOption(label=str(option), value=str(option)))
        return SelectParameter(
            **common,
            options=options,
            get_options=data.get("getOptions", data.get("get_options")),
            default_value=default,
        )

    return FileParameter(
        **common,
        accept=list(data.get("accept", [])),
        multiple=bool(data.get("multiple", False)),
        max_files=data.get("maxFiles", data.get("max_files")),
        max_size_bytes=data.get("maxSizeBytes", data.get("max_size_bytes")),
        max_total_bytes=data.get("maxTotalBytes", data.get("max_total_bytes")),
        delivery=FileDelivery(data.get("delivery", "file")),
    )


@dataclass
class InteractiveOption:
    """A selectable choice of an ambiguous or confirm response."""
    label: str
    value: Optional[str] = None
    command_id: Optional[str] = None
    params: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"label": self.label}
        if self.value is not None:
            data["value"] = self.value
        if self.command_id is not None:
            data["commandId"] = self.command_id
        if self.params is not None:
            data["params"] = self.params
        return data


@dataclass
class InteractiveResponse:
    """
    The only contract exposed to callers.

    `fields` is set iff type is form; `options` is set iff type is
    ambiguous or confirm. A form may also carry `params`, the values
    already accepted, so the caller can merge its next answers into them.
    """
    message: str
    type: ResponseType
    options: Optional[List[InteractiveOption]] = None
    fields: Optional[List[Parameter]] = None
    command_id: Optional[str] = None
    params: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.type = ResponseType(self.type)

        if self.type == ResponseType.FORM:
            if self.fields is None:
                self.fields = []
        else:
            self.fields = None
            self.params = None

        if self.type in (ResponseType.AMBIGUOUS, ResponseType.CONFIRM):
            if self.options is None:
                self.options = []
        else:
            self.options = None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields or []]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InteractiveResponse":
        """
        Coerce a wire-shaped dict into a response.

        Raises ValueError when `type` is missing or unknown, or when
        `options`/`fields` are not lists of objects.
        """
        if "type" not in data:
            raise ValueError("Response dict has no 'type'")

        for key, allowed in (("options", InteractiveOption), ("fields", Parameter)):
            entries = data.get(key)
            if entries is None:
                continue
            if not isinstance(entries, list) or not all(isinstance(e, (dict, allowed)) for e in entries):
                raise ValueError(f"Response dict has malformed '{key}'")

        options = None
        if data.get("options") is not None:
            options = [
                o if isinstance(o, InteractiveOption) else InteractiveOption(
                    label=str(o.get("label", "")),
                    value=o.get("value"),
                    command_id=o.get("commandId", o.get("command_id")),
                    params=o.get("params"),
                )
                for o in data["options"]
            ]

        fields = None
        if data.get("fields") is not None:
            fields = [
                f if isinstance(f, Parameter) else parameter_from_dict(f)
                for f in data["fields"]
            ]

        return cls(
            message=str(data.get("message", "")),
            type=ResponseType(data["type"]),
            options=options,
            fields=fields,
            command_id=data.get("commandId", data.get("command_id")),
            params=data.get("params"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire format."""
        data: Dict[str, Any] = {
            "message": self.message,
            "type": self.type.value,
        }
        if self.options is not None:
            data["options"] = [option.to_dict() for option in self.options]
        if self.fields is not None:
            data["fields"] = [f.to_dict() for f in self.fields]
        if self.command_id is not None:
            data["commandId"] = self.command_id
        if self.params is not None:
            data["params"] = self.params
        return data


ActionResult = Union[str, InteractiveResponse, Dict[str, Any], None]
CommandAction = Callable[[Dict[str, Any]], Union[ActionResult, Awaitable[ActionResult]]]


@dataclass
class Command:
    """
    A named, user-invocable action with optional typed parameters.

    `id` defaults to the trigger phrase. Commands are never mutated after
    registration; replace them by remove + add.
    """
    command: str
    action: CommandAction
    id: Optional[str] = None
    description: str = ""
    keywords: List[str] = field(default_factory=list)
    critical: bool = False
    allow_ai_param_extraction: bool = True
    parameters: List[Parameter] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.id is None:
            self.id = self.command
        self.parameters = [
            p if isinstance(p, Parameter) else parameter_from_dict(p)
            for p in self.parameters
        ]

    def get_parameter(self, name: str) -> Optional[Parameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    @property
    def required_parameters(self) -> List[Parameter]:
        return [p for p in self.parameters if p.required]

    def to_descriptor(self) -> Dict[str, Any]:
        """CommandDescriptor sent to the smart-intent service."""
        return {
            "id": self.id,
            "command": self.command,
            "description": self.description,
            "keywords": list(self.keywords),
            "parameters": [p.to_descriptor() for p in self.parameters],
        }

    def __repr__(self) -> str:
        return f"Command(id={self.id}, command={self.command!r}, critical={self.critical})"
