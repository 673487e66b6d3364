# Core module - Error taxonomy and the dialog state machine
# The resolution engine lives in core.command_handler (imported explicitly
# because commands.* depends on core.errors)

from .state_machine import DialogStateMachine, DialogState, StateTransition
from .errors import (
    FoisitError, RegistrationError, DuplicateCommandError, UnknownCommandError,
    InvalidCommandError, CommandActionError,
    ErrorHandler, ErrorRecord, ErrorCategory,
)

__all__ = [
    "DialogStateMachine", "DialogState", "StateTransition",
    "FoisitError", "RegistrationError", "DuplicateCommandError", "UnknownCommandError",
    "InvalidCommandError", "CommandActionError",
    "ErrorHandler", "ErrorRecord", "ErrorCategory",
]
