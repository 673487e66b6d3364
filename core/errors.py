"""
Error Handling Module
---------------------
Typed errors for command registration and resolution.

Only registration errors are raised past the public API.
Everything reachable from user input becomes an error response.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, List, Optional
import logging
import traceback


class FoisitError(Exception):
    """Base class for all assistant errors."""


class RegistrationError(FoisitError):
    """A command could not be added or removed."""


class DuplicateCommandError(RegistrationError):
    """The trigger phrase or id is already registered."""

    def __init__(self, key: str, kind: str = "Command"):
        self.key = key
        super().__init__(f'{kind} "{key}" already exists.')


class UnknownCommandError(RegistrationError):
    """The trigger phrase is not registered."""

    def __init__(self, trigger: str):
        self.trigger = trigger
        super().__init__(f'Command "{trigger}" does not exist.')


class InvalidCommandError(RegistrationError):
    """The command definition is malformed."""


class CommandActionError(FoisitError):
    """
    Raised by a command action to report a business failure.

    The message is shown to the user as-is.
    """


class ErrorCategory(Enum):
    """Categories of errors for handling decisions."""
    RESOLUTION_ERROR = auto()    # No command matched
    ACTION_ERROR = auto()        # Action reported a business failure
    ACTION_CRASH = auto()        # Action raised an unexpected exception
    SYSTEM_ERROR = auto()        # Internal error


@dataclass
class ErrorRecord:
    """Structured error with metadata."""
    category: ErrorCategory
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        category: ErrorCategory,
        details: Optional[Dict] = None
    ) -> "ErrorRecord":
        """Create a record from an exception."""
        return cls(
            category=category,
            message=str(exception),
            details=details,
            stack_trace="".join(traceback.format_exception(
                type(exception), exception, exception.__traceback__
            )),
        )

    def __repr__(self) -> str:
        return f"ErrorRecord({self.category.name}: {self.message})"


class ErrorHandler:
    """
    Central error handler with logging and user messages.
    """

    USER_MESSAGES: Dict[ErrorCategory, str] = {
        ErrorCategory.RESOLUTION_ERROR: "Sorry, I didn't understand that.",
        ErrorCategory.ACTION_CRASH: "The command couldn't be completed. Please try again.",
        ErrorCategory.SYSTEM_ERROR: "Something went wrong internally. Please try again later.",
    }

    LOG_LEVELS: Dict[ErrorCategory, int] = {
        ErrorCategory.RESOLUTION_ERROR: logging.INFO,
        ErrorCategory.ACTION_ERROR: logging.INFO,
        ErrorCategory.ACTION_CRASH: logging.ERROR,
        ErrorCategory.SYSTEM_ERROR: logging.CRITICAL,
    }

    def __init__(self, logger: Optional[logging.Logger] = None, max_history: int = 100):
        self._logger = logger or logging.getLogger("foisit.errors")
        self._error_history: List[ErrorRecord] = []
        self._max_history = max_history

    def handle(self, error: ErrorRecord) -> str:
        """Record an error and return a user-friendly message."""
        self._log_error(error)

        self._error_history.append(error)
        if len(self._error_history) > self._max_history:
            self._error_history.pop(0)

        return self.get_user_message(error)

    def _log_error(self, error: ErrorRecord) -> None:
        level = self.LOG_LEVELS.get(error.category, logging.ERROR)

        self._logger.log(
            level,
            f"{error.category.name}: {error.message}",
            extra={"details": error.details}
        )

        if error.stack_trace and level >= logging.ERROR:
            self._logger.debug(f"Stack trace:\n{error.stack_trace}")

    def get_user_message(self, error: ErrorRecord) -> str:
        """User-facing text for an error. Action errors keep their own message."""
        if error.category == ErrorCategory.ACTION_ERROR:
            return error.message
        return self.USER_MESSAGES.get(error.category, "An error occurred.")

    @property
    def history(self) -> List[ErrorRecord]:
        return self._error_history.copy()

    def get_error_stats(self) -> Dict[str, int]:
        """Count recorded errors per category."""
        stats: Dict[str, int] = {}
        for error in self._error_history:
            key = error.category.name
            stats[key] = stats.get(key, 0) + 1
        return stats

    def clear_history(self) -> None:
        self._error_history.clear()
