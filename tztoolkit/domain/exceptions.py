"""
Domain-specific exception hierarchy for the timezone toolkit.
"""

from typing import Dict


class ToolkitError(Exception):
    """Base class for all application-level errors."""


class ValidationError(ToolkitError):
    """
    Raised when an input fails validation at a strict boundary.

    Carries the offending field so callers can report it back to the user.
    """

    kind = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        """Structured form used by the output layer."""
        return {"kind": self.kind, "field": self.field, "message": self.message}


class ConfigError(ToolkitError):
    """Raised when the configuration file cannot be loaded."""


class EphemerisError(ToolkitError):
    """Raised when a solar event does not occur for a date and location."""
