"""
Validation errors raised by the calculation core.

Every error names the rejected field so the API layer can report it without
parsing messages. All of them are raised before any arithmetic runs.
"""

from __future__ import annotations


class ValidationError(ValueError):
    """
    Base class for rejected calculation input.

    Parameters
    ----------
    field
        Wire name of the offending field (e.g., "aperture", "newFocalLength").
    message
        Human-readable description.
    """

    kind = "ValidationError"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(field={self.field!r}, message={self.message!r})"


class InvalidSensor(ValidationError):
    """Sensor id is missing or not present in the registry."""

    kind = "InvalidSensor"


class InvalidAperture(ValidationError):
    """Aperture is not a finite number > 0."""

    kind = "InvalidAperture"


class InvalidFocalLength(ValidationError):
    """Original or new focal length is not a finite number > 0."""

    kind = "InvalidFocalLength"
