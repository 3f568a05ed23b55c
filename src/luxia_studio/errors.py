"""
Error taxonomy for LUXIA Studio.

Every failure of a generation attempt is surfaced as one of the
GenerationError subclasses below. ConfigurationError is raised
earlier, when a catalog or a registry is loaded.
"""

from __future__ import annotations

from dataclasses import dataclass

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


@dataclass
class GenerationError(Exception):
    """Base class for errors that end a generation attempt."""

    message: str
    kind: str = "generation_error"

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationError(GenerationError):
    """A required field is missing or a value is out of bounds."""

    kind: str = "validation_error"
    field_name: str | None = None


@dataclass
class ProviderError(GenerationError):
    """The generation capability rejected the request."""

    kind: str = "provider_error"


@dataclass
class UnknownError(GenerationError):
    """A failure that carried no usable message."""

    message: str = UNKNOWN_ERROR_MESSAGE
    kind: str = "unknown_error"


@dataclass
class ConfigurationError(Exception):
    """A service catalog or capability registry is inconsistent."""

    message: str
    service_name: str | None = None

    def __str__(self) -> str:
        return self.message


def to_generation_error(exc: BaseException) -> GenerationError:
    """Normalise an arbitrary exception raised by a capability."""
    if isinstance(exc, GenerationError):
        if not exc.message:
            return UnknownError()
        return exc
    message = str(exc).strip()
    if not message:
        return UnknownError()
    return ProviderError(message=message)
